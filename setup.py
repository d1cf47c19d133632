from setuptools import setup, find_namespace_packages

setup(
    name="db-benchmark",
    version="0.1.0",
    description="Concurrent insert/read latency benchmark for a portfolio table",
    python_requires=">=3.9",
    packages=find_namespace_packages(include=["src", "src.*"]),
    py_modules=["main"],
    install_requires=[
        "PyYAML",
        "PyMySQL",
        "SQLAlchemy>=2.0",
        "neo4j",
        "psutil",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["db-benchmark=main:main"],
    },
)
