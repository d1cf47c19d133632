import argparse
import sys

from src.benchmark import BenchmarkError
from src.pipeline import BenchmarkController, load_config


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Insert/read latency benchmark for the portfolio table")
    parser.add_argument("--config", default="config.yaml", help="path to the YAML config")
    parser.add_argument("--mode", choices=["seed", "read"], help="overrides benchmark.mode")
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
        if args.mode:
            config['benchmark'] = dict(config.get('benchmark') or {}, mode=args.mode)

        controller = BenchmarkController(config)
        controller.run_benchmark()
    except BenchmarkError as e:
        print(f"fatal: {e}", file=sys.stderr)
        return 1

    print("\nBenchmark completed successfully.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
