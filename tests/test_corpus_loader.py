import pytest

from src.benchmark.errors import CorpusError
from src.benchmark.random_fields import RandomFieldGenerator
from src.corpus import CorpusLoader


@pytest.fixture
def loader():
    return CorpusLoader(RandomFieldGenerator(3))


def test_load_identifiers(tmp_path, loader):
    path = tmp_path / "accnos.txt"
    path.write_text("ACC0000000001\nACC0000000002\nACC0000000003\n\n")

    assert loader.load_identifiers(str(path)) == ["ACC0000000001", "ACC0000000002", "ACC0000000003"]


def test_identifier_gap_is_rejected(tmp_path, loader):
    path = tmp_path / "accnos.txt"
    path.write_text("ACC0000000001\n\nACC0000000003\n")

    with pytest.raises(CorpusError):
        loader.load_identifiers(str(path))


def test_missing_identifier_file(tmp_path, loader):
    with pytest.raises(CorpusError):
        loader.load_identifiers(str(tmp_path / "nope.txt"))


def test_load_portfolio_segments(tmp_path, loader):
    path = tmp_path / "stock_data.csv"
    path.write_text("GOTO,100,0,100\nBBCA,50,100,150\n")

    segments = loader.load_portfolio_segments(str(path))

    assert [(s.stock_code, s.start_index, s.end_index) for s in segments] == [
        ("GOTO", 0, 100),
        ("BBCA", 100, 150),
    ]
    for s in segments:
        assert 3000 <= s.last_price < 5000
        assert 3000 <= s.avg_price_min < 7000
        assert 1000 <= s.avg_price_max < 3000
        assert s.size == s.end_index - s.start_index


def test_header_row_is_skipped(tmp_path, loader):
    path = tmp_path / "stock_data.csv"
    path.write_text("stock_code,count,start_idx,end_idx\nTLKM,10,0,10\n")

    segments = loader.load_portfolio_segments(str(path))

    assert [s.stock_code for s in segments] == ["TLKM"]


@pytest.mark.parametrize("content", ["GOTO,1,0\n", "GOTO,1,zero,10\n"])
def test_malformed_stock_rows(tmp_path, loader, content):
    path = tmp_path / "stock_data.csv"
    path.write_text("BBRI,10,0,10\n" + content)

    with pytest.raises(CorpusError):
        loader.load_portfolio_segments(str(path))


def test_missing_stock_file(tmp_path, loader):
    with pytest.raises(CorpusError):
        loader.load_portfolio_segments(str(tmp_path / "missing.csv"))
