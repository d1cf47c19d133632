import csv
import os
from typing import List, Optional

from src.benchmark.batch_partitioner import PortfolioSegment
from src.benchmark.errors import CorpusError
from src.benchmark.random_fields import RandomFieldGenerator

LAST_PRICE_RANGE = (3000, 5000)
AVG_PRICE_MIN_RANGE = (3000, 7000)
AVG_PRICE_MAX_RANGE = (1000, 3000)


class CorpusLoader:

    def __init__(self, generator: Optional[RandomFieldGenerator] = None):
        self.generator = generator or RandomFieldGenerator()

    def load_identifiers(self, path: str) -> List[str]:
        if not os.path.exists(path):
            raise CorpusError(f"account number file not found: {path}")

        try:
            with open(path, 'r') as f:
                identifiers = [line.strip() for line in f]
        except (OSError, UnicodeDecodeError) as e:
            raise CorpusError(f"could not read account numbers from {path}: {e}") from e

        # trailing blank lines only, an empty line in the middle would shift segment indexes
        while identifiers and identifiers[-1] == "":
            identifiers.pop()
        if "" in identifiers:
            raise CorpusError(f"{path} has an empty account number at line {identifiers.index('') + 1}")

        print(f"Loaded {len(identifiers)} account numbers from {path}")
        return identifiers

    def load_portfolio_segments(self, path: str) -> List[PortfolioSegment]:
        """
        Read ``stock_code,<unused>,start_index,end_index`` rows.

        Prices are not part of the file: every segment gets a random last
        price and average price range.
        """
        if not os.path.exists(path):
            raise CorpusError(f"stock data file not found: {path}")

        try:
            with open(path, 'r', newline='') as f:
                records = list(csv.reader(f))
        except (OSError, UnicodeDecodeError, csv.Error) as e:
            raise CorpusError(f"could not read stock data from {path}: {e}") from e

        if records and len(records[0]) >= 4 and not records[0][2].strip().lstrip("-").isdigit():
            records = records[1:]

        gen = self.generator
        segments = []
        for line_no, rec in enumerate(records, start=1):
            if not rec:
                continue
            if len(rec) < 4:
                raise CorpusError(f"{path}:{line_no}: expected at least 4 columns, got {len(rec)}")

            try:
                start_idx = int(rec[2])
                end_idx = int(rec[3])
            except ValueError:
                raise CorpusError(f"{path}:{line_no}: start/end index must be integers, got {rec[2]!r}, {rec[3]!r}")

            segments.append(PortfolioSegment(
                stock_code=rec[0].strip(),
                start_index=start_idx,
                end_index=end_idx,
                last_price=gen.gen_float(*LAST_PRICE_RANGE),
                avg_price_min=gen.gen_float(*AVG_PRICE_MIN_RANGE),
                avg_price_max=gen.gen_float(*AVG_PRICE_MAX_RANGE),
            ))

        print(f"Loaded {len(segments)} portfolio segments from {path}")
        return segments
