"""
Splits the synthetic portfolio dataset into insert batches.

Segment batches come first (segment order, then index order inside a
segment), followed by fill batches that pad the table with random holdings.
Both are produced lazily so a blocked submit also pauses row generation.
"""
import itertools
import math
from dataclasses import dataclass, asdict
from datetime import date
from typing import Dict, Iterator, List, Sequence

from src.benchmark.errors import ConfigError, CorpusError
from src.benchmark.random_fields import RandomFieldGenerator

PORTO_DATE = date(2023, 5, 31)

QUANTITY_MIN = 1_000_000
QUANTITY_MAX = 2_000_000

FILL_STOCK_CODE_MIN = 200
FILL_STOCK_CODE_MAX = 500
FILL_PRICE_MIN = 1000
FILL_PRICE_MAX = 5000

DEFAULT_USER_ID_OFFSET = 10


@dataclass(frozen=True)
class PortfolioSegment:

    stock_code: str
    start_index: int
    end_index: int
    last_price: float
    avg_price_min: float
    avg_price_max: float

    @property
    def size(self) -> int:
        return self.end_index - self.start_index


@dataclass
class SyntheticRow:

    user_id: int
    accno: str
    user_sid_complete: str
    porto_date: date
    porto_stock_code: str
    porto_stock_quantity: float
    porto_last_price: float
    porto_avg_price: float
    porto_amount: float
    has_credit: bool

    def as_params(self) -> Dict:
        return asdict(self)


@dataclass
class Batch:

    source: str
    index: int
    rows: List[SyntheticRow]

    def __len__(self):
        return len(self.rows)


def derive_user_id(accno: str, offset: int = DEFAULT_USER_ID_OFFSET) -> int:
    suffix = accno[offset:]
    try:
        return int(suffix)
    except ValueError:
        raise CorpusError(f"account number {accno!r} has no numeric user id after offset {offset}")


class BatchPartitioner:

    def __init__(self, identifiers: Sequence[str], batch_size: int,
                 generator: RandomFieldGenerator, user_id_offset: int = DEFAULT_USER_ID_OFFSET):
        if batch_size < 1:
            raise ConfigError(f"batch size must be at least 1, got {batch_size}")

        self.identifiers = identifiers
        self.batch_size = batch_size
        self.generator = generator
        self.user_id_offset = user_id_offset

    def batches(self, segments: Sequence[PortfolioSegment], fill_identifiers: Sequence[str],
                fill_amount: int) -> Iterator[Batch]:
        return itertools.chain(
            self.segment_batches(segments),
            self.fill_batches(fill_identifiers, fill_amount),
        )

    def planned_batch_count(self, segments: Sequence[PortfolioSegment], fill_amount: int) -> int:
        total = sum(math.ceil(max(s.size, 0) / self.batch_size) for s in segments)
        return total + math.ceil(max(fill_amount, 0) / self.batch_size)

    def segment_batches(self, segments: Sequence[PortfolioSegment]) -> Iterator[Batch]:
        self._validate_segments(segments)

        for segment in segments:
            batch_index = 0
            for curr_idx in range(segment.start_index, segment.end_index, self.batch_size):
                end_idx = min(curr_idx + self.batch_size, segment.end_index)

                rows = [self._segment_row(segment, accno) for accno in self.identifiers[curr_idx:end_idx]]
                yield Batch(source=segment.stock_code, index=batch_index, rows=rows)
                batch_index += 1

    def fill_batches(self, fill_identifiers: Sequence[str], amount: int) -> Iterator[Batch]:
        if amount <= 0:
            return
        if len(fill_identifiers) == 0:
            raise CorpusError(f"no identifiers left for {amount} fill rows")

        pool_size = len(fill_identifiers)
        num_batches = math.ceil(amount / self.batch_size)

        # fill batches are always full and each belongs to a single account
        for batch_index in range(num_batches):
            accno = fill_identifiers[batch_index % pool_size]
            rows = [self._fill_row(accno) for _ in range(self.batch_size)]

            yield Batch(source="fill", index=batch_index, rows=rows)

    def _validate_segments(self, segments: Sequence[PortfolioSegment]):
        for segment in segments:
            if segment.start_index < 0 or segment.end_index < segment.start_index:
                raise CorpusError(
                    f"segment {segment.stock_code} has invalid range "
                    f"[{segment.start_index}, {segment.end_index})")
            if segment.end_index > len(self.identifiers):
                raise CorpusError(
                    f"segment {segment.stock_code} ends at {segment.end_index} "
                    f"but only {len(self.identifiers)} account numbers are loaded")

    def _segment_row(self, segment: PortfolioSegment, accno: str) -> SyntheticRow:
        gen = self.generator
        return SyntheticRow(
            user_id=derive_user_id(accno, self.user_id_offset),
            accno=accno,
            user_sid_complete=accno,
            porto_date=PORTO_DATE,
            porto_stock_code=segment.stock_code,
            porto_stock_quantity=gen.gen_float(QUANTITY_MIN, QUANTITY_MAX),
            porto_last_price=segment.last_price,
            porto_avg_price=gen.gen_float(segment.avg_price_min, segment.avg_price_max),
            porto_amount=gen.gen_float(segment.avg_price_min, segment.avg_price_max),
            has_credit=gen.gen_2_percent_bool(),
        )

    def _fill_row(self, accno: str) -> SyntheticRow:
        gen = self.generator
        return SyntheticRow(
            user_id=derive_user_id(accno, self.user_id_offset),
            accno=accno,
            user_sid_complete=accno,
            porto_date=PORTO_DATE,
            porto_stock_code=f"OTH{gen.gen_int(FILL_STOCK_CODE_MIN, FILL_STOCK_CODE_MAX)}",
            porto_stock_quantity=gen.gen_float(QUANTITY_MIN, QUANTITY_MAX),
            porto_last_price=gen.gen_float(FILL_PRICE_MIN, FILL_PRICE_MAX),
            porto_avg_price=gen.gen_float(FILL_PRICE_MIN, FILL_PRICE_MAX),
            porto_amount=gen.gen_float(FILL_PRICE_MIN, FILL_PRICE_MAX),
            has_credit=gen.gen_2_percent_bool(),
        )
