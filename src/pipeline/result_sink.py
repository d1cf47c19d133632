import csv
import os
from typing import List, Sequence


class CsvResultSink:
    """Append-only CSV log, one row per parameter set"""

    def __init__(self, path: str, header: Sequence[str]):
        self.path = path
        self.header = list(header)

    def append(self, row: Sequence[str]):
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        write_header = not os.path.exists(self.path) or os.path.getsize(self.path) == 0

        with open(self.path, 'a', newline='') as f:
            writer = csv.writer(f)
            if write_header:
                writer.writerow(self.header)
            writer.writerow(list(row))

        print(f"Result appended to {self.path}")

    def read_rows(self) -> List[List[str]]:
        if not os.path.exists(self.path):
            return []
        with open(self.path, 'r', newline='') as f:
            return list(csv.reader(f))[1:]
