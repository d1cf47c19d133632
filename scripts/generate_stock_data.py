import csv
import sys

from src.benchmark import RandomFieldGenerator

STOCKS = ["GOTO", "BBCA", "BBRI", "ADRO", "ANTM", "SIDO", "BUMI", "BMRI", "TLKM", "BRIS"]

# account numbers [0, covered) are spread over the real stocks, the rest is left for fill rows
covered = int(sys.argv[1]) if len(sys.argv) > 1 else 400000
output_path = sys.argv[2] if len(sys.argv) > 2 else "stock_data.csv"

gen = RandomFieldGenerator(seed=42)

# uneven segment sizes, each stock keeps at least one account
weights = [gen.gen_int(1, 10) for _ in STOCKS]
total_weight = sum(weights)

with open(output_path, "w", newline="") as outfile:
    writer = csv.writer(outfile)

    start_idx = 0
    for i, (stock, weight) in enumerate(zip(STOCKS, weights)):
        if i == len(STOCKS) - 1:
            end_idx = covered
        else:
            end_idx = min(covered, start_idx + max(1, covered * weight // total_weight))

        writer.writerow([stock, end_idx - start_idx, start_idx, end_idx])
        print(f"  {stock}: [{start_idx}, {end_idx})")
        start_idx = end_idx

print(f"Done. Wrote {len(STOCKS)} segments covering {covered} account numbers to {output_path}")
