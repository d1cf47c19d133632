import sys

# 10 character prefix so the default user_id_offset of 10 yields the counter
PREFIX = "ACCNO00000"

count = int(sys.argv[1]) if len(sys.argv) > 1 else 500000
output_path = sys.argv[2] if len(sys.argv) > 2 else "accnos_500k.txt"

with open(output_path, "w") as outfile:
    for i in range(1, count + 1):
        outfile.write(f"{PREFIX}{i:06d}\n")

        if i % 100000 == 0:
            print(f"  Written {i} account numbers...")

print(f"Done. Wrote {count} account numbers to {output_path}")
