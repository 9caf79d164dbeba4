"""
Feasible bases for a small trophic network
==========================================

Runs the full search on examples/stoich.txt (or a file given on the
command line), prints the results table and saves a JSON summary.

Usage:
  pip install -e .
  python examples/run_stoichiometry.py [stoich.txt]
"""

import json
import os
import sys
import time

import numpy as np

from flowimpact import read_stoichiometry, find_feasible_sets, format_report

HERE = os.path.dirname(os.path.abspath(__file__))
RESULTS_DIR = os.path.join(HERE, "results")

path = sys.argv[1] if len(sys.argv) > 1 else os.path.join(HERE, "stoich.txt")
matrix = read_stoichiometry(path)
print(f"Matrix: {matrix}")
print(f"Summary: {matrix.summary()}")
sys.stdout.flush()

t0 = time.time()
stats = find_feasible_sets(matrix, verbose=True)
elapsed = time.time() - t0

print()
print(format_report(stats, show_repeats=True))

if stats.condition_numbers:
    conds = np.array(stats.condition_numbers)
    print(f"\nCondition numbers: min={conds.min():.3g}, "
          f"median={np.median(conds):.3g}, max={conds.max():.3g}")

os.makedirs(RESULTS_DIR, exist_ok=True)
summary = stats.to_dict()
summary["file"] = os.path.basename(path)
summary["time"] = elapsed
out = os.path.join(RESULTS_DIR, "stoich_summary.json")
with open(out, "w") as fh:
    json.dump(summary, fh, indent=2)
print(f"\nSaved: {out}")
