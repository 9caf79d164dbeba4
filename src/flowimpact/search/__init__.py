"""
Search: pivot-guided enumeration of full-rank column subsets.

The search walks the RREF of the stoichiometry matrix row by row, choosing
one column with a nonzero entry per row, and tests each complete choice
for full rank exactly once:
  1. Numba-compiled row reduction and per-row candidate admission
  2. A sparse trie that remembers every tested (sorted) column set
  3. LU factorization and condition estimate of each new set

Example:
    from flowimpact.search import Enumerator, find_feasible_sets

    stats = find_feasible_sets(matrix, verbose=True)
    stats.number_feasible
"""

from flowimpact.search import fast
from flowimpact.search.trie import ColumnSubsetTrie, CheckedSetList
from flowimpact.search.enumerator import (
    Enumerator, columns_considered, find_feasible_sets,
)

__all__ = [
    "ColumnSubsetTrie", "CheckedSetList", "Enumerator",
    "columns_considered", "find_feasible_sets", "fast",
]
