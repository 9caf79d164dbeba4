"""
flowimpact - Flow Impact from Feasible Bases
============================================

Finds every set of columns of a stoichiometry matrix that forms a
full-rank basis, and summarizes for each flow (column) how well the
bases that leave it out are conditioned.

Quick start:
    import flowimpact

    A = flowimpact.read_stoichiometry("stoich.txt")
    stats = flowimpact.find_feasible_sets(A)
    print(flowimpact.format_report(stats))

    # Or build the matrix directly
    A = flowimpact.StoichiometryMatrix([[1, 0, 1], [0, 1, 1]], known=[])
    stats = flowimpact.find_feasible_sets(A, verbose=True)
    stats.impact(2)

License: MIT
"""

__version__ = "0.1.0"

from flowimpact.columns import OrderedColumnSet
from flowimpact.matrix import StoichiometryMatrix, SquareMatrix, LUResult
from flowimpact.statistics import StatisticsAccumulator, combinations
from flowimpact.search import (
    ColumnSubsetTrie, CheckedSetList, Enumerator, find_feasible_sets,
)
from flowimpact.loader import read_stoichiometry, parse_stoichiometry
from flowimpact.report import format_report, format_matrix

__all__ = [
    "OrderedColumnSet", "StoichiometryMatrix", "SquareMatrix", "LUResult",
    "StatisticsAccumulator", "combinations",
    "ColumnSubsetTrie", "CheckedSetList", "Enumerator", "find_feasible_sets",
    "read_stoichiometry", "parse_stoichiometry",
    "format_report", "format_matrix",
]
