"""
Feasible-basis enumeration over the RREF of a stoichiometry matrix.

Algorithm:
  1. Reduce a copy of the matrix to RREF (the original is kept)
  2. Depth-first over rows: row r may commit to any column with a
     nonzero RREF entry that is not known and not already committed
  3. A complete path (one column per row) must contain every unknowable
     column, otherwise it is discarded untested
  4. The path is sorted and looked up in the checked-set trie; repeats stop
  5. New sets are LU-factorized from the ORIGINAL matrix; full-rank sets
     update the per-column statistics for every column they leave out

Only columns with a nonzero entry in some RREF row can take part in a
basis, which is what keeps the search far below C(num_columns, num_rows).
"""

import sys
import time

import numpy as np

from flowimpact.columns import OrderedColumnSet
from flowimpact.statistics import StatisticsAccumulator
from flowimpact.search import fast as _fast
from flowimpact.search.fast import PIVOT_TOL
from flowimpact.search.trie import ColumnSubsetTrie, CheckedSetList

CONSIDERED_TOL = 1e-4

_CHECKERS = {
    "trie": ColumnSubsetTrie,
    "list": CheckedSetList,
}


def columns_considered(rref, indices, current_row, current_column):
    """Heuristic: has this column combination been reached on an earlier path?

    When an earlier row committed a larger column than the current one and
    the 2x2 RREF minor linking the two columns is clearly nonzero, the same
    set was probably visited with the two columns swapped. Disabled by
    default; the trie already guarantees no set is tested twice.

    Parameters
    ----------
    rref : 2D numpy array
        RREF matrix entries.
    indices : 1D numpy array of int64
        Index buffer with ``indices[current_row] == current_column``.
    current_row : int
    current_column : int

    Returns
    -------
    bool
    """
    for prev in range(current_row):
        prev_col = indices[prev]
        if prev_col <= indices[current_row]:
            continue
        for row_check in range(len(indices)):
            if row_check == prev:
                continue
            product = (rref[prev, prev_col] * rref[prev, current_column]
                       * rref[row_check, prev_col] * rref[row_check, current_column])
            if abs(product) > CONSIDERED_TOL:
                return True
    return False


class Enumerator:
    """Depth-first search for full-rank column subsets.

    Parameters
    ----------
    rref : StoichiometryMatrix
        Row-reduced copy of the matrix. Drives candidate selection.
    original : StoichiometryMatrix
        Unreduced matrix. Supplies the known / unknowable sets and the
        entries of each candidate basis.
    stats : StatisticsAccumulator, optional
        Accumulator to update. A fresh one is created if omitted.
    checker : {"trie", "list"}
        Checked-set structure. "list" is the slow verification path.
    prune_considered : bool
        Skip columns flagged by ``columns_considered``.
    verbose : bool
        Print progress.
    """

    def __init__(self, rref, original, stats=None, checker="trie",
                 prune_considered=False, verbose=False):
        if rref.shape != original.shape:
            raise ValueError(
                f"RREF shape {rref.shape} does not match original {original.shape}")
        if checker not in _CHECKERS:
            raise ValueError(f"Unknown checker {checker!r}, expected one of {sorted(_CHECKERS)}")

        self.rref = rref
        self.original = original
        self.num_rows, self.num_columns = original.shape
        if self.num_rows == 0:
            raise ValueError("Matrix has no rows")

        if stats is None:
            stats = StatisticsAccumulator(self.num_columns, self.num_rows)
        self.stats = stats
        self.checked = _CHECKERS[checker](self.num_columns, self.num_rows)
        self.prune_considered = prune_considered
        self.verbose = verbose

        # One buffer shared by every recursion level
        self.indices = np.full(self.num_rows, -1, dtype=np.int64)
        self._known_mask = original.known_mask()

    def run(self):
        """Search every row/column combination.

        Returns
        -------
        StatisticsAccumulator
        """
        if self.verbose:
            print(f"  [Enumerator] {self.num_rows} x {self.num_columns}, "
                  f"known={list(self.original.known.values)}, "
                  f"unknowable={list(self.original.unknowable.values)}")
            sys.stdout.flush()

        t0 = time.time()
        self._search(0)
        elapsed = time.time() - t0

        if self.verbose:
            s = self.stats
            print(f"  [Enumerator] feasible={s.number_feasible:,}, "
                  f"rank_deficient={s.number_rank_deficient:,}, "
                  f"repeats={s.number_repeats:,}, "
                  f"discarded={s.number_discarded_unknowable:,} [{elapsed:.1f}s]")
            sys.stdout.flush()

        return self.stats

    def _search(self, row):
        buf = self.indices
        rref = self.rref.values
        choices = _fast.admissible_columns(
            rref[row], buf, row, self._known_mask, PIVOT_TOL)
        last = row + 1 >= self.num_rows

        for col in choices:
            buf[row] = col
            if self.prune_considered and columns_considered(rref, buf, row, col):
                continue

            if not last:
                self._search(row + 1)
            elif self.original.all_covered("unknowable", buf, row + 1):
                self.test_full_set(buf)
            else:
                self.stats.record_discarded()

    def test_full_set(self, indices):
        """
        Full-rank test of one completed candidate.

        Parameters
        ----------
        indices : sequence of int
            One column per matrix row, in discovery order.

        Returns
        -------
        bool
            False if the (sorted) set had been tested before, True otherwise.
        """
        candidate = OrderedColumnSet(int(c) for c in indices)
        if self.checked.check_and_mark(candidate):
            self.stats.record_repeat()
            return False

        basis = self.original.extract_square_submatrix(candidate.values)
        if not basis.factorize_lu().full_rank:
            self.stats.record_rank_deficient()
            return True

        self.stats.record_feasible(candidate, basis.condition_number())
        return True


def find_feasible_sets(matrix, checker="trie", prune_considered=False,
                       verbose=False):
    """Convenience function: reduce ``matrix`` and enumerate its bases.

    The matrix itself is left untouched; the search runs on a reduced copy.

    Parameters
    ----------
    matrix : StoichiometryMatrix
        Matrix with known / unknowable sets already populated.
    checker : {"trie", "list"}
        Checked-set structure.
    prune_considered : bool
        Enable the "already considered" pruning heuristic.
    verbose : bool
        Print progress.

    Returns
    -------
    StatisticsAccumulator
    """
    reduced = matrix.copy()
    pivots = reduced.rref()

    if verbose:
        print(f"  [flowimpact] RREF pivots: {pivots} (rank {len(pivots)})")
        sys.stdout.flush()

    enumerator = Enumerator(reduced, matrix, checker=checker,
                            prune_considered=prune_considered,
                            verbose=verbose)
    return enumerator.run()
