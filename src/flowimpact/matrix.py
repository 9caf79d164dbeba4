"""
Stoichiometry matrix: dense storage, row reduction, and the LAPACK boundary.

StoichiometryMatrix holds the R x C matrix together with the two marked
column sets read from the input file:
  - known: flows already measured, never part of a candidate basis
  - unknowable: flows that cannot be measured, required in every basis

SquareMatrix is an R x R candidate basis extracted from the original
matrix. Its LU factorization, 1-norm and reciprocal condition estimate
come straight from LAPACK (dgetrf / dgecon) via scipy.

Usage:
    from flowimpact.matrix import StoichiometryMatrix
    A = StoichiometryMatrix([[1, 0, 1], [0, 1, 1]])
    R = A.copy()
    R.rref()
    basis = A.extract_square_submatrix([0, 2])
    basis.factorize_lu().full_rank    # True
    basis.condition_number()
"""

from dataclasses import dataclass

import numpy as np
from scipy.linalg import lapack

from flowimpact.columns import OrderedColumnSet
from flowimpact.search import fast as _fast
from flowimpact.search.fast import PIVOT_TOL

_MARKED = ("known", "unknowable")


@dataclass
class LUResult:
    """Outcome of an LU factorization.

    Fields
    ------
    info : int
        LAPACK status. 0 = success, k > 0 = U[k-1, k-1] is exactly zero.
    lu : numpy.ndarray
        Combined L and U factors.
    piv : numpy.ndarray
        Row pivot indices (0-based).
    """
    info: int
    lu: np.ndarray
    piv: np.ndarray

    @property
    def full_rank(self):
        return self.info == 0


class StoichiometryMatrix:
    """
    Dense R x C matrix with known / unknowable column sets.

    Parameters
    ----------
    values : array-like, shape (R, C)
        Matrix entries.
    known : iterable of int, optional
        Columns excluded from every candidate.
    unknowable : iterable of int, optional
        Columns that every admitted candidate must contain.
    """

    def __init__(self, values, known=(), unknowable=()):
        arr = np.array(values, dtype=np.float64)
        if arr.ndim != 2:
            raise ValueError(f"Expected a 2D matrix, got {arr.ndim} dimensions")
        self.values = np.ascontiguousarray(arr)
        self.known = OrderedColumnSet()
        self.unknowable = OrderedColumnSet()
        self.add_known(known)
        self.add_unknowable(unknowable)

    @property
    def num_rows(self):
        return self.values.shape[0]

    @property
    def num_columns(self):
        return self.values.shape[1]

    @property
    def shape(self):
        return self.values.shape

    def __getitem__(self, which):
        return self.values[which]

    # ------------------------------------------------------------
    # Marked columns
    # ------------------------------------------------------------

    def _check_columns(self, columns):
        checked = []
        for col in columns:
            c = int(col)
            if not 0 <= c < self.num_columns:
                raise ValueError(
                    f"Column {c} out of range for {self.num_columns} columns")
            checked.append(c)
        return checked

    def add_known(self, columns):
        """Mark columns as known (never chosen for a basis)."""
        for c in self._check_columns(columns):
            self.known.insert(c)

    def add_unknowable(self, columns):
        """Mark columns as unknowable (required in every basis)."""
        for c in self._check_columns(columns):
            self.unknowable.insert(c)

    def _marked(self, which):
        if which not in _MARKED:
            raise ValueError(f"Unknown column set {which!r}, expected one of {_MARKED}")
        return self.known if which == "known" else self.unknowable

    def column_in(self, which, column):
        """
        Membership query against one of the marked sets.

        Parameters
        ----------
        which : {"known", "unknowable"}
        column : int

        Returns
        -------
        bool
        """
        return self._marked(which).contains(column)

    def all_covered(self, which, indices, depth):
        """
        Check that every column of a marked set occurs in ``indices[:depth]``.

        An empty marked set is covered by any prefix.
        """
        marked = self._marked(which)
        if len(marked) == 0:
            return True
        return marked.all_values_appear_within(indices, depth)

    def known_mask(self):
        """Boolean mask over columns, True where the column is known."""
        mask = np.zeros(self.num_columns, dtype=np.bool_)
        for c in self.known:
            mask[c] = True
        return mask

    # ------------------------------------------------------------
    # Row reduction and extraction
    # ------------------------------------------------------------

    def rref(self):
        """
        Reduce the matrix to reduced row echelon form in place.

        Destroys the original entries; call on a ``copy()`` when the
        original is still needed.

        Returns
        -------
        list of int
            Pivot column of each nonzero row, strictly increasing.
        """
        pivots = _fast.rref_inplace(self.values, PIVOT_TOL)
        return [int(p) for p in pivots]

    def copy(self):
        """Deep copy, including the marked column sets."""
        other = StoichiometryMatrix(self.values.copy())
        other.known = OrderedColumnSet(self.known)
        other.unknowable = OrderedColumnSet(self.unknowable)
        return other

    def extract_square_submatrix(self, indices):
        """
        Build the R x R matrix ``M[row][k] = self[row][indices[k]]``.

        Parameters
        ----------
        indices : sequence of int, length R
            Column indices of the candidate basis.

        Returns
        -------
        SquareMatrix
        """
        cols = np.asarray(indices, dtype=np.int64)
        if cols.shape != (self.num_rows,):
            raise ValueError(
                f"Need {self.num_rows} column indices, got {len(indices)}")
        return SquareMatrix(self.values[:, cols])

    def rank(self):
        """Rank as the number of RREF pivots (on a scratch copy)."""
        scratch = self.values.copy()
        return int(_fast.rref_inplace(scratch, PIVOT_TOL).shape[0])

    def summary(self):
        """
        Structure report for the matrix.

        Returns
        -------
        dict
            Shape, density, rank and marked column sets.
        """
        m, n = self.shape
        total = m * n
        nnz = int(np.count_nonzero(np.abs(self.values) > PIVOT_TOL))
        return {
            "shape": (m, n),
            "nnz": nnz,
            "density": round(nnz / total, 6) if total > 0 else 0,
            "rank": self.rank(),
            "known": list(self.known.values),
            "unknowable": list(self.unknowable.values),
        }

    def __repr__(self):
        return (f"StoichiometryMatrix(rows={self.num_rows}, "
                f"cols={self.num_columns}, known={len(self.known)}, "
                f"unknowable={len(self.unknowable)})")


class SquareMatrix:
    """
    Square candidate basis with LAPACK factorization and conditioning.

    The entries passed in are never modified; the LU factors are kept
    separately so ``norm1()`` always sees the unfactorized matrix.

    Parameters
    ----------
    values : array-like, shape (n, n)
    """

    def __init__(self, values):
        arr = np.array(values, dtype=np.float64)
        if arr.ndim != 2 or arr.shape[0] != arr.shape[1]:
            raise ValueError(f"Expected a square matrix, got shape {arr.shape}")
        self.values = arr
        self._lu = None

    @property
    def size(self):
        return self.values.shape[0]

    def factorize_lu(self):
        """
        LU factorization with partial pivoting (LAPACK dgetrf).

        A zero pivot is the routine rank-deficient outcome and is reported
        through ``LUResult.info``, not raised.

        Returns
        -------
        LUResult
        """
        lu, piv, info = lapack.dgetrf(self.values, overwrite_a=False)
        if info < 0:
            raise ValueError(f"dgetrf: illegal value in argument {-info}")
        self._lu = LUResult(info=int(info), lu=lu, piv=piv)
        return self._lu

    def norm1(self):
        """Matrix 1-norm: largest absolute column sum (LAPACK dlange '1')."""
        if self.size == 0:
            return 0.0
        return float(np.abs(self.values).sum(axis=0).max())

    def reciprocal_condition_estimate(self):
        """
        Estimate of ``1 / ||A^-1||_1`` from the LU factors (LAPACK dgecon).

        dgecon is called with ``anorm = 1`` so the estimate carries only
        the inverse norm. Factorizes first if needed.

        Returns
        -------
        float
            The estimate, or 0.0 when the matrix is rank deficient.
        """
        if self._lu is None:
            self.factorize_lu()
        if not self._lu.full_rank:
            return 0.0
        rcond, info = lapack.dgecon(self._lu.lu, 1.0, norm="1")
        if info != 0:
            return 0.0
        return float(rcond)

    def condition_number(self):
        """1-norm condition number ``norm1 / rcond``; 0.0 when singular."""
        rcond = self.reciprocal_condition_estimate()
        if rcond == 0.0:
            return 0.0
        return self.norm1() / rcond

    def __repr__(self):
        return f"SquareMatrix(n={self.size})"
