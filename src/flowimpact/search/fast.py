"""
Search Fast: Numba JIT-compiled kernels for the search hot loops.

  - rref_inplace: reduced row echelon form with first-nonzero pivoting
  - admissible_columns: columns a search row may commit to

Both are called once per matrix / once per visited search row, so the
compiled versions keep the Python-level recursion cheap.

Install: pip install numba
"""

import numpy as np
from numba import njit

PIVOT_TOL = 1e-9


# ============================================================
# Row reduction
# ============================================================

@njit(cache=True)
def rref_inplace(u, tol):
    """Reduce ``u`` to reduced row echelon form in place.

    The pivot for each row is the first entry (top to bottom, no magnitude
    pivoting) in the current column whose absolute value exceeds ``tol``.
    When a column has no such entry at or below the current row, the
    search moves right and retries the same row.

    Parameters
    ----------
    u : 2D numpy array of float64
        Matrix to reduce. Modified in place.
    tol : float
        Near-zero threshold.

    Returns
    -------
    numpy array of int64
        Pivot column of each reduced row (strictly increasing).
    """
    rows, cols = u.shape
    pivots = np.empty(rows, dtype=np.int64)
    count = 0
    pivot_col = 0
    row = 0
    while row < rows and pivot_col < cols:
        inner = row
        while pivot_col < cols:
            if abs(u[inner, pivot_col]) > tol:
                break
            inner += 1
            if inner >= rows:
                inner = row
                pivot_col += 1

        if pivot_col < cols:
            if inner != row:
                for j in range(cols):
                    tmp = u[row, j]
                    u[row, j] = u[inner, j]
                    u[inner, j] = tmp

            pivot = u[row, pivot_col]
            for r in range(rows):
                if r == row:
                    continue
                if abs(u[r, pivot_col]) > tol:
                    scale = u[r, pivot_col] / pivot
                    for j in range(pivot_col, cols):
                        u[r, j] -= scale * u[row, j]

            inv = 1.0 / pivot
            for j in range(pivot_col, cols):
                u[row, j] *= inv

            pivots[count] = pivot_col
            count += 1

        pivot_col += 1
        row += 1

    return pivots[:count]


# ============================================================
# Candidate admission for one search row
# ============================================================

@njit(cache=True)
def admissible_columns(row_values, used, depth, known_mask, tol):
    """Columns that one search row may choose.

    Column ``c`` is admissible iff ``|row_values[c]| > tol``, it is not
    marked known, and it does not occur in ``used[:depth]``.

    Parameters
    ----------
    row_values : 1D numpy array of float64
        One row of the RREF matrix.
    used : 1D numpy array of int64
        Index buffer holding the columns committed by earlier rows.
    depth : int
        Number of committed entries in ``used``.
    known_mask : 1D numpy array of bool
        True for columns that may never be chosen.
    tol : float
        Near-zero threshold.

    Returns
    -------
    numpy array of int64
        Admissible columns in ascending order.
    """
    n = row_values.shape[0]
    out = np.empty(n, dtype=np.int64)
    count = 0
    for c in range(n):
        if abs(row_values[c]) <= tol:
            continue
        if known_mask[c]:
            continue
        taken = False
        for i in range(depth):
            if used[i] == c:
                taken = True
                break
        if taken:
            continue
        out[count] = c
        count += 1
    return out[:count]

