"""
Feasible-set statistics: per-column tallies and the derived impact.

For every full-rank candidate basis, each column NOT in the basis gets
its feasible count incremented and the basis condition number (and its
reciprocal) added to its sums. Impact combines the two sums:

    impact(c) = sum_cond(c) * sum_inv_cond(c) / (count(c) * number_feasible)
"""

import numpy as np


def combinations(n, k):
    """
    Binomial coefficient C(n, k) by the multiplicative identity.

    Uses C(n, k) = C(n, n - k) and multiplies over the smaller of the two.
    Exact integer arithmetic.

    Examples
    --------
    >>> combinations(5, 2)
    10
    >>> combinations(3, 4)
    0
    """
    if k < 0 or k > n:
        return 0
    k = min(k, n - k)
    result = 1
    for i in range(1, k + 1):
        result = result * (n - k + i) // i
    return result


class StatisticsAccumulator:
    """
    Running counters for one search.

    Parameters
    ----------
    num_columns : int
        Number of matrix columns (C).
    num_rows : int
        Number of matrix rows (R, the basis size).
    """

    def __init__(self, num_columns, num_rows):
        self.num_columns = num_columns
        self.num_rows = num_rows

        self.feasible_by_column = np.zeros(num_columns, dtype=np.int64)
        self.sum_condition = np.zeros(num_columns, dtype=np.float64)
        self.sum_inv_condition = np.zeros(num_columns, dtype=np.float64)
        self.condition_numbers = []

        self.number_feasible = 0
        self.number_repeats = 0
        self.number_rank_deficient = 0
        self.number_discarded_unknowable = 0

    def record_feasible(self, candidate, condition_number):
        """
        Add one full-rank basis.

        Parameters
        ----------
        candidate : iterable of int
            Columns of the basis; these are excluded from the update.
        condition_number : float
            Condition number of the basis submatrix.
        """
        excluded = np.ones(self.num_columns, dtype=np.bool_)
        excluded[list(candidate)] = False
        inverse = 1.0 / condition_number if condition_number > 0 else 0.0

        self.condition_numbers.append(condition_number)
        self.number_feasible += 1
        self.feasible_by_column[excluded] += 1
        self.sum_condition[excluded] += condition_number
        self.sum_inv_condition[excluded] += inverse

    def record_repeat(self):
        self.number_repeats += 1

    def record_rank_deficient(self):
        self.number_rank_deficient += 1

    def record_discarded(self):
        self.number_discarded_unknowable += 1

    @property
    def number_checked(self):
        """Distinct candidates that reached the full-rank test."""
        return self.number_feasible + self.number_rank_deficient

    def normalization(self):
        """C(num_columns - 1, num_rows)."""
        return combinations(self.num_columns - 1, self.num_rows)

    def impact(self, column):
        """Impact of one column, or None when it has no feasible basis."""
        count = int(self.feasible_by_column[column])
        if count == 0:
            return None
        return float(self.sum_condition[column] * self.sum_inv_condition[column]
                     / (count * self.number_feasible))

    def impacts(self):
        """Impact of every column; NaN where not applicable."""
        result = np.full(self.num_columns, np.nan)
        for c in range(self.num_columns):
            value = self.impact(c)
            if value is not None:
                result[c] = value
        return result

    def to_dict(self):
        return {
            "number_feasible": self.number_feasible,
            "number_repeats": self.number_repeats,
            "number_rank_deficient": self.number_rank_deficient,
            "number_discarded_unknowable": self.number_discarded_unknowable,
            "normalization": self.normalization(),
            "feasible_by_column": self.feasible_by_column.tolist(),
            "sum_condition": self.sum_condition.tolist(),
            "sum_inv_condition": self.sum_inv_condition.tolist(),
            "impact": [self.impact(c) for c in range(self.num_columns)],
        }

    def __repr__(self):
        return (f"StatisticsAccumulator(cols={self.num_columns}, "
                f"feasible={self.number_feasible:,}, "
                f"repeats={self.number_repeats:,})")
