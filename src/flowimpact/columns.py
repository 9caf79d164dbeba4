"""
Ordered column sets: one candidate basis as ascending column indices.

Columns are kept sorted by insertion sort as they are added, so two
candidates discovered in a different order compare (and hash into the
checked-set trie) identically.

Usage:
    from flowimpact.columns import OrderedColumnSet
    cols = OrderedColumnSet([4, 1, 3])
    cols.values        # (1, 3, 4)
    3 in cols          # True
"""


class OrderedColumnSet:
    """
    Ascending, duplicate-free sequence of column indices.

    Parameters
    ----------
    values : iterable of int, optional
        Initial column indices, in any order.

    Examples
    --------
    >>> cols = OrderedColumnSet([5, 0, 2])
    >>> list(cols)
    [0, 2, 5]
    >>> cols.all_values_appear_within([2, 5, 7, 0], 4)
    True
    """

    __slots__ = ("_columns",)

    def __init__(self, values=()):
        self._columns = []
        for value in values:
            self.insert(value)

    def insert(self, value):
        """
        Insert a column index keeping ascending order.

        Scans from the front and places ``value`` before the first larger
        entry. Inserting a value that is already present is a no-op.

        Returns
        -------
        bool
            True if the value was added, False if it was already present.
        """
        value = int(value)
        columns = self._columns
        for pos, current in enumerate(columns):
            if value == current:
                return False
            if value < current:
                columns.insert(pos, value)
                return True
        columns.append(value)
        return True

    def contains(self, value):
        """Linear membership test; stops once entries exceed ``value``."""
        for current in self._columns:
            if current == value:
                return True
            if current > value:
                return False
        return False

    def all_values_appear_within(self, sequence, prefix_length):
        """
        Check that every member occurs in ``sequence[:prefix_length]``.

        Parameters
        ----------
        sequence : sequence of int
            Column indices in any order (e.g. the enumerator's index buffer).
        prefix_length : int
            Number of leading entries of ``sequence`` to consider.

        Returns
        -------
        bool
            True when the set is empty or fully covered by the prefix.
        """
        limit = min(max(prefix_length, 0), len(sequence))
        prefix = sequence[:limit]
        for value in self._columns:
            found = False
            for other in prefix:
                if other == value:
                    found = True
                    break
            if not found:
                return False
        return True

    def equals_sequence(self, sequence):
        """
        Element-wise comparison against an ascending sequence.

        Only used by the slow verification checker, never on the hot path.
        """
        if len(sequence) != len(self._columns):
            return False
        for mine, other in zip(self._columns, sequence):
            if mine != other:
                return False
        return True

    def clear(self):
        """Remove every column."""
        self._columns.clear()

    @property
    def values(self):
        """Ascending column indices as a tuple."""
        return tuple(self._columns)

    def format(self):
        """1-based dash separated listing, e.g. ``"1-3-4"``."""
        return "-".join(str(value + 1) for value in self._columns)

    def __contains__(self, value):
        return self.contains(value)

    def __iter__(self):
        return iter(self._columns)

    def __len__(self):
        return len(self._columns)

    def __getitem__(self, which):
        return self._columns[which]

    def __eq__(self, other):
        if isinstance(other, OrderedColumnSet):
            return self._columns == other._columns
        return NotImplemented

    def __hash__(self):
        return hash(tuple(self._columns))

    def __repr__(self):
        return f"OrderedColumnSet({self._columns})"
