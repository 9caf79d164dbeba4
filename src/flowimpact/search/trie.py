"""
Checked-set tracking: which candidate bases have already been tested.

ColumnSubsetTrie is a fixed-depth, fixed-width trie keyed by ascending
column-index sequences. Nodes are dicts created the first time a prefix
is walked, so memory follows the number of distinct prefixes actually
probed instead of width ** depth.

CheckedSetList is the slow, obviously-correct alternative: a flat list of
every recorded set, matched one by one. It exists to cross-check the trie.
"""

from flowimpact.columns import OrderedColumnSet


class ColumnSubsetTrie:
    """
    Sparse trie over ascending column-index sequences.

    Parameters
    ----------
    width : int
        Number of matrix columns (valid values are 0..width-1).
    depth : int
        Sequence length (number of matrix rows).

    Examples
    --------
    >>> trie = ColumnSubsetTrie(width=5, depth=2)
    >>> trie.check_and_mark([1, 3])
    False
    >>> trie.check_and_mark([1, 3])
    True
    """

    def __init__(self, width, depth):
        if width < 0 or depth < 1:
            raise ValueError(f"Invalid trie size width={width}, depth={depth}")
        self.width = width
        self.depth = depth
        self._root = {}
        self._nodes = 1
        self._marked = 0

    def check_and_mark(self, candidate):
        """
        Record a sequence and report whether it had been recorded before.

        Internal levels branch on the candidate values smallest first; a
        missing branch is allocated on the spot. The final level holds the
        visited flag, which is set unconditionally.

        Parameters
        ----------
        candidate : iterable of int
            Ascending column indices, exactly ``depth`` of them.

        Returns
        -------
        bool
            True if previously seen, False if newly recorded.
        """
        values = list(candidate)
        if len(values) != self.depth:
            raise ValueError(
                f"Expected {self.depth} columns, got {len(values)}")
        for v in values:
            if not 0 <= v < self.width:
                raise ValueError(f"Column {v} out of range for width {self.width}")

        node = self._root
        for v in values[:-1]:
            child = node.get(v)
            if child is None:
                child = {}
                node[v] = child
                self._nodes += 1
            node = child

        last = values[-1]
        seen = node.get(last, False)
        node[last] = True
        if not seen:
            self._marked += 1
        return seen

    @property
    def node_count(self):
        """Number of allocated nodes, root included."""
        return self._nodes

    def __len__(self):
        return self._marked

    def __repr__(self):
        return (f"ColumnSubsetTrie(width={self.width}, depth={self.depth}, "
                f"nodes={self._nodes:,}, sets={self._marked:,})")


class CheckedSetList:
    """
    Linear list of recorded column sets. Very slow; for verification only.

    Same ``check_and_mark`` contract as ColumnSubsetTrie.
    """

    def __init__(self, width, depth):
        self.width = width
        self.depth = depth
        self._sets = []

    def check_and_mark(self, candidate):
        values = list(candidate)
        for recorded in self._sets:
            if recorded.equals_sequence(values):
                return True
        self._sets.append(OrderedColumnSet(values))
        return False

    def __len__(self):
        return len(self._sets)

    def __repr__(self):
        return f"CheckedSetList(sets={len(self._sets):,})"
