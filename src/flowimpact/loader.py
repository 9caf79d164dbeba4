"""
Stoichiometry file loader.

File format:

    1 0 1 -1
    0 1 1  0
    known: 3
    unknowable: 0, 2

The matrix block is whitespace (or comma) delimited numbers, one row per
line, ended by a blank line or the first line containing ':'. After it,
optional ``known:`` and ``unknowable:`` lines list 0-based column indices
separated by whitespace or commas. Any other trailing line is ignored.
"""

import re

from flowimpact.matrix import StoichiometryMatrix

_SPLIT = re.compile(r"[\s,]+")


def _tokens(text):
    return [tok for tok in _SPLIT.split(text.strip()) if tok]


def _parse_indices(text, line_no):
    cols = []
    for tok in _tokens(text):
        try:
            cols.append(int(float(tok)))
        except (ValueError, OverflowError):
            raise ValueError(f"line {line_no}: bad column index {tok!r}") from None
    return cols


def parse_stoichiometry(lines):
    """
    Build a StoichiometryMatrix from the lines of a stoichiometry file.

    Parameters
    ----------
    lines : iterable of str

    Returns
    -------
    StoichiometryMatrix
        Matrix with known / unknowable columns populated.

    Raises
    ------
    ValueError
        Empty matrix block, ragged rows, unparsable numbers, or column
        indices out of range.
    """
    rows = []
    known = []
    unknowable = []
    in_matrix = True

    for line_no, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n")
        if in_matrix:
            if not line.strip() or ":" in line:
                in_matrix = False
            else:
                try:
                    row = [float(tok) for tok in _tokens(line)]
                except ValueError as exc:
                    raise ValueError(f"line {line_no}: {exc}") from None
                if rows and len(row) != len(rows[0]):
                    raise ValueError(
                        f"line {line_no}: expected {len(rows[0])} entries, got {len(row)}")
                rows.append(row)
                continue

        if "unknowable:" in line:
            unknowable.extend(_parse_indices(line.split(":", 1)[1], line_no))
        elif "known:" in line:
            known.extend(_parse_indices(line.split(":", 1)[1], line_no))

    if not rows:
        raise ValueError("No matrix rows found")

    return StoichiometryMatrix(rows, known=known, unknowable=unknowable)


def read_stoichiometry(path):
    """Read a stoichiometry file from disk. See ``parse_stoichiometry``."""
    with open(path, "r", encoding="utf-8") as fh:
        return parse_stoichiometry(fh)
