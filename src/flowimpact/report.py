"""
Text output: the matrix echo and the per-column results table.
"""


def format_matrix(matrix):
    """Echo of the input matrix with column headers and marked sets."""
    rows, cols = matrix.shape
    lines = ["", "", f"{rows}-{cols}"]
    lines.append("     " + "".join(f"({c:2d}) " for c in range(cols)))
    lines.append("")
    for r in range(rows):
        entries = "".join(f"{matrix[r][c]:4g} " for c in range(cols))
        lines.append(f"({r}) {entries}")
    if len(matrix.unknowable) > 0:
        lines.append(f"Unknowable: {matrix.unknowable.format()}")
    if len(matrix.known) > 0:
        lines.append(f"Known: {matrix.known.format()}")
    return "\n".join(lines)


def format_report(stats, show_repeats=False):
    """
    Results table for one search.

    Parameters
    ----------
    stats : StatisticsAccumulator
    show_repeats : bool
        Append the number of repeated candidates.

    Returns
    -------
    str
    """
    lines = [
        f"Number Feasible: {stats.number_feasible}",
        f"Normalization: {stats.normalization()}",
        "Feasible by column: ",
        "Node Feasible     Sum Cond.   Sum Inv Cond         Impact",
    ]
    for c in range(stats.num_columns):
        impact = stats.impact(c)
        impact_text = f"{impact:11.5f}" if impact is not None else "         NA"
        lines.append(
            f"{c:4d}    {int(stats.feasible_by_column[c]):5d}   "
            f"{stats.sum_condition[c]:11.5f}    "
            f"{stats.sum_inv_condition[c]:11.5f}    {impact_text}")
    if show_repeats:
        lines.append(f"Number of repeats: {stats.number_repeats}")
    return "\n".join(lines)
