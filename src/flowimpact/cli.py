"""
Command line entry point.

Usage:
  flowimpact stoich.txt [-v] [--repeats]
  python -m flowimpact stoich.txt

Prints the matrix, searches every full-rank column subset, and prints the
per-column feasibility / conditioning table.
"""

import argparse
import sys

from flowimpact.loader import read_stoichiometry
from flowimpact.report import format_matrix, format_report
from flowimpact.search import find_feasible_sets


def usage(prog):
    return ("Error - Command line should include name of file that has the "
            f"stoichiometry matrix: \"{prog} stoich.txt.\"\n")


def create_parser():
    """Create the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="flowimpact",
        description="Flow importance search over a stoichiometry matrix",
    )
    parser.add_argument(
        "path",
        nargs="?",
        help="Stoichiometry matrix file",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Print search progress",
    )
    parser.add_argument(
        "--repeats",
        action="store_true",
        help="Also print the number of repeated candidate sets",
    )
    return parser


def main(argv=None):
    """Run the search for the file named on the command line.

    Parameters
    ----------
    argv : list of str, optional
        Arguments without the program name. Defaults to ``sys.argv[1:]``.

    Returns
    -------
    int
        Process exit code: 0 on success, 1 on usage or input errors.
        Unknown options and extra arguments exit with status 2.
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.path is None:
        print(usage(parser.prog))
        return 1

    try:
        matrix = read_stoichiometry(args.path)
    except (OSError, ValueError) as exc:
        print(f"Error - {exc}")
        return 1

    print(format_matrix(matrix))
    stats = find_feasible_sets(matrix, verbose=args.verbose)
    print(format_report(stats, show_repeats=args.repeats))
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
