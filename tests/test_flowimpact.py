"""Tests for flowimpact v0.1.0."""
import numpy as np
import pytest

import flowimpact
from flowimpact import (
    OrderedColumnSet, StoichiometryMatrix, SquareMatrix, StatisticsAccumulator,
    combinations, parse_stoichiometry, read_stoichiometry,
    format_report, format_matrix, find_feasible_sets,
)
from flowimpact.cli import main


def test_version():
    assert flowimpact.__version__ == "0.1.0"


# === OrderedColumnSet ===

def test_insert_keeps_ascending_order():
    np.random.seed(7)
    for _ in range(20):
        values = np.random.permutation(15)[:8]
        cols = OrderedColumnSet()
        for v in values:
            cols.insert(v)
        assert list(cols) == sorted(int(v) for v in values)


def test_insert_duplicate_is_noop():
    cols = OrderedColumnSet([3, 1])
    assert cols.insert(2)
    assert not cols.insert(3)
    assert cols.values == (1, 2, 3)
    assert len(cols) == 3


def test_contains_matches_membership():
    cols = OrderedColumnSet([9, 2, 5])
    for v in range(12):
        assert (v in cols) == (v in (2, 5, 9))
    assert not OrderedColumnSet().contains(0)


def test_all_values_appear_within():
    cols = OrderedColumnSet([1, 4])
    assert cols.all_values_appear_within([4, 0, 1], 3)
    assert not cols.all_values_appear_within([4, 0, 1], 2)
    assert not cols.all_values_appear_within([4, 0, 1], 0)
    # Empty set is covered by anything, including an empty prefix
    assert OrderedColumnSet().all_values_appear_within([], 0)
    assert OrderedColumnSet().all_values_appear_within([3], 1)


def test_equals_sequence():
    cols = OrderedColumnSet([2, 0, 7])
    assert cols.equals_sequence([0, 2, 7])
    assert not cols.equals_sequence([0, 2])
    assert not cols.equals_sequence([0, 3, 7])


def test_iteration_is_restartable():
    cols = OrderedColumnSet([3, 1, 2])
    assert list(cols) == list(cols) == [1, 2, 3]
    assert cols.format() == "2-3-4"


# === StoichiometryMatrix ===

def test_rref_basic():
    A = StoichiometryMatrix([[2.0, 4.0], [1.0, 3.0]])
    pivots = A.rref()
    assert pivots == [0, 1]
    assert np.allclose(A.values, np.eye(2))


def test_rref_swaps_zero_pivot_row():
    A = StoichiometryMatrix([[0.0, 1.0], [1.0, 0.0]])
    assert A.rref() == [0, 1]
    assert np.allclose(A.values, np.eye(2))


def test_rref_rank_deficient():
    A = StoichiometryMatrix([[1.0, 2.0], [2.0, 4.0]])
    assert A.rref() == [0]
    assert np.allclose(A.values, [[1.0, 2.0], [0.0, 0.0]])


def test_rref_idempotent():
    np.random.seed(42)
    for _ in range(10):
        A = StoichiometryMatrix(np.random.randn(4, 7))
        pivots = A.rref()
        once = A.values.copy()
        assert A.rref() == pivots
        assert np.allclose(A.values, once, atol=1e-9)


def test_rref_pivots_strictly_increasing():
    np.random.seed(3)
    A = StoichiometryMatrix(np.random.randint(-2, 3, size=(5, 9)))
    pivots = A.rref()
    assert all(a < b for a, b in zip(pivots, pivots[1:]))
    for row, col in enumerate(pivots):
        assert abs(A[row][col] - 1.0) < 1e-12


def test_copy_is_independent():
    A = StoichiometryMatrix([[1, 2, 3], [4, 5, 6]], known=[2], unknowable=[0])
    B = A.copy()
    B.rref()
    B.add_known([1])
    assert A[0][1] == 2.0
    assert A.known.values == (2,)
    assert B.unknowable.values == (0,)
    assert sorted(vars(B)) == ["known", "unknowable", "values"]


def test_extract_square_submatrix():
    A = StoichiometryMatrix([[1, 2, 3], [4, 5, 6]])
    M = A.extract_square_submatrix([2, 0])
    assert np.array_equal(M.values, [[3.0, 1.0], [6.0, 4.0]])
    with pytest.raises(ValueError):
        A.extract_square_submatrix([0, 1, 2])


def test_marked_columns():
    A = StoichiometryMatrix(np.zeros((2, 5)), known=[4, 1], unknowable=[3])
    assert A.column_in("known", 1)
    assert not A.column_in("known", 3)
    assert A.column_in("unknowable", 3)
    assert A.all_covered("unknowable", [3, 0], 2)
    assert not A.all_covered("unknowable", [0, 3], 1)
    assert StoichiometryMatrix(np.zeros((2, 2))).all_covered("unknowable", [], 0)
    assert A.known_mask().tolist() == [False, True, False, False, True]
    with pytest.raises(ValueError):
        A.column_in("measured", 1)
    with pytest.raises(ValueError):
        A.add_known([5])


def test_summary():
    A = StoichiometryMatrix([[1, 0, 1], [0, 1, 1]], known=[2])
    report = A.summary()
    assert report["shape"] == (2, 3)
    assert report["nnz"] == 4
    assert report["rank"] == 2
    assert report["known"] == [2]


# === SquareMatrix / LAPACK boundary ===

def test_lu_full_rank():
    M = SquareMatrix(np.eye(3))
    result = M.factorize_lu()
    assert result.full_rank
    assert result.info == 0
    assert M.condition_number() == pytest.approx(1.0)


def test_lu_singular_is_not_an_error():
    M = SquareMatrix([[1.0, 1.0], [1.0, 1.0]])
    result = M.factorize_lu()
    assert not result.full_rank
    assert result.info > 0
    assert M.reciprocal_condition_estimate() == 0.0
    assert M.condition_number() == 0.0


def test_norm1_uses_unfactorized_matrix():
    M = SquareMatrix([[1.0, -2.0], [3.0, 4.0]])
    M.factorize_lu()
    assert M.norm1() == 6.0
    assert np.array_equal(M.values, [[1.0, -2.0], [3.0, 4.0]])


def test_condition_number_estimate():
    np.random.seed(11)
    for _ in range(5):
        A = np.random.randn(4, 4)
        cond = SquareMatrix(A).condition_number()
        exact = np.linalg.cond(A, 1)
        # dgecon underestimates ||A^-1||, never overestimates
        assert cond <= exact * (1 + 1e-9)
        assert cond >= exact / 3


def test_square_matrix_rejects_rectangular():
    with pytest.raises(ValueError):
        SquareMatrix(np.zeros((2, 3)))


# === Statistics ===

def test_combinations_identities():
    for n in range(12):
        assert combinations(n, 0) == 1
        for k in range(n + 1):
            assert combinations(n, k) == combinations(n, n - k)
        assert combinations(n, n + 1) == 0
    assert combinations(5, 2) == 10
    assert combinations(40, 20) == 137846528820


def test_accumulator_excludes_candidate_columns():
    stats = StatisticsAccumulator(num_columns=4, num_rows=2)
    stats.record_feasible(OrderedColumnSet([0, 2]), 4.0)
    assert stats.feasible_by_column.tolist() == [0, 1, 0, 1]
    assert stats.sum_condition.tolist() == [0.0, 4.0, 0.0, 4.0]
    assert stats.sum_inv_condition.tolist() == [0.0, 0.25, 0.0, 0.25]
    assert stats.number_feasible == 1
    assert stats.impact(0) is None
    assert stats.impact(1) == pytest.approx(1.0)
    impacts = stats.impacts()
    assert np.isnan(impacts[0]) and impacts[3] == pytest.approx(1.0)


def test_accumulator_normalization():
    stats = StatisticsAccumulator(num_columns=6, num_rows=3)
    assert stats.normalization() == combinations(5, 3) == 10


# === Loader ===

STOICH = """\
 1  0  1  1
 0  1  1  1
known: 3
unknowable: 0, 2
"""


def test_parse_stoichiometry():
    A = parse_stoichiometry(STOICH.splitlines())
    assert A.shape == (2, 4)
    assert A.known.values == (3,)
    assert A.unknowable.values == (0, 2)
    assert A[1][2] == 1.0


def test_parse_blank_line_ends_matrix():
    A = parse_stoichiometry(["1 2", "3 4", "", "5 6", "unknowable: 1"])
    assert A.shape == (2, 2)
    assert A.unknowable.values == (1,)


def test_parse_comma_and_float_indices():
    A = parse_stoichiometry(["1,0,2", "known:0,  2.0"])
    assert A.shape == (1, 3)
    assert A.known.values == (0, 2)


def test_parse_errors():
    with pytest.raises(ValueError):
        parse_stoichiometry(["1 2 3", "1 2"])
    with pytest.raises(ValueError):
        parse_stoichiometry(["1 x 3"])
    with pytest.raises(ValueError):
        parse_stoichiometry(["known: 1"])
    with pytest.raises(ValueError):
        parse_stoichiometry(["1 2", "known: 7"])
    with pytest.raises(ValueError):
        parse_stoichiometry(["1 2", "known: inf"])
    with pytest.raises(ValueError):
        parse_stoichiometry(["1 2", "unknowable: nan"])


def test_read_stoichiometry(tmp_path):
    path = tmp_path / "stoich.txt"
    path.write_text(STOICH)
    A = read_stoichiometry(str(path))
    assert A.shape == (2, 4)
    assert A.unknowable.values == (0, 2)


# === Report / CLI ===

def test_format_report():
    A = StoichiometryMatrix([[1, 0, 1, 1], [0, 1, 1, 1]], unknowable=[2])
    stats = find_feasible_sets(A)
    text = format_report(stats, show_repeats=True)
    lines = text.splitlines()
    assert lines[0] == "Number Feasible: 2"
    assert lines[1] == "Normalization: 3"
    assert lines[3].startswith("Node Feasible")
    # Column 2 is in every feasible basis, so it has no impact
    assert lines[6].endswith("NA")
    assert lines[-1] == "Number of repeats: 1"


def test_format_matrix():
    A = StoichiometryMatrix([[1, 0], [0, -1]], known=[1])
    text = format_matrix(A)
    assert "2-2" in text
    assert "Known: 2" in text


def test_cli_usage(capsys):
    assert main([]) == 1
    out = capsys.readouterr().out
    assert "Error - Command line" in out
    assert "flowimpact stoich.txt" in out


def test_cli_missing_file(capsys, tmp_path):
    assert main([str(tmp_path / "nope.txt")]) == 1
    assert "Error" in capsys.readouterr().out


def test_cli_bad_index_reports_error(capsys, tmp_path):
    path = tmp_path / "stoich.txt"
    path.write_text("1 0 1\n0 1 1\nknown: inf\n")
    assert main([str(path)]) == 1
    assert "Error - line 3" in capsys.readouterr().out


def test_cli_rejects_unknown_option(tmp_path):
    path = tmp_path / "stoich.txt"
    path.write_text("1 0 1\n0 1 1\n")
    with pytest.raises(SystemExit) as exc:
        main([str(path), "--bogus"])
    assert exc.value.code == 2


def test_cli_rejects_extra_path(tmp_path):
    path = tmp_path / "stoich.txt"
    path.write_text("1 0 1\n0 1 1\n")
    with pytest.raises(SystemExit) as exc:
        main([str(path), "other.txt"])
    assert exc.value.code == 2


def test_cli_path_after_double_dash(capsys, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "-stoich.txt").write_text("1 0 1\n0 1 1\n")
    assert main(["--", "-stoich.txt"]) == 0
    assert "Number Feasible: 3" in capsys.readouterr().out


def test_module_import_does_not_run_cli():
    import importlib
    module = importlib.import_module("flowimpact.__main__")
    assert module.main is main


def test_cli_run(capsys, tmp_path):
    path = tmp_path / "stoich.txt"
    path.write_text("1 0 1\n0 1 1\n")
    assert main([str(path), "--repeats"]) == 0
    out = capsys.readouterr().out
    assert "Number Feasible: 3" in out
    assert "Normalization: 1" in out
    assert "Number of repeats: 0" in out


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
