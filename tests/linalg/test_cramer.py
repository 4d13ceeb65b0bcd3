import math
import time
from decimal import Decimal

import pytest

from decimatrix import localcontext
from decimatrix.linalg import (
    CramerNotApplicableError,
    CramerResult,
    Matrix,
    NumericOverflowError,
    solve_cramer,
)


def test_unique():
    r = solve_cramer(Matrix.fromrows([[2, 1, 5], [1, 3, 10]]))
    assert r.status == "UNIQUE"
    assert r.count == 1
    assert r.determinant == 5
    assert [str(x) for x in r.solution] == ["1.00", "3.00"]


def test_unique_rounded():
    r = Matrix.fromrows([[3, 0, 1], [0, 3, 2]]).solve_cramer()
    assert r.solution == (Decimal("0.33"), Decimal("0.67"))

    with localcontext(quantum="0.0001"):
        r = Matrix.fromrows([[3, 0, 1], [0, 3, 2]]).solve_cramer()

    assert r.solution == (Decimal("0.3333"), Decimal("0.6667"))


def test_rounding_half_even():
    # 1/8 = 0.125 and 3/8 = 0.375
    r = solve_cramer(Matrix.fromrows([[8, 0, 1], [0, 8, 3]]))
    assert r.solution == (Decimal("0.12"), Decimal("0.38"))


def test_three_unknowns():
    system = Matrix.fromrows([[1, 1, 1, 6], [0, 2, 5, -4], [2, 5, -1, 27]])
    r = solve_cramer(system)
    assert r.solution == (Decimal(5), Decimal(3), Decimal(-2))


def test_infinite():
    r = solve_cramer(Matrix.fromrows([[1, 1, 2], [2, 2, 4]]))
    assert r.status == "INFINITE"
    assert r.count == math.inf
    assert r.solution is None
    assert r.determinant == 0


def test_no_solution():
    r = solve_cramer(Matrix.fromrows([[1, 1, 2], [1, 1, 5]]))
    assert r.status == "NO_SOLUTION"
    assert r.count == 0
    assert r.solution is None


def test_no_solution_detected_after_zero_delta():
    # the first delta determinant is zero, the second is not
    r = solve_cramer(Matrix.fromrows([[1, 0, 1], [1, 0, 2]]))
    assert r.status == "NO_SOLUTION"


def test_not_applicable():
    with pytest.raises(CramerNotApplicableError):
        solve_cramer(Matrix.fromrows([[1, 2], [3, 4]]))

    with pytest.raises(CramerNotApplicableError):
        solve_cramer(Matrix(2, 4))


def test_input_unchanged():
    system = Matrix.fromrows([[2, 1, 5], [1, 3, 10]])
    solve_cramer(system)
    assert system == Matrix.fromrows([[2, 1, 5], [1, 3, 10]])


def test_unrepresentable_solution():
    system = Matrix.fromrows([["1e-10", "1e20"]])

    with pytest.raises(NumericOverflowError):
        solve_cramer(system)

    with pytest.raises(NumericOverflowError):
        solve_cramer(Matrix.fromrows([[1, "1e27"]]))


def test_result_consistency():
    with pytest.raises(ValueError):
        CramerResult("UNIQUE", Decimal(1))

    with pytest.raises(ValueError):
        CramerResult("INFINITE", Decimal(0), (Decimal(0),))


def test_ten_unknowns():
    n = 10
    coefficients = Matrix(n, n)

    for i in range(n):
        coefficients[i, i] = i + 1

        for j in range(i + 1, n):
            coefficients[i, j] = (i + 2 * j) % 7 - 3

    unknowns = Matrix.fromrows([[k + 1] for k in range(n)])
    constants = coefficients @ unknowns
    system = Matrix.fromrows(
        [list(coefficients.row(i)) + [constants[i, 0]] for i in range(n)]
    )

    start = time.perf_counter()
    r = solve_cramer(system)
    assert time.perf_counter() - start < 10
    assert r.status == "UNIQUE"
    assert r.solution == tuple(Decimal(k + 1) for k in range(n))
