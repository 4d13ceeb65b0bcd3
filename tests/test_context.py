import decimal
from decimal import Decimal

import pytest

from decimatrix import Matrix, NumericOverflowError
from decimatrix.context import Context, getcontext, localcontext, setcontext


def test_defaults():
    ctx = Context()
    assert ctx.prec == 28
    assert ctx.emax == 28
    assert ctx.emin == -28
    assert ctx.rounding == decimal.ROUND_HALF_EVEN
    assert ctx.quantum == Decimal("0.01")


def test_invalid():
    with pytest.raises(ValueError):
        Context(prec=0)

    with pytest.raises(ValueError):
        Context(emax=-1)

    with pytest.raises(ValueError):
        Context(quantum="abc")

    with pytest.raises(ValueError):
        Context(quantum="NaN")

    with pytest.raises(ValueError):
        Context(quantum="-Infinity")

    with pytest.raises(ValueError):
        Context(rounding="ROUND_SIDEWAYS")

    with pytest.raises(ValueError):
        with localcontext(quantum="abc"):
            pass

    assert Context(rounding=decimal.ROUND_UP, quantum=1).quantum == 1


def test_decimal_context_traps_overflow():
    ctx = Context(emax=5).decimal_context()
    assert ctx.traps[decimal.Overflow]

    with pytest.raises(decimal.Overflow):
        ctx.multiply(Decimal(1000), Decimal(1000))


def test_copy():
    ctx = Context(prec=10)
    other = ctx.copy(quantum="0.1")
    assert other.prec == 10
    assert other.quantum == Decimal("0.1")
    assert ctx.quantum == Decimal("0.01")
    assert ctx == Context(prec=10)


def test_localcontext():
    outer = getcontext()

    with localcontext(prec=5) as ctx:
        assert getcontext() is ctx
        assert ctx.prec == 5
        a = Matrix.fromrows([["1.23456789"]])
        assert a[0, 0] == Decimal("1.2346")

    assert getcontext() is outer


def test_localcontext_overflow():
    a = Matrix.fromrows([[1000]])

    with localcontext(emax=5):
        with pytest.raises(NumericOverflowError):
            a @ a

    assert (a @ a)[0, 0] == 1000000


def test_setcontext():
    outer = getcontext()

    try:
        setcontext(Context(quantum=1))
        r = Matrix.fromrows([[3, 2]]).solve_cramer()
        assert r.solution == (Decimal(1),)
    finally:
        setcontext(outer)

    with pytest.raises(TypeError):
        setcontext(decimal.Context())  # type: ignore
