"""
##############################################
Arithmetic context (:mod:`decimatrix.context`)
##############################################

.. currentmodule:: decimatrix.context

This module controls how matrix arithmetic is carried out.

Every operation on :class:`~decimatrix.linalg.Matrix` runs inside a
:class:`decimal.Context` derived from the current :class:`Context`. The defaults
mimic a 96-bit fixed decimal: 28 significant digits and magnitudes below
``1e29``.

.. autosummary::
    :toctree: generated/

    Context
    getcontext
    localcontext
    setcontext

"""

import contextlib
import contextvars
import decimal
from typing import Self

_ROUNDINGS = frozenset(
    [
        decimal.ROUND_05UP,
        decimal.ROUND_CEILING,
        decimal.ROUND_DOWN,
        decimal.ROUND_FLOOR,
        decimal.ROUND_HALF_DOWN,
        decimal.ROUND_HALF_EVEN,
        decimal.ROUND_HALF_UP,
        decimal.ROUND_UP,
    ]
)


class Context:
    """Create a new arithmetic context.

    Parameters
    ----------
    prec : int, default=28
        Number of significant digits kept by every operation.
    emax : int, default=28
        Largest adjusted exponent. Results beyond it raise
        :class:`~decimatrix.linalg.NumericOverflowError`.
    emin : int, default=-28
        Smallest adjusted exponent.
    rounding : str, default=decimal.ROUND_HALF_EVEN
        Rounding rule, one of the :mod:`decimal` rounding constants.
    quantum : Decimal | str | int, default="0.01"
        Exponent to which Cramer's-rule solutions are quantized.
    """

    __slots__ = ("_prec", "_emax", "_emin", "_rounding", "_quantum")
    _prec: int
    _emax: int
    _emin: int
    _rounding: str
    _quantum: decimal.Decimal

    def __init__(
        self,
        prec: int = 28,
        emax: int = 28,
        emin: int = -28,
        rounding: str = decimal.ROUND_HALF_EVEN,
        quantum: decimal.Decimal | str | int = "0.01",
    ):
        if prec < 1:
            raise ValueError(f"prec must be positive, got {prec}")

        if emax < 0 or emin > 0:
            raise ValueError("emax must be non-negative and emin non-positive")

        if rounding not in _ROUNDINGS:
            raise ValueError(f"invalid rounding mode {rounding!r}")

        try:
            value = decimal.Decimal(quantum)
        except decimal.InvalidOperation:
            raise ValueError(f"cannot convert {quantum!r} to a quantum") from None

        if not value.is_finite():
            raise ValueError(f"quantum must be finite, got {quantum!r}")

        self._prec = prec
        self._emax = emax
        self._emin = emin
        self._rounding = rounding
        self._quantum = value

    @property
    def prec(self) -> int:
        return self._prec

    @property
    def emax(self) -> int:
        return self._emax

    @property
    def emin(self) -> int:
        return self._emin

    @property
    def rounding(self) -> str:
        return self._rounding

    @property
    def quantum(self) -> decimal.Decimal:
        return self._quantum

    def copy(self, **overrides) -> Self:
        """Return a copy of the context, replacing the given settings."""
        kwargs = {
            "prec": self._prec,
            "emax": self._emax,
            "emin": self._emin,
            "rounding": self._rounding,
            "quantum": self._quantum,
        }
        kwargs.update((k, v) for k, v in overrides.items() if v is not None)
        return self.__class__(**kwargs)

    def decimal_context(self) -> decimal.Context:
        """Return the :class:`decimal.Context` used for matrix arithmetic."""
        return decimal.Context(
            prec=self._prec,
            rounding=self._rounding,
            Emin=self._emin,
            Emax=self._emax,
            traps=[decimal.Overflow, decimal.DivisionByZero, decimal.InvalidOperation],
        )

    def __eq__(self, other) -> bool:
        if type(other) is not type(self):
            return NotImplemented

        return (
            self._prec == other._prec
            and self._emax == other._emax
            and self._emin == other._emin
            and self._rounding == other._rounding
            and self._quantum == other._quantum
        )

    def __hash__(self) -> int:
        return hash((self._prec, self._emax, self._emin, self._rounding, self._quantum))

    def __str__(self):
        return (
            f"{type(self).__name__}(prec={self._prec}, emax={self._emax}, "
            f"emin={self._emin}, rounding={self._rounding!r}, "
            f"quantum={str(self._quantum)!r})"
        )

    __repr__ = __str__

    def __copy__(self) -> Self:
        return self.copy()


_var: contextvars.ContextVar[Context] = contextvars.ContextVar("decimatrix")


def getcontext() -> Context:
    """Return the current context for the active thread."""
    if context := _var.get(None):
        return context

    context = Context()
    _var.set(context)
    return context


def setcontext(ctx: Context) -> None:
    """Set the current context for the active thread to `ctx`."""
    if not isinstance(ctx, Context):
        raise TypeError

    _var.set(ctx)


@contextlib.contextmanager
def localcontext(
    ctx: Context | None = None,
    *,
    prec: int | None = None,
    emax: int | None = None,
    emin: int | None = None,
    rounding: str | None = None,
    quantum: decimal.Decimal | str | int | None = None,
):
    """Return a context manager that will set the current context for the active thread
    to a copy of `ctx` on entry to the with-statement and restore the previous context
    when exiting the with-statement.

    Keyword arguments override the corresponding settings of the copy.

    Examples
    --------
    >>> from decimatrix import Matrix
    >>> a = Matrix.fromrows([[1, 0, 1], [0, 3, 1]])
    >>> with localcontext(quantum="0.0001"):
    ...     print(a.solve_cramer().solution)
    (Decimal('1.0000'), Decimal('0.3333'))
    """
    if ctx is None:
        ctx = getcontext()

    ctx = ctx.copy(prec=prec, emax=emax, emin=emin, rounding=rounding, quantum=quantum)
    token = _var.set(ctx)

    try:
        yield ctx
    finally:
        _var.reset(token)
