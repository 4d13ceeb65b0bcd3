import dataclasses
import decimal
import logging
import math
from decimal import Decimal
from typing import Literal

from decimatrix.context import getcontext
from decimatrix.linalg.matrix import (
    ZERO,
    CramerNotApplicableError,
    Matrix,
    NumericOverflowError,
    _arithmetic,
)

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class CramerResult:
    """Output of :func:`solve_cramer`.

    Attributes
    ----------
    status : Literal["NO_SOLUTION", "UNIQUE", "INFINITE"]
        Classification of the system.
    determinant : Decimal
        Determinant of the coefficient matrix.
    solution : tuple[Decimal, ...] | None
        Values of the unknowns, quantized to the context's quantum. ``None`` unless
        `status` is ``"UNIQUE"``.
    """

    status: Literal["NO_SOLUTION", "UNIQUE", "INFINITE"]
    determinant: Decimal
    solution: tuple[Decimal, ...] | None = None

    def __post_init__(self):
        if (self.status == "UNIQUE") != (self.solution is not None):
            raise ValueError("solution must be given exactly for a unique system")

    @property
    def count(self) -> int | float:
        """Number of solutions: ``0``, ``1`` or ``math.inf``."""
        match self.status:
            case "NO_SOLUTION":
                return 0

            case "UNIQUE":
                return 1

            case _:
                return math.inf


@_arithmetic
def solve_cramer(a: Matrix) -> CramerResult:
    """Solve a system of linear equations by Cramer's rule.

    Parameters
    ----------
    a : Matrix
        Augmented matrix of shape ``n x (n+1)``. The first `n` columns hold the
        coefficients, the last column holds the constants.

    Returns
    -------
    CramerResult

    Raises
    ------
    CramerNotApplicableError
        If `a` is not shaped ``n x (n+1)``.
    NumericOverflowError
        If a determinant or a quotient cannot be represented in the current context.

    Examples
    --------
    >>> from decimatrix.linalg import Matrix
    >>> r = solve_cramer(Matrix.fromrows([[2, 1, 5], [1, 3, 10]]))
    >>> r.status
    'UNIQUE'
    >>> [str(x) for x in r.solution]
    ['1.00', '3.00']
    >>> solve_cramer(Matrix.fromrows([[1, 1, 2], [1, 1, 5]])).count
    0
    """
    if a.rows != a.columns - 1:
        raise CramerNotApplicableError(
            f"expected an n x (n+1) matrix, got {a.rows}x{a.columns}; the coefficient "
            "block must be square"
        )

    ctx = getcontext()
    last = a.columns - 1
    coefficients = a.replace_column(last)
    main = coefficients.det()
    constants = a.column(last)
    solution = [ZERO] * a.rows

    for i in range(a.rows):
        delta = coefficients.replace_column(i, constants).det()

        if main == ZERO:
            if delta != ZERO:
                logger.debug("inconsistent system: delta %d is %s", i, delta)
                return CramerResult("NO_SOLUTION", main)

            continue

        try:
            solution[i] = (delta / main).quantize(ctx.quantum, rounding=ctx.rounding)
        except decimal.InvalidOperation as exc:
            raise NumericOverflowError(
                f"unknown {i} cannot be represented with quantum {ctx.quantum}"
            ) from exc

    if main == ZERO:
        logger.debug("dependent system of %d equations", a.rows)
        return CramerResult("INFINITE", main)

    return CramerResult("UNIQUE", main, tuple(solution))
