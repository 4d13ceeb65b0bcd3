import logging

from .context import Context, getcontext, localcontext, setcontext
from .linalg import (
    CramerNotApplicableError,
    CramerResult,
    DimensionMismatchError,
    Matrix,
    MatrixError,
    NotSquareError,
    NumericOverflowError,
    SizeMismatchError,
    solve_cramer,
)

__version__ = "0.1.0"

__all__ = [
    "Context",
    "CramerNotApplicableError",
    "CramerResult",
    "DimensionMismatchError",
    "Matrix",
    "MatrixError",
    "NotSquareError",
    "NumericOverflowError",
    "SizeMismatchError",
    "getcontext",
    "localcontext",
    "setcontext",
    "solve_cramer",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())
