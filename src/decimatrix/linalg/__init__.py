"""
###############################################
Exact linear algebra (:mod:`decimatrix.linalg`)
###############################################

.. currentmodule:: decimatrix.linalg

This module provides dense matrices of decimal numbers.

Matrices
========

.. autosummary::
    :toctree: generated/

    Matrix

Operations
==========

.. autosummary::
    :toctree: generated/

    add
    det
    multiply
    scale
    solve_cramer
    subtract
    trace
    transpose
    CramerResult

Errors
======

.. autosummary::
    :toctree: generated/

    MatrixError
    CramerNotApplicableError
    DimensionMismatchError
    NotSquareError
    NumericOverflowError
    SizeMismatchError

"""

from .cramer import CramerResult, solve_cramer
from .matrix import (
    CramerNotApplicableError,
    DimensionMismatchError,
    Matrix,
    MatrixError,
    NotSquareError,
    NumericOverflowError,
    SizeMismatchError,
    add,
    det,
    multiply,
    scale,
    subtract,
    trace,
    transpose,
)

__all__ = [
    "CramerNotApplicableError",
    "CramerResult",
    "DimensionMismatchError",
    "Matrix",
    "MatrixError",
    "NotSquareError",
    "NumericOverflowError",
    "SizeMismatchError",
    "add",
    "det",
    "multiply",
    "scale",
    "solve_cramer",
    "subtract",
    "trace",
    "transpose",
]
