"""
#######################################
Input and output (:mod:`decimatrix.io`)
#######################################

.. currentmodule:: decimatrix.io

This module converts matrices from and to plain text and generates random matrices.

Text format
===========

One row per line, entries separated by whitespace::

    2 1 5
    1 3 10

.. autosummary::
    :toctree: generated/

    format_matrix
    format_result
    parse_matrix
    parse_row
    read_matrix
    MatrixParseError

Random matrices
===============

.. autosummary::
    :toctree: generated/

    RandomConfig
    random_matrix

"""

import dataclasses
import decimal
import logging
import os
from collections.abc import Sequence
from decimal import Decimal
from typing import Final

import numpy as np

from decimatrix.linalg import CramerResult, Matrix, MatrixError

logger = logging.getLogger(__name__)

MAX_ROWS: Final = 10
MAX_COLUMNS: Final = 10


class MatrixParseError(MatrixError):
    """Raised when text cannot be read as a matrix."""


def parse_row(text: str, *, decimal_comma: bool = False) -> list[Decimal]:
    """Parse a whitespace-separated row of numbers.

    Parameters
    ----------
    text : str
    decimal_comma : bool, default=False
        Accept ``,`` as the separator between integer and fractional parts.

    Raises
    ------
    MatrixParseError
        If a token is not a finite number.
    """
    result = []

    for token in text.split():
        literal = token.replace(",", ".") if decimal_comma else token

        try:
            value = Decimal(literal)
        except decimal.InvalidOperation:
            raise MatrixParseError(f"cannot convert {token!r} to a number") from None

        if not value.is_finite():
            raise MatrixParseError(f"cannot convert {token!r} to a number")

        result.append(value)

    return result


def parse_matrix(
    text: str,
    *,
    max_rows: int = MAX_ROWS,
    max_columns: int = MAX_COLUMNS,
    decimal_comma: bool = False,
) -> Matrix:
    """Parse a matrix written one row per line.

    Blank lines are ignored.

    Raises
    ------
    MatrixParseError
        If the text is empty, the rows differ in length, or the matrix is larger than
        `max_rows` x `max_columns`.

    Examples
    --------
    >>> a = parse_matrix("1 2\\n3 4\\n")
    >>> a.shape
    (2, 2)
    >>> parse_matrix("1,5", decimal_comma=True)[0, 0]
    Decimal('1.5')
    """
    lines = [line for line in text.splitlines() if line.strip()]

    if not lines:
        raise MatrixParseError("input is empty")

    if len(lines) > max_rows:
        raise MatrixParseError(f"number of rows must not exceed {max_rows}")

    rows = [parse_row(line, decimal_comma=decimal_comma) for line in lines]
    columns = len(rows[0])

    for i, row in enumerate(rows[1:], start=2):
        if len(row) != columns:
            raise MatrixParseError(
                f"row 1 and row {i} differ in size ({columns} and {len(row)} values)"
            )

    if columns > max_columns:
        raise MatrixParseError(f"number of columns must not exceed {max_columns}")

    return Matrix.fromrows(rows)


def read_matrix(path: str | os.PathLike, **kwargs) -> Matrix:
    """Read a matrix from a text file.

    Keyword arguments are passed to :func:`parse_matrix`.

    Raises
    ------
    MatrixParseError
        If the file cannot be read or parsed.
    """
    try:
        with open(path, encoding="utf-8") as f:
            text = f.read()
    except OSError as exc:
        raise MatrixParseError(f"cannot read {os.fspath(path)!r}: {exc}") from exc

    result = parse_matrix(text, **kwargs)
    logger.debug("read %dx%d matrix from %s", result.rows, result.columns, path)
    return result


def format_matrix(a: Matrix) -> str:
    """Return the matrix as tab-separated columns and newline-separated rows.

    Entries are written in positional notation, never with an exponent.
    """
    if a.isempty():
        return ""

    return "\n".join("\t".join(format(x, "f") for x in row) for row in a)


def format_result(result: CramerResult, names: Sequence[str] | None = None) -> str:
    """Describe the outcome of :func:`~decimatrix.linalg.solve_cramer`.

    Parameters
    ----------
    result : CramerResult
    names : Sequence[str], optional
        Names of the unknowns. Defaults to ``x1``, ``x2``, ...
    """
    match result.status:
        case "NO_SOLUTION":
            return "The system has no solutions."

        case "INFINITE":
            return "The system has infinitely many solutions."

    solution = result.solution or ()

    if names is None:
        names = [f"x{i + 1}" for i in range(len(solution))]

    if len(names) != len(solution):
        raise ValueError(f"expected {len(solution)} names, got {len(names)}")

    return "\n".join(f"{name} = {x:f}" for name, x in zip(names, solution))


@dataclasses.dataclass(frozen=True, slots=True)
class RandomConfig:
    """Settings of :func:`random_matrix`.

    Attributes
    ----------
    low : int, default=-100
        Smallest value that can be drawn.
    high : int, default=100
        Upper bound of the values (exclusive).
    fractional : bool, default=False
        If ``True``, about half of the entries get two fractional digits.
    max_rows : int, default=10
    max_columns : int, default=10
    """

    low: int = -100
    high: int = 100
    fractional: bool = False
    max_rows: int = MAX_ROWS
    max_columns: int = MAX_COLUMNS

    def __post_init__(self):
        if self.low >= self.high:
            raise ValueError(f"low must be less than high, got [{self.low}, {self.high})")


def random_matrix(
    rows: int,
    columns: int,
    config: RandomConfig | None = None,
    rng: np.random.Generator | None = None,
) -> Matrix:
    """Return a matrix of random values.

    Parameters
    ----------
    rows : int
    columns : int
    config : RandomConfig, optional
    rng : numpy.random.Generator, optional
        Source of randomness. A fresh :func:`numpy.random.default_rng` is used if
        omitted.

    Raises
    ------
    ValueError
        If the dimensions are not positive or exceed the limits of `config`.
    """
    if config is None:
        config = RandomConfig()

    if not (1 <= rows <= config.max_rows and 1 <= columns <= config.max_columns):
        raise ValueError(
            f"dimensions must be within 1x1 and {config.max_rows}x{config.max_columns}"
        )

    if rng is None:
        rng = np.random.default_rng()

    integers = rng.integers(config.low, config.high, size=(rows, columns))
    values: list[list[Decimal | int]] = integers.tolist()

    if config.fractional:
        mask = rng.random((rows, columns)) > 0.5
        reals = rng.uniform(config.low, config.high, size=(rows, columns))

        for i, j in zip(*np.nonzero(mask)):
            # the repr of a float is its shortest round-trip literal
            value = round(Decimal(repr(float(reals[i, j]))), 2)
            values[i][j] = min(value, Decimal(config.high) - Decimal("0.01"))

    return Matrix.fromrows(values)
