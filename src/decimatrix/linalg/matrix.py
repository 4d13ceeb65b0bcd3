import decimal
import functools
import itertools
import logging
import operator
from collections.abc import Iterable, Iterator, Sequence
from decimal import Decimal
from typing import TYPE_CHECKING, Final, Self, TypeAlias

import numpy as np
import numpy.typing as npt

from decimatrix.context import getcontext

if TYPE_CHECKING:
    from decimatrix.linalg.cramer import CramerResult

logger = logging.getLogger(__name__)

ZERO: Final = Decimal(0)
ONE: Final = Decimal(1)

Scalar: TypeAlias = Decimal | int | str


class MatrixError(ValueError):
    """Base class of errors raised by :mod:`decimatrix.linalg`."""


class NotSquareError(MatrixError):
    """Raised when an operation requires a square matrix."""


class SizeMismatchError(MatrixError):
    """Raised when element-wise operands differ in shape."""


class DimensionMismatchError(MatrixError):
    """Raised when the inner dimensions of a matrix product disagree."""


class CramerNotApplicableError(MatrixError):
    """Raised when a system is not shaped ``n x (n+1)``."""


class NumericOverflowError(MatrixError, ArithmeticError):
    """Raised when a value leaves the range of the current context."""


def _arithmetic(fun):
    """Run `fun` under the decimal context derived from the current context."""

    @functools.wraps(fun)
    def wrapper(*args, **kwargs):
        try:
            with decimal.localcontext(getcontext().decimal_context()):
                return fun(*args, **kwargs)
        except decimal.Overflow as exc:
            raise NumericOverflowError(
                "result exceeds the representable range of the context"
            ) from exc

    return wrapper


def _todecimal(value: Scalar) -> Decimal:
    # must be called under a context installed by _arithmetic
    if isinstance(value, bool) or not isinstance(value, (Decimal, int, str)):
        raise TypeError(f"expected Decimal, int or str, got {type(value).__name__}")

    try:
        result = decimal.getcontext().create_decimal(
            value.strip() if isinstance(value, str) else value
        )
    except decimal.InvalidOperation as exc:
        raise ValueError(f"cannot convert {value!r} to Decimal") from exc

    if not result.is_finite():
        raise ValueError(f"non-finite value {value!r} is not allowed")

    return result


class Matrix:
    """Dense matrix of :class:`~decimal.Decimal` values.

    Parameters
    ----------
    rows : int, default=0
    columns : int, default=0

    All entries of a new matrix are zero. ``Matrix()`` is the empty matrix.

    Every operation returns a new matrix and leaves its operands untouched. Arithmetic
    follows the current :class:`~decimatrix.context.Context`.

    Examples
    --------
    >>> from decimatrix.linalg import Matrix
    >>> a = Matrix.fromrows([[1, 2], [3, 4]])
    >>> a.shape
    (2, 2)
    >>> print(a.det())
    -2
    >>> print(a[1, 0])
    3
    """

    __slots__ = ("_data",)
    __array_ufunc__ = None
    _data: npt.NDArray

    def __init__(self, rows: int = 0, columns: int = 0, **kwargs):
        if (data := kwargs.get("_data")) is not None:
            self._data = data
            return

        rows, columns = operator.index(rows), operator.index(columns)

        if rows < 0 or columns < 0:
            raise ValueError(f"negative dimensions are not allowed: ({rows}, {columns})")

        self._data = np.full((rows, columns), ZERO, dtype=np.object_)

    @property
    def columns(self) -> int:
        return self._data.shape[1]

    @property
    def rows(self) -> int:
        return self._data.shape[0]

    @property
    def shape(self) -> tuple[int, int]:
        """Tuple ``(rows, columns)``."""
        return self._data.shape  # type: ignore

    @property
    def size(self) -> int:
        return self._data.size

    @property
    def T(self) -> Self:
        """Shorthand for :meth:`transpose`."""
        return self.transpose()

    @classmethod
    @_arithmetic
    def fromrows(cls, rows: Iterable[Sequence[Scalar]]) -> Self:
        """Build a matrix from a sequence of equally long rows.

        Entries may be :class:`~decimal.Decimal`, :class:`int` or :class:`str`.
        :class:`float` is rejected because it carries binary rounding error.

        Raises
        ------
        ValueError
            If the rows differ in length or an entry is not a finite number.
        TypeError
            If an entry has an unsupported type.
        """
        values = [list(row) for row in rows]

        if not values:
            return cls()

        columns = len(values[0])

        for i, row in enumerate(values):
            if len(row) != columns:
                raise ValueError(
                    f"row 0 has {columns} values but row {i} has {len(row)}"
                )

        result = cls(len(values), columns)

        for i, row in enumerate(values):
            result._data[i, :] = [_todecimal(x) for x in row]

        return result

    @classmethod
    def eye(cls, n: int) -> Self:
        """Return the ``n x n`` identity matrix."""
        result = cls(n, n)

        for i in range(n):
            result._data[i, i] = ONE

        return result

    @classmethod
    @_arithmetic
    def diag(cls, values: Sequence[Scalar]) -> Self:
        """Return a square matrix with `values` on the diagonal and zeros elsewhere."""
        result = cls(len(values), len(values))

        for i, x in enumerate(values):
            result._data[i, i] = _todecimal(x)

        return result

    def copy(self) -> Self:
        """Return an independent copy of the matrix."""
        return self.__class__(_data=self._data.copy())

    def isempty(self) -> bool:
        """Return ``True`` if the matrix has no entries."""
        return self._data.size == 0

    def issquare(self) -> bool:
        """Return ``True`` if the number of rows equals the number of columns."""
        return self.rows == self.columns

    def sizeequals(self, other: "Matrix") -> bool:
        """Return ``True`` if `other` has the same shape."""
        return self.shape == other.shape

    def row(self, i: int) -> tuple[Decimal, ...]:
        self._checkrow(i)
        return tuple(self._data[i, :])

    def column(self, j: int) -> tuple[Decimal, ...]:
        """Return the entries of column `j` from top to bottom."""
        self._checkcolumn(j)
        return tuple(self._data[:, j])

    @_arithmetic
    def setrow(self, i: int, values: Sequence[Scalar]) -> None:
        """Overwrite row `i` with `values`.

        Raises
        ------
        ValueError
            If ``len(values)`` differs from the number of columns.
        """
        self._checkrow(i)

        if len(values) != self.columns:
            raise ValueError(f"expected {self.columns} values, got {len(values)}")

        self._data[i, :] = [_todecimal(x) for x in values]

    def tolist(self) -> list[list[Decimal]]:
        return self._data.tolist()

    def transpose(self) -> Self:
        """Return the transposed matrix."""
        return self.__class__(_data=self._data.T.copy())

    @_arithmetic
    def trace(self) -> Decimal:
        """Return the sum of the diagonal entries.

        Raises
        ------
        NotSquareError
            If the matrix is not square.
        """
        if not self.issquare():
            raise NotSquareError("trace of a non-square matrix is undefined")

        return sum((self._data[i, i] for i in range(self.rows)), ZERO)

    def minor(self, row: int, column: int) -> Self:
        """Return the matrix without row `row` and column `column`.

        Examples
        --------
        >>> a = Matrix.fromrows([[1, 2, 3], [4, 5, 6], [7, 8, 9]])
        >>> a.minor(1, 0) == Matrix.fromrows([[2, 3], [8, 9]])
        True
        """
        self._checkrow(row)
        self._checkcolumn(column)
        data = np.delete(np.delete(self._data, row, axis=0), column, axis=1)
        return self.__class__(_data=data)

    @_arithmetic
    def replace_column(self, column: int, values: Sequence[Scalar] | None = None) -> Self:
        """Delete or overwrite a column.

        Parameters
        ----------
        column : int
            Index of the column.
        values : Sequence, optional
            New entries of the column. If omitted, the column is deleted and the result
            is one column narrower.

        Raises
        ------
        ValueError
            If ``len(values)`` differs from the number of rows.
        """
        self._checkcolumn(column)

        if values is None:
            return self.__class__(_data=np.delete(self._data, column, axis=1))

        if len(values) != self.rows:
            raise ValueError(f"expected {self.rows} values, got {len(values)}")

        data = self._data.copy()

        for i, x in enumerate(values):
            data[i, column] = _todecimal(x)

        return self.__class__(_data=data)

    @_arithmetic
    def det(self) -> Decimal:
        """Return the determinant by cofactor expansion along the first row.

        The expansion is exact up to the precision of the current context. Its cost
        grows factorially with the size of the matrix.

        Raises
        ------
        NotSquareError
            If the matrix is not square.
        NumericOverflowError
            If an intermediate product leaves the range of the context.
        """
        if not self.issquare():
            raise NotSquareError("determinant exists only for square matrices")

        logger.debug("cofactor expansion of a %dx%d matrix", self.rows, self.columns)
        return self._cofactorexpansion()

    def _cofactorexpansion(self) -> Decimal:
        # A minor of the first k rows removed is determined by its remaining columns,
        # so each one is expanded once: 2**n subproblems instead of n! minors.
        data, n = self._data, self.rows

        @functools.cache
        def expand(columns: tuple[int, ...]) -> Decimal:
            row = n - len(columns)

            if len(columns) == 1:
                return data[row, columns[0]]

            result = ZERO
            sign = 1

            for k, j in enumerate(columns):
                rest = columns[:k] + columns[k + 1 :]
                result += sign * data[row, j] * expand(rest)
                sign = -sign

            return result

        return expand(tuple(range(n)))

    @_arithmetic
    def add(self, other: "Matrix") -> Self:
        """Return the element-wise sum.

        Raises
        ------
        SizeMismatchError
            If the shapes differ.
        """
        self._checksize(other)
        return self.__class__(_data=self._data + other._data)

    @_arithmetic
    def subtract(self, other: "Matrix") -> Self:
        """Return the element-wise difference.

        Raises
        ------
        SizeMismatchError
            If the shapes differ.
        """
        self._checksize(other)
        return self.__class__(_data=self._data - other._data)

    @_arithmetic
    def multiply(self, other: "Matrix") -> Self:
        """Return the matrix product ``self @ other``.

        Raises
        ------
        DimensionMismatchError
            If ``self.columns != other.rows``.
        """
        if not isinstance(other, Matrix):
            raise TypeError

        if self.columns != other.rows:
            raise DimensionMismatchError(
                f"cannot multiply {self.rows}x{self.columns} "
                f"by {other.rows}x{other.columns} matrix"
            )

        lhs, rhs = self._data, other._data
        n = self.columns
        result = self.__class__(self.rows, other.columns)

        for i, j in itertools.product(range(self.rows), range(other.columns)):
            result._data[i, j] = sum((lhs[i, k] * rhs[k, j] for k in range(n)), ZERO)

        return result

    @_arithmetic
    def scale(self, value: Scalar) -> Self:
        """Return the matrix with every entry multiplied by `value`."""
        value = _todecimal(value)
        result = self.__class__(*self.shape)

        for key in itertools.product(range(self.rows), range(self.columns)):
            result._data[key] = self._data[key] * value

        return result

    def solve_cramer(self) -> "CramerResult":
        """Shorthand for :func:`~decimatrix.linalg.solve_cramer`."""
        from decimatrix.linalg.cramer import solve_cramer

        return solve_cramer(self)

    def _checkcolumn(self, j: int) -> None:
        if not 0 <= operator.index(j) < self.columns:
            raise IndexError(f"column {j} is out of range for shape {self.shape}")

    def _checkrow(self, i: int) -> None:
        if not 0 <= operator.index(i) < self.rows:
            raise IndexError(f"row {i} is out of range for shape {self.shape}")

    def _checksize(self, other: "Matrix") -> None:
        if not isinstance(other, Matrix):
            raise TypeError

        if not self.sizeequals(other):
            raise SizeMismatchError(
                f"shapes {self.shape} and {other.shape} are not equal"
            )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented

        return self.shape == other.shape and bool(np.all(self._data == other._data))

    def __len__(self) -> int:
        return self.rows

    def __iter__(self) -> Iterator[tuple[Decimal, ...]]:
        return (tuple(row) for row in self._data)

    def __getitem__(self, key: tuple[int, int]) -> Decimal:
        i, j = key
        self._checkrow(i)
        self._checkcolumn(j)
        return self._data[i, j]

    @_arithmetic
    def __setitem__(self, key: tuple[int, int], value: Scalar) -> None:
        i, j = key
        self._checkrow(i)
        self._checkcolumn(j)
        self._data[i, j] = _todecimal(value)

    def __add__(self, rhs: "Matrix") -> Self:
        if not isinstance(rhs, Matrix):
            return NotImplemented

        return self.add(rhs)

    def __sub__(self, rhs: "Matrix") -> Self:
        if not isinstance(rhs, Matrix):
            return NotImplemented

        return self.subtract(rhs)

    def __matmul__(self, rhs: "Matrix") -> Self:
        if not isinstance(rhs, Matrix):
            return NotImplemented

        return self.multiply(rhs)

    def __mul__(self, rhs: Scalar) -> Self:
        if not isinstance(rhs, (Decimal, int)) or isinstance(rhs, bool):
            return NotImplemented

        return self.scale(rhs)

    def __rmul__(self, lhs: Scalar) -> Self:
        return self.__mul__(lhs)

    def __neg__(self) -> Self:
        return self.scale(-1)

    def __pos__(self) -> Self:
        return self.copy()

    def __copy__(self) -> Self:
        return self.copy()

    def __repr__(self):
        rows = [[str(x) for x in row] for row in self]
        return f"{type(self).__name__}.fromrows({rows!r})"


def add(a: Matrix, b: Matrix) -> Matrix:
    """Return the element-wise sum of two matrices of equal shape.

    Raises
    ------
    SizeMismatchError
        If the shapes differ.
    """
    return a.add(b)


def subtract(a: Matrix, b: Matrix) -> Matrix:
    """Return the element-wise difference of two matrices of equal shape.

    Raises
    ------
    SizeMismatchError
        If the shapes differ.
    """
    return a.subtract(b)


def multiply(a: Matrix, b: Matrix) -> Matrix:
    """Return the matrix product ``a @ b``.

    Raises
    ------
    DimensionMismatchError
        If ``a.columns != b.rows``.
    """
    return a.multiply(b)


def scale(a: Matrix, value: Scalar) -> Matrix:
    """Return `a` with every entry multiplied by `value`."""
    return a.scale(value)


def det(a: Matrix) -> Decimal:
    """Compute the determinant of a square matrix.

    Raises
    ------
    NotSquareError
        If `a` is not square.
    """
    return a.det()


def trace(a: Matrix) -> Decimal:
    """Compute the trace of a square matrix.

    Raises
    ------
    NotSquareError
        If `a` is not square.
    """
    return a.trace()


def transpose(a: Matrix) -> Matrix:
    return a.transpose()
