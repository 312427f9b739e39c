"""Small square matrices with cofactor-expansion determinant and inverse.

This module provides an immutable Matrix value for 2x2, 3x3 and 4x4 grids,
the textbook cofactor-expansion determinant, the adjugate-over-determinant
inverse, and named constructors for affine transforms.

Cofactor expansion is O(n!) in general but is the simplest correct general
inverse at n <= 4. No pivoting is performed.

Example:
    >>> from raykernel.core.matrix import scale, translation
    >>> from raykernel.core.tuple import point
    >>> m = translation(5.0, -3.0, 2.0) @ scale(2.0, 2.0, 2.0)
    >>> m @ point(1.0, 1.0, 1.0)
    Tuple(x=7.0, y=-1.0, z=4.0, w=1.0)
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import overload

import numpy as np
import numpy.typing as npt

from raykernel.core.approx import approx_equal, near_zero
from raykernel.core.tuple import Tuple

# Supported matrix sizes
MIN_SIZE = 2
MAX_SIZE = 4


class SingularMatrixError(ValueError):
    """Raised when inverting a matrix whose determinant is (near) zero."""


class Matrix:
    """An immutable N x N matrix of floats, stored row-major.

    Backed by a read-only NumPy array. Every operation returns a new Matrix.
    Equality is element-wise approximate, so matrices are not hashable.

    Args:
        rows: Nested sequence of N rows of N numbers, or a square NumPy array.

    Raises:
        ValueError: If the input is not square or N is not in [2, 4].
    """

    __slots__ = ("_data",)

    def __init__(self, rows: Sequence[Sequence[float]] | npt.NDArray[np.float64]) -> None:
        data = np.array(rows, dtype=np.float64)
        if data.ndim != 2 or data.shape[0] != data.shape[1]:
            raise ValueError(f"Matrix must be square, got shape {data.shape}")
        if not MIN_SIZE <= data.shape[0] <= MAX_SIZE:
            raise ValueError(
                f"Matrix size must be between {MIN_SIZE} and {MAX_SIZE}, got {data.shape[0]}"
            )
        data.setflags(write=False)
        self._data = data

    @property
    def size(self) -> int:
        """Get the number of rows (and columns)."""
        return int(self._data.shape[0])

    def rows(self) -> list[list[float]]:
        """Return the matrix as nested Python lists."""
        return self._data.tolist()

    def to_numpy(self) -> npt.NDArray[np.float64]:
        """Return a writable copy of the underlying array."""
        return self._data.copy()

    def __getitem__(self, index: tuple[int, int]) -> float:
        row, col = index
        return float(self._data[row, col])

    # =========================================================================
    # Cofactor Expansion
    # =========================================================================

    def submatrix(self, row: int, col: int) -> Matrix:
        """Remove one row and one column.

        Out-of-range indices are clamped into [0, n-1] rather than rejected.

        Args:
            row: Row to remove.
            col: Column to remove.

        Returns:
            The (n-1) x (n-1) matrix that remains.

        Raises:
            ValueError: If the matrix is 2x2 (no 1x1 matrices exist).
        """
        n = self.size
        if n <= MIN_SIZE:
            raise ValueError("Cannot take a submatrix of a 2x2 matrix")
        row = max(0, min(row, n - 1))
        col = max(0, min(col, n - 1))
        reduced = np.delete(np.delete(self._data, row, axis=0), col, axis=1)
        return Matrix(reduced)

    def minor(self, row: int, col: int) -> float:
        """Compute the determinant of the submatrix at (row, col)."""
        return self.submatrix(row, col).determinant()

    def cofactor(self, row: int, col: int) -> float:
        """Compute the minor at (row, col), negated when row + col is odd."""
        m = self.minor(row, col)
        return -m if (row + col) % 2 else m

    def determinant(self) -> float:
        """Compute the determinant.

        2x2 matrices use ad - bc; larger matrices expand along the first row.
        """
        d = self._data
        if self.size == 2:
            return float(d[0, 0] * d[1, 1] - d[0, 1] * d[1, 0])
        return sum(float(d[0, col]) * self.cofactor(0, col) for col in range(self.size))

    def invertible(self) -> bool:
        """Check whether the determinant is not approximately zero."""
        return not near_zero(self.determinant())

    def inverse(self) -> Matrix:
        """Compute the inverse as the adjugate divided by the determinant.

        The cofactor at (row, col) is written to (col, row), which folds the
        transpose of the cofactor matrix into the loop.

        Returns:
            The inverse matrix.

        Raises:
            SingularMatrixError: If the determinant is approximately zero.
            ValueError: If the matrix is 2x2.
        """
        if self.size == MIN_SIZE:
            raise ValueError("inverse() is defined for 3x3 and 4x4 matrices")
        det = self.determinant()
        if near_zero(det):
            raise SingularMatrixError(f"Matrix is not invertible (determinant={det})")
        n = self.size
        result = np.zeros((n, n), dtype=np.float64)
        for row in range(n):
            for col in range(n):
                result[col, row] = self.cofactor(row, col) / det
        return Matrix(result)

    # =========================================================================
    # Products and Transposition
    # =========================================================================

    def transpose(self) -> Matrix:
        return Matrix(self._data.T)

    def multiply(self, other: Matrix) -> Matrix:
        """Compute the standard matrix product self x other.

        Raises:
            ValueError: If the sizes differ.
        """
        if other.size != self.size:
            raise ValueError(f"Cannot multiply {self.size}x{self.size} by {other.size}x{other.size}")
        return Matrix(self._data @ other._data)

    def apply_to_tuple(self, t: Tuple) -> Tuple:
        """Multiply a 4x4 matrix by a tuple treated as a column vector.

        Raises:
            ValueError: If the matrix is not 4x4.
        """
        if self.size != MAX_SIZE:
            raise ValueError(f"Only 4x4 matrices apply to tuples, got {self.size}x{self.size}")
        x, y, z, w = (float(v) for v in self._data @ np.array(t.to_list(), dtype=np.float64))
        return Tuple(x, y, z, w)

    @overload
    def __matmul__(self, other: Matrix) -> Matrix: ...

    @overload
    def __matmul__(self, other: Tuple) -> Tuple: ...

    def __matmul__(self, other):
        if isinstance(other, Matrix):
            return self.multiply(other)
        if isinstance(other, Tuple):
            return self.apply_to_tuple(other)
        return NotImplemented

    def equals(self, other: Matrix) -> bool:
        """Check element-wise approximate equality."""
        if other.size != self.size:
            return False
        return all(
            approx_equal(float(a), float(b))
            for a, b in zip(self._data.flat, other._data.flat)
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.equals(other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Matrix({self.rows()})"


# =============================================================================
# Named Constructors
# =============================================================================


def identity() -> Matrix:
    """Create the 4x4 identity matrix."""
    return Matrix(np.eye(4))


IDENTITY = identity()


def translation(x: float, y: float, z: float) -> Matrix:
    """Create a 4x4 matrix translating points by (x, y, z).

    Vectors are unaffected because their w component is zero.
    """
    return Matrix(
        [
            [1.0, 0.0, 0.0, x],
            [0.0, 1.0, 0.0, y],
            [0.0, 0.0, 1.0, z],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def scale(x: float, y: float, z: float) -> Matrix:
    """Create a 4x4 matrix scaling each axis independently.

    A negative factor reflects across the corresponding axis.
    """
    return Matrix(
        [
            [x, 0.0, 0.0, 0.0],
            [0.0, y, 0.0, 0.0],
            [0.0, 0.0, z, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def inverse(m: Matrix) -> Matrix:
    """Invert a matrix. See Matrix.inverse."""
    return m.inverse()


def invertible(m: Matrix) -> bool:
    """Check whether a matrix can be inverted. See Matrix.invertible."""
    return m.invertible()
