"""Dense row-major float matrices."""

from __future__ import annotations

import numpy as np

from digitnet.utility import random_float


class Matrix:
    """A rows x columns matrix of 32-bit floats stored row-major in ``elements``."""

    __hash__ = None

    def __init__(self, rows=0, columns=0, elements=None):
        if rows < 0 or columns < 0:
            raise ValueError("matrix dimensions must not be negative")
        self.rows = rows
        self.columns = columns
        if elements is None:
            self.elements = np.zeros(rows * columns, dtype=np.float32)
        else:
            values = np.array(elements, dtype=np.float32).ravel()
            if values.size != rows * columns:
                raise ValueError(
                    f"expected {rows * columns} elements for a {rows}x{columns} matrix, "
                    f"got {values.size}"
                )
            self.elements = values

    @property
    def shape(self):
        return (self.rows, self.columns)

    def _grid(self):
        return self.elements.reshape(self.rows, self.columns)

    def resize(self, rows, columns):
        """Change the dimensions, keeping the leading elements and zero-filling the rest."""
        if rows < 0 or columns < 0:
            raise ValueError("matrix dimensions must not be negative")
        resized = np.zeros(rows * columns, dtype=np.float32)
        kept = min(resized.size, self.elements.size)
        resized[:kept] = self.elements[:kept]
        self.rows = rows
        self.columns = columns
        self.elements = resized

    def __mul__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        if self.columns != other.rows:
            raise ValueError(f"cannot multiply {self.shape} by {other.shape}")
        product = self._grid() @ other._grid()
        return Matrix(self.rows, other.columns, product)

    def __add__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        if self.shape != other.shape:
            raise ValueError(f"cannot add {self.shape} to {other.shape}")
        return Matrix(self.rows, self.columns, self.elements + other.elements)

    def accumulate_product(self, m1, m2):
        """Add the product ``m1 * m2`` to this matrix in place."""
        if m1.columns != m2.rows:
            raise ValueError(f"cannot multiply {m1.shape} by {m2.shape}")
        if self.shape != (m1.rows, m2.columns):
            raise ValueError(
                f"product has shape {(m1.rows, m2.columns)}, target has {self.shape}"
            )
        self.elements += (m1._grid() @ m2._grid()).ravel()

    def assign_sum(self, m1, m2):
        """Overwrite this matrix with ``m1 + m2``."""
        if m1.shape != m2.shape or self.shape != m1.shape:
            raise ValueError(
                f"shapes {m1.shape}, {m2.shape} and {self.shape} do not match"
            )
        self.elements[:] = m1.elements + m2.elements

    def format(self):
        """Return the matrix as text, one ``Row r -> `` line per row."""
        lines = []
        for index, row in enumerate(self._grid()):
            values = "".join(f" {float(value):g}" for value in row)
            lines.append(f"Row {index} -> {values}\n")
        return "".join(lines)

    def __eq__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and np.array_equal(self.elements, other.elements)

    def __repr__(self):
        return f"Matrix(rows={self.rows}, columns={self.columns}, elements={self.elements.tolist()!r})"


def random_elements(size, low, high):
    """Return ``size`` random floats between low and high."""
    return [random_float(low, high) for _ in range(size)]