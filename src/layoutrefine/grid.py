"""
Heat Grid
Dense 2D counter field used as the heat map during postprocessing.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt


class HeatGrid:
    """
    Non-negative integer counters addressed by (x, y) = (column, row).

    The dimensions are fixed for the lifetime of the grid.
    """
    def __init__(self, columns: int, rows: int) -> None:
        """
        Initialize a grid filled with zeros.

        Args:
            columns: Number of columns (extent along x).
            rows: Number of rows (extent along y).

        Raises:
            ValueError: If a dimension is negative.
        """
        if columns < 0 or rows < 0:
            raise ValueError(f"Grid dimensions must not be negative, got {columns}x{rows}.")
        self._values: npt.NDArray[np.int32] = np.zeros((rows, columns), dtype=np.int32)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(columns={self.columns_count}, rows={self.rows_count})"

    @property
    def columns_count(self) -> int:
        return self._values.shape[1]

    @property
    def rows_count(self) -> int:
        return self._values.shape[0]

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.columns_count and 0 <= y < self.rows_count

    def contains_area(self, corner: tuple[int, int], size: tuple[int, int]) -> bool:
        """Whether the rectangle starting at `corner` with `size` cells lies fully inside."""
        left, up = corner
        width, height = size
        if left < 0 or left + width > self.columns_count:
            return False
        if up < 0 or up + height > self.rows_count:
            return False
        return True

    def get_value(self, x: int, y: int) -> int:
        if not self.contains(x, y):
            raise IndexError(f"Cell ({x}, {y}) outside of {self.columns_count}x{self.rows_count} grid.")
        return int(self._values[y, x])

    def set_value(self, x: int, y: int, value: int) -> None:
        if not self.contains(x, y):
            raise IndexError(f"Cell ({x}, {y}) outside of {self.columns_count}x{self.rows_count} grid.")
        if value < 0:
            raise ValueError(f"Cell ({x}, {y}) cannot hold a negative count ({value}).")
        self._values[y, x] = value

    def total(self) -> int:
        """Sum of all counters."""
        return int(self._values.sum())

    def to_array(self) -> npt.NDArray[np.int32]:
        """Copy of the counters as a (rows, columns) array."""
        return self._values.copy()
