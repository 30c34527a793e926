"""
Geometric Primitives for the layout refinement pass.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional, Sequence, TYPE_CHECKING
import math

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt

EPSILON = 0.000001


@dataclass
class Vector:
    """
    A vector in 2D space, used for gradients and push directions.
    """
    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Vector) -> Vector:
        return Vector(self.x + other.x, self.y + other.y)

    def __truediv__(self, scalar: float) -> Vector:
        if scalar == 0.0: raise ZeroDivisionError
        return Vector(self.x / scalar, self.y / scalar)

    def __neg__(self) -> Vector:
        return Vector(-self.x, -self.y)

    @property
    def magnitude(self) -> float:
        return math.sqrt(self.x**2 + self.y**2)

    @property
    def magnitude_squared(self) -> float:
        return self.x**2 + self.y**2

    def normalize(self) -> Vector:
        mag = self.magnitude
        if mag == 0.0: return Vector(0.0, 0.0)
        return self / mag

    @classmethod
    def from_array(cls, values: Sequence[float]) -> Vector:
        return cls(float(values[0]), float(values[1]))


class LayoutNode:
    """
    A rectangular, already positioned node of a graph layout.

    The position is the top-left corner in layout units. Postprocessing writes
    the position in place; the size is treated as read-only.
    """
    def __init__(
        self,
        position: Sequence[int] | npt.NDArray[np.int64],
        size: Sequence[int] | npt.NDArray[np.int64],
        uid: Optional[Any] = None,
    ) -> None:
        """
        Initialize the node.

        Args:
            position: Reference corner of the node [X, Y].
            size: Width and height of the node [W, H], both >= 0.
            uid: Optional opaque label, carried through unchanged.
        """
        self.position = np.array(position, dtype=np.int64)
        self.size = np.array(size, dtype=np.int64)
        self.uid = uid

        if self.position.shape != (2,) or self.size.shape != (2,):
            raise ValueError(
                f"Position and size must be 2D vectors, got {self.position.shape} and {self.size.shape}."
            )

    def __repr__(self) -> str:
        """String representation of the node."""
        return (
            f"{self.__class__.__name__}(id={self.uid}, "
            f"position={self.position.tolist()}, size={self.size.tolist()})"
        )

    @property
    def x(self) -> int:
        """X-coordinate of the reference corner."""
        return int(self.position[0])

    @property
    def y(self) -> int:
        """Y-coordinate of the reference corner."""
        return int(self.position[1])

    @property
    def width(self) -> int:
        return int(self.size[0])

    @property
    def height(self) -> int:
        return int(self.size[1])

    @property
    def mass(self) -> int:
        """Area of the node, used as its weight for the center of mass."""
        return self.width * self.height

    def move_to(self, x: int, y: int) -> None:
        self.position[0] = x
        self.position[1] = y

    def move_by(self, dx: int, dy: int) -> None:
        self.position[0] += dx
        self.position[1] += dy
