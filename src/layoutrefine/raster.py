"""
Raster Geometry
Maps continuous node positions and sizes onto the alignment raster.

Positions snap to a pitch of cell width plus cell padding on both axes;
footprints and grid coordinates use the cell extent of their own axis. All
divisions truncate toward zero and remainders take the sign of the dividend,
so a layout mirrored around the origin snaps to a mirrored raster.
"""
from __future__ import annotations

from typing import Sequence, Union, TYPE_CHECKING

import numpy as np

from layoutrefine.model.primitives import LayoutNode

if TYPE_CHECKING:
    from layoutrefine.config import RasterConfig
    from layoutrefine.grid import HeatGrid


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def trunc_divmod(value: int, divisor: int) -> tuple[int, int]:
    """
    Integer division truncating toward zero.

    Args:
        value: Dividend, any sign.
        divisor: Positive divisor.

    Returns:
        (quotient, remainder) with `value == quotient * divisor + remainder` and
        the remainder carrying the sign of `value`.
    """
    quotient = abs(value) // divisor
    if value < 0:
        quotient = -quotient
    return quotient, value - quotient * divisor


def align_value(value: int, pitch: int) -> int:
    """Snap a single coordinate onto the nearest multiple of `pitch`."""
    quotient, remainder = trunc_divmod(value, pitch)
    if remainder == 0:
        return value

    if abs(remainder) > pitch // 2:
        if quotient != 0:
            quotient += _sign(quotient)
        else:
            quotient += _sign(remainder)

    return quotient * pitch


def align_on_raster(position: Sequence[int], config: RasterConfig) -> np.ndarray:
    """
    Snap a position onto the raster.

    Args:
        position: Integer position [X, Y].
        config: Raster configuration; the pitch is `cell_width + cell_padding` on both axes.

    Returns:
        A new int64 array with each axis rounded to the nearest pitch multiple,
        remainders of more than half a pitch rounding away from zero.
    """
    return np.array(
        [align_value(int(position[0]), config.pitch_x), align_value(int(position[1]), config.pitch_x)],
        dtype=np.int64,
    )


def align_node_on_raster(node: LayoutNode, config: RasterConfig) -> None:
    aligned = align_on_raster(node.position, config)
    node.move_to(int(aligned[0]), int(aligned[1]))


def raster_cells(extent: int, cell_extent: int, cell_padding: int) -> int:
    """
    Number of raster cells covered by `extent` layout units.

    Each cell consumes one cell extent, followed by one padding amount if
    anything is left, until nothing remains. That sums up to
    ceil(extent / (cell_extent + cell_padding)) for positive extents.
    """
    if extent <= 0:
        return 0
    pitch = cell_extent + cell_padding
    return -(-extent // pitch)


def raster_footprint(
    node: Union[LayoutNode, Sequence[int]],
    config: RasterConfig,
) -> tuple[int, int]:
    """
    Size of a node on the raster, in cells.

    Args:
        node: A LayoutNode or a plain size [W, H].
        config: Raster configuration.

    Returns:
        Number of cells covered along x and y.
    """
    size = node.size if isinstance(node, LayoutNode) else node
    return (
        raster_cells(int(size[0]), config.cell_width, config.cell_padding),
        raster_cells(int(size[1]), config.cell_height, config.cell_padding),
    )


def to_grid_coordinates(
    position: Sequence[int],
    config: RasterConfig,
    grid: HeatGrid,
) -> tuple[int, int]:
    """Cell of `grid` holding `position`; the grid center is the layout origin."""
    column, _ = trunc_divmod(int(position[0]), config.pitch_x)
    row, _ = trunc_divmod(int(position[1]), config.pitch_y)
    return column + grid.columns_count // 2, row + grid.rows_count // 2
