"""
Heat Map
Counts, per raster cell, how many node footprints cover it.
"""
from __future__ import annotations

import logging
from typing import Optional, Sequence, TYPE_CHECKING

from layoutrefine.grid import HeatGrid
from layoutrefine.model.primitives import LayoutNode
from layoutrefine.raster import raster_footprint, to_grid_coordinates

if TYPE_CHECKING:
    from layoutrefine.config import RasterConfig

logger = logging.getLogger(__name__)


def cells_per_pass(pitch: int, config: RasterConfig) -> int:
    """Largest move of one node during one pass, in cells of `pitch`."""
    # clamped step plus the rounding of the alignment raster, one more cell for
    # grid coordinates truncating toward zero
    return -(-(config.max_step_cells * pitch + config.pitch_x) // pitch) + 1


def heat_map_shape(nodes: Sequence[LayoutNode], config: RasterConfig) -> tuple[int, int]:
    """
    Dimensions (columns, rows) of the heat map for `nodes`.

    The size depends on the node count and the largest footprint only, never
    on where the nodes are. The half extent on each axis fits all footprints
    side by side, plus the farthest distance a node can travel during overlap
    resolution, plus one cell for the alignment nudge and one border cell that
    gradient sampling never reads. Nodes placed farther out are skipped.
    """
    max_width = 0
    max_height = 0
    for node in nodes:
        width, height = raster_footprint(node, config)
        max_width = max(max_width, width)
        max_height = max(max_height, height)

    half_x = len(nodes) * max_width + config.max_iterations * cells_per_pass(config.pitch_x, config) + 2
    half_y = len(nodes) * max_height + config.max_iterations * cells_per_pass(config.pitch_y, config) + 2
    return 2 * half_x + 1, 2 * half_y + 1


def modify_heat_map_area(
    heat_map: HeatGrid,
    corner: tuple[int, int],
    size: tuple[int, int],
    modifier: int,
) -> None:
    """
    Add `modifier` to every cell of the rectangle at `corner` with `size` cells.

    Cells outside the grid are skipped.
    """
    went_out_of_range = False
    left, up = corner
    width, height = size

    for i in range(width):
        for j in range(height):
            x = left + i
            y = up + j
            if not heat_map.contains(x, y):
                went_out_of_range = True
                continue
            heat_map.set_value(x, y, heat_map.get_value(x, y) + modifier)

    if went_out_of_range:
        logger.warning("Left heat map range while trying to modify values.")


def build_heat_map(
    nodes: Sequence[LayoutNode],
    config: RasterConfig,
    shape: Optional[tuple[int, int]] = None,
) -> HeatGrid:
    """
    Build the heat map of the given nodes.

    Args:
        nodes: Nodes, usually already aligned on the raster.
        config: Raster configuration.
        shape: Optional (columns, rows); derived from the nodes when omitted.

    Returns:
        A grid where each cell counts the footprints covering it. Nodes whose
        footprint does not fit completely are left out.
    """
    columns, rows = shape if shape is not None else heat_map_shape(nodes, config)
    logger.debug(f"Building heat map with {columns}x{rows} cells for {len(nodes)} nodes.")
    heat_map = HeatGrid(columns, rows)

    for node in nodes:
        corner = to_grid_coordinates(node.position, config, heat_map)
        size = raster_footprint(node, config)

        if not heat_map.contains_area(corner, size):
            logger.warning(f"Node {node.uid} at {node.position.tolist()} is outside the heat map, skipping.")
            continue

        modify_heat_map_area(heat_map, corner, size, 1)

    return heat_map
