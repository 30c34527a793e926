"""
Overlap Resolution
==================
Moves overlapping nodes down the gradient of the heat map.

The heat map counts how many footprints cover each raster cell. Every pass
visits the nodes in list order, samples the gradient under each footprint,
lifts the footprint out of the heat map, moves the node by at most
`max_step_cells` pitches, snaps it back onto the raster and puts the
footprint back. Later nodes of a pass see the moves of earlier ones.
"""
from __future__ import annotations

import logging
import math
from typing import Sequence, Union, TYPE_CHECKING

from layoutrefine.heatmap import modify_heat_map_area
from layoutrefine.model.primitives import EPSILON, LayoutNode, Vector
from layoutrefine.raster import align_node_on_raster, raster_footprint, to_grid_coordinates

if TYPE_CHECKING:
    from layoutrefine.config import RasterConfig
    from layoutrefine.grid import HeatGrid

logger = logging.getLogger(__name__)

RAY_DIRECTION_EPSILON = 1e-10


def _magnitude_factor(index: int, extent: int) -> int:
    """Triangular weight peaking at the middle of the footprint, at least 1."""
    return max(1, int(extent * 0.5 - abs(index + 1 - extent * 0.5)))


def heat_map_gradient(
    heat_map: HeatGrid,
    corner: tuple[int, int],
    size: tuple[int, int],
) -> tuple[Vector, bool]:
    """
    Sample the heat map gradient under a footprint.

    Args:
        heat_map: The heat map.
        corner: Upper left cell of the footprint.
        size: Footprint size in cells.

    Returns:
        The accumulated gradient, pointing toward lower density, and whether
        any cell of the footprint is covered more than once. Cells on the
        outermost border of the grid are not sampled.
    """
    gradient = Vector(0.0, 0.0)
    overlap = False
    left, up = corner
    width, height = size
    max_x = heat_map.columns_count - 2
    max_y = heat_map.rows_count - 2

    for i in range(width):
        for j in range(height):
            x = left + i
            y = up + j

            # weight factors that emphasize gradients near the node's center
            h_mag_factor = _magnitude_factor(i, width)
            v_mag_factor = _magnitude_factor(j, height)

            # not all 4 neighbours exist on the border
            if x < 1 or x > max_x:
                continue
            if y < 1 or y > max_y:
                continue

            val = float(heat_map.get_value(x, y))

            x_p1 = math.sqrt(heat_map.get_value(x + 1, y) * h_mag_factor)
            x_m1 = math.sqrt(heat_map.get_value(x - 1, y) * h_mag_factor)
            y_p1 = math.sqrt(heat_map.get_value(x, y + 1) * v_mag_factor)
            y_m1 = math.sqrt(heat_map.get_value(x, y - 1) * v_mag_factor)

            gradient = gradient + Vector(
                (x_m1 - val) + (val - x_p1),
                (y_m1 - val) + (val - y_p1),
            )

            if val > 1:
                overlap = True

    return gradient, overlap


def _fallback_direction(node: LayoutNode) -> Vector:
    """Push direction for a node without gradient during a pass with overlap: away from the origin."""
    direction = Vector(float(node.x), float(node.y)).normalize()
    if direction.magnitude_squared <= EPSILON:
        direction = Vector(0.0, 1.0)
    return -direction


def _clamp(value: int, limit: int) -> int:
    return max(-limit, min(limit, value))


def resolve_overlap(
    nodes: Sequence[LayoutNode],
    heat_map: HeatGrid,
    config: RasterConfig,
) -> int:
    """
    Iteratively push overlapping nodes apart.

    Args:
        nodes: Nodes to move in place; their footprints must be in `heat_map`.
        heat_map: Heat map of the nodes, kept in sync with every move.
        config: Raster configuration, including the pass limit.

    Returns:
        Number of passes run. Stops after the first pass without overlap or
        after `config.max_iterations` passes; overlap left after the last
        pass is accepted.
    """
    columns = heat_map.columns_count
    rows = heat_map.rows_count
    max_x_offset = config.max_step_cells * config.pitch_x
    max_y_offset = config.max_step_cells * config.pitch_y

    overlap = True
    iteration_count = 0

    while overlap and iteration_count < config.max_iterations:
        logger.info(f"Overlap resolution pass {iteration_count}")

        overlap = False
        iteration_count += 1

        for node in nodes:
            corner = to_grid_coordinates(node.position, config, heat_map)
            size = raster_footprint(node, config)

            if corner[0] + size[0] > columns or corner[0] < 0:
                logger.warning(f"Node {node.uid} is leaving the heat map area in x")
                continue
            if corner[1] + size[1] > rows or corner[1] < 0:
                logger.warning(f"Node {node.uid} is leaving the heat map area in y")
                continue

            gradient, node_overlap = heat_map_gradient(heat_map, corner, size)
            if node_overlap:
                overlap = True

            # overlap without gradient, e.g. a node lying completely on top of another;
            # once the pass has seen overlap, nodes without gradient are pushed outward
            if gradient.magnitude_squared <= EPSILON and overlap:
                gradient = _fallback_direction(node)

            # lift the footprint, it is added again at the new position
            modify_heat_map_area(heat_map, corner, size, -1)

            x_offset = _clamp(int(gradient.x * config.pitch_x), max_x_offset)
            y_offset = _clamp(int(gradient.y * config.pitch_y), max_y_offset)
            node.move_by(x_offset, y_offset)
            align_node_on_raster(node, config)

            corner = to_grid_coordinates(node.position, config, heat_map)
            modify_heat_map_area(heat_map, corner, size, 1)

            _, still_overlapping = heat_map_gradient(heat_map, corner, size)
            if still_overlapping:
                overlap = True

    logger.info(f"Overlap resolution finished after {iteration_count} passes (overlap left: {overlap}).")
    return iteration_count


def heat_map_ray_cast(
    heat_map: HeatGrid,
    start: Union[Vector, Sequence[float]],
    direction: Union[Vector, Sequence[float]],
    min_value: int,
) -> Vector:
    """
    Measure how far a dense region extends from `start` along `direction`.

    Each axis steps by the sign of its direction component (no line
    rasterization). Walking continues while the visited cell holds at least
    `min_value` and stops at the grid border.

    Args:
        heat_map: The heat map.
        start: Start cell; cells on the outermost border yield a zero vector.
        direction: Walking direction; only the signs of its components matter.
        min_value: Minimum count for a cell to be part of the region.

    Returns:
        The total displacement walked, in cells.
    """
    if not isinstance(start, Vector):
        start = Vector.from_array(start)
    if not isinstance(direction, Vector):
        direction = Vector.from_array(direction)

    x_offset = 0
    y_offset = 0
    if abs(direction.x) > RAY_DIRECTION_EPSILON:
        x_offset = 1 if direction.x > 0 else -1
    if abs(direction.y) > RAY_DIRECTION_EPSILON:
        y_offset = 1 if direction.y > 0 else -1

    if start.x < 1 or start.x > heat_map.columns_count - 2:
        return Vector(0.0, 0.0)
    if start.y < 1 or start.y > heat_map.rows_count - 2:
        return Vector(0.0, 0.0)
    if x_offset == 0 and y_offset == 0:
        return Vector(0.0, 0.0)

    length = Vector(0.0, 0.0)
    pos_x = int(start.x) + x_offset
    pos_y = int(start.y) + y_offset

    while heat_map.contains(pos_x, pos_y) and heat_map.get_value(pos_x, pos_y) >= min_value:
        length = length + Vector(x_offset, y_offset)
        pos_x += x_offset
        pos_y += y_offset

    return length
