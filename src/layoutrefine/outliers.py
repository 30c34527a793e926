"""
Outlier Resolution
Pulls nodes that lie far away from the rest of the layout toward its center of mass.
"""
from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np

from layoutrefine.model.primitives import LayoutNode
from layoutrefine.raster import trunc_divmod

logger = logging.getLogger(__name__)


def center_of_mass(nodes: Sequence[LayoutNode]) -> Optional[np.ndarray]:
    """
    Area weighted average of the node positions.

    Args:
        nodes: Nodes of the layout; the mass of a node is its area.

    Returns:
        The integer center of mass (truncated toward zero), or None when the
        total mass is zero.
    """
    weighted = np.zeros(2, dtype=np.int64)
    total_mass = 0
    for node in nodes:
        weighted += node.position * node.mass
        total_mass += node.mass

    if total_mass == 0:
        logger.debug("Total node mass is zero, no center of mass.")
        return None

    center = np.array(
        [trunc_divmod(int(weighted[0]), total_mass)[0], trunc_divmod(int(weighted[1]), total_mass)[0]],
        dtype=np.int64,
    )
    logger.debug(f"Center of mass: {center.tolist()}")
    return center


def resolve_outliers(nodes: Sequence[LayoutNode], center: Sequence[int]) -> None:
    """
    Move every node toward `center`, far away nodes stronger than close ones.

    Each node moves by `(center - position) * sqrt(dist / max_dist)`, so the
    node farthest away lands on the center while nodes near it barely move.
    This is a single correction step, not a simulation.

    Args:
        nodes: Nodes to move in place (at least 2).
        center: Attractor, usually the center of mass.
    """
    if len(nodes) < 2:
        logger.info(f"Skipping outlier resolution, need at least 2 nodes but got {len(nodes)}")
        return

    positions = np.array([node.position for node in nodes], dtype=np.float64)
    to_center = np.asarray(center, dtype=np.float64) - positions
    distances = np.linalg.norm(to_center, axis=1)

    max_dist = float(distances.max())
    if max_dist == 0.0:
        logger.debug("All nodes coincide with the center, no outliers to resolve.")
        return

    # causes far away nodes to be affected stronger than nodes close to the center
    dist_factors = np.sqrt(distances / max_dist)
    offsets = np.trunc(to_center * dist_factors[:, np.newaxis]).astype(np.int64)

    for node, offset in zip(nodes, offsets):
        node.move_by(int(offset[0]), int(offset[1]))
