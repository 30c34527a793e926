"""
Graph Postprocessing
====================
Refines an already positioned graph layout.

Why is this file needed?
------------------------
It sequences the refinement steps for one node list:
1. Pull outliers toward the area weighted center of mass.
2. Snap every node onto the raster.
3. Build the heat map of the node footprints.
4. Push overlapping nodes apart until no overlap is left or the pass limit is hit.

The heat map lives only for the duration of one call, so independent layouts
can be processed concurrently as long as each call gets its own node list.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from layoutrefine.config import DEFAULT_CONFIG, RasterConfig
from layoutrefine.heatmap import build_heat_map
from layoutrefine.model.primitives import LayoutNode
from layoutrefine.outliers import center_of_mass, resolve_outliers
from layoutrefine.overlap import resolve_overlap
from layoutrefine.raster import align_node_on_raster

logger = logging.getLogger(__name__)

MIN_NODE_COUNT = 2


@dataclass
class PostprocessingResult:
    """Return object summarizing one postprocessing call."""
    skipped: bool
    iterations: int = 0
    center_of_mass: Optional[List[int]] = None
    heat_map_shape: Optional[tuple[int, int]] = None


class GraphPostprocessor:
    """
    Outlier correction, raster alignment and overlap removal for a node list.
    """

    def __init__(self, config: RasterConfig = DEFAULT_CONFIG) -> None:
        """
        Initialize the postprocessor.

        Args:
            config: Raster configuration used for every call.
        """
        self.config = config

    def do_postprocessing(self, nodes: Sequence[LayoutNode]) -> PostprocessingResult:
        """
        Refine the positions of `nodes` in place.

        Args:
            nodes: Nodes of the layout. Order and identity are preserved; sizes
                are not modified.

        Returns:
            Summary of what was done. Fewer than two nodes are left untouched.
        """
        if len(nodes) < MIN_NODE_COUNT:
            logger.info(f"Skipping postprocessing, need at least {MIN_NODE_COUNT} nodes but got {len(nodes)}")
            return PostprocessingResult(skipped=True)

        # get outliers closer to the rest of the graph
        center = center_of_mass(nodes)
        if center is not None:
            resolve_outliers(nodes, center)

        # nodes are aligned again every time they move during overlap resolution,
        # aligning all of them here covers the ones that never move
        for node in nodes:
            align_node_on_raster(node, self.config)

        heat_map = build_heat_map(nodes, self.config)
        iterations = resolve_overlap(nodes, heat_map, self.config)

        return PostprocessingResult(
            skipped=False,
            iterations=iterations,
            center_of_mass=center.tolist() if center is not None else None,
            heat_map_shape=(heat_map.columns_count, heat_map.rows_count),
        )


def postprocess(
    nodes: Sequence[LayoutNode],
    config: Optional[RasterConfig] = None,
) -> PostprocessingResult:
    """Shortcut for `GraphPostprocessor(config).do_postprocessing(nodes)`."""
    return GraphPostprocessor(config or DEFAULT_CONFIG).do_postprocessing(nodes)
