"""Refinement pass for positioned graph layouts: outlier pull, raster snap, overlap removal."""
from layoutrefine.config import DEFAULT_CONFIG, RasterConfig, load_config
from layoutrefine.grid import HeatGrid
from layoutrefine.model.primitives import LayoutNode, Vector
from layoutrefine.postprocessor import GraphPostprocessor, PostprocessingResult, postprocess

__all__ = [
    "DEFAULT_CONFIG",
    "GraphPostprocessor",
    "HeatGrid",
    "LayoutNode",
    "PostprocessingResult",
    "RasterConfig",
    "Vector",
    "load_config",
    "postprocess",
]
