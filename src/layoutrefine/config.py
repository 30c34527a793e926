"""
Raster Configuration
====================
This module holds the raster constants used by the postprocessing pass.

Why is this file needed?
------------------------
1. Isolation: every postprocessing call receives its own RasterConfig, so two
   layouts with different cell sizes can be refined side by side.
2. Validation: the pitch of the raster is used as a divisor everywhere, so bad
   values are rejected once, here, instead of failing deep inside the loop.

Exports:
    RasterConfig: Frozen container for cell width, height and padding.
    DEFAULT_CONFIG: Configuration matching the default graph view style.
    load_config: Reads a RasterConfig from a JSON file.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any, Dict, Union

logger = logging.getLogger(__name__)

# Default graph view style
DEFAULT_CELL_SIZE: int = 5
DEFAULT_CELL_PADDING: int = 10

MAX_ITERATIONS: int = 15
MAX_STEP_CELLS: int = 2


@dataclass(frozen=True)
class RasterConfig:
    """Cell extents and padding defining the alignment raster."""
    cell_width: int = DEFAULT_CELL_SIZE
    cell_height: int = DEFAULT_CELL_SIZE
    cell_padding: int = DEFAULT_CELL_PADDING
    max_iterations: int = MAX_ITERATIONS
    max_step_cells: int = MAX_STEP_CELLS  # Upper bound of a single move, in pitches

    def __post_init__(self) -> None:
        for name in ("cell_width", "cell_height", "cell_padding", "max_iterations", "max_step_cells"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError(f"'{name}' must be an integer, got {value!r}.")

        if self.cell_width <= 0 or self.cell_height <= 0:
            raise ValueError(
                f"Cell extents must be positive, got width={self.cell_width}, height={self.cell_height}."
            )
        if self.cell_padding < 0:
            raise ValueError(f"Cell padding must not be negative, got {self.cell_padding}.")
        if self.max_iterations < 0:
            raise ValueError(f"'max_iterations' must not be negative, got {self.max_iterations}.")
        if self.max_step_cells < 1:
            raise ValueError(f"'max_step_cells' must be at least 1, got {self.max_step_cells}.")

    @property
    def pitch_x(self) -> int:
        """Horizontal raster pitch (cell width + padding)."""
        return self.cell_width + self.cell_padding

    @property
    def pitch_y(self) -> int:
        """Vertical raster pitch (cell height + padding)."""
        return self.cell_height + self.cell_padding

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> RasterConfig:
        """Build a configuration from a dict, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown raster config keys: {sorted(unknown)}")
        return cls(**{k: v for k, v in data.items() if k in known})


DEFAULT_CONFIG = RasterConfig()


def load_config(path: Union[str, Path]) -> RasterConfig:
    """
    Read a RasterConfig from a JSON file.

    Args:
        path: Path to a JSON object with any of the RasterConfig fields.

    Raises:
        ValueError: If the file does not contain a JSON object or a value is invalid.
    """
    logger.info(f"Loading raster config from: {path}")
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Raster config must be a JSON object, got {type(data).__name__}.")
    return RasterConfig.from_dict(data)
