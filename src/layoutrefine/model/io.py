"""
Input/Output Manager (JSON)
Reads and writes node lists for command-line runs.

A node record is `{"id": ..., "position": [x, y], "size": [w, h]}`; the id is
optional. A file holds either a list of records or `{"nodes": [...]}`.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Sequence, Union

from layoutrefine.model.primitives import LayoutNode

logger = logging.getLogger(__name__)


def _as_int_pair(value: Any, key: str) -> List[int]:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ValueError(f"'{key}' must be a list of two integers, got {value!r}")
    pair = []
    for v in value:
        if isinstance(v, bool) or not isinstance(v, (int, float)) or int(v) != v:
            raise ValueError(f"'{key}' must be a list of two integers, got {value!r}")
        pair.append(int(v))
    return pair


def nodes_from_dicts(records: Sequence[Dict[str, Any]]) -> List[LayoutNode]:
    """
    Create nodes from plain records.

    Raises:
        ValueError: If a record is malformed; the message names its index.
    """
    nodes = []
    for index, record in enumerate(records):
        try:
            position = _as_int_pair(record["position"], "position")
            size = _as_int_pair(record["size"], "size")
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Invalid node record at index {index}: {e}") from e

        if size[0] < 0 or size[1] < 0:
            raise ValueError(f"Invalid node record at index {index}: negative size {size}")

        nodes.append(LayoutNode(position=position, size=size, uid=record.get("id")))
    return nodes


def nodes_to_dicts(nodes: Sequence[LayoutNode]) -> List[Dict[str, Any]]:
    records = []
    for node in nodes:
        record: Dict[str, Any] = {"position": node.position.tolist(), "size": node.size.tolist()}
        if node.uid is not None:
            record["id"] = node.uid
        records.append(record)
    return records


def load_nodes(filepath: Union[str, Path]) -> List[LayoutNode]:
    logger.info(f"Loading nodes from: {filepath}")
    with open(filepath, "r", encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get("nodes")
    if not isinstance(data, list):
        raise ValueError("Node file must contain a list of nodes or an object with a 'nodes' list.")

    nodes = nodes_from_dicts(data)
    logger.debug(f"Loaded {len(nodes)} nodes.")
    return nodes


def dump_nodes(nodes: Sequence[LayoutNode]) -> str:
    return json.dumps({"nodes": nodes_to_dicts(nodes)}, indent=2)


def save_nodes(nodes: Sequence[LayoutNode], filepath: Union[str, Path]) -> None:
    logger.info(f"Saving {len(nodes)} nodes to: {filepath}")
    with open(filepath, "w", encoding="utf-8") as f:
        f.write(dump_nodes(nodes))
