"""Tests for heat map gradients, the overlap loop and the ray cast."""

import numpy as np
import pytest

from layoutrefine.config import RasterConfig
from layoutrefine.grid import HeatGrid
from layoutrefine.heatmap import build_heat_map
from layoutrefine.model.primitives import LayoutNode, Vector
from layoutrefine.overlap import (
    _magnitude_factor,
    heat_map_gradient,
    heat_map_ray_cast,
    resolve_overlap,
)


@pytest.fixture
def config():
    return RasterConfig(cell_width=10, cell_height=10, cell_padding=2)


def test_isolated_cell_has_no_gradient():
    grid = HeatGrid(5, 5)
    grid.set_value(2, 2, 1)
    gradient, overlap = heat_map_gradient(grid, (2, 2), (1, 1))
    assert gradient == Vector(0.0, 0.0)
    assert not overlap


def test_stacked_cell_reports_overlap_without_gradient():
    grid = HeatGrid(5, 5)
    grid.set_value(2, 2, 2)
    gradient, overlap = heat_map_gradient(grid, (2, 2), (1, 1))
    assert gradient.magnitude_squared == 0.0
    assert overlap


def test_gradient_points_away_from_denser_side():
    grid = HeatGrid(7, 7)
    grid.set_value(3, 3, 1)
    grid.set_value(2, 3, 4)
    grid.set_value(3, 4, 1)
    gradient, overlap = heat_map_gradient(grid, (3, 3), (1, 1))
    assert gradient.x == pytest.approx(2.0)
    assert gradient.y == pytest.approx(-1.0)
    assert not overlap


def test_magnitude_factor_peaks_in_the_middle():
    assert [_magnitude_factor(i, 4) for i in range(4)] == [1, 2, 1, 1]
    assert [_magnitude_factor(i, 5) for i in range(5)] == [1, 2, 2, 1, 1]
    assert _magnitude_factor(0, 1) == 1


def test_border_cells_are_not_sampled():
    # Overlap on the outermost border of the grid is not detected.
    grid = HeatGrid(5, 5)
    grid.set_value(0, 0, 2)
    gradient, overlap = heat_map_gradient(grid, (0, 0), (1, 1))
    assert gradient == Vector(0.0, 0.0)
    assert not overlap


def test_two_coincident_nodes_are_pushed_apart(config):
    nodes = [
        LayoutNode(position=(0, 0), size=(10, 10), uid="a"),
        LayoutNode(position=(0, 0), size=(10, 10), uid="b"),
    ]
    heat_map = build_heat_map(nodes, config)

    iterations = resolve_overlap(nodes, heat_map, config)

    assert iterations == 2
    assert nodes[0].position.tolist() == [0, -12]
    assert nodes[1].position.tolist() == [0, 12]
    assert int(heat_map.to_array().max()) == 1


def test_fallback_pushes_away_from_origin(config):
    nodes = [
        LayoutNode(position=(48, 0), size=(10, 10)),
        LayoutNode(position=(48, 0), size=(10, 10)),
    ]
    heat_map = build_heat_map(nodes, config)
    resolve_overlap(nodes, heat_map, config)
    assert nodes[0].position.tolist() == [36, 0]
    assert nodes[1].position.tolist() == [60, 0]


def test_pass_with_overlap_pushes_nodes_without_gradient(config):
    nodes = [
        LayoutNode(position=(0, 0), size=(10, 10), uid="a"),
        LayoutNode(position=(0, 0), size=(10, 10), uid="b"),
        LayoutNode(position=(120, 0), size=(10, 10), uid="isolated"),
    ]
    heat_map = build_heat_map(nodes, config)

    iterations = resolve_overlap(nodes, heat_map, config)

    assert iterations == 2
    assert nodes[0].position.tolist() == [0, -12]
    assert nodes[1].position.tolist() == [0, 12]
    assert nodes[2].position.tolist() == [108, 0]


def test_isolated_nodes_stay_without_overlap(config):
    nodes = [
        LayoutNode(position=(0, 0), size=(10, 10)),
        LayoutNode(position=(120, 0), size=(10, 10)),
    ]
    heat_map = build_heat_map(nodes, config)

    assert resolve_overlap(nodes, heat_map, config) == 1
    assert [node.position.tolist() for node in nodes] == [[0, 0], [120, 0]]


def test_loop_respects_pass_limit_and_keeps_heat_map_in_sync(config):
    nodes = [
        LayoutNode(position=(0, 0), size=(10 + 7 * (i % 5), 10 + 5 * (i % 3)), uid=i)
        for i in range(20)
    ]
    sizes = [node.size.copy() for node in nodes]
    heat_map = build_heat_map(nodes, config)
    shape = (heat_map.columns_count, heat_map.rows_count)

    iterations = resolve_overlap(nodes, heat_map, config)

    assert 1 <= iterations <= config.max_iterations
    assert [node.uid for node in nodes] == list(range(20))
    for node, size in zip(nodes, sizes):
        assert np.array_equal(node.size, size)
        assert node.x % config.pitch_x == 0
        assert node.y % config.pitch_x == 0

    rebuilt = build_heat_map(nodes, config, shape=shape)
    assert np.array_equal(rebuilt.to_array(), heat_map.to_array())


def test_single_step_is_clamped(config):
    grid = HeatGrid(41, 41)
    node = LayoutNode(position=(0, 0), size=(10, 10))
    # a crowded column left of the node produces a large push to the right
    grid.set_value(20, 20, 1)
    grid.set_value(19, 20, 400)

    resolve_overlap([node], grid, RasterConfig(cell_width=10, cell_height=10, cell_padding=2, max_iterations=1))

    assert node.position.tolist() == [2 * config.pitch_x, 0]
    assert grid.get_value(22, 20) == 1
    assert grid.get_value(20, 20) == 0


def test_zero_passes_leave_nodes_alone():
    config = RasterConfig(cell_width=10, cell_height=10, cell_padding=2, max_iterations=0)
    nodes = [LayoutNode(position=(0, 0), size=(10, 10)) for _ in range(2)]
    heat_map = build_heat_map(nodes, config)
    assert resolve_overlap(nodes, heat_map, config) == 0
    assert all(node.position.tolist() == [0, 0] for node in nodes)


def test_nodes_outside_heat_map_are_skipped(config, caplog):
    nodes = [
        LayoutNode(position=(0, 0), size=(10, 10)),
        LayoutNode(position=(0, 0), size=(10, 10)),
        LayoutNode(position=(600, 0), size=(10, 10), uid="far"),
    ]
    heat_map = build_heat_map(nodes, config, shape=(21, 21))
    resolve_overlap(nodes, heat_map, config)
    assert nodes[2].position.tolist() == [600, 0]
    assert "leaving the heat map area in x" in caplog.text


def test_nodes_below_heat_map_are_skipped(config, caplog):
    nodes = [
        LayoutNode(position=(0, 0), size=(10, 10)),
        LayoutNode(position=(0, 0), size=(10, 10)),
        LayoutNode(position=(0, 600), size=(10, 10), uid="far"),
    ]
    heat_map = build_heat_map(nodes, config, shape=(21, 21))
    resolve_overlap(nodes, heat_map, config)
    assert nodes[2].position.tolist() == [0, 600]
    assert "Node far is leaving the heat map area in y" in caplog.text
    assert "area in x" not in caplog.text


def test_ray_cast_walks_dense_region():
    grid = HeatGrid(7, 7)
    for x in (3, 4, 5):
        grid.set_value(x, 3, 2)
    assert heat_map_ray_cast(grid, Vector(2, 3), Vector(1, 0), 2) == Vector(3.0, 0.0)
    assert heat_map_ray_cast(grid, Vector(2, 3), Vector(1, 0), 3) == Vector(0.0, 0.0)


def test_ray_cast_steps_each_axis_by_sign():
    grid = HeatGrid(7, 7)
    grid.set_value(4, 2, 1)
    grid.set_value(5, 1, 1)
    assert heat_map_ray_cast(grid, (3, 3), (0.3, -5.0), 1) == Vector(2.0, -2.0)


def test_ray_cast_stops_at_grid_border():
    grid = HeatGrid(7, 7)
    for x in range(7):
        grid.set_value(x, 3, 1)
    assert heat_map_ray_cast(grid, (1, 3), (1, 0), 1) == Vector(5.0, 0.0)


def test_ray_cast_degenerate_inputs():
    grid = HeatGrid(7, 7)
    grid.set_value(1, 3, 1)
    assert heat_map_ray_cast(grid, (0, 3), (1, 0), 1) == Vector(0.0, 0.0)
    assert heat_map_ray_cast(grid, (1, 3), (0, 0), 0) == Vector(0.0, 0.0)
