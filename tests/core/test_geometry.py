"""geometry の基本演算・Polygon 型・交点計算に関するテスト群。"""

from __future__ import annotations

import math

import numpy as np
import pytest

from polyfiller.core.geometry import (
    GeometryError,
    Polygon,
    as_vertices,
    bounding_box,
    edge_row_intersection,
    length,
    move_vertex,
    normalize,
    pick_vertex,
    polygon_area,
    round_half_away,
    scale,
    to_index,
    triangle,
    vecsub,
)

_TRIANGLE = np.array([[30.0, 5.0], [10.0, 20.0], [50.0, 30.0]], dtype=np.float64)


def test_vecsub_length_normalize() -> None:
    assert vecsub((3.0, 5.0), (1.0, 2.0)) == (2.0, 3.0)
    assert length((3.0, 4.0)) == pytest.approx(5.0)
    nx, ny = normalize((3.0, 4.0))
    assert nx == pytest.approx(0.6)
    assert ny == pytest.approx(0.8)


def test_normalize_zero_length_returns_nan_instead_of_raising() -> None:
    nx, ny = normalize((0.0, 0.0))
    assert math.isnan(nx)
    assert math.isnan(ny)


def test_to_index_saturates_negative_and_nan() -> None:
    assert to_index(-2.5) == 0
    assert to_index(0.0) == 0
    assert to_index(3.9) == 3
    assert to_index(float("nan")) == 0


def test_to_index_saturates_above_int64_range() -> None:
    big = to_index(1e19)
    assert big > 0
    assert to_index(float("inf")) == big
    assert to_index(9.2e18) == 9_200_000_000_000_000_000


def test_round_half_away_from_zero() -> None:
    assert round_half_away(2.5) == 3.0
    assert round_half_away(-2.5) == -3.0
    assert round_half_away(2.4) == 2.0
    assert round_half_away(-0.4) == 0.0


def test_bounding_box() -> None:
    assert bounding_box(_TRIANGLE) == (10.0, 5.0, 50.0, 30.0)


def test_edge_row_intersection_inside_segment_is_rounded() -> None:
    # 辺 (30,5)->(10,20) は y=11 で x=22。
    assert edge_row_intersection(_TRIANGLE, 0, 11.0) == 22.0
    # 閉じ辺 (50,30)->(30,5) は y=25 で x=46。
    assert edge_row_intersection(_TRIANGLE, 2, 25.0) == 46.0


def test_edge_row_intersection_outside_segment_is_nan() -> None:
    assert math.isnan(edge_row_intersection(_TRIANGLE, 0, 4.0))
    assert math.isnan(edge_row_intersection(_TRIANGLE, 0, 21.0))


def test_edge_row_intersection_skips_horizontal_edges() -> None:
    square = np.array([[0.0, 0.0], [10.0, 0.0], [10.0, 10.0], [0.0, 10.0]], dtype=np.float64)
    assert math.isnan(edge_row_intersection(square, 0, 0.0))
    assert math.isnan(edge_row_intersection(square, 2, 10.0))


def test_polygon_copies_input_as_float64() -> None:
    src = np.array([[0, 0], [4, 0], [0, 3]], dtype=np.int64)
    poly = Polygon(src)
    src[0, 0] = 99

    assert poly.vertices.dtype == np.float64
    assert poly.vertices.flags.c_contiguous
    assert float(poly.vertices[0, 0]) == 0.0
    assert len(poly) == 3


@pytest.mark.parametrize(
    "vertices",
    [
        [[0.0, 0.0], [1.0, 1.0]],
        [[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0]],
        [[0.0, 0.0], [float("nan"), 1.0], [2.0, 0.0]],
        [[0.0, 0.0], [float("inf"), 1.0], [2.0, 0.0]],
    ],
)
def test_polygon_rejects_invalid_vertices(vertices: list[list[float]]) -> None:
    with pytest.raises(GeometryError):
        Polygon(vertices)


def test_geometry_error_is_value_error() -> None:
    assert issubclass(GeometryError, ValueError)


def test_as_vertices_validates_raw_arrays() -> None:
    out = as_vertices([[0, 0], [4, 0], [0, 3]])
    assert out.dtype == np.float64
    with pytest.raises(GeometryError):
        as_vertices([[0.0, 0.0], [1.0, 1.0]])


def test_triangle_and_edges_close_the_cycle() -> None:
    tri = triangle((30.0, 5.0), (10.0, 20.0), (50.0, 30.0))
    edges = tri.edges()
    assert len(tri) == 3
    assert len(edges) == 3
    start, end = edges[-1]
    assert start.tolist() == [50.0, 30.0]
    assert end.tolist() == [30.0, 5.0]


def test_scale_polygon_in_place() -> None:
    tri = triangle((30.0, 5.0), (10.0, 20.0), (50.0, 30.0))
    vertices = tri.vertices
    scale(tri, 2.0)

    assert tri.vertices is vertices
    np.testing.assert_allclose(tri.vertices, _TRIANGLE * 2.0)


def test_scale_ndarray_in_place_and_rejects_other_inputs() -> None:
    arr = _TRIANGLE.copy()
    scale(arr, 0.5)
    np.testing.assert_allclose(arr, _TRIANGLE * 0.5)

    with pytest.raises(TypeError):
        scale([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]], 2.0)  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        scale(np.array([[0, 0], [1, 0], [0, 1]], dtype=np.int64), 2.0)


def test_move_vertex_replaces_single_vertex() -> None:
    tri = triangle((30.0, 5.0), (10.0, 20.0), (50.0, 30.0))
    move_vertex(tri, 1, (12.5, 18.0))
    assert tri.vertices.tolist() == [[30.0, 5.0], [12.5, 18.0], [50.0, 30.0]]

    with pytest.raises(IndexError):
        move_vertex(tri, 3, (0.0, 0.0))


def test_pick_vertex_returns_nearest_within_radius() -> None:
    tri = triangle((30.0, 5.0), (10.0, 20.0), (50.0, 30.0))
    assert pick_vertex(tri, (11.0, 21.0), 5.5) == 1
    assert pick_vertex(tri, (49.0, 29.0), 5.5) == 2
    assert pick_vertex(tri, (30.0, 18.0), 5.5) is None


def test_polygon_area() -> None:
    assert polygon_area(_TRIANGLE) == pytest.approx(400.0)
    assert polygon_area(np.zeros((2, 2))) == 0.0
