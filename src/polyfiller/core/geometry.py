"""
どこで: `src/polyfiller/core/geometry.py`。
何を: 2D ベクトル演算・ポリゴン型・辺とスキャン行の交点計算を提供する。
なぜ: scanline / naive の両塗りつぶしが同一の交点計算を共有し、結果を突き合わせられるようにするため。
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
from numba import njit

MIN_VERTICES = 3

# int64 へ変換できる最大の index。これ以上の float は飽和させる。
_INDEX_MAX = 9_223_372_036_854_775_807


class GeometryError(ValueError):
    """ポリゴン入力が不正（頂点数不足・非有限座標・形状違い）であることを表す。"""


@njit(cache=True)  # type: ignore[misc]
def vecsub(lhs: tuple[float, float], rhs: tuple[float, float]) -> tuple[float, float]:
    return (lhs[0] - rhs[0], lhs[1] - rhs[1])


@njit(cache=True)  # type: ignore[misc]
def length(v: tuple[float, float]) -> float:
    return math.sqrt(v[0] * v[0] + v[1] * v[1])


@njit(cache=True, error_model="numpy")  # type: ignore[misc]
def normalize(v: tuple[float, float]) -> tuple[float, float]:
    """長さ 1 に正規化する（長さ 0 では NaN/Inf を返し、例外は投げない）。"""
    n = length(v)
    return (v[0] / n, v[1] / n)


@njit(cache=True)  # type: ignore[misc]
def to_index(f: float) -> int:
    """float を非負の index に飽和変換する。

    負値と NaN は 0、2**63 以上（inf を含む）は `_INDEX_MAX`、それ以外は切り捨て。
    numba の int() は範囲外で負値に化けるため、上端も変換前に止める。
    """
    if not f > 0.0:
        return 0
    if f >= 9.223372036854775808e18:
        return _INDEX_MAX
    return int(f)


@njit(cache=True)  # type: ignore[misc]
def round_half_away(x: float) -> float:
    """最近接整数へ丸める（0.5 は 0 から遠い側へ）。"""
    # Python の round() は偶数丸めなので使わない。
    if x >= 0.0:
        return float(np.floor(x + 0.5))
    return -float(np.floor(-x + 0.5))


@njit(cache=True)  # type: ignore[misc]
def bounding_box(vertices: np.ndarray) -> tuple[float, float, float, float]:
    """頂点列の軸平行バウンディングボックス (xmin, ymin, xmax, ymax) を返す。"""
    x0 = float(vertices[0, 0])
    y0 = float(vertices[0, 1])
    x1 = x0
    y1 = y0
    for i in range(1, vertices.shape[0]):
        x = float(vertices[i, 0])
        y = float(vertices[i, 1])
        if x < x0:
            x0 = x
        if x > x1:
            x1 = x
        if y < y0:
            y0 = y
        if y > y1:
            y1 = y
    return (x0, y0, x1, y1)


@njit(cache=True, error_model="numpy")  # type: ignore[misc]
def edge_row_intersection(vertices: np.ndarray, i: int, y: float) -> float:
    """辺 (i, i+1 mod N) とスキャン行 y の交点列を返す（交差しなければ NaN）。

    交点は辺の正規化方向に沿った距離 t で求め、`0 <= t <= 辺長` のときだけ採用する。
    水平辺は 1 点で交わらないので正規化の前に除外する。
    返す x は `round_half_away` で整数ピクセル列に丸めた値。
    """
    n = vertices.shape[0]
    j = (i + 1) % n
    v = (float(vertices[i, 0]), float(vertices[i, 1]))
    d = vecsub((float(vertices[j, 0]), float(vertices[j, 1])), v)
    if d[1] == 0.0:
        return np.nan
    dn = normalize(d)
    t = (y - v[1]) / dn[1]
    if t < 0.0 or length(d) < t:
        return np.nan
    x = (y - v[1]) * dn[0] / dn[1] + v[0]
    return round_half_away(x)


def validate_vertices(vertices: np.ndarray) -> np.ndarray:
    """塗りつぶしに渡せる頂点配列かを検証し、そのまま返す。

    Raises
    ------
    GeometryError
        shape が (N, 2) でない、N < 3、または非有限座標を含む場合。
    """
    if vertices.ndim != 2 or vertices.shape[1] != 2:
        raise GeometryError(f"vertices は shape (N, 2) である必要がある: got={vertices.shape}")
    if vertices.shape[0] < MIN_VERTICES:
        raise GeometryError(
            f"ポリゴンには {MIN_VERTICES} 頂点以上が必要: got={vertices.shape[0]}"
        )
    if not bool(np.all(np.isfinite(vertices))):
        bad = np.argwhere(~np.isfinite(vertices))
        raise GeometryError(f"頂点に非有限値が含まれる: index={int(bad[0, 0])}")
    return vertices


@dataclass(slots=True, eq=False)
class Polygon:
    """頂点列で表す閉じたポリゴン（最後の頂点は先頭へつながる）。

    Parameters
    ----------
    vertices : array-like
        shape (N, 2) の頂点列。float64 の C 連続配列へコピーして保持する。

    Notes
    -----
    凸性・単純性・回り方向は仮定しない。
    `scale` / `move_vertex` は `vertices` をその場で書き換える。
    """

    vertices: np.ndarray

    def __post_init__(self) -> None:
        arr = np.array(self.vertices, dtype=np.float64, order="C")
        self.vertices = validate_vertices(arr)

    def __len__(self) -> int:
        return int(self.vertices.shape[0])

    def edges(self) -> list[tuple[np.ndarray, np.ndarray]]:
        """(始点, 終点) の辺リストを返す（末尾→先頭の閉じ辺を含む）。"""
        nxt = np.roll(self.vertices, -1, axis=0)
        return [(self.vertices[i], nxt[i]) for i in range(len(self))]


def triangle(
    a: Sequence[float],
    b: Sequence[float],
    c: Sequence[float],
) -> Polygon:
    """3 頂点のポリゴンを返す。"""
    return Polygon([a, b, c])


def as_vertices(poly: Polygon | np.ndarray | Sequence[Sequence[float]]) -> np.ndarray:
    """Polygon または (N, 2) 配列ライクから、検証済みの float64 頂点配列を返す。"""
    if isinstance(poly, Polygon):
        arr = poly.vertices
    else:
        arr = np.asarray(poly, dtype=np.float64)
    # njit カーネルへ渡すので C 連続に揃える（既に連続ならコピーしない）。
    arr = np.ascontiguousarray(arr, dtype=np.float64)
    return validate_vertices(arr)


def _mutable_vertices(poly: Polygon | np.ndarray) -> np.ndarray:
    if isinstance(poly, Polygon):
        return poly.vertices
    if isinstance(poly, np.ndarray) and poly.ndim == 2 and poly.shape[1] == 2:
        if not np.issubdtype(poly.dtype, np.floating):
            raise TypeError(f"その場で書き換えるには浮動小数配列が必要: dtype={poly.dtype}")
        return poly
    raise TypeError(f"Polygon または shape (N, 2) の ndarray が必要: got={type(poly).__name__}")


def scale(poly: Polygon | np.ndarray, factor: float) -> None:
    """全頂点座標を factor 倍する（その場で書き換え、原点中心の等方スケール）。"""
    vertices = _mutable_vertices(poly)
    vertices *= float(factor)


def move_vertex(poly: Polygon | np.ndarray, index: int, pos: Sequence[float]) -> None:
    """index 番目の頂点を pos に置き換える（その場で書き換え）。"""
    vertices = _mutable_vertices(poly)
    n = int(vertices.shape[0])
    i = int(index)
    if not -n <= i < n:
        raise IndexError(f"頂点 index が範囲外: index={i}, n={n}")
    vertices[i, 0] = float(pos[0])
    vertices[i, 1] = float(pos[1])


def pick_vertex(
    poly: Polygon | np.ndarray,
    pos: Sequence[float],
    radius: float,
) -> int | None:
    """pos から radius 以内で最も近い頂点の index を返す。無ければ None。"""
    vertices = poly.vertices if isinstance(poly, Polygon) else np.asarray(poly, dtype=np.float64)
    if vertices.shape[0] == 0:
        return None
    p = np.asarray(pos, dtype=np.float64)
    dist = np.hypot(vertices[:, 0] - p[0], vertices[:, 1] - p[1])
    i = int(np.argmin(dist))
    if float(dist[i]) <= float(radius):
        return i
    return None


def polygon_area(poly: Polygon | np.ndarray) -> float:
    """2D ポリゴンの面積絶対値を返す（shoelace）。"""
    vertices = poly.vertices if isinstance(poly, Polygon) else np.asarray(poly, dtype=np.float64)
    if vertices.shape[0] < 3:
        return 0.0
    x = vertices[:, 0]
    y = vertices[:, 1]
    return float(0.5 * abs(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1))))


__all__ = [
    "GeometryError",
    "MIN_VERTICES",
    "Polygon",
    "as_vertices",
    "bounding_box",
    "edge_row_intersection",
    "length",
    "move_vertex",
    "normalize",
    "pick_vertex",
    "polygon_area",
    "round_half_away",
    "scale",
    "to_index",
    "triangle",
    "validate_vertices",
    "vecsub",
]
