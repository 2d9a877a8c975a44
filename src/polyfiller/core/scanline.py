"""
どこで: `src/polyfiller/core/scanline.py`。
何を: スキャンライン交点法でポリゴンを Board へ塗りつぶす。
なぜ: 行ごとに辺との交点だけを求めればよく、ピクセル総当たりより桁違いに速いため。
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np
from numba import njit

from polyfiller.core.board import check_board
from polyfiller.core.geometry import (
    Polygon,
    as_vertices,
    bounding_box,
    edge_row_intersection,
    to_index,
)

_logger = logging.getLogger(__name__)


@njit(cache=True)  # type: ignore[misc]
def _row_range(vertices: np.ndarray, height: int) -> tuple[int, int]:
    """走査するスキャン行の範囲 [lo, hi]（両端含む、グリッドへクランプ済み）を返す。"""
    _x0, y0, _x1, y1 = bounding_box(vertices)
    lo = to_index(max(y0, 0.0))
    hi = min(to_index(y1), height - 1)
    return lo, hi


@njit(cache=True, error_model="numpy")  # type: ignore[misc]
def _fill_scanline_njit(
    vertices: np.ndarray,
    board: np.ndarray,
    width: int,
    height: int,
    outline: bool,
) -> int:
    """スキャンライン塗りの本体（Numba 版）。書き込んだピクセル数（重複含む）を返す。"""
    n = int(vertices.shape[0])
    lo, hi = _row_range(vertices, height)

    # 1 行の交点は辺数を超えない。
    xs = np.empty((n,), dtype=np.float64)
    writes = 0
    for y in range(lo, hi + 1):
        yf = float(y)
        row_base = y * width
        count = 0
        for i in range(n):
            x = edge_row_intersection(vertices, i, yf)
            if np.isnan(x):
                continue
            if outline:
                # 盤外の交点は捨てる（クランプすると端の列に誤って描く）。
                if x >= 0.0 and x < float(width):
                    board[int(x) + row_base] = True
                    writes += 1
            elif count == 0 or xs[count - 1] != x:
                # 直前と同値のときだけ捨てる（共有頂点の二重計上対策。非連続の重複は残る）。
                xs[count] = x
                count += 1

        if outline or count < 2:
            continue

        row_xs = np.sort(xs[:count])
        # 偶奇規則: [x0, x1], [x2, x3], ... を塗る。奇数個なら末尾は捨てる。
        for k in range(0, count - 1, 2):
            x_lo = max(row_xs[k], 0.0)
            x_hi = min(row_xs[k + 1], float(width - 1))
            if x_lo > x_hi:
                continue
            for x_i in range(int(x_lo), int(x_hi) + 1):
                board[x_i + row_base] = True
                writes += 1
    return writes


def fill_polygon(
    board: np.ndarray,
    shape: Sequence[int],
    poly: Polygon | np.ndarray | Sequence[Sequence[float]],
    outline: bool = False,
) -> None:
    """ポリゴン内部（outline=True なら境界交点のみ）を board に塗る。

    Parameters
    ----------
    board : np.ndarray
        bool 型・長さ width*height の行優先平坦配列。その場で書き換える。
    shape : tuple[int, int]
        (width, height)。
    poly : Polygon | array-like
        shape (N, 2) の頂点列（N >= 3、閉じは暗黙）。
    outline : bool, default False
        True なら各スキャン行の交点ピクセルだけを塗る。

    Notes
    -----
    **board はクリアしない。** False→True の書き込みしか行わないため、
    同じ board へ複数回塗ると結果は累積する（outline と塗りの重ね合わせ等）。
    新しい結果が欲しい場合は呼び出し側で `clear_board` してから呼ぶこと。

    区間は両端を含む [x0, x1] で塗り、盤外にはみ出した部分は書き込まない。
    交点の重複除去は「直前と同値」のみで、3 本以上の辺が同じ行・同じ列で
    交わる場合の偶奇は保証しない。

    Raises
    ------
    GeometryError
        頂点数が 3 未満、または非有限座標を含む場合。
    ValueError
        shape が正でない、または board が shape と整合しない場合。
    """
    width, height = check_board(board, shape)
    vertices = as_vertices(poly)
    writes = _fill_scanline_njit(vertices, board, width, height, bool(outline))
    _logger.debug(
        "fill_polygon: n=%d shape=%s outline=%s writes=%d",
        vertices.shape[0],
        (width, height),
        bool(outline),
        writes,
    )


fill = fill_polygon

__all__ = ["fill", "fill_polygon"]
