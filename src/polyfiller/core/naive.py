"""
どこで: `src/polyfiller/core/naive.py`。
何を: ピクセルごとのレイキャスト（偶奇規則）でポリゴンを塗る参照実装。
なぜ: スキャンライン塗りの正しさの突き合わせと、最悪ケースの速度比較の基準にするため。
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
    round_half_away,
    to_index,
)

_logger = logging.getLogger(__name__)


@njit(cache=True, error_model="numpy")  # type: ignore[misc]
def _fill_naive_njit(vertices: np.ndarray, board: np.ndarray, width: int, height: int) -> int:
    """ピクセル総当たり塗りの本体（Numba 版）。塗ったピクセル数を返す。"""
    n = int(vertices.shape[0])
    x0, y0, x1, y1 = bounding_box(vertices)

    row_lo = to_index(max(y0, 0.0))
    row_hi = min(to_index(y1), height - 1)
    # 交点列は丸め済みなので、列範囲も丸めた bbox で取る（floor だと右端の交点列を取りこぼす）。
    col_lo = to_index(round_half_away(x0))
    col_hi = min(to_index(round_half_away(x1)), width - 1)

    filled = 0
    for y in range(row_lo, row_hi + 1):
        yf = float(y)
        row_base = y * width
        for x in range(col_lo, col_hi + 1):
            xf = float(x)
            crossings = 0
            on_boundary = False
            for i in range(n):
                s = edge_row_intersection(vertices, i, yf)
                if np.isnan(s) or s < xf:
                    continue
                if s == xf:
                    on_boundary = True
                crossings += 1
            # 境界上のピクセルも内部扱い（スキャンライン側の両端含む区間と揃える）。
            if on_boundary or crossings % 2 == 1:
                board[x + row_base] = True
                filled += 1
    return filled


def fill_naive(
    board: np.ndarray,
    shape: Sequence[int],
    poly: Polygon | np.ndarray | Sequence[Sequence[float]],
) -> None:
    """bbox 内の全ピクセルについて、右向きレイの交差数の偶奇で内部判定して塗る。

    計算量は O(width * height * 辺数)。検証とベンチマーク用で、大きな盤面での常用は想定しない。

    Notes
    -----
    `fill_polygon` と同じく **board はクリアしない**（True を立てるだけ）。
    交点は `fill_polygon` と同一の `edge_row_intersection` で求め、
    交点列 s が s >= x を満たす辺を数える。交点がちょうどピクセル上にある場合も塗る。

    `fill_polygon` と食い違うのは、スキャン行が頂点をちょうど通る行（三角形の
    上下端など）だけ。`fill_polygon` は共有頂点の交点を 1 つに潰して偶奇で捨てるが、
    こちらはその頂点ピクセルを境界として塗る。
    """
    width, height = check_board(board, shape)
    vertices = as_vertices(poly)
    filled = _fill_naive_njit(vertices, board, width, height)
    _logger.debug(
        "fill_naive: n=%d shape=%s filled=%d",
        vertices.shape[0],
        (width, height),
        filled,
    )


__all__ = ["fill_naive"]
