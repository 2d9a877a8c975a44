"""
どこで: `src/polyfiller/core/board.py`。
何を: ピクセルグリッドの寸法 Shape と、行優先の平坦な bool 配列 Board を扱う。
なぜ: 塗りつぶしは呼び出し側所有のバッファを書き換えるだけなので、確保・検証・表示をここへ集約するため。
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

Shape = tuple[int, int]


def validate_shape(shape: Sequence[int]) -> Shape:
    """(width, height) を正の int ペアに正規化して返す。"""
    if len(shape) != 2:
        raise ValueError(f"shape は (width, height) である必要がある: got={shape!r}")
    width = int(shape[0])
    height = int(shape[1])
    if width <= 0 or height <= 0:
        raise ValueError(f"shape は正の (width, height) である必要がある: got={shape!r}")
    return (width, height)


def new_board(shape: Sequence[int]) -> np.ndarray:
    """全ピクセル False の Board を確保する。"""
    width, height = validate_shape(shape)
    return np.zeros((width * height,), dtype=np.bool_)


def clear_board(board: np.ndarray) -> None:
    """Board をその場で全 False に戻す。"""
    board.fill(False)


def check_board(board: np.ndarray, shape: Sequence[int]) -> Shape:
    """board が shape の塗りつぶし先として使えるかを検証し、正規化した shape を返す。

    Notes
    -----
    塗りつぶしは board を直接書き換えるため、コピーを作る変換（dtype 変換・reshape）は行わない。
    """
    width, height = validate_shape(shape)
    if not isinstance(board, np.ndarray):
        raise ValueError(f"board は numpy 配列である必要がある: got={type(board).__name__}")
    if board.dtype != np.bool_:
        raise ValueError(f"board の dtype は bool である必要がある: got={board.dtype}")
    if board.ndim != 1:
        raise ValueError(f"board は 1 次元（行優先の平坦配列）である必要がある: got ndim={board.ndim}")
    if board.shape[0] != width * height:
        raise ValueError(
            f"board の長さが shape と一致しない: len={board.shape[0]}, shape={(width, height)}"
        )
    if not board.flags.writeable:
        raise ValueError("board が書き込み不可")
    if not board.flags.c_contiguous:
        raise ValueError("board は C 連続である必要がある")
    return (width, height)


def count_filled(board: np.ndarray) -> int:
    return int(np.count_nonzero(board))


def row_runs(board: np.ndarray, shape: Sequence[int], y: int) -> list[tuple[int, int]]:
    """行 y の連続塗り区間を [(x_start, x_end), ...]（両端含む）で返す。"""
    width, height = validate_shape(shape)
    if not 0 <= int(y) < height:
        raise IndexError(f"行 index が範囲外: y={y}, height={height}")
    row = np.asarray(board[int(y) * width : (int(y) + 1) * width], dtype=np.int8)
    # 0→1 が開始、1→0 が終了。両端に 0 を足して端の区間も拾う。
    diff = np.diff(np.concatenate(([0], row, [0])))
    starts = np.flatnonzero(diff == 1)
    ends = np.flatnonzero(diff == -1) - 1
    return [(int(s), int(e)) for s, e in zip(starts, ends)]


def board_to_text(
    board: np.ndarray,
    shape: Sequence[int],
    *,
    filled: str = "*",
    empty: str = "-",
) -> str:
    """Board を 1 行 1 スキャン行の文字列にする（末尾改行なし）。"""
    width, height = validate_shape(shape)
    grid = np.asarray(board, dtype=np.bool_).reshape(height, width)
    lines = ["".join(filled if v else empty for v in row) for row in grid]
    return "\n".join(lines)


def board_to_rgb(board: np.ndarray, shape: Sequence[int]) -> np.ndarray:
    """Board を uint8 shape (H, W, 3) の白黒画像にする（塗り=255）。"""
    width, height = validate_shape(shape)
    grid = np.asarray(board, dtype=np.bool_).reshape(height, width)
    img = np.zeros((height, width, 3), dtype=np.uint8)
    img[grid] = 255
    return img


__all__ = [
    "Shape",
    "board_to_rgb",
    "board_to_text",
    "check_board",
    "clear_board",
    "count_filled",
    "new_board",
    "row_runs",
    "validate_shape",
]
