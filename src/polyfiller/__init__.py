# どこで: `src/polyfiller/__init__.py`。
# 何を: ルート `polyfiller` パッケージの公開 API を定義する。
# なぜ: 外部（CLI/GUI）からは fill / fill_naive / scale / measure_time だけを使えば済むようにするため。

from __future__ import annotations

from polyfiller.core.board import Shape, clear_board, new_board
from polyfiller.core.geometry import GeometryError, Polygon, scale, triangle
from polyfiller.core.naive import fill_naive
from polyfiller.core.scanline import fill, fill_polygon
from polyfiller.core.timing import measure_time

__all__ = [
    "GeometryError",
    "Polygon",
    "Shape",
    "clear_board",
    "fill",
    "fill_naive",
    "fill_polygon",
    "measure_time",
    "new_board",
    "scale",
    "triangle",
]
