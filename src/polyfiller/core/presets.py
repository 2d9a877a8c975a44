"""デモ用の既定ポリゴン（基準盤面 64x35 上の座標）。"""

from __future__ import annotations

from polyfiller.core.geometry import Polygon

BASE_SHAPE: tuple[int, int] = (64, 35)

_PRESETS: dict[str, tuple[tuple[float, float], ...]] = {
    "triangle": ((30.0, 5.0), (10.0, 20.0), (50.0, 30.0)),
    "poly": ((30.0, 5.0), (10.0, 20.0), (15.0, 30.0), (50.0, 25.0)),
    "pentagon": ((30.0, 5.0), (10.0, 20.0), (15.0, 30.0), (30.0, 23.0), (50.0, 30.0)),
}


def preset_names() -> tuple[str, ...]:
    return tuple(_PRESETS.keys())


def preset(name: str) -> Polygon:
    """名前付きプリセットの新しい Polygon を返す（呼び出しごとに独立したコピー）。"""
    try:
        vertices = _PRESETS[str(name)]
    except KeyError:
        raise KeyError(f"未知のプリセット: {name!r}（候補: {', '.join(_PRESETS)}）") from None
    return Polygon(vertices)


__all__ = ["BASE_SHAPE", "preset", "preset_names"]
