"""
どこで: `src/polyfiller/core/timing.py`。
何を: 呼び出し 1 回の経過時間計測と、繰り返し計測の統計を提供する。
なぜ: scanline と naive の速度差を、JIT コンパイル時間を除いて比較するため。
"""

from __future__ import annotations

import gc
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class TimingStats:
    mean_ms: float
    stdev_ms: float
    min_ms: float
    max_ms: float
    n: int


def measure_time(f: Callable[[], T]) -> tuple[T, float]:
    """f() を 1 回実行し、(戻り値, 経過秒) を返す。"""
    t0 = time.perf_counter()
    ret = f()
    return ret, time.perf_counter() - t0


def repeat_time(
    f: Callable[[], object],
    *,
    repeats: int = 5,
    warmup: int = 1,
    disable_gc: bool = False,
) -> TimingStats:
    """f() を warmup 回捨ててから repeats 回計測し、統計を返す。

    Notes
    -----
    numba カーネルは初回呼び出しでコンパイルされるため、warmup >= 1 を推奨する。
    """
    w = max(int(warmup), 0)
    r = max(int(repeats), 1)

    for _ in range(w):
        f()

    times_ns: list[int] = []
    was_gc_enabled = False
    if disable_gc:
        was_gc_enabled = gc.isenabled()
        gc.disable()
    try:
        for _ in range(r):
            t0 = time.perf_counter_ns()
            f()
            times_ns.append(int(time.perf_counter_ns() - t0))
    finally:
        if disable_gc and was_gc_enabled:
            gc.enable()

    return summarize(times_ns)


def summarize(times_ns: list[int]) -> TimingStats:
    """ns 単位の計測列を ms 単位の統計にまとめる。"""
    if not times_ns:
        return TimingStats(mean_ms=0.0, stdev_ms=0.0, min_ms=0.0, max_ms=0.0, n=0)

    n = int(len(times_ns))
    mean_ns = float(sum(times_ns)) / float(n)
    if n <= 1:
        stdev_ns = 0.0
    else:
        var = sum((float(t) - mean_ns) ** 2 for t in times_ns) / float(n - 1)
        stdev_ns = float(var**0.5)

    return TimingStats(
        mean_ms=mean_ns / 1_000_000.0,
        stdev_ms=stdev_ns / 1_000_000.0,
        min_ms=float(min(times_ns)) / 1_000_000.0,
        max_ms=float(max(times_ns)) / 1_000_000.0,
        n=n,
    )


__all__ = ["TimingStats", "measure_time", "repeat_time", "summarize"]
