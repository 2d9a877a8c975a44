"""経過時間計測ユーティリティのテスト群。"""

from __future__ import annotations

import time

import pytest

from polyfiller.core.timing import TimingStats, measure_time, repeat_time, summarize


def test_measure_time_returns_result_and_elapsed_seconds() -> None:
    def _work() -> str:
        time.sleep(0.01)
        return "done"

    ret, elapsed = measure_time(_work)
    assert ret == "done"
    assert 0.005 < elapsed < 5.0


def test_repeat_time_runs_warmup_then_repeats() -> None:
    calls: list[int] = []
    stats = repeat_time(lambda: calls.append(1), repeats=3, warmup=2)

    assert len(calls) == 5
    assert stats.n == 3
    assert 0.0 <= stats.min_ms <= stats.mean_ms <= stats.max_ms


def test_repeat_time_clamps_counts() -> None:
    calls: list[int] = []
    stats = repeat_time(lambda: calls.append(1), repeats=0, warmup=-1, disable_gc=True)

    assert len(calls) == 1
    assert stats.n == 1
    assert stats.stdev_ms == 0.0


def test_summarize() -> None:
    stats = summarize([1_000_000, 3_000_000])
    assert stats.mean_ms == pytest.approx(2.0)
    assert stats.stdev_ms == pytest.approx(2.0**0.5)
    assert stats.min_ms == pytest.approx(1.0)
    assert stats.max_ms == pytest.approx(3.0)
    assert stats.n == 2

    assert summarize([]) == TimingStats(mean_ms=0.0, stdev_ms=0.0, min_ms=0.0, max_ms=0.0, n=0)
