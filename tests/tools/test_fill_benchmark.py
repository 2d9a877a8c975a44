"""tools.benchmarks.fill_benchmark の JSON 出力に関するテスト。"""

from __future__ import annotations

import json
from pathlib import Path

from tools.benchmarks.fill_benchmark import main


def test_fill_benchmark_writes_json_report(tmp_path: Path) -> None:
    rc = main(
        [
            "--out",
            str(tmp_path),
            "--run-id",
            "20250101_000000",
            "--repeats",
            "1",
            "--warmup",
            "1",
            "--sizes",
            "64,128",
            "--only",
            "triangle",
        ]
    )
    assert rc == 0

    report = json.loads((tmp_path / "runs" / "20250101_000000.json").read_text(encoding="utf-8"))
    assert report["meta"]["sizes"] == [64, 128]
    rows = report["results"]
    assert [(r["preset"], r["width"], r["height"]) for r in rows] == [
        ("triangle", 64, 35),
        ("triangle", 128, 70),
    ]
    for row in rows:
        assert row["scanline"]["n"] == 1
        assert row["naive"]["n"] == 1
        assert row["filled"] > 0
        assert row["mismatches"] >= 0


def test_fill_benchmark_skip_naive(tmp_path: Path) -> None:
    rc = main(
        [
            "--out",
            str(tmp_path),
            "--run-id",
            "20250101_000001",
            "--repeats",
            "1",
            "--sizes",
            "64",
        ]
        + ["--skip-naive"]
    )
    assert rc == 0

    report = json.loads((tmp_path / "runs" / "20250101_000001.json").read_text(encoding="utf-8"))
    assert len(report["results"]) == 3
    assert all("naive" not in r for r in report["results"])


def test_fill_benchmark_rejects_empty_selection(tmp_path: Path) -> None:
    assert main(["--out", str(tmp_path), "--only", "star"]) == 2
