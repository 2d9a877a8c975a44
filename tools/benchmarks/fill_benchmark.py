"""
どこで: `tools/benchmarks/fill_benchmark.py`。
何を: プリセットポリゴンを複数の盤面サイズで scanline / naive 塗りし、計測結果を JSON に出力する。
なぜ: 参照実装との速度差と一致率を、盤面サイズごとに一覧・比較するため。
"""

from __future__ import annotations

import argparse
import json
import platform
import subprocess
import sys
from datetime import datetime
from pathlib import Path
from typing import Any


def _bootstrap_import_paths() -> None:
    script_dir = Path(__file__).resolve().parent
    project_root = script_dir.parents[1]
    src_dir = project_root / "src"

    # `python tools/benchmarks/fill_benchmark.py` と
    # `python -m tools.benchmarks.fill_benchmark` の両方で動かす。
    if str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))


_bootstrap_import_paths()

import numpy as np  # noqa: E402

from polyfiller.core.board import new_board  # noqa: E402
from polyfiller.core.geometry import scale  # noqa: E402
from polyfiller.core.naive import fill_naive  # noqa: E402
from polyfiller.core.presets import BASE_SHAPE, preset, preset_names  # noqa: E402
from polyfiller.core.scanline import fill_polygon  # noqa: E402
from polyfiller.core.timing import TimingStats, repeat_time  # noqa: E402


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    out_root = Path(args.out).expanduser().resolve()
    run_id = _normalize_run_id(str(args.run_id))
    runs_dir = out_root / "runs"
    runs_dir.mkdir(parents=True, exist_ok=True)
    json_path = runs_dir / f"{run_id}.json"

    sizes = _parse_sizes(str(args.sizes))
    presets = list(preset_names())
    if args.only:
        only = {s.strip() for s in str(args.only).split(",") if s.strip()}
        presets = [p for p in presets if p in only]
    if not presets or not sizes:
        print("ケースが 0 件です。--only/--sizes を確認してください。")  # noqa: T201
        return 2

    meta: dict[str, Any] = {
        "run_id": run_id,
        "created_at": datetime.now().isoformat(timespec="seconds"),
        "python": sys.version.replace("\n", " "),
        "platform": platform.platform(),
        "repeats": int(args.repeats),
        "warmup": int(args.warmup),
        "sizes": sizes,
        "json_filename": json_path.name,
    }
    git_sha = _try_git_sha()
    if git_sha is not None:
        meta["git_sha"] = git_sha

    results: list[dict[str, Any]] = []
    for name in presets:
        for size in sizes:
            results.append(
                _bench_case(
                    name,
                    size,
                    repeats=int(args.repeats),
                    warmup=int(args.warmup),
                    disable_gc=bool(args.disable_gc),
                    skip_naive=bool(args.skip_naive),
                )
            )

    json_path.write_text(
        json.dumps({"meta": meta, "results": results}, ensure_ascii=False, indent=2),
        encoding="utf-8",
    )

    for row in results:
        naive_ms = row.get("naive", {}).get("mean_ms")
        naive_txt = f"{naive_ms:9.3f}ms" if naive_ms is not None else "      skip"
        print(  # noqa: T201
            f"{row['preset']:>9} {row['width']:>5}x{row['height']:<5}"
            f" scanline={row['scanline']['mean_ms']:9.3f}ms naive={naive_txt}"
            f" mismatches={row.get('mismatches', '-')}"
        )
    print(f"[polyfiller-bench] wrote: {json_path}")  # noqa: T201
    return 0


def _bench_case(
    name: str,
    size: int,
    *,
    repeats: int,
    warmup: int,
    disable_gc: bool,
    skip_naive: bool,
) -> dict[str, Any]:
    factor = float(size) / float(BASE_SHAPE[0])
    shape = (int(size), max(1, int(round(BASE_SHAPE[1] * factor))))
    poly = preset(name)
    scale(poly, factor)

    scan_board = new_board(shape)

    def _scan() -> None:
        scan_board.fill(False)
        fill_polygon(scan_board, shape, poly)

    row: dict[str, Any] = {
        "preset": name,
        "width": shape[0],
        "height": shape[1],
        "scanline": _stats_dict(
            repeat_time(_scan, repeats=repeats, warmup=warmup, disable_gc=disable_gc)
        ),
    }
    row["filled"] = int(np.count_nonzero(scan_board))
    if skip_naive:
        return row

    naive_board = new_board(shape)

    def _naive() -> None:
        naive_board.fill(False)
        fill_naive(naive_board, shape, poly)

    row["naive"] = _stats_dict(
        repeat_time(_naive, repeats=repeats, warmup=warmup, disable_gc=disable_gc)
    )
    row["mismatches"] = int(np.count_nonzero(scan_board != naive_board))
    return row


def _stats_dict(stats: TimingStats) -> dict[str, Any]:
    return {
        "mean_ms": stats.mean_ms,
        "stdev_ms": stats.stdev_ms,
        "min_ms": stats.min_ms,
        "max_ms": stats.max_ms,
        "n": stats.n,
    }


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="fill_benchmark")
    p.add_argument(
        "--out",
        default="data/output/benchmarks",
        help="出力ルート（<out>/runs/<run_id>.json を作る）",
    )
    p.add_argument("--run-id", default="", help="出力ファイル名（%%Y%%m%%d_%%H%%M%%S。省略時は現在時刻）")
    p.add_argument("--repeats", type=int, default=10, help="本計測の反復回数")
    p.add_argument("--warmup", type=int, default=2, help="ウォームアップ回数（JIT 除外用）")
    p.add_argument("--sizes", default="64,256,512", help="盤面幅をカンマ区切りで指定")
    p.add_argument("--only", default="", help="プリセットをカンマ区切りで指定（例: triangle,poly）")
    p.add_argument("--skip-naive", action="store_true", help="naive の計測を省く（大きな盤面向け）")
    p.add_argument(
        "--disable-gc",
        action="store_true",
        help="計測中の GC を無効化する（ノイズ低減。メモリ増に注意）",
    )
    return p.parse_args(argv)


def _parse_sizes(text: str) -> list[int]:
    sizes: list[int] = []
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            v = int(part)
        except ValueError:
            raise SystemExit(f"--sizes must be comma separated integers: {text}")
        if v <= 0:
            raise SystemExit(f"--sizes must be positive: {text}")
        sizes.append(v)
    return sizes


def _normalize_run_id(value: str) -> str:
    if not value:
        value = datetime.now().strftime("%Y%m%d_%H%M%S")
    try:
        datetime.strptime(value, "%Y%m%d_%H%M%S")
    except ValueError:
        raise SystemExit(f"--run-id must be %Y%m%d_%H%M%S: {value}")
    return value


def _try_git_sha() -> str | None:
    try:
        cp = subprocess.run(
            ["git", "rev-parse", "HEAD"],
            check=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
        )
    except Exception:
        return None
    sha = cp.stdout.strip()
    return sha if sha else None


if __name__ == "__main__":
    raise SystemExit(main())
