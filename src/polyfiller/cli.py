"""
どこで: `src/polyfiller/cli.py`。
何を: プリセットポリゴンを塗って盤面と所要時間を表示するコマンドライン入口。
なぜ: scanline / naive の結果と速度を端末だけで確認できるようにするため。
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from polyfiller.core.board import Shape, board_to_text, clear_board, new_board
from polyfiller.core.geometry import scale
from polyfiller.core.naive import fill_naive
from polyfiller.core.presets import BASE_SHAPE, preset, preset_names
from polyfiller.core.runtime_config import runtime_config, set_config_path
from polyfiller.core.scanline import fill_polygon
from polyfiller.core.timing import repeat_time

_logger = logging.getLogger(__name__)

_HELP_EPILOG = """\
tokens (順不同):
  poly       4 頂点のポリゴンを塗る（既定は三角形）
  pentagon   5 頂点のポリゴンを塗る
  outline    交点ピクセルだけを塗る
  naive      ピクセル総当たりの参照実装で塗り、scanline との差分数を表示する
  noprint    盤面を表示しない
  <N>        盤面幅を N にし、ポリゴンを N/64 倍する（高さは比率を保つ）
  help       このヘルプを表示する
"""


@dataclass(frozen=True, slots=True)
class CliOptions:
    preset: str = "triangle"
    outline: bool = False
    naive: bool = False
    print_board: bool = True
    size: int | None = None
    show_help: bool = False


def parse_tokens(tokens: Sequence[str]) -> CliOptions:
    """位置引数トークン列を CliOptions へ変換する。未知のトークンは ValueError。"""
    preset_name = "triangle"
    outline = False
    naive = False
    print_board = True
    size: int | None = None
    show_help = False

    for raw in tokens:
        token = str(raw).strip()
        if token in preset_names():
            preset_name = token
        elif token == "outline":
            outline = True
        elif token == "naive":
            naive = True
        elif token == "noprint":
            print_board = False
        elif token == "help":
            show_help = True
        elif token.isdigit():
            size = int(token)
            if size <= 0:
                raise ValueError(f"サイズは正の整数である必要がある: got={token!r}")
        else:
            raise ValueError(f"未知のトークン: {token!r}")

    if naive and outline:
        raise ValueError("naive と outline は同時に指定できない（naive に outline モードは無い）")

    return CliOptions(
        preset=preset_name,
        outline=outline,
        naive=naive,
        print_board=print_board,
        size=size,
        show_help=show_help,
    )


def resolve_shape(board_shape: Shape, size: int | None) -> tuple[Shape, float]:
    """盤面 shape と、プリセット座標に掛けるスケール倍率を返す。"""
    width, height = board_shape
    if size is not None:
        # 高さは設定盤面の縦横比を保つ。
        height = max(1, int(round(float(height) * float(size) / float(width))))
        width = int(size)
    factor = float(width) / float(BASE_SHAPE[0])
    return (int(width), int(height)), factor


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="polyfiller",
        description="ポリゴンをスキャンライン法で bool 盤面へ塗りつぶす",
        epilog=_HELP_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("tokens", nargs="*", help="poly / pentagon / outline / naive / noprint / <N> / help")
    p.add_argument("--config", default=None, help="明示 config.yaml のパス")
    return p


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        opts = parse_tokens(args.tokens)
    except ValueError as exc:
        parser.error(str(exc))

    if opts.show_help:
        parser.print_help()
        return 0

    if args.config is not None:
        set_config_path(args.config)
    cfg = runtime_config()
    logging.basicConfig(level=cfg.log_level)

    shape, factor = resolve_shape(cfg.board_shape, opts.size)
    poly = preset(opts.preset)
    if factor != 1.0:
        scale(poly, factor)
    _logger.info("preset=%s shape=%s scale=%.3f", opts.preset, shape, factor)

    board = new_board(shape)

    def _run() -> None:
        clear_board(board)
        if opts.naive:
            fill_naive(board, shape, poly)
        else:
            fill_polygon(board, shape, poly, opts.outline)

    stats = repeat_time(_run, repeats=cfg.timing_repeats, warmup=cfg.timing_warmup)

    if opts.print_board:
        print(board_to_text(board, shape, filled=cfg.filled_char, empty=cfg.empty_char))  # noqa: T201

    label = "naive" if opts.naive else "scanline"
    print(f"{label} fill time: {stats.mean_ms:.3f}ms (n={stats.n})")  # noqa: T201

    if opts.naive:
        reference = new_board(shape)
        fill_polygon(reference, shape, poly, False)
        mismatches = int(np.count_nonzero(reference != board))
        print(f"mismatches vs scanline: {mismatches}")  # noqa: T201
        if mismatches:
            _logger.warning("naive と scanline の結果が %d ピクセル異なる", mismatches)

    return 0


__all__ = ["CliOptions", "main", "parse_tokens", "resolve_shape"]
