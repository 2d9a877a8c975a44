# どこで: `src/polyfiller/core/runtime_config.py`。
# 何を: config.yaml による実行時設定（探索・ロード・キャッシュ）を提供する。
# なぜ: 盤面サイズや表示文字、計測回数をコードを変えずに差し替えられるようにするため。

from __future__ import annotations

import logging
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """polyfiller の実行時設定。"""

    config_path: Path | None
    board_shape: tuple[int, int]
    filled_char: str
    empty_char: str
    timing_repeats: int
    timing_warmup: int
    log_level: int


_EXPLICIT_CONFIG_PATH: Path | None = None
_CONFIG_CACHE: RuntimeConfig | None = None


def set_config_path(path: str | Path | None) -> None:
    """以降の設定探索で使う明示 config パスを設定する。

    Notes
    -----
    `path` を None にすると明示指定を解除し、既定の探索に戻る。
    """

    global _EXPLICIT_CONFIG_PATH, _CONFIG_CACHE
    if path is None:
        _EXPLICIT_CONFIG_PATH = None
        _CONFIG_CACHE = None
        return
    p = Path(str(path)).expanduser()
    _EXPLICIT_CONFIG_PATH = p
    _CONFIG_CACHE = None


def _default_config_candidates() -> tuple[Path, ...]:
    cwd = Path.cwd()
    home = Path.home()
    return (
        cwd / ".polyfiller" / "config.yaml",
        home / ".config" / "polyfiller" / "config.yaml",
    )


def _as_mapping(value: Any, *, key: str) -> dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, dict):
        return dict(value)
    raise RuntimeError(f"{key} は mapping である必要があります: got={value!r}")


def _as_positive_int(value: Any, *, key: str) -> int:
    if value is None:
        raise RuntimeError(f"{key} が未設定です（同梱 default_config.yaml を確認してください）")
    if isinstance(value, bool):
        raise RuntimeError(f"{key} は整数である必要があります: got={value!r}")
    try:
        i = int(value)
    except Exception as exc:
        raise RuntimeError(f"{key} は整数である必要があります: got={value!r}") from exc
    if i <= 0:
        raise ValueError(f"{key} は正の値である必要があります: got={i}")
    return i


def _as_non_negative_int(value: Any, *, key: str) -> int:
    if value is None:
        raise RuntimeError(f"{key} が未設定です（同梱 default_config.yaml を確認してください）")
    try:
        i = int(value)
    except Exception as exc:
        raise RuntimeError(f"{key} は整数である必要があります: got={value!r}") from exc
    if i < 0:
        raise ValueError(f"{key} は 0 以上である必要があります: got={i}")
    return i


def _as_char(value: Any, *, key: str) -> str:
    if value is None:
        raise RuntimeError(f"{key} が未設定です（同梱 default_config.yaml を確認してください）")
    s = str(value)
    if len(s) != 1:
        raise ValueError(f"{key} は 1 文字である必要があります: got={s!r}")
    return s


def _as_log_level(value: Any, *, key: str) -> int:
    if value is None:
        raise RuntimeError(f"{key} が未設定です（同梱 default_config.yaml を確認してください）")
    name = str(value).strip().upper()
    if name not in _LOG_LEVELS:
        raise ValueError(f"{key} は {', '.join(_LOG_LEVELS)} のいずれか: got={value!r}")
    return int(getattr(logging, name))


def _load_yaml_text(text: str, *, source: str) -> dict[str, Any]:
    try:
        import yaml  # type: ignore[import-untyped]
    except Exception as exc:  # pragma: no cover
        raise RuntimeError(f"PyYAML を import できません: {exc}") from exc

    try:
        data = yaml.safe_load(text)
    except Exception as exc:
        raise RuntimeError(f"config.yaml の読み込みに失敗しました: source={source}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RuntimeError(f"config.yaml は mapping である必要があります: source={source}")

    return dict(data)


def _load_yaml_config(path: Path) -> dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    return _load_yaml_text(text, source=str(path))


def _load_packaged_default_config() -> dict[str, Any]:
    """同梱デフォルト config をロードして dict を返す。"""

    try:
        blob = (
            resources.files("polyfiller")
            .joinpath("resource", "default_config.yaml")
            .read_text(encoding="utf-8")
        )
    except Exception as exc:  # pragma: no cover
        raise RuntimeError(
            "同梱 default_config.yaml の読み込みに失敗しました"
            "（パッケージ配布物の package-data を確認してください）"
        ) from exc

    return _load_yaml_text(blob, source="polyfiller/resource/default_config.yaml")


def _merge_payload(base: dict[str, Any], override: dict[str, Any]) -> None:
    """override を base へ後勝ちで重ねる（セクション mapping は 1 段だけ中身をマージ）。"""
    for key, value in override.items():
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged = dict(current)
            merged.update(value)
            base[key] = merged
        else:
            base[key] = value


def runtime_config() -> RuntimeConfig:
    """実行時設定をロードして返す（キャッシュ）。

    上書き順（後勝ち）:
    1) 同梱 default_config.yaml
    2) `./.polyfiller/config.yaml` / `~/.config/polyfiller/config.yaml`（先に見つかった方）
    3) `set_config_path(...)` で指定した明示パス
    """

    global _CONFIG_CACHE
    if _CONFIG_CACHE is not None:
        return _CONFIG_CACHE

    explicit_path = _EXPLICIT_CONFIG_PATH
    if explicit_path is not None and not explicit_path.is_file():
        raise FileNotFoundError(f"config.yaml が見つかりません: {explicit_path}")

    discovered_path: Path | None = None
    for p in _default_config_candidates():
        if p.is_file():
            discovered_path = p
            break

    payload = _load_packaged_default_config()
    if discovered_path is not None:
        _merge_payload(payload, _load_yaml_config(discovered_path))
    if explicit_path is not None:
        _merge_payload(payload, _load_yaml_config(explicit_path))

    version = payload.get("version")
    if version is None:
        raise RuntimeError(
            "config.yaml の version が未設定です（同梱 default_config.yaml を確認してください）"
        )
    try:
        version_i = int(version)
    except Exception as exc:
        raise RuntimeError(f"config.yaml の version は整数である必要があります: got={version!r}") from exc
    if version_i != 1:
        raise RuntimeError(f"未対応の config.yaml version です: got={version_i}")

    board = _as_mapping(payload.get("board"), key="board")
    width = _as_positive_int(board.get("width"), key="board.width")
    height = _as_positive_int(board.get("height"), key="board.height")

    render = _as_mapping(payload.get("render"), key="render")
    filled_char = _as_char(render.get("filled_char"), key="render.filled_char")
    empty_char = _as_char(render.get("empty_char"), key="render.empty_char")

    timing = _as_mapping(payload.get("timing"), key="timing")
    repeats = _as_positive_int(timing.get("repeats"), key="timing.repeats")
    warmup = _as_non_negative_int(timing.get("warmup"), key="timing.warmup")

    log = _as_mapping(payload.get("logging"), key="logging")
    log_level = _as_log_level(log.get("level"), key="logging.level")

    cfg = RuntimeConfig(
        config_path=explicit_path or discovered_path,
        board_shape=(width, height),
        filled_char=filled_char,
        empty_char=empty_char,
        timing_repeats=repeats,
        timing_warmup=warmup,
        log_level=log_level,
    )
    _CONFIG_CACHE = cfg
    return cfg


__all__ = ["RuntimeConfig", "runtime_config", "set_config_path"]
