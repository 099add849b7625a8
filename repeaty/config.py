"""Настройки приложения из `repeaty.toml`.

Файл необязателен: без него используются значения по умолчанию.

    [render]
    default_repeat = 5
    default_dpi = 72
    chunk_size = 4194304
    max_workers = 8

    [output]
    output_dir = "out"

    [logging]
    log_file = "repeaty.log"
    level = "INFO"
"""
from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from repeaty.models.image_model import DEFAULT_DPI
from repeaty.models.output_spec import DEFAULT_REPEAT
from repeaty.services.compositor import DEFAULT_CHUNK_SIZE
from repeaty.services.output_naming import executable_dir

CONFIG_FILENAME = "repeaty.toml"


@dataclass
class RenderConfig:
    default_repeat: float = DEFAULT_REPEAT
    default_dpi: float = DEFAULT_DPI
    chunk_size: int = DEFAULT_CHUNK_SIZE
    max_workers: Optional[int] = None


@dataclass
class OutputConfig:
    # None: папка программы
    output_dir: Optional[Path] = None


@dataclass
class LoggingConfig:
    log_file: Path = Path("repeaty.log")
    level: str = "INFO"


@dataclass
class AppConfig:
    render: RenderConfig = field(default_factory=RenderConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def default_config_path() -> Path:
    return executable_dir() / CONFIG_FILENAME


def _resolve_path(path_value: str, base_dir: Path) -> Path:
    p = Path(path_value)
    if p.is_absolute():
        return p
    return (base_dir / p).resolve()


def _positive_number(section: Dict[str, Any], key: str, default: float) -> float:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not value > 0:
        raise ValueError(f"'{key}' must be a positive number, got {value!r}")
    return float(value)


def _positive_int(section: Dict[str, Any], key: str, default: Optional[int]) -> Optional[int]:
    value = section.get(key, default)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"'{key}' must be a positive integer, got {value!r}")
    return value


def _section(raw: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = raw.get(name, {})
    if not isinstance(section, dict):
        raise ValueError(f"[{name}] must be a table")
    return section


def load_config(path: Optional[Path] = None) -> AppConfig:
    """Читает TOML. Отсутствующий файл по умолчанию не ошибка.

    Raises:
        FileNotFoundError: явно указанный файл не найден.
        ValueError: неверные значения или синтаксис TOML.
    """
    explicit = path is not None
    path = Path(path) if explicit else default_config_path()
    if not path.exists():
        if explicit:
            raise FileNotFoundError(f"Config file not found: {path}")
        return AppConfig()

    try:
        with path.open("rb") as f:
            raw = tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Invalid TOML in {path}: {exc}") from exc

    base_dir = path.resolve().parent
    render = _section(raw, "render")
    output = _section(raw, "output")
    log = _section(raw, "logging")

    level = str(log.get("level", "INFO")).upper()
    if level not in logging.getLevelNamesMapping():
        raise ValueError(f"Unknown log level: {level}")

    output_dir = output.get("output_dir")
    return AppConfig(
        render=RenderConfig(
            default_repeat=_positive_number(render, "default_repeat", DEFAULT_REPEAT),
            default_dpi=_positive_number(render, "default_dpi", DEFAULT_DPI),
            chunk_size=_positive_int(render, "chunk_size", DEFAULT_CHUNK_SIZE),
            max_workers=_positive_int(render, "max_workers", None),
        ),
        output=OutputConfig(
            output_dir=_resolve_path(output_dir, base_dir) if output_dir else None,
        ),
        logging=LoggingConfig(
            log_file=_resolve_path(log.get("log_file", "repeaty.log"), base_dir),
            level=level,
        ),
    )
