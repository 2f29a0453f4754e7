from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import ConfigError

logger = logging.getLogger(__name__)

_yaml = YAML(typ="safe")
CONFIG_FILE = "ponyml.yaml"


@dataclass(frozen=True)
class ParserConfig:
    """
    Настройки парсера.

    Attributes:
        max_depth: Максимальная глубина вложенности узлов (элементов, фрагментов, блоков)
        strict_closing_names: Требовать совпадения числа сегментов в имени закрывающего тега
    """
    max_depth: int = 128
    strict_closing_names: bool = False


DEFAULT_CONFIG = ParserConfig()


def max_depth_ceiling() -> int:
    """
    Наибольшее допустимое значение max_depth.

    Один уровень вложенности занимает до шести кадров стека интерпретатора.
    """
    return sys.getrecursionlimit() // 6


def _read_yaml_map(path: Path) -> Dict[str, Any]:
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    except YAMLError as e:
        raise ConfigError(f"{path.name}: invalid YAML: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"{path.name}: top-level must be a mapping")
    return raw


def config_from_mapping(raw: Dict[str, Any], *, source: str = CONFIG_FILE) -> ParserConfig:
    """
    Строит ParserConfig из словаря, проверяя ключи и типы значений.

    Raises:
        ConfigError: При неизвестных ключах или значениях неверного типа
    """
    known = {f.name for f in fields(ParserConfig)}
    unknown = sorted(str(k) for k in raw if k not in known)
    if unknown:
        raise ConfigError(f"{source}: unknown keys: {', '.join(unknown)}")

    values: Dict[str, Any] = {}

    if "max_depth" in raw:
        depth = raw["max_depth"]
        # bool - подкласс int, отсекаем явно
        if isinstance(depth, bool) or not isinstance(depth, int) or depth <= 0:
            raise ConfigError(f"{source}: max_depth must be a positive integer, got {depth!r}")
        ceiling = max_depth_ceiling()
        if depth > ceiling:
            raise ConfigError(f"{source}: max_depth must not exceed {ceiling}, got {depth}")
        values["max_depth"] = depth

    if "strict_closing_names" in raw:
        strict = raw["strict_closing_names"]
        if not isinstance(strict, bool):
            raise ConfigError(f"{source}: strict_closing_names must be a boolean, got {strict!r}")
        values["strict_closing_names"] = strict

    return ParserConfig(**values)


def load_config(path: Path) -> ParserConfig:
    """
    Загружает конфигурацию парсера из YAML-файла.

    Отсутствующий файл означает настройки по умолчанию.

    Raises:
        ConfigError: При некорректном содержимом файла
    """
    if not path.is_file():
        logger.debug("Config file %s not found, using defaults", path)
        return DEFAULT_CONFIG
    cfg = config_from_mapping(_read_yaml_map(path), source=path.name)
    logger.debug("Loaded config from %s: %s", path, cfg)
    return cfg


def find_config(start: Path) -> Optional[Path]:
    """Ищет ponyml.yaml в указанной директории."""
    candidate = start / CONFIG_FILE
    return candidate if candidate.is_file() else None


__all__ = ["ParserConfig", "DEFAULT_CONFIG", "CONFIG_FILE", "max_depth_ceiling", "config_from_mapping", "load_config", "find_config"]
