from __future__ import annotations

from importlib import metadata

_DIST_NAME = "ponyml"


def tool_version() -> str:
    """Версия установленного дистрибутива ponyml ("0.0.0" при запуске из исходников)."""
    try:
        return metadata.version(_DIST_NAME)
    except metadata.PackageNotFoundError:
        return "0.0.0"


__all__ = ["tool_version"]
