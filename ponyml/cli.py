from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import ParserConfig, find_config, load_config
from .errors import ConfigError
from .parser import RULES, parse_str
from .tokens import ParserError
from .version import tool_version

_LOG = logging.getLogger("ponyml")


def _setup_logging(verbose: bool) -> None:
    _LOG.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not _LOG.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        _LOG.addHandler(h)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="ponyml",
        description="Template parser for JSX markup with mustache interpolation and control blocks",
        add_help=True,
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {tool_version()}")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp_check = sub.add_parser("check", help="разобрать файлы и сообщить о синтаксических ошибках")
    sp_check.add_argument("files", nargs="+", metavar="FILE", help="файлы шаблонов")
    sp_check.add_argument(
        "--rule",
        default="root",
        choices=sorted(RULES),
        help="продукция грамматики, которой должен соответствовать весь файл (по умолчанию root)",
    )
    sp_check.add_argument(
        "--config",
        metavar="PATH",
        help="путь к ponyml.yaml (по умолчанию ищется в текущей директории)",
    )
    sp_check.add_argument("-v", "--verbose", action="store_true", help="отладочный вывод")

    return p


def _resolve_config(path: Optional[str]) -> ParserConfig:
    if path:
        p = Path(path)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {p}")
        return load_config(p)
    found = find_config(Path.cwd())
    return load_config(found) if found else ParserConfig()


def _check_files(files: List[str], rule: str, config: ParserConfig) -> int:
    failed = 0
    for name in files:
        try:
            text = Path(name).read_text(encoding="utf-8")
            parse_str(text, rule=rule, config=config)
        except ParserError as e:
            failed += 1
            sys.stderr.write(f"{name}:{e.line}:{e.column}: {e.message}\n")
        except OSError as e:
            failed += 1
            sys.stderr.write(f"{name}: {e.strerror or e}\n")
        else:
            sys.stdout.write(f"{name}: ok\n")
    _LOG.debug("Checked %d file(s), %d failed", len(files), failed)
    return 1 if failed else 0


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging(bool(getattr(ns, "verbose", False)))

    try:
        if ns.cmd == "check":
            config = _resolve_config(ns.config)
            return _check_files(ns.files, ns.rule, config)
    except ConfigError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
