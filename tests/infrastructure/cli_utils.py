"""
Утилиты для запуска CLI в тестах.
"""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

# Корень репозитория: пакет ponyml должен импортироваться из дочернего процесса
REPO_ROOT = Path(__file__).resolve().parents[2]


def run_cli(root: Path, *args: str) -> subprocess.CompletedProcess:
    """
    Запускает `python -m ponyml` в указанной директории.

    Args:
        root: Рабочая директория процесса
        *args: Аргументы командной строки

    Returns:
        Результат выполнения процесса
    """
    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(REPO_ROOT), env.get("PYTHONPATH")]))
    return subprocess.run(
        [sys.executable, "-m", "ponyml", *args],
        cwd=root,
        env=env,
        capture_output=True,
        text=True,
        encoding="utf-8",
    )


__all__ = ["run_cli", "REPO_ROOT"]
