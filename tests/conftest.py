import logging
from pathlib import Path

import pytest

from tests.infrastructure.file_utils import write


@pytest.fixture
def project(tmp_path: Path, monkeypatch) -> Path:
    """Рабочая директория с двумя шаблонами: корректным и с ошибкой."""
    write(tmp_path / "good.pony", "<Button primary>\n    Hello {name}!\n</Button>\n")
    write(tmp_path / "bad.pony", "<Button>\n    Hello\n")
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture(autouse=True)
def _reset_ponyml_logger():
    """CLI настраивает логгер ponyml; восстанавливаем его после каждого теста."""
    logger = logging.getLogger("ponyml")
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
