"""
Тесты командной строки `ponyml check`.
"""

from pathlib import Path

from ponyml.cli import main
from tests.infrastructure import run_cli, write


def test_check_ok(project: Path, capsys):
    assert main(["check", "good.pony"]) == 0
    out = capsys.readouterr()
    assert out.out == "good.pony: ok\n"
    assert out.err == ""


def test_check_reports_location(project: Path, capsys):
    assert main(["check", "good.pony", "bad.pony"]) == 1
    out = capsys.readouterr()
    assert "good.pony: ok" in out.out
    assert out.err == "bad.pony:3:1: Did not find appropriate closing tag `</Button>`\n"


def test_check_rule(project: Path, capsys):
    write(project / "snippet.pony", "Hello {name}! {#if admin}<Badge/>{/if}")
    assert main(["check", "--rule", "children", "snippet.pony"]) == 0
    assert main(["check", "snippet.pony"]) == 1
    assert "Expected either element or fragment here" in capsys.readouterr().err


def test_missing_input_file(project: Path, capsys):
    assert main(["check", "nope.pony"]) == 1
    assert capsys.readouterr().err.startswith("nope.pony: ")


def test_config_discovered_in_cwd(project: Path, capsys):
    write(project / "path.pony", "<ui::Card>x</ui>")
    assert main(["check", "path.pony"]) == 0

    write(project / "ponyml.yaml", "strict_closing_names: true\n")
    assert main(["check", "path.pony"]) == 1
    assert "`</ui::Card>`" in capsys.readouterr().err


def test_explicit_config(project: Path, capsys):
    write(project / "conf" / "limits.yaml", "max_depth: 1\n")
    assert main(["check", "--config", "conf/limits.yaml", "good.pony"]) == 1
    assert "Maximum nesting depth of 1 exceeded" in capsys.readouterr().err


def test_explicit_config_not_found(project: Path, capsys):
    assert main(["check", "--config", "missing.yaml", "good.pony"]) == 2
    assert "Config file not found" in capsys.readouterr().err


def test_invalid_config(project: Path, capsys):
    write(project / "ponyml.yaml", "max_depth: zero\n")
    assert main(["check", "good.pony"]) == 2
    assert "max_depth must be a positive integer" in capsys.readouterr().err


def test_module_entry_point(project: Path):
    result = run_cli(project, "check", "good.pony", "bad.pony")
    assert result.returncode == 1
    assert "good.pony: ok" in result.stdout
    assert "bad.pony:3:1:" in result.stderr


def test_version(tmp_path: Path):
    result = run_cli(tmp_path, "--version")
    assert result.returncode == 0
    assert result.stdout.startswith("ponyml ")
