"""CLI behaviour tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from tcogen import cli
from tcogen.cli import _build_parser

_CARD = (
    "from dataclasses import dataclass\n"
    "\n"
    "\n"
    "# templ:component-opts\n"
    "@dataclass\n"
    "class Card:\n"
    "    title: str\n"
)


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "configure_logging", lambda **_: None)


def test_cli_root_defaults_to_none() -> None:
    args = _build_parser().parse_args([])
    assert args.root is None
    assert args.verbose is False
    assert args.dry_run is False


def test_cli_accepts_root_and_flags() -> None:
    args = _build_parser().parse_args(["--verbose", "--dry-run", "src"])
    assert args.root == "src"
    assert args.verbose is True
    assert args.dry_run is True


def test_main_generates_modules_under_root(tmp_path: Path) -> None:
    (tmp_path / "card.py").write_text(_CARD, encoding="utf-8")

    cli.main([str(tmp_path)])

    assert (tmp_path / "card_tcogen.py").exists()


def test_main_defaults_to_current_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / "card.py").write_text(_CARD, encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    cli.main([])

    assert (tmp_path / "card_tcogen.py").exists()


def test_main_exits_non_zero_on_parse_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / "broken.py").write_text("def broken(:\n", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(tmp_path)])

    assert excinfo.value.code == 1
    assert "broken.py" in capsys.readouterr().err


def test_main_exits_non_zero_for_missing_root(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(tmp_path / "missing")])

    assert excinfo.value.code == 1


def test_main_exits_non_zero_on_invalid_config(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / ".tcogen.yml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(tmp_path)])

    assert excinfo.value.code == 1
    assert "invalid configuration" in capsys.readouterr().err


def test_main_dry_run_writes_nothing(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / "card.py").write_text(_CARD, encoding="utf-8")

    cli.main(["--dry-run", str(tmp_path)])

    assert not (tmp_path / "card_tcogen.py").exists()
    assert "1 of 1 generated module(s) would change (dry-run)" in capsys.readouterr().out


def test_main_uses_explicit_config_file(tmp_path: Path) -> None:
    (tmp_path / "legacy").mkdir()
    (tmp_path / "legacy" / "card.py").write_text(_CARD, encoding="utf-8")
    (tmp_path / "card.py").write_text(_CARD, encoding="utf-8")
    config = tmp_path / "codegen.yml"
    config.write_text("exclude_paths:\n  - legacy/\n", encoding="utf-8")

    cli.main(["--config", str(config), str(tmp_path)])

    assert (tmp_path / "card_tcogen.py").exists()
    assert not (tmp_path / "legacy" / "card_tcogen.py").exists()


def test_main_exits_non_zero_for_missing_explicit_config(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    (tmp_path / "card.py").write_text(_CARD, encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--config", str(tmp_path / "absent.yml"), str(tmp_path)])

    assert excinfo.value.code == 1
    assert "configuration file not found" in capsys.readouterr().err
    assert not (tmp_path / "card_tcogen.py").exists()


def test_main_passes_log_file_to_logging(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    calls = []
    monkeypatch.setattr(cli, "configure_logging", lambda **kwargs: calls.append(kwargs))
    log_file = tmp_path / "logs" / "tcogen.log"

    cli.main(["--verbose", "--log-file", str(log_file), str(tmp_path)])

    assert calls == [{"verbose": True, "log_file": log_file}]
