from __future__ import annotations

import importlib
import json
from pathlib import Path

import pytest

from twig_cap.config import settings
from twig_cap.storage import JsonDataStore, StoredData


def test_console_entrypoint_exposes_app() -> None:
    pytest.importorskip("typer")

    module = importlib.import_module("twig_cap.main")

    assert hasattr(module, "app")
    assert module.app is not None


@pytest.fixture
def cli(tmp_path: Path, monkeypatch):
    typer_testing = pytest.importorskip("typer.testing")
    from twig_cap.main import app

    monkeypatch.setattr(settings, "config_dir", str(tmp_path / "config"))
    monkeypatch.setattr(settings, "data_dir", str(tmp_path / "data"))
    runner = typer_testing.CliRunner()
    return lambda *args: runner.invoke(app, list(args), catch_exceptions=False)


def test_status_reports_counts(cli, tmp_path: Path) -> None:
    JsonDataStore(tmp_path / "data").save("TwigCap", StoredData(building_twigs={7: {1, 2}}))

    result = cli("status")

    assert result.exit_code == 0
    assert "building_id" in result.stdout
    assert "'twigs': 2" in result.stdout


def test_show_config_rejects_broken_file(cli, tmp_path: Path) -> None:
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "TwigCap.json").write_text(
        json.dumps({"Version": "1.1.0", "Maximum Number Of Twig Blocks Allowed Per Building": -3}),
        encoding="utf-8",
    )

    result = cli("show-config")

    assert result.exit_code == 1
    assert "Invalid configuration" in result.stdout


def test_reset_deletes_data(cli, tmp_path: Path) -> None:
    store = JsonDataStore(tmp_path / "data")
    store.save("TwigCap", StoredData(building_twigs={7: {1}}))

    result = cli("reset", "--yes")

    assert result.exit_code == 0
    assert not store.exists("TwigCap")


def test_status_leaves_disk_untouched(cli, tmp_path: Path) -> None:
    result = cli("status")

    assert result.exit_code == 0
    assert not (tmp_path / "config").exists()
    assert not (tmp_path / "data").exists()


def test_show_config_does_not_rewrite_old_file(cli, tmp_path: Path) -> None:
    (tmp_path / "config").mkdir()
    path = tmp_path / "config" / "TwigCap.json"
    original = json.dumps({"Version": "1.0.0", "Maximum Number Of Twig Blocks Allowed Per Building": 8})
    path.write_text(original, encoding="utf-8")

    result = cli("show-config")

    assert result.exit_code == 0
    assert "1.1.0" in result.stdout
    assert path.read_text(encoding="utf-8") == original
