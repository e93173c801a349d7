"""Admin CLI for inspecting twig cap state on disk."""

from __future__ import annotations

from pathlib import Path

import typer
from rich import print

from twig_cap.config import (
    PLUGIN_NAME,
    ConfigurationError,
    config_path_for,
    read_config,
    settings,
)
from twig_cap.registry import TwigRegistry
from twig_cap.storage import JsonDataStore, StoredData
from twig_cap.telemetry import configure_logging

app = typer.Typer(help="Twig cap administration")


@app.callback()
def main(log_level: str = typer.Option(None, help="Override TWIG_CAP_LOG_LEVEL")) -> None:
    configure_logging(log_level or settings.log_level)


def _load_config_or_exit():
    try:
        return read_config(config_path_for(settings.config_dir))
    except ConfigurationError as exc:
        print({"error": str(exc)})
        raise typer.Exit(code=1)


@app.command("show-config")
def show_config() -> None:
    """Print the effective configuration, migrated in memory only."""
    config = _load_config_or_exit()
    print(
        {
            "path": str(config_path_for(settings.config_dir)),
            "config": config.model_dump(by_alias=True),
        }
    )


@app.command()
def status(building: int = typer.Option(None, help="Only report this building id")) -> None:
    """Print twig counts per building against the configured maximum."""
    config = _load_config_or_exit()
    snapshot = StoredData()
    if Path(settings.data_dir).is_dir():
        snapshot = JsonDataStore(settings.data_dir).load_or_create(PLUGIN_NAME, StoredData)
    registry = TwigRegistry.from_snapshot(snapshot)
    maximum = config.maximum_twigs_per_building

    building_ids = [building] if building is not None else registry.buildings()
    rows = [
        {
            "building_id": building_id,
            "twigs": registry.count_for(building_id),
            "at_limit": registry.count_for(building_id) >= maximum,
        }
        for building_id in building_ids
    ]
    print({"maximum": maximum, "buildings": rows})


@app.command()
def reset(yes: bool = typer.Option(False, "--yes", help="Skip the confirmation prompt")) -> None:
    """Delete the persisted twig registry."""
    store = JsonDataStore(settings.data_dir)
    if not store.exists(PLUGIN_NAME):
        print({"reset": False, "reason": "no data file"})
        return
    if not yes:
        typer.confirm(f"Delete {store.file_path(PLUGIN_NAME)}?", abort=True)
    store.delete(PLUGIN_NAME)
    print({"reset": True, "path": str(store.file_path(PLUGIN_NAME))})


if __name__ == "__main__":
    app()
