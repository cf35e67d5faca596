from pathlib import Path

from rich.console import Console

from compatmatrix.cli.commands.explore import ExploreSession
from compatmatrix.config.resolution import RenderSettings
from compatmatrix.domain.filters import NO_FILTER, BetterFilter, UniqueFilter
from compatmatrix.engine.dispatcher import InteractionDispatcher
from compatmatrix.engine.table import CellRef


def _session(registry, tmp_path: Path) -> ExploreSession:
    settings = RenderSettings(
        source="data.json",
        output=tmp_path / "matrix.html",
        filter=NO_FILTER,
        title="Compatibility Matrix",
        stylesheet=None,
    )
    console = Console(record=True, width=160, color_system=None)
    return ExploreSession(InteractionDispatcher(registry), settings, console)


def test_type_and_pick_drive_the_filter(registry, tmp_path) -> None:
    session = _session(registry, tmp_path)

    session.run(["type better", "pick a web", "pick b ios"])

    assert session.dispatcher.filters.active == BetterFilter("web", "ios")
    assert session.dispatcher.table.colspan == 3


def test_filter_command_and_errors(registry, tmp_path) -> None:
    session = _session(registry, tmp_path)

    assert session.execute("filter unique:ios")
    assert session.dispatcher.filters.active == UniqueFilter("ios")

    assert session.execute("filter diagonal")
    assert session.dispatcher.filters.active == UniqueFilter("ios")
    assert "unsupported filter" in session.console.export_text()


def test_open_close_and_quit(registry, tmp_path) -> None:
    session = _session(registry, tmp_path)

    session.execute("open Shadows web")
    assert session.dispatcher.view.selected == CellRef(0, "web")
    session.execute("open Shadows web")
    assert session.dispatcher.view.selected is None

    session.execute("open 'Blur' ios")
    session.execute("close")
    assert session.dispatcher.view.panel is None

    assert session.execute("quit") is False


def test_run_stops_at_quit(registry, tmp_path) -> None:
    session = _session(registry, tmp_path)

    session.run(["filter unique:web", "quit", "filter none"])

    assert session.dispatcher.filters.active == UniqueFilter("web")


def test_save_writes_current_surface(registry, tmp_path) -> None:
    session = _session(registry, tmp_path)
    session.execute("open Shadows ios")

    session.execute("save")
    session.execute(f"save {tmp_path / 'copy.html'}")

    assert "Partially Supported on iOS" in (tmp_path / "matrix.html").read_text(encoding="utf-8")
    assert (tmp_path / "copy.html").exists()


def test_unknown_command_and_usage(registry, tmp_path) -> None:
    session = _session(registry, tmp_path)

    assert session.execute("dance")
    assert session.execute("pick a")
    assert session.execute("")
    text = session.console.export_text()
    assert "unknown command 'dance'" in text
    assert "usage: pick" in text
