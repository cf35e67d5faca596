from rich.console import Console

from compatmatrix.domain.filters import BetterFilter
from compatmatrix.engine.dispatcher import CellActivated, InteractionDispatcher
from compatmatrix.engine.status import NOT_FILED_MESSAGE
from compatmatrix.engine.table import CellRef
from compatmatrix.render.console import render_failure, render_view


def _console() -> Console:
    return Console(record=True, width=160, color_system=None)


def test_render_view_lists_features_and_scores(registry) -> None:
    console = _console()

    render_view(InteractionDispatcher(registry).view, console)

    text = console.export_text()
    for name in ("Shadows", "Blur", "Haptics", "Rendering", "Input", "Web", "iOS", "Android"):
        assert name in text
    assert "2/3 capabilities" in text
    assert "No filter" in text


def test_render_view_drops_hidden_rows_and_columns(registry) -> None:
    console = _console()

    render_view(InteractionDispatcher(registry, BetterFilter("web", "ios")).view, console)

    text = console.export_text()
    assert "Shadows" in text
    assert "Blur" not in text
    assert "Android" not in text
    assert "web better than ios" in text


def test_render_view_prints_details_panel(registry) -> None:
    dispatcher = InteractionDispatcher(registry)
    dispatcher.dispatch(CellActivated(CellRef(0, "web")))
    console = _console()

    render_view(dispatcher.view, console)

    text = console.export_text()
    assert "Supported on Web" in text
    assert "CSS only" in text
    assert NOT_FILED_MESSAGE in text


def test_render_failure() -> None:
    console = _console()

    render_failure(console)

    assert "Failed to load compatibility data" in console.export_text()
