from __future__ import annotations

import logging
from typing import Optional

from compatmatrix.config.resolution import RenderSettings
from compatmatrix.engine.dispatcher import InteractionDispatcher
from compatmatrix.render.console import render_failure, render_view
from compatmatrix.render.html import render_failure_page, render_page, write_page
from compatmatrix.sources.loader import LoadFailure, load_registry

logger = logging.getLogger(__name__)


def parse_open_cell(value: str) -> tuple[str, str]:
    feature, sep, exporter = value.rpartition(":")
    if not sep or not feature or not exporter:
        raise ValueError(f"--open expects FEATURE:EXPORTER, got {value!r}")
    return feature, exporter


def prepare(settings: RenderSettings, open_cell: Optional[tuple[str, str]] = None) -> InteractionDispatcher:
    """Load the document and bring the surface into the requested state."""
    registry = load_registry(settings.source)
    dispatcher = InteractionDispatcher(registry)
    dispatcher.set_filter(settings.filter)
    if open_cell:
        feature, exporter = open_cell
        result = dispatcher.activate_by_name(feature, exporter)
        if dispatcher.details.expanded is None:
            logger.warning("no details to show for %s on %s (%s)", feature, exporter, result.details.value)
    return dispatcher


def handle_render(settings: RenderSettings, *, open_cell: Optional[tuple[str, str]] = None) -> int:
    try:
        dispatcher = prepare(settings, open_cell)
    except LoadFailure:
        write_page(
            settings.output,
            render_failure_page(title=settings.title, stylesheet=settings.stylesheet),
        )
        return 1
    page = render_page(dispatcher.view, title=settings.title, stylesheet=settings.stylesheet)
    write_page(settings.output, page)
    print(f"Saved compatibility matrix to {settings.output}")
    return 0


def handle_show(settings: RenderSettings, *, open_cell: Optional[tuple[str, str]] = None) -> int:
    try:
        dispatcher = prepare(settings, open_cell)
    except LoadFailure:
        render_failure()
        return 1
    render_view(dispatcher.view)
    return 0
