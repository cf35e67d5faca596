from __future__ import annotations

import html
import logging
from pathlib import Path
from typing import Optional, Sequence

from compatmatrix.domain.filters import FilterKind
from compatmatrix.domain.support import Exporter
from compatmatrix.engine.details import DetailsPanel, GithubLine
from compatmatrix.engine.filters import FILTER_TYPE_LABELS, FilterControls
from compatmatrix.engine.status import GITHUB_ICON, NOT_FILED_MESSAGE, NOTES_ICON
from compatmatrix.engine.table import CategoryRow, FeatureRow, SupportCell
from compatmatrix.engine.view import DetailsRow, MatrixView
from compatmatrix.sources.loader import FAILURE_MESSAGE

logger = logging.getLogger(__name__)

_HIDDEN = ' style="display: none"'


def _esc(value: object) -> str:
    return html.escape(str(value), quote=True)


def _option(value: str, label: str, selected: str) -> str:
    marker = " selected" if value == selected else ""
    return f'<option value="{_esc(value)}"{marker}>{_esc(label)}</option>'


def _platform_select(
    select_id: str,
    exporters: Sequence[Exporter],
    selected: str,
    placeholder: str = "Select platform",
) -> str:
    options = [_option("", placeholder, selected)]
    options.extend(_option(e.id, e.name, selected) for e in exporters if e.id)
    return f'<select id="{select_id}">{"".join(options)}</select>'


def render_filter_controls(controls: FilterControls, exporters: Sequence[Exporter]) -> str:
    type_options = "".join(
        _option(value, label, controls.filter_type)
        for value, label in FILTER_TYPE_LABELS.items()
    )
    if controls.filter_type == FilterKind.UNIQUE.value:
        sub = _platform_select("unique-select", exporters, controls.unique)
    elif controls.filter_type == FilterKind.BETTER.value:
        sub = (
            _platform_select("platform-a", exporters, controls.platform_a, "Platform A")
            + '<span class="filter-separator">better than</span>'
            + _platform_select("platform-b", exporters, controls.platform_b, "Platform B")
        )
    else:
        sub = ""
    return (
        '<th class="filter-cell">'
        f'<div class="filter-group"><select id="filter-type">{type_options}</select></div>'
        f'<div class="filter-options" id="filter-options">{sub}</div>'
        "</th>"
    )


def _render_header(view: MatrixView) -> str:
    exporters = [col.exporter for col in view.table.header]
    cells = [render_filter_controls(view.controls, exporters)]
    for col in view.table.header:
        icon = f'<i class="{_esc(col.exporter.icon)}"></i>' if col.exporter.icon else ""
        hidden = "" if view.column_visible(col.column) else _HIDDEN
        cells.append(
            f"<th{hidden}>{icon}"
            f'<span class="platform-text">{_esc(col.exporter.name)}</span>'
            f'<div class="platform-score">{_esc(col.score)}</div>'
            "</th>"
        )
    return f"<thead><tr>{''.join(cells)}</tr></thead>"


def _render_cell(cell: SupportCell, view: MatrixView) -> str:
    hidden = "" if view.column_visible(cell.column) else _HIDDEN
    if not cell.interactive:
        return f'<td class="support-cell"{hidden}></td>'
    classes = f"support-cell status-{cell.status.value}"
    if view.selected == cell.ref:
        classes += " selected"
    asterisk = f'<i class="{NOTES_ICON}"></i>' if cell.has_notes else ""
    return (
        f'<td class="{classes}" data-feature-id="{cell.ref.feature_id}" '
        f'data-exporter="{_esc(cell.ref.exporter_id)}"{hidden}>'
        f'<i class="{cell.icon}"></i>{asterisk}</td>'
    )


def render_details_row(panel: DetailsPanel) -> str:
    parts = [f'<h4><i class="{panel.icon}"></i>{_esc(panel.heading)}</h4>']
    if panel.notes:
        parts.append(f'<p><i class="{NOTES_ICON}"></i>{_esc(panel.notes)}</p>')
    if panel.github is GithubLine.NOT_FILED:
        parts.append(
            f'<p class="github-not-filed"><i class="{GITHUB_ICON}"></i>{_esc(NOT_FILED_MESSAGE)}</p>'
        )
    elif panel.github is GithubLine.LINK:
        url = _esc(panel.github_url)
        parts.append(
            f'<p><i class="{GITHUB_ICON}"></i>'
            f'<a href="{url}" target="_blank" rel="noopener noreferrer">{url}</a></p>'
        )
    return (
        f'<tr class="details-row expanded" data-feature-id="{panel.ref.feature_id}" '
        f'data-exporter-id="{_esc(panel.ref.exporter_id)}">'
        f'<td class="details-content" colspan="{panel.colspan}" '
        f'style="--bar-color: {panel.accent}">{"".join(parts)}</td></tr>'
    )


def render_table(view: MatrixView) -> str:
    body: list[str] = []
    for view_row in view.rows():
        row = view_row.row
        if isinstance(row, CategoryRow):
            body.append(
                f'<tr><td class="category-header" colspan="{row.colspan}">{_esc(row.name)}</td></tr>'
            )
        elif isinstance(row, DetailsRow):
            body.append(render_details_row(row.panel))
        elif isinstance(row, FeatureRow):
            css = ' class="filtered-out"' if view_row.hidden else ""
            cells = "".join(_render_cell(cell, view) for cell in row.cells)
            body.append(
                f'<tr{css} data-category="{_esc(row.category_name)}" '
                f'data-category-id="{row.category_id}" data-feature-index="{row.index}" '
                f'data-feature-id="{row.feature_id}">'
                f"<td>{_esc(row.name)}</td>{cells}</tr>"
            )
    return (
        '<table class="compat-table">'
        f"{_render_header(view)}"
        f"<tbody>{''.join(body)}</tbody>"
        "</table>"
    )


def _page(title: str, content: str, stylesheet: Optional[str]) -> str:
    link = f'<link rel="stylesheet" href="{_esc(stylesheet)}">' if stylesheet else ""
    return (
        "<!DOCTYPE html>"
        "<html lang='en'>"
        "<head>"
        "<meta charset='utf-8'>"
        f"<title>{_esc(title)}</title>"
        f"{link}"
        "</head>"
        "<body>"
        f'<div id="compatibility-table-container">{content}</div>'
        "</body>"
        "</html>"
    )


def render_page(
    view: MatrixView,
    *,
    title: str = "Compatibility Matrix",
    stylesheet: Optional[str] = None,
) -> str:
    return _page(title, render_table(view), stylesheet)


def render_failure_page(*, title: str = "Compatibility Matrix", stylesheet: Optional[str] = None) -> str:
    return _page(title, f"<p>{_esc(FAILURE_MESSAGE)}</p>", stylesheet)


def write_page(path: Path, document: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(document, encoding="utf-8")
    logger.info("wrote compatibility matrix to %s", path)
    return path
