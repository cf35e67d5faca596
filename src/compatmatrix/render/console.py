from __future__ import annotations

from typing import Optional

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from compatmatrix.domain.filters import FilterKind
from compatmatrix.domain.support import SupportStatus
from compatmatrix.engine.details import DetailsPanel, GithubLine
from compatmatrix.engine.filters import FILTER_TYPE_LABELS
from compatmatrix.engine.status import NOT_FILED_MESSAGE
from compatmatrix.engine.table import CategoryRow, FeatureRow, SupportCell
from compatmatrix.engine.view import MatrixView
from compatmatrix.sources.loader import FAILURE_MESSAGE

_GLYPHS = {
    SupportStatus.SUPPORTED: ("✓", "green"),
    SupportStatus.PARTIAL: ("~", "dark_orange"),
    SupportStatus.UNSUPPORTED: ("✗", "red"),
    SupportStatus.UNKNOWN: ("?", "grey70"),
}


def _cell_text(cell: SupportCell, selected: bool) -> Text:
    if not cell.interactive:
        return Text("")
    glyph, color = _GLYPHS[cell.status]
    text = Text(glyph, style=f"bold {color}" + (" reverse" if selected else ""))
    if cell.has_notes:
        text.append("*", style="dim")
    return text


def _controls_caption(view: MatrixView) -> str:
    controls = view.controls
    label = FILTER_TYPE_LABELS.get(controls.filter_type, FILTER_TYPE_LABELS[""])
    if controls.filter_type == FilterKind.UNIQUE.value:
        return f"{label}: {controls.unique or '-'}"
    if controls.filter_type == FilterKind.BETTER.value:
        return f"{label}: {controls.platform_a or '-'} better than {controls.platform_b or '-'}"
    return label


def details_renderable(panel: DetailsPanel) -> Panel:
    lines = [Text(panel.heading, style="bold")]
    if panel.notes:
        lines.append(Text(f"* {panel.notes}"))
    if panel.github is GithubLine.NOT_FILED:
        lines.append(Text(NOT_FILED_MESSAGE, style="italic grey50"))
    elif panel.github is GithubLine.LINK:
        lines.append(Text(panel.github_url, style=f"link {panel.github_url}"))
    return Panel(Group(*lines), border_style=panel.accent)


def table_renderable(view: MatrixView) -> Table:
    table = Table(title="Compatibility Matrix", show_lines=False)
    table.add_column("Feature", style="bold")
    shown = [col for col in view.table.header if view.column_visible(col.column)]
    for col in shown:
        table.add_column(
            Text.assemble(col.exporter.name, "\n", (str(col.score), "dim")),
            justify="center",
        )

    for view_row in view.rows():
        row = view_row.row
        if isinstance(row, CategoryRow):
            table.add_section()
            table.add_row(Text(row.name, style="bold cyan"), *([""] * len(shown)))
        elif isinstance(row, FeatureRow) and not view_row.hidden:
            cells = []
            for col in shown:
                cell = row.cell_for(col.exporter.id)
                cells.append(_cell_text(cell, view.selected == cell.ref) if cell else Text(""))
            table.add_row(Text(row.name), *cells)
    return table


def render_view(view: MatrixView, console: Optional[Console] = None) -> None:
    console = console or Console()
    console.print(Text(_controls_caption(view), style="italic"))
    console.print(table_renderable(view))
    if view.panel is not None:
        console.print(details_renderable(view.panel))


def render_failure(console: Optional[Console] = None) -> None:
    (console or Console()).print(Text(FAILURE_MESSAGE, style="bold red"))
