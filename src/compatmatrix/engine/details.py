from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from compatmatrix.domain.registry import SupportRegistry
from compatmatrix.domain.support import Exporter, SupportEntry, SupportStatus
from compatmatrix.engine.status import style_for
from compatmatrix.engine.table import CellRef, TableStructure

logger = logging.getLogger(__name__)


class GithubLine(str, Enum):
    OMITTED = "omitted"
    NOT_FILED = "not_filed"
    LINK = "link"


@dataclass(frozen=True)
class DetailsPanel:
    """Content of the expanded row shown under a feature row."""

    ref: CellRef
    exporter_name: str
    status: SupportStatus
    colspan: int
    notes: Optional[str]
    github: GithubLine
    github_url: Optional[str] = None

    @property
    def icon(self) -> str:
        return style_for(self.status).icon

    @property
    def heading(self) -> str:
        return f"{style_for(self.status).text} on {self.exporter_name}"

    @property
    def accent(self) -> str:
        return style_for(self.status).color


def github_line(entry: Optional[SupportEntry]) -> tuple[GithubLine, Optional[str]]:
    if entry is None or entry.github is None:
        return GithubLine.OMITTED, None
    url = entry.github.strip()
    if not url:
        return GithubLine.NOT_FILED, None
    return GithubLine.LINK, url


def build_panel(
    ref: CellRef,
    exporter: Exporter,
    entry: SupportEntry,
    colspan: int,
) -> DetailsPanel:
    kind, url = github_line(entry)
    notes = entry.notes.strip() if entry.has_notes else None
    return DetailsPanel(
        ref=ref,
        exporter_name=exporter.name,
        status=entry.status,
        colspan=colspan,
        notes=notes,
        github=kind,
        github_url=url,
    )


class DetailsAction(str, Enum):
    IGNORED = "ignored"
    OPENED = "opened"
    CLOSED = "closed"
    SWITCHED = "switched"


class DetailsController:
    """Tracks the single expanded details panel (collapsed or expanded(cell))."""

    def __init__(self, registry: SupportRegistry):
        self._registry = registry
        self._panel: Optional[DetailsPanel] = None

    @property
    def expanded(self) -> Optional[CellRef]:
        return None if self._panel is None else self._panel.ref

    @property
    def panel(self) -> Optional[DetailsPanel]:
        return self._panel

    def activate(self, ref: CellRef, table: TableStructure) -> DetailsAction:
        cell = table.cell(ref)
        if cell is None or not cell.interactive:
            logger.debug("cell %s has no support entry; ignoring", ref)
            return DetailsAction.IGNORED

        if self._panel is not None and self._panel.ref == ref:
            self.collapse()
            return DetailsAction.CLOSED

        exporter = self._registry.exporter(ref.exporter_id)
        if exporter is None:
            return DetailsAction.IGNORED
        had_panel = self._panel is not None
        self.collapse()
        self._panel = build_panel(ref, exporter, cell.entry, table.colspan)
        logger.debug("expanded details for %s", ref)
        return DetailsAction.SWITCHED if had_panel else DetailsAction.OPENED

    def collapse(self) -> None:
        if self._panel is not None:
            logger.debug("collapsed details for %s", self._panel.ref)
        self._panel = None
