from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from compatmatrix.config.workspace import WorkspaceContext
from compatmatrix.domain.filters import FilterDescriptor, parse_filter

DEFAULT_SOURCE = "data.json"
DEFAULT_OUTPUT = "compat-matrix.html"


def cascade(*values, fallback=None):
    """Return the first non-None value from a list, or fallback."""
    for value in values:
        if value is not None:
            return value
    return fallback


def _normalize_upper(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, int):
        return logging.getLevelName(value).upper()
    text = str(value).strip()
    return text.upper() if text else None


@dataclass(frozen=True)
class LogLevelDecision:
    name: str
    value: int


def resolve_log_level(
    *levels: Any,
    fallback: str = "WARNING",
) -> LogLevelDecision:
    name = None
    for level in levels:
        normalized = _normalize_upper(level)
        if normalized:
            name = normalized
            break
    if not name:
        name = _normalize_upper(fallback) or "WARNING"
    value = logging._nameToLevel.get(name, logging.WARNING)
    return LogLevelDecision(name=name, value=value)


@dataclass(frozen=True)
class RenderSettings:
    source: str
    output: Path
    filter: FilterDescriptor
    title: str
    stylesheet: Optional[str]


def resolve_render_settings(
    *,
    cli_source: Optional[str],
    cli_output: Optional[str],
    cli_filter: Optional[str],
    workspace: Optional[WorkspaceContext],
) -> RenderSettings:
    """Merge CLI flags over workspace defaults over built-ins.

    Raises FilterSpecError when the effective filter string is malformed.
    """
    config = workspace.config if workspace else None
    source = cascade(
        cli_source,
        workspace.resolve_source(DEFAULT_SOURCE) if workspace else None,
        fallback=DEFAULT_SOURCE,
    )
    output = cascade(
        Path(cli_output) if cli_output else None,
        workspace.resolve_output(DEFAULT_OUTPUT) if workspace else None,
        fallback=Path(DEFAULT_OUTPUT),
    )
    filter_text = cascade(cli_filter, config.render.filter if config else None)
    return RenderSettings(
        source=source,
        output=output,
        filter=parse_filter(filter_text),
        title=config.title if config else "Compatibility Matrix",
        stylesheet=config.stylesheet if config else None,
    )
