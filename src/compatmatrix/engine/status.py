from __future__ import annotations

from dataclasses import dataclass

from compatmatrix.domain.support import SupportStatus


@dataclass(frozen=True)
class StatusStyle:
    icon: str
    text: str
    color: str


STATUS_STYLES: dict[SupportStatus, StatusStyle] = {
    SupportStatus.SUPPORTED: StatusStyle("ti ti-check", "Supported", "#4caf50"),
    SupportStatus.PARTIAL: StatusStyle("ti ti-tilde", "Partially Supported", "#ff9800"),
    SupportStatus.UNSUPPORTED: StatusStyle("ti ti-x", "Unsupported", "#f44336"),
    SupportStatus.UNKNOWN: StatusStyle("ti ti-question-mark", "Unknown", "#eeeeee"),
}

NOTES_ICON = "ti ti-asterisk"
GITHUB_ICON = "ti ti-brand-github"
NOT_FILED_MESSAGE = "No bug report or feature request has been filed to address this issue."


def style_for(status: object) -> StatusStyle:
    return STATUS_STYLES.get(SupportStatus.parse(status), STATUS_STYLES[SupportStatus.UNKNOWN])
