from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional


class SupportStatus(str, Enum):
    SUPPORTED = "supported"
    PARTIAL = "partial"
    UNSUPPORTED = "unsupported"
    UNKNOWN = "unknown"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    @classmethod
    def parse(cls, value: object) -> "SupportStatus":
        """Return the matching status, or UNKNOWN for anything unrecognised."""
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        try:
            return cls(text)
        except ValueError:
            return cls.UNKNOWN


_RANKS = {
    SupportStatus.SUPPORTED: 3,
    SupportStatus.PARTIAL: 2,
    SupportStatus.UNSUPPORTED: 1,
    SupportStatus.UNKNOWN: 0,
}


@dataclass(frozen=True)
class Exporter:
    id: str
    name: str
    icon: Optional[str] = None


@dataclass(frozen=True)
class SupportEntry:
    """Support level of one feature on one exporter.

    ``github`` keeps absent (None) distinct from blank: None means the issue
    is not tracked at all, a blank string means tracked but no link filed.
    """

    status: SupportStatus
    notes: Optional[str] = None
    github: Optional[str] = None

    @property
    def has_notes(self) -> bool:
        return bool(self.notes and self.notes.strip())


@dataclass(frozen=True)
class Feature:
    id: int
    name: str
    category_id: int
    index: int
    support: Mapping[str, SupportEntry] = field(default_factory=dict)

    def entry_for(self, exporter_id: str) -> Optional[SupportEntry]:
        return self.support.get(exporter_id)


@dataclass(frozen=True)
class Category:
    id: int
    name: str
    features: tuple[Feature, ...] = ()
