from __future__ import annotations

from dataclasses import dataclass

from compatmatrix.domain.registry import SupportRegistry
from compatmatrix.domain.support import SupportStatus


@dataclass(frozen=True)
class Score:
    supported: int
    total: int

    def __str__(self) -> str:
        return f"{self.supported}/{self.total} capabilities"


def score(registry: SupportRegistry, exporter_id: str) -> Score:
    """Count scored features for one exporter.

    Features without an entry, or whose status is unknown, are not scored.
    """
    supported = 0
    total = 0
    for feature in registry.iter_features():
        entry = feature.entry_for(exporter_id)
        if entry is None or entry.status is SupportStatus.UNKNOWN:
            continue
        total += 1
        if entry.status is SupportStatus.SUPPORTED:
            supported += 1
    return Score(supported=supported, total=total)
