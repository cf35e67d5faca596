from __future__ import annotations

import logging
from collections import Counter
from typing import Iterator, Optional, Sequence

from compatmatrix.domain.support import Category, Exporter, Feature

logger = logging.getLogger(__name__)


class SupportRegistry:
    """Read-only holder for a loaded compatibility document."""

    def __init__(
        self,
        exporters: Sequence[Exporter],
        categories: Sequence[Category],
    ) -> None:
        self._exporters = tuple(exporters)
        self._categories = tuple(categories)
        self._exporter_index = {}
        for idx, exporter in enumerate(self._exporters):
            self._exporter_index.setdefault(exporter.id, idx)
        self._features = {
            feature.id: feature
            for category in self._categories
            for feature in category.features
        }
        self._warn_duplicates()

    def _warn_duplicates(self) -> None:
        for label, names in (
            ("exporter id", [e.id for e in self._exporters]),
            ("category name", [c.name for c in self._categories]),
            ("feature name", [f.name for f in self.iter_features()]),
        ):
            for name, count in Counter(names).items():
                if count > 1:
                    logger.warning(
                        "duplicate %s %r (%d occurrences); name lookups resolve to the first",
                        label,
                        name,
                        count,
                    )

    @property
    def exporters(self) -> tuple[Exporter, ...]:
        return self._exporters

    @property
    def categories(self) -> tuple[Category, ...]:
        return self._categories

    def iter_features(self) -> Iterator[Feature]:
        for category in self._categories:
            yield from category.features

    def feature(self, feature_id: int) -> Optional[Feature]:
        return self._features.get(feature_id)

    def exporter(self, exporter_id: str) -> Optional[Exporter]:
        idx = self._exporter_index.get(exporter_id)
        return None if idx is None else self._exporters[idx]

    def find_feature(self, name: str) -> Optional[Feature]:
        """Resolve a feature by display name; the first match in document order wins."""
        for feature in self.iter_features():
            if feature.name == name:
                return feature
        return None
