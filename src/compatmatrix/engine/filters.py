from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Sequence

from compatmatrix.domain.filters import (
    NO_FILTER,
    BetterFilter,
    FilterDescriptor,
    FilterKind,
    UniqueFilter,
)
from compatmatrix.domain.registry import SupportRegistry
from compatmatrix.domain.support import Exporter, Feature, SupportStatus

logger = logging.getLogger(__name__)


def matches(
    feature: Feature,
    descriptor: FilterDescriptor,
    exporters: Sequence[Exporter],
) -> bool:
    """Return True when the feature passes the filter."""
    if isinstance(descriptor, UniqueFilter):
        target = feature.entry_for(descriptor.platform)
        if target is None or target.status is not SupportStatus.SUPPORTED:
            return False
        for exporter in exporters:
            if exporter.id == descriptor.platform:
                continue
            other = feature.entry_for(exporter.id)
            if other is not None and other.status is SupportStatus.SUPPORTED:
                return False
        return True

    if isinstance(descriptor, BetterFilter):
        support_a = feature.entry_for(descriptor.platform_a)
        support_b = feature.entry_for(descriptor.platform_b)
        if support_a is None or support_b is None:
            return False
        return support_a.status.rank > support_b.status.rank

    return True


def visible_columns(
    descriptor: FilterDescriptor,
    exporters: Sequence[Exporter],
) -> frozenset[int]:
    """Table column indices left visible; column 0 is the feature name."""
    if isinstance(descriptor, BetterFilter):
        keep = {0}
        for column, exporter in enumerate(exporters, start=1):
            if exporter.id in (descriptor.platform_a, descriptor.platform_b):
                keep.add(column)
        return frozenset(keep)
    return frozenset(range(len(exporters) + 1))


def sanitize(descriptor: FilterDescriptor, registry: SupportRegistry) -> FilterDescriptor:
    """Collapse malformed selections (blank, unknown or identical platforms) to no filter."""
    if isinstance(descriptor, UniqueFilter):
        if registry.exporter(descriptor.platform) is None:
            logger.debug("unique filter on unknown exporter %r ignored", descriptor.platform)
            return NO_FILTER
        return descriptor
    if isinstance(descriptor, BetterFilter):
        a, b = descriptor.platform_a, descriptor.platform_b
        if a == b or registry.exporter(a) is None or registry.exporter(b) is None:
            logger.debug("comparison %r vs %r is not a valid pair; no filter applied", a, b)
            return NO_FILTER
        return descriptor
    return NO_FILTER


class ChangeKind(str, Enum):
    UNCHANGED = "unchanged"
    COSMETIC = "cosmetic"
    STRUCTURAL = "structural"


@dataclass(frozen=True)
class FilterTransition:
    previous: FilterDescriptor
    current: FilterDescriptor
    change: ChangeKind

    @property
    def requires_rebuild(self) -> bool:
        return self.change is ChangeKind.STRUCTURAL


def classify(previous: FilterDescriptor, current: FilterDescriptor) -> ChangeKind:
    """Entering or leaving a comparison changes the column geometry; anything else is a visibility pass."""
    if previous == current:
        return ChangeKind.UNCHANGED
    was_better = previous.kind is FilterKind.BETTER
    is_better = current.kind is FilterKind.BETTER
    if was_better != is_better:
        return ChangeKind.STRUCTURAL
    return ChangeKind.COSMETIC


class FilterEngine:
    """Owns the single active filter descriptor."""

    def __init__(self, registry: SupportRegistry, active: FilterDescriptor = NO_FILTER):
        self._registry = registry
        self._active = sanitize(active, registry)

    @property
    def active(self) -> FilterDescriptor:
        return self._active

    def apply(self, descriptor: FilterDescriptor) -> FilterTransition:
        current = sanitize(descriptor, self._registry)
        transition = FilterTransition(
            previous=self._active,
            current=current,
            change=classify(self._active, current),
        )
        self._active = current
        logger.debug(
            "filter %s -> %s (%s)",
            transition.previous.kind.value,
            current.kind.value,
            transition.change.value,
        )
        return transition

    def matches(self, feature: Feature) -> bool:
        return matches(feature, self._active, self._registry.exporters)

    def visible_columns(self) -> frozenset[int]:
        return visible_columns(self._active, self._registry.exporters)


FILTER_TYPE_LABELS = {
    "": "No filter",
    FilterKind.UNIQUE.value: "Features unique to platform",
    FilterKind.BETTER.value: "Platform A better than Platform B",
}


@dataclass(frozen=True)
class FilterControls:
    """Selections on the filter control surface.

    ``filter_type`` is "" (no filter), "unique" or "better"; picker values
    are exporter ids or "" when left blank.
    """

    filter_type: str = ""
    unique: str = ""
    platform_a: str = ""
    platform_b: str = ""

    def with_type(self, filter_type: str) -> "FilterControls":
        value = (filter_type or "").strip().lower()
        if value == FilterKind.NONE.value:
            value = ""
        if value not in FILTER_TYPE_LABELS:
            logger.debug("unknown filter type %r; clearing controls", filter_type)
            value = ""
        return FilterControls(filter_type=value)

    def with_pick(self, slot: str, exporter_id: Optional[str]) -> "FilterControls":
        value = (exporter_id or "").strip()
        if slot == "unique" and self.filter_type == FilterKind.UNIQUE.value:
            return replace(self, unique=value)
        if slot == "a" and self.filter_type == FilterKind.BETTER.value:
            return replace(self, platform_a=value)
        if slot == "b" and self.filter_type == FilterKind.BETTER.value:
            return replace(self, platform_b=value)
        logger.debug("picker %r is not shown for filter type %r", slot, self.filter_type)
        return self

    def descriptor(self) -> FilterDescriptor:
        if self.filter_type == FilterKind.UNIQUE.value and self.unique:
            return UniqueFilter(platform=self.unique)
        if (
            self.filter_type == FilterKind.BETTER.value
            and self.platform_a
            and self.platform_b
            and self.platform_a != self.platform_b
        ):
            return BetterFilter(platform_a=self.platform_a, platform_b=self.platform_b)
        return NO_FILTER

    @classmethod
    def from_descriptor(cls, descriptor: FilterDescriptor) -> "FilterControls":
        if isinstance(descriptor, UniqueFilter):
            return cls(filter_type=FilterKind.UNIQUE.value, unique=descriptor.platform)
        if isinstance(descriptor, BetterFilter):
            return cls(
                filter_type=FilterKind.BETTER.value,
                platform_a=descriptor.platform_a,
                platform_b=descriptor.platform_b,
            )
        return cls()
