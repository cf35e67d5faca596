from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from compatmatrix.domain.registry import SupportRegistry
from compatmatrix.domain.support import (
    Category,
    Exporter,
    Feature,
    SupportEntry,
    SupportStatus,
)

logger = logging.getLogger(__name__)


def _none_to_empty(value: Any, empty: Any) -> Any:
    return empty if value is None else value


class ExporterDocument(BaseModel):
    id: str = ""
    name: Optional[str] = None
    icon: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value):
        return "" if value is None else str(value)

    @model_validator(mode="after")
    def _default_name(self):
        if not self.name:
            self.name = self.id
        return self


class SupportEntryDocument(BaseModel):
    status: Optional[str] = None
    notes: Optional[str] = None
    github: Optional[str] = None

    def to_entry(self, *, feature: str, exporter: str) -> SupportEntry:
        status = SupportStatus.parse(self.status)
        raw = (self.status or "").strip().lower()
        if raw and raw != status.value:
            logger.warning(
                "feature %r on %r has unrecognised status %r; treating as unknown",
                feature,
                exporter,
                self.status,
            )
        github = self.github
        # An explicit null still marks the issue as tracked, only a missing key does not.
        if github is None and "github" in self.model_fields_set:
            github = ""
        return SupportEntry(status=status, notes=self.notes, github=github)


class FeatureDocument(BaseModel):
    name: str = ""
    support: Dict[str, Optional[SupportEntryDocument]] = Field(default_factory=dict)

    @field_validator("name", mode="before")
    @classmethod
    def _name_default(cls, value):
        return _none_to_empty(value, "")

    @field_validator("support", mode="before")
    @classmethod
    def _support_default(cls, value):
        return _none_to_empty(value, {})


class CategoryDocument(BaseModel):
    name: str = ""
    features: List[FeatureDocument] = Field(default_factory=list)

    @field_validator("name", mode="before")
    @classmethod
    def _name_default(cls, value):
        return _none_to_empty(value, "")

    @field_validator("features", mode="before")
    @classmethod
    def _features_default(cls, value):
        return _none_to_empty(value, [])


class MatrixDocument(BaseModel):
    """Raw compatibility document as published alongside the matrix page."""

    exporters: List[ExporterDocument] = Field(default_factory=list)
    categories: List[CategoryDocument] = Field(default_factory=list)

    @field_validator("exporters", "categories", mode="before")
    @classmethod
    def _list_default(cls, value):
        return _none_to_empty(value, [])

    def to_registry(self) -> SupportRegistry:
        """Freeze the document into a registry, assigning ids in document order."""
        for position, e in enumerate(self.exporters):
            if not e.id:
                logger.warning(
                    "exporter at position %d has no id; its column renders empty", position
                )
        exporters = [
            Exporter(id=e.id, name=e.name or e.id, icon=e.icon or None)
            for e in self.exporters
        ]
        categories: list[Category] = []
        next_feature_id = 0
        for category_id, category in enumerate(self.categories):
            features: list[Feature] = []
            for index, feature in enumerate(category.features):
                support = {
                    exporter_id: entry.to_entry(feature=feature.name, exporter=exporter_id)
                    for exporter_id, entry in feature.support.items()
                    if entry is not None and exporter_id
                }
                features.append(
                    Feature(
                        id=next_feature_id,
                        name=feature.name,
                        category_id=category_id,
                        index=index,
                        support=support,
                    )
                )
                next_feature_id += 1
            categories.append(
                Category(id=category_id, name=category.name, features=tuple(features))
            )
        return SupportRegistry(exporters, categories)
