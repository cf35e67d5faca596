from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from compatmatrix.domain.filters import FilterDescriptor, FilterKind
from compatmatrix.domain.registry import SupportRegistry
from compatmatrix.domain.support import Exporter, Feature, SupportEntry, SupportStatus
from compatmatrix.engine.score import Score, score
from compatmatrix.engine.status import style_for

# Feature name + the two compared exporters.
COMPARISON_COLUMN_COUNT = 3


@dataclass(frozen=True)
class CellRef:
    """Stable handle on one support cell: feature identity plus exporter id."""

    feature_id: int
    exporter_id: str


@dataclass(frozen=True)
class HeaderColumn:
    exporter: Exporter
    score: Score
    column: int


@dataclass(frozen=True)
class SupportCell:
    ref: CellRef
    column: int
    entry: Optional[SupportEntry]

    @property
    def interactive(self) -> bool:
        return self.entry is not None

    @property
    def status(self) -> Optional[SupportStatus]:
        return None if self.entry is None else self.entry.status

    @property
    def icon(self) -> Optional[str]:
        return None if self.entry is None else style_for(self.entry.status).icon

    @property
    def has_notes(self) -> bool:
        return self.entry is not None and self.entry.has_notes


@dataclass(frozen=True)
class CategoryRow:
    category_id: int
    name: str
    colspan: int


@dataclass(frozen=True)
class FeatureRow:
    feature_id: int
    category_id: int
    category_name: str
    index: int
    name: str
    cells: tuple[SupportCell, ...]

    def cell_for(self, exporter_id: str) -> Optional[SupportCell]:
        for cell in self.cells:
            if cell.ref.exporter_id == exporter_id:
                return cell
        return None


Row = Union[CategoryRow, FeatureRow]


@dataclass(frozen=True)
class TableStructure:
    header: tuple[HeaderColumn, ...]
    rows: tuple[Row, ...]
    colspan: int
    filter_kind: FilterKind

    @property
    def column_count(self) -> int:
        return len(self.header) + 1

    def feature_rows(self) -> tuple[FeatureRow, ...]:
        return tuple(row for row in self.rows if isinstance(row, FeatureRow))

    def feature_row(self, feature_id: int) -> Optional[FeatureRow]:
        for row in self.rows:
            if isinstance(row, FeatureRow) and row.feature_id == feature_id:
                return row
        return None

    def cell(self, ref: CellRef) -> Optional[SupportCell]:
        row = self.feature_row(ref.feature_id)
        return None if row is None else row.cell_for(ref.exporter_id)


def colspan_for(kind: FilterKind, exporter_count: int) -> int:
    """Logical column count used by category headers and the details panel."""
    if kind is FilterKind.BETTER:
        return COMPARISON_COLUMN_COUNT
    return exporter_count + 1


def _feature_row(
    feature: Feature,
    category_name: str,
    exporters: tuple[Exporter, ...],
) -> FeatureRow:
    cells = tuple(
        SupportCell(
            ref=CellRef(feature_id=feature.id, exporter_id=exporter.id),
            column=column,
            entry=feature.entry_for(exporter.id),
        )
        for column, exporter in enumerate(exporters, start=1)
    )
    return FeatureRow(
        feature_id=feature.id,
        category_id=feature.category_id,
        category_name=category_name,
        index=feature.index,
        name=feature.name,
        cells=cells,
    )


def build(registry: SupportRegistry, descriptor: FilterDescriptor) -> TableStructure:
    """Derive the table structure for a registry under the given filter.

    Only the filter's kind affects the structure; visibility is applied
    separately on the rendered view.
    """
    exporters = registry.exporters
    header = tuple(
        HeaderColumn(exporter=exporter, score=score(registry, exporter.id), column=column)
        for column, exporter in enumerate(exporters, start=1)
    )
    colspan = colspan_for(descriptor.kind, len(exporters))
    rows: list[Row] = []
    for category in registry.categories:
        rows.append(CategoryRow(category_id=category.id, name=category.name, colspan=colspan))
        rows.extend(
            _feature_row(feature, category.name, exporters)
            for feature in category.features
        )
    return TableStructure(
        header=header,
        rows=tuple(rows),
        colspan=colspan,
        filter_kind=descriptor.kind,
    )
