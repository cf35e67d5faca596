from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Union

from compatmatrix.engine.details import DetailsPanel
from compatmatrix.engine.filters import FilterControls
from compatmatrix.engine.table import CategoryRow, CellRef, FeatureRow, TableStructure


@dataclass(frozen=True)
class DetailsRow:
    panel: DetailsPanel


@dataclass(frozen=True)
class ViewRow:
    row: Union[CategoryRow, FeatureRow, DetailsRow]
    hidden: bool = False


@dataclass(frozen=True)
class MatrixView:
    """Snapshot of the rendered surface: structure plus visibility and disclosure state."""

    table: TableStructure
    visible_columns: frozenset[int]
    hidden_features: frozenset[int]
    controls: FilterControls
    panel: Optional[DetailsPanel] = None

    @property
    def selected(self) -> Optional[CellRef]:
        return None if self.panel is None else self.panel.ref

    def column_visible(self, column: int) -> bool:
        return column in self.visible_columns

    def rows(self) -> Iterator[ViewRow]:
        for row in self.table.rows:
            if isinstance(row, FeatureRow):
                yield ViewRow(row=row, hidden=row.feature_id in self.hidden_features)
                if self.panel is not None and self.panel.ref.feature_id == row.feature_id:
                    yield ViewRow(row=DetailsRow(panel=self.panel))
            else:
                yield ViewRow(row=row)

    def details_rows(self) -> list[DetailsRow]:
        return [vr.row for vr in self.rows() if isinstance(vr.row, DetailsRow)]

    def visible_feature_names(self) -> list[str]:
        return [
            vr.row.name
            for vr in self.rows()
            if isinstance(vr.row, FeatureRow) and not vr.hidden
        ]
