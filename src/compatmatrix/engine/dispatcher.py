from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

from compatmatrix.domain.filters import NO_FILTER, FilterDescriptor
from compatmatrix.domain.registry import SupportRegistry
from compatmatrix.engine.details import DetailsAction, DetailsController
from compatmatrix.engine.filters import (
    ChangeKind,
    FilterControls,
    FilterEngine,
    FilterTransition,
)
from compatmatrix.engine.table import CellRef, TableStructure, build
from compatmatrix.engine.view import MatrixView

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilterTypeChanged:
    filter_type: str


@dataclass(frozen=True)
class PlatformPicked:
    slot: str  # unique | a | b
    exporter_id: str


@dataclass(frozen=True)
class CellActivated:
    ref: CellRef


Event = Union[FilterTypeChanged, PlatformPicked, CellActivated]


@dataclass(frozen=True)
class DispatchResult:
    transition: Optional[FilterTransition] = None
    details: Optional[DetailsAction] = None

    @property
    def rebuilt(self) -> bool:
        return self.transition is not None and self.transition.requires_rebuild


class InteractionDispatcher:
    """Routes surface events to the filter engine and details controller.

    Handlers run to completion one at a time; the table is rebuilt only on a
    structural filter change, otherwise only visibility is recomputed.
    """

    def __init__(self, registry: SupportRegistry, initial: FilterDescriptor = NO_FILTER):
        self.registry = registry
        self.filters = FilterEngine(registry, initial)
        self.details = DetailsController(registry)
        self.controls = FilterControls.from_descriptor(self.filters.active)
        self._table = build(registry, self.filters.active)
        self._visible_columns: frozenset[int] = frozenset()
        self._hidden: frozenset[int] = frozenset()
        self._visibility_pass()

    @property
    def table(self) -> TableStructure:
        return self._table

    @property
    def view(self) -> MatrixView:
        return MatrixView(
            table=self._table,
            visible_columns=self._visible_columns,
            hidden_features=self._hidden,
            controls=self.controls,
            panel=self.details.panel,
        )

    def dispatch(self, event: Event) -> DispatchResult:
        if isinstance(event, FilterTypeChanged):
            return self._update_controls(self.controls.with_type(event.filter_type))
        if isinstance(event, PlatformPicked):
            return self._update_controls(self.controls.with_pick(event.slot, event.exporter_id))
        if isinstance(event, CellActivated):
            return self._activate(event.ref)
        raise TypeError(f"unsupported event {type(event).__name__}")

    def set_filter(self, descriptor: FilterDescriptor) -> DispatchResult:
        return self._update_controls(FilterControls.from_descriptor(descriptor))

    def activate_by_name(self, feature_name: str, exporter_id: str) -> DispatchResult:
        """Activate a cell addressed by feature name (first match in document order)."""
        feature = self.registry.find_feature(feature_name)
        if feature is None:
            logger.debug("no feature named %r", feature_name)
            return DispatchResult(details=DetailsAction.IGNORED)
        return self._activate(CellRef(feature_id=feature.id, exporter_id=exporter_id))

    def _update_controls(self, controls: FilterControls) -> DispatchResult:
        self.controls = controls
        transition = self.filters.apply(controls.descriptor())
        if transition.requires_rebuild:
            self._rebuild()
            self._visibility_pass()
        elif transition.change is ChangeKind.COSMETIC:
            self._visibility_pass()
        return DispatchResult(transition=transition)

    def _rebuild(self) -> None:
        self.details.collapse()
        self._table = build(self.registry, self.filters.active)
        logger.debug("rebuilt table with colspan %d", self._table.colspan)

    def _visibility_pass(self) -> None:
        self._visible_columns = self.filters.visible_columns()
        self._hidden = frozenset(
            row.feature_id
            for row in self._table.feature_rows()
            if not self.filters.matches(self.registry.feature(row.feature_id))
        )
        expanded = self.details.expanded
        if expanded is not None and not self._cell_visible(expanded):
            self.details.collapse()

    def _cell_visible(self, ref: CellRef) -> bool:
        cell = self._table.cell(ref)
        if cell is None or ref.feature_id in self._hidden:
            return False
        return cell.column in self._visible_columns

    def _activate(self, ref: CellRef) -> DispatchResult:
        if ref.feature_id in self._hidden:
            logger.debug("cell %s is filtered out; ignoring", ref)
            return DispatchResult(details=DetailsAction.IGNORED)
        cell = self._table.cell(ref)
        if cell is not None and cell.column not in self._visible_columns:
            return DispatchResult(details=DetailsAction.IGNORED)
        return DispatchResult(details=self.details.activate(ref, self._table))
