"""Spreadsheet reconciliation: normalize -> resolve -> merge/create -> persist once."""

from __future__ import annotations

from .contracts import (
    ABSENT,
    Absent,
    AmbiguousPanelResolution,
    BatchState,
    CanonicalItemRow,
    CanonicalPanelRow,
    MatchedPanelResolution,
    MatchScope,
    NewPanelResolution,
    PanelResolution,
    ReconciliationReport,
    ResolutionStatus,
    RowOutcome,
    RowOutcomeKind,
    RowValidationError,
)
from .engine import BatchRun, ImportScope, ImportScopeError, ItemImporter, PanelReconciler
from .merge import build_panel, merge_dimensions, merge_panel
from .normalize import fold_key, normalize_item_row, normalize_panel_row
from .resolve import PanelSnapshot, identity_key, resolve_row

__all__ = [
    "ABSENT",
    "Absent",
    "AmbiguousPanelResolution",
    "BatchRun",
    "BatchState",
    "CanonicalItemRow",
    "CanonicalPanelRow",
    "ImportScope",
    "ImportScopeError",
    "ItemImporter",
    "MatchScope",
    "MatchedPanelResolution",
    "NewPanelResolution",
    "PanelReconciler",
    "PanelResolution",
    "PanelSnapshot",
    "ReconciliationReport",
    "ResolutionStatus",
    "RowOutcome",
    "RowOutcomeKind",
    "RowValidationError",
    "build_panel",
    "fold_key",
    "identity_key",
    "merge_dimensions",
    "merge_panel",
    "normalize_item_row",
    "normalize_panel_row",
    "resolve_row",
]
