"""Diagnostic reporting.

Systems never raise for configuration or collaborator problems; they append a
:class:`portal_universe.records.Diagnostic` to ``State.diagnostics`` and log
it. The step reducer clears the list at the start of every frame.
"""

import logging
from dataclasses import replace
from typing import Optional

from portal_universe.records import Diagnostic
from portal_universe.state import State
from portal_universe.types import DiagnosticKind, EntityID

logger = logging.getLogger(__name__)

# Designed terminations are informational; everything else is a defect.
_LOG_LEVEL = {
    DiagnosticKind.HOP_LIMIT_REACHED: logging.INFO,
}


def report(
    state: State, kind: DiagnosticKind, entity: Optional[EntityID], message: str
) -> State:
    """Record a diagnostic on ``state`` and emit it through ``logging``.

    Args:
        state (State): Current state.
        kind (DiagnosticKind): Category of the report.
        entity (EntityID | None): Entity the report concerns.
        message (str): Human readable detail.

    Returns:
        State: State with the diagnostic appended.
    """
    logger.log(
        _LOG_LEVEL.get(kind, logging.WARNING),
        "[%s] %s: %s",
        kind,
        entity_label(state, entity),
        message,
    )
    diagnostic = Diagnostic(kind=kind, entity=entity, message=message, time=state.time)
    return replace(state, diagnostics=state.diagnostics.append(diagnostic))


def entity_label(state: State, entity: Optional[EntityID]) -> str:
    """Return ``name#id`` for log lines (or just the id when unnamed)."""
    if entity is None:
        return "-"
    descriptor = state.entity.get(entity)
    if descriptor is None or not descriptor.name:
        return f"#{entity}"
    return f"{descriptor.name}#{entity}"
