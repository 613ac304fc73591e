"""Session state for one dashboard user.

The host (Streamlit) owns a single :class:`DashboardState` and replaces it on
every transition. Loading a file either adopts the new dataset with default
filters or falls back to the empty state with an error message; nothing from
a previous upload survives either way.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional

from programs.data import load_programs, prepare_context
from programs.errors import IngestError
from programs.filters import DEFAULT_FILTERS, ProgramFilters, normalize_filters


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardState:
    data_ctx: Optional[Dict[str, Any]] = None
    filters: ProgramFilters = field(default_factory=ProgramFilters)
    error: Optional[str] = None

    @property
    def loaded(self) -> bool:
        return self.data_ctx is not None


EMPTY_STATE = DashboardState()


def load_upload(source: object, file_name: Optional[str] = None) -> DashboardState:
    try:
        data_ctx = load_programs(source, file_name=file_name)
    except IngestError as exc:
        logger.warning("upload %s rejected: %s", file_name or "<upload>", exc)
        return DashboardState(error=str(exc))
    return DashboardState(data_ctx=data_ctx, filters=DEFAULT_FILTERS)


def update_filters(state: DashboardState, raw: dict | ProgramFilters) -> DashboardState:
    filters = raw if isinstance(raw, ProgramFilters) else normalize_filters(raw)
    return replace(state, filters=filters)


def reset_filters(state: DashboardState) -> DashboardState:
    return replace(state, filters=DEFAULT_FILTERS)


def current_context(state: DashboardState) -> Optional[Dict[str, Any]]:
    if state.data_ctx is None:
        return None
    return prepare_context(state.filters, state.data_ctx)
