from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from nexia.core.messages import ViewMode
from nexia.core.models import Notebook, Viewport
from nexia.core.selection import NO_SELECTION, Selection
from nexia.settings import DEFAULT_NOTEBOOK_NAME


@dataclass(frozen=True)
class AppState:
    """
    Complete application state. One value per dispatched message.

    view_mode and sidebar_open are plain UI flags; everything else is kept
    consistent by nexia.core.reducer.apply.
    """

    notebook: Notebook
    selection: Selection = NO_SELECTION
    viewport: Viewport = field(default_factory=Viewport)
    view_mode: ViewMode = ViewMode.LIST
    sidebar_open: bool = True
    editing_note: str | None = None
    search_query: str = ""
    search_results: tuple[str, ...] = ()
    dirty: bool = False
    error: str | None = None

    __hash__ = None


def initial_state(
    now: datetime,
    *,
    name: str = DEFAULT_NOTEBOOK_NAME,
    view_mode: ViewMode = ViewMode.LIST,
    sidebar_open: bool = True,
) -> AppState:
    return AppState(
        notebook=Notebook.empty(name, now),
        view_mode=view_mode,
        sidebar_open=sidebar_open,
    )
