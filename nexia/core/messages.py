"""
Message vocabulary: the complete input surface of the reducer.

Messages that create or modify notes carry their own id/timestamp (`at`),
stamped at construction time by nexia.core.clock.MessageFactory. The reducer
never reads the clock itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import TypeAlias

from nexia.core.models import Notebook, Point2D
from nexia.core.values import AttributeValue, validate_attribute_value


class ViewMode(str, Enum):
    LIST = "list"
    CANVAS = "canvas"
    GRAPH = "graph"


# ───────────────────────── notes ─────────────────────────

@dataclass(frozen=True)
class CreateNote:
    note_id: str
    at: datetime


@dataclass(frozen=True)
class CreateNoteAt:
    note_id: str
    point: Point2D
    at: datetime


@dataclass(frozen=True)
class DeleteNote:
    note_id: str
    at: datetime


@dataclass(frozen=True)
class DeleteSelectedNotes:
    at: datetime


@dataclass(frozen=True)
class UpdateNoteTitle:
    note_id: str
    text: str
    at: datetime


@dataclass(frozen=True)
class UpdateNoteContent:
    note_id: str
    text: str
    at: datetime


@dataclass(frozen=True)
class StartEditingNote:
    note_id: str


@dataclass(frozen=True)
class StopEditingNote:
    pass


@dataclass(frozen=True)
class MoveNote:
    note_id: str
    point: Point2D
    at: datetime


@dataclass(frozen=True)
class ResizeNote:
    note_id: str
    width: float
    height: float
    at: datetime


@dataclass(frozen=True)
class SetNoteAttribute:
    note_id: str
    key: str
    value: AttributeValue
    at: datetime

    def __post_init__(self) -> None:
        # reject values outside the attribute domain before they reach the reducer
        object.__setattr__(self, "value", validate_attribute_value(self.value))


@dataclass(frozen=True)
class RemoveNoteAttribute:
    note_id: str
    key: str
    at: datetime


# ───────────────────────── links ─────────────────────────

@dataclass(frozen=True)
class LinkNotes:
    from_id: str
    to_id: str
    at: datetime


@dataclass(frozen=True)
class UnlinkNotes:
    from_id: str
    to_id: str
    at: datetime


# ───────────────────────── selection ─────────────────────────

@dataclass(frozen=True)
class SelectNote:
    note_id: str


@dataclass(frozen=True)
class AddToSelection:
    note_id: str


@dataclass(frozen=True)
class ClearSelection:
    pass


@dataclass(frozen=True)
class SelectAll:
    pass


# ───────────────────────── view ─────────────────────────

@dataclass(frozen=True)
class SetViewMode:
    mode: ViewMode


@dataclass(frozen=True)
class ToggleSidebar:
    pass


@dataclass(frozen=True)
class PanCanvas:
    dx: float
    dy: float


@dataclass(frozen=True)
class ZoomCanvas:
    factor: float


@dataclass(frozen=True)
class ResetViewport:
    pass


# ───────────────────────── search ─────────────────────────

@dataclass(frozen=True)
class SetSearchQuery:
    text: str


@dataclass(frozen=True)
class ClearSearch:
    pass


# ───────────────────────── notebook / persistence ─────────────────────────

@dataclass(frozen=True)
class NewNotebook:
    name: str
    at: datetime


@dataclass(frozen=True)
class SaveNotebook:
    pass


@dataclass(frozen=True)
class SaveNotebookAs:
    path: Path


@dataclass(frozen=True)
class LoadNotebook:
    path: Path


@dataclass(frozen=True)
class NotebookLoaded:
    notebook: Notebook


@dataclass(frozen=True)
class NotebookSaved:
    pass


# ───────────────────────── errors ─────────────────────────

@dataclass(frozen=True)
class SetError:
    text: str


@dataclass(frozen=True)
class ClearError:
    pass


@dataclass(frozen=True)
class NoOp:
    pass


Message: TypeAlias = (
    CreateNote
    | CreateNoteAt
    | DeleteNote
    | DeleteSelectedNotes
    | UpdateNoteTitle
    | UpdateNoteContent
    | StartEditingNote
    | StopEditingNote
    | MoveNote
    | ResizeNote
    | SetNoteAttribute
    | RemoveNoteAttribute
    | LinkNotes
    | UnlinkNotes
    | SelectNote
    | AddToSelection
    | ClearSelection
    | SelectAll
    | SetViewMode
    | ToggleSidebar
    | PanCanvas
    | ZoomCanvas
    | ResetViewport
    | SetSearchQuery
    | ClearSearch
    | NewNotebook
    | SaveNotebook
    | SaveNotebookAs
    | LoadNotebook
    | NotebookLoaded
    | NotebookSaved
    | SetError
    | ClearError
    | NoOp
)

# Handled by the persistence collaborator; identity inside the reducer.
PERSISTENCE_COMMANDS = (SaveNotebook, SaveNotebookAs, LoadNotebook)
