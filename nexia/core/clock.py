from __future__ import annotations

import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

from nexia.core import messages as m
from nexia.core.models import Point2D
from nexia.core.values import AttributeValue
from nexia.settings import DEFAULT_NOTEBOOK_NAME


class Clock(Protocol):
    def now(self) -> datetime: ...


class IdGenerator(Protocol):
    def fresh(self) -> str: ...


class SystemClock:
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class UuidGenerator:
    def fresh(self) -> str:
        return str(uuid.uuid4())


class MessageFactory:
    """
    Builds messages that need a fresh id or a timestamp.

    This is the only place ids and "now" enter the system, so a recorded
    message list replays to the same state.
    """

    def __init__(self, *, clock: Clock | None = None, ids: IdGenerator | None = None):
        self.clock = clock or SystemClock()
        self.ids = ids or UuidGenerator()

    def create_note(self) -> m.CreateNote:
        return m.CreateNote(note_id=self.ids.fresh(), at=self.clock.now())

    def create_note_at(self, x: float, y: float) -> m.CreateNoteAt:
        return m.CreateNoteAt(note_id=self.ids.fresh(), point=Point2D(x, y), at=self.clock.now())

    def delete_note(self, note_id: str) -> m.DeleteNote:
        return m.DeleteNote(note_id=note_id, at=self.clock.now())

    def delete_selected_notes(self) -> m.DeleteSelectedNotes:
        return m.DeleteSelectedNotes(at=self.clock.now())

    def update_note_title(self, note_id: str, text: str) -> m.UpdateNoteTitle:
        return m.UpdateNoteTitle(note_id=note_id, text=text, at=self.clock.now())

    def update_note_content(self, note_id: str, text: str) -> m.UpdateNoteContent:
        return m.UpdateNoteContent(note_id=note_id, text=text, at=self.clock.now())

    def move_note(self, note_id: str, x: float, y: float) -> m.MoveNote:
        return m.MoveNote(note_id=note_id, point=Point2D(x, y), at=self.clock.now())

    def resize_note(self, note_id: str, width: float, height: float) -> m.ResizeNote:
        return m.ResizeNote(note_id=note_id, width=width, height=height, at=self.clock.now())

    def set_note_attribute(self, note_id: str, key: str, value: AttributeValue) -> m.SetNoteAttribute:
        return m.SetNoteAttribute(note_id=note_id, key=key, value=value, at=self.clock.now())

    def remove_note_attribute(self, note_id: str, key: str) -> m.RemoveNoteAttribute:
        return m.RemoveNoteAttribute(note_id=note_id, key=key, at=self.clock.now())

    def link_notes(self, from_id: str, to_id: str) -> m.LinkNotes:
        return m.LinkNotes(from_id=from_id, to_id=to_id, at=self.clock.now())

    def unlink_notes(self, from_id: str, to_id: str) -> m.UnlinkNotes:
        return m.UnlinkNotes(from_id=from_id, to_id=to_id, at=self.clock.now())

    def new_notebook(self, name: str = DEFAULT_NOTEBOOK_NAME) -> m.NewNotebook:
        return m.NewNotebook(name=name, at=self.clock.now())

    def save_as(self, path: str | Path) -> m.SaveNotebookAs:
        return m.SaveNotebookAs(path=Path(path))

    def load(self, path: str | Path) -> m.LoadNotebook:
        return m.LoadNotebook(path=Path(path))
