"""
The reducer: (state, message) -> state.

Total over the message vocabulary, never raises, never mutates its input.
Operations on unknown note ids leave the state untouched. Bookkeeping owned
here:

- dirty        set whenever the notebook actually changes, cleared on
               save/load/new notebook
- editing_note set on create/start editing, cleared on stop, on deletion of
               the edited note and on load/new notebook
- error        only touched by SetError/ClearError
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Iterable, assert_never

from nexia.core import repository, selection as sel, viewport as vp
from nexia.core.messages import (
    AddToSelection,
    ClearError,
    ClearSearch,
    ClearSelection,
    CreateNote,
    CreateNoteAt,
    DeleteNote,
    DeleteSelectedNotes,
    LinkNotes,
    LoadNotebook,
    Message,
    MoveNote,
    NewNotebook,
    NoOp,
    NotebookLoaded,
    NotebookSaved,
    PanCanvas,
    RemoveNoteAttribute,
    ResetViewport,
    ResizeNote,
    SaveNotebook,
    SaveNotebookAs,
    SelectAll,
    SelectNote,
    SetError,
    SetNoteAttribute,
    SetSearchQuery,
    SetViewMode,
    StartEditingNote,
    StopEditingNote,
    ToggleSidebar,
    UnlinkNotes,
    UpdateNoteContent,
    UpdateNoteTitle,
    ZoomCanvas,
)
from nexia.core.models import Note, Notebook, Point2D
from nexia.core.search import search
from nexia.core.state import AppState
from nexia.settings import NEW_NOTE_TITLE

log = logging.getLogger(__name__)


def apply(state: AppState, message: Message) -> AppState:
    match message:
        case CreateNote(note_id=note_id, at=at):
            return _create(state, note_id, None, at)
        case CreateNoteAt(note_id=note_id, point=point, at=at):
            return _create(state, note_id, point, at)
        case DeleteNote(note_id=note_id, at=at):
            if note_id not in state.notebook:
                return state
            return _delete_step(state, note_id, at)
        case DeleteSelectedNotes(at=at):
            return _delete_many(state, sel.selected_ids(state.selection), at)

        case UpdateNoteTitle(note_id=note_id, text=text, at=at):
            return _update(state, note_id, at, title=text)
        case UpdateNoteContent(note_id=note_id, text=text, at=at):
            return _update(state, note_id, at, content=text)
        case MoveNote(note_id=note_id, point=point, at=at):
            return _update(state, note_id, at, position=point)
        case ResizeNote(note_id=note_id, width=width, height=height, at=at):
            return _update(state, note_id, at, size=(width, height))
        case SetNoteAttribute(note_id=note_id, key=key, value=value, at=at):
            return _with_notebook(state, repository.set_attribute(state.notebook, note_id, key, value, at))
        case RemoveNoteAttribute(note_id=note_id, key=key, at=at):
            return _with_notebook(state, repository.remove_attribute(state.notebook, note_id, key, at))

        case StartEditingNote(note_id=note_id):
            return replace(state, editing_note=note_id)
        case StopEditingNote():
            return replace(state, editing_note=None)

        case LinkNotes(from_id=from_id, to_id=to_id, at=at):
            return _with_notebook(state, repository.add_link(state.notebook, from_id, to_id, at))
        case UnlinkNotes(from_id=from_id, to_id=to_id, at=at):
            return _with_notebook(state, repository.remove_link(state.notebook, from_id, to_id, at))

        case SelectNote(note_id=note_id):
            return replace(state, selection=sel.select(note_id))
        case AddToSelection(note_id=note_id):
            return replace(state, selection=sel.add_to_selection(state.selection, note_id))
        case ClearSelection():
            return replace(state, selection=sel.clear())
        case SelectAll():
            return replace(state, selection=sel.select_all(state.notebook.note_ids()))

        case SetViewMode(mode=mode):
            return replace(state, view_mode=mode)
        case ToggleSidebar():
            return replace(state, sidebar_open=not state.sidebar_open)
        case PanCanvas(dx=dx, dy=dy):
            return replace(state, viewport=vp.pan(state.viewport, dx, dy))
        case ZoomCanvas(factor=factor):
            return replace(state, viewport=vp.zoom(state.viewport, factor))
        case ResetViewport():
            return replace(state, viewport=vp.reset())

        case SetSearchQuery(text=text):
            return replace(state, search_query=text, search_results=tuple(search(state.notebook, text)))
        case ClearSearch():
            return replace(state, search_query="", search_results=())

        case NewNotebook(name=name, at=at):
            log.debug("New notebook name=%r", name)
            return AppState(
                notebook=Notebook.empty(name, at),
                view_mode=state.view_mode,
                sidebar_open=state.sidebar_open,
            )
        case NotebookLoaded(notebook=notebook):
            log.debug("Notebook loaded name=%r notes=%d", notebook.name, len(notebook))
            return replace(
                state,
                notebook=notebook,
                selection=sel.clear(),
                editing_note=None,
                dirty=False,
                search_results=tuple(search(notebook, state.search_query)),
            )
        case NotebookSaved():
            return replace(state, dirty=False)
        case SaveNotebook() | SaveNotebookAs() | LoadNotebook():
            # carried out by the persistence collaborator
            return state

        case SetError(text=text):
            return replace(state, error=text)
        case ClearError():
            return replace(state, error=None)
        case NoOp():
            return state

        case _:
            assert_never(message)


def apply_all(state: AppState, messages: Iterable[Message]) -> AppState:
    for message in messages:
        state = apply(state, message)
    return state


# ───────────────────────── internals ─────────────────────────

def _with_notebook(state: AppState, notebook: Notebook) -> AppState:
    """Install a changed notebook: mark dirty and refresh live search results."""
    if notebook is state.notebook:
        return state
    results = tuple(search(notebook, state.search_query)) if state.search_query else ()
    return replace(state, notebook=notebook, dirty=True, search_results=results)


def _create(state: AppState, note_id: str, point: Point2D | None, at: datetime) -> AppState:
    if note_id in state.notebook:
        log.warning("CreateNote with an id already in use ignored id=%s", note_id)
        return state
    note = Note.new(note_id, NEW_NOTE_TITLE, at, position=point)
    state = _with_notebook(state, repository.add_note(state.notebook, note, at))
    return replace(state, selection=sel.select(note_id), editing_note=note_id)


def _update(state: AppState, note_id: str, at: datetime, **changes) -> AppState:
    notebook = repository.update_note(state.notebook, note_id, lambda n: replace(n, **changes), at)
    return _with_notebook(state, notebook)


def _delete_step(state: AppState, note_id: str, at: datetime) -> AppState:
    state = _with_notebook(state, repository.remove_note(state.notebook, note_id, at))
    return replace(
        state,
        selection=sel.remove_from_selection(state.selection, note_id),
        editing_note=None if state.editing_note == note_id else state.editing_note,
    )


def _delete_many(state: AppState, note_ids: tuple[str, ...], at: datetime) -> AppState:
    # Fold over the ids captured before the first deletion; each step
    # re-normalizes the selection on its own.
    for note_id in note_ids:
        state = _delete_step(state, note_id, at)
    return state
