from __future__ import annotations

from nexia.core.models import Notebook


def search(notebook: Notebook, query: str) -> list[str]:
    """
    Case-insensitive substring search over title and content.

    An empty query matches nothing. Hits come back in notebook order.
    """
    if not query:
        return []
    q = query.lower()
    return [
        note_id
        for note_id, note in notebook.notes.items()
        if q in note.title.lower() or q in note.content.lower()
    ]


def search_by_title(notebook: Notebook, query: str) -> list[str]:
    if not query:
        return []
    q = query.lower()
    return [note_id for note_id, note in notebook.notes.items() if q in note.title.lower()]


def search_by_content(notebook: Notebook, query: str) -> list[str]:
    if not query:
        return []
    q = query.lower()
    return [note_id for note_id, note in notebook.notes.items() if q in note.content.lower()]
