"""
Pure operations over the Notebook aggregate.

Every function takes a notebook and returns a notebook; the input is never
mutated. When nothing changes the very same object is returned, so callers
can detect a no-op with ``new is old``.

Link bookkeeping mirrors the incremental index update: diff the old and new
outgoing targets of a note, then add/remove that note in the backlink lists
of the targets that changed.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Iterable

from nexia.core.models import DuplicateNoteError, Note, Notebook
from nexia.core.values import AttributeValue, validate_attribute_value

log = logging.getLogger(__name__)

NoteTransform = Callable[[Note], Note]


# ───────────────────────── internals ─────────────────────────

def _clean_links(src_id: str, targets: Iterable[str], notes: dict[str, Note]) -> tuple[str, ...]:
    """Drop self-links, links to unknown notes and duplicates; keep order."""
    return tuple(dict.fromkeys(t for t in targets if t != src_id and t in notes))


def _reindex(
    backlinks: dict[str, tuple[str, ...]],
    src_id: str,
    old_targets: tuple[str, ...],
    new_targets: tuple[str, ...],
) -> dict[str, tuple[str, ...]]:
    old_set, new_set = set(old_targets), set(new_targets)
    if old_set == new_set:
        return backlinks

    out = dict(backlinks)

    # 1. Remove obsolete incoming links
    for removed in old_targets:
        if removed in new_set:
            continue
        remaining = tuple(s for s in out.get(removed, ()) if s != src_id)
        if remaining:
            out[removed] = remaining
        else:
            out.pop(removed, None)

    # 2. Add new incoming links
    for added in new_targets:
        if added in old_set:
            continue
        sources = out.get(added, ())
        if src_id not in sources:
            out[added] = sources + (src_id,)

    return out


# ───────────────────────── notes ─────────────────────────

def add_note(notebook: Notebook, note: Note, now: datetime) -> Notebook:
    """
    Append `note` keyed by its id.

    The id must be fresh; reusing one is a caller bug and raises
    DuplicateNoteError. Links the note already carries are cleaned and
    registered in the backlink index.
    """
    if note.id in notebook.notes:
        raise DuplicateNoteError(note.id)

    notes = dict(notebook.notes)
    links = _clean_links(note.id, note.links, notes)
    notes[note.id] = note if links == note.links else replace(note, links=links)

    backlinks = _reindex(notebook.backlinks, note.id, (), links)
    log.debug("Note added id=%s links=%d", note.id, len(links))
    return replace(notebook, notes=notes, backlinks=backlinks, modified_at=now)


def update_note(notebook: Notebook, note_id: str, transform: NoteTransform, now: datetime) -> Notebook:
    """
    Replace the note with ``transform(note)`` and stamp its modified_at.

    The id is kept whatever the transform returns. If the transform changes
    `links`, the backlink index follows. Unknown ids are a no-op.
    """
    current = notebook.notes.get(note_id)
    if current is None:
        return notebook

    updated = transform(current)
    links = _clean_links(note_id, updated.links, notebook.notes)
    updated = replace(updated, id=note_id, links=links, modified_at=now)

    notes = dict(notebook.notes)
    notes[note_id] = updated
    backlinks = _reindex(notebook.backlinks, note_id, current.links, links)
    return replace(notebook, notes=notes, backlinks=backlinks, modified_at=now)


def remove_note(notebook: Notebook, note_id: str, now: datetime) -> Notebook:
    """
    Delete a note together with every link touching it.

    Both directions are cleaned: the note disappears from the backlinks of
    its own targets, and it is pruned from the outgoing links of every note
    that pointed at it (those notes get a fresh modified_at).
    """
    removed = notebook.notes.get(note_id)
    if removed is None:
        return notebook

    notes = {k: v for k, v in notebook.notes.items() if k != note_id}
    backlinks = dict(_reindex(notebook.backlinks, note_id, removed.links, ()))
    backlinks.pop(note_id, None)

    pruned = 0
    for src_id, src in notes.items():
        if note_id in src.links:
            notes[src_id] = replace(
                src,
                links=tuple(t for t in src.links if t != note_id),
                modified_at=now,
            )
            pruned += 1

    log.debug("Note removed id=%s pruned_forward_links=%d", note_id, pruned)
    return replace(notebook, notes=notes, backlinks=backlinks, modified_at=now)


# ───────────────────────── links ─────────────────────────

def add_link(notebook: Notebook, from_id: str, to_id: str, now: datetime) -> Notebook:
    """
    Link `from_id` -> `to_id`.

    No-op for self-links, for links that already exist and when either end
    is missing, so the two halves of a link are always written together.
    """
    if from_id == to_id:
        return notebook
    src = notebook.notes.get(from_id)
    if src is None or to_id not in notebook.notes:
        return notebook
    if to_id in src.links:
        return notebook
    return update_note(notebook, from_id, lambda n: replace(n, links=n.links + (to_id,)), now)


def remove_link(notebook: Notebook, from_id: str, to_id: str, now: datetime) -> Notebook:
    src = notebook.notes.get(from_id)
    if src is not None and to_id in src.links:
        return update_note(
            notebook,
            from_id,
            lambda n: replace(n, links=tuple(t for t in n.links if t != to_id)),
            now,
        )

    # Stray backlink without its forward half (only reachable from hand-built data)
    sources = notebook.backlinks.get(to_id, ())
    if from_id not in sources:
        return notebook
    backlinks = _reindex(notebook.backlinks, from_id, (to_id,), ())
    return replace(notebook, backlinks=backlinks, modified_at=now)


# ───────────────────────── attributes ─────────────────────────

def set_attribute(notebook: Notebook, note_id: str, key: str, value: AttributeValue, now: datetime) -> Notebook:
    value = validate_attribute_value(value)
    return update_note(
        notebook,
        note_id,
        lambda n: replace(n, attributes={**n.attributes, key: value}),
        now,
    )


def remove_attribute(notebook: Notebook, note_id: str, key: str, now: datetime) -> Notebook:
    note = notebook.notes.get(note_id)
    if note is None or key not in note.attributes:
        return notebook
    return update_note(
        notebook,
        note_id,
        lambda n: replace(n, attributes={k: v for k, v in n.attributes.items() if k != key}),
        now,
    )
