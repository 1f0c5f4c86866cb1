from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Iterable

from nexia.core.values import AttributeValue


class NotebookError(Exception):
    """Base class for notebook aggregate errors."""


class DuplicateNoteError(NotebookError):
    def __init__(self, note_id: str):
        super().__init__(f"Note already exists: {note_id}")
        self.note_id = note_id


@dataclass(frozen=True)
class Point2D:
    x: float
    y: float

    @classmethod
    def origin(cls) -> Point2D:
        return cls(0.0, 0.0)


@dataclass(frozen=True)
class Note:
    """
    A single note of the knowledge graph.

    `links` keeps the outgoing targets in the order they were added.
    `prototype` is carried through load/save but has no behavior attached.
    """

    id: str
    title: str
    content: str
    created_at: datetime
    modified_at: datetime
    position: Point2D | None = None
    size: tuple[float, float] | None = None
    links: tuple[str, ...] = ()
    prototype: str | None = None
    attributes: dict[str, AttributeValue] = field(default_factory=dict)

    # holds a dict, so equality only
    __hash__ = None

    @classmethod
    def new(cls, note_id: str, title: str, now: datetime, *, position: Point2D | None = None) -> Note:
        return cls(
            id=note_id,
            title=title,
            content="",
            created_at=now,
            modified_at=now,
            position=position,
        )

    def links_to(self, target: str) -> bool:
        return target in self.links


@dataclass(frozen=True)
class Notebook:
    """
    Aggregate root: notes by id plus the derived backlink index.

    notes[src].links    = (dst1, dst2, ...)
    backlinks[dst]      = (src1, src2, ...)

    Keys with no backlinks are not stored. Instances are never mutated;
    see nexia.core.repository for the operations producing new ones.
    """

    name: str
    created_at: datetime
    modified_at: datetime
    notes: dict[str, Note] = field(default_factory=dict)
    backlinks: dict[str, tuple[str, ...]] = field(default_factory=dict)

    __hash__ = None

    @classmethod
    def empty(cls, name: str, now: datetime) -> Notebook:
        return cls(name=name, created_at=now, modified_at=now)

    @classmethod
    def from_notes(
        cls,
        notes: Iterable[Note],
        *,
        name: str,
        created_at: datetime,
        modified_at: datetime,
    ) -> Notebook:
        """
        Build a notebook from already-constructed notes, re-deriving backlinks.

        Self-links and links to notes that are not part of `notes` are
        dropped. Duplicate ids raise DuplicateNoteError.
        """
        by_id: dict[str, Note] = {}
        for note in notes:
            if note.id in by_id:
                raise DuplicateNoteError(note.id)
            by_id[note.id] = note

        backlinks: dict[str, list[str]] = {}
        for note_id, note in list(by_id.items()):
            kept = tuple(dict.fromkeys(t for t in note.links if t != note_id and t in by_id))
            if kept != note.links:
                by_id[note_id] = replace(note, links=kept)
            for target in kept:
                backlinks.setdefault(target, []).append(note_id)

        return cls(
            name=name,
            created_at=created_at,
            modified_at=modified_at,
            notes=by_id,
            backlinks={k: tuple(v) for k, v in backlinks.items()},
        )

    def __len__(self) -> int:
        return len(self.notes)

    def __contains__(self, note_id: object) -> bool:
        return note_id in self.notes

    def get_note(self, note_id: str) -> Note | None:
        return self.notes.get(note_id)

    def note_ids(self) -> list[str]:
        return list(self.notes)

    def backlinks_for(self, note_id: str) -> tuple[str, ...]:
        return self.backlinks.get(note_id, ())


@dataclass(frozen=True)
class Viewport:
    offset_x: float = 0.0
    offset_y: float = 0.0
    zoom: float = 1.0
