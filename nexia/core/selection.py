from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, TypeAlias


@dataclass(frozen=True)
class NoSelection:
    pass


@dataclass(frozen=True)
class SingleSelection:
    note_id: str


@dataclass(frozen=True)
class MultipleSelection:
    """Two or more distinct ids, in the order they were selected."""

    note_ids: tuple[str, ...]

    def __post_init__(self) -> None:
        if len(self.note_ids) < 2:
            raise ValueError("MultipleSelection needs at least two ids; use normalize()")
        if len(set(self.note_ids)) != len(self.note_ids):
            raise ValueError(f"MultipleSelection ids must be distinct: {self.note_ids!r}")


Selection: TypeAlias = NoSelection | SingleSelection | MultipleSelection

NO_SELECTION = NoSelection()


def normalize(note_ids: Iterable[str]) -> Selection:
    """Pick the variant by size: 0 -> none, 1 -> single, 2+ -> multiple."""
    ids = tuple(dict.fromkeys(note_ids))
    if not ids:
        return NO_SELECTION
    if len(ids) == 1:
        return SingleSelection(ids[0])
    return MultipleSelection(ids)


def selected_ids(selection: Selection) -> tuple[str, ...]:
    match selection:
        case SingleSelection(note_id=note_id):
            return (note_id,)
        case MultipleSelection(note_ids=note_ids):
            return note_ids
        case _:
            return ()


def is_selected(selection: Selection, note_id: str) -> bool:
    return note_id in selected_ids(selection)


def select(note_id: str) -> Selection:
    return SingleSelection(note_id)


def clear() -> Selection:
    return NO_SELECTION


def add_to_selection(selection: Selection, note_id: str) -> Selection:
    match selection:
        case SingleSelection(note_id=current):
            if current == note_id:
                return selection
            return MultipleSelection((current, note_id))
        case MultipleSelection(note_ids=ids):
            if note_id in ids:
                return selection
            return MultipleSelection(ids + (note_id,))
        case _:
            return SingleSelection(note_id)


def select_all(note_ids: Iterable[str]) -> Selection:
    return normalize(note_ids)


def remove_from_selection(selection: Selection, note_id: str) -> Selection:
    match selection:
        case SingleSelection(note_id=current) if current == note_id:
            return NO_SELECTION
        case MultipleSelection(note_ids=ids) if note_id in ids:
            return normalize(i for i in ids if i != note_id)
        case _:
            return selection
