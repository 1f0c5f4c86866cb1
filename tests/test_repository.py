import sys
import os
from dataclasses import replace
from datetime import timedelta

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from conftest import T0
from nexia.core import repository as repo
from nexia.core.models import DuplicateNoteError, Note, Notebook

T1 = T0 + timedelta(minutes=1)
T2 = T0 + timedelta(minutes=2)


def _notebook(*ids: str) -> Notebook:
    nb = Notebook.empty("Test", T0)
    for note_id in ids:
        nb = repo.add_note(nb, Note.new(note_id, f"Note {note_id}", T0), T0)
    return nb


def _symmetric(nb: Notebook) -> bool:
    for src, note in nb.notes.items():
        for dst in note.links:
            if src not in nb.backlinks_for(dst):
                return False
    for dst, sources in nb.backlinks.items():
        for src in sources:
            if src not in nb.notes or dst not in nb.notes[src].links:
                return False
    return True


def test_add_note_keeps_insertion_order():
    nb = _notebook("c", "a", "b")
    assert nb.note_ids() == ["c", "a", "b"]
    assert len(nb) == 3


def test_add_note_does_not_mutate_input():
    nb = _notebook("a")
    nb2 = repo.add_note(nb, Note.new("b", "B", T1), T1)
    assert "b" not in nb.notes
    assert nb2.modified_at == T1
    assert nb.modified_at == T0


def test_add_note_duplicate_id_raises():
    nb = _notebook("a")
    with pytest.raises(DuplicateNoteError):
        repo.add_note(nb, Note.new("a", "again", T1), T1)


def test_add_note_registers_existing_links():
    nb = _notebook("a")
    note = replace(Note.new("b", "B", T1), links=("a", "b", "ghost", "a"))
    nb = repo.add_note(nb, note, T1)
    assert nb.notes["b"].links == ("a",)
    assert nb.backlinks_for("a") == ("b",)


def test_update_note_refreshes_modified_at():
    nb = _notebook("a")
    nb2 = repo.update_note(nb, "a", lambda n: replace(n, title="Renamed"), T1)
    assert nb2.notes["a"].title == "Renamed"
    assert nb2.notes["a"].modified_at == T1
    assert nb2.notes["a"].created_at == T0
    assert nb2.modified_at == T1


def test_update_note_forces_modified_at_and_id():
    nb = _notebook("a")
    nb2 = repo.update_note(nb, "a", lambda n: replace(n, id="zzz", modified_at=T0), T2)
    assert list(nb2.notes) == ["a"]
    assert nb2.notes["a"].id == "a"
    assert nb2.notes["a"].modified_at == T2


def test_update_missing_note_is_noop():
    nb = _notebook("a")
    assert repo.update_note(nb, "missing", lambda n: replace(n, title="x"), T1) is nb


def test_add_link_is_symmetric_and_idempotent():
    nb = _notebook("a", "b")
    once = repo.add_link(nb, "a", "b", T1)
    twice = repo.add_link(once, "a", "b", T2)

    assert once.notes["a"].links == ("b",)
    assert once.backlinks_for("b") == ("a",)
    assert twice is once
    assert _symmetric(twice)


def test_self_link_rejected():
    nb = _notebook("a")
    assert repo.add_link(nb, "a", "a", T1) is nb


def test_add_link_requires_both_notes():
    nb = _notebook("a")
    assert repo.add_link(nb, "a", "ghost", T1) is nb
    assert repo.add_link(nb, "ghost", "a", T1) is nb
    assert nb.backlinks == {}


def test_remove_link():
    nb = repo.add_link(_notebook("a", "b"), "a", "b", T1)
    nb2 = repo.remove_link(nb, "a", "b", T2)
    assert nb2.notes["a"].links == ()
    assert nb2.backlinks_for("b") == ()
    assert "b" not in nb2.backlinks


def test_remove_missing_link_is_noop():
    nb = _notebook("a", "b")
    assert repo.remove_link(nb, "a", "b", T1) is nb
    assert repo.remove_link(nb, "ghost", "b", T1) is nb


def test_remove_link_keeps_other_sources():
    nb = _notebook("a", "b", "c")
    nb = repo.add_link(nb, "a", "c", T1)
    nb = repo.add_link(nb, "b", "c", T1)
    nb = repo.remove_link(nb, "a", "c", T2)
    assert nb.backlinks_for("c") == ("b",)
    assert _symmetric(nb)


def test_remove_note_prunes_links_both_directions():
    nb = _notebook("a", "b", "c")
    nb = repo.add_link(nb, "a", "b", T1)
    nb = repo.add_link(nb, "b", "c", T1)

    nb2 = repo.remove_note(nb, "b", T2)

    assert "b" not in nb2.notes
    assert nb2.notes["a"].links == ()
    assert nb2.notes["a"].modified_at == T2
    assert nb2.backlinks_for("c") == ()
    assert "b" not in nb2.backlinks
    assert nb2.modified_at == T2
    assert _symmetric(nb2)
    # input untouched
    assert nb.notes["a"].links == ("b",)
    assert nb.backlinks_for("c") == ("b",)


def test_remove_note_without_links_leaves_input_backlinks():
    nb = repo.add_link(_notebook("a", "b", "c"), "a", "b", T1)
    nb2 = repo.remove_note(nb, "c", T2)
    assert nb.backlinks == {"b": ("a",)}
    assert nb2.backlinks == {"b": ("a",)}


def test_remove_missing_note_is_noop():
    nb = _notebook("a")
    assert repo.remove_note(nb, "ghost", T1) is nb


def test_link_sequence_keeps_symmetry():
    nb = _notebook("a", "b", "c", "d")
    ops = [
        ("add", "a", "b"), ("add", "b", "a"), ("add", "c", "a"), ("add", "a", "d"),
        ("remove", "b", "a"), ("add", "d", "c"), ("remove", "a", "d"), ("add", "a", "d"),
        ("remove", "x", "a"), ("add", "c", "c"),
    ]
    for kind, src, dst in ops:
        fn = repo.add_link if kind == "add" else repo.remove_link
        nb = fn(nb, src, dst, T1)
        assert _symmetric(nb)

    assert nb.notes["a"].links == ("b", "d")
    assert nb.backlinks_for("a") == ("c",)


def test_set_and_remove_attribute():
    nb = _notebook("a")
    nb = repo.set_attribute(nb, "a", "tags", ["x", {"k": 1.5}], T1)
    assert nb.notes["a"].attributes == {"tags": ["x", {"k": 1.5}]}
    assert nb.notes["a"].modified_at == T1

    nb2 = repo.remove_attribute(nb, "a", "tags", T2)
    assert nb2.notes["a"].attributes == {}
    assert repo.remove_attribute(nb2, "a", "tags", T2) is nb2


def test_set_attribute_rejects_none():
    nb = _notebook("a")
    with pytest.raises(TypeError):
        repo.set_attribute(nb, "a", "bad", None, T1)


def test_from_notes_rebuilds_backlinks():
    a = replace(Note.new("a", "A", T0), links=("b", "a", "ghost"))
    b = replace(Note.new("b", "B", T0), links=("a",))
    nb = Notebook.from_notes([a, b], name="Loaded", created_at=T0, modified_at=T0)

    assert nb.notes["a"].links == ("b",)
    assert nb.backlinks == {"b": ("a",), "a": ("b",)}


def test_from_notes_rejects_duplicate_ids():
    with pytest.raises(DuplicateNoteError):
        Notebook.from_notes(
            [Note.new("a", "A", T0), Note.new("a", "A2", T0)],
            name="x", created_at=T0, modified_at=T0,
        )


def test_dict_holding_values_are_unhashable(state):
    nb = _notebook("a")
    for value in (nb, nb.notes["a"], state):
        with pytest.raises(TypeError):
            hash(value)
    assert Note.__hash__ is None
    assert Notebook.__hash__ is None
