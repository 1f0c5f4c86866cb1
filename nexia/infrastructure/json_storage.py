"""
JSON file storage for notebooks.

Layout (UTF-8, pretty-printed):

    {
      "name": "...", "created_at": ISO-8601, "modified_at": ISO-8601,
      "notes": {id: {"id", "title", "content", "created_at", "modified_at",
                     "position"?: {"x", "y"}, "size"?: [w, h],
                     "links"?: [...], "prototype"?: id, "attributes"?: {...}}},
      "backlinks": {id: [ids]}
    }

Optional note keys are omitted when empty. Backlinks are written for
readers that expect them but are re-derived from the links on load.
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from nexia.core.models import Note, Notebook, NotebookError, Point2D
from nexia.core.values import validate_attribute_value
from nexia.infrastructure.filesystem import atomic_write_text

log = logging.getLogger(__name__)

# chrono writes nanoseconds; datetime keeps microseconds
_FRACTION = re.compile(r"(\.\d{6})\d+")


class StorageError(Exception):
    """Base class for notebook persistence failures."""


class NotebookNotFoundError(StorageError):
    def __init__(self, path: Path):
        super().__init__(f"File not found: {path}")
        self.path = path


class NotebookFormatError(StorageError):
    pass


# ───────────────────────── encode ─────────────────────────

def _ts(value: datetime) -> str:
    return value.isoformat()


def note_to_dict(note: Note) -> dict[str, Any]:
    out: dict[str, Any] = {
        "id": note.id,
        "title": note.title,
        "content": note.content,
        "created_at": _ts(note.created_at),
        "modified_at": _ts(note.modified_at),
    }
    if note.position is not None:
        out["position"] = {"x": note.position.x, "y": note.position.y}
    if note.size is not None:
        out["size"] = [note.size[0], note.size[1]]
    if note.links:
        out["links"] = list(note.links)
    if note.prototype is not None:
        out["prototype"] = note.prototype
    if note.attributes:
        out["attributes"] = note.attributes
    return out


def notebook_to_dict(notebook: Notebook) -> dict[str, Any]:
    return {
        "name": notebook.name,
        "created_at": _ts(notebook.created_at),
        "modified_at": _ts(notebook.modified_at),
        "notes": {note_id: note_to_dict(note) for note_id, note in notebook.notes.items()},
        "backlinks": {target: list(sources) for target, sources in notebook.backlinks.items()},
    }


def dumps(notebook: Notebook) -> str:
    return json.dumps(notebook_to_dict(notebook), ensure_ascii=False, indent=2)


# ───────────────────────── decode ─────────────────────────

def _parse_ts(raw: Any, *, field: str) -> datetime:
    if not isinstance(raw, str):
        raise NotebookFormatError(f"{field}: expected ISO-8601 string, got {type(raw).__name__}")
    try:
        value = datetime.fromisoformat(_FRACTION.sub(r"\1", raw))
    except ValueError as e:
        raise NotebookFormatError(f"{field}: bad timestamp {raw!r}") from e
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def _expect(data: dict, key: str, kind: type, *, where: str):
    value = data.get(key)
    if not isinstance(value, kind):
        raise NotebookFormatError(f"{where}.{key}: expected {kind.__name__}, got {type(value).__name__}")
    return value


def note_from_dict(data: Any, *, key: str | None = None) -> Note:
    where = f"notes[{key!r}]" if key is not None else "note"
    if not isinstance(data, dict):
        raise NotebookFormatError(f"{where}: expected object")

    note_id = _expect(data, "id", str, where=where)
    if key is not None and key != note_id:
        raise NotebookFormatError(f"{where}: key does not match id {note_id!r}")

    position = None
    if data.get("position") is not None:
        pos = _expect(data, "position", dict, where=where)
        try:
            position = Point2D(float(pos["x"]), float(pos["y"]))
        except (KeyError, TypeError, ValueError) as e:
            raise NotebookFormatError(f"{where}.position: {e}") from e

    size = None
    if data.get("size") is not None:
        raw_size = _expect(data, "size", list, where=where)
        try:
            width, height = raw_size
            size = (float(width), float(height))
        except (TypeError, ValueError) as e:
            raise NotebookFormatError(f"{where}.size: {e}") from e

    links = data.get("links") or []
    if not isinstance(links, list) or not all(isinstance(t, str) for t in links):
        raise NotebookFormatError(f"{where}.links: expected list of ids")

    content = data.get("content", "")
    if not isinstance(content, str):
        raise NotebookFormatError(f"{where}.content: expected string")

    prototype = data.get("prototype")
    if prototype is not None and not isinstance(prototype, str):
        raise NotebookFormatError(f"{where}.prototype: expected id")

    attributes = {}
    if data.get("attributes") is not None:
        attributes = _expect(data, "attributes", dict, where=where)
    try:
        attributes = validate_attribute_value(attributes)
    except TypeError as e:
        raise NotebookFormatError(f"{where}.attributes: {e}") from e

    return Note(
        id=note_id,
        title=_expect(data, "title", str, where=where),
        content=content,
        created_at=_parse_ts(data.get("created_at"), field=f"{where}.created_at"),
        modified_at=_parse_ts(data.get("modified_at"), field=f"{where}.modified_at"),
        position=position,
        size=size,
        links=tuple(links),
        prototype=prototype,
        attributes=attributes,
    )


def notebook_from_dict(data: Any) -> Notebook:
    if not isinstance(data, dict):
        raise NotebookFormatError("notebook: expected object")

    raw_notes = data.get("notes") or {}
    if not isinstance(raw_notes, dict):
        raise NotebookFormatError("notebook.notes: expected object")

    notes = [note_from_dict(raw, key=k) for k, raw in raw_notes.items()]
    link_count = sum(len(n.links) for n in notes)

    try:
        notebook = Notebook.from_notes(
            notes,
            name=_expect(data, "name", str, where="notebook"),
            created_at=_parse_ts(data.get("created_at"), field="notebook.created_at"),
            modified_at=_parse_ts(data.get("modified_at"), field="notebook.modified_at"),
        )
    except NotebookError as e:
        raise NotebookFormatError(str(e)) from e

    dropped = link_count - sum(len(n.links) for n in notebook.notes.values())
    if dropped:
        log.warning("Dropped %d self/dangling links while loading notebook %r", dropped, notebook.name)
    return notebook


def loads(text: str) -> Notebook:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise NotebookFormatError(f"Invalid JSON: {e}") from e
    return notebook_from_dict(data)


# ───────────────────────── storage ─────────────────────────

class JsonStorage:
    """Load/save notebooks as JSON files. Raises StorageError subclasses."""

    def save(self, notebook: Notebook, path: Path) -> None:
        path = Path(path)
        text = dumps(notebook)
        try:
            atomic_write_text(path, text)
        except OSError as e:
            raise StorageError(f"Cannot write {path}: {e}") from e
        log.info("Notebook saved path=%s notes=%d", path, len(notebook))

    def load(self, path: Path) -> Notebook:
        path = Path(path)
        if not path.exists():
            raise NotebookNotFoundError(path)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Cannot read {path}: {e}") from e
        notebook = loads(text)
        log.info("Notebook loaded path=%s notes=%d", path, len(notebook))
        return notebook
