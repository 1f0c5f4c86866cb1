"""Headless entry point.

Loads a notebook file through the same store/persistence path the editor
uses and prints a summary, search hits or the link graph.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from PySide6.QtCore import QCoreApplication, QTimer

from nexia.app_settings import last_notebook_path, open_settings
from nexia.core import messages as m
from nexia.core.graph import build_graph_snapshot
from nexia.core.state import AppState
from nexia.logging_setup import SESSION_ID, install_global_exception_hooks, setup_logging
from nexia.services.notebook_store import NotebookStore


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="nexia", description="Inspect a Nexia notebook file")
    p.add_argument(
        "path",
        type=Path,
        nargs="?",
        help="Notebook JSON file (defaults to the last one opened)",
    )
    p.add_argument("--log-level", default="WARNING", help="Console log level")
    group = p.add_mutually_exclusive_group()
    group.add_argument("--search", metavar="QUERY", help="Print notes matching QUERY")
    group.add_argument("--graph", action="store_true", help="Print the link graph")
    p.add_argument("--center", metavar="ID", help="With --graph: only the neighbourhood of this note")
    p.add_argument("--depth", type=int, default=1, help="With --center: hops to include")
    return p.parse_args(argv)


def format_summary(state: AppState) -> list[str]:
    nb = state.notebook
    link_count = sum(len(n.links) for n in nb.notes.values())
    lines = [f"{nb.name}: {len(nb)} notes, {link_count} links"]
    for note_id, note in nb.notes.items():
        lines.append(
            f"  {note.title}  [{note_id}]  out={len(note.links)} in={len(nb.backlinks_for(note_id))}"
        )
    return lines


def format_search(state: AppState) -> list[str]:
    nb = state.notebook
    return [f"{nb.notes[i].title}  [{i}]" for i in state.search_results]


def format_graph(state: AppState, *, center: str | None, depth: int) -> list[str]:
    snap = build_graph_snapshot(
        state.notebook,
        mode="local" if center else "global",
        depth=depth,
        center=center,
    )
    lines = [f"{len(snap.nodes)} nodes, {len(snap.edges)} edges"]
    for src, dst in snap.edges:
        lines.append(f"  {snap.labels[src]} -> {snap.labels[dst]}")
    return lines


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    level = getattr(logging, str(args.log_level).upper(), logging.WARNING)
    log = setup_logging(console_level=level)
    install_global_exception_hooks(log)

    app = QCoreApplication.instance() or QCoreApplication([])
    settings = open_settings()

    path = args.path or last_notebook_path(settings)
    if path is None:
        print("No notebook path given and none remembered.", file=sys.stderr)
        return 2

    store = NotebookStore(settings=settings)
    outcome: dict[str, AppState] = {}

    def _on_state(state: AppState) -> None:
        if state.error or state.notebook is not initial.notebook:
            outcome.setdefault("state", state)
            app.quit()

    initial = store.state
    store.state_changed.connect(_on_state)
    QTimer.singleShot(0, lambda: store.dispatch(m.LoadNotebook(path)))
    app.exec()

    state = outcome.get("state")
    if state is None or state.error:
        print(state.error if state else f"Cannot load {path}", file=sys.stderr)
        return 1

    log.info("Loaded %s, SID=%s", path, SESSION_ID)
    if args.search is not None:
        store.dispatch(m.SetSearchQuery(args.search))
        lines = format_search(store.state)
    elif args.graph:
        lines = format_graph(store.state, center=args.center, depth=args.depth)
    else:
        lines = format_summary(store.state)

    print("\n".join(lines))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
