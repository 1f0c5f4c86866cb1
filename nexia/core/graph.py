from __future__ import annotations

import time
from dataclasses import dataclass

from nexia.core.models import Notebook

GRAPH_MODES = ("global", "local")


@dataclass(frozen=True)
class GraphSnapshot:
    nodes: list[str]
    labels: dict[str, str]
    edges: list[tuple[str, str]]
    stats: dict


def normalize_graph_mode(mode: str, depth: int | str) -> tuple[str, int]:
    mode = (mode or "").strip().lower()
    if mode not in GRAPH_MODES:
        mode = "global"
    try:
        depth_i = int(depth)
    except (TypeError, ValueError):
        depth_i = 1
    return mode, max(1, depth_i)


def build_graph_snapshot(
    notebook: Notebook,
    *,
    mode: str = "global",
    depth: int = 1,
    center: str | None = None,
) -> GraphSnapshot:
    """
    Project the notebook's link graph for the Graph view.

    global: every note and every link.
    local:  the notes within `depth` hops of `center`, links treated as
            undirected for reachability. Falls back to global when the
            center is not a note of the notebook.
    """
    t0 = time.perf_counter()
    mode, depth = normalize_graph_mode(mode, depth)

    labels = {note_id: note.title for note_id, note in notebook.notes.items()}
    edges_all = [(src, dst) for src, note in notebook.notes.items() for dst in note.links]
    nodes_all = sorted(labels, key=lambda i: (labels[i].lower(), i))

    nodes, edges = nodes_all, edges_all

    if mode == "local" and center in labels:
        adj: dict[str, set[str]] = {n: set() for n in nodes_all}
        for a, b in edges_all:
            adj[a].add(b)
            adj[b].add(a)

        visited = {center}
        frontier = {center}
        for _ in range(depth):
            nxt: set[str] = set()
            for v in frontier:
                nxt |= adj[v]
            nxt -= visited
            if not nxt:
                break
            visited |= nxt
            frontier = nxt

        nodes = [n for n in nodes_all if n in visited]
        edges = [(a, b) for (a, b) in edges_all if a in visited and b in visited]

    dt_ms = (time.perf_counter() - t0) * 1000.0
    return GraphSnapshot(
        nodes=nodes,
        labels={n: labels[n] for n in nodes},
        edges=edges,
        stats={
            "mode": mode,
            "depth": depth,
            "nodes_all": len(nodes_all),
            "edges_all": len(edges_all),
            "time_ms": dt_ms,
        },
    )
