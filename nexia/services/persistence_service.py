from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from PySide6.QtCore import QObject, QThreadPool, Slot

from nexia.core.models import Notebook
from nexia.infrastructure.json_storage import JsonStorage
from nexia.workers.persistence import LoadNotebookWorker, SaveNotebookWorker

log = logging.getLogger(__name__)


class PersistenceService(QObject):
    """
    Runs notebook load/save off the dispatch thread.

    Responsibilities:
    - start Load/SaveNotebookWorker on the thread pool
    - manage req_id per operation kind (drop stale results)
    - hand results back on the service's own thread
    """

    def __init__(
        self,
        *,
        on_loaded: Callable[[Notebook, Path], None],
        on_saved: Callable[[Notebook, Path], None],
        on_failed: Callable[[str], None],
        thread_pool: QThreadPool | None = None,
        storage: JsonStorage | None = None,
        parent: QObject | None = None,
    ):
        super().__init__(parent)

        self._pool = thread_pool or QThreadPool.globalInstance()
        self._storage = storage or JsonStorage()
        self._on_loaded = on_loaded
        self._on_saved = on_saved
        self._on_failed = on_failed

        self._load_req_id = 0
        self._save_req_id = 0
        self._load_paths: dict[int, Path] = {}
        self._save_jobs: dict[int, Notebook] = {}

    # ───────────────────────── public API ─────────────────────────

    def load(self, path: Path) -> int:
        self._load_req_id += 1
        req_id = self._load_req_id
        self._load_paths = {req_id: Path(path)}

        worker = self.make_load_worker(req_id, Path(path))
        self._pool.start(worker)
        log.info("Load requested req_id=%d path=%s", req_id, path)
        return req_id

    def save(self, notebook: Notebook, path: Path) -> int:
        self._save_req_id += 1
        req_id = self._save_req_id
        self._save_jobs = {req_id: notebook}

        worker = self.make_save_worker(req_id, Path(path), notebook)
        self._pool.start(worker)
        log.info("Save requested req_id=%d path=%s", req_id, path)
        return req_id

    def invalidate(self) -> None:
        """Turn every pending load/save result stale."""
        self._load_req_id += 1
        self._save_req_id += 1
        self._load_paths.clear()
        self._save_jobs.clear()
        log.debug("Pending persistence results invalidated")

    def make_load_worker(self, req_id: int, path: Path) -> LoadNotebookWorker:
        worker = LoadNotebookWorker(req_id=req_id, path=path, storage=self._storage)
        worker.signals.finished.connect(self._handle_loaded)
        worker.signals.failed.connect(self._handle_load_failed)
        return worker

    def make_save_worker(self, req_id: int, path: Path, notebook: Notebook) -> SaveNotebookWorker:
        worker = SaveNotebookWorker(req_id=req_id, path=path, notebook=notebook, storage=self._storage)
        worker.signals.finished.connect(self._handle_saved)
        worker.signals.failed.connect(self._handle_save_failed)
        return worker

    # ───────────────────────── internals ─────────────────────────

    @Slot(int, object)
    def _handle_loaded(self, req_id: int, notebook: Notebook) -> None:
        if req_id != self._load_req_id:
            log.debug("Dropping stale load result req_id=%d", req_id)
            return
        path = self._load_paths.pop(req_id)
        self._on_loaded(notebook, path)

    @Slot(int, str)
    def _handle_load_failed(self, req_id: int, error: str) -> None:
        if req_id != self._load_req_id:
            return
        self._load_paths.pop(req_id, None)
        self._on_failed(error)

    @Slot(int, object)
    def _handle_saved(self, req_id: int, path: Path) -> None:
        if req_id != self._save_req_id:
            log.debug("Dropping stale save result req_id=%d", req_id)
            return
        notebook = self._save_jobs.pop(req_id)
        self._on_saved(notebook, Path(path))

    @Slot(int, str)
    def _handle_save_failed(self, req_id: int, error: str) -> None:
        if req_id != self._save_req_id:
            return
        self._save_jobs.pop(req_id, None)
        self._on_failed(error)
