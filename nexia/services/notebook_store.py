from __future__ import annotations

import logging
from collections import deque
from pathlib import Path

from PySide6.QtCore import QObject, QSettings, QThreadPool, Signal

from nexia.app_settings import remember_notebook_path, remember_ui_flags
from nexia.core import messages as m
from nexia.core.clock import MessageFactory
from nexia.core.models import Notebook
from nexia.core.reducer import apply
from nexia.core.state import AppState, initial_state
from nexia.infrastructure.json_storage import JsonStorage
from nexia.services.persistence_service import PersistenceService

log = logging.getLogger(__name__)


class NotebookStore(QObject):
    """
    The dispatch loop around the reducer.

    - applies one message at a time; messages dispatched from inside a
      state_changed handler are queued and applied afterwards, in order
    - forwards Save/SaveAs/Load to the PersistenceService and turns its
      results into NotebookLoaded / NotebookSaved / SetError messages
    - remembers the file path and UI flags in QSettings when given one
    """

    state_changed = Signal(object)  # AppState

    def __init__(
        self,
        *,
        state: AppState | None = None,
        factory: MessageFactory | None = None,
        thread_pool: QThreadPool | None = None,
        storage: JsonStorage | None = None,
        settings: QSettings | None = None,
        parent: QObject | None = None,
    ):
        super().__init__(parent)
        self.factory = factory or MessageFactory()
        self._state = state or initial_state(self.factory.clock.now())
        self._settings = settings
        self._path: Path | None = None
        self._queue: deque[m.Message] = deque()
        self._dispatching = False

        self._persistence = PersistenceService(
            on_loaded=self._on_loaded,
            on_saved=self._on_saved,
            on_failed=self._on_failed,
            thread_pool=thread_pool,
            storage=storage,
            parent=self,
        )

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def current_path(self) -> Path | None:
        return self._path

    # ───────────────────────── dispatch ─────────────────────────

    def dispatch(self, message: m.Message) -> None:
        self._queue.append(message)
        if self._dispatching:
            return

        self._dispatching = True
        try:
            while self._queue:
                self._step(self._queue.popleft())
        finally:
            self._dispatching = False

    def _step(self, message: m.Message) -> None:
        before = self._state
        after = apply(before, message)
        self._state = after

        match message:
            case m.SaveNotebook():
                self._save(self._path)
            case m.SaveNotebookAs(path=path):
                self._save(path)
            case m.LoadNotebook(path=path):
                self._persistence.load(path)
            case m.NewNotebook():
                self._persistence.invalidate()
                self._path = None
                self._remember_path()

        if after is before:
            return
        if self._settings is not None and (
            after.view_mode != before.view_mode or after.sidebar_open != before.sidebar_open
        ):
            remember_ui_flags(self._settings, after)
        self.state_changed.emit(after)

    def _save(self, path: Path | None) -> None:
        if path is None:
            self.dispatch(m.SetError("No file path specified"))
            return
        self._persistence.save(self._state.notebook, Path(path))

    def _remember_path(self) -> None:
        if self._settings is not None:
            remember_notebook_path(self._settings, self._path)

    # ───────────────────────── persistence callbacks ─────────────────────────

    def _on_loaded(self, notebook: Notebook, path: Path) -> None:
        self._path = path
        self._remember_path()
        self.dispatch(m.NotebookLoaded(notebook))

    def _on_saved(self, notebook: Notebook, path: Path) -> None:
        self._path = path
        self._remember_path()
        if notebook is not self._state.notebook:
            # edited while the write was in flight; the newer state stays dirty
            log.info("Notebook changed during save; keeping dirty flag path=%s", path)
            return
        self.dispatch(m.NotebookSaved())

    def _on_failed(self, error: str) -> None:
        self.dispatch(m.SetError(error))
