from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtCore import QObject, QRunnable, Signal

from nexia.core.models import Notebook
from nexia.infrastructure.filesystem import write_recovery_copy
from nexia.infrastructure.json_storage import JsonStorage, StorageError, dumps

log = logging.getLogger(__name__)


class PersistenceSignals(QObject):
    finished = Signal(int, object)   # req_id, Notebook (load) or Path (save)
    failed = Signal(int, str)        # req_id, error


class LoadNotebookWorker(QRunnable):
    """
    Background read of a notebook file.

    OUTPUT:
      finished(req_id, Notebook) or failed(req_id, message)
    """

    def __init__(self, *, req_id: int, path: Path, storage: JsonStorage):
        super().__init__()
        self.req_id = req_id
        self.path = Path(path)
        self.storage = storage
        self.signals = PersistenceSignals()

    def run(self) -> None:
        try:
            notebook = self.storage.load(self.path)
        except StorageError as e:
            log.warning("Load failed path=%s: %s", self.path, e)
            self.signals.failed.emit(self.req_id, str(e))
            return
        except Exception as e:
            log.exception("Unexpected error while loading %s", self.path)
            self.signals.failed.emit(self.req_id, f"Cannot load {self.path}: {e}")
            return
        self.signals.finished.emit(self.req_id, notebook)


class SaveNotebookWorker(QRunnable):
    """
    Background write of a notebook snapshot.

    When the write fails a recovery copy is attempted and its location is
    appended to the error message.
    """

    def __init__(self, *, req_id: int, path: Path, notebook: Notebook, storage: JsonStorage):
        super().__init__()
        self.req_id = req_id
        self.path = Path(path)
        self.notebook = notebook
        self.storage = storage
        self.signals = PersistenceSignals()

    def run(self) -> None:
        try:
            self.storage.save(self.notebook, self.path)
        except StorageError as e:
            log.error("Save failed path=%s: %s", self.path, e)
            self.signals.failed.emit(self.req_id, self._with_recovery(str(e)))
            return
        except Exception as e:
            log.exception("Unexpected error while saving %s", self.path)
            self.signals.failed.emit(self.req_id, f"Cannot save {self.path}: {e}")
            return
        self.signals.finished.emit(self.req_id, self.path)

    def _with_recovery(self, message: str) -> str:
        try:
            recovery = write_recovery_copy(self.path, dumps(self.notebook))
        except OSError:
            log.exception("Recovery copy failed for %s", self.path)
            return message
        log.warning("Recovery copy written: %s", recovery)
        return f"{message} (recovery copy: {recovery})"
