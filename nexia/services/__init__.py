from .notebook_store import NotebookStore
from .persistence_service import PersistenceService

__all__ = [
    "NotebookStore",
    "PersistenceService",
]
