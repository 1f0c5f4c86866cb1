from .persistence import LoadNotebookWorker, SaveNotebookWorker

__all__ = [
    "LoadNotebookWorker",
    "SaveNotebookWorker",
]
