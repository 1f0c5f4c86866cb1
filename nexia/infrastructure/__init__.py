from .filesystem import atomic_write_text, write_recovery_copy
from .json_storage import (
    JsonStorage,
    NotebookFormatError,
    NotebookNotFoundError,
    StorageError,
    dumps,
    loads,
)

__all__ = ["atomic_write_text",
           "write_recovery_copy",
           "JsonStorage",
           "NotebookFormatError",
           "NotebookNotFoundError",
           "StorageError",
           "dumps",
           "loads",
           ]
