from .core import AppState, Message, MessageFactory, Note, Notebook, apply, initial_state
from .infrastructure import JsonStorage, StorageError

__version__ = "0.1.0"

__all__ = ["AppState",
           "Message",
           "MessageFactory",
           "Note",
           "Notebook",
           "apply",
           "initial_state",
           "JsonStorage",
           "StorageError",
           ]
