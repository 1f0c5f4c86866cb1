from .clock import Clock, IdGenerator, MessageFactory, SystemClock, UuidGenerator
from .graph import GraphSnapshot, build_graph_snapshot
from .messages import Message, ViewMode
from .models import DuplicateNoteError, Note, Notebook, NotebookError, Point2D, Viewport
from .reducer import apply, apply_all
from .search import search
from .selection import MultipleSelection, NoSelection, Selection, SingleSelection
from .state import AppState, initial_state

__all__ = ["Clock",
           "IdGenerator",
           "MessageFactory",
           "SystemClock",
           "UuidGenerator",
           "GraphSnapshot",
           "build_graph_snapshot",
           "Message",
           "ViewMode",
           "DuplicateNoteError",
           "Note",
           "Notebook",
           "NotebookError",
           "Point2D",
           "Viewport",
           "apply",
           "apply_all",
           "search",
           "MultipleSelection",
           "NoSelection",
           "Selection",
           "SingleSelection",
           "AppState",
           "initial_state",
           ]
