import sys
import os
from datetime import datetime, timedelta, timezone

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from nexia.core.clock import MessageFactory
from nexia.core.state import initial_state

T0 = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class StepClock:
    """Deterministic clock: every now() is one second after the previous."""
    def __init__(self, start: datetime = T0):
        self._next = start

    def now(self) -> datetime:
        value = self._next
        self._next += timedelta(seconds=1)
        return value


class SequentialIds:
    def __init__(self, prefix: str = "n"):
        self._prefix = prefix
        self._n = 0

    def fresh(self) -> str:
        self._n += 1
        return f"{self._prefix}{self._n}"


class SyncPool:
    """Stands in for QThreadPool: runs workers inline on start()."""
    def __init__(self):
        self.started = []

    def start(self, worker) -> None:
        self.started.append(worker)
        worker.run()


class DeferredPool:
    """Collects workers; the test decides when (and whether) each one runs."""
    def __init__(self):
        self.started = []

    def start(self, worker) -> None:
        self.started.append(worker)


@pytest.fixture
def factory():
    return MessageFactory(clock=StepClock(), ids=SequentialIds())


@pytest.fixture
def state():
    return initial_state(T0)


@pytest.fixture(scope="session")
def qapp():
    from PySide6.QtCore import QCoreApplication

    return QCoreApplication.instance() or QCoreApplication([])
