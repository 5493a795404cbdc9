"""
ReadinessGate — the single authority on whether search may be served.

NOT_STARTED → INDEXING → READY, each transition at most once per process.
"""

from __future__ import annotations

import threading
from typing import Optional

from domain.models import ReadinessState
from shared_utils.constants import LogScope
from shared_utils.error_handler import InvalidStateTransition
from shared_utils.logging_utils import get_scoped_logger

logger = get_scoped_logger(LogScope.READINESS)


class ReadinessGate:
    """Thread-safe, forward-only readiness state machine."""

    def __init__(self) -> None:
        self._state = ReadinessState.NOT_STARTED
        self._lock = threading.Lock()
        self._ready = threading.Event()

    @property
    def state(self) -> ReadinessState:
        with self._lock:
            return self._state

    @property
    def is_ready(self) -> bool:
        return self.state is ReadinessState.READY

    def begin_indexing(self) -> None:
        self._transition(ReadinessState.NOT_STARTED, ReadinessState.INDEXING)

    def mark_ready(self) -> None:
        self._transition(ReadinessState.INDEXING, ReadinessState.READY)
        self._ready.set()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until READY or until ``timeout`` seconds pass.

        Returns:
            True if the gate is READY.
        """
        return self._ready.wait(timeout)

    def _transition(self, expected: ReadinessState, target: ReadinessState) -> None:
        with self._lock:
            if self._state is not expected:
                raise InvalidStateTransition(self._state.value, target.value)
            self._state = target
        logger.info("readiness_transition", previous=expected.value, state=target.value)
