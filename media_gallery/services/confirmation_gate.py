# media_gallery/services/confirmation_gate.py
"""
Two-step confirmation in front of destructive actions.

The first activation of a key only arms the gate. A second activation of
the same key, before the arm expires, runs the action. Activating another
key re-arms for that key; ``cancel`` disarms. While an action runs, further
activations are ignored. The gate is always disarmed once an action has
been attempted, whatever its outcome.
"""

import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Optional, TypeVar

from ..enums import GateState, LogEmoji, LoggerName, LogSource
from .logger import get_service_logger

logger = get_service_logger(LoggerName.CONFIRMATION_GATE, LogSource.SYSTEM, LogEmoji.LOCK)

T = TypeVar("T")


@dataclass
class GateResult(Generic[T]):
    state: GateState
    key: str
    result: Optional[T] = None


class ConfirmationGate:
    def __init__(
        self,
        timeout_seconds: float = 4.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.timeout_seconds = timeout_seconds
        self._clock = clock
        self._armed_key: Optional[str] = None
        self._armed_at = 0.0
        self._busy = False

    @property
    def armed_key(self) -> Optional[str]:
        if self._armed_key is not None and self._expired():
            logger.debug(f"Confirmation for {self._armed_key} expired")
            self._armed_key = None
        return self._armed_key

    @property
    def busy(self) -> bool:
        return self._busy

    def _expired(self) -> bool:
        return self._clock() - self._armed_at > self.timeout_seconds

    def is_armed(self, key: str) -> bool:
        return self.armed_key == key

    def cancel(self) -> None:
        if self._armed_key is not None:
            logger.debug(f"Confirmation for {self._armed_key} cancelled")
        self._armed_key = None

    async def activate(self, key: str, action: Callable[[], Awaitable[T]]) -> GateResult[T]:
        if self._busy:
            logger.debug(f"Ignoring activation of {key}: an action is running")
            return GateResult(state=GateState.BUSY, key=key)

        if self.armed_key != key:
            self._armed_key = key
            self._armed_at = self._clock()
            logger.debug(f"Armed {key}")
            return GateResult(state=GateState.ARMED, key=key)

        self._busy = True
        try:
            result = await action()
        finally:
            self._busy = False
            self._armed_key = None
        return GateResult(state=GateState.EXECUTED, key=key, result=result)
