import asyncio
import logging
from collections.abc import Callable
from typing import Protocol

from ai_content_generator.content.types import SessionSnapshot
from ai_content_generator.session.persistence import PersistenceManager

logger = logging.getLogger(__name__)
AUTOSAVE_DELAY_SECONDS = 1.5


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class _SpentHandle:
    def cancel(self) -> None:
        return None


class LoopScheduler:
    """Schedules callbacks on the running asyncio loop.

    Outside a loop there is nothing to wait on, so the callback runs at once.
    """

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("autosave.no_loop running callback now")
            callback()
            return _SpentHandle()
        return loop.call_later(delay, callback)


class SessionAutosaver:
    """Debounced writer for the session snapshot.

    ``schedule`` replaces any pending payload and restarts the quiet period;
    the snapshot is written only once the delay passes without another call.
    """

    def __init__(
        self,
        persistence: PersistenceManager,
        scheduler: Scheduler | None = None,
        delay: float = AUTOSAVE_DELAY_SECONDS,
    ) -> None:
        self.persistence = persistence
        self.scheduler = scheduler or LoopScheduler()
        self.delay = delay
        self._pending: SessionSnapshot | None = None
        self._handle: TimerHandle | None = None

    @property
    def pending(self) -> SessionSnapshot | None:
        return self._pending

    def schedule(self, snapshot: SessionSnapshot) -> None:
        self.cancel()
        self._pending = snapshot
        self._handle = self.scheduler.call_later(self.delay, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._pending = None

    def flush(self) -> bool:
        """Write the pending snapshot now. Returns False when nothing was pending."""
        snapshot = self._pending
        self.cancel()
        if snapshot is None:
            return False
        self.persistence.save_session(snapshot)
        return True

    def _fire(self) -> None:
        self._handle = None
        snapshot, self._pending = self._pending, None
        if snapshot is not None:
            self.persistence.save_session(snapshot)
            logger.info("autosave.written chars=%d", len(snapshot.content))
