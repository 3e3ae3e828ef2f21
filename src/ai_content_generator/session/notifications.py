import time
from collections.abc import Callable
from dataclasses import dataclass

NOTIFICATION_SECONDS = 3.0


@dataclass(frozen=True)
class Notice:
    message: str
    posted_at: float


class Notifier:
    """Single-slot transient message; a new notice replaces the visible one."""

    def __init__(self, ttl: float = NOTIFICATION_SECONDS, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl = ttl
        self.clock = clock
        self._notice: Notice | None = None

    def notify(self, message: str) -> None:
        self._notice = Notice(message=message, posted_at=self.clock())

    def dismiss(self) -> None:
        self._notice = None

    @property
    def current(self) -> str | None:
        if self._notice is None:
            return None
        if self.clock() - self._notice.posted_at >= self.ttl:
            self._notice = None
            return None
        return self._notice.message
