"""Single-slot bridge from application events to an assistive-technology
live region.

Each announcement replaces the previous one; nothing is retained.  When
several listeners fire for the same logical event, identical consecutive
messages inside a short debounce window are collapsed so the screen
reader speaks them once.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from enum import StrEnum
from typing import Final, Protocol

import structlog

logger = structlog.get_logger(__name__)

DEFAULT_DEBOUNCE_SECONDS: Final[float] = 0.5


class Politeness(StrEnum):
    """ARIA live-region politeness levels."""

    __slots__ = ()

    POLITE = "polite"
    ASSERTIVE = "assertive"


class LiveRegion(Protocol):
    """Anything that can surface text to assistive technology."""

    def write(self, message: str, politeness: Politeness) -> None: ...


class Announcer:
    """Writes announcements into one shared live-region slot.

    Parameters
    ----------
    region:
        The live region that receives announcements.
    debounce_seconds:
        Window within which an identical consecutive message is dropped.
        ``0`` disables debouncing.
    clock:
        Monotonic clock, injectable for tests.
    """

    __slots__ = ("_clock", "_current", "_debounce", "_last_at", "_region")

    def __init__(
        self,
        region: LiveRegion,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._region = region
        self._debounce = debounce_seconds
        self._clock = clock
        self._current: str | None = None
        self._last_at: float = float("-inf")

    @property
    def current(self) -> str | None:
        """The message currently occupying the slot, if any."""
        return self._current

    def announce(self, message: str) -> None:
        if not message or not message.strip():
            return

        now = self._clock()
        if message == self._current and now - self._last_at < self._debounce:
            logger.debug("voice.announcer.debounced", message=message)
            return

        self._current = message
        self._last_at = now
        self._region.write(message, Politeness.POLITE)
