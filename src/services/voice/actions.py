"""Action surface shared by voice commands and keyboard shortcuts.

Commands never touch page structure directly.  They either navigate,
or emit one of a fixed set of named signals that page-level
collaborators (the lesson reader, the quiz view) listen for.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Final, Protocol


class Signal(StrEnum):
    """Custom page signals emitted for loose coupling with page content."""

    __slots__ = ()

    START_READING = "start-reading"
    PAUSE_READING = "pause-reading"
    READ_FASTER = "read-faster"
    READ_SLOWER = "read-slower"
    NAVIGATE_NEXT = "navigate-next"
    NAVIGATE_PREVIOUS = "navigate-previous"


class Route:
    """Client-side routes the accessibility layer can navigate to."""

    DASHBOARD: Final[str] = "/"
    COURSES: Final[str] = "/courses"
    PROFILE: Final[str] = "/profile"
    ACCESSIBILITY_SETTINGS: Final[str] = "/accessibility-settings"
    VOICE_COMMANDS_HELP: Final[str] = "/voice-commands-help"
    KEYBOARD_SHORTCUTS_HELP: Final[str] = "/keyboard-shortcuts-help"

    @staticmethod
    def course(course_id: int) -> str:
        return f"/course/{course_id}"


class Navigator(Protocol):
    """Router provided by the surrounding application."""

    def navigate_to(self, path: str) -> None: ...

    def navigate_back(self) -> None: ...


class SignalEmitter(Protocol):
    def emit(self, signal: Signal) -> None: ...
