"""Global keyboard shortcut dispatcher.

Alt+key combinations map to navigation and reading actions.  Shortcuts
are ignored while focus sits in a text-capable form control so typed
characters never trigger them, and unmapped Alt+key combinations fall
through to the browser's default handling.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

import structlog

from src.services.voice.actions import Navigator, Route, Signal, SignalEmitter
from src.services.voice.announcer import Announcer

logger = structlog.get_logger(__name__)

FORM_CONTROL_TAGS: Final[frozenset[str]] = frozenset({"input", "textarea", "select"})


@dataclass(frozen=True, slots=True)
class KeyEvent:
    """A keydown event as reported by the client."""

    key: str
    alt: bool = False
    ctrl: bool = False
    shift: bool = False
    target: str = "body"  # tag name of the focused element

    @property
    def in_form_control(self) -> bool:
        return self.target.lower() in FORM_CONTROL_TAGS


@dataclass(frozen=True, slots=True)
class Shortcut:
    keys: tuple[str, ...]
    announcement: str
    route: str | None = None
    signal: Signal | None = None

    @property
    def description(self) -> str:
        return self.announcement


SHORTCUTS: Final[tuple[Shortcut, ...]] = (
    Shortcut(("d",), "Going to dashboard", route=Route.DASHBOARD),
    Shortcut(("c",), "Going to courses page", route=Route.COURSES),
    Shortcut(("p",), "Going to profile page", route=Route.PROFILE),
    Shortcut(("a",), "Going to accessibility settings", route=Route.ACCESSIBILITY_SETTINGS),
    Shortcut(("s",), "Start reading content", signal=Signal.START_READING),
    Shortcut(("x",), "Pause reading", signal=Signal.PAUSE_READING),
    Shortcut((".", ">"), "Reading faster", signal=Signal.READ_FASTER),
    Shortcut((",", "<"), "Reading slower", signal=Signal.READ_SLOWER),
    Shortcut(("n",), "Next section or lesson", signal=Signal.NAVIGATE_NEXT),
    Shortcut(("b",), "Previous section or lesson", signal=Signal.NAVIGATE_PREVIOUS),
    Shortcut(("h",), "Voice commands help opened", route=Route.VOICE_COMMANDS_HELP),
)


class KeyboardShortcutDispatcher:
    """Maps Alt+key events onto the shared action surface."""

    __slots__ = ("_announcer", "_by_key", "_navigator", "_signals")

    def __init__(
        self,
        navigator: Navigator,
        signals: SignalEmitter,
        announcer: Announcer,
        shortcuts: tuple[Shortcut, ...] = SHORTCUTS,
    ) -> None:
        self._navigator = navigator
        self._signals = signals
        self._announcer = announcer
        self._by_key: dict[str, Shortcut] = {
            key: shortcut for shortcut in shortcuts for key in shortcut.keys
        }

    def shortcuts(self) -> list[Shortcut]:
        seen: dict[int, Shortcut] = {}
        for shortcut in self._by_key.values():
            seen.setdefault(id(shortcut), shortcut)
        return list(seen.values())

    def handle(self, event: KeyEvent) -> bool:
        """Dispatch *event*; returns True when the default should be suppressed."""
        if event.in_form_control or not event.alt:
            return False

        shortcut = self._by_key.get(event.key.lower())
        if shortcut is None:
            return False

        self._announcer.announce(shortcut.announcement)
        if shortcut.route is not None:
            self._navigator.navigate_to(shortcut.route)
        elif shortcut.signal is not None:
            self._signals.emit(shortcut.signal)

        logger.debug("voice.keyboard.shortcut", key=event.key, action=shortcut.route or shortcut.signal)
        return True
