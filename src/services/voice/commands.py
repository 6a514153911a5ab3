"""The fixed set of voice commands registered when a session starts."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

import structlog

from src.services.voice.actions import Navigator, Route, Signal, SignalEmitter
from src.services.voice.command_table import CommandAction
from src.services.voice.speech_output import SpeechOutputEngine, reading_rate

logger = structlog.get_logger(__name__)


@dataclass(slots=True)
class PageSnapshot:
    """Readable text the client reports for the page currently shown.

    ``question`` is the active quiz question, ``section`` the first lesson
    section and ``heading`` the first heading or paragraph of the page.
    """

    path: str = Route.DASHBOARD
    question: str = ""
    section: str = ""
    heading: str = ""


@dataclass(slots=True)
class ReadingPreferences:
    reading_speed: int = 3
    preferred_voice: str = ""


def select_readable_text(page: PageSnapshot) -> str:
    """Pick what "start reading" should read, by URL path."""
    if "/quiz" in page.path:
        return page.question
    if "/course" in page.path:
        return page.section
    return page.heading


def build_static_commands(
    *,
    navigator: Navigator,
    signals: SignalEmitter,
    speech: SpeechOutputEngine,
    page: Callable[[], PageSnapshot],
    preferences: Callable[[], ReadingPreferences],
    on_help: Callable[[], None],
) -> dict[str, CommandAction]:
    """Return the phrase -> action mapping for navigation and reading."""

    def go(path: str) -> CommandAction:
        return lambda: navigator.navigate_to(path)

    def emit(signal: Signal) -> CommandAction:
        return lambda: signals.emit(signal)

    def start_reading() -> None:
        text = select_readable_text(page())
        if not text:
            logger.debug("voice.commands.nothing_to_read", path=page().path)
            return
        prefs = preferences()
        speech.speak(text, reading_rate(prefs.reading_speed), 1.0, prefs.preferred_voice)

    return {
        "go to dashboard": go(Route.DASHBOARD),
        "go home": go(Route.DASHBOARD),
        "open dashboard": go(Route.DASHBOARD),
        "show courses": go(Route.COURSES),
        "open courses": go(Route.COURSES),
        "open settings": go(Route.ACCESSIBILITY_SETTINGS),
        "accessibility settings": go(Route.ACCESSIBILITY_SETTINGS),
        "help": on_help,
        "go back": navigator.navigate_back,
        "open course introduction to programming": go(Route.course(1)),
        "next lesson": emit(Signal.NAVIGATE_NEXT),
        "previous lesson": emit(Signal.NAVIGATE_PREVIOUS),
        "start reading": start_reading,
        "pause reading": speech.pause,
        "pause": speech.pause,
        "resume": speech.resume,
        "stop": speech.stop_speaking,
    }


# Shown on the voice-commands help page.
STATIC_COMMAND_HELP: dict[str, str] = {
    "go to dashboard": "Go to the dashboard",
    "go home": "Go to the dashboard",
    "open dashboard": "Go to the dashboard",
    "show courses": "Open the courses page",
    "open courses": "Open the courses page",
    "open settings": "Open accessibility settings",
    "accessibility settings": "Open accessibility settings",
    "help": "Open the voice commands help",
    "go back": "Go back to the previous page",
    "open course introduction to programming": "Open Introduction to Programming",
    "next lesson": "Go to the next section or lesson",
    "previous lesson": "Go to the previous section or lesson",
    "start reading": "Read the current page content aloud",
    "pause reading": "Pause reading",
    "pause": "Pause reading",
    "resume": "Resume reading",
    "stop": "Stop reading",
}
