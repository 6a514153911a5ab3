"""Accessibility layer: voice commands, read-aloud, announcements, shortcuts.

Public API::

    from src.services.voice import (
        Announcer,
        CommandTable,
        KeyboardShortcutDispatcher,
        SpeechOutputEngine,
        VoiceCommandManager,
        VoiceSession,
    )
"""

from __future__ import annotations

from src.services.voice.actions import Navigator, Route, Signal, SignalEmitter
from src.services.voice.announcer import Announcer, LiveRegion, Politeness
from src.services.voice.command_table import Command, CommandTable, normalize_phrase
from src.services.voice.commands import (
    STATIC_COMMAND_HELP,
    PageSnapshot,
    ReadingPreferences,
    build_static_commands,
    select_readable_text,
)
from src.services.voice.errors import (
    AccessibilityError,
    CommandFailed,
    InvalidArgument,
    RecognitionError,
    StartFailure,
    UnsupportedCapability,
)
from src.services.voice.keyboard import SHORTCUTS, KeyboardShortcutDispatcher, KeyEvent, Shortcut
from src.services.voice.manager import (
    ManagerState,
    RecognitionConfig,
    RecognitionEngine,
    RecognitionResult,
    VoiceCommandManager,
    confidence_threshold,
)
from src.services.voice.session import ClientChannel, VoiceSession
from src.services.voice.speech_output import (
    SpeechOutputEngine,
    SynthesisBackend,
    Utterance,
    Voice,
    reading_rate,
    select_voice,
)
from src.services.voice.synchronizer import Clickable, CommandSynchronizer

__all__ = [
    "SHORTCUTS",
    "STATIC_COMMAND_HELP",
    "AccessibilityError",
    "Announcer",
    "ClientChannel",
    "Clickable",
    "Command",
    "CommandFailed",
    "CommandSynchronizer",
    "CommandTable",
    "InvalidArgument",
    "KeyEvent",
    "KeyboardShortcutDispatcher",
    "LiveRegion",
    "ManagerState",
    "Navigator",
    "PageSnapshot",
    "Politeness",
    "ReadingPreferences",
    "RecognitionConfig",
    "RecognitionEngine",
    "RecognitionError",
    "RecognitionResult",
    "Route",
    "Shortcut",
    "Signal",
    "SignalEmitter",
    "SpeechOutputEngine",
    "StartFailure",
    "SynthesisBackend",
    "UnsupportedCapability",
    "Utterance",
    "Voice",
    "VoiceCommandManager",
    "VoiceSession",
    "build_static_commands",
    "confidence_threshold",
    "normalize_phrase",
    "reading_rate",
    "select_readable_text",
    "select_voice",
]
