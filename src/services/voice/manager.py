"""Voice command manager.

Owns one continuous speech-recognition session and turns recognised
utterances into command invocations.

State machine::

    UNINITIALIZED --(engine present)--> IDLE <--stop()--+
          |                              |               |
          |                          start()             |
          |                              v               |
          +--(no engine)--> UNSUPPORTED  LISTENING ------+
                                         |    ^
                                         +----+  engine "end" -> auto-restart

Recognition engines end their session spontaneously (short silences,
network hiccups).  While the user has not asked to stop, every such end
is followed by a transparent restart so listening looks continuous.
``stop()`` flips the listening intent *before* stopping the engine so the
resulting "end" event is not mistaken for a spontaneous one.

Errors are never raised to the caller; they are delivered to the
``on_error`` channel (see :mod:`src.services.voice.errors`).
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Final, Protocol

import structlog
from tenacity import Retrying, stop_after_attempt

from src.services.voice.command_table import CommandAction, CommandTable, normalize_phrase
from src.services.voice.errors import (
    AccessibilityError,
    CommandFailed,
    ErrorChannel,
    InvalidArgument,
    RecognitionError,
    StartFailure,
    UnsupportedCapability,
    log_error_channel,
)
from src.services.voice.speech_output import SpeechOutputEngine, Voice

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MIN_SENSITIVITY: Final[int] = 1
MAX_SENSITIVITY: Final[int] = 5
DEFAULT_SENSITIVITY: Final[int] = 3
DEFAULT_LANGUAGE: Final[str] = "en-US"
DEFAULT_RESTART_ATTEMPTS: Final[int] = 3


def confidence_threshold(sensitivity: int) -> float:
    """Map the 1-5 sensitivity dial to a minimum recognition confidence.

    Higher sensitivity means a lower threshold: 5 -> 0.5, 1 -> 0.9.
    """
    return round(0.5 + (MAX_SENSITIVITY - sensitivity) * 0.1, 2)


# ---------------------------------------------------------------------------
# Engine protocol
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RecognitionConfig:
    continuous: bool = True
    interim_results: bool = False
    lang: str = DEFAULT_LANGUAGE


@dataclass(frozen=True, slots=True)
class RecognitionResult:
    """Top alternative of the latest finalised recognition result."""

    transcript: str
    confidence: float


class RecognitionEngine(Protocol):
    """Platform speech recognition (e.g. the browser's ``SpeechRecognition``).

    ``start()`` may raise when the platform refuses activation.
    """

    def configure(self, config: RecognitionConfig) -> None: ...

    def attach(
        self,
        on_result: Callable[[RecognitionResult], None],
        on_error: Callable[[str], None],
        on_end: Callable[[], None],
    ) -> None: ...

    def start(self) -> None: ...

    def stop(self) -> None: ...


class ManagerState(StrEnum):
    __slots__ = ()

    UNINITIALIZED = "uninitialized"
    IDLE = "idle"
    LISTENING = "listening"
    UNSUPPORTED = "unsupported"


def _noop_command(_utterance: str) -> None:
    return None


def _noop_listening(_listening: bool) -> None:
    return None


# ---------------------------------------------------------------------------
# VoiceCommandManager
# ---------------------------------------------------------------------------


class VoiceCommandManager:
    """Continuous speech recognition bound to a :class:`CommandTable`.

    Only one manager should be active per client: the platform engines are
    process-wide singletons and two managers would dispatch every
    utterance twice.
    """

    def __init__(
        self,
        engine: RecognitionEngine | None,
        *,
        commands: CommandTable | None = None,
        speech: SpeechOutputEngine | None = None,
        on_command: Callable[[str], None] = _noop_command,
        on_error: ErrorChannel = log_error_channel,
        on_listening: Callable[[bool], None] = _noop_listening,
        sensitivity: int = DEFAULT_SENSITIVITY,
        language: str = DEFAULT_LANGUAGE,
        restart_attempts: int = DEFAULT_RESTART_ATTEMPTS,
    ) -> None:
        self._engine = engine
        self._commands = commands if commands is not None else CommandTable()
        self._speech = speech if speech is not None else SpeechOutputEngine(None, on_error)
        self._on_command = on_command
        self._on_error = on_error
        self._on_listening = on_listening
        self._language = language
        self._restart_attempts = max(1, restart_attempts)
        self._is_listening = False
        self._state = ManagerState.UNINITIALIZED
        self._sensitivity = DEFAULT_SENSITIVITY
        self._threshold = confidence_threshold(DEFAULT_SENSITIVITY)
        self.set_sensitivity(sensitivity)

        if engine is None:
            self._state = ManagerState.UNSUPPORTED
            self._on_error(UnsupportedCapability("Speech recognition"))
            return

        engine.configure(RecognitionConfig(continuous=True, interim_results=False, lang=language))
        engine.attach(self._handle_result, self._handle_engine_error, self._handle_end)
        self._state = ManagerState.IDLE

    # -- properties ---------------------------------------------------------

    @property
    def state(self) -> ManagerState:
        return self._state

    @property
    def is_listening(self) -> bool:
        return self._is_listening

    @property
    def sensitivity(self) -> int:
        return self._sensitivity

    @property
    def threshold(self) -> float:
        return self._threshold

    @property
    def commands(self) -> CommandTable:
        return self._commands

    @property
    def speech(self) -> SpeechOutputEngine:
        return self._speech

    def is_active(self) -> bool:
        return self._is_listening

    # -- lifecycle ----------------------------------------------------------

    def start(self) -> None:
        if self._engine is None:
            self._on_error(
                UnsupportedCapability(
                    "Speech recognition",
                    "Speech recognition is not supported or not initialized.",
                )
            )
            return
        if self._is_listening:
            return

        try:
            self._engine.start()
        except Exception as exc:
            logger.warning("voice.manager.start_failed", error=str(exc))
            self._on_error(StartFailure(f"Could not start speech recognition: {exc}"))
            return

        self._is_listening = True
        self._state = ManagerState.LISTENING
        logger.info("voice.manager.started", lang=self._language, threshold=self._threshold)
        self._on_listening(True)

    def stop(self) -> None:
        if self._engine is None or not self._is_listening:
            return

        # Intent first: the engine's "end" event must see is_listening=False.
        self._is_listening = False
        self._state = ManagerState.IDLE
        try:
            self._engine.stop()
        except Exception as exc:
            logger.warning("voice.manager.stop_failed", error=str(exc))
            self._on_error(AccessibilityError(f"Could not stop speech recognition: {exc}"))
        logger.info("voice.manager.stopped")
        self._on_listening(False)

    def toggle(self) -> None:
        if self._is_listening:
            self.stop()
        else:
            self.start()

    def set_sensitivity(self, level: int) -> None:
        if (
            isinstance(level, bool)
            or not isinstance(level, int)
            or not MIN_SENSITIVITY <= level <= MAX_SENSITIVITY
        ):
            self._on_error(InvalidArgument("Sensitivity must be between 1 and 5."))
            return
        self._sensitivity = level
        self._threshold = confidence_threshold(level)

    # -- command table passthroughs ----------------------------------------

    def register_command(self, phrase: str, action: CommandAction) -> None:
        self._commands.register(phrase, action)

    def register_commands(self, commands: Mapping[str, CommandAction]) -> None:
        self._commands.register_many(commands)

    def clear_commands(self) -> None:
        self._commands.clear()

    def get_registered_commands(self) -> list[str]:
        return self._commands.list()

    # -- speech passthroughs -----------------------------------------------

    def speak(self, text: str, rate: float = 1.0, pitch: float = 1.0, voice: str = "") -> None:
        self._speech.speak(text, rate, pitch, voice)

    def stop_speaking(self) -> None:
        self._speech.stop_speaking()

    def get_available_voices(self) -> Sequence[Voice]:
        return self._speech.get_available_voices()

    # -- engine callbacks ---------------------------------------------------

    def _handle_result(self, result: RecognitionResult) -> None:
        if result.confidence < self._threshold:
            logger.debug(
                "voice.manager.below_threshold",
                confidence=result.confidence,
                threshold=self._threshold,
            )
            return

        utterance = normalize_phrase(result.transcript)
        command = self._commands.resolve(utterance)
        if command is None:
            return

        try:
            command.action()
        except Exception as exc:
            logger.warning("voice.manager.command_failed", phrase=command.phrase, exc_info=True)
            self._on_error(CommandFailed(command.phrase, exc))
            return

        logger.info("voice.manager.command", utterance=utterance, phrase=command.phrase)
        self._on_command(utterance)

    def _handle_engine_error(self, code: str) -> None:
        # Non-fatal: continuity is governed by the "end" handler.
        self._on_error(RecognitionError(code))

    def _handle_end(self) -> None:
        if not self._is_listening or self._engine is None:
            # stop() already went idle and notified.
            return

        try:
            for attempt in Retrying(stop=stop_after_attempt(self._restart_attempts), reraise=True):
                with attempt:
                    self._engine.start()
        except Exception as exc:
            logger.warning(
                "voice.manager.restart_failed",
                attempts=self._restart_attempts,
                error=str(exc),
            )
            self._is_listening = False
            self._state = ManagerState.IDLE
            self._on_error(StartFailure(f"Could not restart speech recognition: {exc}"))
            self._on_listening(False)
            return

        logger.debug("voice.manager.restarted")
