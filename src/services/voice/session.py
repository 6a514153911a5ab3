"""Voice session: the accessibility layer bound to one browser client.

The browser owns the real engines, so each platform protocol the core
depends on (:class:`RecognitionEngine`, :class:`SynthesisBackend`,
:class:`LiveRegion`, :class:`Navigator`, :class:`SignalEmitter`) is
implemented here by a thin proxy that turns calls into outbound JSON
messages.  Inbound client messages are fed to the matching component.

Everything in this module is synchronous: outbound messages are put on
an :class:`asyncio.Queue` which the WebSocket writer drains, so no core
operation ever awaits.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from typing import Any

import structlog
from pydantic import ValidationError

from src.models.voice import (
    ClientMessage,
    ControlsMessage,
    EndMessage,
    EngineErrorMessage,
    KeyMessage,
    PageMessage,
    PingMessage,
    ResultMessage,
    SensitivityMessage,
    SettingsMessage,
    SpeakMessage,
    StartMessage,
    StopMessage,
    StopSpeakingMessage,
    ToggleMessage,
    VoicesMessage,
    client_message_adapter,
)
from src.services.voice.actions import Route, Signal
from src.services.voice.announcer import Announcer, Politeness
from src.services.voice.command_table import CommandTable
from src.services.voice.commands import PageSnapshot, ReadingPreferences, build_static_commands
from src.services.voice.errors import AccessibilityError, InvalidArgument
from src.services.voice.keyboard import KeyboardShortcutDispatcher, KeyEvent
from src.services.voice.manager import (
    RecognitionConfig,
    RecognitionResult,
    VoiceCommandManager,
)
from src.services.voice.speech_output import SpeechOutputEngine, Utterance, Voice
from src.services.voice.synchronizer import Clickable, CommandSynchronizer

logger = structlog.get_logger(__name__)

# Engine error codes after which the browser will refuse to restart on its own.
_BLOCKING_ERRORS = frozenset({"not-allowed", "service-not-allowed", "audio-capture"})


def _is_level(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 1 <= value <= 5


# ---------------------------------------------------------------------------
# Outbound channel
# ---------------------------------------------------------------------------


class ClientChannel:
    """Queue of messages waiting to be written to the client."""

    __slots__ = ("_closed", "_queue")

    def __init__(self) -> None:
        self._queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue()
        self._closed = False

    def send(self, type_: str, **payload: Any) -> None:
        if self._closed:
            return
        self._queue.put_nowait({"type": type_, **payload})

    async def receive(self) -> dict[str, Any]:
        return await self._queue.get()

    def drain(self) -> list[dict[str, Any]]:
        """Pop every queued message without waiting."""
        messages: list[dict[str, Any]] = []
        while not self._queue.empty():
            messages.append(self._queue.get_nowait())
        return messages

    def close(self) -> None:
        self._closed = True


# ---------------------------------------------------------------------------
# Platform proxies
# ---------------------------------------------------------------------------


class RemoteRecognitionEngine:
    """Proxy for the browser's ``SpeechRecognition`` object."""

    def __init__(self, channel: ClientChannel) -> None:
        self._channel = channel
        self._on_result: Callable[[RecognitionResult], None] | None = None
        self._on_error: Callable[[str], None] | None = None
        self._on_end: Callable[[], None] | None = None
        self._blocked_by: str | None = None

    def configure(self, config: RecognitionConfig) -> None:
        self._channel.send(
            "recognition.configure",
            continuous=config.continuous,
            interimResults=config.interim_results,
            lang=config.lang,
        )

    def attach(
        self,
        on_result: Callable[[RecognitionResult], None],
        on_error: Callable[[str], None],
        on_end: Callable[[], None],
    ) -> None:
        self._on_result = on_result
        self._on_error = on_error
        self._on_end = on_end

    def start(self) -> None:
        if self._blocked_by is not None:
            raise RuntimeError(self._blocked_by)
        self._channel.send("recognition.start")

    def stop(self) -> None:
        self._channel.send("recognition.stop")

    def unblock(self) -> None:
        """Allow a user-initiated start after a blocking engine error."""
        self._blocked_by = None

    # -- inbound events -----------------------------------------------------

    def deliver_result(self, transcript: str, confidence: float) -> None:
        if self._on_result is not None:
            self._on_result(RecognitionResult(transcript=transcript, confidence=confidence))

    def deliver_error(self, code: str) -> None:
        if code in _BLOCKING_ERRORS:
            self._blocked_by = code
        if self._on_error is not None:
            self._on_error(code)

    def deliver_end(self) -> None:
        if self._on_end is not None:
            self._on_end()


class RemoteSynthesisBackend:
    """Proxy for the browser's ``speechSynthesis`` object."""

    def __init__(self, channel: ClientChannel) -> None:
        self._channel = channel
        self._voices: list[Voice] = []
        self._voices_changed: Callable[[], None] | None = None

    def get_voices(self) -> Sequence[Voice]:
        return self._voices

    def speak(self, utterance: Utterance) -> None:
        voice = None
        if utterance.voice is not None:
            voice = utterance.voice.voice_uri or utterance.voice.name
        self._channel.send(
            "speak",
            text=utterance.text,
            rate=utterance.rate,
            pitch=utterance.pitch,
            voice=voice,
        )

    def cancel(self) -> None:
        self._channel.send("synthesis.cancel")

    def pause(self) -> None:
        self._channel.send("synthesis.pause")

    def resume(self) -> None:
        self._channel.send("synthesis.resume")

    def on_voices_changed(self, handler: Callable[[], None] | None) -> None:
        self._voices_changed = handler

    def update_voices(self, voices: list[Voice]) -> None:
        self._voices = voices
        if self._voices_changed is not None:
            self._voices_changed()


class RemoteLiveRegion:
    def __init__(self, channel: ClientChannel) -> None:
        self._channel = channel

    def write(self, message: str, politeness: Politeness) -> None:
        self._channel.send("announce", message=message, politeness=str(politeness))


class RemoteNavigator:
    def __init__(self, channel: ClientChannel) -> None:
        self._channel = channel

    def navigate_to(self, path: str) -> None:
        self._channel.send("navigate", path=path)

    def navigate_back(self) -> None:
        self._channel.send("back")


class RemoteSignalEmitter:
    def __init__(self, channel: ClientChannel) -> None:
        self._channel = channel

    def emit(self, signal: Signal) -> None:
        self._channel.send("signal", name=str(signal))


# ---------------------------------------------------------------------------
# VoiceSession
# ---------------------------------------------------------------------------


class VoiceSession:
    """Composition root of the accessibility layer for one client.

    Owns exactly one :class:`VoiceCommandManager`; nothing here is a
    module-level singleton.
    """

    def __init__(
        self,
        session_id: str,
        channel: ClientChannel,
        *,
        recognition_supported: bool = True,
        synthesis_supported: bool = True,
        preferences: ReadingPreferences | None = None,
        sensitivity: int = 3,
        language: str = "en-US",
        debounce_seconds: float = 0.5,
        restart_attempts: int = 3,
        prune_stale: bool = True,
    ) -> None:
        self.session_id = session_id
        self.channel = channel
        self.preferences = preferences or ReadingPreferences()
        self.page = PageSnapshot()
        self._log = logger.bind(session_id=session_id)

        self.recognition = RemoteRecognitionEngine(channel) if recognition_supported else None
        self.synthesis = RemoteSynthesisBackend(channel) if synthesis_supported else None
        self.announcer = Announcer(RemoteLiveRegion(channel), debounce_seconds)
        self.speech = SpeechOutputEngine(self.synthesis, self._report)
        self.commands = CommandTable()

        navigator = RemoteNavigator(channel)
        signals = RemoteSignalEmitter(channel)
        self._navigator = navigator

        self.manager = VoiceCommandManager(
            self.recognition,
            commands=self.commands,
            speech=self.speech,
            on_command=self._on_command,
            on_error=self._report,
            on_listening=self._on_listening,
            sensitivity=sensitivity,
            language=language,
            restart_attempts=restart_attempts,
        )
        self.manager.register_commands(
            build_static_commands(
                navigator=navigator,
                signals=signals,
                speech=self.speech,
                page=lambda: self.page,
                preferences=lambda: self.preferences,
                on_help=self._open_help,
            )
        )
        self.synchronizer = CommandSynchronizer(self.commands, prune_stale=prune_stale)
        self.keyboard = KeyboardShortcutDispatcher(navigator, signals, self.announcer)

    # -- inbound ------------------------------------------------------------

    def handle_raw(self, data: Any) -> None:
        """Validate and dispatch one decoded JSON message from the client."""
        try:
            message = client_message_adapter.validate_python(data)
        except ValidationError as exc:
            self._log.info("voice.session.invalid_message", errors=exc.error_count())
            self.channel.send(
                "error",
                kind="invalid_message",
                message="Unrecognised or malformed message.",
                transient=True,
            )
            return
        self.handle(message)

    def handle(self, message: ClientMessage) -> None:
        match message:
            case ResultMessage():
                if self.recognition is not None:
                    self.recognition.deliver_result(message.transcript, message.confidence)
            case EndMessage():
                if self.recognition is not None:
                    self.recognition.deliver_end()
            case EngineErrorMessage():
                if self.recognition is not None:
                    self.recognition.deliver_error(message.error)
            case VoicesMessage():
                if self.synthesis is not None:
                    self.synthesis.update_voices(
                        [
                            Voice(name=v.name, voice_uri=v.voice_uri, lang=v.lang, default=v.default)
                            for v in message.voices
                        ]
                    )
            case StartMessage():
                self._unblock()
                self.manager.start()
            case StopMessage():
                self.manager.stop()
            case ToggleMessage():
                self._unblock()
                self.manager.toggle()
            case SensitivityMessage():
                self.manager.set_sensitivity(message.level)
            case SettingsMessage():
                self._apply_settings(message)
            case SpeakMessage():
                self.speech.speak(message.text, message.rate, message.pitch, message.voice)
            case StopSpeakingMessage():
                self.speech.stop_speaking()
            case KeyMessage():
                handled = self.keyboard.handle(
                    KeyEvent(
                        key=message.key,
                        alt=message.alt,
                        ctrl=message.ctrl,
                        shift=message.shift,
                        target=message.target,
                    )
                )
                self.channel.send("key.result", id=message.id, handled=handled)
            case ControlsMessage():
                self.synchronizer.sync(
                    Clickable(label=c.label, invoke=self._click(c.id)) for c in message.controls
                )
            case PageMessage():
                self.page = PageSnapshot(
                    path=message.path,
                    question=message.question,
                    section=message.section,
                    heading=message.heading,
                )
            case PingMessage():
                self.channel.send("pong")

    # -- lifecycle ----------------------------------------------------------

    def open(self, *, autostart: bool = True) -> None:
        self.channel.send(
            "session.ready",
            sessionId=self.session_id,
            recognition=self.recognition is not None,
            synthesis=self.synthesis is not None,
            sensitivity=self.manager.sensitivity,
        )
        if autostart and self.recognition is not None:
            self.manager.start()

    def close(self) -> None:
        self.manager.stop()
        self.speech.stop_speaking()
        self.channel.close()
        self._log.info("voice.session.closed")

    # -- callbacks ----------------------------------------------------------

    def _on_command(self, utterance: str) -> None:
        self.channel.send("command", utterance=utterance)

    def _on_listening(self, listening: bool) -> None:
        self.channel.send("listening", value=listening)

    def _report(self, error: AccessibilityError) -> None:
        self._log.info("voice.session.error", **error.to_dict())
        self.channel.send("error", **error.to_dict())

    def _open_help(self) -> None:
        self.announcer.announce("Voice commands help opened")
        self._navigator.navigate_to(Route.VOICE_COMMANDS_HELP)

    def _click(self, control_id: str) -> Callable[[], None]:
        return lambda: self.channel.send("click", id=control_id)

    def _unblock(self) -> None:
        if self.recognition is not None:
            self.recognition.unblock()

    def _apply_settings(self, message: SettingsMessage) -> None:
        if message.reading_speed is not None:
            if _is_level(message.reading_speed):
                self.preferences.reading_speed = message.reading_speed
            else:
                self._report(InvalidArgument("Reading speed must be between 1 and 5."))
        if message.preferred_voice is not None:
            self.preferences.preferred_voice = message.preferred_voice
        if message.voice_sensitivity is not None:
            self.manager.set_sensitivity(message.voice_sensitivity)
