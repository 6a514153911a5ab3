"""Speech output engine.

Wraps a platform speech-synthesis backend with three policies:

* **cancel-before-speak** -- at most one utterance is ever active; a new
  ``speak()`` interrupts whatever is currently being read.
* **voice selection** -- exact voice name / URI, then a female English
  voice when the hint asks for one, then any English voice, then the
  platform default.
* **deferred catalogue** -- browsers populate their voice list
  asynchronously.  Requests made before the catalogue is ready are queued
  and drained in arrival order on the first "voices changed" notification
  that brings a non-empty catalogue.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Final, Protocol

import structlog

from src.services.voice.errors import ErrorChannel, UnsupportedCapability, log_error_channel

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_FEMALE_HINTS: Final[tuple[str, ...]] = ("female", "woman")
_FEMALE_NAME_MARKERS: Final[tuple[str, ...]] = ("female", "woman", "samantha", "victoria")

MIN_RATE: Final[float] = 0.1
MAX_RATE: Final[float] = 10.0
MIN_PITCH: Final[float] = 0.0
MAX_PITCH: Final[float] = 2.0

# Reading speed is a 1-5 dial; 3 maps to the platform's normal rate.
READING_SPEED_NORMAL: Final[int] = 3


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Voice:
    """One entry of the platform voice catalogue."""

    name: str
    voice_uri: str = ""
    lang: str = ""
    default: bool = False

    @property
    def is_english(self) -> bool:
        return self.lang.lower().startswith("en")


@dataclass(frozen=True, slots=True)
class Utterance:
    """A fully resolved synthesis request handed to the backend."""

    text: str
    rate: float = 1.0
    pitch: float = 1.0
    voice: Voice | None = None


@dataclass(frozen=True, slots=True)
class _PendingRequest:
    text: str
    rate: float
    pitch: float
    voice_hint: str


class SynthesisBackend(Protocol):
    """Platform speech synthesis (e.g. the browser's ``speechSynthesis``)."""

    def get_voices(self) -> Sequence[Voice]: ...

    def speak(self, utterance: Utterance) -> None: ...

    def cancel(self) -> None: ...

    def pause(self) -> None: ...

    def resume(self) -> None: ...

    def on_voices_changed(self, handler: Callable[[], None] | None) -> None: ...


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def reading_rate(reading_speed: int) -> float:
    """Convert the 1-5 reading-speed setting into a synthesis rate."""
    return reading_speed / READING_SPEED_NORMAL


def select_voice(voices: Sequence[Voice], voice_hint: str = "") -> Voice | None:
    """Pick a voice from *voices* according to *voice_hint*.

    Returns ``None`` when nothing matches, meaning "use the platform
    default voice".
    """
    if voice_hint:
        for v in voices:
            if v.name == voice_hint or (v.voice_uri and v.voice_uri == voice_hint):
                return v

        hint = voice_hint.lower()
        if any(marker in hint for marker in _FEMALE_HINTS):
            for v in voices:
                name = v.name.lower()
                if v.is_english and any(m in name for m in _FEMALE_NAME_MARKERS):
                    return v

    for v in voices:
        if v.is_english:
            return v
    return None


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


# ---------------------------------------------------------------------------
# SpeechOutputEngine
# ---------------------------------------------------------------------------


class SpeechOutputEngine:
    """Coordinates read-aloud requests against a synthesis backend.

    ``backend=None`` models a platform without synthesis: the first
    ``speak()`` reports :class:`UnsupportedCapability` through
    *on_error* and later calls are silent no-ops.
    """

    __slots__ = ("_backend", "_on_error", "_pending", "_unsupported_reported", "_waiting")

    def __init__(
        self,
        backend: SynthesisBackend | None,
        on_error: ErrorChannel = log_error_channel,
    ) -> None:
        self._backend = backend
        self._on_error = on_error
        self._pending: deque[_PendingRequest] = deque()
        self._waiting = False
        self._unsupported_reported = False

    @property
    def supported(self) -> bool:
        return self._backend is not None

    @property
    def pending_count(self) -> int:
        """Requests queued while the voice catalogue is still loading."""
        return len(self._pending)

    # -- public API ---------------------------------------------------------

    def speak(
        self,
        text: str,
        rate: float = 1.0,
        pitch: float = 1.0,
        voice_hint: str = "",
    ) -> None:
        if self._backend is None:
            self._report_unsupported()
            return
        if not text or not text.strip():
            return

        self._backend.cancel()

        request = _PendingRequest(text=text, rate=rate, pitch=pitch, voice_hint=voice_hint)
        if self._backend.get_voices():
            self._deliver(self._backend, request)
            return

        self._pending.append(request)
        if not self._waiting:
            self._waiting = True
            self._backend.on_voices_changed(self._on_voices_changed)
        logger.debug("voice.speech.deferred", pending=len(self._pending))

    def stop_speaking(self) -> None:
        if self._backend is None:
            return
        self._pending.clear()
        self._backend.cancel()

    def pause(self) -> None:
        if self._backend is not None:
            self._backend.pause()

    def resume(self) -> None:
        if self._backend is not None:
            self._backend.resume()

    def get_available_voices(self) -> list[Voice]:
        if self._backend is None:
            return []
        return list(self._backend.get_voices())

    # -- internals ----------------------------------------------------------

    def _on_voices_changed(self) -> None:
        if self._backend is None or not self._backend.get_voices():
            return

        self._waiting = False
        self._backend.on_voices_changed(None)
        logger.info("voice.speech.catalogue_ready", drained=len(self._pending))
        while self._pending:
            request = self._pending.popleft()
            self._backend.cancel()
            self._deliver(self._backend, request)

    def _deliver(self, backend: SynthesisBackend, request: _PendingRequest) -> None:
        voice = select_voice(backend.get_voices(), request.voice_hint)
        utterance = Utterance(
            text=request.text,
            rate=_clamp(request.rate, MIN_RATE, MAX_RATE),
            pitch=_clamp(request.pitch, MIN_PITCH, MAX_PITCH),
            voice=voice,
        )
        backend.speak(utterance)
        logger.debug(
            "voice.speech.spoken",
            chars=len(request.text),
            voice=voice.name if voice else None,
        )

    def _report_unsupported(self) -> None:
        if self._unsupported_reported:
            return
        self._unsupported_reported = True
        self._on_error(UnsupportedCapability("Text-to-speech"))
