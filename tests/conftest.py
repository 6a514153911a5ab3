"""Shared fakes for the platform seams of the accessibility layer."""

from __future__ import annotations

from collections.abc import Callable, Sequence

import pytest

from src.services.voice import (
    AccessibilityError,
    Politeness,
    RecognitionConfig,
    RecognitionResult,
    Signal,
    Utterance,
    Voice,
)


class FakeRecognitionEngine:
    """Records calls; ``fail_next_starts`` makes the next N starts raise."""

    def __init__(self) -> None:
        self.config: RecognitionConfig | None = None
        self.starts = 0
        self.stops = 0
        self.fail_next_starts = 0
        self._on_result: Callable[[RecognitionResult], None] | None = None
        self._on_error: Callable[[str], None] | None = None
        self._on_end: Callable[[], None] | None = None

    def configure(self, config: RecognitionConfig) -> None:
        self.config = config

    def attach(self, on_result, on_error, on_end) -> None:
        self._on_result = on_result
        self._on_error = on_error
        self._on_end = on_end

    def start(self) -> None:
        self.starts += 1
        if self.fail_next_starts > 0:
            self.fail_next_starts -= 1
            raise RuntimeError("not-allowed")

    def stop(self) -> None:
        self.stops += 1
        # Browsers fire "end" after stop().
        self.emit_end()

    def emit_result(self, transcript: str, confidence: float = 0.95) -> None:
        assert self._on_result is not None
        self._on_result(RecognitionResult(transcript=transcript, confidence=confidence))

    def emit_error(self, code: str) -> None:
        assert self._on_error is not None
        self._on_error(code)

    def emit_end(self) -> None:
        assert self._on_end is not None
        self._on_end()


class FakeSynthesisBackend:
    def __init__(self, voices: Sequence[Voice] = ()) -> None:
        self.voices: list[Voice] = list(voices)
        self.spoken: list[Utterance] = []
        self.cancels = 0
        self.pauses = 0
        self.resumes = 0
        self.handler: Callable[[], None] | None = None

    def get_voices(self) -> Sequence[Voice]:
        return self.voices

    def speak(self, utterance: Utterance) -> None:
        self.spoken.append(utterance)

    def cancel(self) -> None:
        self.cancels += 1

    def pause(self) -> None:
        self.pauses += 1

    def resume(self) -> None:
        self.resumes += 1

    def on_voices_changed(self, handler: Callable[[], None] | None) -> None:
        self.handler = handler

    def load_voices(self, voices: Sequence[Voice]) -> None:
        self.voices = list(voices)
        if self.handler is not None:
            self.handler()


class FakeLiveRegion:
    def __init__(self) -> None:
        self.writes: list[tuple[str, Politeness]] = []

    def write(self, message: str, politeness: Politeness) -> None:
        self.writes.append((message, politeness))


class FakeNavigator:
    def __init__(self) -> None:
        self.paths: list[str] = []
        self.backs = 0

    def navigate_to(self, path: str) -> None:
        self.paths.append(path)

    def navigate_back(self) -> None:
        self.backs += 1


class FakeSignalEmitter:
    def __init__(self) -> None:
        self.signals: list[Signal] = []

    def emit(self, signal: Signal) -> None:
        self.signals.append(signal)


ENGLISH_VOICES = [
    Voice(name="Google Deutsch", voice_uri="de-DE-1", lang="de-DE"),
    Voice(name="Daniel", voice_uri="en-GB-daniel", lang="en-GB"),
    Voice(name="Samantha", voice_uri="en-US-samantha", lang="en-US"),
]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def engine() -> FakeRecognitionEngine:
    return FakeRecognitionEngine()


@pytest.fixture
def backend() -> FakeSynthesisBackend:
    return FakeSynthesisBackend(ENGLISH_VOICES)


@pytest.fixture
def region() -> FakeLiveRegion:
    return FakeLiveRegion()


@pytest.fixture
def navigator() -> FakeNavigator:
    return FakeNavigator()


@pytest.fixture
def signals() -> FakeSignalEmitter:
    return FakeSignalEmitter()


@pytest.fixture
def errors() -> list[AccessibilityError]:
    return []


@pytest.fixture
def empty_backend() -> FakeSynthesisBackend:
    """A backend whose voice catalogue has not loaded yet."""
    return FakeSynthesisBackend()


@pytest.fixture
def english_voices() -> list[Voice]:
    return list(ENGLISH_VOICES)
