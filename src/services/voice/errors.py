"""Error taxonomy for the accessibility layer.

These exceptions are *reports*, not control flow: every component in
``src.services.voice`` delivers them to a caller-supplied error channel
instead of raising them.  Speech recognition and synthesis are
best-effort affordances layered over a working visual UI, so a failing
engine must never take the host page down with it.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeAlias

import structlog

logger = structlog.get_logger(__name__)


class AccessibilityError(Exception):
    """Base class for every error reported by the accessibility layer."""

    kind: str = "accessibility_error"
    transient: bool = True

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "message": self.message,
            "transient": self.transient,
        }


class UnsupportedCapability(AccessibilityError):
    """The platform lacks speech recognition or speech synthesis.

    Permanent for the lifetime of the session: the corresponding control
    should be hidden or disabled rather than erroring repeatedly.
    """

    kind = "unsupported_capability"
    transient = False

    def __init__(self, feature: str, message: str | None = None) -> None:
        super().__init__(message or f"{feature} is not supported on this platform.")
        self.feature = feature

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["feature"] = self.feature
        return data


class StartFailure(AccessibilityError):
    """The recognition engine rejected activation (e.g. permission denied)."""

    kind = "start_failure"


class RecognitionError(AccessibilityError):
    """Per-utterance engine error such as ``network`` or ``audio-capture``."""

    kind = "recognition_error"

    def __init__(self, code: str) -> None:
        super().__init__(f"Error occurred in recognition: {code}")
        self.code = code

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["code"] = self.code
        return data


class InvalidArgument(AccessibilityError):
    """A caller passed a value outside its documented range."""

    kind = "invalid_argument"


class CommandFailed(AccessibilityError):
    """A registered command action raised while being executed."""

    kind = "command_failed"

    def __init__(self, phrase: str, cause: BaseException) -> None:
        super().__init__(f"Command '{phrase}' failed: {cause}")
        self.phrase = phrase


ErrorChannel: TypeAlias = Callable[[AccessibilityError], None]


def log_error_channel(error: AccessibilityError) -> None:
    """Default error channel: log the report and carry on."""
    logger.warning("voice.error_reported", **error.to_dict())
