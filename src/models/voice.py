"""Messages exchanged with the browser over a voice session WebSocket.

The browser owns the platform engines (``SpeechRecognition``,
``speechSynthesis``), the live region and the rendered page; it reports
their events with the client messages below and executes the server
messages the session sends back.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    TypeAdapter,
)
from pydantic.alias_generators import to_camel

# A 1..5 dial exactly as the client sent it; the voice core checks type and range.
RawLevel = StrictInt | StrictFloat | StrictBool | StrictStr


class _ClientMessage(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class VoiceInfo(_ClientMessage):
    name: str
    voice_uri: str = Field(default="", alias="voiceURI")
    lang: str = ""
    default: bool = False


class ControlInfo(_ClientMessage):
    id: str
    label: str


# -- recognition engine events ----------------------------------------------


class ResultMessage(_ClientMessage):
    type: Literal["result"]
    transcript: str
    confidence: float = Field(ge=0.0, le=1.0)


class EndMessage(_ClientMessage):
    type: Literal["end"]


class EngineErrorMessage(_ClientMessage):
    type: Literal["error"]
    error: str


# -- synthesis engine events ------------------------------------------------


class VoicesMessage(_ClientMessage):
    type: Literal["voices"]
    voices: list[VoiceInfo] = Field(default_factory=list)


# -- user intents -------------------------------------------------------------


class StartMessage(_ClientMessage):
    type: Literal["start"]


class StopMessage(_ClientMessage):
    type: Literal["stop"]


class ToggleMessage(_ClientMessage):
    type: Literal["toggle"]


class SensitivityMessage(_ClientMessage):
    type: Literal["sensitivity"]
    level: RawLevel


class SpeakMessage(_ClientMessage):
    type: Literal["speak"]
    text: str
    rate: float = 1.0
    pitch: float = 1.0
    voice: str = ""


class StopSpeakingMessage(_ClientMessage):
    type: Literal["speak.stop"]


class SettingsMessage(_ClientMessage):
    """Accessibility settings changed on the settings page mid-session."""

    type: Literal["settings"]
    reading_speed: RawLevel | None = None
    voice_sensitivity: RawLevel | None = None
    preferred_voice: str | None = None


# -- page state ---------------------------------------------------------------


class KeyMessage(_ClientMessage):
    type: Literal["key"]
    key: str
    alt: bool = False
    ctrl: bool = False
    shift: bool = False
    target: str = "body"
    id: str | None = None  # echoed back in ``key.result``


class ControlsMessage(_ClientMessage):
    type: Literal["controls"]
    controls: list[ControlInfo] = Field(default_factory=list)


class PageMessage(_ClientMessage):
    type: Literal["page"]
    path: str
    question: str = ""
    section: str = ""
    heading: str = ""


class PingMessage(_ClientMessage):
    type: Literal["ping"]


ClientMessage = Annotated[
    ResultMessage
    | EndMessage
    | EngineErrorMessage
    | VoicesMessage
    | StartMessage
    | StopMessage
    | ToggleMessage
    | SensitivityMessage
    | SpeakMessage
    | StopSpeakingMessage
    | SettingsMessage
    | KeyMessage
    | ControlsMessage
    | PageMessage
    | PingMessage,
    Field(discriminator="type"),
]

client_message_adapter: TypeAdapter[ClientMessage] = TypeAdapter(ClientMessage)


class CommandInfo(BaseModel):
    phrase: str
    description: str


class ShortcutInfo(BaseModel):
    keys: list[str]
    description: str


class CommandCatalogue(BaseModel):
    """Everything the voice-commands and keyboard-shortcuts help pages list."""

    commands: list[CommandInfo]
    shortcuts: list[ShortcutInfo]
