"""User and accessibility-settings models.

Field names are snake_case in Python and camelCase on the wire
(``textSize``, ``voiceSensitivity``), matching what the web client sends.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr
from pydantic.alias_generators import to_camel

# A 1-5 dial.  Strict: booleans and numeric strings are rejected.
Level = Annotated[int, Field(strict=True, ge=1, le=5)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AccessibilitySettings(CamelModel):
    """Per-user accessibility preferences.

    The voice layer only reads ``reading_speed``, ``voice_sensitivity``
    and ``preferred_voice``; the rest drive page presentation.
    """

    preferred_voice: str = "female_standard"
    text_size: Level = 3
    reading_speed: Level = 3
    high_contrast: bool = False
    color_theme: str = "standard"
    audio_descriptions: bool = True
    keyboard_navigation: bool = True
    voice_sensitivity: Level = 3
    auto_advance: bool = False
    notification_sounds: bool = True


class SettingsUpdate(CamelModel):
    """Partial settings update; every field is optional, unknown fields are rejected."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    preferred_voice: StrictStr | None = None
    text_size: Level | None = None
    reading_speed: Level | None = None
    high_contrast: StrictBool | None = None
    color_theme: StrictStr | None = None
    audio_descriptions: StrictBool | None = None
    keyboard_navigation: StrictBool | None = None
    voice_sensitivity: Level | None = None
    auto_advance: StrictBool | None = None
    notification_sounds: StrictBool | None = None

    def changes(self) -> dict[str, object]:
        """Fields the client actually supplied, by Python name."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class User(CamelModel):
    id: int
    username: str
    password: str
    settings: AccessibilitySettings = Field(default_factory=AccessibilitySettings)


class UserOut(AccessibilitySettings):
    """Public view of a user: settings flattened, password omitted."""

    id: int
    username: str

    @classmethod
    def from_user(cls, user: User) -> UserOut:
        return cls(id=user.id, username=user.username, **user.settings.model_dump())
