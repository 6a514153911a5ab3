from src.models.course import (
    Assignment,
    Course,
    Lesson,
    ProgressUpdate,
    Question,
    Quiz,
    Section,
)
from src.models.user import AccessibilitySettings, CamelModel, SettingsUpdate, User, UserOut
from src.models.voice import (
    ClientMessage,
    CommandCatalogue,
    CommandInfo,
    ShortcutInfo,
    client_message_adapter,
)

__all__ = [
    "AccessibilitySettings",
    "Assignment",
    "CamelModel",
    "ClientMessage",
    "CommandCatalogue",
    "CommandInfo",
    "Course",
    "Lesson",
    "ProgressUpdate",
    "Question",
    "Quiz",
    "Section",
    "SettingsUpdate",
    "ShortcutInfo",
    "User",
    "UserOut",
    "client_message_adapter",
]
