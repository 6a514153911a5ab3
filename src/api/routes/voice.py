"""Voice session WebSocket and the voice-command catalogue.

Each WebSocket connection gets its own :class:`VoiceSession`.  The
browser streams engine events and user intents in; the session answers
with engine instructions, navigation, announcements and status
messages.  Outbound messages are queued by the (synchronous) session
and written by a separate task.
"""

from __future__ import annotations

import asyncio
import contextlib
import uuid
from typing import Any

import orjson
import structlog
from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status
from starlette.types import Message

from config.settings import settings
from src.models.voice import CommandCatalogue, CommandInfo, ShortcutInfo
from src.services.voice import (
    SHORTCUTS,
    STATIC_COMMAND_HELP,
    ClientChannel,
    ReadingPreferences,
    VoiceSession,
)

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

router = APIRouter(prefix="/voice", tags=["voice"])


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------


@router.get("/commands", response_model=CommandCatalogue)
async def list_commands() -> CommandCatalogue:
    """Static voice commands and keyboard shortcuts, for the help pages."""
    return CommandCatalogue(
        commands=[
            CommandInfo(phrase=phrase, description=description)
            for phrase, description in STATIC_COMMAND_HELP.items()
        ],
        shortcuts=[
            ShortcutInfo(keys=[f"Alt+{key.upper()}" for key in shortcut.keys], description=shortcut.description)
            for shortcut in SHORTCUTS
        ],
    )


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


def _decode_frame(message: Message) -> Any:
    """Decode one inbound frame; binary frames and bad JSON fail validation later."""
    text = message.get("text")
    if text is None:
        return message.get("bytes")
    try:
        return orjson.loads(text)
    except orjson.JSONDecodeError:
        return text


async def _write_outbound(websocket: WebSocket, channel: ClientChannel) -> None:
    while True:
        message = await channel.receive()
        await websocket.send_text(orjson.dumps(message).decode())


@router.websocket("/session/{user_id}")
async def voice_session(
    websocket: WebSocket,
    user_id: str,
    recognition: bool = True,
    synthesis: bool = True,
    autostart: bool = True,
) -> None:
    """Run one voice session for *user_id*.

    Query parameters report which browser engines exist: a client
    without ``SpeechRecognition`` connects with ``recognition=false`` and
    still gets keyboard shortcuts, announcements and read-aloud.
    """
    storage = getattr(websocket.app.state, "storage", None)
    user = None
    if storage is not None and user_id.isdigit():
        user = await storage.get_user(int(user_id))
    if user is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason="User not found")
        return

    await websocket.accept()

    session_id = uuid.uuid4().hex
    channel = ClientChannel()
    session = VoiceSession(
        session_id,
        channel,
        recognition_supported=recognition,
        synthesis_supported=synthesis,
        preferences=ReadingPreferences(
            reading_speed=user.settings.reading_speed,
            preferred_voice=user.settings.preferred_voice,
        ),
        sensitivity=user.settings.voice_sensitivity,
        language=settings.recognition_language,
        debounce_seconds=settings.announce_debounce_seconds,
        restart_attempts=settings.recognition_restart_attempts,
        prune_stale=settings.prune_stale_click_commands,
    )
    sessions: dict[str, VoiceSession] = websocket.app.state.voice_sessions
    sessions[session_id] = session
    logger.info("api.voice.session_opened", session_id=session_id, user_id=user.id)

    writer = asyncio.create_task(_write_outbound(websocket, channel))
    session.open(autostart=autostart)

    try:
        while True:
            message = await asyncio.wait_for(
                websocket.receive(),
                timeout=settings.voice_session_idle_timeout,
            )
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", status.WS_1000_NORMAL_CLOSURE))
            session.handle_raw(_decode_frame(message))
    except WebSocketDisconnect:
        logger.info("api.voice.client_disconnected", session_id=session_id)
    except TimeoutError:
        logger.info("api.voice.session_idle_timeout", session_id=session_id)
        await websocket.close(code=status.WS_1000_NORMAL_CLOSURE, reason="Idle timeout")
    finally:
        session.close()
        sessions.pop(session_id, None)
        writer.cancel()
        with contextlib.suppress(asyncio.CancelledError, WebSocketDisconnect):
            await writer
