"""User and accessibility-settings endpoints.

The settings page writes here; a voice session reads the stored
``readingSpeed``, ``voiceSensitivity`` and ``preferredVoice`` when it
connects.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, HTTPException, Request
from pydantic import ValidationError

from src.api.deps import get_storage, parse_id, validation_error_response
from src.models.user import SettingsUpdate, UserOut

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/{user_id}", response_model=UserOut)
async def get_user(user_id: str, request: Request) -> UserOut:
    """Return a user with settings flattened in; the password is never sent."""
    storage = get_storage(request)
    user = await storage.get_user(parse_id(user_id, "user"))
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return UserOut.from_user(user)


@router.patch(
    "/{user_id}/settings",
    response_model=UserOut,
    responses={400: {"description": "Invalid settings data"}},
)
async def update_settings(user_id: str, request: Request):
    """Apply a partial settings update.

    Numeric dials must be integers in 1..5 and toggles strict booleans.
    On any validation failure nothing is stored and a 400 lists the
    offending fields.
    """
    storage = get_storage(request)
    uid = parse_id(user_id, "user")

    try:
        update = SettingsUpdate.model_validate_json(await request.body())
    except ValidationError as exc:
        logger.info("api.users.settings_rejected", user_id=uid, errors=exc.error_count())
        return validation_error_response("Invalid settings data", exc)

    user = await storage.update_user_settings(uid, update)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")

    logger.info("api.users.settings_updated", user_id=uid, fields=sorted(update.changes()))
    return UserOut.from_user(user)
