"""Request helpers shared by the route modules."""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException, Request
from fastapi.responses import ORJSONResponse
from pydantic import ValidationError

from src.services.storage import MemStorage


def get_storage(request: Request) -> MemStorage:
    storage: MemStorage | None = getattr(request.app.state, "storage", None)
    if storage is None:
        raise HTTPException(status_code=503, detail="Storage not available")
    return storage


def parse_id(raw: str, kind: str) -> int:
    """Parse a path id, rejecting anything that is not a plain integer.

    Raises
    ------
    HTTPException
        400 ``Invalid <kind> ID`` for non-numeric input.
    """
    try:
        return int(raw)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {kind} ID") from None


def validation_error_response(message: str, exc: ValidationError) -> ORJSONResponse:
    """Structured 400 body listing every failing field."""
    errors: list[dict[str, Any]] = [
        {
            "field": ".".join(str(part) for part in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]
    return ORJSONResponse(status_code=400, content={"message": message, "errors": errors})
