"""LearnAloud service layer -- in-memory storage and the voice accessibility layer."""

from __future__ import annotations

from src.services.storage import MemStorage

__all__ = [
    "MemStorage",
]
