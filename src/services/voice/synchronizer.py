"""Keeps "click <label>" voice commands in step with the rendered page.

Interactive controls announce themselves as :class:`Clickable` records
(a visible label plus an ``invoke`` callback) instead of being scraped
from a render tree.  Every time the page reports a structural change the
synchronizer re-derives one ``click <label>`` command per control.

Commands derived on an earlier sync whose control is gone are pruned,
so a stale "click submit" cannot fire against a control that no longer
exists.  Statically registered commands are never touched.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Final

import structlog

from src.services.voice.command_table import CommandTable, normalize_phrase

logger = structlog.get_logger(__name__)

CLICK_PREFIX: Final[str] = "click "


@dataclass(frozen=True, slots=True)
class Clickable:
    """A visible interactive control that can be activated by voice."""

    label: str
    invoke: Callable[[], None]


class CommandSynchronizer:
    __slots__ = ("_auto", "_commands", "_prune_stale")

    def __init__(self, commands: CommandTable, *, prune_stale: bool = True) -> None:
        self._commands = commands
        self._prune_stale = prune_stale
        self._auto: set[str] = set()

    def auto_commands(self) -> list[str]:
        return sorted(self._auto)

    def sync(self, controls: Iterable[Clickable]) -> int:
        """Re-derive click commands for *controls*; returns how many were registered."""
        derived: dict[str, Callable[[], None]] = {}
        for control in controls:
            label = normalize_phrase(control.label)
            if label:
                derived[CLICK_PREFIX + label] = control.invoke

        registered = 0
        for phrase, invoke in derived.items():
            existing = self._commands.get(phrase)
            if existing is not None and not existing.auto:
                # A static command with the same phrase takes precedence.
                continue
            self._commands.register(phrase, invoke, auto=True)
            registered += 1

        if self._prune_stale:
            for phrase in self._auto - derived.keys():
                existing = self._commands.get(phrase)
                if existing is not None and existing.auto:
                    self._commands.unregister(phrase)
            self._auto = set(derived)
        else:
            self._auto |= derived.keys()

        logger.debug("voice.sync.completed", registered=registered, total=len(self._commands))
        return registered
