"""Mutable phrase -> action table for voice commands.

Lookup is two-tier: an exact match on the normalised utterance wins;
otherwise any registered phrase contained in the utterance matches, so
padded speech such as "please go to dashboard now" still resolves to
"go to dashboard".

When several registered phrases are contained in the utterance the
*longest* phrase wins (it is the most specific), and among equally long
phrases the most recently registered one wins.  Resolution therefore
never depends on dict iteration order.
"""

from __future__ import annotations

import itertools
import re
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import TypeAlias

CommandAction: TypeAlias = Callable[[], None]

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_phrase(text: str) -> str:
    """Trim, lowercase and collapse internal whitespace."""
    return _WHITESPACE_RE.sub(" ", text.strip().lower())


@dataclass(slots=True)
class Command:
    """A registered voice command."""

    phrase: str
    action: CommandAction
    auto: bool = False  # derived from a rendered control rather than registered statically
    sequence: int = field(default=0, compare=False)


class CommandTable:
    """Phrase-unique command registry with exact-then-substring resolution."""

    __slots__ = ("_commands", "_counter")

    def __init__(self) -> None:
        self._commands: dict[str, Command] = {}
        self._counter = itertools.count(1)

    def __len__(self) -> int:
        return len(self._commands)

    def __contains__(self, phrase: object) -> bool:
        return isinstance(phrase, str) and normalize_phrase(phrase) in self._commands

    def __iter__(self) -> Iterator[Command]:
        return iter(list(self._commands.values()))

    # -- mutation -----------------------------------------------------------

    def register(self, phrase: str, action: CommandAction, *, auto: bool = False) -> None:
        """Store *action* under *phrase*, overwriting any existing entry."""
        key = normalize_phrase(phrase)
        if not key:
            return
        self._commands[key] = Command(
            phrase=key,
            action=action,
            auto=auto,
            sequence=next(self._counter),
        )

    def register_many(self, commands: Mapping[str, CommandAction]) -> None:
        for phrase, action in commands.items():
            self.register(phrase, action)

    def unregister(self, phrase: str) -> bool:
        return self._commands.pop(normalize_phrase(phrase), None) is not None

    def clear(self) -> None:
        self._commands.clear()

    # -- queries ------------------------------------------------------------

    def list(self) -> list[str]:
        return list(self._commands)

    def get(self, phrase: str) -> Command | None:
        return self._commands.get(normalize_phrase(phrase))

    def resolve(self, utterance: str) -> Command | None:
        """Return the command matching *utterance*, or ``None``."""
        spoken = normalize_phrase(utterance)
        if not spoken:
            return None

        exact = self._commands.get(spoken)
        if exact is not None:
            return exact

        best: Command | None = None
        for command in self._commands.values():
            if command.phrase not in spoken:
                continue
            if best is None or (len(command.phrase), command.sequence) > (
                len(best.phrase),
                best.sequence,
            ):
                best = command
        return best
