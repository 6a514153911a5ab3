"""Tests for the voice command table: registration and resolution."""

from __future__ import annotations

from src.services.voice import CommandTable, normalize_phrase


def _noop() -> None:
    return None


# -----------------------------------------------------------------------
# normalize_phrase
# -----------------------------------------------------------------------


class TestNormalizePhrase:
    def test_trims_and_lowercases(self) -> None:
        assert normalize_phrase("  Go To Dashboard ") == "go to dashboard"

    def test_collapses_internal_whitespace(self) -> None:
        assert normalize_phrase("go \t to   dashboard") == "go to dashboard"

    def test_whitespace_only_is_empty(self) -> None:
        assert normalize_phrase("   ") == ""


# -----------------------------------------------------------------------
# Registration
# -----------------------------------------------------------------------


class TestRegistration:
    def test_register_normalises_phrase(self) -> None:
        table = CommandTable()
        table.register("  Show COURSES ", _noop)
        assert table.list() == ["show courses"], "phrases should be stored normalised"

    def test_reregister_replaces_action(self) -> None:
        table = CommandTable()
        calls: list[str] = []
        table.register("go home", lambda: calls.append("first"))
        table.register("Go Home", lambda: calls.append("second"))

        assert len(table) == 1, "same normalised phrase should occupy one slot"
        table.resolve("go home").action()
        assert calls == ["second"], "latest registration should win"

    def test_empty_phrase_is_ignored(self) -> None:
        table = CommandTable()
        table.register("   ", _noop)
        assert len(table) == 0

    def test_unregister(self) -> None:
        table = CommandTable()
        table.register("help", _noop)
        assert table.unregister("HELP") is True
        assert "help" not in table
        assert table.unregister("help") is False, "second unregister should report nothing removed"

    def test_clear_empties_table(self) -> None:
        table = CommandTable()
        table.register_many({"a": _noop, "b": _noop})
        table.clear()
        assert table.list() == []

    def test_contains_uses_normalisation(self) -> None:
        table = CommandTable()
        table.register("open settings", _noop)
        assert "  OPEN settings" in table
        assert 42 not in table


# -----------------------------------------------------------------------
# Resolution
# -----------------------------------------------------------------------


class TestResolve:
    def test_exact_match(self) -> None:
        table = CommandTable()
        table.register("go to dashboard", _noop)
        command = table.resolve("Go to Dashboard")
        assert command is not None and command.phrase == "go to dashboard"

    def test_substring_match_with_padding(self) -> None:
        table = CommandTable()
        table.register("go to dashboard", _noop)
        command = table.resolve("please go to dashboard now")
        assert command is not None, "a phrase contained in the utterance should match"
        assert command.phrase == "go to dashboard"

    def test_no_match_returns_none(self) -> None:
        table = CommandTable()
        table.register("show courses", _noop)
        assert table.resolve("what time is it") is None

    def test_empty_utterance_returns_none(self) -> None:
        table = CommandTable()
        table.register("help", _noop)
        assert table.resolve("   ") is None

    def test_exact_beats_longer_substring(self) -> None:
        table = CommandTable()
        table.register("pause reading", _noop)
        table.register("pause", _noop)
        command = table.resolve("pause")
        assert command is not None and command.phrase == "pause"

    def test_longest_contained_phrase_wins(self) -> None:
        table = CommandTable()
        table.register("pause reading", _noop)
        table.register("pause", _noop)
        command = table.resolve("please pause reading")
        assert command is not None
        assert command.phrase == "pause reading", "the most specific phrase should win"

    def test_equal_length_tie_goes_to_latest_registration(self) -> None:
        table = CommandTable()
        table.register("open abc", _noop)
        table.register("close xy", _noop)
        command = table.resolve("open abc and close xy")
        assert command is not None and command.phrase == "close xy"

    def test_resolution_independent_of_registration_order(self) -> None:
        first = CommandTable()
        first.register("go", _noop)
        first.register("go back", _noop)

        second = CommandTable()
        second.register("go back", _noop)
        second.register("go", _noop)

        assert first.resolve("please go back").phrase == "go back"
        assert second.resolve("please go back").phrase == "go back"
