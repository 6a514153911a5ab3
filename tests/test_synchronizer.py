"""Tests for click-command synchronisation with rendered controls."""

from __future__ import annotations

from src.services.voice import Clickable, CommandSynchronizer, CommandTable


def _control(label: str, log: list[str]) -> Clickable:
    return Clickable(label=label, invoke=lambda: log.append(label))


def test_registers_click_command_per_control() -> None:
    table = CommandTable()
    clicked: list[str] = []
    sync = CommandSynchronizer(table)

    count = sync.sync([_control("Submit", clicked), _control("  Next  Question ", clicked)])

    assert count == 2
    assert "click submit" in table
    assert "click next question" in table
    table.resolve("click submit").action()
    assert clicked == ["Submit"]


def test_blank_labels_are_skipped() -> None:
    table = CommandTable()
    sync = CommandSynchronizer(table)
    assert sync.sync([Clickable(label="   ", invoke=lambda: None)]) == 0
    assert len(table) == 0


def test_stale_click_commands_are_pruned() -> None:
    table = CommandTable()
    sync = CommandSynchronizer(table)
    sync.sync([_control("Submit", []), _control("Cancel", [])])

    sync.sync([_control("Cancel", [])])

    assert "click submit" not in table, "a control that disappeared must lose its command"
    assert "click cancel" in table
    assert sync.auto_commands() == ["click cancel"]


def test_pruning_can_be_disabled() -> None:
    table = CommandTable()
    sync = CommandSynchronizer(table, prune_stale=False)
    sync.sync([_control("Submit", [])])
    sync.sync([])
    assert "click submit" in table


def test_static_command_takes_precedence() -> None:
    table = CommandTable()
    static_hits: list[str] = []
    table.register("click help", lambda: static_hits.append("static"))
    sync = CommandSynchronizer(table)

    count = sync.sync([_control("Help", [])])
    assert count == 0, "a static phrase should not be overwritten"

    sync.sync([])
    assert "click help" in table, "pruning must never remove a static command"
    table.resolve("click help").action()
    assert static_hits == ["static"]


def test_resync_rebinds_to_latest_control() -> None:
    table = CommandTable()
    first: list[str] = []
    second: list[str] = []
    sync = CommandSynchronizer(table)

    sync.sync([_control("Submit", first)])
    sync.sync([_control("Submit", second)])
    table.resolve("click submit").action()

    assert first == []
    assert second == ["Submit"]


def test_static_commands_untouched_by_sync() -> None:
    table = CommandTable()
    table.register("go home", lambda: None)
    sync = CommandSynchronizer(table)
    sync.sync([_control("Submit", [])])
    sync.sync([])
    assert table.list() == ["go home"]
