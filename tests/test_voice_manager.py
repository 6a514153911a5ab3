"""Tests for the voice command manager state machine and dispatch."""

from __future__ import annotations

import pytest

from src.services.voice import (
    CommandFailed,
    CommandTable,
    InvalidArgument,
    ManagerState,
    RecognitionError,
    StartFailure,
    UnsupportedCapability,
    VoiceCommandManager,
    confidence_threshold,
)


@pytest.fixture
def listening_log() -> list[bool]:
    return []


@pytest.fixture
def executed() -> list[str]:
    return []


@pytest.fixture
def manager(engine, errors, listening_log, executed) -> VoiceCommandManager:
    return VoiceCommandManager(
        engine,
        on_command=executed.append,
        on_error=errors.append,
        on_listening=listening_log.append,
    )


# -----------------------------------------------------------------------
# Threshold mapping
# -----------------------------------------------------------------------


@pytest.mark.parametrize(
    ("sensitivity", "expected"),
    [(1, 0.9), (2, 0.8), (3, 0.7), (4, 0.6), (5, 0.5)],
)
def test_confidence_threshold(sensitivity: int, expected: float) -> None:
    assert confidence_threshold(sensitivity) == expected


# -----------------------------------------------------------------------
# Construction
# -----------------------------------------------------------------------


class TestConstruction:
    def test_configures_engine(self, manager, engine) -> None:
        assert manager.state is ManagerState.IDLE
        assert engine.config is not None
        assert engine.config.continuous is True
        assert engine.config.interim_results is False
        assert engine.config.lang == "en-US"

    def test_missing_engine_is_unsupported(self, errors) -> None:
        manager = VoiceCommandManager(None, on_error=errors.append)
        assert manager.state is ManagerState.UNSUPPORTED
        assert isinstance(errors[0], UnsupportedCapability)

    def test_start_without_engine_reports_unsupported(self, errors, listening_log) -> None:
        manager = VoiceCommandManager(None, on_error=errors.append, on_listening=listening_log.append)
        errors.clear()
        manager.start()
        assert isinstance(errors[0], UnsupportedCapability)
        assert manager.is_listening is False
        assert listening_log == []


# -----------------------------------------------------------------------
# Lifecycle
# -----------------------------------------------------------------------


class TestLifecycle:
    def test_start_sets_listening(self, manager, engine, listening_log) -> None:
        manager.start()
        assert manager.is_listening is True
        assert manager.state is ManagerState.LISTENING
        assert engine.starts == 1
        assert listening_log == [True]

    def test_start_is_idempotent(self, manager, engine) -> None:
        manager.start()
        manager.start()
        assert engine.starts == 1

    def test_start_failure_reported(self, manager, engine, errors, listening_log) -> None:
        engine.fail_next_starts = 1
        manager.start()
        assert manager.is_listening is False
        assert isinstance(errors[-1], StartFailure)
        assert listening_log == []

    def test_stop_does_not_restart(self, manager, engine, listening_log) -> None:
        manager.start()
        manager.stop()
        assert engine.starts == 1, "the end event after stop() must not trigger a restart"
        assert manager.is_listening is False
        assert manager.state is ManagerState.IDLE
        assert listening_log[-1] is False

    def test_stop_notifies_listening_once(self, manager, listening_log) -> None:
        manager.start()
        manager.stop()
        assert listening_log == [True, False], "the end event after stop() must not repeat the notification"

    def test_toggle(self, manager) -> None:
        manager.toggle()
        assert manager.is_active() is True
        manager.toggle()
        assert manager.is_active() is False

    def test_spontaneous_end_restarts(self, manager, engine) -> None:
        manager.start()
        engine.emit_end()
        assert engine.starts == 2, "engine should be restarted transparently"
        assert manager.is_listening is True

    def test_restart_retries_transient_failures(self, manager, engine, errors) -> None:
        manager.start()
        engine.fail_next_starts = 2
        engine.emit_end()
        assert manager.is_listening is True
        assert engine.starts == 4
        assert errors == []

    def test_restart_gives_up_after_attempts(self, manager, engine, errors, listening_log) -> None:
        manager.start()
        engine.fail_next_starts = 3
        engine.emit_end()
        assert manager.is_listening is False
        assert manager.state is ManagerState.IDLE
        assert isinstance(errors[-1], StartFailure)
        assert listening_log[-1] is False

    def test_engine_error_is_reported_not_fatal(self, manager, engine, errors) -> None:
        manager.start()
        engine.emit_error("network")
        assert isinstance(errors[-1], RecognitionError)
        assert errors[-1].message == "Error occurred in recognition: network"
        assert manager.is_listening is True


# -----------------------------------------------------------------------
# Sensitivity
# -----------------------------------------------------------------------


class TestSensitivity:
    def test_set_sensitivity_updates_threshold(self, manager) -> None:
        manager.set_sensitivity(5)
        assert manager.sensitivity == 5
        assert manager.threshold == 0.5

    @pytest.mark.parametrize("level", [0, 6, True, 2.5, "3"])
    def test_invalid_level_rejected(self, manager, errors, level) -> None:
        manager.set_sensitivity(level)
        assert manager.sensitivity == 3, "invalid level must leave sensitivity unchanged"
        assert isinstance(errors[-1], InvalidArgument)


# -----------------------------------------------------------------------
# Dispatch
# -----------------------------------------------------------------------


class TestDispatch:
    def test_matching_result_runs_action_and_notifies(self, manager, engine, executed) -> None:
        hits: list[str] = []
        manager.register_command("go to dashboard", lambda: hits.append("dash"))
        manager.start()

        engine.emit_result("  Go to Dashboard ", confidence=0.9)
        assert hits == ["dash"]
        assert executed == ["go to dashboard"], "on_command receives the normalised utterance"

    def test_substring_match_reports_full_utterance(self, manager, engine, executed) -> None:
        manager.register_command("show courses", lambda: None)
        manager.start()
        engine.emit_result("please show courses now", confidence=0.9)
        assert executed == ["please show courses now"]

    def test_below_threshold_is_ignored(self, manager, engine, executed) -> None:
        hits: list[str] = []
        manager.register_command("help", lambda: hits.append("help"))
        manager.start()

        engine.emit_result("help", confidence=0.69)
        assert hits == []
        assert executed == []

    def test_threshold_is_inclusive(self, manager, engine, executed) -> None:
        manager.register_command("help", lambda: None)
        manager.start()
        engine.emit_result("help", confidence=0.7)
        assert executed == ["help"]

    def test_unmatched_utterance_is_ignored(self, manager, engine, executed) -> None:
        manager.register_command("help", lambda: None)
        manager.start()
        engine.emit_result("what is the weather", confidence=1.0)
        assert executed == []

    def test_failing_action_is_reported(self, manager, engine, errors, executed) -> None:
        def boom() -> None:
            raise ValueError("bad")

        manager.register_command("help", boom)
        manager.start()
        engine.emit_result("help", confidence=1.0)

        assert isinstance(errors[-1], CommandFailed)
        assert executed == []
        assert manager.is_listening is True, "a failing action must not stop listening"

    def test_command_table_passthroughs(self, engine) -> None:
        table = CommandTable()
        manager = VoiceCommandManager(engine, commands=table)
        manager.register_commands({"a": lambda: None, "b": lambda: None})
        assert manager.get_registered_commands() == ["a", "b"]
        manager.clear_commands()
        assert len(table) == 0
