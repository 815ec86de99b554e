"""Tests for the session layer: engine steps plus fire-and-forget saves."""

import logging

import pytest

from scicalc.errors import UnknownAction, UnknownKey
from scicalc.history import InMemoryHistoryStore
from scicalc.session import CalculatorSession


class BrokenStore(InMemoryHistoryStore):
    def append(self, owner, expression, result):
        raise RuntimeError("database is locked")


def press_all(session, keys):
    for key in keys.split():
        session.press(key)


@pytest.fixture
def store():
    return InMemoryHistoryStore()


def test_each_completed_calculation_is_recorded(store):
    calc = CalculatorSession("alice", store, background=False)
    press_all(calc, "7 + 3 = 9 sqrt 2 × 5 ± =")
    records = calc.history()
    assert [(r.expression, r.result) for r in records] == [
        ("2 × -5", "-10"),
        ("√(9)", "3"),
        ("7 + 3", "10"),
    ]


def test_chained_operator_is_not_recorded(store):
    calc = CalculatorSession("alice", store, background=False)
    press_all(calc, "7 + 3 × 2 =")
    assert calc.state.display == "20"
    assert [r.expression for r in calc.history()] == ["10 × 2"]


def test_history_count_matches_calculations(store):
    calc = CalculatorSession("alice", store, background=False)
    for _ in range(6):
        calc.press("π")
    assert len(calc.history()) == 6
    assert len(calc.history(limit=4)) == 4


def test_unauthenticated_save_is_logged_and_swallowed(store, caplog):
    calc = CalculatorSession(None, store, background=False)
    with caplog.at_level(logging.WARNING, logger="scicalc.session"):
        press_all(calc, "6 × 7 =")
    assert calc.state.display == "42"
    assert calc.history() == []
    assert "no signed-in user" in caplog.text
    # the local list still shows it
    assert calc.local_history[0]["result"] == "42"


def test_store_failure_does_not_touch_state(caplog):
    calc = CalculatorSession("alice", BrokenStore(), background=False)
    with caplog.at_level(logging.ERROR, logger="scicalc.session"):
        press_all(calc, "5 x²")
    assert calc.state.display == "25"
    assert "Failed to save calculation" in caplog.text


def test_background_saves(store):
    calc = CalculatorSession("alice", store, background=True)
    press_all(calc, "2 ^ 1 0 =")
    assert calc.state.display == "1024"
    calc.flush(timeout=5)
    [record] = store.list_recent("alice")
    assert record.expression == "2 ^ 10"


def test_local_history_is_bounded_and_clearable(store):
    calc = CalculatorSession("alice", store, background=False, local_history_size=10)
    for digit in "123456789012":
        calc.press("C")
        calc.press(digit)
        calc.press("x²")
    local = calc.local_history
    assert len(local) == 10
    assert local[0]["expression"] == "(2)²"
    calc.clear_local_history()
    assert calc.local_history == []
    assert len(calc.history()) == 12


def test_dispatch_actions(store):
    calc = CalculatorSession("alice", store, background=False)
    calc.dispatch("digit", "9")
    calc.dispatch("op", "add")
    calc.dispatch("digit", 1)
    calc.dispatch("equals")
    assert calc.state.display == "10"
    calc.dispatch("op", "÷")
    calc.dispatch("digit", "4")
    calc.dispatch("equals")
    assert calc.state.display == "2.5"
    calc.dispatch("angle_mode", "radians")
    calc.dispatch("unary", "cos")
    assert calc.history(1)[0].expression == "cos(2.5 rad)"
    calc.dispatch("memory_store")
    calc.dispatch("toggle_sign")
    calc.dispatch("memory_add")
    assert calc.state.memory == 0


def test_dispatch_rejects_bad_input(store):
    calc = CalculatorSession("alice", store, background=False)
    with pytest.raises(UnknownAction):
        calc.dispatch("explode")
    with pytest.raises(UnknownKey):
        calc.dispatch("digit", "12")
    with pytest.raises(UnknownKey):
        calc.dispatch("op", "xor")
    with pytest.raises(UnknownKey):
        calc.dispatch("angle_mode", "gradians")
    assert calc.state.display == "0"


def test_reset_zeroes_memory(store):
    calc = CalculatorSession("alice", store, background=False)
    press_all(calc, "8 MS C")
    assert calc.state.memory == 8
    calc.reset()
    assert calc.state.memory == 0


def test_snapshot(store):
    calc = CalculatorSession("alice", store, background=False)
    press_all(calc, "1 2 . 5 mod")
    snap = calc.snapshot()
    assert snap["display"] == "12.5"
    assert snap["indicator"] == "12.5 mod"
    assert snap["previous_value"] == "12.5"
    assert snap["pending_operator"] == "mod"
    assert snap["waiting_for_new_operand"] is True
    assert snap["memory"] == "0"
    assert snap["angle_mode"] == "degrees"
    assert snap["local_history"] == []


def test_dispatch_rejects_non_string_action(store):
    calc = CalculatorSession("alice", store, background=False)
    with pytest.raises(UnknownAction):
        calc.dispatch(["equals"])
