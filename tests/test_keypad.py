import pytest

from scicalc import engine
from scicalc.engine import AngleMode
from scicalc.errors import UnknownKey
from scicalc.keypad import press, tokenize


def run_keys(sequence, state=None):
    state = state or engine.initial_state()
    events = []
    for key in tokenize(sequence):
        step = press(state, key)
        state = step.state
        if step.event:
            events.append(step.event)
    return state, events


def test_tokenize_longest_label_wins():
    assert tokenize("7+3×2=") == ["7", "+", "3", "×", "2", "="]
    assert tokenize("12.5x²") == ["1", "2", ".", "5", "x²"]
    assert tokenize("4 1/x") == ["4", "1/x"]
    assert tokenize("DEG/RAD 30 sin") == ["DEG/RAD", "3", "0", "sin"]


def test_tokenize_unknown_label():
    with pytest.raises(UnknownKey):
        tokenize("7 ? 3")


def test_press_unknown_key():
    with pytest.raises(UnknownKey):
        press(engine.initial_state(), "sinh")


def test_chained_sequence():
    state, events = run_keys("7 + 3 × 2 =")
    assert state.display == "20"
    assert [e.expression for e in events] == ["10 × 2"]


def test_aliases():
    assert run_keys("8 / 2 =")[0].display == "4"
    assert run_keys("8 * 2 =")[0].display == "16"
    assert run_keys("2 x^y 8 =")[0].display == "256"
    assert run_keys("9 sqrt")[0].display == "3"
    assert run_keys("4 !")[0].display == "24"


def test_editing_keys():
    assert run_keys("123 ⌫")[0].display == "12"
    assert run_keys("5 ±")[0].display == "-5"
    assert run_keys("5 + 3 CE")[0].display == "0"
    assert run_keys("5 + 3 C")[0] == engine.initial_state()


def test_memory_keys():
    state, _ = run_keys("10 MS CE 5 M+")
    assert state.memory == 15
    state, _ = run_keys("C MR", state)
    assert state.display == "15"
    assert run_keys("MC", state)[0].memory == 0


def test_angle_keys():
    assert run_keys("RAD")[0].angle_mode is AngleMode.RADIANS
    assert run_keys("RAD DEG")[0].angle_mode is AngleMode.DEGREES
    state, events = run_keys("RAD 0 sin")
    assert events[0].expression == "sin(0 rad)"
