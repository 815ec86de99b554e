"""
=============================================================================
MODULE NAME: engine.py
=============================================================================

INPUT FILES:
- None. Transitions operate on in-memory CalculatorState values.

OUTPUT FILES:
- None. Completed calculations are returned as CalculationEvent values;
  persisting them is the session layer's job.

NOTES:
- Every public operation takes the prior state and returns a Step holding
  the next state and, for equals/unary functions, the emitted event.
- No operation raises. NaN, Infinity and the divide-by-zero result of 0 are
  ordinary display values.
=============================================================================
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Dict, Optional, Tuple

from . import numeric
from .numeric import format_number, parse_number


class Operator(str, Enum):
    """Binary operators that can be staged with set_operator()."""

    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DIVIDE = "divide"
    POWER = "power"
    MODULO = "modulo"

    @property
    def symbol(self) -> str:
        return _OPERATOR_SYMBOLS[self]


_OPERATOR_SYMBOLS: Dict[Operator, str] = {
    Operator.ADD: "+",
    Operator.SUBTRACT: "-",
    Operator.MULTIPLY: "×",
    Operator.DIVIDE: "÷",
    Operator.POWER: "^",
    Operator.MODULO: "mod",
}

_BINARY: Dict[Operator, Callable[[float, float], float]] = {
    Operator.ADD: numeric.add,
    Operator.SUBTRACT: numeric.subtract,
    Operator.MULTIPLY: numeric.multiply,
    Operator.DIVIDE: numeric.divide,
    Operator.POWER: numeric.power,
    Operator.MODULO: numeric.remainder,
}


class UnaryFunction(str, Enum):
    """Scientific functions applied to the current display value."""

    SIN = "sin"
    COS = "cos"
    TAN = "tan"
    LOG10 = "log10"
    LN = "ln"
    SQRT = "sqrt"
    SQUARE = "square"
    CUBE = "cube"
    RECIPROCAL = "reciprocal"
    FACTORIAL = "factorial"
    PI = "pi"
    E = "e"


class AngleMode(str, Enum):
    DEGREES = "degrees"
    RADIANS = "radians"


@dataclass(frozen=True, slots=True)
class CalculatorState:
    """Everything the keypad can change. Never persisted."""

    display: str = "0"
    previous_value: Optional[float] = None
    pending_operator: Optional[Operator] = None
    waiting_for_new_operand: bool = False
    memory: float = 0.0
    angle_mode: AngleMode = AngleMode.DEGREES


@dataclass(frozen=True, slots=True)
class CalculationEvent:
    """A completed calculation, ready to be appended to history."""

    expression: str
    result: str


@dataclass(frozen=True, slots=True)
class Step:
    state: CalculatorState
    event: Optional[CalculationEvent] = None


def initial_state() -> CalculatorState:
    return CalculatorState()


def calculate(first: float, second: float, operator: Operator) -> float:
    """Evaluate ``first <operator> second``.

    Division by exactly zero returns 0 rather than Infinity.
    """
    return _BINARY[operator](first, second)


def indicator(state: CalculatorState) -> str:
    """The "{previous} {symbol}" line shown above the display, or ""."""
    if state.pending_operator is None or state.previous_value is None:
        return ""
    return f"{format_number(state.previous_value)} {state.pending_operator.symbol}"


# ---------------------------------------------------------------------------
# Entry
# ---------------------------------------------------------------------------


def input_digit(state: CalculatorState, digit: str) -> Step:
    """Append ``digit`` to the display, or start a new operand with it."""
    if state.waiting_for_new_operand:
        return Step(replace(state, display=digit, waiting_for_new_operand=False))
    display = digit if state.display == "0" else state.display + digit
    return Step(replace(state, display=display))


def input_decimal_point(state: CalculatorState) -> Step:
    if state.waiting_for_new_operand:
        return Step(replace(state, display="0.", waiting_for_new_operand=False))
    if "." in state.display:
        return Step(state)
    return Step(replace(state, display=state.display + "."))


def clear(state: CalculatorState) -> Step:
    """Reset the operand flow. Memory and angle mode survive."""
    return Step(
        replace(
            state,
            display="0",
            previous_value=None,
            pending_operator=None,
            waiting_for_new_operand=False,
        )
    )


def clear_entry(state: CalculatorState) -> Step:
    return Step(replace(state, display="0"))


def backspace(state: CalculatorState) -> Step:
    return Step(replace(state, display=state.display[:-1] or "0"))


def negate(state: CalculatorState) -> Step:
    return Step(replace(state, display=format_number(-parse_number(state.display))))


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------


def set_operator(state: CalculatorState, operator: Operator) -> Step:
    """Stage ``operator``.

    The first operator stages the display as the left operand. A further
    operator while one is pending evaluates the pending one first, so
    ``7 + 3 ×`` shows 10 and stages it for the multiplication.
    """
    value = parse_number(state.display)
    if state.previous_value is None:
        state = replace(state, previous_value=value)
    elif state.pending_operator is not None:
        result = calculate(state.previous_value, value, state.pending_operator)
        state = replace(state, display=format_number(result), previous_value=result)
    return Step(replace(state, waiting_for_new_operand=True, pending_operator=operator))


def equals(state: CalculatorState) -> Step:
    """Evaluate the pending operator; a no-op when nothing is staged."""
    if state.previous_value is None or state.pending_operator is None:
        return Step(state)

    current = parse_number(state.display)
    result = format_number(calculate(state.previous_value, current, state.pending_operator))
    expression = (
        f"{format_number(state.previous_value)} "
        f"{state.pending_operator.symbol} {format_number(current)}"
    )
    next_state = replace(
        state,
        display=result,
        previous_value=None,
        pending_operator=None,
        waiting_for_new_operand=True,
    )
    return Step(next_state, CalculationEvent(expression=expression, result=result))


_TRIG: Dict[UnaryFunction, Callable[[float], float]] = {
    UnaryFunction.SIN: numeric.sin,
    UnaryFunction.COS: numeric.cos,
    UnaryFunction.TAN: numeric.tan,
}

# function -> (implementation, expression template)
_SIMPLE_UNARY: Dict[UnaryFunction, Tuple[Callable[[float], float], str]] = {
    UnaryFunction.LOG10: (numeric.log10, "log({})"),
    UnaryFunction.LN: (numeric.ln, "ln({})"),
    UnaryFunction.SQRT: (numeric.sqrt, "√({})"),
    UnaryFunction.SQUARE: (numeric.square, "({})²"),
    UnaryFunction.CUBE: (numeric.cube, "({})³"),
    UnaryFunction.RECIPROCAL: (numeric.reciprocal, "1/({})"),
}

_CONSTANTS: Dict[UnaryFunction, Tuple[float, str]] = {
    UnaryFunction.PI: (math.pi, "π"),
    UnaryFunction.E: (math.e, "e"),
}


def evaluate_unary(
    function: UnaryFunction, value: float, angle_mode: AngleMode = AngleMode.DEGREES
) -> Tuple[float, str]:
    """Return (result, expression) for ``function`` applied to ``value``."""
    if function in _TRIG:
        if angle_mode is AngleMode.DEGREES:
            result = _TRIG[function](numeric.to_radians(value))
            suffix = "°"
        else:
            result = _TRIG[function](value)
            suffix = " rad"
        return result, f"{function.value}({format_number(value)}{suffix})"

    if function in _SIMPLE_UNARY:
        impl, template = _SIMPLE_UNARY[function]
        return impl(value), template.format(format_number(value))

    if function is UnaryFunction.FACTORIAL:
        return numeric.factorial(value), f"{format_number(numeric.floor(value))}!"

    return _CONSTANTS[function]


def apply_unary(state: CalculatorState, function: UnaryFunction) -> Step:
    value = parse_number(state.display)
    result, expression = evaluate_unary(function, value, state.angle_mode)
    text = format_number(result)
    next_state = replace(state, display=text, waiting_for_new_operand=True)
    return Step(next_state, CalculationEvent(expression=expression, result=text))


# ---------------------------------------------------------------------------
# Memory and mode
# ---------------------------------------------------------------------------


def memory_store(state: CalculatorState) -> Step:
    return Step(replace(state, memory=parse_number(state.display)))


def memory_recall(state: CalculatorState) -> Step:
    return Step(
        replace(state, display=format_number(state.memory), waiting_for_new_operand=True)
    )


def memory_clear(state: CalculatorState) -> Step:
    return Step(replace(state, memory=0.0))


def memory_add(state: CalculatorState) -> Step:
    return Step(replace(state, memory=state.memory + parse_number(state.display)))


def set_angle_mode(state: CalculatorState, mode: AngleMode) -> Step:
    return Step(replace(state, angle_mode=AngleMode(mode)))


def toggle_angle_mode(state: CalculatorState) -> Step:
    mode = AngleMode.RADIANS if state.angle_mode is AngleMode.DEGREES else AngleMode.DEGREES
    return Step(replace(state, angle_mode=mode))


__all__ = [
    "AngleMode",
    "CalculationEvent",
    "CalculatorState",
    "Operator",
    "Step",
    "UnaryFunction",
    "apply_unary",
    "backspace",
    "calculate",
    "clear",
    "clear_entry",
    "equals",
    "evaluate_unary",
    "indicator",
    "initial_state",
    "input_decimal_point",
    "input_digit",
    "memory_add",
    "memory_clear",
    "memory_recall",
    "memory_store",
    "negate",
    "set_angle_mode",
    "set_operator",
    "toggle_angle_mode",
]
