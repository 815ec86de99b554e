"""Keypad labels mapped onto engine transitions.

The browser and the CLI both speak in button labels ("7", "×", "sin",
"M+"); this module is the single place that knows what each one does.
"""

from functools import partial
from typing import Callable, Dict, List

from . import engine
from .engine import AngleMode, CalculatorState, Operator, Step, UnaryFunction
from .errors import UnknownKey

Transition = Callable[[CalculatorState], Step]

DIGITS = "0123456789"

OPERATOR_KEYS: Dict[str, Operator] = {
    "+": Operator.ADD,
    "-": Operator.SUBTRACT,
    "×": Operator.MULTIPLY,
    "*": Operator.MULTIPLY,
    "÷": Operator.DIVIDE,
    "/": Operator.DIVIDE,
    "^": Operator.POWER,
    "x^y": Operator.POWER,
    "mod": Operator.MODULO,
    "%": Operator.MODULO,
}

FUNCTION_KEYS: Dict[str, UnaryFunction] = {
    "sin": UnaryFunction.SIN,
    "cos": UnaryFunction.COS,
    "tan": UnaryFunction.TAN,
    "log": UnaryFunction.LOG10,
    "ln": UnaryFunction.LN,
    "√": UnaryFunction.SQRT,
    "sqrt": UnaryFunction.SQRT,
    "x²": UnaryFunction.SQUARE,
    "x³": UnaryFunction.CUBE,
    "1/x": UnaryFunction.RECIPROCAL,
    "n!": UnaryFunction.FACTORIAL,
    "!": UnaryFunction.FACTORIAL,
    "π": UnaryFunction.PI,
    "pi": UnaryFunction.PI,
    "e": UnaryFunction.E,
}

COMMAND_KEYS: Dict[str, Transition] = {
    ".": engine.input_decimal_point,
    "=": engine.equals,
    "C": engine.clear,
    "CE": engine.clear_entry,
    "⌫": engine.backspace,
    "BS": engine.backspace,
    "±": engine.negate,
    "+/-": engine.negate,
    "MC": engine.memory_clear,
    "MR": engine.memory_recall,
    "MS": engine.memory_store,
    "M+": engine.memory_add,
    "DEG": partial(engine.set_angle_mode, mode=AngleMode.DEGREES),
    "RAD": partial(engine.set_angle_mode, mode=AngleMode.RADIANS),
    "DEG/RAD": engine.toggle_angle_mode,
}


def resolve(key: str) -> Transition:
    """Return the transition bound to ``key``.

    Raises:
        UnknownKey: If no button carries that label.
    """
    if len(key) == 1 and key in DIGITS:
        return partial(engine.input_digit, digit=key)
    if key in OPERATOR_KEYS:
        return partial(engine.set_operator, operator=OPERATOR_KEYS[key])
    if key in FUNCTION_KEYS:
        return partial(engine.apply_unary, function=FUNCTION_KEYS[key])
    if key in COMMAND_KEYS:
        return COMMAND_KEYS[key]
    raise UnknownKey(key)


def press(state: CalculatorState, key: str) -> Step:
    return resolve(key)(state)


def tokenize(sequence: str) -> List[str]:
    """Split a typed key sequence such as ``"7+3×2="`` into labels.

    Whitespace separates labels explicitly; otherwise the longest known label
    at each position wins, so ``"12.5x²"`` becomes ``["1", "2", ".", "5",
    "x²"]``.
    """
    labels = sorted(
        set(DIGITS) | set(OPERATOR_KEYS) | set(FUNCTION_KEYS) | set(COMMAND_KEYS),
        key=len,
        reverse=True,
    )
    keys: List[str] = []
    for chunk in sequence.split():
        pos = 0
        while pos < len(chunk):
            for label in labels:
                if chunk.startswith(label, pos):
                    keys.append(label)
                    pos += len(label)
                    break
            else:
                raise UnknownKey(chunk[pos:])
    return keys
