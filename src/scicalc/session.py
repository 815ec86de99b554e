"""
Orchestration layer between the calculator engine and the history store.

A CalculatorSession owns one user's CalculatorState, applies engine steps to
it and hands completed calculations to the store. Saving is fire-and-forget:
the display updates immediately and a failed save is logged, never rolled
back into the state.
"""

import logging
import threading
from collections import deque
from datetime import datetime, timezone
from functools import partial
from typing import Any, Callable, Deque, Dict, List, Optional

from . import engine, keypad
from .engine import AngleMode, CalculationEvent, CalculatorState, Operator, Step, UnaryFunction
from .errors import Unauthorized, UnknownAction, UnknownKey
from .history import DEFAULT_LIMIT, CalculationRecord, HistoryStore
from .numeric import format_number

logger = logging.getLogger(__name__)

Transition = Callable[[CalculatorState], Step]

# Actions that ignore "value".
_SIMPLE_ACTIONS: Dict[str, Transition] = {
    "dot": engine.input_decimal_point,
    "equals": engine.equals,
    "clear": engine.clear,
    "clear_entry": engine.clear_entry,
    "backspace": engine.backspace,
    "negate": engine.negate,
    "toggle_sign": engine.negate,
    "memory_store": engine.memory_store,
    "memory_recall": engine.memory_recall,
    "memory_clear": engine.memory_clear,
    "memory_add": engine.memory_add,
    "toggle_angle_mode": engine.toggle_angle_mode,
}


def _lookup_operator(value: Any) -> Operator:
    text = str(value)
    if text in keypad.OPERATOR_KEYS:
        return keypad.OPERATOR_KEYS[text]
    try:
        return Operator(text)
    except ValueError:
        raise UnknownKey(text) from None


def _lookup_function(value: Any) -> UnaryFunction:
    text = str(value)
    if text in keypad.FUNCTION_KEYS:
        return keypad.FUNCTION_KEYS[text]
    try:
        return UnaryFunction(text)
    except ValueError:
        raise UnknownKey(text) from None


def resolve_action(action: str, value: Any = None) -> Transition:
    """
    Map an API action to an engine transition.

    Args:
        action: One of digit, dot, op, equals, unary, clear, clear_entry,
            backspace, negate, memory_*, angle_mode, toggle_angle_mode
        value: Digit, operator, function or angle mode for the actions
            that take one

    Raises:
        UnknownAction: If the action name is not recognised
        UnknownKey: If the value does not fit the action
    """
    if not isinstance(action, str):
        raise UnknownAction(repr(action))
    if action in _SIMPLE_ACTIONS:
        return _SIMPLE_ACTIONS[action]
    if action == "digit":
        digit = "" if value is None else str(value)
        if len(digit) != 1 or digit not in keypad.DIGITS:
            raise UnknownKey(digit)
        return partial(engine.input_digit, digit=digit)
    if action == "op":
        return partial(engine.set_operator, operator=_lookup_operator(value))
    if action == "unary":
        return partial(engine.apply_unary, function=_lookup_function(value))
    if action == "angle_mode":
        try:
            mode = AngleMode(str(value))
        except ValueError:
            raise UnknownKey(str(value)) from None
        return partial(engine.set_angle_mode, mode=mode)
    raise UnknownAction(action)


class CalculatorSession:
    """One user's calculator plus its link to the history store."""

    def __init__(
        self,
        owner: Optional[str],
        store: HistoryStore,
        background: bool = True,
        local_history_size: int = 10,
    ) -> None:
        self.owner = owner
        self.store = store
        self.background = background
        self.state = engine.initial_state()
        self._local: Deque[Dict[str, str]] = deque(maxlen=local_history_size)
        self._threads: List[threading.Thread] = []

    # -- input ---------------------------------------------------------------

    def apply(self, transition: Transition) -> CalculatorState:
        """Run one engine step, then save its event (if any) out of band."""
        step = transition(self.state)
        self.state = step.state
        if step.event is not None:
            self._remember(step.event)
            self._persist(step.event)
        return self.state

    def press(self, key: str) -> CalculatorState:
        return self.apply(keypad.resolve(key))

    def dispatch(self, action: str, value: Any = None) -> CalculatorState:
        return self.apply(resolve_action(action, value))

    def reset(self) -> CalculatorState:
        """Reinitialize the engine. Unlike clear(), this also zeroes memory."""
        self.state = engine.initial_state()
        return self.state

    # -- history -------------------------------------------------------------

    @property
    def local_history(self) -> List[Dict[str, str]]:
        """This session's most recent calculations, newest first."""
        return list(self._local)

    def clear_local_history(self) -> None:
        """Forget the session's recent list. Stored records are untouched."""
        self._local.clear()

    def history(self, limit: int = DEFAULT_LIMIT) -> List[CalculationRecord]:
        return self.store.list_recent(self.owner, limit)

    def flush(self, timeout: Optional[float] = None) -> None:
        """Wait for background saves started so far."""
        for thread in self._threads:
            thread.join(timeout)
        self._threads = [t for t in self._threads if t.is_alive()]

    def _remember(self, event: CalculationEvent) -> None:
        self._local.appendleft(
            {
                "expression": event.expression,
                "result": event.result,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
        )

    def _persist(self, event: CalculationEvent) -> None:
        if not self.background:
            self._save(event)
            return
        self._threads = [t for t in self._threads if t.is_alive()]
        thread = threading.Thread(target=self._save, args=(event,), daemon=True)
        self._threads.append(thread)
        thread.start()

    def _save(self, event: CalculationEvent) -> Optional[CalculationRecord]:
        try:
            return self.store.append(self.owner, event.expression, event.result)
        except Unauthorized:
            logger.warning("Calculation not saved, no signed-in user: %s", event.expression)
        except Exception:
            logger.exception("Failed to save calculation: %s", event.expression)
        return None

    # -- rendering -----------------------------------------------------------

    def snapshot(self) -> Dict[str, Any]:
        """JSON-ready view of the session for the UI collaborator."""
        state = self.state
        previous = state.previous_value
        return {
            "display": state.display,
            "indicator": engine.indicator(state),
            "previous_value": None if previous is None else format_number(previous),
            "pending_operator": state.pending_operator.symbol if state.pending_operator else None,
            "waiting_for_new_operand": state.waiting_for_new_operand,
            "memory": format_number(state.memory),
            "angle_mode": state.angle_mode.value,
            "local_history": self.local_history,
        }
