"""Scientific calculator engine with per-user calculation history."""

from .engine import AngleMode, CalculationEvent, CalculatorState, Operator, Step, UnaryFunction
from .errors import Unauthorized
from .history import CalculationRecord, HistoryStore, InMemoryHistoryStore, SqliteHistoryStore
from .session import CalculatorSession

__all__ = [
    "AngleMode",
    "CalculationEvent",
    "CalculationRecord",
    "CalculatorSession",
    "CalculatorState",
    "HistoryStore",
    "InMemoryHistoryStore",
    "Operator",
    "SqliteHistoryStore",
    "Step",
    "UnaryFunction",
    "Unauthorized",
]
