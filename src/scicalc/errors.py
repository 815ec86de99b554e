"""Exception types raised at the edges of the calculator.

Engine transitions never raise; these are for the store and the input
boundaries (keypad labels, web actions).
"""


class CalculatorError(Exception):
    """Base class for scicalc errors."""


class Unauthorized(CalculatorError):
    """Raised when a history operation needs an owner and none was supplied."""

    def __init__(self, message: str = "User must be authenticated") -> None:
        super().__init__(message)


class UnknownKey(CalculatorError, ValueError):
    """Raised when a keypad label has no matching transition."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Unknown key: {key}")
        self.key = key


class UnknownAction(CalculatorError, ValueError):
    """Raised when a web/API action name is not recognised."""

    def __init__(self, action: str) -> None:
        super().__init__(f"Unknown action: {action}")
        self.action = action


__all__ = ["CalculatorError", "Unauthorized", "UnknownKey", "UnknownAction"]
