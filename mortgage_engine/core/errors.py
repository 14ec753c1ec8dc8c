from __future__ import annotations

from typing import Any


class MortgageEngineError(Exception):
    """Base class for every error raised by the engine."""


class InvalidParameter(MortgageEngineError, ValueError):
    """An input field is out of range. Raised before any simulation step."""

    def __init__(self, field: str, value: Any, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"{field}={value!r}: {reason}")


class DidNotConverge(MortgageEngineError, ArithmeticError):
    """A payment loop hit its hard iteration cap with a balance still outstanding."""

    def __init__(self, index: int, balance: float):
        self.index = index
        self.balance = balance
        super().__init__(f"balance {balance:.6f} still outstanding after {index} payments")
