"""
Error types raised by the greeks library.
"""


class GreeksError(Exception):
    """Base class for all library errors."""


class InvalidParameter(GreeksError, ValueError):
    """A parameter record was built with out-of-domain inputs."""

    def __init__(self, field: str, value: object, constraint: str):
        self.field = field
        self.value = value
        self.constraint = constraint
        super().__init__(f"{field}={value!r} violates {constraint}")


class DivisionByZero(GreeksError, ZeroDivisionError):
    """A formula hit a zero denominator that has no degenerate limit."""


class UnsupportedInstrument(GreeksError, TypeError):
    """No payoff model is registered for the given instrument."""
