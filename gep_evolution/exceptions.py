"""
gep_evolution/exceptions.py - Typed failures raised or carried by the engine
"""
from typing import Optional


class GEPError(Exception):
    """Base exception class for all engine errors."""

    def __init__(self, message: str, suggestion: Optional[str] = None):
        self.message = message
        self.suggestion = suggestion
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.suggestion:
            return f"{self.message}. Suggestion: {self.suggestion}"
        return self.message


class InvalidExpression(GEPError):
    """
    A gene cannot be turned into a value: operand underflow, an unknown
    symbol, an unbound terminal, or a gene that ends while arguments are
    still required.
    """


class DomainError(GEPError):
    """A primitive was applied outside its mathematical domain."""


class ConfigurationError(GEPError):
    """Inconsistent engine configuration. Not recoverable."""
