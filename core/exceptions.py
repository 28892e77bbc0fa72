"""Custom exceptions for the Runtime Guard Console."""

from __future__ import annotations


class ConsoleError(Exception):
    """Base exception for all console errors."""


class ConfigurationError(ConsoleError):
    """Raised when configuration is invalid or missing."""


class IntegrationError(ConsoleError):
    """Raised when a data provider call fails."""

    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(f"[{provider}] {message}")


class ProviderNotFoundError(ConsoleError):
    """Raised when a requested data provider is not registered."""

    def __init__(self, category: str, provider: str | None = None):
        self.category = category
        self.provider = provider
        detail = f" (provider={provider})" if provider else ""
        super().__init__(f"No provider found for category '{category}'{detail}")


class ValidationError(ConsoleError):
    """Raised when a timeline entry is malformed.

    The merger reports these per entry instead of aborting, so ``entry_id``
    always names the offending record.
    """

    def __init__(self, entry_id: str, reason: str):
        self.entry_id = entry_id
        self.reason = reason
        super().__init__(f"Invalid timeline entry '{entry_id}': {reason}")


class OutOfRangeError(ConsoleError):
    """Raised when a playback index falls outside the reel."""

    def __init__(self, index: int, length: int):
        self.index = index
        self.length = length
        super().__init__(f"Index {index} is outside the reel (length={length})")


class InvalidStateError(ConsoleError):
    """Raised when a playback operation is not valid in the current phase."""

    def __init__(self, operation: str, phase: str, reason: str = ""):
        self.operation = operation
        self.phase = phase
        detail = f": {reason}" if reason else ""
        super().__init__(f"Cannot {operation} while {phase}{detail}")


class ReelLoadError(ConsoleError):
    """Raised when a replay reel cannot be read or parsed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"Failed to load replay reel '{path}': {reason}")
