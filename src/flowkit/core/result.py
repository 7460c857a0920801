"""
Result types and error hierarchy for flowkit.

This module provides:
1. Result[T, E] type for explicit error handling
2. Domain-specific exception hierarchy

Usage:
    from flowkit.core.result import Ok, Err, Result, GitError

    def read_head() -> Result[str, GitError]:
        if detached:
            return Err(GitError("HEAD is detached"))
        return Ok("refs/heads/main")

    match read_head():
        case Ok(ref):
            print(ref)
        case Err(err):
            print(err.message)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E", bound=Exception)


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Represents a successful result containing a value."""

    value: T

    def unwrap(self) -> T:
        """Return the contained value."""
        return self.value

    def map(self, fn: Callable[[T], U]) -> Ok[U]:
        """Apply a function to the contained value."""
        return Ok(fn(self.value))


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Represents a failed result containing an error."""

    error: E

    def unwrap(self) -> T:
        """Raise the contained error."""
        raise self.error

    def map(self, fn: Callable[[T], U]) -> Err[E]:
        """No-op for Err - returns self unchanged."""
        return self


Result = Ok[T] | Err[E]


# ---------------------------------------------------------------------------
# Domain-specific error hierarchy
# ---------------------------------------------------------------------------


class FlowKitError(Exception):
    """Base exception for all flowkit errors.

    Carries an optional context mapping that is appended to the message
    when rendered, so CLI output shows the failing command and cwd.
    """

    def __init__(self, message: str, *, context: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [{ctx_str}]"
        return self.message


class GitError(FlowKitError):
    """Raised when git cannot be run or reports a failure.

    Examples:
    - git executable not on PATH
    - Repository path missing
    - Command timed out
    - Non-zero exit where output was required
    """


class ConfigurationError(FlowKitError):
    """Raised for configuration issues."""


class ValidationError(FlowKitError):
    """Raised for invalid user input, such as an empty branch name."""


__all__ = [
    "Ok",
    "Err",
    "Result",
    "FlowKitError",
    "GitError",
    "ConfigurationError",
    "ValidationError",
]
