from __future__ import annotations

from typing import Any, Dict


class GlmShardError(Exception):
    """Base class for errors raised by shard-local data operations."""


class ConfigError(GlmShardError):
    """Raised when configuration is invalid or incomplete."""


class InvalidArgumentError(GlmShardError, ValueError):
    """Raised when an operation receives malformed input."""


class MismatchedIdentifierError(GlmShardError, ValueError):
    """Raised when a per-id array does not line up with the dataset entries."""

    def __init__(self, position: int, expected_id: int, actual_id: int) -> None:
        self.position = position
        self.expected_id = expected_id
        self.actual_id = actual_id
        super().__init__(
            f"residual score id ({actual_id}) and data id ({expected_id}) don't match at position {position}"
        )


class InvariantViolationError(GlmShardError, AssertionError):
    """Raised when a computed quantity breaks a mathematical invariant."""

    def __init__(self, message: str, diagnostics: Dict[str, Any] | None = None) -> None:
        self.diagnostics = dict(diagnostics or {})
        super().__init__(message)


__all__ = [
    "ConfigError",
    "GlmShardError",
    "InvalidArgumentError",
    "InvariantViolationError",
    "MismatchedIdentifierError",
]
