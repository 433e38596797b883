from __future__ import annotations

from typing import Any, Dict, List, Optional


class DelveError(Exception):
    """Base exception for the Delve project."""


class ConfigError(DelveError):
    """Raised when configuration values are missing or out of range."""


class DataValidationError(DelveError):
    """Raised when a definition table fails JSON Schema validation."""

    def __init__(self, message: str, errors: Optional[List[Any]] = None):
        super().__init__(message)
        self.errors = errors or []

    def to_human(self) -> str:
        parts = [str(self)]
        for e in self.errors:
            path = "/".join(str(p) for p in e.path) or "<root>"
            parts.append(f" - at {path}: {e.message}")
        return "\n".join(parts)


class GenerationError(DelveError):
    """Raised when no connected level could be produced after all retries."""

    def __init__(self, depth: int, seed: int, params: Dict[str, Any], reason: str = "") -> None:
        self.depth = depth
        self.seed = seed
        self.params = dict(params)
        self.reason = reason
        message = f"Level generation failed for depth={depth} seed={seed} params={self.params}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class GameOverError(DelveError):
    """Raised when an intent is submitted after the player has died."""


class DebugCommandError(DelveError):
    """Raised when a debug command line cannot be parsed."""
