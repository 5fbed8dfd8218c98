"""
Exception hierarchy for the logging facade.

Configuration problems surface as ``ConfigurationError`` subclasses at
construction time. Emitting never raises I/O errors; the only exceptions an
emit call produces are the two severity escalations, ``FatalExit`` and
``LoggerPanic``.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class LogFaceError(Exception):
    """Base class for facade errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}


# ================================
# Configuration errors
# ================================


class ConfigurationError(LogFaceError):
    """Invalid construction request or configuration source."""

    pass


class ProviderNotFoundError(ConfigurationError):
    """Raised when a logger is requested from a provider that is not registered."""

    def __init__(self, *, provider: str) -> None:
        super().__init__(
            f"Logger provider '{provider}' not found",
            code="PROVIDER_NOT_FOUND",
            details={"provider": provider},
        )
        self.provider = provider


class InvalidProviderError(ConfigurationError):
    """Raised when something that is not a LoggerProvider is registered."""

    def __init__(self, *, name: str, provider: Any) -> None:
        super().__init__(
            f"Object registered as '{name}' is not a LoggerProvider: {type(provider).__name__}",
            code="INVALID_PROVIDER",
            details={"name": name, "type": type(provider).__name__},
        )


class ConfigLoadError(ConfigurationError):
    """Raised when a configuration file cannot be read or parsed."""

    def __init__(self, *, source: str, reason: str) -> None:
        super().__init__(
            f"Cannot load log config from {source}: {reason}",
            code="CONFIG_LOAD_FAILED",
            details={"source": source, "reason": reason},
        )


# ================================
# Severity escalations
# ================================


class FatalExit(SystemExit):
    """Raised after a FATAL entry is written. Exits the interpreter with status 1."""

    def __init__(self, message: str) -> None:
        super().__init__(1)
        self.message = message

    def __str__(self) -> str:
        return self.message


class LoggerPanic(BaseException):
    """Raised after a PANIC entry is written.

    Derives from BaseException so generic ``except Exception`` handlers let it
    unwind.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
