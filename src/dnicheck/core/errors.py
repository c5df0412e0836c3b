"""
Unified error handling for dnicheck.

Every failure the verification pipeline knows about is a ``DnicheckError``
subclass. Each class carries the exit code used by CLI commands and the HTTP
status used by the API boundary.

Exit Codes:
- 0: Success
- 1: Warning (identity not confirmed, operation otherwise succeeded)
- 10: Configuration error
- 11: Provider error (identity lookup failed upstream)
- 12: Validation error
- 127: Unknown/internal error
"""

from __future__ import annotations

import functools
import sys
import traceback
from enum import IntEnum
from typing import Any, Callable, TypeVar

import structlog

logger = structlog.get_logger()


class ExitCode(IntEnum):
    """Standardized exit codes for CLI commands."""

    SUCCESS = 0
    WARNING = 1
    CONFIG_ERROR = 10
    PROVIDER_ERROR = 11
    VALIDATION_ERROR = 12
    UNKNOWN_ERROR = 127


class DnicheckError(Exception):
    """Base exception for dnicheck errors with exit code support."""

    exit_code: ExitCode = ExitCode.UNKNOWN_ERROR
    http_status: int = 500
    show_traceback: bool = False

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(DnicheckError):
    """Raised when required credentials or settings are missing."""

    exit_code = ExitCode.CONFIG_ERROR


class ProviderError(DnicheckError):
    """Raised when an external identity provider fails."""

    exit_code = ExitCode.PROVIDER_ERROR
    http_status = 502


class NetworkError(ProviderError):
    """Transport failure reaching an upstream service."""


class UpstreamProtocolError(ProviderError):
    """Non-success status or malformed/unexpected body from upstream."""


class ResolutionError(ProviderError):
    """Raised when no identity provider could resolve the ID number."""


class ValidationError(DnicheckError):
    """Raised for malformed caller input."""

    exit_code = ExitCode.VALIDATION_ERROR
    http_status = 400


class DirectoryUnavailable(DnicheckError):
    """Directory lookup failed; downgraded to a soft "no contact" outcome."""

    exit_code = ExitCode.WARNING


F = TypeVar("F", bound=Callable[..., int])


def main_with_error_handling(
    *,
    show_traceback: bool = False,
    log_errors: bool = True,
) -> Callable[[F], F]:
    """
    Decorator for CLI main functions that provides unified error handling.

    Catches exceptions and converts them to appropriate exit codes with
    consistent error reporting.

    Exit codes:
        - DnicheckError subclasses: Uses the error's exit_code
        - KeyboardInterrupt: Returns 130 (standard for SIGINT)
        - Other exceptions: Returns 127 (unknown error)
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> int:
            try:
                return func(*args, **kwargs)
            except DnicheckError as e:
                if log_errors:
                    logger.error(
                        "command_error",
                        error_type=type(e).__name__,
                        message=e.message,
                        exit_code=e.exit_code,
                        **e.details,
                    )
                _print_error(format_error_message(e))
                if e.show_traceback or show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return e.exit_code
            except KeyboardInterrupt:
                if log_errors:
                    logger.info("command_interrupted")
                return 130
            except Exception as e:
                if log_errors:
                    logger.error(
                        "unexpected_error",
                        error_type=type(e).__name__,
                        message=str(e),
                        exit_code=ExitCode.UNKNOWN_ERROR,
                    )
                _print_error(f"Unexpected error: {e}")
                if show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return ExitCode.UNKNOWN_ERROR

        return wrapper  # type: ignore[return-value]

    return decorator


def format_error_message(error: DnicheckError) -> str:
    """Format an error message for display to users."""
    msg = error.message
    if error.details:
        detail_str = ", ".join(f"{k}={v}" for k, v in error.details.items())
        msg = f"{msg} ({detail_str})"
    return msg


def _print_error(message: str) -> None:
    from dnicheck.cli.ux import error as print_error

    print_error(message)
