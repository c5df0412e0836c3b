"""Core modules for dnicheck - centralized error definitions."""

from dnicheck.core.errors import (
    ConfigurationError,
    DirectoryUnavailable,
    DnicheckError,
    ExitCode,
    NetworkError,
    ProviderError,
    ResolutionError,
    UpstreamProtocolError,
    ValidationError,
    format_error_message,
    main_with_error_handling,
)

__all__ = [
    "ExitCode",
    "DnicheckError",
    "ConfigurationError",
    "ProviderError",
    "NetworkError",
    "UpstreamProtocolError",
    "ResolutionError",
    "ValidationError",
    "DirectoryUnavailable",
    "main_with_error_handling",
    "format_error_message",
]
