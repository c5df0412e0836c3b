"""Client side of the verification flow: API client, matching and disclosure."""

from dnicheck.client.clipboard import (
    Clipboard,
    ClipboardError,
    ClipboardUnavailable,
    SelectableFallback,
    SystemClipboard,
)
from dnicheck.client.disclosure import (
    DisclosureController,
    DisclosureState,
    Notice,
    mask_secret,
)
from dnicheck.client.http import VerificationClient

__all__ = [
    "Clipboard",
    "ClipboardError",
    "ClipboardUnavailable",
    "DisclosureController",
    "DisclosureState",
    "Notice",
    "SelectableFallback",
    "SystemClipboard",
    "VerificationClient",
    "mask_secret",
]
