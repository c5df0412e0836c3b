"""
Disclosure workflow for the directory secret.

States:
    LOCKED    no secret available (initial, and after every reset)
    UNLOCKED  identity confirmed with a contact and a secret exists
    REVEALED  UNLOCKED with the secret shown in plain text (toggle)

Transitions attempted from the wrong state are silently ignored.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable

import structlog

from dnicheck.client.clipboard import (
    Clipboard,
    ClipboardError,
    ClipboardUnavailable,
    SelectableFallback,
    SystemClipboard,
)
from dnicheck.identity.models import MatchVerdict

logger = structlog.get_logger()

SECRET_PLACEHOLDER = "—"
MASK_CHAR = "•"

COPY_SUCCESS_MESSAGE = "Copied to clipboard"
COPY_FAILURE_MESSAGE = "Could not copy"
COPY_SUCCESS_SECONDS = 1.5
COPY_FAILURE_SECONDS = 2.0


def mask_secret(secret: str | None) -> str:
    """
    Censor a secret for display.

    Examples:
        ""       → "—"
        "ab"     → "••"
        "abcd"   → "a•••"
        "abcdef" → "ab••ef"
    """
    trimmed = (secret or "").strip()
    if not trimmed:
        return SECRET_PLACEHOLDER
    if len(trimmed) <= 2:
        return MASK_CHAR * 2
    if len(trimmed) <= 4:
        return f"{trimmed[0]}{MASK_CHAR * 3}"
    middle = MASK_CHAR * max(2, len(trimmed) - 4)
    return f"{trimmed[:2]}{middle}{trimmed[-2:]}"


class DisclosureState(str, Enum):
    LOCKED = "locked"
    UNLOCKED = "unlocked"
    REVEALED = "revealed"


@dataclass(frozen=True)
class Notice:
    """Transient copy feedback."""

    message: str
    success: bool
    expires_at: float


class DisclosureController:
    def __init__(
        self,
        clipboard: Clipboard | None = None,
        fallback: Clipboard | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._clipboard = clipboard or SystemClipboard()
        self._fallback = fallback or SelectableFallback()
        self._clock = clock
        self._state = DisclosureState.LOCKED
        self._secret: str | None = None
        self._surface_open = False
        self._notice: Notice | None = None

    @property
    def state(self) -> DisclosureState:
        return self._state

    @property
    def secret(self) -> str | None:
        return self._secret

    @property
    def unlocked(self) -> bool:
        return self._state is not DisclosureState.LOCKED

    @property
    def revealed(self) -> bool:
        return self._state is DisclosureState.REVEALED

    @property
    def surface_open(self) -> bool:
        return self._surface_open

    @property
    def display(self) -> str:
        """What the confirmation surface shows for the secret right now."""
        if self._secret is None:
            return SECRET_PLACEHOLDER
        return self._secret if self.revealed else mask_secret(self._secret)

    @property
    def notice(self) -> Notice | None:
        if self._notice is not None and self._clock() >= self._notice.expires_at:
            self._notice = None
        return self._notice

    def reset(self) -> None:
        """Back to LOCKED; called on every new verification and on explicit clear."""
        self._state = DisclosureState.LOCKED
        self._secret = None
        self._surface_open = False
        self._notice = None

    def unlock(self, verdict: MatchVerdict, secret: str | None) -> bool:
        """Start a new disclosure session; unlocks only for a confirmed contact with a secret."""
        self.reset()
        if verdict is MatchVerdict.IDENTITY_CONFIRMED_WITH_CONTACT and secret:
            self._secret = secret
            self._state = DisclosureState.UNLOCKED
        return self.unlocked

    def request_disclosure(self) -> None:
        """Open the confirmation surface. The secret stays masked."""
        if self._state is not DisclosureState.UNLOCKED:
            return
        self._surface_open = True

    def toggle_reveal(self) -> None:
        if not self._surface_open:
            return
        if self._state is DisclosureState.UNLOCKED:
            self._state = DisclosureState.REVEALED
        elif self._state is DisclosureState.REVEALED:
            self._state = DisclosureState.UNLOCKED

    def close(self) -> None:
        """Close the confirmation surface; the secret is masked again."""
        if not self._surface_open:
            return
        self._surface_open = False
        if self._state is DisclosureState.REVEALED:
            self._state = DisclosureState.UNLOCKED

    def copy_to_clipboard(self) -> Notice | None:
        """Copy the plain secret from the open surface, whatever the reveal toggle says."""
        if not self._surface_open or self._state is DisclosureState.LOCKED or not self._secret:
            return None

        try:
            try:
                self._clipboard.copy(self._secret)
            except ClipboardUnavailable as exc:
                logger.info("clipboard_unavailable_using_fallback", reason=str(exc))
                self._fallback.copy(self._secret)
        except ClipboardError as exc:
            logger.warning("clipboard_copy_failed", reason=str(exc))
            self._notice = Notice(
                COPY_FAILURE_MESSAGE, False, self._clock() + COPY_FAILURE_SECONDS
            )
            return self._notice

        self._notice = Notice(COPY_SUCCESS_MESSAGE, True, self._clock() + COPY_SUCCESS_SECONDS)
        return self._notice
