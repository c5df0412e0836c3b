"""Masking of contact strings returned by the directory."""

from __future__ import annotations

CONTACT_MASK = "***"
CONTACT_PLACEHOLDER = "***"


def mask_contact(contact: object) -> str:
    """
    Mask a ``local@domain`` contact, keeping the domain.

    Examples:
        "abc@example.com" → "ab***@example.com"
        "ab@example.com"  → "a***@example.com"
        "no-at-sign"      → "***"
    """
    trimmed = str(contact if contact is not None else "").strip()
    at = trimmed.find("@")
    if at <= 0:
        return CONTACT_PLACEHOLDER

    local, domain = trimmed[:at], trimmed[at:]
    if len(local) <= 2:
        return f"{local[0]}{CONTACT_MASK}{domain}"
    return f"{local[:2]}{CONTACT_MASK}{domain}"
