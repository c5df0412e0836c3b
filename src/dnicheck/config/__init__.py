"""
dnicheck configuration.

Settings are loaded once from the environment (``DNICHECK_`` prefix) or a
``.env`` file, then handed to each adapter as an immutable config object.
"""

from dnicheck.config.settings import (
    ConsultasPeruConfig,
    DecolectaConfig,
    DirectoryConfig,
    Settings,
    get_settings,
)

__all__ = [
    "Settings",
    "get_settings",
    "ConsultasPeruConfig",
    "DecolectaConfig",
    "DirectoryConfig",
]
