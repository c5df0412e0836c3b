"""
Identity resolver.

Tries identity providers in priority order and returns the first successful
answer. Providers are called one after another, never concurrently: the
fallback only runs when everything before it failed. Identities from
different providers are never merged.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

import structlog

from dnicheck.core.errors import ConfigurationError, ResolutionError
from dnicheck.identity.models import IdentitySource, ResolvedIdentity

if TYPE_CHECKING:
    from dnicheck.providers.base import Err, IdentityProvider

logger = structlog.get_logger()

DEFAULT_FAILURE_REASON = "upstream error"


@dataclass
class IdentityResolver:
    """
    Resolves an ID number against an ordered list of providers.

    The first provider is the primary; any later provider that succeeds is
    reported as the fallback source.
    """

    providers: Sequence[IdentityProvider]

    async def resolve(self, id_number: str) -> ResolvedIdentity:
        """
        Resolve an ID number to a single identity.

        Raises:
            ResolutionError: every provider failed. The message is the first
                non-empty failure reason in priority order.
        """
        if not self.providers:
            raise ConfigurationError("No identity providers configured")

        failures: list[tuple[str, Err]] = []

        for position, provider in enumerate(self.providers):
            result = await provider.lookup(id_number)

            if result.ok:
                source = IdentitySource.PRIMARY if position == 0 else IdentitySource.FALLBACK
                logger.info(
                    "identity_resolved",
                    dni=id_number,
                    provider=provider.name,
                    source=source.value,
                    failed_before=len(failures),
                )
                return ResolvedIdentity(source=source, fields=result.fields, provider=provider.name)

            failures.append((provider.name, result))

        reason = next(
            (err.reason.strip() for _, err in failures if err.reason and err.reason.strip()),
            DEFAULT_FAILURE_REASON,
        )
        logger.warning("identity_resolution_failed", dni=id_number, reason=reason)
        raise ResolutionError(reason, {"attempts": {name: err.reason for name, err in failures}})
