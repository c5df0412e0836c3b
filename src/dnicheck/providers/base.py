"""
Identity provider contract.

Every provider exposes ``lookup(id_number) -> ProviderResult`` and never
raises past that boundary: configuration, transport and protocol failures all
come back as ``Err`` with a human-readable reason.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, Protocol, Union

import httpx
import structlog

from dnicheck.core.errors import (
    ConfigurationError,
    NetworkError,
    ProviderError,
    UpstreamProtocolError,
)
from dnicheck.identity.models import IdentityFields

logger = structlog.get_logger()

DEFAULT_USER_AGENT = "dnicheck/0.1.0"


@dataclass(frozen=True)
class Ok:
    """Successful lookup, already mapped to the common identity shape."""

    fields: IdentityFields
    ok: ClassVar[bool] = True


@dataclass(frozen=True)
class Err:
    """Failed lookup."""

    reason: str
    kind: str = "ProviderError"
    ok: ClassVar[bool] = False


ProviderResult = Union[Ok, Err]


class IdentityProvider(Protocol):
    """Minimal capability the resolver needs from a provider."""

    name: str

    async def lookup(self, id_number: str) -> ProviderResult:
        ...


class BaseIdentityProvider(ABC):
    """
    Shared plumbing for HTTP identity providers.

    Subclasses implement:
    - _check_configuration(): raise ConfigurationError before any network call
    - _fetch(): one upstream request, returning mapped IdentityFields

    No retries happen here; composition across providers is the resolver's job.
    """

    name: str = "base"

    def __init__(
        self,
        *,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self._timeout = timeout
        self._transport = transport
        self._user_agent = user_agent

    async def lookup(self, id_number: str) -> ProviderResult:
        try:
            self._check_configuration()
            fields = await self._fetch(id_number)
        except (ConfigurationError, ProviderError) as exc:
            logger.warning(
                "provider_lookup_failed",
                provider=self.name,
                dni=id_number,
                error_type=type(exc).__name__,
                reason=exc.message,
            )
            return Err(reason=exc.message, kind=type(exc).__name__)
        except Exception as exc:
            logger.exception(
                "provider_lookup_crashed",
                provider=self.name,
                dni=id_number,
                error_type=type(exc).__name__,
            )
            return Err(
                reason=f"unexpected error: {str(exc) or type(exc).__name__}",
                kind=type(exc).__name__,
            )

        logger.info("provider_lookup_succeeded", provider=self.name, dni=id_number)
        return Ok(fields=fields)

    @abstractmethod
    def _check_configuration(self) -> None:
        """Raise ConfigurationError when credentials or URLs are missing."""

    @abstractmethod
    async def _fetch(self, id_number: str) -> IdentityFields:
        """Query upstream and map its answer to IdentityFields."""

    async def _send(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> tuple[int, Any]:
        """Execute one HTTP request and return (status, parsed JSON body)."""
        req_headers = {"Accept": "application/json", "User-Agent": self._user_agent}
        if json is not None:
            req_headers["Content-Type"] = "application/json"
        if headers:
            req_headers.update(headers)

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.request(
                    method,
                    url,
                    params=params,
                    json=json,
                    headers=req_headers,
                )
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
            # ValueError covers UnicodeEncodeError from non-ASCII header values
            raise NetworkError(f"network error: {str(exc) or type(exc).__name__}") from exc

        try:
            body = response.json() if response.content else {}
        except ValueError as exc:
            raise UpstreamProtocolError(
                f"non-JSON response (HTTP {response.status_code})",
                {"status": response.status_code},
            ) from exc

        return response.status_code, body

    @staticmethod
    def _raise_for_status(status: int, body: Any) -> None:
        """Turn a non-2xx answer into UpstreamProtocolError, preferring upstream's message."""
        if 200 <= status < 300:
            return
        message = body.get("message") if isinstance(body, dict) else None
        if isinstance(message, str) and message.strip():
            raise UpstreamProtocolError(message.strip(), {"status": status})
        raise UpstreamProtocolError(f"HTTP {status}", {"status": status})
