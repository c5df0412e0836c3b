from __future__ import annotations

from typing import Any

import httpx
import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from dnicheck.core.errors import (
    DnicheckError,
    NetworkError,
    ResolutionError,
    UpstreamProtocolError,
    ValidationError,
)
from dnicheck.service import VerificationOutcome

logger = structlog.get_logger()


class VerificationClient:
    """Client for the validate-dni endpoint, retrying only transport failures."""

    def __init__(
        self,
        base_url: str,
        *,
        api_prefix: str = "/api",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_prefix = api_prefix.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @property
    def validate_url(self) -> str:
        return f"{self._base_url}{self._api_prefix}/validate-dni"

    @retry(
        retry=retry_if_exception_type(NetworkError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
        reraise=True,
    )
    async def _post(self, payload: dict[str, Any]) -> httpx.Response:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                return await client.post(
                    self.validate_url,
                    json=payload,
                    headers={"Accept": "application/json"},
                )
        except httpx.HTTPError as exc:
            logger.warning("http_network_error", url=self.validate_url, error=str(exc))
            raise NetworkError(f"network error: {str(exc) or type(exc).__name__}") from exc

    async def validate(self, dni: str) -> VerificationOutcome:
        """
        Verify an ID number through the API.

        Raises:
            ValidationError: the server rejected the request body
            ResolutionError: no identity provider resolved the ID number
            NetworkError: the API could not be reached
        """
        response = await self._post({"dni": dni})

        try:
            body = response.json()
        except ValueError as exc:
            raise UpstreamProtocolError(
                f"non-JSON response (HTTP {response.status_code})"
            ) from exc
        if not isinstance(body, dict):
            raise UpstreamProtocolError("unexpected response shape")

        message = str(body.get("message") or f"HTTP {response.status_code}")

        if response.status_code == 400:
            raise ValidationError(message, {"errors": body.get("errors")})
        if response.status_code == 502:
            raise ResolutionError(message)
        if response.is_error or not body.get("success"):
            raise DnicheckError(message, {"status": response.status_code})

        return VerificationOutcome.from_payload(body)
