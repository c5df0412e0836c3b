"""ID-number validation route."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from dnicheck.api.deps import get_verification_service
from dnicheck.config import Settings, get_settings
from dnicheck.core.errors import DnicheckError
from dnicheck.identity.models import IdentityQuery
from dnicheck.logging import bind_context
from dnicheck.service import VerificationService

router = APIRouter()


@router.post("/validate-dni")
async def validate_dni(
    query: IdentityQuery,
    service: VerificationService = Depends(get_verification_service),  # noqa: B008
    settings: Settings = Depends(get_settings),  # noqa: B008
) -> Any:
    """Resolve the identity behind an ID number and look up its directory contact."""
    log = bind_context(dni=query.id_number)
    try:
        outcome = await service.validate(query)
    except DnicheckError as exc:
        log.warning(
            "validate_dni_failed",
            error_type=type(exc).__name__,
            message=exc.message,
        )
        return JSONResponse(
            status_code=exc.http_status,
            content={"success": False, "message": exc.message},
        )
    except Exception as exc:
        log.exception("validate_dni_error")
        content: dict[str, Any] = {"success": False, "message": "Server error"}
        if not settings.is_production:
            content["error"] = str(exc)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)

    log.info("validate_dni_completed", source=outcome.identity.source.value)
    return outcome.to_payload()
