from __future__ import annotations

from fastapi import Depends

from dnicheck.config import Settings, get_settings
from dnicheck.service import VerificationService, build_verification_service


def get_verification_service(
    settings: Settings = Depends(get_settings),  # noqa: B008
) -> VerificationService:
    return build_verification_service(settings)
