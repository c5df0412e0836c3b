"""Identity providers and built-in registrations."""

# Import built-in providers for side effects (registration)
from dnicheck.providers import consultasperu as _consultasperu  # noqa: F401
from dnicheck.providers import decolecta as _decolecta  # noqa: F401
from dnicheck.providers.base import (
    BaseIdentityProvider,
    Err,
    IdentityProvider,
    Ok,
    ProviderResult,
)
from dnicheck.providers.consultasperu import ConsultasPeruProvider
from dnicheck.providers.decolecta import DecolectaProvider
from dnicheck.providers.registry import (
    build_providers,
    create_provider,
    list_providers,
    register_provider,
)

__all__ = [
    "BaseIdentityProvider",
    "ConsultasPeruProvider",
    "DecolectaProvider",
    "Err",
    "IdentityProvider",
    "Ok",
    "ProviderResult",
    "build_providers",
    "create_provider",
    "list_providers",
    "register_provider",
]
