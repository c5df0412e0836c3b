from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, List

from dnicheck.core.errors import ConfigurationError

if TYPE_CHECKING:
    from dnicheck.config.settings import Settings
    from dnicheck.providers.base import IdentityProvider

ProviderFactory = Callable[["Settings"], "IdentityProvider"]


@dataclass(frozen=True)
class ProviderSpec:
    """Metadata describing a registered identity provider."""

    name: str
    factory: ProviderFactory
    description: str | None = None


class ProviderRegistry:
    """Simple in-memory registry for identity providers."""

    def __init__(self) -> None:
        self._providers: Dict[str, ProviderSpec] = {}

    def register(
        self,
        name: str,
        factory: ProviderFactory,
        *,
        description: str | None = None,
    ) -> None:
        if not name:
            raise ValueError("Provider name is required")
        self._providers[name] = ProviderSpec(name=name, factory=factory, description=description)

    def create(self, name: str, settings: Settings) -> IdentityProvider:
        spec = self._providers.get(name)
        if spec is None:
            raise ConfigurationError(f"Identity provider '{name}' is not registered")
        return spec.factory(settings)

    def list(self) -> List[ProviderSpec]:
        return list(self._providers.values())


provider_registry = ProviderRegistry()


def register_provider(
    name: str,
    factory: ProviderFactory,
    *,
    description: str | None = None,
) -> None:
    provider_registry.register(name, factory, description=description)


def create_provider(name: str, settings: Settings) -> IdentityProvider:
    return provider_registry.create(name, settings)


def build_providers(settings: Settings) -> list[IdentityProvider]:
    """Instantiate the configured providers in priority order."""
    return [create_provider(name, settings) for name in settings.identity_providers]


def list_providers() -> List[ProviderSpec]:
    return provider_registry.list()
