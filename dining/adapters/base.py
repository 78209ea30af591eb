"""
Rating provider protocol + registry for the pluggable lookup sources.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Protocol

from dining.models import ProviderResult


class RatingProvider(Protocol):
    """
    ``name`` doubles as the Restaurant rating attribute the provider owns and
    as the ``source`` tag on its review snippets.
    """

    name: str
    enabled: bool

    def search(self, name: str, city: str) -> Optional[ProviderResult]:
        ...


class ProviderRegistry:
    """
    Keeps the configured providers in consultation order.
    """

    def __init__(self, providers: Iterable[RatingProvider] = ()) -> None:
        self._providers: Dict[str, RatingProvider] = {}
        for provider in providers:
            self.register(provider)

    def register(self, provider: RatingProvider) -> None:
        if provider.name in self._providers:
            raise ValueError(f"Provider '{provider.name}' already registered")
        self._providers[provider.name] = provider

    def all(self) -> List[RatingProvider]:
        return list(self._providers.values())

    def enabled(self) -> List[RatingProvider]:
        return [provider for provider in self._providers.values() if provider.enabled]

    def keys(self) -> Iterable[str]:
        return self._providers.keys()
