from .exceptions import UnknownProvider


class ProviderRegistry:
    """Maps a provider id to a factory returning a fresh gateway per request."""

    def __init__(self):
        self._factories = {}

    def register(self, provider_id: str, factory):
        self._factories[provider_id] = factory

    def unregister(self, provider_id: str):
        self._factories.pop(provider_id, None)

    def is_registered(self, provider_id: str) -> bool:
        return provider_id in self._factories

    def ids(self):
        return list(self._factories)

    def create(self, provider_id: str):
        try:
            factory = self._factories[provider_id]
        except KeyError:
            raise UnknownProvider(f"Unknown payment provider: {provider_id}")
        return factory()


def build_default_registry() -> ProviderRegistry:
    from .gateways import TaraMoneyGateway

    registry = ProviderRegistry()
    registry.register(TaraMoneyGateway.id, TaraMoneyGateway)
    return registry
