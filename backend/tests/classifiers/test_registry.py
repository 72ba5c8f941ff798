"""Tests for the provider registry."""
from unittest.mock import MagicMock

import pytest

from stock_categorizer.classifiers.base import ProviderId
from stock_categorizer.classifiers.gemini import GeminiAdapter
from stock_categorizer.classifiers.local_device import LocalDeviceAdapter
from stock_categorizer.classifiers.registry import AdapterRegistry, build_default_registry


class TestAdapterRegistry:
    def test_missing_provider_rejected(self):
        adapters = {p: MagicMock() for p in ProviderId if p is not ProviderId.OPENROUTER}
        with pytest.raises(ValueError, match="OpenRouter"):
            AdapterRegistry(adapters)

    def test_default_registry_is_exhaustive(self, session):
        registry = build_default_registry(MagicMock(), session=session, timeout=5)
        adapters = registry.all()
        assert set(adapters) == set(ProviderId)
        for provider, adapter in adapters.items():
            assert adapter.provider_id is provider

    def test_lookup(self, session):
        registry = build_default_registry(MagicMock(), session=session, local_strategy="mapper")
        assert isinstance(registry.get(ProviderId.GOOGLE_GEMINI), GeminiAdapter)
        local = registry.get(ProviderId.LOCAL_DEVICE)
        assert isinstance(local, LocalDeviceAdapter)
        assert local.strategy == "mapper"

    def test_network_adapters_share_one_session(self, session):
        registry = build_default_registry(MagicMock(), session=session)
        network = [a for p, a in registry.all().items() if p is not ProviderId.LOCAL_DEVICE]
        assert network
        assert all(adapter.session is session for adapter in network)
