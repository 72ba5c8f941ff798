"""Tests for the provider fallback orchestrator."""
from unittest.mock import MagicMock

import pytest

from stock_categorizer.classifiers import (
    AdapterRegistry,
    ClassificationResult,
    Credential,
    CredentialFormatError,
    ProviderId,
)
from stock_categorizer.orchestrator import (
    AllProvidersFailedError,
    CategorizationOrchestrator,
    NoUsableCredentialsError,
)


def success(category: str, provider: str) -> ClassificationResult:
    return ClassificationResult(
        category=category, confidence=0.9, reasoning="looks right", provider=provider
    )


@pytest.fixture
def adapters():
    """One mock adapter per provider, each failing unless told otherwise."""
    mocks = {}
    for provider in ProviderId:
        adapter = MagicMock()
        adapter.classify.return_value = ClassificationResult.failure(
            provider.value, f"{provider.value} unavailable"
        )
        mocks[provider] = adapter
    return mocks


@pytest.fixture
def orchestrator(adapters):
    return CategorizationOrchestrator(AdapterRegistry(adapters))


class TestClassifyImage:
    async def test_first_success_wins(self, orchestrator, adapters, image_path):
        adapters[ProviderId.GOOGLE_CLOUD_VISION].classify.return_value = success("Animals", "GCV")
        adapters[ProviderId.OPENROUTER].classify.return_value = success("Food", "OpenRouter")

        result = await orchestrator.classify_image(image_path, [
            Credential(ProviderId.GOOGLE_CLOUD_VISION, "k1"),
            Credential(ProviderId.OPENROUTER, "k2"),
        ])

        assert result.category == "Animals"
        assert result.filename == "photo.jpg"
        assert result.suggestions == []
        adapters[ProviderId.OPENROUTER].classify.assert_not_called()

    async def test_blank_then_failure_then_success(self, orchestrator, adapters, image_path):
        adapters[ProviderId.HUGGING_FACE].classify.return_value = success("Travel", "HF")

        result = await orchestrator.classify_image(image_path, [
            Credential(ProviderId.GOOGLE_GEMINI, "   "),
            Credential(ProviderId.OPENROUTER, "k-b"),
            Credential(ProviderId.HUGGING_FACE, "k-c"),
        ])

        assert result.category == "Travel"
        assert result.provider == "HF"
        adapters[ProviderId.GOOGLE_GEMINI].classify.assert_not_called()
        adapters[ProviderId.OPENROUTER].classify.assert_called_once()

    async def test_raised_error_moves_on(self, orchestrator, adapters, image_path):
        adapters[ProviderId.AZURE_COMPUTER_VISION].classify.side_effect = CredentialFormatError("bad")
        adapters[ProviderId.GOOGLE_CLOUD_VISION].classify.return_value = success("Sports", "GCV")

        result = await orchestrator.classify_image(image_path, [
            Credential(ProviderId.AZURE_COMPUTER_VISION, "nocolon"),
            Credential(ProviderId.GOOGLE_CLOUD_VISION, "k"),
        ])

        assert result.category == "Sports"

    async def test_all_fail_reports_last_error(self, orchestrator, adapters, image_path):
        with pytest.raises(AllProvidersFailedError) as exc:
            await orchestrator.classify_image(image_path, [
                Credential(ProviderId.GOOGLE_GEMINI, "a"),
                Credential(ProviderId.OPENROUTER, "b"),
            ])

        message = str(exc.value)
        assert message.startswith("All API keys failed. Last error:")
        assert "OpenRouter unavailable" in message
        assert "Google Gemini API unavailable" not in message

    async def test_last_error_from_exception(self, orchestrator, adapters, image_path):
        adapters[ProviderId.OPENROUTER].classify.side_effect = RuntimeError("socket closed")
        with pytest.raises(AllProvidersFailedError, match="socket closed"):
            await orchestrator.classify_image(image_path, [
                Credential(ProviderId.GOOGLE_GEMINI, "a"),
                Credential(ProviderId.OPENROUTER, "b"),
            ])

    async def test_empty_list(self, orchestrator, image_path):
        with pytest.raises(NoUsableCredentialsError):
            await orchestrator.classify_image(image_path, [])

    async def test_all_blank_or_disabled(self, orchestrator, adapters, image_path):
        with pytest.raises(NoUsableCredentialsError):
            await orchestrator.classify_image(image_path, [
                Credential(ProviderId.OPENROUTER, ""),
                Credential(ProviderId.GOOGLE_GEMINI, "key", enabled=False),
            ])
        for adapter in adapters.values():
            adapter.classify.assert_not_called()

    async def test_filename_override(self, orchestrator, adapters, image_path):
        adapters[ProviderId.LOCAL_DEVICE].classify.return_value = success("People", "Local")
        result = await orchestrator.classify_image(
            image_path,
            [Credential(ProviderId.LOCAL_DEVICE, "LOCAL_MODE")],
            filename="uploads/holiday.png",
        )
        assert result.filename == "holiday.png"

    async def test_same_credential_order_is_respected(self, orchestrator, adapters, image_path):
        order = []

        def record(name):
            def _classify(path, credential):
                order.append(name)
                return ClassificationResult.failure(name, "nope")
            return _classify

        adapters[ProviderId.OPENROUTER].classify.side_effect = record("openrouter")
        adapters[ProviderId.GOOGLE_GEMINI].classify.side_effect = record("gemini")

        with pytest.raises(AllProvidersFailedError):
            await orchestrator.classify_image(image_path, [
                Credential(ProviderId.OPENROUTER, "a"),
                Credential(ProviderId.GOOGLE_GEMINI, "b"),
            ])
        assert order == ["openrouter", "gemini"]


class TestClassifyBatch:
    async def test_sequential_with_errors(self, orchestrator, adapters, image_path, png_path):
        adapters[ProviderId.GOOGLE_CLOUD_VISION].classify.side_effect = [
            success("Animals", "GCV"),
            ClassificationResult.failure("GCV", "quota"),
        ]

        summary = await orchestrator.classify_batch(
            [image_path, png_path],
            [Credential(ProviderId.GOOGLE_CLOUD_VISION, "k")],
        )

        assert summary.processed == 1
        assert summary.errors == 1
        assert [item.filename for item in summary.items] == ["photo.jpg", "graphic.png"]
        assert summary.items[0].image.category == "Animals"
        assert "quota" in summary.items[1].error
