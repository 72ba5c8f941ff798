"""Provider registry: one adapter per ProviderId."""
import requests

from .azure_vision import AzureVisionAdapter
from .base import ProviderAdapter, ProviderId
from .gemini import GeminiAdapter
from .google_vision import GoogleVisionAdapter
from .huggingface import HuggingFaceAdapter
from .local_device import LocalDeviceAdapter
from .openrouter import OpenRouterAdapter


class AdapterRegistry:
    """Maps every ProviderId to its adapter.

    Construction fails if any ProviderId is left without an adapter, so a
    new enum member cannot silently fall through at dispatch time.
    """

    def __init__(self, adapters: dict[ProviderId, ProviderAdapter]):
        missing = set(ProviderId) - set(adapters)
        if missing:
            names = ", ".join(sorted(p.value for p in missing))
            raise ValueError(f"No adapter registered for: {names}")
        self._adapters = dict(adapters)

    def get(self, provider: ProviderId) -> ProviderAdapter:
        return self._adapters[provider]

    def all(self) -> dict[ProviderId, ProviderAdapter]:
        return self._adapters.copy()


def build_default_registry(
    model_handle,
    session: requests.Session | None = None,
    timeout: float = 60.0,
    local_strategy: str = "cascade",
    openrouter_referer: str = "http://localhost:5173",
    openrouter_title: str = "Adobe Stock Categorizer",
) -> AdapterRegistry:
    """Wire every adapter to a shared HTTP session.

    The session is used from executor threads, possibly by overlapping
    requests. Adapters pass headers, params and timeouts per call and never
    mutate session state, so only the connection pool is shared.
    """
    session = session or requests.Session()
    return AdapterRegistry({
        ProviderId.LOCAL_DEVICE: LocalDeviceAdapter(model_handle, strategy=local_strategy),
        ProviderId.GOOGLE_CLOUD_VISION: GoogleVisionAdapter(session, timeout),
        ProviderId.GOOGLE_GEMINI: GeminiAdapter(session, timeout),
        ProviderId.OPENROUTER: OpenRouterAdapter(
            session, timeout, referer=openrouter_referer, title=openrouter_title
        ),
        ProviderId.AZURE_COMPUTER_VISION: AzureVisionAdapter(session, timeout),
        ProviderId.HUGGING_FACE: HuggingFaceAdapter(session, timeout),
    })
