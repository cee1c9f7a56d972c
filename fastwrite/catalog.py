"""Static catalog of AI providers and the models each one offers."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple


@dataclass(frozen=True)
class Provider:
    """An AI backend offering one or more models."""

    id: str
    name: str
    models: Tuple[str, ...]
    key_url: str


class ProviderCatalog:
    """Immutable provider → model lookup used by the form and the orchestrator."""

    def __init__(self, providers: Tuple[Provider, ...], display_names: Mapping[str, str]) -> None:
        self._providers = MappingProxyType({provider.id: provider for provider in providers})
        self._display_names = MappingProxyType(dict(display_names))

    def __contains__(self, provider_id: object) -> bool:
        return provider_id in self._providers

    def __iter__(self):
        return iter(self._providers.values())

    def get(self, provider_id: str) -> Optional[Provider]:
        return self._providers.get(provider_id)

    def models_for(self, provider_id: str) -> Tuple[str, ...]:
        provider = self._providers.get(provider_id)
        return provider.models if provider else ()

    def default_model(self, provider_id: str) -> str:
        models = self.models_for(provider_id)
        return models[0] if models else ""

    def display_name(self, model_id: str) -> str:
        return self._display_names.get(model_id, model_id)


DEFAULT_CATALOG = ProviderCatalog(
    (
        Provider(
            id="openai",
            name="OpenAI",
            models=("GPT-4o", "GPT-4o-mini", "GPT-4-turbo"),
            key_url="https://platform.openai.com/api-keys",
        ),
        Provider(
            id="google",
            name="Google",
            models=(
                "gemini-2.0-flash",
                "gemini-2.5-pro-preview-03-25",
                "gemini-2.0-flash-thinking-exp-01-21",
                "gemma-3-27b-it",
            ),
            key_url="https://aistudio.google.com/app/apikey",
        ),
        Provider(
            id="groq",
            name="Groq",
            models=("LLama-3-8B", "LLama-3-70B", "Mixtral-8x7B"),
            key_url="https://console.groq.com/keys",
        ),
        Provider(
            id="openrouter",
            name="OpenRouter",
            models=(
                "openrouter/optimus-alpha",
                "meta-llama/llama-4-maverick:free",
                "deepseek/deepseek-chat-v3-0324:free",
            ),
            key_url="https://openrouter.ai/settings/keys",
        ),
    ),
    {
        "GPT-4o": "GPT-4o",
        "GPT-4o-mini": "GPT-4o Mini",
        "GPT-4-turbo": "GPT-4 Turbo",
        "gemini-2.5-pro-preview-03-25": "Gemini 2.5 Pro Preview",
        "gemini-2.0-flash": "Gemini 2.0 Flash",
        "gemini-2.0-flash-thinking-exp-01-21": "Gemini 2.0 Flash Thinking",
        "gemma-3-27b-it": "Gemma 3 (27B)",
        "LLama-3-8B": "Llama 3 (8B)",
        "LLama-3-70B": "Llama 3 (70B)",
        "Mixtral-8x7B": "Mixtral 8x7B",
        "openrouter/optimus-alpha": "Optimus Alpha",
        "meta-llama/llama-4-maverick:free": "Llama 4 Maverick",
        "deepseek/deepseek-chat-v3-0324:free": "DeepSeek Chat v3",
    },
)


__all__ = ["DEFAULT_CATALOG", "Provider", "ProviderCatalog"]
