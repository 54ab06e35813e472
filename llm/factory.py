"""
Provider factory. Reads config once, returns the enabled providers in
priority order: paid and most capable first, free alternatives after.
"""

import logging

from config.settings import Config
from llm.provider import LLMProvider, LLMError

log = logging.getLogger(__name__)


def create_providers(config: Config) -> list[LLMProvider]:
    """Build every provider whose credential is present. Missing ones are skipped."""
    from llm.claude_provider import ClaudeProvider
    from llm.gemini_provider import GeminiProvider
    from llm.huggingface_provider import HuggingFaceProvider
    from llm.ollama_provider import OllamaProvider
    from llm.openai_provider import OpenAIProvider
    from llm.openrouter_provider import OpenRouterProvider

    timeout = config.provider_timeout
    candidates = [
        ("openai", config.openai_api_key,
         lambda: OpenAIProvider(config.openai_api_key, config.openai_model, timeout)),
        ("claude", config.anthropic_api_key,
         lambda: ClaudeProvider(config.anthropic_api_key, config.anthropic_model, timeout)),
        ("openrouter", config.openrouter_api_key,
         lambda: OpenRouterProvider(config.openrouter_api_key, config.openrouter_model, timeout)),
        ("ollama", config.ollama_host,
         lambda: OllamaProvider(config.ollama_host, config.ollama_model, timeout)),
        ("gemini", config.google_api_key,
         lambda: GeminiProvider(config.google_api_key, config.gemini_model, timeout)),
        ("huggingface", config.huggingface_api_key,
         lambda: HuggingFaceProvider(config.huggingface_api_key, config.huggingface_model, timeout)),
    ]

    providers: list[LLMProvider] = []
    for name, credential, build in candidates:
        if not credential:
            log.debug(f"Provider {name} disabled (no credential)")
            continue
        try:
            providers.append(build())
        except LLMError as e:
            log.warning(f"Provider {name} unavailable: {e}")

    log.info(f"Analysis providers: {[p.name() for p in providers] or 'none (rule-based only)'}")
    return providers
