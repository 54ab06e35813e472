"""
Analysis orchestrator. Walks the provider list in priority order and falls
back to the rule-based analyzer when nothing answers.

Provider output is returned verbatim. Only the rule-based path guarantees
the four labelled fields.
"""

import logging

from analysis.rules import RuleBasedAnalyzer
from llm.provider import LLMError, LLMProvider

log = logging.getLogger(__name__)


class AnalysisOrchestrator:
    def __init__(self, providers: list[LLMProvider], fallback: RuleBasedAnalyzer | None = None):
        self._providers = list(providers)
        self._fallback = fallback or RuleBasedAnalyzer()
        self.last_provider: str | None = None

    @property
    def providers(self) -> list[LLMProvider]:
        return list(self._providers)

    def summarize(self, content: str, competitor_name: str = "competitor") -> str:
        """Never raises. Worst case is the rule-based analysis."""
        for provider in self._providers:
            log.info(f"Using {provider.name()} for analysis")
            try:
                text = provider.attempt_analysis(content, competitor_name)
            except LLMError as e:
                log.warning(f"{provider.name()} failed, trying next provider: {e}")
                continue
            except Exception as e:
                log.warning(f"{provider.name()} raised unexpectedly, trying next provider: {e!r}")
                continue
            self.last_provider = provider.name()
            return text

        if self._providers:
            log.warning("All analysis providers failed, using rule-based analysis")
        else:
            log.info("No analysis providers configured, using rule-based analysis")
        self.last_provider = self._fallback.name()
        return self._fallback.summarize(content, competitor_name)
