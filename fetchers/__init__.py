"""
Page fetching. Strategies are tried in order, each under its own retry policy.

Default chain: browser render (3 attempts, exponential backoff), then one
simple HTTP attempt.
"""

import logging

from config.settings import Config
from fetchers.base import AllFetchStrategiesExhausted, FetchError, FetchStrategy
from fetchers.retry import RetryExhausted, RetryPolicy
from models import FetchMethod, PageContent

log = logging.getLogger(__name__)


class PageFetcher:
    def __init__(self, strategies: list[tuple[FetchStrategy, RetryPolicy]]):
        self._strategies = strategies

    def fetch(self, url: str) -> tuple[PageContent, FetchMethod]:
        """
        Returns the content and the strategy that produced it.

        Raises:
            AllFetchStrategiesExhausted: every strategy failed.
        """
        errors: list[Exception] = []

        for strategy, policy in self._strategies:
            log.info(f"Fetching {url} via {strategy.name()}")
            try:
                content = policy.call(strategy.fetch, url, describe=f"{strategy.name()} {url}")
                return content, strategy.method
            except RetryExhausted as e:
                log.warning(f"{strategy.name()} gave up on {url}: {e.last_error}")
                errors.append(e)

        raise AllFetchStrategiesExhausted(url, errors)


def create_fetcher(config: Config) -> PageFetcher:
    from fetchers.browser import BrowserFetcher
    from fetchers.simple_http import SimpleHTTPFetcher

    return PageFetcher([
        (
            BrowserFetcher(timeout=config.browser_timeout, settle=config.browser_settle),
            RetryPolicy(max_attempts=config.fetch_max_attempts, base_delay=config.fetch_retry_delay),
        ),
        (
            SimpleHTTPFetcher(timeout=config.http_timeout),
            RetryPolicy(max_attempts=1),
        ),
    ])


__all__ = [
    "AllFetchStrategiesExhausted",
    "FetchError",
    "FetchStrategy",
    "PageFetcher",
    "RetryExhausted",
    "RetryPolicy",
    "create_fetcher",
]
