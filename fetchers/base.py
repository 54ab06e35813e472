"""
Fetch strategy interface. Every page fetch goes through one of these.
"""

import random
from abc import ABC, abstractmethod

from models import FetchMethod, PageContent


USER_AGENTS = [
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.1 Safari/605.1.15",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:109.0) Gecko/20100101 Firefox/121.0",
]

BROWSER_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Accept-Encoding": "gzip, deflate",
    "DNT": "1",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
}


def random_user_agent() -> str:
    return random.choice(USER_AGENTS)


class FetchError(Exception):
    """A single fetch attempt failed. Transient."""
    pass


class AllFetchStrategiesExhausted(Exception):
    """Every strategy failed for a URL. The item is skipped for this run."""

    def __init__(self, url: str, errors: list[Exception]):
        self.url = url
        self.errors = errors
        detail = "; ".join(str(e) for e in errors) or "no strategies configured"
        super().__init__(f"All fetch strategies failed for {url}: {detail}")


class FetchStrategy(ABC):
    """
    Contract:
    - fetch() returns canonical PageContent or raises FetchError.
    - Each call owns whatever external resource it needs and releases it
      before returning, on every path.
    - No retries inside fetch(). Retry policy is applied by the caller.
    """

    @property
    @abstractmethod
    def method(self) -> FetchMethod:
        ...

    @abstractmethod
    def fetch(self, url: str) -> PageContent:
        ...

    def name(self) -> str:
        return self.method.value
