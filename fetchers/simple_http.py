"""
Simple HTTP strategy. One GET, regex extraction, no JavaScript.

Lower fidelity than the browser (no paragraphs) but gets through a lot of
bot-blocking that trips headless Chromium.
"""

import logging

import requests

from fetchers.base import BROWSER_HEADERS, FetchError, FetchStrategy, random_user_agent
from fetchers.normalize import normalize_html
from models import FetchMethod, PageContent

log = logging.getLogger(__name__)


class SimpleHTTPFetcher(FetchStrategy):
    def __init__(self, timeout: float = 15.0, session: requests.Session | None = None):
        self._timeout = timeout
        self._session = session or requests.Session()

    @property
    def method(self) -> FetchMethod:
        return FetchMethod.SIMPLE_HTTP

    def fetch(self, url: str) -> PageContent:
        headers = dict(BROWSER_HEADERS)
        headers["User-Agent"] = random_user_agent()

        try:
            resp = self._session.get(url, headers=headers, timeout=self._timeout)
        except requests.RequestException as e:
            raise FetchError(f"HTTP request failed for {url}: {e}") from e

        if not 200 <= resp.status_code < 300:
            raise FetchError(f"HTTP {resp.status_code}: {resp.reason} for {url}")

        content = normalize_html(resp.text, url)
        log.debug(f"Fetched {url} over HTTP: {len(content.headlines)} headlines")
        return content
