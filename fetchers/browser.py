"""
Render strategy. Headless Chromium via Playwright's sync API.

One browser per call. The browser and its context are torn down before
fetch() returns or raises, so a retry always starts from a clean session.
Page scripts never run. Images, media, fonts and external scripts are not
even requested. The extraction script still runs through page.evaluate.
"""

import logging
from contextlib import contextmanager

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from fetchers.base import BROWSER_HEADERS, FetchError, FetchStrategy, random_user_agent
from fetchers.normalize import normalize_extracted
from models import FetchMethod, PageContent

log = logging.getLogger(__name__)

LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-blink-features=AutomationControlled",
    "--disable-features=VizDisplayCompositor",
    "--disable-extensions",
    "--disable-plugins",
]

BLOCKED_RESOURCES = {"image", "media", "font", "script"}

# Runs inside the page. Mirrors the canonical bounds in fetchers.normalize.
EXTRACT_SCRIPT = """
() => {
  document
    .querySelectorAll("script, style, nav, footer, aside, .cookie-banner, .popup")
    .forEach((el) => el.remove());

  const main = document.querySelector(
    "main, .main, #main, .content, #content, article, .article"
  );
  const headlines = Array.from(document.querySelectorAll("h1, h2, h3"))
    .map((h) => h.textContent.trim())
    .filter((h) => h.length > 0);
  const paragraphs = Array.from(document.querySelectorAll("p"))
    .slice(0, 10)
    .map((p) => p.textContent.trim())
    .filter((p) => p.length > 20);

  return {
    title: document.title,
    url: window.location.href,
    headlines: headlines,
    content: main ? main.textContent.trim().slice(0, 2000) : "",
    paragraphs: paragraphs,
  };
}
"""


def _block_heavy_resources(route):
    if route.request.resource_type in BLOCKED_RESOURCES:
        route.abort()
    else:
        route.continue_()


class BrowserFetcher(FetchStrategy):
    def __init__(self, timeout: float = 20.0, settle: float = 2.0):
        self._timeout_ms = int(timeout * 1000)
        self._settle_ms = int(settle * 1000)

    @property
    def method(self) -> FetchMethod:
        return FetchMethod.BROWSER

    @contextmanager
    def _session(self):
        """Yield a fresh page. Context and browser are always closed."""
        with sync_playwright() as pw:
            browser = pw.chromium.launch(headless=True, args=LAUNCH_ARGS)
            try:
                context = browser.new_context(
                    user_agent=random_user_agent(),
                    java_script_enabled=False,
                    viewport={"width": 1280, "height": 800},
                    extra_http_headers=BROWSER_HEADERS,
                )
                try:
                    page = context.new_page()
                    page.route("**/*", _block_heavy_resources)
                    yield page
                finally:
                    context.close()
            finally:
                browser.close()

    def fetch(self, url: str) -> PageContent:
        try:
            with self._session() as page:
                page.goto(url, wait_until="domcontentloaded", timeout=self._timeout_ms)
                # Give late DOM updates a moment
                page.wait_for_timeout(self._settle_ms)
                raw = page.evaluate(EXTRACT_SCRIPT)
        except PlaywrightError as e:
            raise FetchError(f"Browser fetch failed for {url}: {e}") from e

        log.debug(f"Rendered {url}: {len(raw.get('headlines') or [])} headlines")
        return normalize_extracted(raw, url)
