"""
Reduce raw page data to canonical PageContent.

Two inputs: raw HTML (simple HTTP strategy, regex extraction) and the dict
produced by the in-browser extraction script. Both end up with the same
bounds so the hash doesn't depend on which strategy ran.
"""

import html
import re

from models import PageContent

MAX_EXCERPT_CHARS = 2000
MAX_HEADLINES_HTTP = 10
MAX_PARAGRAPHS = 10
MIN_PARAGRAPH_CHARS = 20
NO_TITLE = "No title found"

_TITLE_RE = re.compile(r"<title[^>]*>([^<]+)</title>", re.IGNORECASE)
_HEADING_RE = re.compile(r"<h[1-6][^>]*>([^<]+)</h[1-6]>", re.IGNORECASE)
_SCRIPT_RE = re.compile(r"<script[^>]*>[\s\S]*?</script>", re.IGNORECASE)
_STYLE_RE = re.compile(r"<style[^>]*>[\s\S]*?</style>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")
_WS_RE = re.compile(r"\s+")


def _collapse(text: str) -> str:
    return _WS_RE.sub(" ", text).strip()


def _clean(text: str) -> str:
    """Display text (title, headlines): entities decoded."""
    return _collapse(html.unescape(text))


def normalize_html(markup: str, url: str) -> PageContent:
    """Pattern-match title/headings out of markup. No paragraphs in this mode."""
    title_match = _TITLE_RE.search(markup)
    title = _clean(title_match.group(1)) if title_match else NO_TITLE

    headlines = []
    for match in _HEADING_RE.finditer(markup):
        text = _clean(_TAG_RE.sub("", match.group(1)))
        if text:
            headlines.append(text)
        if len(headlines) >= MAX_HEADLINES_HTTP:
            break

    text = _SCRIPT_RE.sub("", markup)
    text = _STYLE_RE.sub("", text)
    text = _TAG_RE.sub(" ", text)
    # Excerpt keeps entities as served
    text = _collapse(text)[:MAX_EXCERPT_CHARS]

    return PageContent(
        title=title or NO_TITLE,
        url=url,
        headlines=headlines,
        content=text,
        paragraphs=[],
    )


def normalize_extracted(raw: dict, url: str) -> PageContent:
    """Re-apply canonical bounds to what the browser extraction returned."""
    headlines = [h.strip() for h in raw.get("headlines") or [] if h and h.strip()]
    paragraphs = [p.strip() for p in (raw.get("paragraphs") or [])[:MAX_PARAGRAPHS] if p]
    paragraphs = [p for p in paragraphs if len(p) > MIN_PARAGRAPH_CHARS]

    return PageContent(
        title=(raw.get("title") or "").strip(),
        url=raw.get("url") or url,
        headlines=headlines,
        content=(raw.get("content") or "").strip()[:MAX_EXCERPT_CHARS],
        paragraphs=paragraphs,
    )
