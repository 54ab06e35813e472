"""
RSS/Atom feed reader. Uses feedparser.

Fetch the feed with a bounded request, take the newest N entries, return
plain-text snippets.
"""

import logging
import re

import feedparser
import requests

from models import Article

log = logging.getLogger(__name__)

USER_AGENT = "competitor-intel/0.1"
FEED_TIMEOUT = 15


def _snippet(entry) -> str:
    """Entry summary (or content) with tags stripped."""
    body = ""
    if entry.get("summary"):
        body = entry.summary
    elif entry.get("content"):
        body = entry.content[0].get("value", "")

    # Crude but enough for analysis input
    body = re.sub(r"<[^>]+>", " ", body)
    return re.sub(r"\s+", " ", body).strip()


def fetch_latest_articles(
    feed_url: str,
    limit: int = 5,
    session: requests.Session | None = None,
) -> list[Article]:
    """
    Newest `limit` entries of a feed.

    Raises:
        requests.RequestException: feed couldn't be downloaded.
        ValueError: response isn't a parseable feed.
    """
    session = session or requests.Session()
    resp = session.get(feed_url, headers={"User-Agent": USER_AGENT}, timeout=FEED_TIMEOUT)
    resp.raise_for_status()

    feed = feedparser.parse(resp.content)
    if feed.bozo and not feed.entries:
        raise ValueError(f"Unparseable feed {feed_url}: {feed.get('bozo_exception')}")

    articles = []
    for entry in feed.entries[:limit]:
        articles.append(Article(
            title=entry.get("title", "Untitled"),
            link=entry.get("link", ""),
            pub_date=entry.get("published") or entry.get("updated") or "",
            content=_snippet(entry),
        ))

    log.debug(f"{feed_url}: {len(articles)} articles")
    return articles
