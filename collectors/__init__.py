from collectors.rss import fetch_latest_articles

__all__ = ["fetch_latest_articles"]
