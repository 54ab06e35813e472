"""
RSS digest. For each competitor feed: pull recent articles, skip the ones
already summarized, analyze the rest.

Strictly sequential with a pause after each analysis. A broken feed or a
failed write costs one item, never the run.
"""

import logging
import time
from typing import Callable

from analysis.orchestrator import AnalysisOrchestrator
from collectors.rss import fetch_latest_articles
from models import Article, Competitor, SourceType, Summary
from storage.db import PersistenceError, Storage

log = logging.getLogger(__name__)


class RSSDigest:
    def __init__(
        self,
        orchestrator: AnalysisOrchestrator,
        storage: Storage,
        max_articles: int = 5,
        delay: float = 1.0,
        fetch_articles: Callable[[str, int], list[Article]] = fetch_latest_articles,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._orchestrator = orchestrator
        self._storage = storage
        self._max_articles = max_articles
        self._delay = delay
        self._fetch_articles = fetch_articles
        self._sleep = sleep

    def run(self, competitors: list[Competitor]) -> list[Summary]:
        log.info(f"Digest: {len(competitors)} competitors")
        summaries: list[Summary] = []
        for competitor in competitors:
            log.info(f"Processing competitor: {competitor.name}")
            summaries.extend(self.process_competitor(competitor))
        return summaries

    def process_competitor(self, competitor: Competitor) -> list[Summary]:
        if not competitor.rss:
            log.info(f"No RSS feeds configured for {competitor.name}")
            return []

        summaries: list[Summary] = []
        for feed_url in competitor.rss:
            try:
                articles = self._fetch_articles(feed_url, self._max_articles)
            except Exception as e:
                log.error(f"Failed to process RSS feed {feed_url}: {e}")
                continue

            for article in articles:
                summary = self._process_article(competitor, article)
                if summary:
                    summaries.append(summary)

        return summaries

    def _process_article(self, competitor: Competitor, article: Article) -> Summary | None:
        try:
            if article.link and self._storage.has_summary_source(article.link):
                log.info(f"Skipping already summarized: {article.title}")
                return None

            log.info(f"Analyzing: {article.title}")
            text = self._orchestrator.summarize(article.content, competitor.name)

            summary = Summary(
                competitor_id=competitor.id,
                competitor_name=competitor.name,
                title=article.title,
                summary=text,
                source=article.link,
                pub_date=article.pub_date,
                source_type=SourceType.RSS,
            )
            self._storage.insert_summary(summary)
        except PersistenceError as e:
            log.error(f"Storage failed for {article.link}: {e}")
            return None

        log.info(f"Summarized: {article.title}")
        self._sleep(self._delay)
        return summary
