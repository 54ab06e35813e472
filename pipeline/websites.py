"""
Website monitoring run. For each competitor site: detect changes, analyze
the ones not seen before.

One URL at a time, with a pause after every analysis so monitored sites
and providers aren't hammered.
"""

import hashlib
import logging
import time
from typing import Callable

from analysis.orchestrator import AnalysisOrchestrator
from fetchers import AllFetchStrategiesExhausted
from models import ChangeReport, Competitor, SourceType, Summary
from monitor.website import WebsiteMonitor
from storage.db import PersistenceError, Storage

log = logging.getLogger(__name__)


def build_analysis_input(url: str, report: ChangeReport) -> str:
    """Text handed to the analysis step. Its digest is the dedup key."""
    content = report.snapshot.content
    return (
        f"\nWebsite: {url}\n"
        f"Changes detected: {'; '.join(report.changes)}\n"
        f"Current content: {content.content}\n"
        f"Headlines: {'; '.join(content.headlines)}\n"
    )


def change_hash(analysis_input: str) -> str:
    return hashlib.md5(analysis_input.encode("utf-8")).hexdigest()


class WebsiteWatch:
    def __init__(
        self,
        monitor: WebsiteMonitor,
        orchestrator: AnalysisOrchestrator,
        storage: Storage,
        max_websites: int = 3,
        delay: float = 2.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._monitor = monitor
        self._orchestrator = orchestrator
        self._storage = storage
        self._max_websites = max_websites
        self._delay = delay
        self._sleep = sleep

    def run(self, competitors: list[Competitor]) -> list[Summary]:
        log.info(f"Monitoring websites for {len(competitors)} competitors")
        summaries: list[Summary] = []
        for competitor in competitors:
            log.info(f"Processing competitor: {competitor.name}")
            summaries.extend(self.process_competitor(competitor))
        return summaries

    def process_competitor(self, competitor: Competitor) -> list[Summary]:
        if not competitor.websites:
            log.info(f"No websites configured for {competitor.name}")
            return []

        summaries: list[Summary] = []
        for url in competitor.websites[:self._max_websites]:
            summary = self._process_url(competitor, url)
            if summary:
                summaries.append(summary)
        return summaries

    def _process_url(self, competitor: Competitor, url: str) -> Summary | None:
        log.info(f"Monitoring website: {url}")
        try:
            report = self._monitor.check(competitor.id, url)
        except AllFetchStrategiesExhausted as e:
            log.error(f"All methods failed for {url}, skipping: {e}")
            return None
        except PersistenceError as e:
            log.error(f"Snapshot store failed for {url}: {e}")
            return None

        if report is None:
            return None

        for change in report.changes:
            log.info(f"  {url}: {change}")

        analysis_input = build_analysis_input(url, report)
        digest = change_hash(analysis_input)

        try:
            if self._storage.has_change_hash(digest):
                log.info(f"Already analyzed this change set for {url}")
                return None

            log.info(f"Analyzing website changes for {competitor.name}")
            text = self._orchestrator.summarize(analysis_input, competitor.name)

            summary = Summary(
                competitor_id=competitor.id,
                competitor_name=competitor.name,
                title=f"Website Update: {report.snapshot.content.title or 'Homepage Changes'}",
                summary=text,
                source=url,
                pub_date=report.snapshot.timestamp.isoformat(),
                source_type=SourceType.WEBSITE,
                change_type=report.kind,
                changes=list(report.changes),
                change_hash=digest,
            )
            self._storage.insert_summary(summary)
        except PersistenceError as e:
            log.error(f"Storage failed for {url}: {e}")
            return None

        log.info(f"Analyzed website changes for {competitor.name}")
        self._sleep(self._delay)
        return summary
