"""
Website monitor. Fetch, compare with the last snapshot, persist on change.

A snapshot is written on first observation and on every detected change,
never on a confirmed no-change.
"""

import logging

from fetchers import PageFetcher
from models import ChangeReport, Snapshot
from monitor.detector import detect_changes
from storage.db import Storage

log = logging.getLogger(__name__)


class WebsiteMonitor:
    def __init__(self, fetcher: PageFetcher, storage: Storage):
        self._fetcher = fetcher
        self._storage = storage

    def check(self, competitor_id: str, url: str) -> ChangeReport | None:
        """
        Returns a ChangeReport, or None if the page is unchanged.

        Raises:
            AllFetchStrategiesExhausted: the page couldn't be fetched at all.
            PersistenceError: the snapshot store failed.
        """
        content, method = self._fetcher.fetch(url)
        current = Snapshot.capture(url, competitor_id, content, method)

        previous = self._storage.get_last_snapshot(competitor_id, url)
        report = detect_changes(previous, current)

        if report is None:
            log.info(f"No changes on {url}")
            return None

        self._storage.save_snapshot(current)
        log.info(f"{report.kind.value} snapshot stored for {url} ({current.method.value})")
        return report
