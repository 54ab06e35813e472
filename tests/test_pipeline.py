"""
Tests for the per-competitor runs and their collaborators:
- RSS digest (dedup by link, failing feeds)
- website watch (change analysis, dedup by change hash, fetch failures)
- summary storage and JSON export
- competitor config loading
- RSS collector parsing
"""

import json
import sys
import tempfile
from pathlib import Path

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from analysis import AnalysisOrchestrator
from collectors.rss import fetch_latest_articles
from config.settings import load_competitors
from delivery.output import export_json
from fetchers import AllFetchStrategiesExhausted, FetchError
from models import Article, ChangeType, Competitor, FetchMethod, PageContent, SourceType, Summary
from monitor.detector import INITIAL_CHANGE
from monitor.website import WebsiteMonitor
from pipeline import RSSDigest, WebsiteWatch
from pipeline.websites import change_hash
from storage.db import PersistenceError, Storage


# ──────────────────────────────────────────────
# Fixtures
# ──────────────────────────────────────────────

@pytest.fixture
def tmp_storage():
    with tempfile.TemporaryDirectory() as tmpdir:
        storage = Storage(Path(tmpdir) / "test.db")
        yield storage
        storage.close()


def _competitor(**overrides) -> Competitor:
    base = {
        "id": "acme",
        "name": "Acme",
        "rss": ["https://acme.example.com/feed"],
        "websites": ["https://acme.example.com/"],
    }
    base.update(overrides)
    return Competitor(**base)


def _articles() -> list[Article]:
    return [
        Article(
            title="Acme raises Series B",
            link="https://acme.example.com/blog/series-b",
            pub_date="Mon, 06 Jan 2025 10:00:00 GMT",
            content="Acme closed a funding round to expand into Europe.",
        ),
        Article(
            title="Acme is hiring",
            link="https://acme.example.com/blog/hiring",
            pub_date="Tue, 07 Jan 2025 10:00:00 GMT",
            content="Acme is hiring twenty engineers.",
        ),
    ]


def _page(**overrides) -> PageContent:
    base = {
        "title": "Acme - Home",
        "url": "https://acme.example.com/",
        "headlines": ["Welcome to Acme"],
        "content": "Acme builds widgets.",
        "paragraphs": [],
    }
    base.update(overrides)
    return PageContent(**base)


class FakeFetcher:
    """Per-URL queue of outcomes."""

    def __init__(self, outcomes: dict[str, list]):
        self._outcomes = {url: list(items) for url, items in outcomes.items()}
        self.calls: list[str] = []

    def fetch(self, url: str):
        self.calls.append(url)
        outcome = self._outcomes[url].pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome, FetchMethod.SIMPLE_HTTP


# ──────────────────────────────────────────────
# RSS digest
# ──────────────────────────────────────────────

class TestRSSDigest:
    def _digest(self, storage, fetch_articles, sleeps):
        return RSSDigest(
            AnalysisOrchestrator([]),
            storage,
            max_articles=5,
            delay=1.0,
            fetch_articles=fetch_articles,
            sleep=sleeps.append,
        )

    def test_summarizes_new_articles(self, tmp_storage):
        sleeps: list[float] = []
        digest = self._digest(tmp_storage, lambda url, limit: _articles(), sleeps)

        summaries = digest.run([_competitor()])

        assert len(summaries) == 2
        assert summaries[0].source_type == SourceType.RSS
        assert summaries[0].source == "https://acme.example.com/blog/series-b"
        assert "Category: Funding" in summaries[0].summary
        assert sleeps == [1.0, 1.0]
        assert len(tmp_storage.get_summaries()) == 2

    def test_skips_already_summarized_links(self, tmp_storage):
        sleeps: list[float] = []
        digest = self._digest(tmp_storage, lambda url, limit: _articles(), sleeps)
        digest.run([_competitor()])

        assert digest.run([_competitor()]) == []
        assert len(tmp_storage.get_summaries()) == 2

    def test_limit_passed_to_fetcher(self, tmp_storage):
        seen = []

        def fetch(url, limit):
            seen.append((url, limit))
            return []

        self._digest(tmp_storage, fetch, []).run([_competitor()])
        assert seen == [("https://acme.example.com/feed", 5)]

    def test_failing_feed_is_skipped(self, tmp_storage):
        def fetch(url, limit):
            if "broken" in url:
                raise ValueError("not a feed")
            return _articles()[:1]

        competitor = _competitor(rss=["https://broken.example.com/feed", "https://acme.example.com/feed"])
        summaries = self._digest(tmp_storage, fetch, []).run([competitor])
        assert len(summaries) == 1

    def test_no_feeds(self, tmp_storage):
        assert self._digest(tmp_storage, lambda u, n: _articles(), []).run([_competitor(rss=[])]) == []

    def test_failed_dedup_read_costs_one_item(self, tmp_storage):
        seen = []

        def fetch(url, limit):
            seen.append(url)
            return _articles()[:1]

        digest = self._digest(tmp_storage, fetch, [])
        tmp_storage._conn.execute("DROP TABLE summaries")

        summaries = digest.run([
            _competitor(),
            _competitor(id="globex", name="Globex", rss=["https://globex.example.com/feed"]),
        ])

        assert summaries == []
        assert seen == ["https://acme.example.com/feed", "https://globex.example.com/feed"]


# ──────────────────────────────────────────────
# Website watch
# ──────────────────────────────────────────────

class TestWebsiteWatch:
    URL = "https://acme.example.com/"

    def _watch(self, storage, fetcher, sleeps, max_websites=3):
        return WebsiteWatch(
            WebsiteMonitor(fetcher, storage),
            AnalysisOrchestrator([]),
            storage,
            max_websites=max_websites,
            delay=2.0,
            sleep=sleeps.append,
        )

    def test_first_run_reports_new(self, tmp_storage):
        sleeps: list[float] = []
        watch = self._watch(tmp_storage, FakeFetcher({self.URL: [_page()]}), sleeps)

        summaries = watch.run([_competitor()])

        assert len(summaries) == 1
        summary = summaries[0]
        assert summary.source_type == SourceType.WEBSITE
        assert summary.change_type == ChangeType.NEW
        assert summary.changes == [INITIAL_CHANGE]
        assert summary.title == "Website Update: Acme - Home"
        assert summary.change_hash and len(summary.change_hash) == 32
        assert sleeps == [2.0]
        assert tmp_storage.count_snapshots() == 1

    def test_unchanged_page_produces_nothing(self, tmp_storage):
        fetcher = FakeFetcher({self.URL: [_page(), _page()]})
        watch = self._watch(tmp_storage, fetcher, [])
        watch.run([_competitor()])

        assert watch.run([_competitor()]) == []
        assert tmp_storage.count_snapshots() == 1
        assert len(tmp_storage.get_summaries()) == 1

    def test_changed_page(self, tmp_storage):
        fetcher = FakeFetcher({self.URL: [_page(), _page(title="Acme - Pricing")]})
        watch = self._watch(tmp_storage, fetcher, [])
        watch.run([_competitor()])

        summaries = watch.run([_competitor()])
        assert summaries[0].change_type == ChangeType.CHANGED
        assert summaries[0].changes[0] == 'Title changed: "Acme - Home" → "Acme - Pricing"'

    def test_empty_title_falls_back(self, tmp_storage):
        watch = self._watch(tmp_storage, FakeFetcher({self.URL: [_page(title="")]}), [])
        assert watch.run([_competitor()])[0].title == "Website Update: Homepage Changes"

    def test_fetch_failure_skips_to_next_url(self, tmp_storage):
        other = "https://acme.example.com/pricing"
        fetcher = FakeFetcher({
            self.URL: [AllFetchStrategiesExhausted(self.URL, [FetchError("blocked")])],
            other: [_page(url=other)],
        })
        watch = self._watch(tmp_storage, fetcher, [])

        summaries = watch.run([_competitor(websites=[self.URL, other])])

        assert [s.source for s in summaries] == [other]
        assert tmp_storage.get_last_snapshot("acme", self.URL) is None

    def test_max_websites(self, tmp_storage):
        urls = [f"https://acme.example.com/{i}" for i in range(5)]
        fetcher = FakeFetcher({u: [_page(url=u)] for u in urls})
        self._watch(tmp_storage, fetcher, [], max_websites=2).run([_competitor(websites=urls)])
        assert fetcher.calls == urls[:2]

    def test_analysis_input_and_hash(self, tmp_storage):
        watch = self._watch(tmp_storage, FakeFetcher({self.URL: [_page()]}), [])
        summary = watch.run([_competitor()])[0]

        report_input = (
            f"\nWebsite: {self.URL}\n"
            f"Changes detected: {INITIAL_CHANGE}\n"
            "Current content: Acme builds widgets.\n"
            "Headlines: Welcome to Acme\n"
        )
        assert summary.change_hash == change_hash(report_input)
        assert tmp_storage.has_change_hash(summary.change_hash)

    def test_failed_dedup_read_costs_one_url(self, tmp_storage):
        other = "https://globex.example.com/"
        fetcher = FakeFetcher({self.URL: [_page()], other: [_page(url=other)]})
        watch = self._watch(tmp_storage, fetcher, [])
        tmp_storage._conn.execute("DROP TABLE summaries")

        summaries = watch.run([
            _competitor(),
            _competitor(id="globex", name="Globex", websites=[other]),
        ])

        assert summaries == []
        assert fetcher.calls == [self.URL, other]
        assert tmp_storage.get_last_snapshot("globex", other) is not None


# ──────────────────────────────────────────────
# Summary storage and export
# ──────────────────────────────────────────────

class TestSummaryStore:
    def _summary(self, **overrides) -> Summary:
        base = {
            "competitor_id": "acme",
            "competitor_name": "Acme",
            "title": "Website Update: Acme",
            "summary": "Summary: x\nCategory: Product\nImpact: Low\nAction: y",
            "source": "https://acme.example.com/",
            "pub_date": "2025-01-06T10:00:00+00:00",
            "source_type": SourceType.WEBSITE,
            "change_type": ChangeType.NEW,
            "changes": [INITIAL_CHANGE],
            "change_hash": "abc123",
        }
        base.update(overrides)
        return Summary(**base)

    def test_roundtrip(self, tmp_storage):
        tmp_storage.insert_summary(self._summary())
        loaded = tmp_storage.get_summaries()[0]
        assert loaded.change_type == ChangeType.NEW
        assert loaded.changes == [INITIAL_CHANGE]
        assert loaded.source_type == SourceType.WEBSITE

    def test_rss_dedup_only_looks_at_rss(self, tmp_storage):
        tmp_storage.insert_summary(self._summary())
        assert not tmp_storage.has_summary_source("https://acme.example.com/")
        tmp_storage.insert_summary(self._summary(
            source="https://acme.example.com/blog/1",
            source_type=SourceType.RSS,
            change_type=None,
            changes=None,
            change_hash=None,
        ))
        assert tmp_storage.has_summary_source("https://acme.example.com/blog/1")

    def test_stats(self, tmp_storage):
        tmp_storage.insert_summary(self._summary())
        stats = tmp_storage.get_stats()
        assert stats["total_summaries"] == 1
        assert stats["by_source_type"] == {"website": 1}
        assert stats["by_competitor"] == {"acme": 1}

    def test_record_shape(self):
        record = self._summary().to_dict()
        assert record["competitorId"] == "acme"
        assert record["sourceType"] == "website"
        assert record["changeType"] == "new"
        assert record["changeHash"] == "abc123"

    def test_rss_record_omits_change_fields(self):
        record = self._summary(
            source_type=SourceType.RSS, change_type=None, changes=None, change_hash=None
        ).to_dict()
        assert "changeType" not in record
        assert "changes" not in record
        assert "changeHash" not in record

    def test_export_json(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            out = Path(tmpdir) / "out" / "summaries.json"
            export_json([self._summary()], out)
            data = json.loads(out.read_text(encoding="utf-8"))
        assert data[0]["competitorName"] == "Acme"

    def test_read_failures_raise_persistence_error(self, tmp_storage):
        tmp_storage._conn.execute("DROP TABLE summaries")
        with pytest.raises(PersistenceError):
            tmp_storage.has_summary_source("https://acme.example.com/blog/1")
        with pytest.raises(PersistenceError):
            tmp_storage.has_change_hash("abc123")
        with pytest.raises(PersistenceError):
            tmp_storage.get_summaries()
        with pytest.raises(PersistenceError):
            tmp_storage.get_stats()

    def test_snapshot_read_failures_raise_persistence_error(self, tmp_storage):
        tmp_storage._conn.execute("DROP TABLE latest_snapshots")
        tmp_storage._conn.execute("DROP TABLE snapshots")
        with pytest.raises(PersistenceError):
            tmp_storage.get_snapshot_history("acme", "https://acme.example.com/")
        with pytest.raises(PersistenceError):
            tmp_storage.count_snapshots()


# ──────────────────────────────────────────────
# Config loading
# ──────────────────────────────────────────────

class TestLoadCompetitors:
    def test_valid_file(self):
        payload = {
            "competitors": [
                {
                    "id": "globex",
                    "name": "Globex",
                    "sources": {"rss": ["https://globex.example.com/rss"], "websites": []},
                }
            ],
            "monitoring": {"maxArticlesPerSource": 2, "maxWebsitesPerCompetitor": 1},
        }
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "competitors.json"
            path.write_text(json.dumps(payload), encoding="utf-8")
            cfg = load_competitors(path)

        assert cfg.competitors[0].id == "globex"
        assert cfg.competitors[0].rss == ["https://globex.example.com/rss"]
        assert cfg.max_articles_per_source == 2
        assert cfg.max_websites_per_competitor == 1

    def test_missing_sources_and_limits(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "competitors.json"
            path.write_text(json.dumps({"competitors": [{"id": "initech"}]}), encoding="utf-8")
            cfg = load_competitors(path)

        assert cfg.competitors[0].name == "initech"
        assert cfg.competitors[0].websites == []
        assert cfg.max_articles_per_source == 5
        assert cfg.max_websites_per_competitor == 3

    def test_missing_file_uses_default(self):
        cfg = load_competitors(Path("/nonexistent/competitors.json"))
        assert len(cfg.competitors) == 1

    def test_bad_json_uses_default(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "competitors.json"
            path.write_text("{not json", encoding="utf-8")
            cfg = load_competitors(path)
        assert len(cfg.competitors) == 1


# ──────────────────────────────────────────────
# RSS collector
# ──────────────────────────────────────────────

SAMPLE_FEED = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Acme Blog</title>
    <link>https://acme.example.com/blog</link>
    <description>News</description>
    <item>
      <title>First post</title>
      <link>https://acme.example.com/blog/1</link>
      <pubDate>Mon, 06 Jan 2025 10:00:00 GMT</pubDate>
      <description>&lt;p&gt;Acme &lt;b&gt;launches&lt;/b&gt; a thing.&lt;/p&gt;</description>
    </item>
    <item>
      <title>Second post</title>
      <link>https://acme.example.com/blog/2</link>
      <pubDate>Tue, 07 Jan 2025 10:00:00 GMT</pubDate>
      <description>More news.</description>
    </item>
    <item>
      <title>Third post</title>
      <link>https://acme.example.com/blog/3</link>
      <description>Even more.</description>
    </item>
  </channel>
</rss>
"""


class _FeedResponse:
    status_code = 200
    content = SAMPLE_FEED

    def raise_for_status(self):
        pass


class _FeedSession:
    def get(self, url, headers=None, timeout=None):
        return _FeedResponse()


class TestFetchLatestArticles:
    def test_parses_and_limits(self):
        articles = fetch_latest_articles("https://acme.example.com/feed", limit=2, session=_FeedSession())
        assert [a.title for a in articles] == ["First post", "Second post"]
        assert articles[0].link == "https://acme.example.com/blog/1"
        assert articles[0].pub_date == "Mon, 06 Jan 2025 10:00:00 GMT"

    def test_strips_markup(self):
        articles = fetch_latest_articles("https://acme.example.com/feed", limit=1, session=_FeedSession())
        assert articles[0].content == "Acme launches a thing."

    def test_missing_pub_date(self):
        articles = fetch_latest_articles("https://acme.example.com/feed", limit=3, session=_FeedSession())
        assert articles[2].pub_date == ""
