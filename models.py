"""
Core data types. No behavior beyond serialization, just shapes.
"""

import hashlib
import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class FetchMethod(Enum):
    BROWSER = "browser"
    SIMPLE_HTTP = "simple_http"


class ChangeType(Enum):
    NEW = "new"
    CHANGED = "changed"


class SourceType(Enum):
    RSS = "rss"
    WEBSITE = "website"


class Category(Enum):
    PRODUCT = "Product"
    MARKETING = "Marketing"
    HIRING = "Hiring"
    FUNDING = "Funding"
    PARTNERSHIP = "Partnership"
    PRICING = "Pricing"
    LEADERSHIP = "Leadership"
    CUSTOMER = "Customer"


class Impact(Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


@dataclass(frozen=True)
class PageContent:
    """Canonical page structure. Same shape whichever strategy fetched it."""
    title: str
    url: str
    headlines: list[str] = field(default_factory=list)
    content: str = ""       # excerpt of the primary content region
    paragraphs: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        # Key order is part of the hash input. Do not reorder.
        return {
            "title": self.title,
            "url": self.url,
            "headlines": list(self.headlines),
            "content": self.content,
            "paragraphs": list(self.paragraphs),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PageContent":
        return cls(
            title=data.get("title", ""),
            url=data.get("url", ""),
            headlines=list(data.get("headlines", [])),
            content=data.get("content", ""),
            paragraphs=list(data.get("paragraphs", [])),
        )

    @property
    def content_hash(self) -> str:
        """Deterministic fingerprint for change detection. Not a security hash."""
        raw = json.dumps(self.to_dict(), ensure_ascii=False, separators=(",", ":"))
        return hashlib.md5(raw.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class Snapshot:
    """One immutable observation of a URL."""
    url: str
    competitor_id: str
    content: PageContent
    hash: str
    method: FetchMethod
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def capture(
        cls,
        url: str,
        competitor_id: str,
        content: PageContent,
        method: FetchMethod,
    ) -> "Snapshot":
        """Build a snapshot, hashing the finished content exactly once."""
        return cls(
            url=url,
            competitor_id=competitor_id,
            content=content,
            hash=content.content_hash,
            method=method,
        )

    def to_record(self) -> dict:
        return {
            "url": self.url,
            "competitorId": self.competitor_id,
            "timestamp": self.timestamp.isoformat(),
            "content": self.content.to_dict(),
            "hash": self.hash,
            "method": self.method.value,
        }

    @classmethod
    def from_record(cls, record: dict) -> "Snapshot":
        return cls(
            url=record["url"],
            competitor_id=record["competitorId"],
            content=PageContent.from_dict(record["content"]),
            hash=record["hash"],
            method=FetchMethod(record.get("method") or FetchMethod.BROWSER.value),
            timestamp=datetime.fromisoformat(record["timestamp"]),
        )


@dataclass
class ChangeReport:
    """Differences between the previous and current snapshot of a URL."""
    kind: ChangeType
    changes: list[str]
    snapshot: Snapshot
    previous: Snapshot | None = None


@dataclass
class AnalysisResult:
    summary: str
    category: Category
    impact: Impact
    action: str

    def to_text(self) -> str:
        return (
            f"Summary: {self.summary}\n"
            f"Category: {self.category.value}\n"
            f"Impact: {self.impact.value}\n"
            f"Action: {self.action}"
        )


@dataclass
class Article:
    """A feed entry as returned by the RSS collector."""
    title: str
    link: str
    pub_date: str
    content: str


@dataclass
class Competitor:
    id: str
    name: str
    rss: list[str] = field(default_factory=list)
    websites: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "Competitor":
        sources = data.get("sources") or {}
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            rss=list(sources.get("rss") or []),
            websites=list(sources.get("websites") or []),
        )


@dataclass
class Summary:
    """One analyzed item. Stored append-only."""
    competitor_id: str
    competitor_name: str
    title: str
    summary: str            # provider free text or rule-based output
    source: str             # article link or website URL
    pub_date: str
    source_type: SourceType
    date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    change_type: ChangeType | None = None
    changes: list[str] | None = None
    change_hash: str | None = None

    def to_dict(self) -> dict:
        record = {
            "competitorId": self.competitor_id,
            "competitorName": self.competitor_name,
            "title": self.title,
            "summary": self.summary,
            "source": self.source,
            "pubDate": self.pub_date,
            "date": self.date.isoformat(),
            "sourceType": self.source_type.value,
        }
        if self.change_type is not None:
            record["changeType"] = self.change_type.value
        if self.changes is not None:
            record["changes"] = list(self.changes)
        if self.change_hash is not None:
            record["changeHash"] = self.change_hash
        return record

    def __repr__(self) -> str:
        return f"Summary({self.source_type.value}, {self.competitor_id}, {self.title[:50]})"
