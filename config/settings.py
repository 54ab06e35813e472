"""
Configuration. Runtime settings from env vars, competitors from one JSON file.
No YAML. No TOML parsing.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from models import Competitor

# Auto-load .env file so credentials don't have to be exported by hand
from dotenv import load_dotenv
load_dotenv()

log = logging.getLogger(__name__)


@dataclass
class Config:
    # Provider credentials. Absent value = provider disabled, never an error.
    openai_api_key: str = os.environ.get("OPENAI_API_KEY", "")
    anthropic_api_key: str = os.environ.get("ANTHROPIC_API_KEY", "")
    openrouter_api_key: str = os.environ.get("OPENROUTER_API_KEY", "")
    ollama_host: str = os.environ.get("OLLAMA_HOST", "")
    google_api_key: str = os.environ.get("GOOGLE_API_KEY", "")
    huggingface_api_key: str = os.environ.get("HUGGINGFACE_API_KEY", "")

    # Models
    openai_model: str = os.environ.get("INTEL_OPENAI_MODEL", "gpt-4o-mini")
    anthropic_model: str = os.environ.get("INTEL_ANTHROPIC_MODEL", "claude-3-5-haiku-latest")
    openrouter_model: str = os.environ.get("INTEL_OPENROUTER_MODEL", "meta-llama/llama-3.1-8b-instruct")
    ollama_model: str = os.environ.get("INTEL_OLLAMA_MODEL", "llama3.2:3b")
    gemini_model: str = os.environ.get("INTEL_GEMINI_MODEL", "gemini-1.5-flash")
    huggingface_model: str = os.environ.get("INTEL_HUGGINGFACE_MODEL", "microsoft/DialoGPT-medium")

    # Every provider call is bounded
    provider_timeout: float = float(os.environ.get("INTEL_PROVIDER_TIMEOUT", "30"))

    # Storage and competitor list
    db_path: Path = Path(os.environ.get("INTEL_DB_PATH", "data/intel.db"))
    competitors_path: Path = Path(os.environ.get("INTEL_COMPETITORS_PATH", "config/competitors.json"))

    # Fetching. Render strategy: 3 attempts, 2s * 2^(n-1) backoff.
    browser_timeout: float = float(os.environ.get("INTEL_BROWSER_TIMEOUT", "20"))
    browser_settle: float = float(os.environ.get("INTEL_BROWSER_SETTLE", "2"))
    http_timeout: float = float(os.environ.get("INTEL_HTTP_TIMEOUT", "15"))
    fetch_max_attempts: int = int(os.environ.get("INTEL_FETCH_MAX_ATTEMPTS", "3"))
    fetch_retry_delay: float = float(os.environ.get("INTEL_FETCH_RETRY_DELAY", "2"))

    # Throttling between analyzed items
    rss_delay: float = float(os.environ.get("INTEL_RSS_DELAY", "1"))
    website_delay: float = float(os.environ.get("INTEL_WEBSITE_DELAY", "2"))

    # Email delivery (optional)
    smtp_host: str = os.environ.get("INTEL_SMTP_HOST", "")
    smtp_port: int = int(os.environ.get("INTEL_SMTP_PORT", "587"))
    smtp_user: str = os.environ.get("INTEL_SMTP_USER", "")
    smtp_pass: str = os.environ.get("INTEL_SMTP_PASS", "")
    email_to: str = os.environ.get("INTEL_EMAIL_TO", "")
    email_from: str = os.environ.get("INTEL_EMAIL_FROM", "competitor-intel@localhost")


@dataclass
class CompetitorConfig:
    competitors: list[Competitor] = field(default_factory=list)
    max_articles_per_source: int = 5
    max_websites_per_competitor: int = 3


DEFAULT_COMPETITORS = {
    "competitors": [
        {
            "id": "mozilla",
            "name": "Mozilla",
            "sources": {
                "rss": ["https://blog.mozilla.org/feed/"],
                "websites": ["https://www.mozilla.org/en-US/"],
            },
        },
    ],
    "monitoring": {"maxArticlesPerSource": 5, "maxWebsitesPerCompetitor": 3},
}


def _parse_competitors(data: dict) -> CompetitorConfig:
    monitoring = data.get("monitoring") or {}
    return CompetitorConfig(
        competitors=[Competitor.from_dict(c) for c in data.get("competitors", [])],
        max_articles_per_source=int(monitoring.get("maxArticlesPerSource") or 5),
        max_websites_per_competitor=int(monitoring.get("maxWebsitesPerCompetitor") or 3),
    )


def load_competitors(path: Path) -> CompetitorConfig:
    """Read the competitor file. Falls back to the built-in default if unreadable."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return _parse_competitors(data)
    except (OSError, ValueError, KeyError, TypeError) as e:
        log.error(f"Failed to load competitors from {path}: {e}")
        log.info("Using default configuration")
        return _parse_competitors(DEFAULT_COMPETITORS)


def load_config() -> Config:
    return Config()
