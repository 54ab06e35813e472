#!/usr/bin/env python3
"""
competitor-intel: competitor web presence tracking and analysis.

Usage:
    python main.py digest               # Summarize new RSS articles from every competitor
    python main.py monitor              # Detect and analyze competitor website changes
    python main.py run                  # digest + monitor (for cron)
    python main.py stats                # Show storage stats
    python main.py export [--out PATH]  # Dump all summaries as JSON
"""

import argparse
import logging
import sys
from pathlib import Path

from analysis import AnalysisOrchestrator
from config import load_competitors, load_config
from delivery import deliver_cli, deliver_email, export_json
from fetchers import create_fetcher
from llm import create_providers
from monitor import WebsiteMonitor
from pipeline import RSSDigest, WebsiteWatch
from storage import Storage


def setup_logging(verbose: bool = False):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _deliver(summaries, heading: str, config):
    deliver_cli(summaries, heading)
    if config.smtp_host and summaries:
        deliver_email(summaries, heading, config)


def cmd_digest(config, storage, orchestrator) -> int:
    """Analyze new RSS articles."""
    competitors = load_competitors(config.competitors_path)
    digest = RSSDigest(
        orchestrator,
        storage,
        max_articles=competitors.max_articles_per_source,
        delay=config.rss_delay,
    )
    summaries = digest.run(competitors.competitors)
    _deliver(summaries, "Daily digest", config)
    return len(summaries)


def cmd_monitor(config, storage, orchestrator) -> int:
    """Detect and analyze website changes."""
    competitors = load_competitors(config.competitors_path)
    watch = WebsiteWatch(
        WebsiteMonitor(create_fetcher(config), storage),
        orchestrator,
        storage,
        max_websites=competitors.max_websites_per_competitor,
        delay=config.website_delay,
    )
    summaries = watch.run(competitors.competitors)
    _deliver(summaries, "Website monitoring", config)
    return len(summaries)


def cmd_run(config, storage, orchestrator):
    """Full pipeline: RSS digest then website monitoring. Meant for cron."""
    found = cmd_digest(config, storage, orchestrator)
    found += cmd_monitor(config, storage, orchestrator)
    print(f"Run complete: {found} new items")


def cmd_stats(config, storage):
    """Print storage stats."""
    stats = storage.get_stats()
    print(f"Total summaries: {stats['total_summaries']}")
    for source_type, count in stats["by_source_type"].items():
        print(f"  {source_type}: {count}")
    for competitor_id, count in stats["by_competitor"].items():
        print(f"  {competitor_id}: {count}")
    print(f"Snapshots: {stats['total_snapshots']} across {stats['tracked_urls']} URLs")


def cmd_export(config, storage, out_path: str | None = None):
    """Dump summary records as JSON."""
    summaries = storage.get_summaries()
    path = Path(out_path) if out_path else None
    json_str = export_json(summaries, path)
    if path:
        print(f"Wrote {len(summaries)} summaries to {path}")
    else:
        print(json_str)


def cli():
    parser = argparse.ArgumentParser(
        prog="intel",
        description="Competitor web presence tracking with structured business-intelligence summaries",
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")

    sub = parser.add_subparsers(dest="command", help="Command to run")

    sub.add_parser("digest", parents=[common], help="Summarize new RSS articles")
    sub.add_parser("monitor", parents=[common], help="Detect and analyze website changes")
    sub.add_parser("run", parents=[common], help="Digest + monitor (for cron)")
    sub.add_parser("stats", parents=[common], help="Show storage stats")

    export_parser = sub.add_parser("export", parents=[common], help="Dump summaries as JSON")
    export_parser.add_argument(
        "--out", type=str, default=None,
        help="Output file path. If omitted, prints to stdout.",
    )

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    setup_logging(args.verbose)
    config = load_config()
    storage = Storage(config.db_path)

    try:
        match args.command:
            case "digest":
                cmd_digest(config, storage, AnalysisOrchestrator(create_providers(config)))
            case "monitor":
                cmd_monitor(config, storage, AnalysisOrchestrator(create_providers(config)))
            case "run":
                cmd_run(config, storage, AnalysisOrchestrator(create_providers(config)))
            case "stats":
                cmd_stats(config, storage)
            case "export":
                cmd_export(config, storage, args.out)
            case _:
                parser.print_help()
    finally:
        storage.close()


if __name__ == "__main__":
    cli()
