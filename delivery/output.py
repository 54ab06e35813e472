"""
Output delivery. CLI (stdout), email, JSON export.

CLI is the primary interface. Email is optional for scheduled runs.
"""

import json
import logging
import smtplib
from datetime import datetime, timezone
from email.mime.text import MIMEText
from pathlib import Path

from analysis.parser import parse_analysis
from config.settings import Config
from models import Summary

log = logging.getLogger(__name__)


def _headline(summary: Summary) -> str:
    parsed = parse_analysis(summary.summary)
    tag = f" [{parsed.category.value}/{parsed.impact.value}]" if parsed else ""
    return f"[{summary.competitor_name}] {summary.title}{tag}"


def deliver_cli(summaries: list[Summary], heading: str):
    """Print the run's new findings."""
    separator = "─" * 60
    print(f"\n{separator}")
    print(f"  {heading.upper()}")
    print(f"  {datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M UTC')}")
    print(f"  ({len(summaries)} new items)")
    print(separator)

    if not summaries:
        print("\nNo new content found across all competitors.\n")
        print(separator)
        return

    print()
    for i, summary in enumerate(summaries, start=1):
        print(f"{i}. {_headline(summary)}")
        if summary.changes:
            print(f"   Changes: {', '.join(summary.changes)}")
        print(f"   {summary.source}")
    print()
    print(separator)


def render_email_body(summaries: list[Summary]) -> str:
    blocks = []
    for summary in summaries:
        lines = [_headline(summary), summary.source]
        if summary.changes:
            lines.append(f"Changes: {'; '.join(summary.changes)}")
        lines.append("")
        lines.append(summary.summary)
        blocks.append("\n".join(lines))
    return "\n\n---\n\n".join(blocks) or "No new content found across all competitors."


def deliver_email(summaries: list[Summary], heading: str, config: Config) -> bool:
    """Send via SMTP. Returns True on success."""
    if not config.smtp_host or not config.email_to:
        log.warning("Email not configured (INTEL_SMTP_HOST, INTEL_EMAIL_TO)")
        return False

    subject = (
        f"[intel] {heading}: {len(summaries)} updates, "
        f"{datetime.now(timezone.utc).strftime('%Y-%m-%d')}"
    )
    msg = MIMEText(render_email_body(summaries), "plain", "utf-8")
    msg["Subject"] = subject
    msg["From"] = config.email_from
    msg["To"] = config.email_to

    try:
        with smtplib.SMTP(config.smtp_host, config.smtp_port) as server:
            server.starttls()
            if config.smtp_user:
                server.login(config.smtp_user, config.smtp_pass)
            server.send_message(msg)
        log.info(f"Email sent: {subject}")
        return True
    except (smtplib.SMTPException, OSError) as e:
        log.error(f"Email delivery failed: {e}")
        return False


def export_json(summaries: list[Summary], out_path: Path | None = None) -> str:
    """Summary records as a JSON array. Written to out_path when given."""
    json_str = json.dumps([s.to_dict() for s in summaries], indent=2, ensure_ascii=False)
    if out_path:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(json_str, encoding="utf-8")
    return json_str
