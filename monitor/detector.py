"""
Change detection between two snapshots of the same URL.

Deterministic. Hash equality decides whether anything changed; the
structural comparison only describes what changed.
"""

from models import ChangeReport, ChangeType, PageContent, Snapshot

INITIAL_CHANGE = "Initial monitoring setup for this URL"
FALLBACK_CHANGE = "Content structure or formatting changes detected"
SIGNIFICANT_DELTA = 100     # characters


def _ordered_difference(items: list[str], exclude: set[str]) -> list[str]:
    """Set difference, keeping first-seen order so messages are stable."""
    seen: set[str] = set()
    result = []
    for item in items:
        if item not in exclude and item not in seen:
            seen.add(item)
            result.append(item)
    return result


def analyze_changes(old: PageContent, new: PageContent) -> list[str]:
    """Describe differences between two canonical contents. Never empty."""
    changes = []

    if old.title != new.title:
        changes.append(f'Title changed: "{old.title}" → "{new.title}"')

    added = _ordered_difference(new.headlines, set(old.headlines))
    removed = _ordered_difference(old.headlines, set(new.headlines))
    if added:
        changes.append(f"New headlines: {', '.join(added)}")
    if removed:
        changes.append(f"Removed headlines: {', '.join(removed)}")

    if old.content != new.content:
        delta = abs(len(old.content) - len(new.content))
        if delta > SIGNIFICANT_DELTA:
            changes.append(f"Significant content changes detected ({delta} character difference)")
        else:
            changes.append("Minor content updates detected")

    return changes or [FALLBACK_CHANGE]


def detect_changes(previous: Snapshot | None, current: Snapshot) -> ChangeReport | None:
    """
    Compare the current snapshot with the last stored one.

    Returns None when nothing changed (hashes equal).
    """
    if previous is None:
        return ChangeReport(
            kind=ChangeType.NEW,
            changes=[INITIAL_CHANGE],
            snapshot=current,
        )

    if previous.hash == current.hash:
        return None

    return ChangeReport(
        kind=ChangeType.CHANGED,
        changes=analyze_changes(previous.content, current.content),
        snapshot=current,
        previous=previous,
    )
