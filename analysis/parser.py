"""
Lenient reader for analysis text. For display only.

Provider text is free-form. This pulls out the labelled fields when they
are there and returns None when Category or Impact can't be recognized.
Nothing is ever rejected on the strength of this parse.
"""

import re

from models import AnalysisResult, Category, Impact

_FIELD_RE = re.compile(
    r"^\s*\**\s*(Summary|Category|Impact|Action)\s*\**\s*:\s*\**\s*(.*)$",
    re.IGNORECASE | re.MULTILINE,
)


def _match_enum(value: str, enum_cls):
    for member in enum_cls:
        if re.search(rf"\b{re.escape(member.value)}\b", value, re.IGNORECASE):
            return member
    return None


def parse_analysis(text: str) -> AnalysisResult | None:
    fields: dict[str, str] = {}
    for match in _FIELD_RE.finditer(text or ""):
        key = match.group(1).lower()
        if key not in fields:
            fields[key] = match.group(2).strip().strip("*").strip()

    category = _match_enum(fields.get("category", ""), Category)
    impact = _match_enum(fields.get("impact", ""), Impact)
    if category is None or impact is None:
        return None

    return AnalysisResult(
        summary=fields.get("summary", ""),
        category=category,
        impact=impact,
        action=fields.get("action", ""),
    )
