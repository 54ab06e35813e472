"""
Rule-based analysis. No network, no LLM, cannot fail.

Used when no provider is configured or every provider failed. Category is
the first entry in CATEGORY_KEYWORDS with any keyword hit, not the one with
the most hits.
"""

from models import AnalysisResult, Category, Impact

# Order matters: first match wins.
CATEGORY_KEYWORDS: list[tuple[Category, list[str]]] = [
    (Category.PRODUCT, ["launch", "feature", "update", "release", "version", "beta", "product"]),
    (Category.MARKETING, ["campaign", "brand", "marketing", "advertisement", "promotion", "social"]),
    (Category.HIRING, ["hiring", "job", "team", "employee", "recruit", "position"]),
    (Category.FUNDING, ["funding", "investment", "round", "capital", "investor", "valuation"]),
    (Category.PARTNERSHIP, ["partner", "collaboration", "alliance", "integration", "deal"]),
    (Category.LEADERSHIP, ["ceo", "cto", "founder", "executive", "leadership", "appointment"]),
]

HIGH_IMPACT_KEYWORDS = ["major", "significant", "breakthrough"]
LOW_IMPACT_KEYWORDS = ["minor", "small"]
SHORT_CONTENT_CHARS = 200
SUMMARY_EXCERPT_CHARS = 150


def classify_category(content: str) -> Category:
    lowered = content.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(word in lowered for word in keywords):
            return category
    return Category.PRODUCT


def classify_impact(content: str) -> Impact:
    lowered = content.lower()
    if any(word in lowered for word in HIGH_IMPACT_KEYWORDS):
        return Impact.HIGH
    if any(word in lowered for word in LOW_IMPACT_KEYWORDS) or len(content) < SHORT_CONTENT_CHARS:
        return Impact.LOW
    return Impact.MEDIUM


class RuleBasedAnalyzer:
    def analyze(self, content: str, competitor_name: str = "competitor") -> AnalysisResult:
        category = classify_category(content)
        impact = classify_impact(content)
        label = category.value.lower()

        return AnalysisResult(
            summary=(
                f"{competitor_name} has published content related to {label}. "
                f"{content[:SUMMARY_EXCERPT_CHARS]}..."
            ),
            category=category,
            impact=impact,
            action=(
                f"Monitor {competitor_name}'s {label} developments and assess "
                f"competitive implications for our business."
            ),
        )

    def summarize(self, content: str, competitor_name: str = "competitor") -> str:
        return self.analyze(content, competitor_name).to_text()

    def name(self) -> str:
        return "rule-based"
