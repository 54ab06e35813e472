"""
Analysis prompt. One system prompt, one user template, bounded content.
"""

from models import Category, Impact

CONTENT_BUDGET = 1500   # characters of item content sent to a provider

CATEGORIES = ", ".join(c.value for c in Category)
IMPACT_LEVELS = ", ".join(i.value for i in Impact)

ANALYSIS_SYSTEM = f"""\
You are a competitive intelligence analyst. Analyze competitor content and
provide actionable business insights.

Categories: {CATEGORIES}
Impact Levels: {IMPACT_LEVELS}

Always include:
1. 2-3 sentence summary
2. Category tag
3. Impact level
4. Recommended action
"""

ANALYSIS_USER = """\
Competitor: {competitor}
Content: "{content}"

Provide analysis in this exact format:
Summary: [2-3 sentences about what happened and why it matters]
Category: [one category from the list above]
Impact: [impact level]
Action: [specific recommended action for our business]

Keep the response concise and focused on business implications.
"""


def build_analysis_prompt(content: str, competitor_name: str) -> str:
    return ANALYSIS_USER.format(
        competitor=competitor_name,
        content=content[:CONTENT_BUDGET],
    )
