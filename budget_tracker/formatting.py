"""
Display Helpers

Small pure helpers behind the Streamlit page. Anything that came back
from the inference endpoint is untrusted text and is escaped before it
is placed into markup.
"""

import html

from budget_tracker.models.transaction import (
    Insight,
    InsightSeverity,
    InsightType,
    is_known_category,
    known_category_names,
)


SEVERITY_BOX = {
    InsightSeverity.HIGH: "error-box",
    InsightSeverity.MEDIUM: "warning-box",
    InsightSeverity.LOW: "info-box",
}


def format_money(amount, symbol: str = "$") -> str:
    return f"{symbol}{amount:,.2f}"


def category_options(current: str = "") -> list[str]:
    """
    Choices for the category selector: blank, the built-in categories,
    then the current value if it is not one of them (AI suggestions are
    freeform).
    """
    options = [""] + known_category_names()
    if current and not is_known_category(current):
        options.append(current)
    return options


def insight_html(insight: Insight) -> str:
    """Render one insight as a severity-colored box."""
    prefix = "💡" if insight.type == InsightType.INSIGHT else "👉"
    return (
        f'<div class="{SEVERITY_BOX[insight.severity]}">'
        f"<strong>{prefix} {html.escape(insight.title)}</strong>"
        f"<p>{html.escape(insight.description)}</p>"
        "</div>"
    )
