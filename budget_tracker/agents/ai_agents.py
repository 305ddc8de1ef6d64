"""
AI Agents for Budget Tracker

Two agents sit on top of the hosted inference endpoint:

1. INSIGHT AGENT:
   - CAN: Turn the transaction list into advisory insights/recommendations
   - CANNOT: Change any recorded data or any computed total
   - MUST: Fall back to a locally computed summary on ANY failure

2. CATEGORY AGENT:
   - CAN: Suggest a category for a transaction description
   - CANNOT: Block or alter form submission
   - MUST: Return nothing (not an error) when no suggestion is available

CRITICAL BOUNDARY: Neither agent raises. Network errors, bad status
codes and unparsable replies are logged and absorbed here, so the UI
only ever sees a list of insights or an optional category.
"""

import json
from typing import Any, Optional, Sequence

import structlog
from pydantic import TypeAdapter

from budget_tracker.agents.json_parser import parse_llm_json
from budget_tracker.audit import AuditLogger
from budget_tracker.models.transaction import (
    Insight,
    InsightSeverity,
    InsightType,
    ReportingWindow,
    Transaction,
)
from budget_tracker.queries import total_expenses
from budget_tracker.services.inference import InferenceClient


logger = structlog.get_logger(__name__)

_transaction_list = TypeAdapter(list[Transaction])

DEFAULT_INSIGHT_TITLE = "Financial Insight"
DEFAULT_RECOMMENDATION_TITLE = "Recommendation"
FALLBACK_TITLE = "Spending Overview"


class InsightExtractionError(Exception):
    """The reply held no usable insights/recommendations structure."""
    pass


def build_fallback_insight(
    transactions: Sequence[Transaction],
    window: ReportingWindow,
    currency_symbol: str = "$",
) -> Insight:
    """
    The single insight shown when the remote call fails.

    Computed from the local data only, no network involved.
    """
    total = total_expenses(transactions)
    return Insight(
        type=InsightType.INSIGHT,
        title=FALLBACK_TITLE,
        description=(
            f"Your total {window.value} spending is "
            f"{currency_symbol}{total:.2f}"
        ),
        severity=InsightSeverity.MEDIUM,
    )


def _severity(value: Any) -> InsightSeverity:
    if isinstance(value, str):
        try:
            return InsightSeverity(value.strip().lower())
        except ValueError:
            pass
    return InsightSeverity.MEDIUM


def _non_empty_str(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def element_to_insight(element: Any, insight_type: InsightType) -> Insight:
    """
    Map one element of an `insights` / `recommendations` list.

    Objects contribute title/description/severity, with defaults for
    whatever is missing. Anything else becomes the description.
    """
    default_title = (
        DEFAULT_INSIGHT_TITLE if insight_type == InsightType.INSIGHT
        else DEFAULT_RECOMMENDATION_TITLE
    )

    if isinstance(element, dict):
        return Insight(
            type=insight_type,
            title=_non_empty_str(element.get("title")) or default_title,
            description=(
                _non_empty_str(element.get("description"))
                or json.dumps(element, ensure_ascii=False)
            ),
            severity=_severity(element.get("severity")),
        )

    if isinstance(element, str):
        description = element
    else:
        description = json.dumps(element, ensure_ascii=False)

    return Insight(
        type=insight_type,
        title=default_title,
        description=description,
        severity=InsightSeverity.MEDIUM,
    )


def extract_insights(reply_text: str) -> list[Insight]:
    """
    Decode the insights structure out of a reply.

    Accepts the object at top level or nested under "result". Either
    list may be missing, but at least one must be present.

    Raises:
        InsightExtractionError: nothing usable in the reply
    """
    parsed = parse_llm_json(reply_text, expected_type=dict)
    if not parsed.success:
        raise InsightExtractionError(parsed.error)

    payload = parsed.result
    if (
        "insights" not in payload
        and "recommendations" not in payload
        and isinstance(payload.get("result"), dict)
    ):
        payload = payload["result"]

    raw_insights = payload.get("insights")
    raw_recommendations = payload.get("recommendations")
    if not isinstance(raw_insights, list) and not isinstance(raw_recommendations, list):
        raise InsightExtractionError(
            "reply has no 'insights' or 'recommendations' list"
        )

    insights = [
        element_to_insight(element, InsightType.INSIGHT)
        for element in (raw_insights if isinstance(raw_insights, list) else [])
    ]
    insights.extend(
        element_to_insight(element, InsightType.RECOMMENDATION)
        for element in (raw_recommendations if isinstance(raw_recommendations, list) else [])
    )
    return insights


class InsightAgent:
    """
    Produces spending insights for the current transaction list.

    RESPONSIBILITIES:
    - Build the request message (full transaction list + window label)
    - Extract insights from a free-form reply
    - Substitute the local fallback on any failure

    BOUNDARIES:
    - NEVER raises to the caller
    - NEVER mutates the transactions it is given
    """

    def __init__(
        self,
        client: Optional[InferenceClient],
        audit_logger: Optional[AuditLogger] = None,
        currency_symbol: str = "$",
    ):
        self._client = client
        self._audit_logger = audit_logger or AuditLogger()
        self._currency_symbol = currency_symbol

    @staticmethod
    def build_message(transactions: Sequence[Transaction], window: ReportingWindow) -> str:
        payload = _transaction_list.dump_python(list(transactions), mode="json")
        return (
            f"Analyze these transactions for {window.value} insights and "
            f"recommendations: {json.dumps(payload, ensure_ascii=False)}"
        )

    async def generate_insights(
        self,
        transactions: Sequence[Transaction],
        window: ReportingWindow,
    ) -> list[Insight]:
        """
        Ask the insights agent about the transactions.

        Returns the extracted insights, or exactly one fallback insight
        if anything goes wrong.
        """
        if self._client is None:
            self._audit_logger.log_insights_fallback(
                window.value, "inference endpoint not configured"
            )
            return [build_fallback_insight(transactions, window, self._currency_symbol)]

        try:
            reply = await self._client.send_message(
                self._client.settings.insights_agent_id,
                self.build_message(transactions, window),
            )
            insights = extract_insights(reply)
        except Exception as e:
            logger.warning("insight_generation_failed", error=str(e), window=window.value)
            self._audit_logger.log_external_service_error("insights", str(e))
            self._audit_logger.log_insights_fallback(window.value, str(e))
            return [build_fallback_insight(transactions, window, self._currency_symbol)]

        return insights


class CategoryAgent:
    """
    Suggests a category for a transaction description.

    The suggestion is freeform text; it is not checked against the
    known categories; the form adds it to the selector as-is
    (see formatting.category_options).
    """

    def __init__(
        self,
        client: Optional[InferenceClient],
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._client = client
        self._audit_logger = audit_logger or AuditLogger()

    @staticmethod
    def build_message(description: str) -> str:
        return f'Suggest the best category for this transaction description: "{description}"'

    async def suggest_category(self, description: str) -> Optional[str]:
        """
        Return the agent's primary suggestion, or None.

        Blank descriptions and an unconfigured endpoint make no call.
        """
        description = (description or "").strip()
        if not description or self._client is None:
            return None

        try:
            reply = await self._client.send_message(
                self._client.settings.category_agent_id,
                self.build_message(description),
            )
        except Exception as e:
            logger.warning("category_suggestion_failed", error=str(e))
            self._audit_logger.log_external_service_error("category_suggestion", str(e))
            return None

        parsed = parse_llm_json(reply, expected_type=dict)
        if not parsed.success:
            logger.info("category_suggestion_unparsable", error=parsed.error)
            self._audit_logger.log_category_suggested(None)
            return None

        payload = parsed.result
        if "primary_suggestion" not in payload and isinstance(payload.get("result"), dict):
            payload = payload["result"]

        suggestion = _non_empty_str(payload.get("primary_suggestion"))
        self._audit_logger.log_category_suggested(suggestion)
        return suggestion
