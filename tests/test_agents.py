"""
Tests for the inference client and the AI agents.

All HTTP goes through httpx.MockTransport; nothing leaves the process.
"""

import asyncio
import json
from datetime import date
from decimal import Decimal

import httpx
import pytest

from budget_tracker.agents import (
    CategoryAgent,
    InsightAgent,
    InsightExtractionError,
    build_fallback_insight,
    element_to_insight,
    extract_insights,
)
from budget_tracker.models.audit import AuditEventType
from budget_tracker.models.transaction import (
    InsightSeverity,
    InsightType,
    ReportingWindow,
    Transaction,
    TransactionType,
)
from budget_tracker.services.inference import (
    InferenceClient,
    InferenceResponseError,
    InferenceTransportError,
    generate_request_identity,
)

from conftest import agent_reply, failing_transport


def tx(id, amount, type=TransactionType.EXPENSE, category="Food & Dining"):
    return Transaction(
        id=id,
        amount=Decimal(amount),
        category=category,
        date=date(2024, 3, 1),
        type=type,
        description=f"transaction {id}",
    )


@pytest.fixture
def transactions():
    return [
        tx("1", "100"),
        tx("2", "20"),
        tx("3", "999", TransactionType.INCOME, "Salary"),
    ]


class TestInferenceClient:

    def test_request_shape(self, make_client):
        """The request carries the api key header and the four body fields."""
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["request"] = request
            return httpx.Response(200, json={"response": "hello"})

        client = make_client(httpx.MockTransport(handler))
        reply = asyncio.run(client.send_message("agent-1", "ping"))

        request = captured["request"]
        body = json.loads(request.content)
        assert reply == "hello"
        assert request.method == "POST"
        assert str(request.url) == "https://inference.test/v3/inference/chat/"
        assert request.headers["x-api-key"] == "test-key"
        assert request.headers["content-type"] == "application/json"
        assert body["agent_id"] == "agent-1"
        assert body["message"] == "ping"
        assert body["user_id"] and body["session_id"]

    def test_missing_response_field_reads_as_empty(self, make_client):
        client = make_client(httpx.MockTransport(lambda request: httpx.Response(200, json={})))
        assert asyncio.run(client.send_message("agent", "ping")) == ""

    def test_http_error_status(self, make_client):
        client = make_client(agent_reply("oops", status_code=500))
        with pytest.raises(InferenceResponseError) as exc_info:
            asyncio.run(client.send_message("agent", "ping"))
        assert exc_info.value.status_code == 500

    def test_non_json_body(self, make_client):
        client = make_client(httpx.MockTransport(
            lambda request: httpx.Response(200, text="<html>gateway</html>")
        ))
        with pytest.raises(InferenceResponseError):
            asyncio.run(client.send_message("agent", "ping"))

    def test_transport_error(self, make_client):
        client = make_client(failing_transport())
        with pytest.raises(InferenceTransportError):
            asyncio.run(client.send_message("agent", "ping"))

    def test_transport_errors_are_retried(self, inference_settings):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if len(calls) == 1:
                raise httpx.ConnectError("flaky", request=request)
            return httpx.Response(200, json={"response": "second time lucky"})

        settings = inference_settings.model_copy(update={"max_attempts": 2})
        client = InferenceClient(settings, transport=httpx.MockTransport(handler))

        assert asyncio.run(client.send_message("agent", "ping")) == "second time lucky"
        assert len(calls) == 2

    def test_request_identities_are_unique(self):
        first = generate_request_identity()
        second = generate_request_identity()
        assert first != second
        assert first[0].endswith("@budget-tracker.local")
        assert second[1].startswith("session-")


class TestFallbackInsight:

    def test_weekly_fallback_reports_total_spending(self):
        insight = build_fallback_insight(
            [tx("1", "100"), tx("2", "20")], ReportingWindow.WEEKLY
        )
        assert insight.type == InsightType.INSIGHT
        assert insight.severity == InsightSeverity.MEDIUM
        assert "120.00" in insight.description
        assert "weekly" in insight.description

    def test_income_is_not_spending(self, transactions):
        insight = build_fallback_insight(transactions, ReportingWindow.MONTHLY)
        assert insight.description == "Your total monthly spending is $120.00"

    def test_very_large_total_is_formatted(self):
        """Totals beyond the default decimal precision still format."""
        insight = build_fallback_insight([tx("1", "12345678901234567890123456789")], ReportingWindow.WEEKLY)
        assert insight.description.startswith("Your total weekly spending is $1234567890")
        assert insight.description.endswith(".00")

    def test_exponent_amount_is_formatted(self):
        insight = build_fallback_insight([tx("1", "1e30")], ReportingWindow.MONTHLY)
        assert insight.description == "Your total monthly spending is $1" + "0" * 30 + ".00"


class TestExtractInsights:

    def test_objects_and_strings(self):
        reply = json.dumps({
            "insights": [
                {"title": "Dining up", "description": "You ate out a lot", "severity": "high"},
                "Plain text insight",
            ],
            "recommendations": [
                {"title": "Cook at home", "description": "Save $50", "severity": "low"},
            ],
        })
        insights = extract_insights(reply)

        assert [(i.type, i.title, i.severity) for i in insights] == [
            (InsightType.INSIGHT, "Dining up", InsightSeverity.HIGH),
            (InsightType.INSIGHT, "Financial Insight", InsightSeverity.MEDIUM),
            (InsightType.RECOMMENDATION, "Cook at home", InsightSeverity.LOW),
        ]
        assert insights[1].description == "Plain text insight"

    def test_only_recommendations(self):
        insights = extract_insights('{"recommendations": ["Spend less"]}')
        assert len(insights) == 1
        assert insights[0].type == InsightType.RECOMMENDATION
        assert insights[0].title == "Recommendation"

    def test_nested_result_object(self):
        reply = 'Here you go: {"result": {"insights": [{"description": "ok"}]}}'
        insights = extract_insights(reply)
        assert insights[0].description == "ok"
        assert insights[0].title == "Financial Insight"

    @pytest.mark.parametrize("reply", [
        "no json here",
        '{"summary": "nothing useful"}',
        '{"insights": "not a list"}',
    ])
    def test_unusable_replies_raise(self, reply):
        with pytest.raises(InsightExtractionError):
            extract_insights(reply)

    def test_element_defaults(self):
        insight = element_to_insight({"severity": "extreme"}, InsightType.INSIGHT)
        assert insight.severity == InsightSeverity.MEDIUM
        assert insight.title == "Financial Insight"
        assert json.loads(insight.description) == {"severity": "extreme"}

    def test_non_text_element_is_serialized(self):
        insight = element_to_insight(42, InsightType.RECOMMENDATION)
        assert insight.description == "42"


class TestInsightAgent:

    def test_successful_reply(self, make_client, transactions):
        reply = '```json\n{"insights": [{"title": "T", "description": "D"}], "recommendations": []}\n```'
        agent = InsightAgent(make_client(agent_reply(reply)))

        insights = asyncio.run(agent.generate_insights(transactions, ReportingWindow.MONTHLY))
        assert len(insights) == 1
        assert insights[0].title == "T"

    def test_network_error_gives_single_fallback(self, make_client, audit_logger):
        agent = InsightAgent(make_client(failing_transport()), audit_logger=audit_logger)

        insights = asyncio.run(agent.generate_insights(
            [tx("1", "100"), tx("2", "20")], ReportingWindow.WEEKLY
        ))
        assert len(insights) == 1
        assert "120.00" in insights[0].description
        assert "weekly" in insights[0].description
        assert audit_logger.history[-1].event_type == AuditEventType.INSIGHTS_FALLBACK_USED

    def test_http_500_gives_fallback(self, make_client, transactions):
        agent = InsightAgent(make_client(agent_reply("error", status_code=500)))
        insights = asyncio.run(agent.generate_insights(transactions, ReportingWindow.WEEKLY))
        assert len(insights) == 1
        assert insights[0].title == "Spending Overview"

    def test_unparsable_reply_gives_fallback(self, make_client, transactions):
        agent = InsightAgent(make_client(agent_reply("I am not sure what you mean.")))
        insights = asyncio.run(agent.generate_insights(transactions, ReportingWindow.WEEKLY))
        assert len(insights) == 1
        assert insights[0].title == "Spending Overview"

    @pytest.mark.parametrize("offline", [True, False])
    def test_huge_amount_still_gives_fallback(self, make_client, offline):
        client = None if offline else make_client(failing_transport())
        agent = InsightAgent(client)

        insights = asyncio.run(agent.generate_insights(
            [tx("1", "12345678901234567890123456789")], ReportingWindow.WEEKLY
        ))
        assert len(insights) == 1
        assert insights[0].title == "Spending Overview"
        assert "weekly" in insights[0].description

    def test_unconfigured_client_gives_fallback(self, transactions):
        agent = InsightAgent(None)
        insights = asyncio.run(agent.generate_insights(transactions, ReportingWindow.MONTHLY))
        assert insights[0].description == "Your total monthly spending is $120.00"

    def test_message_contains_window_and_transactions(self, transactions):
        message = InsightAgent.build_message(transactions, ReportingWindow.WEEKLY)
        assert message.startswith("Analyze these transactions for weekly insights")
        payload = json.loads(message.split(": ", 1)[1])
        assert [t["id"] for t in payload] == ["1", "2", "3"]
        assert payload[0]["amount"] == "100"


class TestCategoryAgent:

    def test_suggestion(self, make_client):
        agent = CategoryAgent(make_client(agent_reply(
            'Best match: {"primary_suggestion": " Transportation ", "alternatives": ["Travel"]}'
        )))
        assert asyncio.run(agent.suggest_category("Uber to airport")) == "Transportation"

    def test_nested_result(self, make_client):
        agent = CategoryAgent(make_client(agent_reply(
            '{"result": {"primary_suggestion": "Travel"}}'
        )))
        assert asyncio.run(agent.suggest_category("Flight")) == "Travel"

    def test_suggestion_outside_known_categories_is_kept(self, make_client):
        agent = CategoryAgent(make_client(agent_reply('{"primary_suggestion": "Pets"}')))
        assert asyncio.run(agent.suggest_category("Dog food")) == "Pets"

    @pytest.mark.parametrize("reply", ["no idea", '{"alternatives": []}', '{"primary_suggestion": ""}'])
    def test_no_usable_suggestion(self, make_client, reply):
        agent = CategoryAgent(make_client(agent_reply(reply)))
        assert asyncio.run(agent.suggest_category("Something")) is None

    def test_failure_returns_none(self, make_client):
        agent = CategoryAgent(make_client(failing_transport()))
        assert asyncio.run(agent.suggest_category("Coffee")) is None

    def test_blank_description_makes_no_call(self, make_client):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json={"response": '{"primary_suggestion": "Other"}'})

        agent = CategoryAgent(make_client(httpx.MockTransport(handler)))
        assert asyncio.run(agent.suggest_category("   ")) is None
        assert calls == []

    def test_message_quotes_description(self):
        assert CategoryAgent.build_message("Coffee") == (
            'Suggest the best category for this transaction description: "Coffee"'
        )
