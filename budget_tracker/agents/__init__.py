"""AI Agents package."""

from budget_tracker.agents.ai_agents import (
    CategoryAgent,
    InsightAgent,
    InsightExtractionError,
    build_fallback_insight,
    element_to_insight,
    extract_insights,
)
from budget_tracker.agents.json_parser import ParsedJson, parse_llm_json

__all__ = [
    "CategoryAgent",
    "InsightAgent",
    "InsightExtractionError",
    "ParsedJson",
    "build_fallback_insight",
    "element_to_insight",
    "extract_insights",
    "parse_llm_json",
]
