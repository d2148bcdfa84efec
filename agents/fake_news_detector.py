"""Fake News Detector Agent - Classifies an article's authenticity."""

import json
from typing import Any, Dict

from agents.authenticity import analyze_authenticity
from agents.base import BaseAgent, parse_json_response
from agents.prompts import FAKE_NEWS_SYSTEM_PROMPT
from logging_config import get_logger

logger = get_logger(__name__)


def fallback_detection() -> Dict[str, Any]:
    return {
        "authenticity_status": "suspicious",
        "authenticity_score": 40,
        "confidence_level": "low",
        "overall_assessment": "Unable to complete analysis - API or parsing error. Please check server logs.",
        "summary": {
            "total_claims": 0,
            "verified_claims": 0,
            "disputed_claims": 0,
            "false_claims": 0,
            "red_flags_count": 0,
        },
        "red_flags": [
            {
                "id": "analysis-error",
                "type": "source",
                "severity": "medium",
                "description": "Analysis could not be completed",
                "evidence": "Unable to parse content for analysis or API error occurred",
                "recommendation": "Try analyzing with more context or check if the LLM API key is valid",
            }
        ],
        "cross_references": [],
        "recommendations": [
            "Seek additional verification from multiple sources",
            "Check server logs for error details",
        ],
        "detailed_analysis": {
            "headline_analysis": {
                "is_clickbait": False,
                "emotional_language_used": False,
                "exaggeration_level": "none",
                "findings": [],
            },
            "content_analysis": {
                "logical_fallacies": [],
                "unsupported_claims": [],
                "exaggerated_statements": [],
                "contradictions": [],
            },
            "evidence_assessment": {
                "has_external_references": False,
                "reference_quality": "none",
                "verified_statistics": 0,
                "unverified_statistics": 0,
                "verified_quotes": 0,
                "unverified_quotes": 0,
            },
        },
    }


def summarize(result: Dict[str, Any]) -> Dict[str, int]:
    """Claim counts derived from the detailed analysis of an LLM reply."""
    analysis = result.get("detailed_analysis") or {}
    evidence = analysis.get("evidence_assessment") or {}
    content = analysis.get("content_analysis") or {}
    red_flags = result.get("red_flags") or []
    return {
        "total_claims": len(red_flags),
        "verified_claims": evidence.get("verified_statistics") or 0,
        "disputed_claims": len(content.get("contradictions") or []),
        "false_claims": len(content.get("unsupported_claims") or []),
        "red_flags_count": len(red_flags),
    }


class FakeNewsDetectorAgent(BaseAgent):
    agent_name = "fake_news_detector"
    description = "Score an article's authenticity and list misinformation red flags."

    def build_messages(self, input_data: Dict[str, Any]):
        source_url = input_data.get("source_url")
        user_message = (
            f"Content to analyze:\n{input_data['content'][:15000]}\n\n"
            f"{f'Source URL: {source_url}' if source_url else 'No source URL provided'}"
        )
        return [
            {"role": "system", "content": FAKE_NEWS_SYSTEM_PROMPT},
            {"role": "user", "content": user_message},
        ]

    def mock_response(self, input_data: Dict[str, Any]) -> str:
        # Score exactly the text the model would have seen
        return json.dumps(analyze_authenticity(input_data["content"][:15000]))

    async def execute(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        result = parse_json_response(await self.complete(input_data))
        if result is None:
            logger.error("Fake news detection reply could not be parsed")
            return fallback_detection()

        if not isinstance(result.get("authenticity_score"), (int, float)):
            logger.warning("Detection result missing authenticity_score")

        result.setdefault("red_flags", [])
        if not result.get("summary"):
            result["summary"] = summarize(result)
        return result
