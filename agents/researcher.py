"""Researcher Agent - Extracts topics, sentiment and audience from an article."""

import json
from typing import Any, Dict

from agents.base import BaseAgent, parse_json_response
from agents.prompts import RESEARCHER_SYSTEM_PROMPT

FALLBACK_RESEARCH = {
    "key_topics": ["News", "Current Events"],
    "sentiment": "neutral",
    "target_audience": "General Public",
    "summary": "Article analysis complete",
    "keywords": ["news", "update"],
}

MOCK_RESEARCH = {
    "key_topics": ["Technology", "Innovation"],
    "sentiment": "positive",
    "target_audience": "Tech Enthusiasts",
    "summary": "This is a mock research summary.",
    "keywords": ["tech", "innovation", "news"],
}


class ResearcherAgent(BaseAgent):
    agent_name = "researcher"
    description = "Identify key topics, sentiment, target audience and keywords of an article."

    def build_messages(self, input_data: Dict[str, Any]):
        return [
            {"role": "system", "content": RESEARCHER_SYSTEM_PROMPT},
            {"role": "user", "content": f"Analyze this article:\n\n{input_data['content'][:10000]}"},
        ]

    def mock_response(self, input_data: Dict[str, Any]) -> str:
        return json.dumps(MOCK_RESEARCH)

    async def execute(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        result = parse_json_response(await self.complete(input_data))
        if result is None:
            return dict(FALLBACK_RESEARCH)
        return result
