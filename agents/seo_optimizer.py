"""SEO Optimizer Agent - Meta title, description, keywords and slug for an article."""

import json
import re
from typing import Any, Dict, List, Optional

from agents.base import BaseAgent, parse_json_response
from agents.prompts import SEO_SYSTEM_PROMPT

MOCK_SEO = {
    "meta_title": "Optimized Article Title",
    "meta_description": "This is an optimized meta description for search engines.",
    "keywords": ["news", "update", "featured"],
    "slug": "optimized-article-title",
    "suggestions": ["Add more internal links", "Optimize images"],
}


def slugify(title: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", title.lower())


def fallback_seo(content: str, title: str, target_keywords: Optional[List[str]]) -> Dict[str, Any]:
    return {
        "meta_title": title[:60],
        "meta_description": content[:160],
        "keywords": target_keywords or [],
        "slug": slugify(title),
        "suggestions": ["Add more internal links", "Include featured image"],
    }


class SeoOptimizerAgent(BaseAgent):
    agent_name = "seo_optimizer"
    description = "Produce search metadata and improvement suggestions for an article."

    def build_messages(self, input_data: Dict[str, Any]):
        keywords = input_data.get("target_keywords")
        user_message = (
            f"Title: {input_data.get('title', '')}\n\n"
            f"Content:\n{input_data['content'][:10000]}\n\n"
            f"{'Target Keywords: ' + ', '.join(keywords) if keywords else ''}"
        )
        if input_data.get("target_audience"):
            user_message += f"\nTarget Audience: {input_data['target_audience']}"
        return [
            {"role": "system", "content": SEO_SYSTEM_PROMPT},
            {"role": "user", "content": user_message},
        ]

    def mock_response(self, input_data: Dict[str, Any]) -> str:
        return json.dumps(MOCK_SEO)

    async def execute(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        content = input_data["content"]
        title = input_data.get("title", "")
        result = parse_json_response(await self.complete(input_data))
        if result is None:
            return fallback_seo(content, title, input_data.get("target_keywords"))
        return result
