"""Article Writer Agent - Drafts a news article from a title and notes."""

from typing import Any, Dict

from agents.base import BaseAgent
from agents.prompts import ARTICLE_WRITER_SYSTEM_PROMPT


class ArticleWriterAgent(BaseAgent):
    agent_name = "article_writer"
    description = "Draft a complete news article from a title and base notes."
    json_mode = False

    def build_messages(self, input_data: Dict[str, Any]):
        style = input_data.get("voice_style")
        user_message = (
            "Draft a news article.\n"
            f"Title: {input_data['title']}\n"
            f"Base Information/Notes: {input_data['info']}\n"
            f"{f'Style Guide: {style}' if style else ''}\n\n"
            "The article should be well-structured, engaging, and professional. "
            "Return ONLY the article content."
        )
        return [
            {"role": "system", "content": input_data.get("system_prompt") or ARTICLE_WRITER_SYSTEM_PROMPT},
            {"role": "user", "content": user_message},
        ]

    def mock_response(self, input_data: Dict[str, Any]) -> str:
        title = input_data.get("title") or "Breaking News"
        info = input_data.get("info") or "Detailed information provided by the user."
        return f"""[MOCK GENERATED ARTICLE]
Title: {title}

{title.upper()} — (AI Newsroom) — In a significant development today, new details have emerged regarding {title}. According to reports, {info[:100]}...

This groundbreaking event has captured the attention of industry experts and the public alike. "This is a pivotal moment for us," said a spokesperson for the organization. "We are committed to transparency and will continue to provide updates as more information becomes available."

Further analysis suggests that this could lead to long-term changes across the sector. Citizens are advised to monitor official channels for the most accurate and up-to-date information.

#News #BreakingNews #Update #LiquidNews"""

    async def execute(self, input_data: Dict[str, Any]) -> str:
        return await self.complete(input_data)
