"""Reformatter Agent - Rewrites an article for one publishing platform."""

import json
from typing import Any, Dict

from agents.base import BaseAgent, parse_json_response
from agents.prompts import FORMAT_INSTRUCTIONS, REFORMAT_RESPONSE_FORMAT, get_default_system_prompt


class ReformatterAgent(BaseAgent):
    agent_name = "reformatter"
    description = "Rewrite article content for a specific platform (LinkedIn, TikTok, newsletter, ...)."

    def build_messages(self, input_data: Dict[str, Any]):
        platform = input_data["platform"]
        system_prompt = input_data.get("system_prompt") or get_default_system_prompt(platform)

        parts = [system_prompt, FORMAT_INSTRUCTIONS.get(platform, "")]
        if input_data.get("voice_style"):
            parts.append(f"Style Guide:\n{input_data['voice_style']}")
        parts.append(REFORMAT_RESPONSE_FORMAT)

        return [
            {"role": "system", "content": "\n\n".join(parts)},
            {
                "role": "user",
                "content": f"Original Title: {input_data.get('title', '')}\n\n"
                           f"Original Content:\n{input_data['content'][:15000]}",
            },
        ]

    def mock_response(self, input_data: Dict[str, Any]) -> str:
        # Passthrough: the fallback below fills every field from the input
        return json.dumps({})

    async def execute(self, input_data: Dict[str, Any]) -> Dict[str, Any]:
        content = input_data["content"]
        title = input_data.get("title", "")
        result = parse_json_response(await self.complete(input_data)) or {}

        return {
            "title": result.get("title") or title,
            "content": result.get("content") or content,
            "word_count": result.get("word_count") or len(content.split()),
            "character_count": result.get("character_count") or len(content),
            "hashtags": result.get("hashtags") or [],
            "call_to_action": result.get("call_to_action"),
        }
