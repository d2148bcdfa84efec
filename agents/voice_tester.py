"""Voice Tester Agent - Rewrites sample text in a brand voice for preview."""

from typing import Any, Dict

from agents.base import BaseAgent
from agents.prompts import VOICE_TESTER_INSTRUCTIONS, describe_voice_style


class VoiceTesterAgent(BaseAgent):
    agent_name = "voice_tester"
    description = "Preview a brand voice by rewriting a sample passage."
    json_mode = False

    def build_messages(self, input_data: Dict[str, Any]):
        voice = input_data["voice"]
        system = voice["system_prompt"]
        style = describe_voice_style(voice)
        if style:
            system = f"{system}\n\nStyle Guide:\n{style}"
        return [
            {"role": "system", "content": system},
            {"role": "user", "content": f"{VOICE_TESTER_INSTRUCTIONS}\n\n{input_data['content']}"},
        ]

    def mock_response(self, input_data: Dict[str, Any]) -> str:
        voice = input_data["voice"]
        return (
            f"[TEST OUTPUT - {voice['name']}]\n\n"
            f"Original: {input_data['content'][:100]}...\n\n"
            "Transformed: This is a simulated transformation of the content\n"
            f"in the voice of \"{voice['name']}\". The system prompt used was:\n"
            f"\"{voice['system_prompt'][:100]}...\""
        )

    async def execute(self, input_data: Dict[str, Any]) -> str:
        return await self.complete(input_data)
