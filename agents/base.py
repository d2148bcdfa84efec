"""
Base Agent class for all newsroom pipeline agents.

Each agent:
- Has a name matching its pipeline stage
- Receives input_data (article text plus stage options)
- Returns its stage output (parsed JSON dict or plain text)
- Supplies a deterministic mock reply used when no LLM is available
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from agents.llm_client import LLMClient, Messages


def parse_json_response(text: str) -> Optional[Dict[str, Any]]:
    """Parse a model reply as a JSON object. Returns None when it is not one."""
    if not text:
        return None
    try:
        result = json.loads(text)
    except ValueError:
        # Models sometimes wrap JSON in prose or code fences
        start = text.find("{")
        end = text.rfind("}") + 1
        if start == -1 or end <= start:
            return None
        try:
            result = json.loads(text[start:end])
        except ValueError:
            return None
    return result if isinstance(result, dict) else None


class BaseAgent(ABC):
    """Base class for all pipeline stage agents."""

    agent_name: str = "base_agent"
    description: str = "Base agent"
    json_mode: bool = True

    def __init__(self, llm: Optional[LLMClient] = None):
        self.llm = llm or LLMClient()

    @abstractmethod
    def build_messages(self, input_data: Dict[str, Any]) -> Messages:
        """Chat messages sent to the model for this input."""

    @abstractmethod
    def mock_response(self, input_data: Dict[str, Any]) -> str:
        """Offline reply text, shaped like a real model reply."""

    @abstractmethod
    async def execute(self, input_data: Dict[str, Any]) -> Any:
        """
        Execute the agent's task.

        Args:
            input_data: Direct input for this stage

        Returns:
            Stage output; JSON agents always return a complete dict
        """

    async def complete(self, input_data: Dict[str, Any]) -> str:
        return await self.llm.complete(
            self.build_messages(input_data),
            mock=lambda: self.mock_response(input_data),
            json_mode=self.json_mode,
        )
