"""
Newsroom Agents

Each agent handles one processing stage: drafting, research, platform
reformatting, fact checking, SEO, authenticity detection and voice previews.
All of them share an LLMClient and fall back to deterministic mock replies.
"""

from typing import Optional

from agents.article_writer import ArticleWriterAgent
from agents.base import BaseAgent
from agents.fact_checker import FactCheckerAgent
from agents.fake_news_detector import FakeNewsDetectorAgent
from agents.llm_client import LLMClient
from agents.reformatter import ReformatterAgent
from agents.researcher import ResearcherAgent
from agents.seo_optimizer import SeoOptimizerAgent
from agents.voice_tester import VoiceTesterAgent

# Registry: agent_name -> class
AGENT_REGISTRY = {
    "article_writer": ArticleWriterAgent,
    "researcher": ResearcherAgent,
    "reformatter": ReformatterAgent,
    "fact_checker": FactCheckerAgent,
    "seo_optimizer": SeoOptimizerAgent,
    "fake_news_detector": FakeNewsDetectorAgent,
    "voice_tester": VoiceTesterAgent,
}

_shared_llm: Optional[LLMClient] = None


def get_llm() -> LLMClient:
    """Process-wide LLM client, created on first use."""
    global _shared_llm
    if _shared_llm is None:
        _shared_llm = LLMClient()
    return _shared_llm


def get_agent(agent_name: str, llm: Optional[LLMClient] = None) -> BaseAgent:
    """Factory: instantiate an agent by name."""
    cls = AGENT_REGISTRY.get(agent_name)
    if not cls:
        raise ValueError(f"Unknown agent: {agent_name}")
    return cls(llm=llm or get_llm())
