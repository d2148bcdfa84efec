#!/usr/bin/env python3
"""
Chat-completion client shared by the newsroom agents.

Supports OpenAI (default), Anthropic and Google Gemini. Callers pass a `mock`
callable; its reply is returned whenever the provider is not configured or the
call raises, so processing never fails because of the LLM.
"""

import asyncio
import functools
import os
from typing import Callable, Dict, List, Optional

import anthropic
import google.generativeai as genai
import openai
from dotenv import load_dotenv

from logging_config import get_logger

load_dotenv()

logger = get_logger(__name__)

PROVIDERS = ("openai", "anthropic", "google")

DEFAULT_MODELS = {
    "openai": "gpt-4-turbo-preview",
    "anthropic": "claude-sonnet-4-5-20250929",
    "google": "gemini-2.0-flash",
}

API_KEY_VARS = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "google": "GOOGLE_API_KEY",
}

Messages = List[Dict[str, str]]


class LLMClient:
    """Thin wrapper over the provider SDKs. One instance per process is enough."""

    def __init__(self, provider: Optional[str] = None):
        self.provider = (provider or os.getenv("LLM_PROVIDER", "openai")).lower()
        if self.provider not in PROVIDERS:
            raise ValueError(f"Unknown LLM provider: {self.provider}")

        self.api_key = os.getenv(API_KEY_VARS[self.provider])
        self.model = os.getenv(f"{self.provider.upper()}_MODEL", DEFAULT_MODELS[self.provider])
        self.max_tokens = int(os.getenv("OPENAI_MAX_TOKENS", "4000"))
        self.temperature = float(os.getenv("OPENAI_TEMPERATURE", "0.7"))
        self._client = None

        if not self.api_key:
            logger.warning(f"{API_KEY_VARS[self.provider]} not found. Using mock responses.")

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def complete(self, messages: Messages, mock: Callable[[], str], json_mode: bool = False) -> str:
        """Return the model's reply text, or mock() when the provider is unavailable."""
        if not self.is_configured:
            return mock()

        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, functools.partial(self._call, messages, json_mode))
        except Exception as e:
            logger.error(f"{self.provider} API error ({self.model}): {e}", exc_info=True)
            logger.warning("Falling back to mock response due to API error")
            return mock()

    # --- Provider calls (blocking, run in the default executor) ---

    def _call(self, messages: Messages, json_mode: bool) -> str:
        if self.provider == "anthropic":
            return self._call_anthropic(messages)
        if self.provider == "google":
            return self._call_google(messages, json_mode)
        return self._call_openai(messages, json_mode)

    def _call_openai(self, messages: Messages, json_mode: bool) -> str:
        if self._client is None:
            self._client = openai.OpenAI(api_key=self.api_key)

        params = {
            "model": self.model,
            "messages": messages,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }
        if json_mode:
            params["response_format"] = {"type": "json_object"}

        response = self._client.chat.completions.create(**params)
        return response.choices[0].message.content or ""

    def _call_anthropic(self, messages: Messages) -> str:
        if self._client is None:
            self._client = anthropic.Anthropic(api_key=self.api_key)

        system = "\n\n".join(m["content"] for m in messages if m["role"] == "system")
        chat = [m for m in messages if m["role"] != "system"]

        response = self._client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            system=system,
            messages=chat,
            temperature=self.temperature,
        )
        return response.content[0].text

    def _call_google(self, messages: Messages, json_mode: bool) -> str:
        genai.configure(api_key=self.api_key)

        system = "\n\n".join(m["content"] for m in messages if m["role"] == "system")
        prompt = "\n\n".join(m["content"] for m in messages if m["role"] != "system")

        model = genai.GenerativeModel(self.model, system_instruction=system or None)
        config = genai.types.GenerationConfig(
            temperature=self.temperature,
            max_output_tokens=self.max_tokens,
            response_mime_type="application/json" if json_mode else "text/plain",
        )
        response = model.generate_content(prompt, generation_config=config)
        return response.text
