# triage_intake/llm/client.py
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from openai import OpenAI

from triage_intake.config import Settings, get_settings

logger = logging.getLogger(__name__)


class LLMClient(ABC):
    """
    Provider boundary for the narrative summarizer.

    Implementations are synchronous; the summarizer runs them in an
    executor so the event loop never blocks on the network.
    """

    @abstractmethod
    def chat(
        self,
        messages: List[Dict[str, str]],
        temperature: float = 0.2,
        model: Optional[str] = None,
    ) -> str:
        """
        messages: list of {"role": "system"|"user"|"assistant", "content": "..."}
        returns: assistant content as a string
        """
        ...


class OpenAILLMClient(LLMClient):
    """
    OpenAI-compatible chat completions (OpenAI, Groq, local gateways).
    """

    def __init__(self, settings: Optional[Settings] = None, model: Optional[str] = None):
        settings = settings or get_settings()
        if not settings.openai_api_key:
            raise RuntimeError("OPENAI_API_KEY is not set in environment (.env).")

        self.client = OpenAI(
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
            timeout=settings.summary_timeout_seconds,
            max_retries=settings.llm_max_retries,
        )
        self.default_model = model or settings.llm_model

    def chat(
        self,
        messages: List[Dict[str, str]],
        temperature: float = 0.2,
        model: Optional[str] = None,
    ) -> str:
        model = model or self.default_model
        logger.debug("Requesting chat completion from %s (%d messages)", model, len(messages))
        completion = self.client.chat.completions.create(
            model=model,
            messages=messages,
            temperature=temperature,
        )
        content = completion.choices[0].message.content
        return content or ""
