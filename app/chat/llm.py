from __future__ import annotations

from typing import Dict, Sequence

from app.config import get_settings
from llm.client import CompletionUnavailableError, LLMClient


def complete_chat(messages: Sequence[Dict[str, str]]) -> str:
    settings = get_settings()
    if not settings.LLM_ENABLED:
        raise CompletionUnavailableError("llm_disabled")

    llm_client = LLMClient(
        model=settings.LLM_MODEL,
        provider=settings.llm_provider,
        api_key=settings.llm_api_key,
        base_url=settings.llm_base_url,
        temperature=settings.llm_temperature,
        max_tokens=settings.llm_max_tokens,
        timeout_s=settings.llm_timeout_s,
    )
    return llm_client.complete(messages)
