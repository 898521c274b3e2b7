from __future__ import annotations

import json
import logging
from typing import Dict, List, Sequence

logger = logging.getLogger(__name__)


class CompletionError(RuntimeError):
    kind = "unavailable"


class CompletionRateLimitError(CompletionError):
    kind = "rate_limit"


class CompletionAuthError(CompletionError):
    kind = "auth"


class CompletionUnavailableError(CompletionError):
    kind = "unavailable"


class LLMClient:
    def __init__(
        self,
        *,
        model: str | None = None,
        provider: str | None = None,
        api_key: str | None = None,
        base_url: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 400,
        timeout_s: int = 30,
    ) -> None:
        self.model = model
        self.provider = provider
        self.api_key = api_key
        self.base_url = base_url
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout_s = timeout_s

    def complete(self, messages: Sequence[Dict[str, str]]) -> str:
        if self.provider == "openai":
            return self._call_openai(messages=messages)
        raise CompletionUnavailableError("LLM provider not configured")

    def _call_openai(self, *, messages: Sequence[Dict[str, str]]) -> str:
        if not self.api_key:
            raise CompletionAuthError("LLM_API_KEY is not set")
        try:
            import openai
            from langchain_core.messages import AIMessage, HumanMessage, SystemMessage
            from langchain_openai import ChatOpenAI
        except Exception as e:
            raise CompletionUnavailableError(f"LangChain OpenAI client not available: {e}") from e

        roles = {"system": SystemMessage, "assistant": AIMessage}
        lc_messages: List = [
            roles.get(m.get("role"), HumanMessage)(content=m.get("content") or "")
            for m in messages
        ]

        logger.info(
            "LLM call start provider=openai model=%s messages=%s",
            self.model,
            len(lc_messages),
        )
        llm = ChatOpenAI(
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            timeout=self.timeout_s,
            api_key=self.api_key,
            base_url=self.base_url,
        )
        try:
            response = llm.invoke(lc_messages)
        except openai.RateLimitError as e:
            raise CompletionRateLimitError(str(e)) from e
        except (openai.AuthenticationError, openai.PermissionDeniedError) as e:
            raise CompletionAuthError(str(e)) from e
        except openai.OpenAIError as e:
            raise CompletionUnavailableError(str(e)) from e

        output_text = response.content
        if not output_text:
            raise CompletionUnavailableError("completion returned empty content")
        if not isinstance(output_text, str):
            output_text = json.dumps(output_text)
        logger.info("LLM call success provider=openai output_len=%s", len(output_text))
        return output_text
