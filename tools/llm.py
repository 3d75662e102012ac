# tools/llm.py
"""Structured (JSON-object) text generation backed by Gemini via LangChain."""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Optional

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from errors import ConfigurationError, GenerationUpstreamError, MalformedResponseError

logger = logging.getLogger(__name__)


class GeminiJsonClient:
    """Generative-text collaborator that always answers with a JSON object.

    The chat model runs in JSON response mode (``response_mime_type``), so the
    reply text is expected to be a single JSON document. A pre-built ``llm``
    may be injected instead of an API key (tests, alternative providers).
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        model_name: str = "gemini-2.0-flash",
        temperature: float = 0.8,
        llm: Optional[BaseChatModel] = None,
    ) -> None:
        if llm is None:
            if not api_key:
                raise ConfigurationError("GOOGLE_API_KEY or GEMINI_API_KEY not configured")
            llm = ChatGoogleGenerativeAI(
                model=model_name,
                temperature=temperature,
                google_api_key=api_key,
                response_mime_type="application/json",
            )
        self.model_name = model_name
        self._llm = llm

    async def generate_structured_text(self, system_prompt: str, user_prompt: str) -> Dict[str, Any]:
        messages = [SystemMessage(content=system_prompt), HumanMessage(content=user_prompt)]
        try:
            response = await self._llm.ainvoke(messages)
        except Exception as exc:  # provider SDKs raise a wide variety of error types
            logger.error(f"Generative model call failed: {exc}")
            raise GenerationUpstreamError(str(exc)) from exc

        content = getattr(response, "content", "")
        if isinstance(content, list):
            content = "".join(
                part.get("text", "") if isinstance(part, dict) else str(part) for part in content
            )
        return parse_json_object(content)


def parse_json_object(text: str) -> Dict[str, Any]:
    """Decode a JSON object, tolerating a surrounding Markdown code fence."""
    text = (text or "").strip()
    if not text:
        raise MalformedResponseError("Generative model returned an empty response.")
    try:
        value = json.loads(text)
    except json.JSONDecodeError as exc:
        fenced = re.search(r"```(?:json)?\s*(.*?)```", text, flags=re.DOTALL)
        if fenced is None:
            raise MalformedResponseError(f"Generative model returned invalid JSON: {exc}") from exc
        try:
            value = json.loads(fenced.group(1))
        except json.JSONDecodeError as fenced_exc:
            raise MalformedResponseError(
                f"Generative model returned invalid JSON: {fenced_exc}"
            ) from fenced_exc
    if not isinstance(value, dict):
        raise MalformedResponseError(
            f"Expected a JSON object, got {type(value).__name__}."
        )
    return value
