"""
Chat-completions client for the OpenAI-compatible LLM endpoint (Groq by default).
"""

import json
import re
from typing import Any, Optional

from loguru import logger
from openai import AsyncOpenAI

from .config import Settings, get_settings
from .errors import LLMError

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)


def strip_code_fences(text: str) -> str:
    """Return the body of the first markdown code block, or the text itself."""
    text = text.strip()
    match = _FENCE_RE.search(text)
    if match:
        return match.group(1).strip()
    return text


def parse_json_response(text: str) -> Any:
    """
    Parse a JSON object or array out of an LLM reply.

    Handles markdown code blocks and chatter around the payload.
    """
    if not text or not text.strip():
        raise LLMError("Empty response from LLM")

    body = strip_code_fences(text)
    try:
        return json.loads(body)
    except json.JSONDecodeError:
        pass

    # Fall back to the outermost object or array in the text
    for opener, closer in (("{", "}"), ("[", "]")):
        start = body.find(opener)
        end = body.rfind(closer)
        if start != -1 and end > start:
            try:
                return json.loads(body[start : end + 1])
            except json.JSONDecodeError:
                continue

    raise LLMError("LLM did not return valid JSON")


class LLMClient:
    """Thin wrapper around AsyncOpenAI chat completions."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.settings = settings or get_settings()
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        """Get or create OpenAI client."""
        if self._client is None:
            if not self.settings.llm_configured:
                raise LLMError("LLM_API_KEY is not set")
            self._client = AsyncOpenAI(
                api_key=self.settings.llm_api_key.get_secret_value(),
                base_url=self.settings.llm_base_url,
            )
        return self._client

    @property
    def model(self) -> str:
        return self.settings.llm_model

    async def complete(
        self,
        messages: list[dict[str, str]],
        temperature: float = 0.7,
        max_tokens: int = 4096,
    ) -> str:
        """Run a chat completion and return the message text ("" when empty)."""
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        if not response.choices:
            return ""
        content = response.choices[0].message.content
        return content.strip() if content else ""

    async def complete_json(
        self,
        messages: list[dict[str, str]],
        temperature: float = 0.3,
        max_tokens: int = 4096,
    ) -> Any:
        """Run a chat completion and parse the reply as JSON."""
        content = await self.complete(
            messages, temperature=temperature, max_tokens=max_tokens
        )
        logger.debug(f"LLM returned {len(content)} chars")
        return parse_json_response(content)
