from typing import Optional

import openai
from openai import AsyncOpenAI

from core.config import DEFAULT_MODEL, DEFAULT_TIMEOUT_SECONDS
from core.errors import ConfigurationError, UpstreamError, UpstreamKind
from core.logging_config import get_logger

log = get_logger(__name__)

TEMPERATURE = 0.7
MAX_TOKENS = 500
EMPTY_REPLY = "I'm sorry, I couldn't process your request."


def classify_provider_error(exc: openai.OpenAIError) -> UpstreamKind:
    if isinstance(exc, openai.RateLimitError):
        if getattr(exc, "code", None) == "insufficient_quota":
            return UpstreamKind.QUOTA
        return UpstreamKind.RATE_LIMIT
    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return UpstreamKind.INVALID_CREDENTIAL
    return UpstreamKind.UNAVAILABLE


class ChatModel:
    """Single-turn chat completion: system prompt + one user message -> text."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str = DEFAULT_MODEL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: Optional[AsyncOpenAI] = None,
    ):
        if client is None:
            if not api_key:
                raise ConfigurationError("OpenAI API key is not configured")
            client = AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0)
        self.client = client
        self.model = model

    async def complete(self, system_prompt: str, message: str) -> str:
        try:
            completion = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": message},
                ],
                temperature=TEMPERATURE,
                max_tokens=MAX_TOKENS,
            )
        except openai.OpenAIError as e:
            kind = classify_provider_error(e)
            log.error("llm_request_failed", kind=kind.value, model=self.model, error=str(e))
            raise UpstreamError(kind) from e

        choices = completion.choices or []
        content = choices[0].message.content if choices else None
        return content or EMPTY_REPLY
