"""Rate-limited chat-completion client for OpenAI-compatible APIs."""

import logging
from typing import Any

from openai import APIStatusError, APITimeoutError, AsyncOpenAI

from thesis_research.errors import ConfigError, HttpError, RequestTimeout
from thesis_research.fetchers.http import RateLimiter
from thesis_research.models.config import LLMConfig, RateLimitConfig


logger = logging.getLogger(__name__)

PERPLEXITY_BASE_URL = "https://api.perplexity.ai"


class LLMClient:
    """Thin wrapper over ``AsyncOpenAI.chat.completions``.

    Owns its own rate limiter. The SDK's built-in retries are disabled;
    retrying is done by the caller's RetryPolicy.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        *,
        base_url: str | None = None,
        rate_limit: RateLimitConfig | None = None,
        timeout: float = 60.0,
        client: Any = None,
    ):
        self.model = model
        self.base_url = base_url
        self.timeout = timeout
        self.client = client or AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
        )
        self.rate_limiter = RateLimiter(rate_limit) if rate_limit is not None else None

    @classmethod
    def from_config(cls, config: LLMConfig, client: Any = None) -> "LLMClient":
        api_key = config.resolve_api_key()
        if not api_key and client is None:
            raise ConfigError(
                f"No API key for model {config.model}; set {config.api_key_env or 'api_key'}"
            )
        return cls(
            api_key or "",
            config.model,
            base_url=config.base_url,
            rate_limit=config.rate_limit,
            timeout=config.timeout,
            client=client,
        )

    @classmethod
    def perplexity(cls, api_key: str, model: str = "sonar-pro", **kwargs: Any) -> "LLMClient":
        return cls(api_key, model, base_url=PERPLEXITY_BASE_URL, **kwargs)

    async def complete(
        self,
        system: str,
        user: str,
        *,
        temperature: float,
        max_tokens: int,
        json_mode: bool = False,
    ) -> str:
        """Run one chat completion and return the message text.

        Returns an empty string when the response carries no content.

        Raises:
            RateLimitExceeded: If the limiter's daily cap is reached
            RequestTimeout: If the call exceeded the client timeout
            HttpError: If the API answered with an error status
        """
        if self.rate_limiter is not None:
            await self.rate_limiter.acquire()

        kwargs: dict[str, Any] = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                temperature=temperature,
                max_tokens=max_tokens,
                **kwargs,
            )
        except APITimeoutError as e:
            raise RequestTimeout(self.base_url or "openai", self.timeout) from e
        except APIStatusError as e:
            raise HttpError(e.status_code, e.response.reason_phrase, e.response.text) from e

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    async def close(self) -> None:
        await self.client.close()
