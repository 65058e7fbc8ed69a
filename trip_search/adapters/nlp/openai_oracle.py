"""OpenAI chat-completion adapter for the semantic oracle.

This adapter implements ChatOraclePort on top of the async OpenAI
client, with:
- Configuration injection (model, key, limits)
- Lazy client creation
- Transport errors mapped to typed domain errors
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence

from openai import APITimeoutError, AsyncOpenAI, OpenAIError

from ...config import OracleConfig, get_config
from ...domain.errors import InterpreterMalformedError, InterpreterUnavailableError

PROVIDER = "openai"


@dataclass
class OpenAIChatOracle:
    """Chat oracle backed by the OpenAI chat completions API.

    Attributes:
        config: Oracle configuration
    """

    config: OracleConfig = field(default_factory=lambda: get_config().oracle)

    _client: Optional[AsyncOpenAI] = field(default=None, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def _get_client(self) -> AsyncOpenAI:
        """Get or lazily create the async client.

        Raises:
            InterpreterUnavailableError: If the oracle is disabled or the
                client cannot be configured (e.g. no API key).
        """
        if not self.config.enabled:
            raise InterpreterUnavailableError(
                "Semantic oracle disabled by configuration",
                provider=PROVIDER,
            )

        if self._client is not None:
            return self._client

        self._logger.debug(
            "Initializing OpenAI client",
            extra={
                "model": self.config.model,
                "timeout": self.config.timeout_seconds,
            },
        )

        try:
            self._client = AsyncOpenAI(
                api_key=self.config.api_key,
                base_url=self.config.base_url,
                timeout=self.config.timeout_seconds,
                max_retries=0,  # one attempt per search
            )
        except OpenAIError as e:
            raise InterpreterUnavailableError(
                "OpenAI client could not be configured",
                provider=PROVIDER,
                cause=e,
            )

        return self._client

    async def complete(
        self,
        messages: Sequence[Mapping[str, str]],
        *,
        temperature: float,
        max_tokens: int,
    ) -> str:
        """Send one chat completion request.

        Args:
            messages: Chat messages with "role" and "content" keys.
            temperature: Sampling temperature.
            max_tokens: Upper bound on the response length.

        Returns:
            The text content of the first choice.

        Raises:
            InterpreterUnavailableError: On transport, auth or timeout errors.
            InterpreterMalformedError: If the reply has no content.
        """
        client = self._get_client()
        payload: Any = [dict(message) for message in messages]

        try:
            response = await client.chat.completions.create(
                model=self.config.model,
                messages=payload,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except APITimeoutError as e:
            self._logger.warning(
                "OpenAI request timed out",
                extra={"model": self.config.model},
            )
            raise InterpreterUnavailableError(
                "OpenAI request timed out", provider=PROVIDER, cause=e
            )
        except OpenAIError as e:
            self._logger.warning(
                "OpenAI request failed",
                extra={"model": self.config.model, "error": str(e)},
            )
            raise InterpreterUnavailableError(
                "OpenAI request failed", provider=PROVIDER, cause=e
            )

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            raise InterpreterMalformedError("Empty response from OpenAI")

        self._logger.debug(
            "OpenAI response received",
            extra={"model": self.config.model, "content_length": len(content)},
        )
        return content
