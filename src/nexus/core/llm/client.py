"""
Completion capability for document generation.

The generator only needs one operation: send a system prompt and a user
prompt, get text back. ``CompletionClient`` is that protocol; tests supply
scripted fakes and production uses ``ChatCompletionClient``, which speaks
the OpenAI chat-completions protocol over httpx (OpenRouter by default).

Example:
    >>> from nexus.core.config import load_config
    >>> client = ChatCompletionClient.from_config(load_config().llm)
    >>> text = client.complete("You are terse.", "Say hi.")
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from typing import Any, Protocol

import httpx

from nexus.core.config.models import LlmConfig
from nexus.core.llm.retry import RetryPolicy, call_with_retry

logger = logging.getLogger(__name__)

PROVIDER_BASE_URLS: dict[str, str] = {
    "openrouter": "https://openrouter.ai/api/v1",
    "openai": "https://api.openai.com/v1",
}


class CompletionError(Exception):
    """Raised when the completion capability fails (HTTP, timeout, bad response)."""

    pass


class CompletionClient(Protocol):
    """Anything that can turn a prompt pair into text."""

    def complete(self, system_prompt: str, user_prompt: str) -> str: ...

    def close(self) -> None: ...


class ChatCompletionClient:
    """OpenAI-compatible chat-completions client."""

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        base_url: str = PROVIDER_BASE_URLS["openrouter"],
        timeout: float = 120.0,
        max_tokens: int = 4096,
        retry: RetryPolicy | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.model = model
        self.max_tokens = max_tokens
        self.retry = retry or RetryPolicy()
        self._url = f"{base_url.rstrip('/')}/chat/completions"
        self._headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        self._http = http_client or httpx.Client(timeout=timeout)

    @classmethod
    def from_config(
        cls,
        config: LlmConfig,
        environ: Mapping[str, str] | None = None,
        http_client: httpx.Client | None = None,
    ) -> ChatCompletionClient:
        """
        Build a client from LLM settings.

        Raises:
            CompletionError: If the API key env var is not set.
        """
        env = os.environ if environ is None else environ
        key_env = config.key_env
        api_key = env.get(key_env, "").strip()
        if not api_key:
            raise CompletionError(
                f"No API key found: set {key_env} in the environment or a .env file"
            )
        return cls(
            api_key=api_key,
            model=config.model,
            base_url=config.base_url or PROVIDER_BASE_URLS[config.provider],
            timeout=config.timeout_seconds,
            max_tokens=config.max_tokens,
            retry=RetryPolicy(max_retries=config.max_retries),
            http_client=http_client,
        )

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        """
        Send one chat completion request.

        Raises:
            CompletionError: On HTTP errors, timeouts or an unexpected response shape.
        """
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "max_tokens": self.max_tokens,
        }

        def _post() -> httpx.Response:
            response = self._http.post(self._url, headers=self._headers, json=payload)
            response.raise_for_status()
            return response

        logger.debug("Requesting completion from %s (model=%s)", self._url, self.model)
        try:
            response = call_with_retry(_post, self.retry)
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise CompletionError(
                f"Completion request failed ({status}): {_error_detail(e.response)}"
            ) from e
        except httpx.TimeoutException as e:
            raise CompletionError(f"Completion request timed out: {e}") from e
        except httpx.HTTPError as e:
            raise CompletionError(f"Completion request failed: {e}") from e

        return _extract_content(response)

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        self._http.close()


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        return str(body["error"].get("message", body["error"]))
    return str(body)[:200]


def _extract_content(response: httpx.Response) -> str:
    try:
        body: Any = response.json()
    except ValueError as e:
        raise CompletionError("Completion response is not valid JSON") from e

    try:
        content = body["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise CompletionError("Completion response has no choices[0].message.content") from e

    if not isinstance(content, str):
        raise CompletionError("Completion response content is not text")
    return content
