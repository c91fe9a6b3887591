"""Mock LLM provider for testing."""

from collections import deque
from typing import Any

from navgraph.providers.llm.base import (
    LLMMessage,
    LLMProvider,
    LLMResponse,
    TokenUsage,
)


class MockLLMProvider(LLMProvider):
    """Scripted LLM provider.

    Responses are served in this order:
    1. Queued responses (``queue_response``), first in first out
    2. Trigger matches on the last message content (``set_response``)
    3. ``default_response``

    A queued exception is raised instead of returned.
    """

    def __init__(
        self,
        default_response: str = "Mock response",
        default_model: str = "mock-model",
        responses: dict[str, str] | None = None,
    ) -> None:
        self._default_response = default_response
        self._default_model = default_model
        self._responses = responses or {}
        self._queue: deque[str | Exception] = deque()
        self._call_history: list[dict[str, Any]] = []

    @property
    def provider_name(self) -> str:
        return "mock"

    @property
    def call_history(self) -> list[dict[str, Any]]:
        """History of calls for test assertions."""
        return self._call_history

    def clear_history(self) -> None:
        self._call_history.clear()

    def set_response(self, trigger: str, response: str) -> None:
        self._responses[trigger] = response

    def queue_response(self, response: str | Exception) -> None:
        self._queue.append(response)

    async def generate(
        self,
        messages: list[LLMMessage],
        *,
        model: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.7,
        **kwargs: Any,
    ) -> LLMResponse:
        self._call_history.append({
            "messages": messages,
            "model": model or self._default_model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "kwargs": kwargs,
        })

        if self._queue:
            queued = self._queue.popleft()
            if isinstance(queued, Exception):
                raise queued
            content = queued
        elif messages and messages[-1].content in self._responses:
            content = self._responses[messages[-1].content]
        else:
            content = self._default_response

        prompt_tokens = sum(len(m.content) // 4 for m in messages)
        completion_tokens = len(content) // 4
        return LLMResponse(
            content=content,
            model=model or self._default_model,
            finish_reason="stop",
            usage=TokenUsage(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=prompt_tokens + completion_tokens,
            ),
        )
