"""LLM Executor - routes generation calls to a model, with fallbacks.

Model string format:
    openrouter/anthropic/claude-3-haiku -> Agno OpenRouter(id="anthropic/claude-3-haiku")
    anthropic/claude-3-haiku            -> Agno Claude(id="claude-3-haiku")
    openai/gpt-4o-mini                  -> Agno OpenAIChat(id="gpt-4o-mini")
    groq/llama-3.1-70b                  -> Agno Groq(id="llama-3.1-70b")
    mock/anything                       -> registered "mock" provider

Providers registered by prefix (``providers={"mock": MockLLMProvider()}``)
take precedence over Agno routing, which is how tests script answers.
"""

from __future__ import annotations

import asyncio
import time
from contextvars import ContextVar
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from uuid import UUID

from navgraph.observability.logging import get_logger
from navgraph.providers.llm.base import (
    LLMMessage,
    LLMProvider,
    LLMResponse,
    ProviderError,
    ProviderTimeoutError,
    RateLimitError,
)
from navgraph.providers.llm.mock import MockLLMProvider

if TYPE_CHECKING:
    from agno.agent import Agent

    from navgraph.config.models import OrchestrationConfig

logger = get_logger(__name__)


# ============================================================================
# Execution Context (avoids parameter threading)
# ============================================================================


@dataclass
class ExecutionContext:
    """Who an LLM call is made for; attached to response metadata."""

    session_id: UUID
    graph_id: str
    node_id: str | None = None
    step: str | None = None


_execution_context: ContextVar[ExecutionContext | None] = ContextVar(
    "execution_context", default=None
)


def set_execution_context(ctx: ExecutionContext) -> None:
    _execution_context.set(ctx)


def get_execution_context() -> ExecutionContext | None:
    return _execution_context.get()


def clear_execution_context() -> None:
    _execution_context.set(None)


# ============================================================================
# LLM Executor
# ============================================================================


class LLMExecutor:
    """Executes LLM calls against a primary model and a fallback chain.

    Example:
        executor = LLMExecutor(
            model="openrouter/anthropic/claude-3-haiku",
            fallback_models=["groq/llama-3.1-70b"],
            timeout=10.0,
        )
        response = await executor.generate([LLMMessage(role="user", content="Hi")])
    """

    def __init__(
        self,
        model: str,
        fallback_models: list[str] | None = None,
        timeout: float = 60.0,
        step_name: str | None = None,
        providers: dict[str, LLMProvider] | None = None,
    ) -> None:
        self._model = model
        self._fallback_models = fallback_models or []
        self._timeout = timeout
        self._step_name = step_name
        self._providers: dict[str, LLMProvider] = {"mock": MockLLMProvider()}
        self._providers.update(providers or {})
        self._agents: dict[str, Agent] = {}

    @property
    def model(self) -> str:
        return self._model

    @property
    def models(self) -> list[str]:
        return [self._model] + self._fallback_models

    async def generate(
        self,
        messages: list[LLMMessage],
        *,
        max_tokens: int = 1024,
        temperature: float = 0.7,
        **kwargs: Any,
    ) -> LLMResponse:
        """Generate with the primary model, then each fallback model.

        Raises:
            ProviderError: If every model fails
        """
        last_error: Exception | None = None
        ctx = get_execution_context()

        for model in self.models:
            try:
                response = await asyncio.wait_for(
                    self._generate_with_model(
                        model=model,
                        messages=messages,
                        max_tokens=max_tokens,
                        temperature=temperature,
                        **kwargs,
                    ),
                    timeout=self._timeout,
                )
            except TimeoutError:
                logger.warning("executor_timeout", model=model, step=self._step_name)
                last_error = ProviderTimeoutError(f"{model} timed out after {self._timeout}s")
                continue
            except RateLimitError as e:
                logger.warning("executor_rate_limited", model=model, step=self._step_name)
                last_error = e
                continue
            except ProviderError as e:
                logger.warning(
                    "executor_provider_error",
                    model=model,
                    step=self._step_name,
                    error=str(e),
                )
                last_error = e
                continue

            if ctx:
                response.metadata["session_id"] = str(ctx.session_id)
                response.metadata["graph_id"] = ctx.graph_id
                response.metadata["node_id"] = ctx.node_id
                response.metadata["step"] = self._step_name or ctx.step
            return response

        raise ProviderError(
            f"All models failed for step {self._step_name}. "
            f"Tried: {self.models}. Last error: {last_error}"
        )

    async def _generate_with_model(
        self,
        model: str,
        messages: list[LLMMessage],
        max_tokens: int,
        temperature: float,
        **kwargs: Any,
    ) -> LLMResponse:
        provider_type, api_model = self._parse_model(model)

        provider = self._providers.get(provider_type)
        if provider is not None:
            return await provider.generate(
                messages,
                model=api_model,
                max_tokens=max_tokens,
                temperature=temperature,
                **kwargs,
            )

        agent = self._get_or_create_agent(model)
        system_prompt = next((m.content for m in messages if m.role == "system"), None)
        if system_prompt:
            agent.instructions = [system_prompt]

        start_time = time.perf_counter()
        try:
            run_response = await agent.arun(self._format_messages_for_agno(messages))
        except Exception as e:
            error_msg = str(e).lower()
            if "rate" in error_msg and "limit" in error_msg:
                raise RateLimitError(f"Rate limited: {e}") from e
            raise ProviderError(f"Agno execution failed: {e}") from e

        latency_ms = (time.perf_counter() - start_time) * 1000
        content = run_response.content if run_response.content else ""

        logger.debug(
            "executor_generate_complete",
            model=model,
            step=self._step_name,
            latency_ms=round(latency_ms, 2),
            content_length=len(content),
        )

        return LLMResponse(
            content=str(content),
            model=model,
            finish_reason="stop",
            metadata={"latency_ms": latency_ms, "provider": provider_type},
        )

    # ========================================================================
    # Internal: Agno-based execution
    # ========================================================================

    def _get_or_create_agent(self, model: str) -> Agent:
        if model in self._agents:
            return self._agents[model]

        from agno.agent import Agent

        agent = Agent(
            model=self._create_agno_model(model),
            markdown=False,
        )
        self._agents[model] = agent
        return agent

    def _create_agno_model(self, model: str) -> Any:
        provider_type, api_model = self._parse_model(model)

        if provider_type == "openrouter":
            from agno.models.openrouter import OpenRouter

            return OpenRouter(id=api_model)

        if provider_type == "anthropic":
            from agno.models.anthropic import Claude

            return Claude(id=api_model)

        if provider_type == "openai":
            from agno.models.openai import OpenAIChat

            return OpenAIChat(id=api_model)

        if provider_type == "groq":
            from agno.models.groq import Groq

            return Groq(id=api_model)

        from agno.models.openrouter import OpenRouter

        logger.warning(
            "unknown_provider_defaulting_to_openrouter",
            model=model,
            provider_type=provider_type,
        )
        return OpenRouter(id=model)

    def _format_messages_for_agno(self, messages: list[LLMMessage]) -> str:
        """Agno agents take one string; system messages go to instructions."""
        turns = [m for m in messages if m.role != "system"]
        if len(turns) == 1:
            return turns[0].content
        return "\n\n".join(
            f"{'User' if m.role == 'user' else 'Assistant'}: {m.content}" for m in turns
        )

    def _parse_model(self, model: str) -> tuple[str, str]:
        """Split a model string into (provider_type, api_model)."""
        parts = model.split("/")
        if len(parts) >= 3 and parts[0] == "openrouter":
            return "openrouter", "/".join(parts[1:])
        if len(parts) >= 2:
            return parts[0], "/".join(parts[1:])
        return "mock", model


def create_executor_from_config(
    config: OrchestrationConfig,
    providers: dict[str, LLMProvider] | None = None,
) -> LLMExecutor:
    """Build the node-selection executor from orchestration settings."""
    return LLMExecutor(
        model=config.model,
        fallback_models=config.fallback_models,
        timeout=config.timeout,
        step_name="node_selection",
        providers=providers,
    )
