"""LLM providers for node selection.

The primary interface is LLMExecutor, which routes a model string to a
registered provider or to an Agno model class, with fallback models.
"""

from navgraph.providers.llm.base import (
    AuthenticationError,
    ContentFilterError,
    LLMMessage,
    LLMProvider,
    LLMResponse,
    ModelError,
    ProviderError,
    ProviderTimeoutError,
    RateLimitError,
    TokenUsage,
)
from navgraph.providers.llm.executor import (
    ExecutionContext,
    LLMExecutor,
    clear_execution_context,
    create_executor_from_config,
    get_execution_context,
    set_execution_context,
)
from navgraph.providers.llm.mock import MockLLMProvider

__all__ = [
    "LLMMessage",
    "LLMResponse",
    "TokenUsage",
    "LLMProvider",
    "ProviderError",
    "AuthenticationError",
    "RateLimitError",
    "ModelError",
    "ContentFilterError",
    "ProviderTimeoutError",
    "LLMExecutor",
    "ExecutionContext",
    "set_execution_context",
    "get_execution_context",
    "clear_execution_context",
    "create_executor_from_config",
    "MockLLMProvider",
]
