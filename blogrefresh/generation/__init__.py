"""Article rewriting."""

from .llm_provider import LLMProvider, MockLLMProvider, OpenAIProvider, create_llm_provider
from .rewriter import (
    EMPTY_COMPLETION_SENTINEL,
    FAILURE_SENTINEL,
    FALLBACK_NOTICE,
    Rewriter,
    build_rewrite_prompt,
)

__all__ = [
    "LLMProvider",
    "OpenAIProvider",
    "MockLLMProvider",
    "Rewriter",
    "EMPTY_COMPLETION_SENTINEL",
    "FAILURE_SENTINEL",
    "FALLBACK_NOTICE",
    "build_rewrite_prompt",
    "create_llm_provider",
]
