"""LLM provider interface and implementations."""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import openai
from openai import OpenAI

from ..errors import RewriteFailure, RewriteTimeout

logger = logging.getLogger(__name__)


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    @abstractmethod
    def complete(self, prompt: str) -> str:
        """
        Run a single prompt through the model.

        Args:
            prompt: Complete user prompt

        Returns:
            Generated text (may be empty)

        Raises:
            RewriteFailure: The service call failed
        """

    @abstractmethod
    def get_usage_stats(self) -> Dict:
        """Get usage statistics."""


class OpenAIProvider(LLMProvider):
    """OpenAI implementation of LLM provider."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4-turbo",
        base_url: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 4000,
        timeout: float = 120.0,
    ) -> None:
        """
        Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key
            model: Model name to use
            base_url: Custom base URL (OpenAI-compatible servers, tests)
            temperature: Sampling temperature
            max_tokens: Completion token cap
            timeout: Per-request timeout in seconds
        """
        # Failed calls are not retried; the pipeline degrades instead
        self.client = OpenAI(api_key=api_key, base_url=base_url, timeout=timeout, max_retries=0)
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.prompt_tokens = 0
        self.completion_tokens = 0
        self.api_calls = 0

        # Token cost estimates (per 1K tokens)
        self.cost_per_1k_tokens = {
            "gpt-4-turbo": {"input": 0.01, "output": 0.03},
            "gpt-4o": {"input": 0.005, "output": 0.015},
            "gpt-4o-mini": {"input": 0.00015, "output": 0.0006},
            "gpt-3.5-turbo": {"input": 0.001, "output": 0.002},
        }

    def complete(self, prompt: str) -> str:
        """Single chat completion request."""
        self.api_calls += 1
        started = time.monotonic()
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except openai.APITimeoutError as e:
            raise RewriteTimeout(f"{self.model} request timed out") from e
        except openai.OpenAIError as e:
            raise RewriteFailure(f"{self.model} request failed: {e}") from e

        if response.usage:
            self.prompt_tokens += response.usage.prompt_tokens
            self.completion_tokens += response.usage.completion_tokens

        logger.debug("Completion from %s in %.1fs", self.model, time.monotonic() - started)

        if not response.choices:
            return ""
        return (response.choices[0].message.content or "").strip()

    def get_usage_stats(self) -> Dict:
        """Get usage statistics."""
        estimated_cost = 0.0
        rates = self.cost_per_1k_tokens.get(self.model)
        if rates:
            estimated_cost = (
                (self.prompt_tokens / 1000) * rates["input"]
                + (self.completion_tokens / 1000) * rates["output"]
            )

        return {
            "total_tokens": self.prompt_tokens + self.completion_tokens,
            "api_calls": self.api_calls,
            "estimated_cost": estimated_cost,
            "model": self.model,
        }


class MockLLMProvider(LLMProvider):
    """Mock LLM provider for offline runs and tests."""

    def __init__(
        self,
        response: Optional[str] = None,
        error: Optional[Exception] = None,
        delay: float = 0.0,
    ) -> None:
        """
        Initialize mock provider.

        Args:
            response: Fixed completion text (default: a canned article)
            error: Exception to raise from every call
            delay: Seconds to block before answering
        """
        self.response = response
        self.error = error
        self.delay = delay
        self.calls: List[str] = []

    def complete(self, prompt: str) -> str:
        """Mock completion."""
        self.calls.append(prompt)
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if self.response is not None:
            return self.response

        return (
            "# Refreshed article\n\n"
            "[Mock rewrite based on competitor content]\n\n"
            "## Sources\n\n"
            "- (see reference links)"
        )

    def get_usage_stats(self) -> Dict:
        """Get mock usage statistics."""
        return {
            "total_tokens": len(self.calls) * 100,
            "api_calls": len(self.calls),
            "estimated_cost": 0.0,
            "model": "mock",
        }


def create_llm_provider(llm_config: Dict[str, Any], timeout: float = 120.0) -> LLMProvider:
    """Build the configured provider, falling back to the mock one."""
    provider = llm_config.get("provider")

    if provider == "openai":
        api_key = llm_config.get("api_key")
        if not api_key:
            logger.warning("No OpenAI API key found. Using mock LLM provider.")
            return MockLLMProvider()

        return OpenAIProvider(
            api_key=api_key,
            model=llm_config.get("model", "gpt-4-turbo"),
            base_url=llm_config.get("base_url"),
            temperature=llm_config.get("temperature", 0.7),
            max_tokens=llm_config.get("max_tokens", 4000),
            timeout=timeout,
        )

    if provider != "mock":
        logger.warning("Unknown LLM provider %r. Using mock provider.", provider)
    return MockLLMProvider()
