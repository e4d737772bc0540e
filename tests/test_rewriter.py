"""
Tests for the rewriter and the LLM provider factory.
"""
import asyncio

from blogrefresh.config import ExtractionConfig
from blogrefresh.errors import RewriteFailure, RewriteTimeout
from blogrefresh.generation import (
    EMPTY_COMPLETION_SENTINEL,
    FAILURE_SENTINEL,
    FALLBACK_NOTICE,
    MockLLMProvider,
    OpenAIProvider,
    Rewriter,
    build_rewrite_prompt,
    create_llm_provider,
)


def _rewrite(rewriter, corpus="Source: https://a.test/\nTitle: A\nContent: text..."):
    return asyncio.run(rewriter.rewrite("Chatbots 101", "Original body", corpus))


class TestBuildRewritePrompt:
    """Tests for prompt assembly."""

    def test_inputs_truncated(self):
        config = ExtractionConfig(original_prompt_chars=50, corpus_prompt_chars=100)
        prompt = build_rewrite_prompt("Title", "o" * 80, "c" * 300, config)
        assert 'Original Content (truncated): "' + "o" * 50 + '..."' in prompt
        assert "o" * 51 not in prompt
        assert "c" * 100 in prompt
        assert "c" * 101 not in prompt

    def test_title_included(self):
        prompt = build_rewrite_prompt("Chatbots 101", "body", "corpus")
        assert 'Original Article Title: "Chatbots 101"' in prompt
        assert prompt.endswith("Return ONLY the markdown content of the new article.")


class TestRewriter:
    """Tests for rewrite outcomes."""

    def test_empty_corpus_keeps_original_without_calling_provider(self):
        provider = MockLLMProvider()
        result = _rewrite(Rewriter(provider), corpus="")
        assert result == "Original body" + FALLBACK_NOTICE
        assert provider.calls == []

    def test_successful_rewrite(self):
        provider = MockLLMProvider(response="# New body")
        assert _rewrite(Rewriter(provider)) == "# New body"
        assert len(provider.calls) == 1
        assert "Chatbots 101" in provider.calls[0]

    def test_empty_completion(self):
        assert _rewrite(Rewriter(MockLLMProvider(response=""))) == EMPTY_COMPLETION_SENTINEL

    def test_service_failure(self):
        provider = MockLLMProvider(error=RewriteFailure("rate limited"))
        assert _rewrite(Rewriter(provider)) == FAILURE_SENTINEL

    def test_service_timeout(self):
        provider = MockLLMProvider(error=RewriteTimeout("no answer"))
        assert _rewrite(Rewriter(provider)) == FAILURE_SENTINEL

    def test_unexpected_error(self):
        provider = MockLLMProvider(error=KeyError("choices"))
        assert _rewrite(Rewriter(provider)) == FAILURE_SENTINEL

    def test_slow_provider_bounded(self):
        provider = MockLLMProvider(response="late", delay=0.5)
        assert _rewrite(Rewriter(provider, timeout_seconds=0.05)) == FAILURE_SENTINEL


class TestCreateLLMProvider:
    """Tests for provider selection."""

    def test_missing_key_uses_mock(self):
        provider = create_llm_provider({"provider": "openai", "api_key": None})
        assert isinstance(provider, MockLLMProvider)

    def test_unknown_provider_uses_mock(self):
        assert isinstance(create_llm_provider({"provider": "acme"}), MockLLMProvider)

    def test_openai_with_key(self):
        provider = create_llm_provider(
            {"provider": "openai", "api_key": "sk-test", "model": "gpt-4o-mini"},
            timeout=5.0,
        )
        assert isinstance(provider, OpenAIProvider)
        assert provider.model == "gpt-4o-mini"
        assert provider.get_usage_stats()["api_calls"] == 0
