"""Tests for the issue analyzer."""

import os
from types import SimpleNamespace
from unittest.mock import Mock, patch

import anthropic
import httpx
import pytest
from langchain_core.messages import AIMessage

from repovibe.analyzer import IssueAnalyzer, _message_text
from repovibe.exceptions import AnalysisError
from repovibe.fallback import FALLBACK_SENTINEL, build_fallback_suggestions
from repovibe.models import Issue, Suggestions


def _llm_returning(content) -> Mock:
    llm = Mock()
    llm.invoke.return_value = AIMessage(content=content)
    return llm


class TestWithoutApiKey:
    """Analyses without credentials never call the model."""

    @patch.dict(os.environ, {}, clear=True)
    def test_returns_fallback(self, sample_issue: Issue) -> None:
        with patch("repovibe.analyzer.ChatAnthropic") as mock_chat:
            analyzer = IssueAnalyzer()
            result = analyzer.analyze_issue(sample_issue, "octo/webapp", "JavaScript")

        mock_chat.assert_not_called()
        assert not analyzer.is_configured
        assert result.raw_response == FALLBACK_SENTINEL
        assert result.suggestions == build_fallback_suggestions(sample_issue)
        assert result.success is True

    @patch.dict(os.environ, {}, clear=True)
    def test_requires_issue_and_repository(self, sample_issue: Issue) -> None:
        analyzer = IssueAnalyzer()

        with pytest.raises(ValueError, match="Issue and repository are required"):
            analyzer.analyze_issue(None, "octo/webapp")
        with pytest.raises(ValueError, match="Issue and repository are required"):
            analyzer.analyze_issue(sample_issue, "")


class TestWithModel:
    """Analyses that call the model."""

    def test_normalizes_model_output(self, sample_issue: Issue, valid_suggestions_json: str) -> None:
        raw = f"```json\n{valid_suggestions_json}\n```"
        llm = _llm_returning(raw)
        analyzer = IssueAnalyzer(llm=llm)

        result = analyzer.analyze_issue(sample_issue, "octo/webapp", "JavaScript")

        prompt = llm.invoke.call_args[0][0]
        assert "Repository: octo/webapp" in prompt
        assert "Issue Title: Add input validation to login form" in prompt
        assert result.raw_response == raw
        assert result.suggestions.problem_analysis.summary == "Login form accepts empty passwords"
        assert result.suggestions.raw_response is None

    def test_unparseable_output_still_returns_suggestions(self, sample_issue: Issue) -> None:
        analyzer = IssueAnalyzer(llm=_llm_returning("I cannot help with that."))

        result = analyzer.analyze_issue(sample_issue, "octo/webapp")

        assert isinstance(result.suggestions, Suggestions)
        assert result.suggestions.raw_response == "I cannot help with that."
        assert result.raw_response == "I cannot help with that."

    def test_content_blocks_are_joined(self, sample_issue: Issue) -> None:
        blocks = [{"type": "text", "text": '{"contributionTips": '}, {"type": "text", "text": '["Be kind"]}'}]
        analyzer = IssueAnalyzer(llm=_llm_returning(blocks))

        result = analyzer.analyze_issue(sample_issue, "octo/webapp")

        assert result.suggestions.contribution_tips == ["Be kind"]

    @pytest.mark.parametrize("content", ["", "   \n", []])
    def test_empty_output_raises(self, sample_issue: Issue, content) -> None:
        analyzer = IssueAnalyzer(llm=_llm_returning(content))

        with pytest.raises(AnalysisError, match="No response"):
            analyzer.analyze_issue(sample_issue, "octo/webapp")

    def test_transport_error_raises_once(self, sample_issue: Issue) -> None:
        llm = Mock()
        llm.invoke.side_effect = ConnectionError("connection reset")
        analyzer = IssueAnalyzer(llm=llm)

        with pytest.raises(AnalysisError, match="connection reset"):
            analyzer.analyze_issue(sample_issue, "octo/webapp")

        assert llm.invoke.call_count == 1

    def test_api_status_error_keeps_status_code(self, sample_issue: Issue) -> None:
        request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        response = httpx.Response(529, request=request)
        llm = Mock()
        llm.invoke.side_effect = anthropic.APIStatusError("Overloaded", response=response, body=None)
        analyzer = IssueAnalyzer(llm=llm)

        with pytest.raises(AnalysisError) as exc_info:
            analyzer.analyze_issue(sample_issue, "octo/webapp")

        assert exc_info.value.status_code == 529
        assert "Overloaded" in str(exc_info.value)


class TestModelConstruction:
    """The ChatAnthropic model is built lazily from config."""

    def test_built_with_fixed_sampling(self, sample_issue: Issue) -> None:
        with patch("repovibe.analyzer.ChatAnthropic") as mock_chat:
            mock_chat.return_value.invoke.return_value = AIMessage(content='{"a": 1}')
            analyzer = IssueAnalyzer(api_key="test-key")

            mock_chat.assert_not_called()
            analyzer.analyze_issue(sample_issue, "octo/webapp")
            analyzer.analyze_issue(sample_issue, "octo/webapp")

        mock_chat.assert_called_once()
        kwargs = mock_chat.call_args.kwargs
        assert kwargs["api_key"] == "test-key"
        assert kwargs["temperature"] == 0.7
        assert kwargs["top_p"] == 0.95
        assert kwargs["top_k"] == 40
        assert kwargs["max_tokens"] == 2048

    @patch.dict(os.environ, {"ANTHROPIC_API_KEY": "env-key"})
    def test_reads_key_from_environment(self) -> None:
        analyzer = IssueAnalyzer()
        assert analyzer.api_key == "env-key"
        assert analyzer.is_configured


class TestMessageText:
    def test_plain_string(self) -> None:
        assert _message_text("hello") == "hello"

    def test_ignores_non_text_blocks(self) -> None:
        message = SimpleNamespace(content=[{"type": "text", "text": "a"}, {"type": "tool_use", "id": "1"}])
        assert _message_text(message) == "a"
