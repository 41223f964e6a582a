"""
AI issue analysis using LangChain and Claude.

=============================================================================
THE PIPELINE
=============================================================================

    issue + repository + language
            |
            v
    API key configured? --no--> generic fallback suggestions
            |
           yes
            v
    build prompt (prompts.py)
            |
            v
    ChatAnthropic.invoke(prompt)  --error / empty--> AnalysisError
            |
            v
    normalize_response(text) (normalizer.py)
            |
            v
    AnalysisResult(suggestions, raw_response=text)

Note what is NOT here:
- No retries. A failed call is reported once, and the caller decides
  whether to retry or show generic guidance.
- No output parser in the chain. LangChain's PydanticOutputParser raises
  on malformed JSON; our normalizer repairs what it can and always
  returns something usable.
- No shared state. Each call is independent, so one IssueAnalyzer can
  serve any number of requests.

=============================================================================
"""

import logging
import os
from typing import Any, Optional

import anthropic
from langchain_anthropic import ChatAnthropic
from dotenv import load_dotenv

from .config import (
    API_KEY_ENV_VAR,
    MODEL_NAME,
    TEMPERATURE,
    TOP_P,
    TOP_K,
    MAX_TOKENS
)
from .exceptions import AnalysisError
from .fallback import FALLBACK_SENTINEL, build_fallback_suggestions
from .models import AnalysisResult, Issue
from .normalizer import normalize_response
from .prompts import build_analysis_prompt

load_dotenv()

logger = logging.getLogger(__name__)


def _message_text(message: Any) -> str:
    """
    Pull the text payload out of a chat model response.

    ChatAnthropic returns an AIMessage whose content is either a string or a
    list of content blocks. Plain strings are accepted too, which keeps
    simple stand-in models easy to write.
    """
    content = getattr(message, "content", message)

    if isinstance(content, str):
        return content

    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(block.get("text") or "")
        return "".join(parts)

    return ""


class IssueAnalyzer:
    """
    Produces Suggestions for a GitHub issue.

    The model is created lazily, and only when an API key is available.
    """

    def __init__(self, api_key: Optional[str] = None, llm: Any = None):
        """
        Args:
            api_key: Anthropic API key. Defaults to the ANTHROPIC_API_KEY
                     environment variable.
            llm: Optional pre-built chat model (anything with invoke()).
                 Mostly useful for tests.
        """
        self.api_key = api_key or os.getenv(API_KEY_ENV_VAR)
        self._llm = llm

    @property
    def is_configured(self) -> bool:
        """True when analyses will actually call the model."""
        return bool(self.api_key) or self._llm is not None

    @property
    def llm(self):
        if self._llm is None:
            # Sampling settings are fixed for every request
            self._llm = ChatAnthropic(
                model=MODEL_NAME,
                api_key=self.api_key,
                temperature=TEMPERATURE,
                top_p=TOP_P,
                top_k=TOP_K,
                max_tokens=MAX_TOKENS,
                max_retries=0,
            )
        return self._llm

    def analyze_issue(
        self,
        issue: Issue,
        repository: str,
        language: str = "Unknown"
    ) -> AnalysisResult:
        """
        Analyze a single issue.

        Args:
            issue: The issue to analyze
            repository: Repository name (e.g., "facebook/react")
            language: Main language of the repository

        Returns:
            AnalysisResult. Without an API key its suggestions are generic
            and raw_response is FALLBACK_SENTINEL.

        Raises:
            ValueError: If issue or repository is missing
            AnalysisError: If the model call fails or returns no text
        """
        if issue is None or not repository:
            raise ValueError("Issue and repository are required")

        if not self.is_configured:
            logger.info("%s not configured, returning fallback suggestions", API_KEY_ENV_VAR)
            return AnalysisResult(
                suggestions=build_fallback_suggestions(issue),
                raw_response=FALLBACK_SENTINEL
            )

        prompt = build_analysis_prompt(issue, repository, language)
        raw_text = self._call_model(prompt)

        return AnalysisResult(
            suggestions=normalize_response(raw_text),
            raw_response=raw_text
        )

    def _call_model(self, prompt: str) -> str:
        """Invoke the model once and return its text, or raise AnalysisError."""
        try:
            message = self.llm.invoke(prompt)
        except anthropic.APIStatusError as e:
            logger.error("Anthropic API error: status=%s error=%s", e.status_code, e.message)
            raise AnalysisError(
                f"Anthropic API error: {e.status_code} - {e.message}",
                status_code=e.status_code,
                detail=e.message
            ) from e
        except Exception as e:
            logger.error("Model call failed: %s", e)
            raise AnalysisError(f"Model call failed: {e}", detail=str(e)) from e

        text = _message_text(message)
        if not text.strip():
            raise AnalysisError("No response from the model")

        return text
