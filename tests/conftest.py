"""Test configuration and fixtures."""

import json
from pathlib import Path

import pytest

from repovibe.favorites import FavoritesManager, MemoryStore
from repovibe.models import Issue, Label


@pytest.fixture
def sample_issue() -> Issue:
    """A typical beginner-friendly issue."""
    return Issue(
        title="Add input validation to login form",
        body="The login form accepts empty passwords.",
        labels=[Label(name="good first issue"), Label(name="bug")],
        comments=3,
        number=42,
        id=1001,
        html_url="https://github.com/octo/webapp/issues/42",
        created_at="2024-05-01T12:00:00+00:00",
        user_login="octocat",
        difficulty="easy",
        language="JavaScript"
    )


@pytest.fixture
def valid_suggestions_dict() -> dict:
    """A complete, well-formed model answer."""
    return {
        "problemAnalysis": {
            "summary": "Login form accepts empty passwords",
            "complexity": "easy",
            "estimatedTime": "1-2 hours",
            "keyChallenges": ["Finding the form component"]
        },
        "solutionApproach": {
            "steps": ["Locate the form", "Add validation", "Add tests"],
            "technologies": ["React"],
            "filesToModify": ["src/LoginForm.jsx"]
        },
        "codeExamples": {
            "snippets": [
                {
                    "language": "javascript",
                    "code": "if (!password) return;",
                    "description": "Guard against empty passwords"
                }
            ]
        },
        "prGuidelines": {
            "title": "Validate login form inputs",
            "description": "Adds client-side validation.",
            "checklist": ["Tests added"]
        },
        "resources": {
            "documentation": ["https://react.dev/reference/react-dom/components/form"],
            "examples": [],
            "relatedIssues": ["#40"]
        },
        "contributionTips": ["Keep the change small"]
    }


@pytest.fixture
def valid_suggestions_json(valid_suggestions_dict) -> str:
    return json.dumps(valid_suggestions_dict, indent=2)


@pytest.fixture
def favorites_manager() -> FavoritesManager:
    """FavoritesManager backed by memory."""
    return FavoritesManager(store=MemoryStore())


@pytest.fixture
def temp_data_dir(tmp_path: Path) -> Path:
    data_dir = tmp_path / "data"
    data_dir.mkdir(parents=True)
    return data_dir
