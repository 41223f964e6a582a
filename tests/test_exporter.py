"""Tests for analysis export."""

import json
from pathlib import Path

from repovibe.exporter import export_analysis
from repovibe.fallback import build_degraded_result
from repovibe.models import AnalysisResult, Issue, Suggestions


def _result(suggestions_dict: dict) -> AnalysisResult:
    return AnalysisResult(
        suggestions=Suggestions.model_validate(suggestions_dict),
        raw_response="raw model text"
    )


class TestExportAnalysis:
    """Test export_analysis."""

    def test_json(self, tmp_path: Path, sample_issue: Issue, valid_suggestions_dict: dict) -> None:
        path = tmp_path / "out" / "analysis.json"

        export_analysis(_result(valid_suggestions_dict), sample_issue, "octo/webapp", str(path))

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["repository"] == "octo/webapp"
        assert data["issue"]["number"] == 42
        assert data["issue"]["labels"] == ["good first issue", "bug"]
        assert data["success"] is True
        assert data["rawResponse"] == "raw model text"
        assert data["suggestions"] == valid_suggestions_dict

    def test_markdown(self, tmp_path: Path, sample_issue: Issue, valid_suggestions_dict: dict) -> None:
        path = tmp_path / "analysis.md"

        export_analysis(_result(valid_suggestions_dict), sample_issue, "octo/webapp", str(path))

        text = path.read_text(encoding="utf-8")
        assert text.startswith("# octo/webapp#42: Add input validation to login form")
        assert "| **Complexity** | easy |" in text
        assert "1. Locate the form" in text
        assert "```javascript\nif (!password) return;\n```" in text
        assert "- [ ] Tests added" in text
        assert "**Title:** Validate login form inputs" in text

    def test_unknown_extension_defaults_to_json(self, tmp_path: Path, sample_issue: Issue) -> None:
        path = tmp_path / "analysis.txt"

        export_analysis(_result({}), sample_issue, "octo/webapp", str(path))

        assert json.loads(path.read_text(encoding="utf-8"))["repository"] == "octo/webapp"

    def test_explicit_format(self, tmp_path: Path, sample_issue: Issue) -> None:
        path = tmp_path / "analysis.txt"

        export_analysis(_result({}), sample_issue, "octo/webapp", str(path), fmt="md")

        text = path.read_text(encoding="utf-8")
        assert "## Contribution Tips" in text
        assert "- _None_" in text

    def test_failed_analysis_is_marked(self, tmp_path: Path, sample_issue: Issue) -> None:
        result = build_degraded_result(sample_issue, "Overloaded")
        md_path = tmp_path / "analysis.md"
        json_path = tmp_path / "analysis.json"

        export_analysis(result, sample_issue, "octo/webapp", str(md_path))
        export_analysis(result, sample_issue, "octo/webapp", str(json_path))

        assert "**Status:** AI analysis failed" in md_path.read_text(encoding="utf-8")
        assert json.loads(json_path.read_text(encoding="utf-8"))["success"] is False
