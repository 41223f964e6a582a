"""
Analysis Exporter - Save an issue analysis to JSON or Markdown.

Supports two formats:
- JSON: The same camelCase shape the model is asked to produce
- Markdown: A human-readable plan to keep next to your checkout
"""

import json
from datetime import datetime
from pathlib import Path

from .models import AnalysisResult, Issue


def export_analysis(
    result: AnalysisResult,
    issue: Issue,
    repository: str,
    filepath: str,
    fmt: str = None
):
    """
    Export an analysis to a file.

    Args:
        result: The analysis to export
        issue: The analyzed issue
        repository: Repository name (e.g., "facebook/react")
        filepath: Output file path
        fmt: Format to use ('json' or 'md'). Auto-detected from extension if None.
    """
    path = Path(filepath)

    if fmt is None:
        fmt = "md" if path.suffix.lower() in (".md", ".markdown") else "json"

    path.parent.mkdir(parents=True, exist_ok=True)

    if fmt == "json":
        _export_json(result, issue, repository, path)
    else:
        _export_markdown(result, issue, repository, path)


def _export_json(result: AnalysisResult, issue: Issue, repository: str, path: Path):
    data = {
        "exported_at": datetime.now().isoformat(),
        "repository": repository,
        "issue": {
            "number": issue.number,
            "title": issue.title,
            "url": issue.html_url,
            "labels": issue.label_names,
            "comments": issue.comments,
            "difficulty": issue.difficulty,
        },
        **result.to_dict()
    }

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def _md_list(items) -> list:
    return [f"- {item}" for item in items] or ["- _None_"]


def _export_markdown(result: AnalysisResult, issue: Issue, repository: str, path: Path):
    s = result.suggestions
    analysis = s.problem_analysis
    lines = []

    lines.append(f"# {repository}#{issue.number}: {issue.title}")
    lines.append("")
    lines.append(f"**Exported:** {datetime.now().strftime('%Y-%m-%d %H:%M')}")
    if issue.html_url:
        lines.append(f"**Link:** {issue.html_url}")
    if not result.success:
        lines.append("**Status:** AI analysis failed, the guidance below is generic")
    lines.append("")
    lines.append("| Field | Value |")
    lines.append("|-------|-------|")
    lines.append(f"| **Complexity** | {analysis.complexity} |")
    lines.append(f"| **Estimated Time** | {analysis.estimated_time} |")
    lines.append(f"| **Labels** | {', '.join(issue.label_names) or 'None'} |")
    lines.append("")
    lines.append("## Summary")
    lines.append("")
    lines.append(analysis.summary)
    lines.append("")
    lines.append("**Key challenges:**")
    lines.append("")
    lines.extend(_md_list(analysis.key_challenges))
    lines.append("")

    lines.append("## Solution Approach")
    lines.append("")
    lines.extend(f"{i}. {step}" for i, step in enumerate(s.solution_approach.steps, 1))
    lines.append("")
    lines.append(f"**Technologies:** {', '.join(s.solution_approach.technologies) or 'None'}")
    lines.append("")
    lines.append("**Files to modify:**")
    lines.append("")
    lines.extend(_md_list(s.solution_approach.files_to_modify))
    lines.append("")

    if s.code_examples.snippets:
        lines.append("## Code Examples")
        lines.append("")
        for snippet in s.code_examples.snippets:
            if snippet.description:
                lines.append(snippet.description)
                lines.append("")
            lines.append(f"```{snippet.language}")
            lines.append(snippet.code)
            lines.append("```")
            lines.append("")

    lines.append("## Pull Request")
    lines.append("")
    lines.append(f"**Title:** {s.pr_guidelines.title}")
    lines.append("")
    lines.append(s.pr_guidelines.description)
    lines.append("")
    lines.extend(f"- [ ] {item}" for item in s.pr_guidelines.checklist)
    lines.append("")

    lines.append("## Resources")
    lines.append("")
    for name, items in (
        ("Documentation", s.resources.documentation),
        ("Examples", s.resources.examples),
        ("Related issues", s.resources.related_issues)
    ):
        lines.append(f"**{name}:**")
        lines.append("")
        lines.extend(_md_list(items))
        lines.append("")

    lines.append("## Contribution Tips")
    lines.append("")
    lines.extend(_md_list(s.contribution_tips))
    lines.append("")

    with open(path, "w", encoding="utf-8") as f:
        f.write("\n".join(lines))
