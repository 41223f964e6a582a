"""
Generic suggestions used when there is no AI analysis to show.

Three situations need them:

1. No API key is configured, so we never call the model
   (build_fallback_suggestions, marked with FALLBACK_SENTINEL)
2. The model call failed and the caller asked for guidance anyway
   (build_degraded_suggestions, marked with DEGRADED_SENTINEL)
3. The model answered, but nothing in the answer could be parsed
   (build_unparsed_suggestions)

All of them return a regular Suggestions object, so callers never need a special
case for "no analysis".
"""

from .config import API_KEY_ENV_VAR
from .models import AnalysisResult, Issue, Suggestions

# rawResponse marker for an intentional fallback (no API key configured)
FALLBACK_SENTINEL = "Fallback response - Anthropic API not configured"

# rawResponse prefix for a fallback shown because the model call failed
DEGRADED_SENTINEL = "Degraded response - AI analysis failed"

UNPARSED_TITLE_CHARS = 50


def build_fallback_suggestions(issue: Issue) -> Suggestions:
    """Generic guidance for when AI analysis is not configured."""
    return _generic_suggestions(
        issue,
        summary=(
            "AI analysis is not available. Please configure the "
            f"{API_KEY_ENV_VAR} environment variable to enable AI-powered "
            "issue analysis."
        ),
        challenge="AI analysis not available"
    )


def build_degraded_suggestions(issue: Issue, error: str = "") -> Suggestions:
    """Generic guidance for when the model call failed."""
    reason = f" ({error})" if error else ""
    return _generic_suggestions(
        issue,
        summary=(
            f"AI analysis failed{reason}. The guidance below is generic; "
            "try the analysis again later for issue-specific suggestions."
        ),
        challenge="AI analysis failed"
    )


def degraded_raw_response(error: str = "") -> str:
    return f"{DEGRADED_SENTINEL}: {error}" if error else DEGRADED_SENTINEL


def build_degraded_result(issue: Issue, error: str = "") -> AnalysisResult:
    """
    A failed analysis that still carries generic guidance.

    success is False and raw_response starts with DEGRADED_SENTINEL, so it
    can never be mistaken for the no-API-key fallback.
    """
    return AnalysisResult(
        suggestions=build_degraded_suggestions(issue, error),
        raw_response=degraded_raw_response(error),
        success=False
    )


def _generic_suggestions(issue: Issue, summary: str, challenge: str) -> Suggestions:
    return Suggestions.model_validate({
        "problemAnalysis": {
            "summary": summary,
            "complexity": "unknown",
            "estimatedTime": "unknown",
            "keyChallenges": [challenge]
        },
        "solutionApproach": {
            "steps": [
                "Read the issue description carefully",
                "Understand the problem requirements",
                "Plan your implementation approach",
                "Write and test your solution"
            ],
            "technologies": [],
            "filesToModify": []
        },
        "codeExamples": {"snippets": []},
        "prGuidelines": {
            "title": f"Fix: {issue.title}",
            "description": (
                "Please provide a detailed description of your changes and "
                "how they address the issue."
            ),
            "checklist": [
                "Code follows project style guidelines",
                "All tests pass",
                "Documentation is updated if needed",
                "Changes are properly tested"
            ]
        },
        "resources": {"documentation": [], "examples": [], "relatedIssues": []},
        "contributionTips": [
            "Read the issue description thoroughly",
            "Ask questions if anything is unclear",
            "Test your changes before submitting",
            "Follow the project's contribution guidelines"
        ]
    })


def build_unparsed_suggestions(raw_text: str) -> Suggestions:
    """
    Generic guidance for a model answer we could not parse.

    The original text is kept in raw_response so it can still be shown.
    """
    raw_text = raw_text if isinstance(raw_text, str) else ""

    return Suggestions.model_validate({
        "problemAnalysis": {
            "summary": "AI analysis completed",
            "complexity": "medium",
            "estimatedTime": "unknown",
            "keyChallenges": ["Analysis in progress"]
        },
        "solutionApproach": {
            "steps": [
                "Review the issue details",
                "Plan your approach",
                "Implement solution"
            ],
            "technologies": [],
            "filesToModify": []
        },
        "codeExamples": {"snippets": []},
        "prGuidelines": {
            "title": "Fix: " + raw_text[:UNPARSED_TITLE_CHARS] + "...",
            "description": "Please provide a detailed description of your changes.",
            "checklist": [
                "Code follows project style",
                "Tests pass",
                "Documentation updated"
            ]
        },
        "resources": {"documentation": [], "examples": [], "relatedIssues": []},
        "contributionTips": [
            "Read the issue carefully",
            "Ask questions if unclear",
            "Test your changes thoroughly"
        ],
        "rawResponse": raw_text
    })
