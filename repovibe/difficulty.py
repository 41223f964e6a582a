"""
Issue difficulty heuristics.

GitHub has no standard difficulty field, so we guess from what every issue
has: its labels and how much discussion it attracted.

Rules (first match wins):

    1. Beginner labels ("good first issue", "help wanted", ...)  -> easy
    2. Explicit difficulty labels ("hard", "complex", ...)       -> hard
    3. Work-type labels ("bug", "feature", ...)                  -> medium
    4. High priority labels ("urgent", ...)                      -> hard
    5. Low priority labels ("nice to have", ...)                 -> easy
    6. No deciding label: long discussions are harder, and so are
       issues carrying lots of labels

The order matters: an issue labelled both "good first issue" and "hard"
is easy, because maintainers put the beginner label there on purpose.
"""

from typing import Iterable, List, Optional, Sequence

from .config import (
    EASY_LABELS,
    HARD_LABELS,
    MEDIUM_TYPE_LABELS,
    HIGH_PRIORITY_LABELS,
    LOW_PRIORITY_LABELS,
    HARD_COMMENT_THRESHOLD,
    MEDIUM_COMMENT_THRESHOLD,
    MANY_LABELS_THRESHOLD,
    DIFFICULTY_LEVELS
)
from .models import Issue, Label, LabelLike

# Label rules in priority order
LABEL_RULES = [
    (EASY_LABELS, "easy"),
    (HARD_LABELS, "hard"),
    (MEDIUM_TYPE_LABELS, "medium"),
    (HIGH_PRIORITY_LABELS, "hard"),
    (LOW_PRIORITY_LABELS, "easy"),
]


def _label_name(label: LabelLike) -> str:
    if isinstance(label, Label):
        return label.name
    if isinstance(label, dict):
        return label.get("name") or ""
    return str(label)


def classify_difficulty(labels: Sequence[LabelLike], comments: int) -> str:
    """
    Classify an issue as "easy", "medium" or "hard".

    Args:
        labels: Label names (or Label objects / GitHub label dicts).
                Compared case-insensitively.
        comments: Number of comments on the issue

    Returns:
        "easy", "medium" or "hard"
    """
    label_names = {_label_name(label).lower() for label in labels}

    for rule_labels, difficulty in LABEL_RULES:
        if label_names & rule_labels:
            return difficulty

    if comments > HARD_COMMENT_THRESHOLD:
        return "hard"
    if comments > MEDIUM_COMMENT_THRESHOLD:
        return "medium"

    # Lots of labels usually means a cross-cutting issue
    if len(labels) > MANY_LABELS_THRESHOLD:
        return "medium"

    return "easy"


def filter_issues(
    issues: Iterable[Issue],
    difficulty: Optional[str] = None,
    label: Optional[str] = None
) -> List[Issue]:
    """
    Filter issues by difficulty and/or label.

    Args:
        difficulty: Keep only this difficulty. None or "all" keeps everything.
        label: Keep issues with a label containing this text (case-insensitive)
    """
    result = list(issues)

    if difficulty and difficulty != "all":
        result = [issue for issue in result if issue.difficulty == difficulty]

    if label:
        needle = label.lower()
        result = [
            issue for issue in result
            if any(needle in name.lower() for name in issue.label_names)
        ]

    return result


# =============================================================================
# SORTING
# =============================================================================

SORT_COLUMNS = ["number", "title", "state", "labels", "difficulty", "comments", "created_at", "user"]

_DIFFICULTY_ORDER = {level: rank for rank, level in enumerate(DIFFICULTY_LEVELS, 1)}


def _sort_key(issue: Issue, column: str):
    if column == "number":
        return issue.number or 0
    if column == "comments":
        return issue.comments or 0
    if column == "labels":
        return len(issue.labels)
    if column == "difficulty":
        return _DIFFICULTY_ORDER.get(issue.difficulty, 0)
    if column == "created_at":
        # ISO timestamps sort chronologically as strings
        return issue.created_at or ""
    if column == "user":
        return issue.user_login.lower()
    return str(getattr(issue, column, "") or "").lower()


def sort_issues(issues: Iterable[Issue], column: str, direction: str = "asc") -> List[Issue]:
    """
    Sort issues by a table column.

    Args:
        column: One of SORT_COLUMNS
        direction: "asc" or "desc"

    Returns:
        A new sorted list (stable, so ties keep their GitHub order)
    """
    if column not in SORT_COLUMNS:
        raise ValueError(f"Invalid sort column. Must be one of: {SORT_COLUMNS}")
    if direction not in ("asc", "desc"):
        raise ValueError("Invalid sort direction. Must be 'asc' or 'desc'")

    return sorted(
        issues,
        key=lambda issue: _sort_key(issue, column),
        reverse=(direction == "desc")
    )
