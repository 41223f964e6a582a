"""
Data models shared across RepoVibe.

=============================================================================
TWO KINDS OF MODELS
=============================================================================

1. DATACLASSES (Issue, Label, RepositorySummary, Pagination, ...)
   - Data we build ourselves from GitHub responses
   - We trust their types, so a plain container is enough

2. PYDANTIC MODELS (Suggestions and its sections)
   - Data that comes back from the LLM
   - We do NOT trust it: a field may be missing, null, a number where
     we expect a string, a string where we expect a list...
   - Validators coerce every field to its declared type, so a
     Suggestions object is always fully populated

The LLM speaks camelCase JSON (problemAnalysis, filesToModify, ...).
Python code uses snake_case attributes. Pydantic aliases bridge the two:

    Suggestions.model_validate({"problemAnalysis": {...}})
    suggestions.problem_analysis.summary
    suggestions.model_dump(by_alias=True)  # back to camelCase

=============================================================================
"""

from dataclasses import dataclass, field, asdict
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

COMPLEXITY_LEVELS = ("easy", "medium", "hard", "unknown")


# =============================================================================
# COERCION HELPERS
# =============================================================================

def _coerce_str(value: Any, default: str = "") -> str:
    """Turn a scalar into a string, anything else into the default."""
    if value is None:
        return default
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float, bool)):
        return str(value)
    return default


def _coerce_str_list(value: Any) -> List[str]:
    """Turn a value into a list of strings."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, (list, tuple)):
        return []

    items = []
    for item in value:
        if item is None:
            continue
        items.append(item if isinstance(item, str) else str(item))
    return items


def _coerce_section(value: Any) -> dict:
    """A section that is not an object is treated as empty."""
    return value if isinstance(value, dict) else {}


# =============================================================================
# SUGGESTIONS - the normalized AI analysis
# =============================================================================

class _CamelModel(BaseModel):
    """Base for LLM-facing models: camelCase aliases, extra keys ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore"
    )


class ProblemAnalysis(_CamelModel):
    summary: str = ""
    complexity: str = "unknown"
    estimated_time: str = "unknown"
    key_challenges: List[str] = Field(default_factory=list)

    @field_validator("summary", mode="before")
    @classmethod
    def _summary(cls, value):
        return _coerce_str(value)

    @field_validator("complexity", mode="before")
    @classmethod
    def _complexity(cls, value):
        # Models sometimes echo the template ("easy|medium|hard") or
        # capitalize the value
        text = _coerce_str(value, "unknown").strip().lower()
        return text if text in COMPLEXITY_LEVELS else "unknown"

    @field_validator("estimated_time", mode="before")
    @classmethod
    def _estimated_time(cls, value):
        return _coerce_str(value, "unknown") or "unknown"

    @field_validator("key_challenges", mode="before")
    @classmethod
    def _key_challenges(cls, value):
        return _coerce_str_list(value)


class SolutionApproach(_CamelModel):
    steps: List[str] = Field(default_factory=list)
    technologies: List[str] = Field(default_factory=list)
    files_to_modify: List[str] = Field(default_factory=list)

    @field_validator("steps", "technologies", "files_to_modify", mode="before")
    @classmethod
    def _lists(cls, value):
        return _coerce_str_list(value)


class CodeSnippet(_CamelModel):
    language: str = ""
    code: str = ""
    description: str = ""

    @field_validator("language", "code", "description", mode="before")
    @classmethod
    def _strings(cls, value):
        return _coerce_str(value)


class CodeExamples(_CamelModel):
    snippets: List[CodeSnippet] = Field(default_factory=list)

    @field_validator("snippets", mode="before")
    @classmethod
    def _snippets(cls, value):
        if isinstance(value, dict):
            value = [value]
        if not isinstance(value, (list, tuple)):
            return []
        return [item for item in value if isinstance(item, dict)]


class PRGuidelines(_CamelModel):
    title: str = ""
    description: str = ""
    checklist: List[str] = Field(default_factory=list)

    @field_validator("title", "description", mode="before")
    @classmethod
    def _strings(cls, value):
        return _coerce_str(value)

    @field_validator("checklist", mode="before")
    @classmethod
    def _checklist(cls, value):
        return _coerce_str_list(value)


class Resources(_CamelModel):
    documentation: List[str] = Field(default_factory=list)
    examples: List[str] = Field(default_factory=list)
    related_issues: List[str] = Field(default_factory=list)

    @field_validator("documentation", "examples", "related_issues", mode="before")
    @classmethod
    def _lists(cls, value):
        return _coerce_str_list(value)


class Suggestions(_CamelModel):
    """
    The structured analysis we show for an issue.

    Always fully populated: every section and every field has a default,
    and mistyped values from the LLM are coerced rather than rejected.
    raw_response is only set when the LLM output could not be parsed.
    """

    problem_analysis: ProblemAnalysis = Field(default_factory=ProblemAnalysis)
    solution_approach: SolutionApproach = Field(default_factory=SolutionApproach)
    code_examples: CodeExamples = Field(default_factory=CodeExamples)
    pr_guidelines: PRGuidelines = Field(default_factory=PRGuidelines)
    resources: Resources = Field(default_factory=Resources)
    contribution_tips: List[str] = Field(default_factory=list)
    raw_response: Optional[str] = None

    @field_validator(
        "problem_analysis",
        "solution_approach",
        "code_examples",
        "pr_guidelines",
        "resources",
        mode="before"
    )
    @classmethod
    def _sections(cls, value):
        if isinstance(value, BaseModel):
            return value
        return _coerce_section(value)

    @field_validator("contribution_tips", mode="before")
    @classmethod
    def _tips(cls, value):
        return _coerce_str_list(value)

    @field_validator("raw_response", mode="before")
    @classmethod
    def _raw(cls, value):
        return value if isinstance(value, str) else None

    def to_dict(self) -> dict:
        """Serialize with the camelCase field names the LLM uses."""
        return self.model_dump(by_alias=True, exclude_none=True)


@dataclass
class AnalysisResult:
    """What the analyzer hands back for one issue."""
    suggestions: Suggestions
    raw_response: str
    success: bool = True

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "suggestions": self.suggestions.to_dict(),
            "rawResponse": self.raw_response
        }


# =============================================================================
# GITHUB DATA
# =============================================================================

@dataclass
class Label:
    """A GitHub issue label."""
    name: str
    color: str = ""
    description: Optional[str] = None


@dataclass
class Issue:
    """
    Structured container for a GitHub issue.

    Only title, body, labels and comments feed the analysis. The rest is
    display data filled in by the GitHub client.
    """
    title: str
    body: str = ""
    labels: List[Label] = field(default_factory=list)
    comments: int = 0

    number: int = 0
    id: int = 0
    state: str = "open"
    html_url: str = ""
    created_at: Optional[str] = None   # ISO format datetime
    updated_at: Optional[str] = None
    user_login: str = ""
    assignees: List[str] = field(default_factory=list)

    difficulty: str = ""   # easy / medium / hard, see difficulty.py
    language: str = "Unknown"

    @property
    def label_names(self) -> List[str]:
        return [label.name for label in self.labels]

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Issue":
        """
        Build an Issue from a dict.

        Accepts our own to_dict() output as well as the shape of GitHub's
        REST API (labels as dicts or plain strings, user as an object).
        """
        labels = []
        for label in data.get("labels") or []:
            if isinstance(label, Label):
                labels.append(label)
            elif isinstance(label, str):
                labels.append(Label(name=label))
            elif isinstance(label, dict):
                labels.append(Label(
                    name=label.get("name") or "",
                    color=label.get("color") or "",
                    description=label.get("description")
                ))

        user = data.get("user")
        user_login = data.get("user_login") or (
            (user.get("login") or "") if isinstance(user, dict) else ""
        )

        assignees = [
            (a.get("login") or "") if isinstance(a, dict) else str(a)
            for a in data.get("assignees") or []
        ]

        return cls(
            title=data.get("title") or "",
            body=data.get("body") or "",
            labels=labels,
            comments=int(data.get("comments") or 0),
            number=int(data.get("number") or 0),
            id=int(data.get("id") or 0),
            state=data.get("state") or "open",
            html_url=data.get("html_url") or "",
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
            user_login=user_login,
            assignees=assignees,
            difficulty=data.get("difficulty") or "",
            language=data.get("language") or "Unknown"
        )


@dataclass
class RepositorySummary:
    """The fields of a GitHub repository we display and favorite."""
    full_name: str
    name: str
    description: str = ""
    language: Optional[str] = None
    stargazers_count: int = 0
    forks_count: int = 0
    owner_login: str = ""
    owner_avatar_url: str = ""
    html_url: str = ""

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "RepositorySummary":
        return cls(**data)


@dataclass
class Pagination:
    current_page: int
    per_page: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool
    total_count: int


@dataclass
class IssuePage:
    repository: str
    issues: List[Issue]
    pagination: Pagination


@dataclass
class RepositoryPage:
    repositories: List[RepositorySummary]
    pagination: Pagination


LabelLike = Union[str, Label, dict]
