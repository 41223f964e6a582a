"""
GitHub API Client for discovering repositories and listing their issues.

This module handles all interactions with GitHub's REST API using PyGithub.
Responses are converted into our own dataclasses (models.py) so the rest of
the code never touches PyGithub objects, and can be cached as plain dicts.
"""

import logging
import math
import os
import re
from dataclasses import asdict
from typing import Dict, List, Optional

from github import Auth, Github, GithubException
from dotenv import load_dotenv

from .cache import CacheManager
from .config import (
    DISCOVER_PER_PAGE,
    FILENAME_EXTENSIONS,
    ISSUES_PER_PAGE,
    REPO_LANGUAGE_HINTS,
    RESOLVE_SEARCH_PER_PAGE
)
from .difficulty import classify_difficulty, filter_issues
from .exceptions import GitHubError
from .models import (
    Issue,
    IssuePage,
    Label,
    Pagination,
    RepositoryPage,
    RepositorySummary
)

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

FILENAME_PATTERN = re.compile(r"\.(" + "|".join(FILENAME_EXTENSIONS) + r")$", re.IGNORECASE)


def extract_language_from_repo(repo_name: str) -> str:
    """
    Guess a repository's language from its name.

    A cheap heuristic that avoids an extra API call per issue listing.
    Falls back to "Unknown".
    """
    name = repo_name.lower()
    for hints, language in REPO_LANGUAGE_HINTS:
        if any(hint in name for hint in hints):
            return language
    return "Unknown"


def build_pagination(page: int, per_page: int, total_count: int, page_size: int) -> Pagination:
    """
    Pagination info for one page of results.

    Args:
        page: 1-based page number
        per_page: Requested page size
        total_count: Total number of results reported by GitHub
        page_size: Number of results actually on this page
    """
    total_pages = max(1, math.ceil(total_count / per_page)) if per_page else 1
    return Pagination(
        current_page=page,
        per_page=per_page,
        total_pages=total_pages,
        has_next_page=page_size == per_page and page < total_pages,
        has_prev_page=page > 1,
        total_count=total_count
    )


def _pagination_from_dict(data: dict) -> Pagination:
    return Pagination(**data)


class GitHubClient:
    """
    Client for interacting with GitHub's API.

    Handles:
    - Repository discovery (by language, or by name)
    - Listing a repository's issues with difficulty tagging and filtering
    - Rate limiting awareness
    """

    def __init__(self, token: Optional[str] = None, cache: Optional[CacheManager] = None):
        """
        Initialize the GitHub client.

        Args:
            token: GitHub Personal Access Token. If not provided,
                   reads from GITHUB_TOKEN environment variable.
                   Without a token, you're limited to 60 requests/hour.
            cache: Optional CacheManager for discover and issue responses.
        """
        self.token = token or os.getenv("GITHUB_TOKEN")
        self.cache = cache

        # PyGithub fixes the page size per client, so keep one per size
        self._clients: Dict[int, Github] = {}

    def _github(self, per_page: int) -> Github:
        if per_page not in self._clients:
            auth = Auth.Token(self.token) if self.token else None
            self._clients[per_page] = Github(auth=auth, per_page=per_page)
        return self._clients[per_page]

    # =========================================================================
    # REPOSITORY DISCOVERY
    # =========================================================================

    def _build_discover_query(self, language: str, query: str) -> str:
        """
        Build a GitHub repository search query.

        A name query searches repository names; otherwise we list starred
        repositories, optionally restricted to one language.
        """
        if query:
            return f"{query} in:name"

        parts = ["stars:>1"]
        if language:
            parts.append(f"language:{language}")
        return " ".join(parts)

    def discover_repositories(
        self,
        language: str = "",
        query: str = "",
        page: int = 1,
        per_page: int = DISCOVER_PER_PAGE
    ) -> RepositoryPage:
        """
        Search GitHub repositories.

        Args:
            language: Restrict to this language (ignored when query is set)
            query: Text to match against repository names
            page: 1-based page number
            per_page: Results per page

        Returns:
            RepositoryPage with the repositories and pagination info
        """
        if self.cache:
            cached = self.cache.get_discover(language, query, page, per_page)
            if cached:
                return RepositoryPage(
                    repositories=[RepositorySummary.from_dict(r) for r in cached["repositories"]],
                    pagination=_pagination_from_dict(cached["pagination"])
                )

        search_query = self._build_discover_query(language, query)
        logger.debug("Repository search query: %s", search_query)

        try:
            github = self._github(per_page)
            if query:
                # Best match is GitHub's default ordering
                results = github.search_repositories(query=search_query)
            else:
                results = github.search_repositories(
                    query=search_query,
                    sort="forks",
                    order="desc"
                )

            repos = [self._to_repository(repo) for repo in results.get_page(page - 1)]
            total_count = results.totalCount
        except GithubException as e:
            raise GitHubError(f"GitHub API error: {e.status}", status_code=e.status) from e

        result = RepositoryPage(
            repositories=repos,
            pagination=build_pagination(page, per_page, total_count, len(repos))
        )

        if self.cache:
            self.cache.set_discover(language, query, page, per_page, {
                "repositories": [r.to_dict() for r in result.repositories],
                "pagination": asdict(result.pagination)
            })

        return result

    def get_repository(self, repo_name: str) -> RepositorySummary:
        """Fetch a single repository's display data."""
        try:
            repo = self._github(ISSUES_PER_PAGE).get_repo(repo_name)
            return self._to_repository(repo)
        except GithubException as e:
            raise GitHubError(
                f"Could not fetch repository {repo_name}: {e.status}",
                status_code=e.status
            ) from e

    def resolve_repository(self, name: str) -> str:
        """
        Turn a repository name into its "owner/repo" full name.

        Full names are returned as-is. A bare name ("react") is looked up
        with a name search and resolved in this order:

        1. A repository whose name equals it (case-insensitive)
        2. A repository whose name or full name contains it
        3. The best search match

        Input that looks like a filename ("README.md") only accepts the
        best search match.

        Raises:
            ValueError: If the name is empty
            GitHubError: If nothing matches, or the search fails
        """
        name = (name or "").strip()
        if not name:
            raise ValueError("Repository name is required")
        if "/" in name:
            return name

        candidates = self.discover_repositories(
            query=name,
            per_page=RESOLVE_SEARCH_PER_PAGE
        ).repositories

        if FILENAME_PATTERN.search(name):
            if candidates:
                return candidates[0].full_name
            raise GitHubError(
                f"\"{name}\" appears to be a filename, not a repository name. "
                "Use the \"owner/repository\" format or just the repository name."
            )

        wanted = name.lower()
        exact = [r for r in candidates if r.name.lower() == wanted]
        close = [
            r for r in candidates
            if wanted in r.name.lower() or wanted in r.full_name.lower()
        ]

        for matches in (exact, close, candidates):
            if matches:
                logger.debug("Resolved %s to %s", name, matches[0].full_name)
                return matches[0].full_name

        raise GitHubError(
            f"Repository \"{name}\" not found. Check the name or use the "
            "\"owner/repository\" format."
        )

    def _to_repository(self, repo) -> RepositorySummary:
        owner = repo.owner
        return RepositorySummary(
            full_name=repo.full_name,
            name=repo.name,
            description=repo.description or "",
            language=repo.language,
            stargazers_count=repo.stargazers_count,
            forks_count=repo.forks_count,
            owner_login=owner.login if owner else "",
            owner_avatar_url=owner.avatar_url if owner else "",
            html_url=repo.html_url
        )

    # =========================================================================
    # ISSUES
    # =========================================================================

    def list_issues(
        self,
        repo_name: str,
        state: str = "open",
        sort: str = "created",
        direction: str = "desc",
        page: int = 1,
        per_page: int = ISSUES_PER_PAGE,
        difficulty: Optional[str] = None,
        label: Optional[str] = None
    ) -> IssuePage:
        """
        List one page of a repository's issues.

        Every issue is tagged with a difficulty (see difficulty.py) and a
        language guess. The difficulty and label filters apply to the
        fetched page only, so a filtered page can hold fewer than
        per_page issues.

        Args:
            repo_name: Full repository name (e.g., "facebook/react")
            state: "open", "closed" or "all"
            sort: "created", "updated" or "comments"
            direction: "asc" or "desc"
            page: 1-based page number
            per_page: Issues per page
            difficulty: Keep only "easy", "medium" or "hard" issues
            label: Keep issues with a label containing this text

        Returns:
            IssuePage with the issues and pagination info
        """
        if not repo_name:
            raise ValueError("Repository name is required")

        issues = None
        pagination = None

        if self.cache:
            cached = self.cache.get_issues(repo_name, state, sort, direction, page, per_page)
            if cached:
                issues = [Issue.from_dict(i) for i in cached["issues"]]
                pagination = _pagination_from_dict(cached["pagination"])

        if issues is None:
            issues, pagination = self._fetch_issues(
                repo_name, state, sort, direction, page, per_page
            )
            if self.cache:
                self.cache.set_issues(repo_name, state, sort, direction, page, per_page, {
                    "issues": [i.to_dict() for i in issues],
                    "pagination": asdict(pagination)
                })

        return IssuePage(
            repository=repo_name,
            issues=filter_issues(issues, difficulty=difficulty, label=label),
            pagination=pagination
        )

    def _fetch_issues(self, repo_name, state, sort, direction, page, per_page):
        try:
            repo = self._github(per_page).get_repo(repo_name)
            results = repo.get_issues(state=state, sort=sort, direction=direction)

            language = extract_language_from_repo(repo_name)
            issues = [
                self._to_issue(issue, language)
                for issue in results.get_page(page - 1)
            ]
            total_count = results.totalCount
        except GithubException as e:
            raise GitHubError(
                f"GitHub API error for {repo_name}: {e.status}",
                status_code=e.status
            ) from e

        return issues, build_pagination(page, per_page, total_count, len(issues))

    def get_issue(self, repo_name: str, number: int) -> Issue:
        """Fetch a single issue by number, tagged like list_issues()."""
        try:
            repo = self._github(ISSUES_PER_PAGE).get_repo(repo_name)
            issue = repo.get_issue(number)
        except GithubException as e:
            raise GitHubError(
                f"Could not fetch {repo_name}#{number}: {e.status}",
                status_code=e.status
            ) from e

        return self._to_issue(issue, extract_language_from_repo(repo_name))

    def _to_issue(self, issue, language: str) -> Issue:
        labels = [
            Label(name=l.name or "", color=l.color or "", description=l.description)
            for l in issue.labels
        ]

        return Issue(
            title=issue.title,
            body=issue.body or "",  # Body can be None
            labels=labels,
            comments=issue.comments,
            number=issue.number,
            id=issue.id,
            state=issue.state,
            html_url=issue.html_url,
            created_at=issue.created_at.isoformat() if issue.created_at else None,
            updated_at=issue.updated_at.isoformat() if issue.updated_at else None,
            user_login=issue.user.login if issue.user else "",
            assignees=[a.login for a in issue.assignees],
            difficulty=classify_difficulty(labels, issue.comments),
            language=language
        )

    def get_rate_limit_status(self) -> dict:
        """Check current API rate limit status."""
        rate_limit = self._github(ISSUES_PER_PAGE).get_rate_limit()
        core = rate_limit.resources.core if hasattr(rate_limit, "resources") else rate_limit.core
        return {
            "remaining": core.remaining,
            "limit": core.limit,
            "reset_time": core.reset
        }
