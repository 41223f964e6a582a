"""Exceptions raised by RepoVibe."""

from typing import Optional


class RepoVibeError(Exception):
    """Base class for errors reported to the user."""


class AnalysisError(RepoVibeError):
    """
    The model call failed or returned nothing usable.

    Raised once per request. Whether to fall back to generic guidance
    is up to the caller.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        detail: str = ""
    ):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class GitHubError(RepoVibeError):
    """A GitHub API request failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
