"""
Configuration constants for RepoVibe.

This file contains the tunable parameters that control how we talk to
GitHub, how the model is sampled, and where local data lives.
"""

from pathlib import Path

# =============================================================================
# Local Storage
# =============================================================================

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = PROJECT_ROOT / ".data"      # Favorites live here
CACHE_DIR = PROJECT_ROOT / ".cache"    # diskcache directories live here

FAVORITES_STORAGE_KEY = "RepoVibe"     # Key of the favorites list in the store

# =============================================================================
# GitHub Settings
# =============================================================================

GITHUB_API_VERSION = "2022-11-28"
DISCOVER_PER_PAGE = 100          # Repositories per discover page
ISSUES_PER_PAGE = 20             # Issues per page (kept small for faster loading)

DISCOVER_CACHE_TTL_MINUTES = 10  # Repository search results
ISSUES_CACHE_TTL_MINUTES = 5     # Issue listings change more often

# Bare repository names ("react") are looked up with a name search
RESOLVE_SEARCH_PER_PAGE = 10
FILENAME_EXTENSIONS = (
    "md", "txt", "json", "js", "ts", "py", "java", "cpp", "c", "h",
    "css", "html", "xml", "yml", "yaml"
)

# =============================================================================
# LLM Analysis Settings
# =============================================================================

MODEL_NAME = "claude-haiku-4-5-20251001"
TEMPERATURE = 0.7                # Some creativity helps with solution ideas
TOP_P = 0.95                     # Nucleus sampling
TOP_K = 40
MAX_TOKENS = 2048                # The suggestions schema is fairly large

API_KEY_ENV_VAR = "ANTHROPIC_API_KEY"

# =============================================================================
# Difficulty Label Rules
# =============================================================================
# Checked in this order, first match wins (see difficulty.py)

EASY_LABELS = {
    "good first issue",
    "beginner",
    "first-timers-only",
    "easy",
    "help wanted"
}

HARD_LABELS = {
    "hard",
    "complex",
    "advanced",
    "expert",
    "difficult"
}

MEDIUM_TYPE_LABELS = {
    "bug",
    "enhancement",
    "feature",
    "improvement"
}

HIGH_PRIORITY_LABELS = {
    "priority: high",
    "priority: critical",
    "urgent"
}

LOW_PRIORITY_LABELS = {
    "priority: low",
    "nice to have"
}

# Comment-count thresholds used when no label decides
HARD_COMMENT_THRESHOLD = 15      # More than this -> hard
MEDIUM_COMMENT_THRESHOLD = 5     # More than this -> medium
MANY_LABELS_THRESHOLD = 5        # More labels than this -> medium

DIFFICULTY_LEVELS = ["easy", "medium", "hard"]

# =============================================================================
# Repository Language Heuristic
# =============================================================================
# Substring of the repo name -> language, checked in order

REPO_LANGUAGE_HINTS = [
    (("react", "next"), "JavaScript"),
    (("vue",), "JavaScript"),
    (("angular",), "TypeScript"),
    (("python", "django", "flask"), "Python"),
    (("go", "golang"), "Go"),
    (("rust",), "Rust"),
    (("java",), "Java"),
    (("csharp", "dotnet"), "C#"),
]
