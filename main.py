"""
RepoVibe - Main CLI Entry Point

Browse GitHub repositories, look through their issues, and get an
AI-generated plan for tackling one of them.

Usage:
    python main.py discover --language python
    python main.py issues facebook/react --difficulty easy
    python main.py analyze facebook/react 123
"""

import os
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt
from dotenv import load_dotenv

from repovibe.analyzer import IssueAnalyzer
from repovibe.cache import CacheManager
from repovibe.config import API_KEY_ENV_VAR, DISCOVER_PER_PAGE, ISSUES_PER_PAGE
from repovibe.difficulty import SORT_COLUMNS, sort_issues
from repovibe.exceptions import AnalysisError, RepoVibeError
from repovibe.exporter import export_analysis
from repovibe.fallback import build_degraded_result
from repovibe.favorites import FavoritesManager
from repovibe.github_client import GitHubClient
from repovibe.logging_setup import setup_logging
from repovibe.presenter import ResultsPresenter

# Load environment variables
load_dotenv()

# Initialize Typer app and Rich console
app = typer.Typer(
    name="repovibe",
    help="Browse GitHub repositories and get AI guidance on their issues."
)
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging")
):
    """Browse GitHub repositories and get AI guidance on their issues."""
    setup_logging(verbose=verbose)


def _fail(message: str):
    console.print(f"[red]{escape(message)}[/red]")
    raise typer.Exit(code=1)


def _resolve(github: GitHubClient, repo: str) -> str:
    """Full "owner/repo" name for REPO, looking up bare names on GitHub."""
    if "/" in repo:
        return repo

    try:
        full_name = github.resolve_repository(repo)
    except (RepoVibeError, ValueError) as e:
        _fail(str(e))

    console.print(f"[dim]Using {escape(full_name)}[/dim]")
    return full_name


# =============================================================================
# BROWSING
# =============================================================================

@app.command()
def discover(
    language: str = typer.Option("", "--language", "-l", help="Only repositories in this language"),
    query: str = typer.Option("", "--query", "-q", help="Search repository names instead"),
    page: int = typer.Option(1, "--page", "-p", min=1, help="Page number"),
    per_page: int = typer.Option(DISCOVER_PER_PAGE, "--per-page", min=1, max=100, help="Repositories per page"),
    use_cache: bool = typer.Option(True, "--cache/--no-cache", help="Use caching to reduce API calls")
):
    """
    Discover popular repositories.

    Examples:
        python main.py discover --language rust
        python main.py discover --query fastapi
    """
    github = GitHubClient(cache=CacheManager() if use_cache else None)
    presenter = ResultsPresenter(console)

    try:
        result = github.discover_repositories(
            language=language,
            query=query,
            page=page,
            per_page=per_page
        )
    except RepoVibeError as e:
        _fail(str(e))

    favorite_ids = {fav.id for fav in FavoritesManager().get_favorites()}
    presenter.present_repositories(result.repositories, result.pagination, favorite_ids)


@app.command()
def issues(
    repo: str = typer.Argument(..., help="Repository as 'owner/repo', or just its name"),
    state: str = typer.Option("open", "--state", "-s", help="open, closed or all"),
    difficulty: str = typer.Option("all", "--difficulty", "-d", help="all, easy, medium or hard"),
    label: Optional[str] = typer.Option(None, "--label", help="Only issues with a label containing this text"),
    sort_by: Optional[str] = typer.Option(None, "--sort-by", help=f"Sort the page by: {', '.join(SORT_COLUMNS)}"),
    order: str = typer.Option("asc", "--order", help="Sort order for --sort-by: asc or desc"),
    page: int = typer.Option(1, "--page", "-p", min=1, help="Page number"),
    per_page: int = typer.Option(ISSUES_PER_PAGE, "--per-page", min=1, max=100, help="Issues per page"),
    use_cache: bool = typer.Option(True, "--cache/--no-cache", help="Use caching to reduce API calls")
):
    """
    List a repository's issues with a difficulty estimate.

    Examples:
        python main.py issues facebook/react --difficulty easy
        python main.py issues rust-lang/rust --label E-easy --sort-by comments --order desc
    """
    github = GitHubClient(cache=CacheManager() if use_cache else None)
    presenter = ResultsPresenter(console)
    repo = _resolve(github, repo)

    try:
        result = github.list_issues(
            repo,
            state=state,
            page=page,
            per_page=per_page,
            difficulty=difficulty,
            label=label
        )
        found = result.issues
        if sort_by:
            found = sort_issues(found, sort_by, order)
    except (RepoVibeError, ValueError) as e:
        _fail(str(e))

    presenter.present_issues(repo, found, result.pagination)


# =============================================================================
# ANALYSIS
# =============================================================================

@app.command()
def analyze(
    repo: str = typer.Argument(..., help="Repository as 'owner/repo', or just its name"),
    number: int = typer.Argument(..., help="Issue number"),
    language: Optional[str] = typer.Option(None, "--language", "-l", help="Repository language (guessed if omitted)"),
    fallback_on_error: bool = typer.Option(False, "--fallback-on-error", help="Show generic guidance if the AI call fails"),
    show_raw: bool = typer.Option(False, "--raw", help="Also print the raw model response"),
    export: Optional[str] = typer.Option(None, "--export", "-e", help="Export the analysis to file (.json or .md)")
):
    """
    Get an AI-generated plan for solving an issue.

    Without ANTHROPIC_API_KEY, generic contribution guidance is shown.
    """
    github = GitHubClient()
    analyzer = IssueAnalyzer()
    presenter = ResultsPresenter(console)
    repo = _resolve(github, repo)

    try:
        issue = github.get_issue(repo, number)
    except RepoVibeError as e:
        _fail(str(e))

    if analyzer.is_configured:
        presenter.show_status(f"\nAnalyzing {repo}#{number} with Claude...")

    try:
        result = analyzer.analyze_issue(issue, repo, language or issue.language)
    except AnalysisError as e:
        if not fallback_on_error:
            _fail(f"Failed to generate AI suggestions: {e}")
        result = build_degraded_result(issue, str(e))

    presenter.present_analysis(issue, repo, result, show_raw=show_raw)

    if export:
        export_analysis(result, issue, repo, export)
        console.print(f"\n[green]Analysis exported to {export}[/green]")


# =============================================================================
# FAVORITES COMMANDS
# =============================================================================

@app.command()
def favorites(
    action: str = typer.Argument(
        "list",
        help="Action: 'list' or 'clear'"
    ),
    search: Optional[str] = typer.Option(
        None, "--search", "-s",
        help="Only favorites whose name, owner/repo, description or language contains this text"
    )
):
    """
    Manage your favorite repositories.

    Examples:
        python main.py favorites
        python main.py favorites list --search rust
        python main.py favorites clear
    """
    fav_manager = FavoritesManager()
    presenter = ResultsPresenter(console)

    if action == "list":
        if search:
            matches = fav_manager.search(search)
            if not matches and fav_manager.count():
                console.print(f"[yellow]No favorites match '{escape(search)}'.[/yellow]")
                return
            presenter.present_favorites(matches)
        else:
            presenter.present_favorites(fav_manager.get_favorites())

    elif action == "clear":
        if fav_manager.count() == 0:
            console.print("[yellow]No favorites to clear.[/yellow]")
            return

        confirm = Prompt.ask(
            f"Are you sure you want to delete all {fav_manager.count()} favorites?",
            choices=["yes", "no"],
            default="no"
        )
        if confirm == "yes":
            fav_manager.clear_all()
            console.print("[green]All favorites cleared.[/green]")

    else:
        console.print(f"[red]Unknown action: {action}[/red]")
        console.print("Use 'list' or 'clear'")


@app.command()
def favorite_add(
    repo: str = typer.Argument(..., help="Repository as 'owner/repo', or just its name")
):
    """Save a repository to favorites."""
    fav_manager = FavoritesManager()
    github = None

    if "/" not in repo:
        github = GitHubClient()
        repo = _resolve(github, repo)

    if fav_manager.is_favorite(repo):
        console.print(f"[yellow]{escape(repo)} is already a favorite.[/yellow]")
        return

    try:
        summary = (github or GitHubClient()).get_repository(repo)
    except RepoVibeError as e:
        _fail(str(e))

    fav_manager.add_favorite(summary)
    console.print(f"[green]Added {summary.full_name} to favorites.[/green]")


@app.command()
def favorite_remove(
    repo: str = typer.Argument(..., help="Repository in 'owner/repo' format")
):
    """Remove a repository from favorites."""
    if FavoritesManager().remove_favorite(repo):
        console.print(f"[green]Removed {repo} from favorites.[/green]")
    else:
        console.print(f"[yellow]{repo} is not in favorites.[/yellow]")


# =============================================================================
# MAINTENANCE
# =============================================================================

@app.command()
def cache(
    action: str = typer.Argument(
        "stats",
        help="Action: 'stats' to show statistics, 'clear' to clear cache"
    )
):
    """
    Manage the cache for GitHub responses.

    The cache stores:
    - Repository discovery results (10 min TTL)
    - Issue listings (5 min TTL)
    """
    cache_manager = CacheManager()

    if action == "stats":
        stats = cache_manager.get_stats()

        console.print("\n[bold blue]Cache Statistics[/bold blue]\n")
        for name, label in (("discover", "Repository discovery"), ("issues", "Issue listings")):
            s = stats[name]
            console.print(
                f"[bold]{label}:[/bold] {s['hits']} hits, {s['misses']} misses "
                f"({s['hit_rate']:.0%} hit rate)"
            )
        console.print(f"[bold]Total Size:[/bold] {stats['cache_size_mb']} MB")
        console.print(f"[bold]Location:[/bold] {cache_manager.cache_dir}")
        console.print()

    elif action == "clear":
        confirm = Prompt.ask(
            "Are you sure you want to clear the cache?",
            choices=["yes", "no"],
            default="no"
        )
        if confirm == "yes":
            cache_manager.clear_all()
            console.print("[green]Cache cleared successfully![/green]")
        else:
            console.print("[yellow]Cache clear cancelled.[/yellow]")

    else:
        console.print(f"[red]Unknown action: {action}[/red]")
        console.print("Use 'stats' or 'clear'")


@app.command()
def check_setup():
    """
    Verify that API keys are configured correctly.
    """
    console.print("\n[bold]Checking setup...[/bold]\n")

    github_token = os.getenv("GITHUB_TOKEN")
    if github_token:
        console.print("[green]GitHub Token: Configured[/green]")
    else:
        console.print("[yellow]GitHub Token: Not configured (will use lower rate limits)[/yellow]")

    try:
        rate_limit = GitHubClient().get_rate_limit_status()
        console.print(f"  Rate limit: {rate_limit['remaining']}/{rate_limit['limit']} requests remaining")
    except Exception as e:
        console.print(f"[yellow]  Warning: Could not check rate limit: {e}[/yellow]")

    if os.getenv(API_KEY_ENV_VAR):
        console.print("[green]Anthropic API Key: Configured[/green]")
    else:
        console.print("[yellow]Anthropic API Key: Not configured (generic guidance only)[/yellow]")
        console.print(f"  Set {API_KEY_ENV_VAR} in your .env file")

    console.print()


if __name__ == "__main__":
    app()
