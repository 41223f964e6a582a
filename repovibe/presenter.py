"""
Terminal presenter using Rich.

Rich gives us tables, panels and colors. Everything the CLI shows goes
through ResultsPresenter so the commands in main.py stay short.
"""

from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text
from rich import box

from .favorites import FavoriteRepo
from .fallback import FALLBACK_SENTINEL
from .models import AnalysisResult, Issue, Pagination, RepositorySummary


class ResultsPresenter:
    """Presents repositories, issues and analyses in the terminal."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

        self.difficulty_colors = {
            "easy": "green",
            "medium": "yellow",
            "hard": "red"
        }

        self.state_colors = {
            "open": "green",
            "closed": "bright_black"
        }

    def show_status(self, message: str, style: str = "blue"):
        self.console.print(f"[{style}]{message}[/{style}]")

    def show_error(self, message: str):
        self.console.print(f"[red]{message}[/red]")

    def _difficulty(self, difficulty: str) -> str:
        color = self.difficulty_colors.get(difficulty.lower(), "white")
        return f"[{color}]{escape(difficulty)}[/{color}]"

    def _time_color(self, estimated_time: str) -> str:
        if "hour" in estimated_time:
            return "green"
        if "day" in estimated_time:
            return "yellow"
        if "week" in estimated_time:
            return "red"
        return "white"

    def show_pagination(self, pagination: Pagination, shown: int):
        self.console.print(
            f"[dim]Page {pagination.current_page} of {pagination.total_pages} "
            f"| showing {shown} of {pagination.total_count:,} total"
            f"{' | more with --page ' + str(pagination.current_page + 1) if pagination.has_next_page else ''}"
            f"[/dim]"
        )

    # =========================================================================
    # REPOSITORIES
    # =========================================================================

    def present_repositories(
        self,
        repos: List[RepositorySummary],
        pagination: Pagination,
        favorite_ids: Optional[set] = None
    ):
        if not repos:
            self.console.print("\n[yellow]No repositories found.[/yellow]\n")
            return

        favorite_ids = favorite_ids or set()

        table = Table(title="Repositories", box=box.ROUNDED)
        table.add_column("", width=2)
        table.add_column("Repository", style="cyan")
        table.add_column("Language", width=12)
        table.add_column("Stars", justify="right")
        table.add_column("Forks", justify="right")
        table.add_column("Description", max_width=50)

        for repo in repos:
            star = "[yellow]★[/yellow]" if repo.full_name in favorite_ids else ""
            description = repo.description or "-"
            table.add_row(
                star,
                escape(repo.full_name),
                escape(repo.language or "-"),
                f"{repo.stargazers_count:,}",
                f"{repo.forks_count:,}",
                escape(description[:50] + "..." if len(description) > 50 else description)
            )

        self.console.print()
        self.console.print(table)
        self.show_pagination(pagination, len(repos))

    # =========================================================================
    # ISSUES
    # =========================================================================

    def present_issues(self, repository: str, issues: List[Issue], pagination: Pagination):
        if not issues:
            self.console.print(f"\n[yellow]No issues found in {escape(repository)} for these filters.[/yellow]\n")
            return

        table = Table(title=f"Issues in {escape(repository)}", box=box.ROUNDED)
        table.add_column("#", style="dim", justify="right")
        table.add_column("Title", max_width=50)
        table.add_column("Status", width=8)
        table.add_column("Labels", max_width=30)
        table.add_column("Difficulty", width=10)
        table.add_column("Comments", justify="right")
        table.add_column("Created", width=10)
        table.add_column("Author")

        for issue in issues:
            state_color = self.state_colors.get(issue.state, "white")
            table.add_row(
                str(issue.number),
                escape(issue.title[:50] + "..." if len(issue.title) > 50 else issue.title),
                f"[{state_color}]{escape(issue.state)}[/{state_color}]",
                escape(", ".join(issue.label_names)) or "-",
                self._difficulty(issue.difficulty or "-"),
                str(issue.comments),
                (issue.created_at or "")[:10],
                escape(issue.user_login)
            )

        self.console.print()
        self.console.print(table)
        self.show_pagination(pagination, len(issues))

    # =========================================================================
    # FAVORITES
    # =========================================================================

    def present_favorites(self, favorites: List[FavoriteRepo]):
        if not favorites:
            self.console.print("\n[yellow]No favorites yet.[/yellow]")
            self.console.print("[dim]Use 'favorite-add owner/repo' to save one.[/dim]\n")
            return

        table = Table(title="Favorite Repositories", box=box.ROUNDED)
        table.add_column("#", style="dim", width=4)
        table.add_column("Repository", style="cyan")
        table.add_column("Language", width=12)
        table.add_column("Stars", justify="right")
        table.add_column("Added", width=10)

        for i, fav in enumerate(favorites, 1):
            table.add_row(
                str(i),
                escape(fav.id),
                escape(fav.language or "-"),
                f"{fav.stargazers_count:,}" if fav.stargazers_count is not None else "-",
                fav.added_at[:10]
            )

        self.console.print()
        self.console.print(table)
        self.console.print()

    # =========================================================================
    # ANALYSIS
    # =========================================================================

    def present_analysis(self, issue: Issue, repository: str, result: AnalysisResult, show_raw: bool = False):
        """Show an analysis as a stack of panels, one per section."""
        s = result.suggestions
        analysis = s.problem_analysis

        self.console.print()

        if not result.success:
            self.console.print("[red]AI analysis failed. Showing generic guidance.[/red]")
        elif result.raw_response == FALLBACK_SENTINEL:
            self.console.print("[yellow]AI analysis is not configured. Showing generic guidance.[/yellow]")

        header = (
            f"[bold]{escape(issue.title)}[/bold]\n"
            f"[dim]{escape(repository)}#{issue.number}[/dim]\n\n"
            f"{escape(analysis.summary)}\n\n"
            f"Complexity: {self._difficulty(analysis.complexity)} | "
            f"Estimated time: [{self._time_color(analysis.estimated_time)}]"
            f"{escape(analysis.estimated_time)}[/{self._time_color(analysis.estimated_time)}]"
        )
        if analysis.key_challenges:
            header += "\n\n[bold]Key challenges:[/bold]\n" + self._bullets(analysis.key_challenges)

        self.console.print(Panel(header, title="[bold blue]Problem Analysis[/bold blue]", border_style="blue"))

        approach = s.solution_approach
        body = self._numbered(approach.steps)
        if approach.technologies:
            body += f"\n\n[bold]Technologies:[/bold] {escape(', '.join(approach.technologies))}"
        if approach.files_to_modify:
            body += "\n\n[bold]Files to modify:[/bold]\n" + self._bullets(approach.files_to_modify)
        self.console.print(Panel(body or "[dim]No steps suggested[/dim]", title="Solution Approach", border_style="green"))

        for snippet in s.code_examples.snippets:
            self.console.print(Panel(
                Syntax(snippet.code, snippet.language or "text", theme="monokai", word_wrap=True),
                title=f"Code Example ({snippet.language or 'text'})",
                subtitle=escape(snippet.description) or None,
                border_style="magenta"
            ))

        pr = s.pr_guidelines
        pr_body = f"[bold]{escape(pr.title)}[/bold]\n\n{escape(pr.description)}"
        if pr.checklist:
            pr_body += "\n\n" + "\n".join(f"☐ {escape(item)}" for item in pr.checklist)
        self.console.print(Panel(pr_body, title="Pull Request", border_style="cyan"))

        res = s.resources
        resource_lines = []
        for name, items in (
            ("Documentation", res.documentation),
            ("Examples", res.examples),
            ("Related issues", res.related_issues)
        ):
            if items:
                resource_lines.append(f"[bold]{name}:[/bold]\n" + self._bullets(items))
        if resource_lines:
            self.console.print(Panel("\n\n".join(resource_lines), title="Resources", border_style="white"))

        if s.contribution_tips:
            self.console.print(Panel(self._bullets(s.contribution_tips), title="Contribution Tips", border_style="yellow"))

        if show_raw and result.raw_response:
            self.console.print(Panel(Text(result.raw_response), title="Raw Response", border_style="bright_black"))

    @staticmethod
    def _bullets(items: List[str]) -> str:
        return "\n".join(f"  • {escape(item)}" for item in items)

    @staticmethod
    def _numbered(items: List[str]) -> str:
        return "\n".join(f"  {i}. {escape(item)}" for i, item in enumerate(items, 1))
