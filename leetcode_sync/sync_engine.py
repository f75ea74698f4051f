"""
Main sync engine for LeetCode → GitHub synchronization.

Orchestrates:
- Solved problem discovery
- Submission and statement fetching
- Solution fetching
- Publishing to the target repository
"""

from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Iterable, Optional

from rich.console import Console
from rich.table import Table

from leetcode_sync.config import Config
from leetcode_sync.errors import NoSolutionError
from leetcode_sync.github_publisher import ChangeType, FileChange, GitHubPublisher, ProblemPaths, get_file_extension
from leetcode_sync.leetcode_api import LeetCodeAPI, ProblemInfo

console = Console()


@dataclass
class SyncResult:
    """Result of a sync operation."""

    problems_synced: list[str] = field(default_factory=list)
    problems_unchanged: list[str] = field(default_factory=list)
    problems_failed: list[str] = field(default_factory=list)
    failures: dict[str, str] = field(default_factory=dict)
    changes: list[FileChange] = field(default_factory=list)
    listing_error: Optional[Exception] = None

    def count(self, change_type: ChangeType) -> int:
        return sum(1 for c in self.changes if c.change_type == change_type)

    @property
    def commits(self) -> int:
        """Number of commits produced (or planned, in a dry run)."""
        return sum(1 for c in self.changes if c.committed)

    @property
    def success(self) -> bool:
        """Check if sync was successful."""
        return self.listing_error is None and len(self.problems_failed) == 0


class SyncEngine:
    """
    Main orchestrator for LeetCode → GitHub synchronization.

    For every solved problem, in listing order:
    1. Resolve the accepted submission and fetch the statement (concurrently)
    2. Fetch the submission's source code
    3. Publish solution and README

    A failing problem is reported and skipped; the run continues.
    """

    def __init__(
        self,
        config: Config,
        leetcode_api: Optional[LeetCodeAPI] = None,
        publisher: Optional[GitHubPublisher] = None,
    ):
        """
        Initialize sync engine.

        Args:
            config: Configuration instance.
            leetcode_api: LeetCode client. Built from config if omitted.
            publisher: Repository publisher. Built from config if omitted.
        """
        self.config = config
        self.leetcode_api = leetcode_api if leetcode_api is not None else LeetCodeAPI(config)
        self.publisher = publisher if publisher is not None else GitHubPublisher(config)

    def sync(self, only: Iterable[str] = (), limit: Optional[int] = None) -> SyncResult:
        """
        Perform full synchronization.

        Args:
            only: Restrict the run to these title slugs.
            limit: Process at most this many problems.

        Returns:
            SyncResult with details of the operation.
        """
        result = SyncResult()

        console.print("\n[bold blue]🔄 Starting LeetCode → GitHub Sync[/bold blue]\n")

        try:
            problems = self.leetcode_api.get_solved_problems()
        except Exception as e:
            console.print(f"[red]Failed to fetch solved problems: {e}[/red]")
            result.listing_error = e
            return result

        console.print(f"Found {len(problems)} solved problems")

        problems = self._select(problems, only, limit)

        with ThreadPoolExecutor(max_workers=2) as executor:
            for problem in problems:
                try:
                    changes = self._sync_problem(problem, executor)
                except Exception as e:
                    console.print(f"[red]Error processing problem {problem.title}: {e}[/red]")
                    result.problems_failed.append(problem.title)
                    result.failures[problem.title] = str(e)
                    continue

                result.changes.extend(changes)
                if any(c.committed for c in changes):
                    result.problems_synced.append(problem.title)
                else:
                    result.problems_unchanged.append(problem.title)

        self._print_summary(result)

        return result

    def _select(
        self,
        problems: list[ProblemInfo],
        only: Iterable[str],
        limit: Optional[int],
    ) -> list[ProblemInfo]:
        """Apply the --only / --limit filters, keeping listing order."""
        wanted = set(only)
        if wanted:
            problems = [p for p in problems if p.title_slug in wanted]
        if limit is not None:
            problems = problems[:limit]
        return problems

    def _sync_problem(self, problem: ProblemInfo, executor: ThreadPoolExecutor) -> list[FileChange]:
        """
        Sync a single problem.

        Raises:
            NoSolutionError: If the problem has no accepted submission.
        """
        console.print(f"[cyan]Syncing:[/cyan] {problem.title}")

        # Both futures are joined before anything else happens for this problem
        submission_id_future = executor.submit(
            self.leetcode_api.get_accepted_submission_id, problem.title_slug
        )
        question_future = executor.submit(
            self.leetcode_api.get_question_markdown, problem.title_slug
        )
        wait([submission_id_future, question_future])
        submission_id = submission_id_future.result()
        question = question_future.result()

        if submission_id is None:
            raise NoSolutionError(f"No solution found for problem: {problem.title}")

        submission = self.leetcode_api.get_submission(submission_id)

        problem = problem.with_question(question).with_submission(submission)

        return self.publisher.publish(problem, submission)

    def list_problems(self) -> list[ProblemInfo]:
        """Print the solved problems and where they will be published."""
        problems = self.leetcode_api.get_solved_problems()

        table = Table(title=f"Solved Problems ({len(problems)})")
        table.add_column("Id", style="cyan", justify="right")
        table.add_column("Title", style="white")
        table.add_column("Difficulty", style="yellow")
        table.add_column("Directory", style="green")

        extension = get_file_extension(self.config.default_language)
        for problem in problems:
            table.add_row(
                problem.id,
                problem.title,
                problem.difficulty,
                ProblemPaths.for_problem(problem, extension).directory,
            )

        console.print(table)

        return problems

    def _print_summary(self, result: SyncResult) -> None:
        """Print sync summary."""
        console.print("\n" + "=" * 50)
        console.print("[bold]Sync Summary[/bold]")
        console.print("=" * 50)

        table = Table(show_header=False, box=None)
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="white")

        table.add_row("Problems synced", str(len(result.problems_synced)))
        table.add_row("Problems unchanged", str(len(result.problems_unchanged)))
        table.add_row("Problems failed", str(len(result.problems_failed)))
        table.add_row("Files created", str(result.count(ChangeType.CREATED)))
        table.add_row("Files updated", str(result.count(ChangeType.UPDATED)))
        table.add_row("Dry run", "✓" if self.config.dry_run else "✗")
        table.add_row("LeetCode requests", str(self.leetcode_api.request_count))

        console.print(table)

        if result.problems_synced:
            console.print(f"\n[green]Synced:[/green] {', '.join(result.problems_synced)}")

        if result.problems_failed:
            console.print(f"\n[red]Failed:[/red] {', '.join(result.problems_failed)}")

        console.print("")
