"""
GitHub publishing for the sync system.

Handles:
- Target path generation
- Solution / README rendering
- Content-based change detection
- Create and update commits through the contents API
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from github import Auth, Github, GithubException, UnknownObjectException
from github.ContentFile import ContentFile
from github.Repository import Repository
from rich.console import Console

from leetcode_sync.config import Config
from leetcode_sync.errors import NotFoundError, ProtocolError, TransportError
from leetcode_sync.leetcode_api import ProblemInfo, Submission

console = Console()

# Characters rejected in Windows file names; stripped on every platform
# so the same title always maps to the same path.
INVALID_FILENAME_CHARS = frozenset('<>:"/\\|?*' + "".join(chr(i) for i in range(32)))

LANGUAGE_EXTENSIONS = {
    "python": "py",
    "python3": "py",
    "cpp": "cpp",
    "c++": "cpp",
    "java": "java",
    "c#": "cs",
    "csharp": "cs",
    "javascript": "js",
    "typescript": "ts",
    "c": "c",
    "go": "go",
    "golang": "go",
    "kotlin": "kt",
    "rust": "rs",
    "ruby": "rb",
    "swift": "swift",
    "scala": "scala",
    "mysql": "sql",
    "bash": "sh",
}

# Line comment marker per extension; everything else uses //
COMMENT_PREFIXES = {
    "py": "#",
    "rb": "#",
    "sh": "#",
    "sql": "--",
}


def sanitize(title: str) -> str:
    """
    Remove characters that are invalid in a file name.

    Nothing is substituted, so a title made only of invalid
    characters becomes an empty string.

    Examples:
        "Two Sum" -> "Two Sum"
        "Pow(x, n)" -> "Pow(x, n)"
        "A/B: C?" -> "AB C"
    """
    return "".join(ch for ch in title or "" if ch not in INVALID_FILENAME_CHARS)


def get_file_extension(language: Optional[str]) -> str:
    """Map a language name (case-insensitive) to a file extension."""
    return LANGUAGE_EXTENSIONS.get((language or "").strip().lower(), "txt")


class ChangeType(Enum):
    """Outcome of publishing one file."""
    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


@dataclass
class FileChange:
    """Represents a published file."""

    path: str
    change_type: ChangeType

    @property
    def committed(self) -> bool:
        """Whether publishing produced (or, in a dry run, would produce) a commit."""
        return self.change_type != ChangeType.UNCHANGED


@dataclass(frozen=True)
class ProblemPaths:
    """Repository paths of one problem."""

    directory: str
    solution: str
    readme: str

    @classmethod
    def for_problem(cls, problem: ProblemInfo, extension: str) -> "ProblemPaths":
        """
        Build the paths for a problem.

        Examples:
            id="42", title="Two Sum", difficulty="Easy", extension="py" ->
                Easy/0042-Two Sum/0042-Two Sum.py
                Easy/0042-Two Sum/README.md
        """
        name = f"{problem.id.zfill(4)}-{sanitize(problem.title)}"
        directory = f"{problem.difficulty}/{name}"
        return cls(
            directory=directory,
            solution=f"{directory}/{name}.{extension}",
            readme=f"{directory}/README.md",
        )


class GitHubPublisher:
    """
    Writes solutions and statements into the target repository.

    Every write is its own commit on the configured branch. Files whose
    content is byte-identical to what is committed are left alone.
    """

    def __init__(self, config: Config, repo: Optional[Repository] = None):
        """
        Initialize the publisher.

        Args:
            config: Configuration instance.
            repo: Repository handle to use. Opened from config if omitted.
        """
        self.config = config
        self.branch = config.branch
        self.repo = repo if repo is not None else self._open_repo()

    def _open_repo(self) -> Repository:
        client = Github(auth=Auth.Token(self.config.github_token))
        return client.get_repo(self.config.repo_full_name, lazy=True)

    def render_solution(self, problem: ProblemInfo, code: str, extension: str) -> str:
        """Prefix the submitted code with a comment header."""
        prefix = COMMENT_PREFIXES.get(extension, "//")
        header = [
            f"{prefix} Problem: {problem.title}",
            f"{prefix} Difficulty: {problem.difficulty}",
            f"{prefix} LeetCode URL: {problem.url}",
            f"{prefix} Date: {problem.time_stamp}",
        ]
        return "\n".join(header) + "\n\n" + code

    def render_readme(self, problem: ProblemInfo) -> str:
        """Create the README with a link back to LeetCode."""
        lines = [
            f"# {problem.title}",
            "",
            f"**Difficulty**: {problem.difficulty}",
            "",
            f"**URL**: [{problem.url}]({problem.url})",
            "",
            "---",
            "",
            problem.question,
        ]
        return "\n".join(lines) + "\n"

    def publish(self, problem: ProblemInfo, submission: Submission) -> list[FileChange]:
        """
        Publish the solution and README of one problem.

        Args:
            problem: Problem with question and time_stamp attached.
            submission: Accepted submission to publish.

        Returns:
            One FileChange per file, solution first.
        """
        console.print(f"[cyan]Publishing:[/cyan] {problem.title}")

        extension = get_file_extension(submission.lang or self.config.default_language)
        paths = ProblemPaths.for_problem(problem, extension)

        return [
            self.push_file(
                paths.solution,
                self.render_solution(problem, submission.code, extension),
                kind="solution",
                title=problem.title,
            ),
            self.push_file(
                paths.readme,
                self.render_readme(problem),
                kind="README",
                title=problem.title,
            ),
        ]

    def push_file(self, path: str, content: str, kind: str, title: str) -> FileChange:
        """
        Create or update one file unless its content is already committed.

        Args:
            path: Repository path.
            content: New file content.
            kind: "solution" or "README", used in the commit message.
            title: Problem title, used in the commit message.

        Returns:
            FileChange describing what happened.
        """
        try:
            existing = self._get_existing(path)
        except NotFoundError:
            existing = None

        new_bytes = content.encode("utf-8")

        if existing is not None and existing.decoded_content == new_bytes:
            console.print(f"[dim]No changes to push for: {path}[/dim]")
            return FileChange(path=path, change_type=ChangeType.UNCHANGED)

        if existing is not None:
            change_type = ChangeType.UPDATED
            message = f"Update {kind} for {title}"
        else:
            change_type = ChangeType.CREATED
            message = f"Add {kind} for {title}"

        if self.config.dry_run:
            console.print(f"[yellow]Dry run - would commit:[/yellow] {message} ({path})")
            return FileChange(path=path, change_type=change_type)

        try:
            if existing is not None:
                self.repo.update_file(path, message, new_bytes, existing.sha, branch=self.branch)
            else:
                self.repo.create_file(path, message, new_bytes, branch=self.branch)
        except GithubException as e:
            raise TransportError(f"Failed to write {path}: {e}", status_code=e.status) from e

        console.print(f"[green]Pushed ({change_type.value}):[/green] {path}")
        return FileChange(path=path, change_type=change_type)

    def _get_existing(self, path: str) -> ContentFile:
        """
        Fetch the committed file at path on the configured branch.

        Raises:
            NotFoundError: If no file exists at path.
        """
        try:
            content = self.repo.get_contents(path, ref=self.branch)
        except UnknownObjectException as e:
            raise NotFoundError(f"{path} does not exist on {self.branch}") from e
        except GithubException as e:
            raise TransportError(f"Failed to read {path}: {e}", status_code=e.status) from e

        if isinstance(content, list):
            raise ProtocolError(f"{path} is a directory, expected a file")

        return content
