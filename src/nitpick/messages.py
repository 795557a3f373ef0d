"""Event and command types exchanged with the navigation core.

Events flow into ``navigation.update``; commands flow out of it and are
carried out by the application shell, which turns their outcomes back into
events.
"""

from dataclasses import dataclass
from typing import Optional, Union

from nitpick.models import PullRequest, Repository, ReviewComment
from nitpick.prompt import PromptMode


@dataclass(frozen=True)
class FetchTicket:
    """Identifies one issued fetch; only the pending ticket's result is applied."""

    generation: int


# === Events (shell -> core) ===


@dataclass(frozen=True)
class KeyPressed:
    """A key press, named the way the keybindings are documented (``esc``, ``pgup``, ``G``)."""

    key: str
    character: Optional[str] = None


@dataclass(frozen=True)
class Resized:
    """The terminal changed size."""

    width: int
    height: int


@dataclass(frozen=True)
class RepositoriesFetched:
    """Result of listing repositories."""

    ticket: FetchTicket
    repositories: tuple[Repository, ...] = ()
    error: Optional[str] = None


@dataclass(frozen=True)
class PullRequestsFetched:
    """Result of listing a repository's pull requests."""

    ticket: FetchTicket
    pull_requests: tuple[PullRequest, ...] = ()
    error: Optional[str] = None


@dataclass(frozen=True)
class CommentsFetched:
    """Result of listing a pull request's review comments."""

    ticket: FetchTicket
    comments: tuple[ReviewComment, ...] = ()
    error: Optional[str] = None


@dataclass(frozen=True)
class StatusExpired:
    """The clear timer for a transient status fired."""

    generation: int


@dataclass(frozen=True)
class ClipboardResult:
    """Outcome of copying a generated prompt."""

    mode: PromptMode
    error: Optional[str] = None


Event = Union[
    KeyPressed,
    Resized,
    RepositoriesFetched,
    PullRequestsFetched,
    CommentsFetched,
    StatusExpired,
    ClipboardResult,
]


# === Commands (core -> shell) ===


@dataclass(frozen=True)
class FetchRepositories:
    ticket: FetchTicket


@dataclass(frozen=True)
class FetchPullRequests:
    ticket: FetchTicket
    repository: Repository


@dataclass(frozen=True)
class FetchComments:
    ticket: FetchTicket
    repository: Repository
    pull_request: PullRequest


@dataclass(frozen=True)
class CopyPrompt:
    """Generate a prompt for the comment and put it on the clipboard."""

    repository: Repository
    pull_request: PullRequest
    comment: ReviewComment
    mode: PromptMode


@dataclass(frozen=True)
class ScheduleStatusClear:
    """Deliver ``StatusExpired(generation)`` after ``delay`` seconds."""

    delay: float
    generation: int


@dataclass(frozen=True)
class Quit:
    pass


Command = Union[
    FetchRepositories,
    FetchPullRequests,
    FetchComments,
    CopyPrompt,
    ScheduleStatusClear,
    Quit,
]
