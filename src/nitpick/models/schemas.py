"""Records for the GitHub objects Nitpick browses.

Each record is built from a REST API payload with ``from_api`` and only keeps
the fields the browser and the prompt generator need.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a GitHub ISO-8601 timestamp, returning None when absent or invalid."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        return None


def format_line_range(start: int, end: int) -> str:
    """Format a line span as ``L<end>`` or ``L<start>-<end>``; empty when ``end`` is unset."""
    if not end:
        return ""
    if start and start != end:
        return f"L{start}-{end}"
    return f"L{end}"


def _login(data: Optional[dict[str, Any]]) -> str:
    """Return the ``login`` of a user object, or an empty string."""
    if not data:
        return ""
    return data.get("login") or ""


@dataclass(frozen=True)
class Repository:
    """A repository the authenticated user can see."""

    owner: str
    name: str
    full_name: str = ""
    description: Optional[str] = None
    language: Optional[str] = None
    private: bool = False
    fork: bool = False
    updated_at: Optional[datetime] = None
    html_url: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Repository":
        """Build a repository from a ``/user/repos`` or ``/orgs/{org}/repos`` item."""
        owner = _login(data.get("owner"))
        name = data["name"]
        return cls(
            owner=owner,
            name=name,
            full_name=data.get("full_name") or (f"{owner}/{name}" if owner else name),
            description=data.get("description"),
            language=data.get("language"),
            private=bool(data.get("private", False)),
            fork=bool(data.get("fork", False)),
            updated_at=parse_timestamp(data.get("updated_at")),
            html_url=data.get("html_url"),
        )


@dataclass(frozen=True)
class PullRequest:
    """A pull request in a repository."""

    number: int
    title: str
    author: str = ""
    state: str = "open"
    draft: bool = False
    merged: bool = False
    created_at: Optional[datetime] = None
    body: Optional[str] = None
    head_ref: Optional[str] = None
    base_ref: Optional[str] = None
    html_url: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "PullRequest":
        """Build a pull request from a ``/repos/{owner}/{name}/pulls`` item."""
        head = data.get("head") or {}
        base = data.get("base") or {}
        return cls(
            number=int(data["number"]),
            title=data.get("title") or "",
            author=_login(data.get("user")),
            state=data.get("state") or "",
            draft=bool(data.get("draft", False)),
            # List endpoints omit ``merged``; ``merged_at`` is always present
            merged=bool(data.get("merged") or data.get("merged_at")),
            created_at=parse_timestamp(data.get("created_at")),
            body=data.get("body"),
            head_ref=head.get("ref"),
            base_ref=base.get("ref"),
            html_url=data.get("html_url"),
        )


@dataclass(frozen=True)
class ReviewComment:
    """A review comment attached to a pull request diff."""

    id: int
    body: str = ""
    author: str = ""
    path: Optional[str] = None
    line: int = 0
    start_line: int = 0
    original_line: int = 0
    original_start_line: int = 0
    diff_hunk: Optional[str] = None
    html_url: Optional[str] = None
    in_reply_to_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_reply(self) -> bool:
        """True when the comment answers another comment in its thread."""
        return bool(self.in_reply_to_id)

    @property
    def line_range(self) -> str:
        """Current line span, e.g. ``L12`` or ``L15-20``."""
        return format_line_range(self.start_line, self.line)

    @property
    def original_line_range(self) -> str:
        """Span on the original diff, only when it moved from the current line."""
        if not self.original_line or self.original_line == self.line:
            return ""
        return format_line_range(self.original_start_line, self.original_line)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "ReviewComment":
        """Build a comment from a ``/pulls/{number}/comments`` item."""
        return cls(
            id=int(data["id"]),
            body=data.get("body") or "",
            author=_login(data.get("user")),
            path=data.get("path"),
            # Line fields are null for outdated comments
            line=data.get("line") or 0,
            start_line=data.get("start_line") or 0,
            original_line=data.get("original_line") or 0,
            original_start_line=data.get("original_start_line") or 0,
            diff_hunk=data.get("diff_hunk"),
            html_url=data.get("html_url"),
            in_reply_to_id=data.get("in_reply_to_id"),
            created_at=parse_timestamp(data.get("created_at")),
            updated_at=parse_timestamp(data.get("updated_at")),
        )
