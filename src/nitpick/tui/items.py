"""List items wrapping GitHub records for display in a list."""

import re
from dataclasses import dataclass
from typing import Union

from nitpick.models import PullRequest, Repository, ReviewComment


PRIVATE_GLYPH = "🔒"
FORK_GLYPH = "🍴"
NO_DESCRIPTION = "No description"
EMPTY_COMMENT = "Empty comment"
MAX_TITLE_LENGTH = 80

DATE_FORMAT = "%Y-%m-%d"
DATETIME_FORMAT = "%Y-%m-%d %H:%M"

_HEADING_PREFIX = re.compile(r"^\s*#\s*")


@dataclass(frozen=True)
class RepositoryItem:
    """A repository in the list."""

    repo: Repository

    @property
    def filter_text(self) -> str:
        return self.repo.name

    @property
    def title(self) -> str:
        name = self.repo.name
        if self.repo.owner:
            name = f"{self.repo.owner}/{name}"

        indicators = []
        if self.repo.private:
            indicators.append(PRIVATE_GLYPH)
        if self.repo.fork:
            indicators.append(FORK_GLYPH)
        if indicators:
            name = f"{name} {' '.join(indicators)}"
        return name

    @property
    def description(self) -> str:
        parts = [self.repo.description or NO_DESCRIPTION]
        if self.repo.language:
            parts.append(self.repo.language)
        if self.repo.updated_at:
            parts.append(f"Updated {self.repo.updated_at.strftime(DATE_FORMAT)}")
        return " • ".join(parts)


@dataclass(frozen=True)
class PullRequestItem:
    """A pull request in the list."""

    pr: PullRequest

    @property
    def filter_text(self) -> str:
        return self.pr.title

    @property
    def title(self) -> str:
        return f"#{self.pr.number} {self.pr.title}"

    @property
    def description(self) -> str:
        created = self.pr.created_at.strftime(DATE_FORMAT) if self.pr.created_at else ""

        status = []
        if self.pr.draft:
            status.append("DRAFT")
        if self.pr.merged:
            status.append("MERGED")
        prefix = f"[{', '.join(status)}] " if status else ""

        return f"{prefix}by {self.pr.author} • Created {created}"


@dataclass(frozen=True)
class CommentItem:
    """A review comment in the list."""

    comment: ReviewComment

    @property
    def filter_text(self) -> str:
        return self.comment.body

    @property
    def title(self) -> str:
        for line in self.comment.body.strip().split("\n"):
            line = line.strip()
            if not line:
                continue
            line = _HEADING_PREFIX.sub("", line)
            if len(line) > MAX_TITLE_LENGTH:
                line = line[:MAX_TITLE_LENGTH - 3] + "..."
            return line
        return EMPTY_COMMENT

    @property
    def description(self) -> str:
        created = ""
        if self.comment.created_at:
            created = self.comment.created_at.strftime(DATETIME_FORMAT)

        time_info = created
        if self.comment.created_at and self.comment.updated_at:
            updated = self.comment.updated_at.strftime(DATETIME_FORMAT)
            if updated != created:
                time_info = f"{created} (updated {updated})"

        file_info = ""
        if self.comment.path:
            file_info = f" • {self.comment.path}"
            if self.comment.line_range:
                file_info += f" {self.comment.line_range}"
            if self.comment.original_line_range:
                file_info += f" (orig {self.comment.original_line_range})"

        return f"by {self.comment.author} • {time_info}{file_info}"


ListItem = Union[RepositoryItem, PullRequestItem, CommentItem]
