"""Data models for Nitpick."""

from .schemas import (
    PullRequest,
    Repository,
    ReviewComment,
    format_line_range,
    parse_timestamp,
)

__all__ = [
    "PullRequest",
    "Repository",
    "ReviewComment",
    "format_line_range",
    "parse_timestamp",
]
