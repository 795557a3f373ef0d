"""Shared fixtures for Nitpick tests."""

from datetime import datetime, timezone

import pytest

from nitpick.models import PullRequest, Repository, ReviewComment


def ts(day: int, hour: int = 12, minute: int = 0) -> datetime:
    """A UTC timestamp in March 2024."""
    return datetime(2024, 3, day, hour, minute, tzinfo=timezone.utc)


@pytest.fixture
def make_repo():
    """Factory for repositories."""
    def _make(name: str = "widgets", owner: str = "acme", **kwargs) -> Repository:
        kwargs.setdefault("full_name", f"{owner}/{name}")
        return Repository(owner=owner, name=name, **kwargs)
    return _make


@pytest.fixture
def make_pr():
    """Factory for pull requests."""
    def _make(number: int = 42, title: str = "Add caching", **kwargs) -> PullRequest:
        kwargs.setdefault("author", "octocat")
        kwargs.setdefault("created_at", ts(1))
        return PullRequest(number=number, title=title, **kwargs)
    return _make


@pytest.fixture
def make_comment():
    """Factory for review comments."""
    def _make(id: int = 1, body: str = "Please rename this.", **kwargs) -> ReviewComment:
        kwargs.setdefault("author", "reviewer")
        kwargs.setdefault("path", "src/cache.py")
        kwargs.setdefault("line", 12)
        kwargs.setdefault("created_at", ts(2))
        kwargs.setdefault("updated_at", kwargs["created_at"])
        return ReviewComment(id=id, body=body, **kwargs)
    return _make


@pytest.fixture
def repo(make_repo) -> Repository:
    return make_repo(description="Widget factory", language="Python")


@pytest.fixture
def pr(make_pr) -> PullRequest:
    return make_pr(body="Adds an LRU cache.", head_ref="feature/cache", base_ref="main")


@pytest.fixture
def comment(make_comment) -> ReviewComment:
    return make_comment(
        diff_hunk="@@ -10,3 +10,4 @@\n-old\n+new",
        html_url="https://github.com/acme/widgets/pull/42#discussion_r1",
    )
