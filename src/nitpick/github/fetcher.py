"""Data fetcher: runs GitHub calls and packages outcomes as result messages.

Every method returns a message and never raises, so a worker thread can hand
the result straight back to the event loop. Each method is one operation with
a single time limit, however many pages it reads.
"""

import logging

import httpx

from nitpick.github.client import GitHubClient
from nitpick.messages import (
    CommentsFetched,
    FetchTicket,
    PullRequestsFetched,
    RepositoriesFetched,
)
from nitpick.models import PullRequest, Repository


logger = logging.getLogger(__name__)

# Transport failures, undecodable bodies and records of the wrong shape
FETCH_ERRORS = (httpx.HTTPError, ValueError, KeyError, TypeError, AttributeError)


def describe_error(error: Exception) -> str:
    """Turn a fetch failure into a one-line message for the error screen."""
    if isinstance(error, httpx.HTTPStatusError):
        response = error.response
        if response.status_code in (403, 429) and "rate limit" in str(error).lower():
            return str(error)
        try:
            body = response.json()
        except ValueError:
            body = None
        detail = body.get("message", "") if isinstance(body, dict) else ""
        reason = detail or response.reason_phrase
        return f"{response.status_code} {reason} ({response.request.url})"
    if isinstance(error, httpx.TimeoutException):
        return f"Request timed out: {error}"
    if isinstance(error, KeyError):
        return f"Unexpected response from GitHub: missing {error}"
    if isinstance(error, (TypeError, AttributeError)):
        return f"Unexpected response from GitHub: {error}"
    return str(error) or type(error).__name__


class GitHubFetcher:
    """Fetches the three levels of the browser's hierarchy."""

    def __init__(self, client: GitHubClient):
        self.client = client

    def close(self) -> None:
        self.client.close()

    def fetch_repositories(self, ticket: FetchTicket) -> RepositoriesFetched:
        try:
            repos = self.client.list_repositories(deadline=self.client.deadline())
        except FETCH_ERRORS as e:
            logger.warning("Fetching repositories failed: %s", e)
            return RepositoriesFetched(ticket=ticket, error=describe_error(e))
        return RepositoriesFetched(ticket=ticket, repositories=tuple(repos))

    def fetch_pull_requests(self, ticket: FetchTicket, repo: Repository) -> PullRequestsFetched:
        try:
            prs = self.client.list_pull_requests(repo, deadline=self.client.deadline())
        except FETCH_ERRORS as e:
            logger.warning("Fetching pull requests of %s failed: %s", repo.full_name, e)
            return PullRequestsFetched(ticket=ticket, error=describe_error(e))
        return PullRequestsFetched(ticket=ticket, pull_requests=tuple(prs))

    def fetch_comments(
        self,
        ticket: FetchTicket,
        repo: Repository,
        pr: PullRequest,
    ) -> CommentsFetched:
        try:
            comments = self.client.list_review_comments(
                repo, pr, deadline=self.client.deadline()
            )
        except FETCH_ERRORS as e:
            logger.warning(
                "Fetching comments of %s#%d failed: %s", repo.full_name, pr.number, e
            )
            return CommentsFetched(ticket=ticket, error=describe_error(e))
        return CommentsFetched(ticket=ticket, comments=tuple(comments))
