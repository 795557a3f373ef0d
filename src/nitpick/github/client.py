"""GitHub REST client for Nitpick.

This module provides functionality to:
- List repositories visible to the authenticated user (personal and organizational)
- List open pull requests of a repository
- List review comments of a pull request
- Track rate limit information from response headers
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Iterator, Optional

import httpx

from nitpick.models import PullRequest, Repository, ReviewComment


logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
REQUEST_TIMEOUT = 30.0
PER_PAGE = 100


class DeadlineExceeded(httpx.TimeoutException):
    """A multi-request operation ran past its overall time limit."""


@dataclass
class RateLimitInfo:
    """GitHub API rate limit information."""

    limit: int = 5000
    remaining: int = 5000
    reset_at: float = 0.0

    @classmethod
    def from_headers(cls, headers: httpx.Headers) -> "RateLimitInfo":
        """Parse rate limit info from response headers."""
        return cls(
            limit=int(headers.get("x-ratelimit-limit", 5000)),
            remaining=int(headers.get("x-ratelimit-remaining", 5000)),
            reset_at=float(headers.get("x-ratelimit-reset", 0)),
        )

    @property
    def is_exhausted(self) -> bool:
        """Check if rate limit is exhausted."""
        return self.remaining <= 0

    @property
    def seconds_until_reset(self) -> float:
        """Seconds until rate limit resets."""
        return max(0, self.reset_at - time.time())


class GitHubClient:
    """Client for the parts of the GitHub API Nitpick reads."""

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: str = DEFAULT_API_URL,
        timeout: float = REQUEST_TIMEOUT,
    ):
        """Initialize GitHub client.

        Args:
            token: GitHub personal access token.
            base_url: API root, overridable for GitHub Enterprise.
            timeout: Time limit in seconds for each request, and for each
                listing when it is given a deadline.
        """
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client: Optional[httpx.Client] = None
        self._rate_limit = RateLimitInfo()

    @property
    def client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None:
            headers = {
                "Accept": "application/vnd.github+json",
                "User-Agent": "Nitpick-Review-Browser",
            }
            if self.token:
                headers["Authorization"] = f"Bearer {self.token}"
            self._client = httpx.Client(
                base_url=self.base_url,
                headers=headers,
                timeout=self.timeout,
                follow_redirects=True,
            )
        return self._client

    def deadline(self) -> float:
        """Monotonic time by which an operation started now must finish."""
        return time.monotonic() + self.timeout

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            self._client.close()
            self._client = None

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def get(self, url: str, deadline: Optional[float] = None, **kwargs) -> httpx.Response:
        """Make a GET request, recording rate limits and raising on failure.

        Args:
            url: Path relative to the API root
            deadline: Monotonic time after which no request is started; the
                request's own timeout is shortened to what is left

        Raises:
            DeadlineExceeded: When the deadline has already passed.
            httpx.HTTPStatusError: For non-2xx responses, with a readable
                message when the rate limit is exhausted.
            httpx.HTTPError: For transport failures and timeouts.
        """
        if deadline is not None:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise DeadlineExceeded(f"gave up after {self.timeout:g}s")
            kwargs.setdefault("timeout", min(self.timeout, remaining))

        logger.debug("GET %s %s", url, kwargs.get("params", {}))
        response = self.client.get(url, **kwargs)
        self._rate_limit = RateLimitInfo.from_headers(response.headers)

        if response.status_code in (403, 429) and self._rate_limit.is_exhausted:
            raise httpx.HTTPStatusError(
                f"Rate limit exceeded. Resets in {self._rate_limit.seconds_until_reset:.0f}s",
                request=response.request,
                response=response,
            )

        response.raise_for_status()
        return response

    def _paginate(
        self,
        url: str,
        params: Optional[dict[str, Any]] = None,
        deadline: Optional[float] = None,
    ) -> Iterator[dict]:
        """Yield items from every page of a list endpoint.

        Stops at the first page shorter than ``PER_PAGE``.

        Raises:
            ValueError: If a page is not a JSON list.
        """
        page = 1
        while True:
            query = dict(params or {})
            query.update({"per_page": PER_PAGE, "page": page})
            data = self.get(url, deadline=deadline, params=query).json()

            if not data:
                break
            if not isinstance(data, list):
                raise ValueError(
                    f"Unexpected response from GitHub: {url} returned {type(data).__name__}"
                )

            yield from data

            if len(data) < PER_PAGE:
                break
            page += 1

    def list_user_repositories(self, deadline: Optional[float] = None) -> list[Repository]:
        """List repositories of the authenticated user, most recently updated first."""
        return [
            Repository.from_api(item)
            for item in self._paginate(
                "/user/repos",
                {"sort": "updated", "direction": "desc"},
                deadline,
            )
        ]

    def list_organizations(self, deadline: Optional[float] = None) -> list[str]:
        """List logins of organizations the authenticated user belongs to."""
        return [item["login"] for item in self._paginate("/user/orgs", deadline=deadline)]

    def list_org_repositories(self, org: str, deadline: Optional[float] = None) -> list[Repository]:
        """List repositories of an organization, most recently updated first."""
        return [
            Repository.from_api(item)
            for item in self._paginate(
                f"/orgs/{org}/repos",
                {"sort": "updated", "direction": "desc"},
                deadline,
            )
        ]

    def list_repositories(self, deadline: Optional[float] = None) -> list[Repository]:
        """List personal and organizational repositories.

        Personal repositories must load; a failing organization listing is
        logged and skipped. Repositories reachable both ways appear once.
        Running out of time fails the whole listing.

        Returns:
            Repositories in API order, personal ones first
        """
        repos = self.list_user_repositories(deadline)

        try:
            orgs = self.list_organizations(deadline)
        except DeadlineExceeded:
            raise
        except httpx.HTTPError as e:
            logger.warning("Skipping organization repositories: %s", e)
            orgs = []

        for org in orgs:
            try:
                repos.extend(self.list_org_repositories(org, deadline))
            except DeadlineExceeded:
                raise
            except httpx.HTTPError as e:
                logger.warning("Skipping repositories of %s: %s", org, e)

        seen: set[str] = set()
        unique = []
        for repo in repos:
            if repo.full_name in seen:
                continue
            seen.add(repo.full_name)
            unique.append(repo)
        return unique

    def list_pull_requests(
        self,
        repo: Repository,
        state: str = "open",
        deadline: Optional[float] = None,
    ) -> list[PullRequest]:
        """List pull requests of a repository.

        Args:
            repo: Repository to query
            state: PR state ('open', 'closed', 'all')
            deadline: Monotonic time by which every page must have been requested
        """
        return [
            PullRequest.from_api(item)
            for item in self._paginate(
                f"/repos/{repo.owner}/{repo.name}/pulls",
                {"state": state},
                deadline,
            )
        ]

    def list_review_comments(
        self,
        repo: Repository,
        pr: PullRequest,
        deadline: Optional[float] = None,
    ) -> list[ReviewComment]:
        """List review comments of a pull request, replies included."""
        return [
            ReviewComment.from_api(item)
            for item in self._paginate(
                f"/repos/{repo.owner}/{repo.name}/pulls/{pr.number}/comments",
                deadline=deadline,
            )
        ]
