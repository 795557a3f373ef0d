"""GitHub access for Nitpick."""

from .client import DeadlineExceeded, GitHubClient, RateLimitInfo
from .fetcher import GitHubFetcher, describe_error

__all__ = [
    "DeadlineExceeded",
    "GitHubClient",
    "GitHubFetcher",
    "RateLimitInfo",
    "describe_error",
]
