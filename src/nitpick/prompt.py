"""Prompt generation for AI coding assistants.

Turns a repository, pull request and review comment into Markdown text that
can be pasted into an assistant. Two modes exist:

- ``full``: repository and PR metadata, the diff hunk, the comment, a block of
  instructions and the generation time
- ``simple``: file location, diff hunk, comment and a single instruction

Optional fields are left out entirely when empty, so no label is ever
followed by a blank value.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from nitpick.models import PullRequest, Repository, ReviewComment


DATE_FORMAT = "%Y-%m-%d %H:%M"
GENERATED_FORMAT = "%Y-%m-%d %H:%M:%S"

INSTRUCTIONS = """## Instructions for GitHub Copilot
Based on the above context, please help me address the review comment by:

1. **Understanding the Issue**: Analyze the reviewer's feedback and identify what needs to be changed
2. **Proposing Solutions**: Suggest specific code changes that address the reviewer's concerns
3. **Code Implementation**: Provide the actual code changes needed, with proper formatting and best practices
4. **Explanation**: Explain why the suggested changes address the review feedback
5. **Testing Considerations**: Suggest any additional tests or validation that might be needed

Please focus on:
- Maintaining code quality and consistency with the existing codebase
- Following the project's coding standards and conventions
- Ensuring the changes align with the PR's overall objectives
- Addressing any security, performance, or maintainability concerns raised"""

SIMPLE_INSTRUCTION = "**Please help me address this review feedback with specific code changes.**"


class PromptMode(str, Enum):
    """Prompt templates the user can switch between."""

    FULL = "full"
    SIMPLE = "simple"

    @property
    def label(self) -> str:
        return self.value.capitalize()


def _fenced(text: str, language: str = "") -> list[str]:
    return [f"```{language}", text, "```"]


def generate_full_prompt(
    repo: Repository,
    pr: PullRequest,
    comment: ReviewComment,
    generated_at: Optional[datetime] = None,
) -> str:
    """Create an exhaustive prompt with repository, PR and comment context."""
    generated_at = generated_at or datetime.now()
    lines = ["# GitHub Copilot Request for Code Review Changes", ""]

    # Repository
    lines.append("## Repository Context")
    lines.append(f"- **Repository**: {repo.full_name}")
    if repo.description:
        lines.append(f"- **Description**: {repo.description}")
    if repo.language:
        lines.append(f"- **Primary Language**: {repo.language}")
    lines.append("")

    # Pull request
    lines.append("## Pull Request Context")
    lines.append(f"- **PR #{pr.number}**: {pr.title}")
    if pr.author:
        lines.append(f"- **Author**: {pr.author}")
    status = pr.state
    if pr.draft:
        status += " (DRAFT)"
    if pr.merged:
        status += " (MERGED)"
    status = status.strip()
    if status:
        lines.append(f"- **Status**: {status}")
    if pr.created_at:
        lines.append(f"- **Created**: {pr.created_at.strftime(DATE_FORMAT)}")
    if pr.body:
        lines.append("- **Description**:")
        lines.extend(_fenced(pr.body))
    if pr.head_ref:
        lines.append(f"- **Source Branch**: {pr.head_ref}")
    if pr.base_ref:
        lines.append(f"- **Target Branch**: {pr.base_ref}")
    lines.append("")

    # Comment location
    lines.append("## Review Comment Context")
    if comment.author:
        lines.append(f"- **Reviewer**: {comment.author}")
    if comment.created_at:
        lines.append(f"- **Comment Date**: {comment.created_at.strftime(DATE_FORMAT)}")
    if comment.path:
        lines.append(f"- **File**: `{comment.path}`")
        if comment.line_range:
            lines.append(f"- **Lines**: {comment.line_range}")
        if comment.original_line_range:
            lines.append(f"- **Original Lines**: {comment.original_line_range}")
    if comment.diff_hunk:
        lines.append("- **Code Context**:")
        lines.extend(_fenced(comment.diff_hunk, "diff"))
    lines.append("")

    lines.append("## Review Comment/Requested Changes")
    if comment.body:
        lines.extend(_fenced(comment.body))
    lines.append("")

    lines.append(INSTRUCTIONS)
    lines.append("")

    lines.append("## Additional Context")
    lines.append(f"- **Generated**: {generated_at.strftime(GENERATED_FORMAT)}")
    if comment.html_url:
        lines.append(f"- **Direct Link**: {comment.html_url}")

    return "\n".join(lines)


def generate_simple_prompt(
    repo: Repository,
    pr: PullRequest,
    comment: ReviewComment,
) -> str:
    """Create a short prompt focused on the commented code."""
    sections = [f"# Review Comment for {repo.name} PR #{pr.number}"]

    if comment.path:
        location = f"**File**: `{comment.path}`"
        if comment.line_range:
            location += f" ({comment.line_range})"
        sections.append(location)

    if comment.diff_hunk:
        sections.append("\n".join(["**Code Context**:", *_fenced(comment.diff_hunk, "diff")]))

    sections.append(f"**Review Comment**:\n{comment.body}")
    sections.append(SIMPLE_INSTRUCTION)

    return "\n\n".join(sections)


def generate_prompt(
    repo: Repository,
    pr: PullRequest,
    comment: ReviewComment,
    mode: PromptMode = PromptMode.FULL,
    generated_at: Optional[datetime] = None,
) -> str:
    """Create the prompt for ``mode``."""
    if mode is PromptMode.SIMPLE:
        return generate_simple_prompt(repo, pr, comment)
    return generate_full_prompt(repo, pr, comment, generated_at)
