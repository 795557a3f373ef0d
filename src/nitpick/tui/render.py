"""Render layer: turns an ``AppState`` into a Rich renderable frame.

Nothing here mutates state. ``render_comment_detail`` is also used by the
navigation core to fill the detail viewport with pre-wrapped lines.
"""

import io
import logging
from typing import Optional

from rich.align import Align
from rich.box import ROUNDED
from rich.console import Console, Group, RenderableType
from rich.markdown import Markdown
from rich.padding import Padding
from rich.panel import Panel
from rich.text import Text

from nitpick.models import PullRequest, Repository, ReviewComment
from nitpick.tui.items import ListItem
from nitpick.tui.state import AppState, FilterMode, ListState, NavigationState


logger = logging.getLogger(__name__)

DATETIME_FORMAT = "%Y-%m-%d %H:%M"

# Styles
BREADCRUMB_STYLE = "bold"
HELP_STYLE = "bright_black"
STATUS_STYLE = "bold green"
ERROR_STYLE = "bright_red"
LIST_TITLE_STYLE = "#ffffd7 on #5f5fd7"
SELECTED_TITLE_STYLE = "bold #ee6ff8"
SELECTED_DESC_STYLE = "#ad58b4"
NORMAL_TITLE_STYLE = "#dddddd"
NORMAL_DESC_STYLE = "#777777"
PR_TITLE_STYLE = "bold bright_blue"
META_STYLE = "grey66"
LINK_STYLE = "underline #87afd7 on grey15"
CODE_STYLE = "grey85 on grey11"

NO_CONTENT = "No content provided"
LINK_HINT = "💡 Copy this URL to open the comment directly in your browser"
MIN_WRAP_WIDTH = 16
DEFAULT_WRAP_WIDTH = 80


def render_lines(renderable: RenderableType, width: int) -> tuple[Text, ...]:
    """Render ``renderable`` at ``width`` columns and return one ``Text`` per line."""
    console = Console(
        width=max(width, 1),
        file=io.StringIO(),
        force_terminal=True,
        color_system="truecolor",
        legacy_windows=False,
    )
    lines = console.render_lines(renderable, console.options, pad=False)
    return tuple(
        Text.assemble(*((segment.text, segment.style) for segment in line if not segment.control))
        for line in lines
    )


def _wrap_width(width: int) -> int:
    return width - 4 if width > MIN_WRAP_WIDTH else DEFAULT_WRAP_WIDTH


def _markdown_lines(content: str, width: int, fallback_style: str) -> tuple[Text, ...]:
    """Render Markdown, falling back to a plain bordered block if rendering fails."""
    try:
        return render_lines(Markdown(content, code_theme="monokai"), _wrap_width(width))
    except Exception:
        logger.warning("Markdown rendering failed, showing plain text", exc_info=True)
        fallback = Panel(
            Text(content),
            box=ROUNDED,
            style=fallback_style,
            border_style="grey42",
            padding=(1, 2),
        )
        return render_lines(fallback, width) + (Text(""),)


def _file_context(comment: ReviewComment) -> Text:
    info = [f"📁 {comment.path}"]
    if comment.line:
        if comment.start_line and comment.start_line != comment.line:
            info.append(f"📍 Lines: {comment.line_range}")
        else:
            info.append(f"📍 Line: {comment.line_range}")
    if comment.original_line_range:
        if comment.original_start_line and comment.original_start_line != comment.original_line:
            info.append(f"📍 Original Lines: {comment.original_line_range}")
        else:
            info.append(f"📍 Original Line: {comment.original_line_range}")
    return Text(" • ".join(info), style=META_STYLE)


def render_comment_detail(
    repo: Optional[Repository],
    pr: Optional[PullRequest],
    comment: Optional[ReviewComment],
    width: int,
) -> tuple[Text, ...]:
    """Build the scrollable content of the comment detail view."""
    if comment is None or pr is None:
        return ()

    lines: list[Text] = []

    lines.append(Text(f" Comment on #{pr.number} {pr.title} ", style=LIST_TITLE_STYLE))
    lines.append(Text(""))

    created = comment.created_at.strftime(DATETIME_FORMAT) if comment.created_at else ""
    updated = ""
    if comment.updated_at and comment.updated_at != comment.created_at:
        updated = f" (updated {comment.updated_at.strftime(DATETIME_FORMAT)})"
    lines.append(Text(f"By: {comment.author}", style=META_STYLE))
    lines.append(Text(f"Created: {created}{updated}", style=META_STYLE))
    lines.append(Text(""))

    lines.extend(_markdown_lines(comment.body or NO_CONTENT, width, "grey82 on grey19"))
    lines.append(Text(""))

    if comment.path or comment.diff_hunk:
        if comment.path:
            lines.extend(render_lines(_file_context(comment), width))
        if comment.diff_hunk:
            lines.extend(
                _markdown_lines(f"```diff\n{comment.diff_hunk}\n```", width, CODE_STYLE)
            )
        else:
            lines.append(Text(""))

    if comment.html_url:
        lines.extend(render_lines(Padding(Text(comment.html_url), (1, 2), style=LINK_STYLE), width))
        lines.append(Text(""))
        lines.append(Text(LINK_HINT, style=f"italic {META_STYLE}"))

    return tuple(lines)


def render_pr_info(pr: Optional[PullRequest]) -> RenderableType:
    """Header shown above the comment list."""
    if pr is None:
        return Text("")

    created = pr.created_at.strftime(DATETIME_FORMAT) if pr.created_at else ""

    status = []
    if pr.draft:
        status.append("DRAFT")
    if pr.merged:
        status.append("MERGED")
    if pr.state == "open":
        status.append("🟢 OPEN")
    elif pr.state == "closed":
        status.append("🔴 CLOSED")
    status_str = f" [{', '.join(status)}]" if status else ""

    return Group(
        Text(f"#{pr.number} {pr.title}", style=PR_TITLE_STYLE),
        Text(f"by {pr.author} • {created}{status_str}", style=META_STYLE),
        Text(""),
    )


def _item_lines(item: ListItem, selected: bool, width: int) -> list[Text]:
    if selected:
        title = Text(f"│ {item.title}", style=SELECTED_TITLE_STYLE)
        description = Text(f"│ {item.description}", style=SELECTED_DESC_STYLE)
    else:
        title = Text(f"  {item.title}", style=NORMAL_TITLE_STYLE)
        description = Text(f"  {item.description}", style=NORMAL_DESC_STYLE)
    if width > 0:
        title.truncate(width, overflow="ellipsis")
        description.truncate(width, overflow="ellipsis")
    return [title, description, Text("")]


def render_list(list_state: ListState) -> RenderableType:
    """Title, filter prompt and the page of items containing the cursor."""
    rows: list[Text] = [Text(f" {list_state.title} ", style=LIST_TITLE_STYLE)]

    if list_state.filter_mode is FilterMode.FILTERING:
        rows.append(Text(f"Filter: {list_state.filter_text}█"))
    elif list_state.filter_mode is FilterMode.APPLIED:
        rows.append(Text(f"Filter: {list_state.filter_text}", style=HELP_STYLE))
    else:
        rows.append(Text(""))

    visible = list_state.visible_items
    if not visible:
        rows.append(Text("No items.", style=HELP_STYLE))
        return Group(*rows)

    per_page = list_state.per_page
    cursor = min(list_state.cursor, len(visible) - 1)
    start = (cursor // per_page) * per_page
    for index, item in enumerate(visible[start:start + per_page], start=start):
        rows.extend(_item_lines(item, index == cursor, list_state.width))

    pages = (len(visible) + per_page - 1) // per_page
    if pages > 1:
        rows.append(Text(f"{cursor // per_page + 1}/{pages}", style=HELP_STYLE))

    return Group(*rows)


def breadcrumb(state: AppState) -> str:
    repo_name = state.repository.name if state.repository else ""
    pr_number = state.pull_request.number if state.pull_request else 0

    if state.navigation is NavigationState.PULL_REQUESTS:
        return f"Repositories > {repo_name} > Pull Requests"
    if state.navigation is NavigationState.COMMENTS:
        return f"Repositories > {repo_name} > Pull Requests > #{pr_number} > Comments"
    if state.navigation is NavigationState.COMMENT_DETAIL:
        return f"Repositories > {repo_name} > Pull Requests > #{pr_number} > Comments > Comment"
    return "Repositories"


def help_text(state: AppState) -> str:
    if state.navigation is NavigationState.COMMENT_DETAIL:
        mode = state.settings.prompt_mode.value
        return (
            f"c: copy prompt ({mode}) • t: toggle prompt mode • "
            "↑/↓ j/k: scroll • Esc: back • q: quit"
        )
    if state.navigation is NavigationState.COMMENTS:
        replies = "hide" if state.settings.show_replies else "show"
        return f"Enter: select • r: {replies} replies • /: filter • Esc: back • q: quit"
    return "Enter: select • /: filter • Esc: back • q: quit"


def render_frame(state: AppState) -> RenderableType:
    """Produce the full frame for the current state."""
    if state.loading:
        return Align.center(Text("Loading..."))

    if state.error is not None:
        return Group(
            Text(f"Error: {state.error}", style=ERROR_STYLE),
            Text(""),
            Text("Esc: back • q: quit", style=HELP_STYLE),
        )

    header = Text(breadcrumb(state), style=BREADCRUMB_STYLE)
    help_line = Text(help_text(state), style=HELP_STYLE)
    status = Text(state.status.message, style=STATUS_STYLE) if state.status else None

    if state.navigation is NavigationState.COMMENT_DETAIL:
        elements: list[RenderableType] = [header, Text("")]
        elements.extend(state.viewport.visible_lines)
        if status is not None:
            elements.extend([Text(""), status])
        else:
            elements.append(Text(""))
        elements.extend([Text(""), help_line])
        return Group(*elements)

    elements = [header, Text("")]
    if status is not None:
        elements.extend([status, Text("")])

    if state.navigation is NavigationState.COMMENTS:
        elements.append(render_pr_info(state.pull_request))
    elements.append(render_list(state.current_list))
    elements.extend([Text(""), help_line])
    return Group(*elements)
