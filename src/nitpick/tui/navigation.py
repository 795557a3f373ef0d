"""Navigation core: the browser's state machine.

``update`` is a pure function from ``(AppState, Event)`` to
``(AppState, [Command])``. It never performs I/O; fetches, timers, clipboard
access and quitting are requested through commands that the application
shell carries out and answers with further events.

Levels are visited strictly in order::

    Repositories -> PullRequests -> Comments -> CommentDetail

and the selected repository, pull request and comment are set exactly for
the levels at or below the current one.
"""

from dataclasses import replace
from operator import attrgetter
from typing import Iterable

from nitpick.messages import (
    ClipboardResult,
    Command,
    CommentsFetched,
    CopyPrompt,
    Event,
    FetchComments,
    FetchPullRequests,
    FetchRepositories,
    FetchTicket,
    KeyPressed,
    PullRequestsFetched,
    Quit,
    RepositoriesFetched,
    Resized,
    ScheduleStatusClear,
    StatusExpired,
)
from nitpick.models import PullRequest, ReviewComment
from nitpick.tui.items import CommentItem, PullRequestItem, RepositoryItem
from nitpick.tui.render import render_comment_detail
from nitpick.tui.state import (
    AppState,
    FilterMode,
    Layout,
    NavigationState,
    TransientStatus,
)


# Breadcrumb, spacing and help line around the detail viewport
DETAIL_CHROME_LINES = 6
# Breadcrumb, spacing and help line around a list
LIST_CHROME_LINES = 4
# List chrome plus the pull-request header
COMMENT_LIST_CHROME_LINES = 7
# Status line and the blank line under it
STATUS_LINES = 2
SIDE_PADDING = 4

COPY_STATUS_SECONDS = 3.0
MODE_STATUS_SECONDS = 2.0

QUIT_KEYS = {"ctrl+c", "q"}
BACK_KEY = "esc"
SELECT_KEY = "enter"
FILTER_KEY = "/"


# === Derived views ===


def sort_pull_requests(pull_requests: Iterable[PullRequest]) -> list[PullRequest]:
    """Highest PR number first."""
    return sorted(pull_requests, key=attrgetter("number"), reverse=True)


def sort_comments(comments: Iterable[ReviewComment]) -> list[ReviewComment]:
    """Most recently updated first; comments without a timestamp go last."""
    comments = list(comments)
    dated = sorted(
        (c for c in comments if c.updated_at is not None),
        key=attrgetter("updated_at"),
        reverse=True,
    )
    undated = [c for c in comments if c.updated_at is None]
    return dated + undated


def filter_comments(comments: Iterable[ReviewComment], show_replies: bool) -> list[ReviewComment]:
    """Keep top-level comments only, unless replies are shown."""
    return [c for c in comments if show_replies or not c.is_reply]


def compute_layout(width: int, height: int, status_visible: bool = False) -> Layout:
    """Widget sizes for a terminal of ``width`` x ``height``."""
    status_lines = STATUS_LINES if status_visible else 0
    return Layout(
        list_width=max(width - SIDE_PADDING, 1),
        list_height=max(height - LIST_CHROME_LINES - status_lines, 1),
        comment_list_height=max(height - COMMENT_LIST_CHROME_LINES - status_lines, 1),
        viewport_width=max(width - SIDE_PADDING, 1),
        viewport_height=max(height - DETAIL_CHROME_LINES, 1),
    )


def _apply_layout(state: AppState) -> AppState:
    layout = compute_layout(state.width, state.height, state.status is not None)
    return replace(
        state,
        repositories=state.repositories.resize(layout.list_width, layout.list_height),
        pull_requests=state.pull_requests.resize(layout.list_width, layout.list_height),
        comments=state.comments.resize(layout.list_width, layout.comment_list_height),
        viewport=state.viewport.resize(layout.viewport_width, layout.viewport_height),
    )


def _refresh_detail(state: AppState) -> AppState:
    """Re-render the open comment at the current viewport width."""
    if state.navigation is not NavigationState.COMMENT_DETAIL:
        return state
    lines = render_comment_detail(
        state.repository, state.pull_request, state.comment, state.viewport.width
    )
    offset = state.viewport.offset
    viewport = state.viewport.with_lines(lines).scroll(offset)
    return replace(state, viewport=viewport)


# === Helpers producing commands ===


def _issue_fetch(state: AppState) -> tuple[AppState, FetchTicket]:
    ticket = FetchTicket(state.fetch_generation + 1)
    state = replace(
        state,
        fetch_generation=ticket.generation,
        pending_fetch=ticket,
        loading=True,
        error=None,
    )
    return state, ticket


def _set_status(state: AppState, message: str, delay: float) -> tuple[AppState, list[Command]]:
    generation = state.status_generation + 1
    state = replace(
        state,
        status=TransientStatus(message, generation),
        status_generation=generation,
    )
    return _apply_layout(state), [ScheduleStatusClear(delay, generation)]


# === Public API ===


def initial_state() -> tuple[AppState, list[Command]]:
    """Starting state and the command loading the repository list."""
    state, ticket = _issue_fetch(AppState())
    return state, [FetchRepositories(ticket)]


def update(state: AppState, event: Event) -> tuple[AppState, list[Command]]:
    """Apply one event, returning the new state and the commands to run."""
    if isinstance(event, KeyPressed):
        return _on_key(state, event)
    if isinstance(event, Resized):
        return _on_resize(state, event), []
    if isinstance(event, RepositoriesFetched):
        return _on_repositories(state, event), []
    if isinstance(event, PullRequestsFetched):
        return _on_pull_requests(state, event), []
    if isinstance(event, CommentsFetched):
        return _on_comments(state, event), []
    if isinstance(event, StatusExpired):
        return _on_status_expired(state, event), []
    if isinstance(event, ClipboardResult):
        return _on_clipboard_result(state, event)
    raise TypeError(f"Unhandled event: {event!r}")


# === Event handlers ===


def _on_resize(state: AppState, event: Resized) -> AppState:
    state = replace(state, width=event.width, height=event.height)
    return _refresh_detail(_apply_layout(state))


def _accepts(state: AppState, ticket: FetchTicket) -> bool:
    """Results apply only to the fetch still pending, and never over an error."""
    return state.pending_fetch == ticket and state.error is None


def _fetch_failed(state: AppState, error: str) -> AppState:
    return replace(state, loading=False, pending_fetch=None, error=error)


def _on_repositories(state: AppState, event: RepositoriesFetched) -> AppState:
    if not _accepts(state, event.ticket):
        return state
    if event.error is not None:
        return _fetch_failed(state, event.error)
    items = [RepositoryItem(repo) for repo in event.repositories]
    return replace(
        state,
        loading=False,
        pending_fetch=None,
        repositories=state.repositories.with_items(items),
    )


def _on_pull_requests(state: AppState, event: PullRequestsFetched) -> AppState:
    if not _accepts(state, event.ticket):
        return state
    if event.error is not None:
        return _fetch_failed(state, event.error)
    items = [PullRequestItem(pr) for pr in sort_pull_requests(event.pull_requests)]
    return replace(
        state,
        loading=False,
        pending_fetch=None,
        pull_requests=state.pull_requests.with_items(items),
    )


def _on_comments(state: AppState, event: CommentsFetched) -> AppState:
    if not _accepts(state, event.ticket):
        return state
    if event.error is not None:
        return _fetch_failed(state, event.error)
    visible = filter_comments(sort_comments(event.comments), state.settings.show_replies)
    return replace(
        state,
        loading=False,
        pending_fetch=None,
        comments=state.comments.with_items(CommentItem(c) for c in visible),
    )


def _on_status_expired(state: AppState, event: StatusExpired) -> AppState:
    if state.status is None or state.status.generation != event.generation:
        return state
    return _apply_layout(replace(state, status=None))


def _on_clipboard_result(state: AppState, event: ClipboardResult) -> tuple[AppState, list[Command]]:
    if event.error is not None:
        message = f"Copy failed: {event.error}"
    else:
        message = f"✅ {event.mode.label} prompt copied to clipboard!"
    return _set_status(state, message, COPY_STATUS_SECONDS)


# === Keys ===


def _on_key(state: AppState, event: KeyPressed) -> tuple[AppState, list[Command]]:
    key = event.key
    if key == "ctrl+c":
        return state, [Quit()]

    current = state.current_list
    if current is not None and current.filter_mode is FilterMode.FILTERING:
        return _on_filter_key(state, event), []

    if key in QUIT_KEYS:
        return state, [Quit()]
    if key == BACK_KEY:
        return _on_back(state), []
    if state.loading or state.error is not None:
        return state, []
    if key == SELECT_KEY:
        return _on_select(state)

    if state.navigation is NavigationState.COMMENT_DETAIL:
        return _on_detail_key(state, key)
    return _on_list_key(state, key)


def _on_filter_key(state: AppState, event: KeyPressed) -> AppState:
    """Keys typed while the filter prompt is open edit the filter."""
    current = state.current_list
    key = event.key
    if key == BACK_KEY:
        current = current.clear_filter()
    elif key == SELECT_KEY:
        current = current.commit_filter()
    elif key == "backspace":
        current = current.delete_character()
    elif key in ("up", "down"):
        current = current.move(-1 if key == "up" else 1)
    elif event.character and len(event.character) == 1 and event.character.isprintable():
        current = current.type_character(event.character)
    return state.with_list(state.navigation, current)


def _on_back(state: AppState) -> AppState:
    current = state.current_list
    if current is not None and current.filter_active and not state.loading and state.error is None:
        return state.with_list(state.navigation, current.clear_filter())

    # Leaving a level abandons its fetch and any error it produced
    if state.navigation is NavigationState.PULL_REQUESTS:
        state = replace(state, navigation=NavigationState.REPOSITORIES, repository=None)
    elif state.navigation is NavigationState.COMMENTS:
        state = replace(state, navigation=NavigationState.PULL_REQUESTS, pull_request=None)
    elif state.navigation is NavigationState.COMMENT_DETAIL:
        state = replace(state, navigation=NavigationState.COMMENTS, comment=None)
    else:
        return state
    return replace(state, loading=False, pending_fetch=None, error=None)


def _on_select(state: AppState) -> tuple[AppState, list[Command]]:
    current = state.current_list
    selected = current.selected_item if current is not None else None
    if selected is None:
        return state, []

    if state.navigation is NavigationState.REPOSITORIES:
        state = replace(
            state,
            navigation=NavigationState.PULL_REQUESTS,
            repository=selected.repo,
            pull_requests=state.pull_requests.clear(),
        )
        state, ticket = _issue_fetch(state)
        return state, [FetchPullRequests(ticket, state.repository)]

    if state.navigation is NavigationState.PULL_REQUESTS:
        state = replace(
            state,
            navigation=NavigationState.COMMENTS,
            pull_request=selected.pr,
            comments=state.comments.clear(),
        )
        state, ticket = _issue_fetch(state)
        return state, [FetchComments(ticket, state.repository, state.pull_request)]

    # Comments -> detail: size the viewport before filling it
    state = replace(state, navigation=NavigationState.COMMENT_DETAIL, comment=selected.comment)
    state = _apply_layout(state)
    lines = render_comment_detail(
        state.repository, state.pull_request, state.comment, state.viewport.width
    )
    return replace(state, viewport=state.viewport.with_lines(lines)), []


def _on_list_key(state: AppState, key: str) -> tuple[AppState, list[Command]]:
    current = state.current_list

    if key == FILTER_KEY:
        return state.with_list(state.navigation, current.start_filter()), []
    if key == "r" and state.navigation is NavigationState.COMMENTS:
        return _toggle_replies(state)

    moves = {
        "up": lambda s: s.move(-1),
        "k": lambda s: s.move(-1),
        "down": lambda s: s.move(1),
        "j": lambda s: s.move(1),
        "pgup": lambda s: s.page_up(),
        "h": lambda s: s.page_up(),
        "pgdown": lambda s: s.page_down(),
        "l": lambda s: s.page_down(),
        "home": lambda s: s.first(),
        "g": lambda s: s.first(),
        "end": lambda s: s.last(),
        "G": lambda s: s.last(),
    }
    move = moves.get(key)
    if move is None:
        return state, []
    return state.with_list(state.navigation, move(current)), []


def _toggle_replies(state: AppState) -> tuple[AppState, list[Command]]:
    settings = replace(state.settings, show_replies=not state.settings.show_replies)
    state, ticket = _issue_fetch(replace(state, settings=settings))
    return state, [FetchComments(ticket, state.repository, state.pull_request)]


def _on_detail_key(state: AppState, key: str) -> tuple[AppState, list[Command]]:
    if key == "t":
        return _toggle_prompt_mode(state)
    if key == "c":
        return _copy_prompt(state)

    scrolls = {
        "up": lambda v: v.scroll(-1),
        "k": lambda v: v.scroll(-1),
        "down": lambda v: v.scroll(1),
        "j": lambda v: v.scroll(1),
        "pgup": lambda v: v.half_page_up(),
        "h": lambda v: v.half_page_up(),
        "pgdown": lambda v: v.half_page_down(),
        "l": lambda v: v.half_page_down(),
        "home": lambda v: v.top(),
        "g": lambda v: v.top(),
        "end": lambda v: v.bottom(),
        "G": lambda v: v.bottom(),
    }
    scroll = scrolls.get(key)
    if scroll is None:
        return state, []
    return replace(state, viewport=scroll(state.viewport)), []


def _toggle_prompt_mode(state: AppState) -> tuple[AppState, list[Command]]:
    settings = replace(
        state.settings, use_simple_prompt=not state.settings.use_simple_prompt
    )
    state = replace(state, settings=settings)
    return _set_status(
        state,
        f"🔄 Switched to {settings.prompt_mode.label} prompt mode",
        MODE_STATUS_SECONDS,
    )


def _copy_prompt(state: AppState) -> tuple[AppState, list[Command]]:
    if state.repository is None or state.pull_request is None or state.comment is None:
        return _set_status(
            state, "Error: Missing context for prompt generation", COPY_STATUS_SECONDS
        )
    return state, [
        CopyPrompt(
            state.repository,
            state.pull_request,
            state.comment,
            state.settings.prompt_mode,
        )
    ]

