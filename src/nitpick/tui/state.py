"""Application state for the review-comment browser.

All values are immutable; the navigation core produces a new ``AppState``
for every event it handles.
"""

from dataclasses import dataclass, field, replace
from enum import Enum, IntEnum
from typing import Optional

from rich.text import Text

from nitpick.messages import FetchTicket
from nitpick.models import PullRequest, Repository, ReviewComment
from nitpick.prompt import PromptMode
from nitpick.tui.items import ListItem


class NavigationState(IntEnum):
    """Depth in the repositories > pull requests > comments > detail hierarchy."""

    REPOSITORIES = 0
    PULL_REQUESTS = 1
    COMMENTS = 2
    COMMENT_DETAIL = 3


class FilterMode(Enum):
    """Filter state of a list."""

    UNFILTERED = "unfiltered"
    FILTERING = "filtering"  # user is typing the filter
    APPLIED = "applied"


# Lines used by the list title and the blank line below it
LIST_HEADER_LINES = 2
# Title, description and spacer per item
ITEM_LINES = 3


@dataclass(frozen=True)
class ListState:
    """A selectable, filterable list of items."""

    title: str
    items: tuple[ListItem, ...] = ()
    cursor: int = 0
    filter_text: str = ""
    filter_mode: FilterMode = FilterMode.UNFILTERED
    width: int = 0
    height: int = 0

    @property
    def filter_active(self) -> bool:
        return self.filter_mode is not FilterMode.UNFILTERED

    @property
    def visible_items(self) -> tuple[ListItem, ...]:
        """Items matching the filter (case-insensitive substring of filter-text)."""
        if not self.filter_active or not self.filter_text:
            return self.items
        needle = self.filter_text.lower()
        return tuple(item for item in self.items if needle in item.filter_text.lower())

    @property
    def selected_item(self) -> Optional[ListItem]:
        visible = self.visible_items
        if not visible:
            return None
        return visible[min(self.cursor, len(visible) - 1)]

    @property
    def per_page(self) -> int:
        return max(1, (self.height - LIST_HEADER_LINES) // ITEM_LINES)

    def with_items(self, items) -> "ListState":
        """Replace all items; selection and filter start over."""
        return replace(
            self,
            items=tuple(items),
            cursor=0,
            filter_text="",
            filter_mode=FilterMode.UNFILTERED,
        )

    def clear(self) -> "ListState":
        return self.with_items(())

    def resize(self, width: int, height: int) -> "ListState":
        return replace(self, width=width, height=height)

    def _move_to(self, index: int) -> "ListState":
        count = len(self.visible_items)
        return replace(self, cursor=max(0, min(index, count - 1)))

    def move(self, delta: int) -> "ListState":
        return self._move_to(self.cursor + delta)

    def page_up(self) -> "ListState":
        return self.move(-self.per_page)

    def page_down(self) -> "ListState":
        return self.move(self.per_page)

    def first(self) -> "ListState":
        return self._move_to(0)

    def last(self) -> "ListState":
        return self._move_to(len(self.visible_items) - 1)

    def start_filter(self) -> "ListState":
        return replace(self, filter_mode=FilterMode.FILTERING)

    def type_character(self, character: str) -> "ListState":
        return replace(self, filter_text=self.filter_text + character, cursor=0)

    def delete_character(self) -> "ListState":
        return replace(self, filter_text=self.filter_text[:-1], cursor=0)

    def commit_filter(self) -> "ListState":
        if not self.filter_text:
            return self.clear_filter()
        return replace(self, filter_mode=FilterMode.APPLIED)

    def clear_filter(self) -> "ListState":
        return replace(self, filter_text="", filter_mode=FilterMode.UNFILTERED, cursor=0)


@dataclass(frozen=True)
class DetailViewport:
    """Scrollable window over the rendered lines of the open comment."""

    width: int = 0
    height: int = 0
    offset: int = 0
    lines: tuple[Text, ...] = ()

    @property
    def max_offset(self) -> int:
        return max(0, len(self.lines) - self.height)

    @property
    def visible_lines(self) -> tuple[Text, ...]:
        return self.lines[self.offset:self.offset + self.height]

    def resize(self, width: int, height: int) -> "DetailViewport":
        resized = replace(self, width=width, height=height)
        return replace(resized, offset=min(self.offset, resized.max_offset))

    def with_lines(self, lines) -> "DetailViewport":
        return replace(self, lines=tuple(lines), offset=0)

    def scroll(self, delta: int) -> "DetailViewport":
        return replace(self, offset=max(0, min(self.offset + delta, self.max_offset)))

    def half_page_up(self) -> "DetailViewport":
        return self.scroll(-max(1, self.height // 2))

    def half_page_down(self) -> "DetailViewport":
        return self.scroll(max(1, self.height // 2))

    def top(self) -> "DetailViewport":
        return replace(self, offset=0)

    def bottom(self) -> "DetailViewport":
        return replace(self, offset=self.max_offset)


@dataclass(frozen=True)
class TransientStatus:
    """Short-lived confirmation message; cleared only by its own timer."""

    message: str
    generation: int


@dataclass(frozen=True)
class Settings:
    """Toggles that live for the process and are never persisted."""

    show_replies: bool = False
    use_simple_prompt: bool = False

    @property
    def prompt_mode(self) -> PromptMode:
        return PromptMode.SIMPLE if self.use_simple_prompt else PromptMode.FULL


@dataclass(frozen=True)
class Layout:
    """Widget dimensions derived from the terminal size."""

    list_width: int
    list_height: int
    comment_list_height: int
    viewport_width: int
    viewport_height: int


@dataclass(frozen=True)
class AppState:
    """Everything the browser knows; rendered by ``render.render_frame``."""

    navigation: NavigationState = NavigationState.REPOSITORIES
    repository: Optional[Repository] = None
    pull_request: Optional[PullRequest] = None
    comment: Optional[ReviewComment] = None

    repositories: ListState = field(default_factory=lambda: ListState("GitHub Repositories"))
    pull_requests: ListState = field(default_factory=lambda: ListState("Pull Requests"))
    comments: ListState = field(default_factory=lambda: ListState("PR Comments"))
    viewport: DetailViewport = field(default_factory=DetailViewport)

    settings: Settings = field(default_factory=Settings)
    status: Optional[TransientStatus] = None
    status_generation: int = 0

    loading: bool = False
    error: Optional[str] = None
    pending_fetch: Optional[FetchTicket] = None
    fetch_generation: int = 0

    width: int = 0
    height: int = 0

    def list_for(self, level: NavigationState) -> Optional[ListState]:
        """The list shown at ``level``; None for the detail view."""
        if level is NavigationState.REPOSITORIES:
            return self.repositories
        if level is NavigationState.PULL_REQUESTS:
            return self.pull_requests
        if level is NavigationState.COMMENTS:
            return self.comments
        return None

    @property
    def current_list(self) -> Optional[ListState]:
        return self.list_for(self.navigation)

    def with_list(self, level: NavigationState, list_state: ListState) -> "AppState":
        names = {
            NavigationState.REPOSITORIES: "repositories",
            NavigationState.PULL_REQUESTS: "pull_requests",
            NavigationState.COMMENTS: "comments",
        }
        return replace(self, **{names[level]: list_state})
