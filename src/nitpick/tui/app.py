"""Main Nitpick TUI application."""

import logging
from functools import partial
from typing import Callable, Optional

from textual import events, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.timer import Timer
from textual.widgets import Static
from textual.worker import get_current_worker

from nitpick.clipboard import ClipboardError, copy
from nitpick.github import GitHubFetcher
from nitpick.messages import (
    ClipboardResult,
    Command,
    CopyPrompt,
    Event,
    FetchComments,
    FetchPullRequests,
    FetchRepositories,
    KeyPressed,
    Quit,
    Resized,
    ScheduleStatusClear,
    StatusExpired,
)
from nitpick.prompt import generate_prompt
from nitpick.tui.navigation import initial_state, update
from nitpick.tui.render import render_frame
from nitpick.tui.state import AppState


logger = logging.getLogger(__name__)

# Textual key names that differ from the documented keybindings
KEY_NAMES = {
    "escape": "esc",
    "pageup": "pgup",
    "pagedown": "pgdown",
}


def normalize_key(event: events.Key) -> KeyPressed:
    """Translate a Textual key event into the names the navigation core uses."""
    key = KEY_NAMES.get(event.key, event.key)
    character = event.character
    if character and len(character) == 1 and character.isprintable() and not key.startswith("ctrl+"):
        key = character
    return KeyPressed(key=key, character=character)


class NitpickApp(App):
    """Browse review comments of your pull requests and copy them as prompts."""

    TITLE = "Nitpick"
    SUB_TITLE = "Pull request review comments"

    CSS = """
    Screen {
        overflow: hidden;
    }

    #frame {
        width: 100%;
        height: 100%;
        padding: 0 2;
    }
    """

    BINDINGS = [
        Binding("ctrl+c", "dispatch_key('ctrl+c')", "Quit", show=False, priority=True),
    ]

    def __init__(
        self,
        fetcher: GitHubFetcher,
        copy_text: Callable[[str], None] = copy,
        theme: Optional[str] = None,
    ):
        super().__init__()
        self.fetcher = fetcher
        self.copy_text = copy_text
        self.state = AppState()
        self._status_timer: Optional[Timer] = None
        if theme:
            self.theme = theme

    def compose(self) -> ComposeResult:
        yield Static(id="frame")

    def on_mount(self) -> None:
        self.state, commands = initial_state()
        for command in commands:
            self.perform(command)
        self.apply_event(Resized(self.size.width, self.size.height))

    def on_resize(self, event: events.Resize) -> None:
        self.apply_event(Resized(event.size.width, event.size.height))

    def on_key(self, event: events.Key) -> None:
        event.stop()
        event.prevent_default()
        self.apply_event(normalize_key(event))

    def action_dispatch_key(self, key: str) -> None:
        self.apply_event(KeyPressed(key=key))

    def on_unmount(self) -> None:
        # Workers still in flight must not report into a closed app
        self.workers.cancel_group(self, "fetch")
        self.fetcher.close()

    def apply_event(self, event: Event) -> None:
        """Run one event through the navigation core, then repaint."""
        self.state, commands = update(self.state, event)
        for command in commands:
            self.perform(command)
        self.refresh_frame()

    def refresh_frame(self) -> None:
        self.query_one("#frame", Static).update(render_frame(self.state))

    def perform(self, command: Command) -> None:
        """Carry out a command requested by the navigation core."""
        logger.debug("Command: %r", command)
        if isinstance(command, (FetchRepositories, FetchPullRequests, FetchComments)):
            self.run_fetch(command)
        elif isinstance(command, CopyPrompt):
            self.run_copy(command)
        elif isinstance(command, ScheduleStatusClear):
            self.schedule_status_clear(command)
        elif isinstance(command, Quit):
            self.exit()
        else:
            raise TypeError(f"Unhandled command: {command!r}")

    def schedule_status_clear(self, command: ScheduleStatusClear) -> None:
        # A newer status replaces the pending clear of an older one
        if self._status_timer is not None:
            self._status_timer.stop()
        self._status_timer = self.set_timer(
            command.delay,
            partial(self.apply_event, StatusExpired(command.generation)),
        )

    @work(thread=True, group="fetch")
    def run_fetch(self, command: Command) -> None:
        """Fetch in a thread and hand the result back to the event loop."""
        if isinstance(command, FetchRepositories):
            result = self.fetcher.fetch_repositories(command.ticket)
        elif isinstance(command, FetchPullRequests):
            result = self.fetcher.fetch_pull_requests(command.ticket, command.repository)
        else:
            result = self.fetcher.fetch_comments(
                command.ticket, command.repository, command.pull_request
            )
        if not get_current_worker().is_cancelled:
            self.call_from_thread(self.apply_event, result)

    @work(thread=True, group="clipboard")
    def run_copy(self, command: CopyPrompt) -> None:
        """Generate the prompt and copy it, reporting the outcome as an event."""
        text = generate_prompt(
            command.repository, command.pull_request, command.comment, command.mode
        )
        try:
            self.copy_text(text)
        except ClipboardError as e:
            result = ClipboardResult(mode=command.mode, error=str(e))
        else:
            result = ClipboardResult(mode=command.mode)
        self.call_from_thread(self.apply_event, result)
