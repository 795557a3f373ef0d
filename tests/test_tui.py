"""Tests for the Nitpick TUI application."""

import threading

import pytest
from textual import events

from nitpick.clipboard import ClipboardError
from nitpick.messages import (
    CommentsFetched,
    KeyPressed,
    PullRequestsFetched,
    RepositoriesFetched,
)
from nitpick.tui import NitpickApp
from nitpick.tui.app import normalize_key
from nitpick.tui.state import NavigationState


class StubFetcher:
    """Answers fetches from fixed data."""

    def __init__(self, repos=(), prs=(), comments=(), error=None):
        self.repos = tuple(repos)
        self.prs = tuple(prs)
        self.comments = tuple(comments)
        self.error = error
        self.closed = False
        self.calls = []

    def fetch_repositories(self, ticket):
        self.calls.append("repositories")
        if self.error:
            return RepositoriesFetched(ticket, error=self.error)
        return RepositoriesFetched(ticket, self.repos)

    def fetch_pull_requests(self, ticket, repo):
        self.calls.append(f"pulls:{repo.name}")
        return PullRequestsFetched(ticket, self.prs)

    def fetch_comments(self, ticket, repo, pr):
        self.calls.append(f"comments:{pr.number}")
        return CommentsFetched(ticket, self.comments)

    def close(self):
        self.closed = True


class BlockingFetcher(StubFetcher):
    """Holds repository fetches until released."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.release = threading.Event()
        self.finished = threading.Event()

    def fetch_repositories(self, ticket):
        self.release.wait(5)
        try:
            return super().fetch_repositories(ticket)
        finally:
            self.finished.set()


@pytest.fixture
def stub(repo, make_repo, pr, comment):
    return StubFetcher(repos=[repo, make_repo("other")], prs=[pr], comments=[comment])


async def settle(app, pilot):
    """Wait for fetch workers and the resulting repaint."""
    await app.workers.wait_for_complete()
    await pilot.pause()


class TestNormalizeKey:
    """Tests for translating Textual key names."""

    def test_named_keys(self):
        """Test named keys use the documented names."""
        assert normalize_key(events.Key("escape", None)) == KeyPressed("esc")
        assert normalize_key(events.Key("pageup", None)) == KeyPressed("pgup")
        assert normalize_key(events.Key("pagedown", None)) == KeyPressed("pgdown")
        assert normalize_key(events.Key("enter", "\r")).key == "enter"

    def test_printable_characters(self):
        """Test printable keys are named by the character they type."""
        assert normalize_key(events.Key("slash", "/")).key == "/"
        assert normalize_key(events.Key("G", "G")).key == "G"
        assert normalize_key(events.Key("j", "j")) == KeyPressed("j", "j")

    def test_ctrl_keys(self):
        """Test control keys keep their names."""
        assert normalize_key(events.Key("ctrl+c", "\x03")).key == "ctrl+c"


@pytest.mark.tui
class TestNitpickApp:
    """Tests driving the application with a stub fetcher."""

    def test_bindings(self):
        """Test ctrl+c is bound with priority so it always reaches the app."""
        bindings = {binding.key: binding for binding in NitpickApp.BINDINGS}
        assert bindings["ctrl+c"].priority is True

    @pytest.mark.asyncio
    async def test_loads_repositories(self, stub):
        """Test repositories load on start and the fetcher closes on exit."""
        app = NitpickApp(stub)
        async with app.run_test(size=(100, 30)) as pilot:
            await settle(app, pilot)
            assert stub.calls == ["repositories"]
            assert len(app.state.repositories.items) == 2
            assert app.state.loading is False
            assert app.state.repositories.height == 30 - 4
        assert stub.closed is True

    @pytest.mark.asyncio
    async def test_browse_and_copy(self, stub):
        """Test walking down to a comment and copying its prompt."""
        copied = []
        app = NitpickApp(stub, copy_text=copied.append)
        async with app.run_test(size=(100, 30)) as pilot:
            await settle(app, pilot)
            await pilot.press("enter")
            await settle(app, pilot)
            assert app.state.navigation is NavigationState.PULL_REQUESTS
            await pilot.press("enter")
            await settle(app, pilot)
            assert app.state.navigation is NavigationState.COMMENTS
            await pilot.press("enter")
            await pilot.pause()
            assert app.state.navigation is NavigationState.COMMENT_DETAIL

            await pilot.press("c")
            await settle(app, pilot)
            assert copied[0].startswith("# GitHub Copilot Request for Code Review Changes")
            assert app.state.status.message == "✅ Full prompt copied to clipboard!"

            await pilot.press("t", "c")
            await settle(app, pilot)
            assert copied[1].startswith("# Review Comment for widgets PR #42")

            await pilot.press("escape")
            await pilot.pause()
            assert app.state.navigation is NavigationState.COMMENTS
            assert app.state.comment is None
        assert stub.calls == ["repositories", "pulls:widgets", "comments:42"]

    @pytest.mark.asyncio
    async def test_copy_failure(self, stub):
        """Test clipboard errors become a status message."""
        def failing(text):
            raise ClipboardError("no clipboard utility found")

        app = NitpickApp(stub, copy_text=failing)
        async with app.run_test(size=(100, 30)) as pilot:
            await settle(app, pilot)
            for _ in range(2):
                await pilot.press("enter")
                await settle(app, pilot)
            await pilot.press("enter", "c")
            await settle(app, pilot)
            assert app.state.status.message == "Copy failed: no clipboard utility found"

    @pytest.mark.asyncio
    async def test_fetch_error(self):
        """Test a fetch error reaches the state."""
        app = NitpickApp(StubFetcher(error="401 Bad credentials"))
        async with app.run_test(size=(100, 30)) as pilot:
            await settle(app, pilot)
            assert app.state.error == "401 Bad credentials"

    @pytest.mark.asyncio
    async def test_filter(self, stub):
        """Test typing a filter narrows the list."""
        app = NitpickApp(stub)
        async with app.run_test(size=(100, 30)) as pilot:
            await settle(app, pilot)
            await pilot.press("slash", "o", "t")
            await pilot.pause()
            names = [item.repo.name for item in app.state.repositories.visible_items]
            assert names == ["other"]

    @pytest.mark.asyncio
    async def test_quit(self, stub, monkeypatch):
        """Test q and ctrl+c both exit."""
        app = NitpickApp(stub)
        exits = []
        async with app.run_test(size=(100, 30)) as pilot:
            await settle(app, pilot)
            monkeypatch.setattr(app, "exit", lambda *args, **kwargs: exits.append(True))
            await pilot.press("q")
            await pilot.press("ctrl+c")
            await pilot.pause()
        assert exits == [True, True]

    @pytest.mark.asyncio
    async def test_resize(self, stub):
        """Test terminal resizes reach the layout."""
        app = NitpickApp(stub)
        async with app.run_test(size=(100, 30)) as pilot:
            await settle(app, pilot)
            await pilot.resize_terminal(80, 20)
            await pilot.pause()
            assert (app.state.width, app.state.height) == (80, 20)
            assert app.state.repositories.width == 76

    @pytest.mark.asyncio
    async def test_unmount_cancels_fetches(self, repo):
        """Test shutting down cancels running fetches and drops their late results."""
        fetcher = BlockingFetcher(repos=[repo])
        app = NitpickApp(fetcher)
        async with app.run_test(size=(100, 30)) as pilot:
            await pilot.pause()
            fetches = [worker for worker in app.workers if worker.group == "fetch"]
            assert len(fetches) == 1

            app.on_unmount()
            assert fetches[0].is_cancelled
            assert fetcher.closed is True

            fetcher.release.set()
            assert fetcher.finished.wait(5)
            await pilot.pause(0.1)
            assert app.state.loading is True
            assert app.state.repositories.items == ()
