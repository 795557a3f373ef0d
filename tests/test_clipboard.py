"""Tests for clipboard access."""

import subprocess

import pytest

from nitpick import clipboard
from nitpick.clipboard import ClipboardError, copy


def completed(returncode: int = 0, stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout="", stderr=stderr)


@pytest.fixture
def linux(monkeypatch):
    monkeypatch.setattr(clipboard.sys, "platform", "linux")
    monkeypatch.setattr(clipboard.os, "name", "posix")


class TestClipboardCommands:
    """Tests for platform command selection."""

    def test_macos(self, monkeypatch):
        """Test macOS uses pbcopy."""
        monkeypatch.setattr(clipboard.sys, "platform", "darwin")
        assert clipboard.clipboard_commands() == [["pbcopy"]]

    def test_linux(self, linux):
        """Test Linux tries Wayland first, then X11 utilities."""
        names = [cmd[0] for cmd in clipboard.clipboard_commands()]
        assert names == ["wl-copy", "xsel", "xclip"]


class TestCopy:
    """Tests for copy()."""

    def test_no_utility(self, linux, monkeypatch):
        """Test a helpful error when no utility is installed."""
        monkeypatch.setattr(clipboard.shutil, "which", lambda name: None)
        with pytest.raises(ClipboardError, match="no clipboard utility found"):
            copy("text")

    def test_first_available_succeeds(self, linux, monkeypatch):
        """Test text is piped to the first installed utility."""
        calls = []

        def fake_run(command, **kwargs):
            calls.append((command, kwargs["input"]))
            return completed()

        monkeypatch.setattr(clipboard.shutil, "which", lambda name: name == "xclip")
        monkeypatch.setattr(clipboard.subprocess, "run", fake_run)
        copy("hello")
        assert calls == [(["xclip", "-selection", "clipboard"], "hello")]

    def test_falls_back_on_failure(self, linux, monkeypatch):
        """Test a failing utility is followed by the next one."""
        results = iter([completed(1, "no display"), completed()])
        monkeypatch.setattr(clipboard.shutil, "which", lambda name: name in ("xsel", "xclip"))
        monkeypatch.setattr(clipboard.subprocess, "run", lambda command, **kw: next(results))
        copy("hello")

    def test_all_fail(self, linux, monkeypatch):
        """Test every failure is reported."""
        def fake_run(command, **kwargs):
            if command[0] == "wl-copy":
                raise OSError("broken pipe")
            return completed(1, "no display")

        monkeypatch.setattr(clipboard.shutil, "which", lambda name: name in ("wl-copy", "xsel"))
        monkeypatch.setattr(clipboard.subprocess, "run", fake_run)
        with pytest.raises(ClipboardError) as excinfo:
            copy("hello")
        assert "wl-copy: broken pipe" in str(excinfo.value)
        assert "xsel: no display" in str(excinfo.value)
