"""System clipboard access through the platform's command-line utilities."""

import logging
import os
import shutil
import subprocess
import sys


logger = logging.getLogger(__name__)


class ClipboardError(Exception):
    """Raised when text could not be placed on the clipboard."""


def clipboard_commands() -> list[list[str]]:
    """Candidate copy commands for the current platform, in preference order."""
    if sys.platform == "darwin":
        return [["pbcopy"]]
    if os.name == "nt":
        return [["clip"]]
    return [
        ["wl-copy"],
        ["xsel", "--clipboard", "--input"],
        ["xclip", "-selection", "clipboard"],
    ]


def copy(text: str) -> None:
    """Copy ``text`` to the system clipboard.

    Raises:
        ClipboardError: If no utility is installed or every available one fails.
    """
    candidates = [cmd for cmd in clipboard_commands() if shutil.which(cmd[0])]
    if not candidates:
        names = ", ".join(cmd[0] for cmd in clipboard_commands())
        raise ClipboardError(f"no clipboard utility found (install one of: {names})")

    failures = []
    for command in candidates:
        try:
            proc = subprocess.run(
                command,
                input=text,
                text=True,
                capture_output=True,
                check=False,
                timeout=5,
            )
        except (OSError, subprocess.SubprocessError) as e:
            failures.append(f"{command[0]}: {e}")
            continue
        if proc.returncode == 0:
            return
        detail = proc.stderr.strip() or f"exit status {proc.returncode}"
        failures.append(f"{command[0]}: {detail}")

    logger.warning("Clipboard copy failed: %s", "; ".join(failures))
    raise ClipboardError("; ".join(failures))
