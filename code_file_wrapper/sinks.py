"""Clipboard and external viewer hand-off for the finished output file."""

import logging
import subprocess
import sys
import time
from pathlib import Path

import pyperclip

log = logging.getLogger(__name__)

CLIPBOARD_ATTEMPTS = 10
CLIPBOARD_RETRY_DELAY = 0.05


class ClipboardError(RuntimeError):
    pass


def copy_to_clipboard(file_path: Path) -> None:
    """Replace the clipboard contents with the text of ``file_path``."""
    try:
        contents = Path(file_path).read_text(encoding="utf-8")
    except OSError as e:
        raise ClipboardError(f"Could not read {file_path}: {e}") from e

    last_error = None
    for attempt in range(1, CLIPBOARD_ATTEMPTS + 1):
        try:
            pyperclip.copy(contents)
            log.debug(f"Copied {len(contents)} characters on attempt {attempt}")
            return
        except pyperclip.PyperclipException as e:
            last_error = e
            time.sleep(CLIPBOARD_RETRY_DELAY)

    raise ClipboardError(f"Clipboard access failed: {last_error}") from last_error


def viewer_command(file_path: Path) -> list:
    if sys.platform == "win32":
        return ["notepad", str(file_path)]
    if sys.platform == "darwin":
        return ["open", "-t", str(file_path)]
    return ["xdg-open", str(file_path)]


def open_in_viewer(file_path: Path) -> subprocess.Popen:
    """Spawn a text viewer on ``file_path`` without waiting for it."""
    command = viewer_command(file_path)
    log.debug(f"Launching viewer: {command}")
    return subprocess.Popen(command)
