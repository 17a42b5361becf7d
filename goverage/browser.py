"""Opening URLs in the user's web browser."""

from __future__ import annotations

import os
import subprocess
import sys

_TIMEOUT = 3.0


def commands() -> list[list[str]]:
    """Return candidate commands for opening a URL, in order of preference."""
    cmds: list[list[str]] = []
    exe = os.environ.get("BROWSER", "")
    if exe:
        cmds.append([exe])
    if sys.platform == "darwin":
        cmds.append(["/usr/bin/open"])
    elif sys.platform.startswith("win"):
        cmds.append(["cmd", "/c", "start"])
    elif os.environ.get("DISPLAY", ""):
        cmds.append(["xdg-open"])
    cmds.extend([["chrome"], ["google-chrome"], ["chromium"], ["firefox"]])
    return cmds


def _appears_successful(proc: subprocess.Popen, timeout: float) -> bool:
    try:
        return proc.wait(timeout=timeout) == 0
    except subprocess.TimeoutExpired:
        return True


def open_url(url: str) -> bool:
    """Try to open ``url`` in a browser and report whether it succeeded."""
    for args in commands():
        try:
            proc = subprocess.Popen([*args, url])
        except OSError:
            continue
        if _appears_successful(proc, _TIMEOUT):
            return True
    return False