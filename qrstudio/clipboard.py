"""Best-effort clipboard copy through the platform's clipboard tool."""

import shutil
import subprocess
import sys

from qrstudio.logging import get_logger

log = get_logger("clipboard")


def _candidates() -> list[list[str]]:
    if sys.platform == "darwin":
        return [["pbcopy"]]
    if sys.platform.startswith("win"):
        return [["clip"]]
    return [
        ["wl-copy"],
        ["xclip", "-selection", "clipboard"],
        ["xsel", "--clipboard", "--input"],
    ]


def copy_text(text: str) -> bool:
    """Copy text to the system clipboard.

    Never raises: a missing tool, a failing tool or a timeout all just
    return False.
    """
    for cmd in _candidates():
        if shutil.which(cmd[0]) is None:
            continue
        try:
            subprocess.run(
                cmd, input=text.encode("utf-8"), check=True, timeout=2,
                stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL,
            )
        except (OSError, subprocess.SubprocessError):
            continue
        log.debug("copied %d chars via %s", len(text), cmd[0])
        return True
    log.debug("clipboard unavailable, copy skipped")
    return False
