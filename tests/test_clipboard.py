"""Tests for the best-effort clipboard collaborator."""

import subprocess
from unittest.mock import patch

from qrstudio import clipboard


class TestCopyText:
    def test_no_tool_available(self):
        with patch.object(clipboard.shutil, "which", return_value=None):
            assert clipboard.copy_text("hello") is False

    def test_success_via_first_tool(self):
        with patch.object(clipboard.shutil, "which", return_value="/usr/bin/tool"), \
             patch.object(clipboard.subprocess, "run") as run:
            assert clipboard.copy_text("hello") is True
        assert run.call_count == 1
        assert run.call_args.kwargs["input"] == b"hello"

    def test_failures_are_swallowed(self):
        with patch.object(clipboard.shutil, "which", return_value="/usr/bin/tool"), \
             patch.object(clipboard.subprocess, "run",
                          side_effect=subprocess.CalledProcessError(1, "tool")):
            assert clipboard.copy_text("hello") is False

    def test_os_errors_are_swallowed(self):
        with patch.object(clipboard.shutil, "which", return_value="/usr/bin/tool"), \
             patch.object(clipboard.subprocess, "run", side_effect=OSError("no display")):
            assert clipboard.copy_text("hello") is False

    def test_timeout_is_swallowed(self):
        with patch.object(clipboard.shutil, "which", return_value="/usr/bin/tool"), \
             patch.object(clipboard.subprocess, "run",
                          side_effect=subprocess.TimeoutExpired("tool", 2)):
            assert clipboard.copy_text("hello") is False
