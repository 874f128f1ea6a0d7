"""
Test building and launching the Claude command.
"""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from mcp_router.core.exceptions import LaunchError
from mcp_router.core.launcher import build_launch_command, launch


class TestBuildLaunchCommand:
    """Test argv construction."""

    def test_with_config(self):
        """Test that the config flag follows the extra arguments."""
        command = build_launch_command("claude", ["--dangerously-skip-permissions"], Path("/tmp/x.json"))

        assert command == ["claude", "--dangerously-skip-permissions", "--mcp-config", "/tmp/x.json"]

    def test_without_config(self):
        """Test that no flag is added without a generated config."""
        assert build_launch_command("claude", ["-p", "hi"], None) == ["claude", "-p", "hi"]

    def test_custom_flag(self):
        """Test a different config flag."""
        command = build_launch_command("ccr", (), "/tmp/x.json", config_flag="--config")

        assert command == ["ccr", "--config", "/tmp/x.json"]


class TestLaunch:
    """Test running the command."""

    @patch("mcp_router.core.launcher.subprocess.run")
    def test_returns_exit_code(self, mock_run, tmp_path):
        """Test that the child exit code is returned."""
        mock_run.return_value = MagicMock(returncode=3)

        assert launch(["claude", "--help"], cwd=tmp_path) == 3
        mock_run.assert_called_once_with(["claude", "--help"], cwd=str(tmp_path))

    @patch("mcp_router.core.launcher.subprocess.run", side_effect=FileNotFoundError())
    def test_missing_executable(self, mock_run):
        """Test that a missing CLI raises LaunchError."""
        with pytest.raises(LaunchError) as exc_info:
            launch(["no-such-cli"])

        assert exc_info.value.error_code == "COMMAND_NOT_FOUND"
        assert "no-such-cli" in str(exc_info.value)
