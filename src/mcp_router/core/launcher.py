"""
Launch the Claude CLI with a generated MCP config.
"""

import subprocess
from pathlib import Path
from typing import List, Optional, Sequence, Union

from mcp_router.core.exceptions import LaunchError
from mcp_router.utils.logging import get_logger

logger = get_logger(__name__)


def build_launch_command(
    cli_path: str,
    extra_args: Sequence[str] = (),
    config_path: Optional[Union[str, Path]] = None,
    config_flag: str = "--mcp-config",
) -> List[str]:
    """
    Build the argv for the CLI.

    The config flag is only added when a config was generated.
    """
    command = [cli_path, *extra_args]
    if config_path is not None:
        command.extend([config_flag, str(config_path)])
    return command


def launch(command: Sequence[str], cwd: Optional[Union[str, Path]] = None) -> int:
    """
    Run the command in the foreground and wait for it.

    Returns:
        Process exit code

    Raises:
        LaunchError: If the executable cannot be started
    """
    logger.info(f"Launching: {' '.join(command)}")
    try:
        result = subprocess.run(list(command), cwd=str(cwd) if cwd else None)
    except FileNotFoundError:
        raise LaunchError(
            f"Command not found: {command[0]}",
            error_code="COMMAND_NOT_FOUND",
            details={"command": list(command)},
        )
    except OSError as e:
        raise LaunchError(f"Failed to launch {command[0]}: {e}", details={"command": list(command)})

    return result.returncode
