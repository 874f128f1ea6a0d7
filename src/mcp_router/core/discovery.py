"""
Config source discovery for MCP Router.

Finds ``*mcpServers.json`` files in a project's ``.claude`` directory.
"""

from pathlib import Path
from typing import List, NamedTuple, Optional, Union

from mcp_router.core.models import ConfigSource
from mcp_router.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_DIRECTORY = ".claude"
DEFAULT_SUFFIX = "mcpServers.json"


class DiscoveryResult(NamedTuple):
    """Sources found plus non-fatal notices for the user."""

    sources: List[ConfigSource]
    notices: List[str]


def discover_sources(
    base_dir: Union[str, Path],
    directory: str = DEFAULT_DIRECTORY,
    suffix: str = DEFAULT_SUFFIX,
    override: Optional[Union[str, Path]] = None,
) -> DiscoveryResult:
    """
    Find server config files beneath a project directory.

    Only immediate, regular files of ``<base_dir>/<directory>`` whose name
    ends with ``suffix`` are returned, sorted by file name. When
    ``override`` is given the directory is not scanned and the override is
    the only source.

    Args:
        base_dir: Project root
        directory: Subdirectory to scan
        suffix: Required file name suffix
        override: Explicit single source path

    Returns:
        DiscoveryResult with absolute source paths and notices
    """
    if override is not None:
        override_path = Path(override).expanduser()
        if not override_path.is_absolute():
            override_path = Path(base_dir) / override_path
        logger.debug(f"Using override config source {override_path}")
        return DiscoveryResult([ConfigSource(override_path.absolute(), 0)], [])

    scan_dir = (Path(base_dir) / directory).absolute()

    try:
        if not scan_dir.is_dir():
            logger.debug(f"Scan directory {scan_dir} does not exist")
            return DiscoveryResult([], [f"No {directory} directory found in {Path(base_dir)}"])

        candidates = sorted(
            (path for path in scan_dir.iterdir()
             if path.name.endswith(suffix) and path.is_file()),
            key=lambda path: path.name,
        )
    except OSError as e:
        logger.warning(f"Could not read {scan_dir}: {e}")
        return DiscoveryResult([], [f"Could not read {scan_dir}: {e.strerror or e}"])

    sources = [ConfigSource(path, index) for index, path in enumerate(candidates)]
    logger.debug(f"Found {len(sources)} config sources in {scan_dir}")
    return DiscoveryResult(sources, [])
