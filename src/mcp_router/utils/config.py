"""
Configuration management for MCP Router.

Provides hierarchical configuration loading with validation using Pydantic.
TOML files are layered in order and environment variables
(``MCP_ROUTER_*``) override them.
"""

import os
from contextvars import ContextVar
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type, Union

import toml
from pydantic import BaseModel, Field, field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict,
)

from mcp_router.core.exceptions import ConfigError
from mcp_router.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_FILES = [
    "/etc/mcp-router/config.toml",
    "~/.config/mcp-router/config.toml",
    "./.mcp-router.toml",
]

# TOML files layered into the Config being built; empty outside ConfigManager
_active_config_files: ContextVar[Tuple[Path, ...]] = ContextVar(
    "mcp_router_config_files", default=()
)


class TomlFilesSource(PydanticBaseSettingsSource):
    """Settings source that layers TOML files, later files winning per section."""

    def __init__(self, settings_cls: Type[BaseSettings], config_files: Sequence[Path]):
        super().__init__(settings_cls)
        self.config_files = list(config_files)

    def get_field_value(self, field: FieldInfo, field_name: str) -> Tuple[Any, str, bool]:
        # Values come from __call__ as a whole document
        return None, field_name, False

    def __call__(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for file_path in self.config_files:
            if not file_path.exists():
                continue
            try:
                _merge_sections(data, toml.load(file_path))
                logger.debug(f"Loaded configuration from {file_path}")
            except (OSError, toml.TomlDecodeError) as e:
                logger.warning(f"Failed to load config from {file_path}: {e}")
        return data


class LoggingConfig(BaseModel):
    """Logging configuration."""

    enabled: bool = Field(default=True, description="Enable logging completely")
    level: str = Field(default="INFO", description="File logging level")
    console_level: str = Field(default="WARNING", description="Console logging level")
    format_type: str = Field(default="text", description="Log format (text/json)")
    file: Optional[str] = Field(default=None, description="Log file path")
    enable_rich: bool = Field(default=True, description="Enable Rich console output")
    max_bytes: int = Field(default=10 * 1024 * 1024, description="Max log file size")
    backup_count: int = Field(default=5, description="Number of backup files")

    @field_validator("level", "console_level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate logging level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()

    @field_validator("format_type")
    @classmethod
    def validate_format_type(cls, v: str) -> str:
        """Validate format type."""
        if v not in ["text", "json"]:
            raise ValueError(f"Invalid format type: {v}")
        return v


class DiscoveryConfig(BaseModel):
    """Source discovery configuration."""

    directory: str = Field(
        default=".claude",
        description="Project-relative directory holding server config files"
    )
    suffix: str = Field(
        default="mcpServers.json",
        description="File name suffix of server config files"
    )
    override_path: Optional[str] = Field(
        default=None,
        description="Single config file that replaces directory scanning"
    )
    max_workers: int = Field(default=4, description="Concurrent source reads")

    @field_validator("directory", "suffix")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        """Validate that path fragments are not blank."""
        if not v.strip():
            raise ValueError("Value cannot be empty")
        return v

    @field_validator("max_workers")
    @classmethod
    def validate_max_workers(cls, v: int) -> int:
        """Validate worker count."""
        if v < 1:
            raise ValueError("max_workers must be at least 1")
        return v


class OutputConfig(BaseModel):
    """Generated document configuration."""

    directory: Optional[str] = Field(
        default=None,
        description="Directory for generated configs (defaults to the OS temp dir)"
    )
    prefix: str = Field(default="mcp-servers", description="Generated file name prefix")


class LaunchConfig(BaseModel):
    """External CLI launch configuration."""

    cli_path: str = Field(default="claude", description="Path to Claude CLI")
    mcp_config_flag: str = Field(
        default="--mcp-config",
        description="Flag used to pass the generated config path"
    )


class Config(BaseSettings):
    """Main configuration class."""

    debug: bool = Field(default=False, description="Enable debug mode")
    verbose: bool = Field(default=False, description="Enable verbose output")
    config_dir: str = Field(
        default="~/.config/mcp-router",
        description="Configuration directory"
    )

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    launch: LaunchConfig = Field(default_factory=LaunchConfig)

    model_config = SettingsConfigDict(
        env_prefix="MCP_ROUTER_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        """Explicit values, then MCP_ROUTER_* variables, then TOML files."""
        toml_settings = TomlFilesSource(settings_cls, _active_config_files.get())
        return (init_settings, env_settings, toml_settings, dotenv_settings, file_secret_settings)

    def get_config_dir(self) -> Path:
        """Get configuration directory path."""
        return Path(os.path.expanduser(self.config_dir))

    def get_log_file(self) -> Optional[Path]:
        """Get log file path."""
        if self.logging.file:
            log_path = Path(os.path.expanduser(self.logging.file))
            if not log_path.is_absolute():
                log_path = self.get_config_dir() / log_path
            return log_path
        return None

    def get_override_path(self, base_dir: Optional[Path] = None) -> Optional[Path]:
        """Get the single-source override path, resolved against base_dir."""
        if not self.discovery.override_path:
            return None
        path = Path(os.path.expanduser(self.discovery.override_path))
        if not path.is_absolute() and base_dir is not None:
            path = base_dir / path
        return path

    def get_output_dir(self) -> Optional[Path]:
        """Get output directory, or None for the OS temp directory."""
        if self.output.directory:
            return Path(os.path.expanduser(self.output.directory))
        return None


class ConfigManager:
    """Configuration manager with hierarchical loading."""

    def __init__(self):
        self._config: Optional[Config] = None

    def load_config(
        self,
        config_files: Optional[List[Union[str, Path]]] = None,
        **overrides: Any,
    ) -> Config:
        """
        Load configuration from multiple sources.

        Later files override earlier ones section by section.
        ``MCP_ROUTER_*`` environment variables override the files, and
        explicit overrides win over both.

        Args:
            config_files: List of configuration files to load
            **overrides: Configuration overrides

        Returns:
            Loaded configuration

        Raises:
            ConfigError: If the merged values fail validation
        """
        if self._config is not None:
            return self._config

        if config_files is None:
            config_files = DEFAULT_CONFIG_FILES

        file_paths = tuple(
            Path(os.path.expanduser(str(config_file))) for config_file in config_files
        )

        token = _active_config_files.set(file_paths)
        try:
            self._config = Config(**overrides)
        except ValueError as e:
            raise ConfigError(f"Invalid configuration: {e}", error_code="CONFIG_INVALID")
        finally:
            _active_config_files.reset(token)

        return self._config

    def get_config(self) -> Config:
        """Get current configuration."""
        if self._config is None:
            return self.load_config()
        return self._config

    def reload_config(self, **overrides: Any) -> Config:
        """Reload configuration."""
        self._config = None
        return self.load_config(**overrides)


def _merge_sections(target: dict, data: dict) -> None:
    """Merge one level of nested sections into target."""
    for key, value in data.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            target[key] = {**target[key], **value}
        else:
            target[key] = value


# Global configuration manager
_config_manager = ConfigManager()

# Convenience functions
load_config = _config_manager.load_config
get_config = _config_manager.get_config
reload_config = _config_manager.reload_config
