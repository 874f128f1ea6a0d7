"""
Data models for MCP Router.

Defines the discovery, loading and selection data structures. Server
entries are Pydantic models that keep unknown fields verbatim so that a
merged document round-trips what the user wrote.
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, Iterator, List, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field

SERVERS_KEY = "mcpServers"


class ConfigSource(NamedTuple):
    """One candidate server config file."""

    path: Path
    index: int


class ParsedDocument(BaseModel):
    """Successfully parsed content of one config source."""

    source: Path = Field(description="Path the document was read from")
    content: Any = Field(default=None, description="Raw JSON content")


class Entry(BaseModel):
    """One named MCP server configuration."""

    model_config = ConfigDict(extra="allow")

    command: Optional[str] = Field(default=None, description="Command to run the server")
    args: Optional[List[str]] = Field(default=None, description="Command arguments")

    @property
    def extra_fields(self) -> Dict[str, Any]:
        """Fields this tool does not interpret."""
        return dict(self.model_extra or {})

    def to_config(self) -> Dict[str, Any]:
        """Convert back to the config file format, emitting only fields that were given."""
        config: Dict[str, Any] = {}
        for key in ("command", "args"):
            if key in self.model_fields_set:
                value = getattr(self, key)
                config[key] = list(value) if isinstance(value, list) else value
        config.update(self.extra_fields)
        return config


class OverrideRecord(NamedTuple):
    """A server name redefined by a later source."""

    name: str
    previous_source: Optional[Path]
    source: Optional[Path]


class EntryTable(Mapping):
    """
    Insertion-ordered mapping of server name to Entry.

    Merging a name that is already present replaces its entry in place
    (the position of the first definition is kept) and records the
    override in ``overridden``.
    """

    def __init__(self, entries: Optional[Dict[str, Entry]] = None):
        self._entries: Dict[str, Entry] = {}
        self._origins: Dict[str, Optional[Path]] = {}
        self.overridden: List[OverrideRecord] = []
        for name, entry in (entries or {}).items():
            self.merge(name, entry)

    def merge(self, name: str, entry: Entry, source: Optional[Path] = None) -> None:
        """Add or replace an entry; the most recent call wins."""
        if name in self._entries:
            self.overridden.append(OverrideRecord(name, self._origins.get(name), source))
        self._entries[name] = entry
        self._origins[name] = source

    def source_of(self, name: str) -> Optional[Path]:
        """Path of the source that supplied the current entry for name."""
        return self._origins.get(name)

    def subset(self, names) -> "EntryTable":
        """Return a new table holding the given names, in this table's order."""
        wanted = set(names)
        table = EntryTable()
        for name, entry in self._entries.items():
            if name in wanted:
                table.merge(name, entry, self._origins.get(name))
        return table

    def to_config(self) -> Dict[str, Dict[str, Any]]:
        """Convert to the ``mcpServers`` mapping."""
        return {name: entry.to_config() for name, entry in self._entries.items()}

    def __getitem__(self, name: str) -> Entry:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"EntryTable({list(self._entries)!r})"


# A selection is a sub-table chosen by the user
Selection = EntryTable


class DisplayItem(NamedTuple):
    """Descriptor shown in the selection prompt."""

    id: str
    summary: str
    detail: Optional[str] = None
