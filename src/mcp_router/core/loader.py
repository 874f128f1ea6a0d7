"""
Config loading and merging for MCP Router.

Reads each discovered source as JSON and folds the ``mcpServers`` maps
into a single EntryTable. A source that cannot be read or parsed is
logged and skipped so one broken file never hides the others.
"""

import asyncio
import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from pydantic import ValidationError

from mcp_router.core.models import (
    SERVERS_KEY, ConfigSource, Entry, EntryTable, ParsedDocument,
)
from mcp_router.utils.logging import get_logger

logger = get_logger(__name__)

SourceLike = Union[ConfigSource, Path, str]


def _source_path(source: SourceLike) -> Path:
    if isinstance(source, ConfigSource):
        return source.path
    return Path(source)


def load_document(source: SourceLike) -> Optional[ParsedDocument]:
    """
    Read and parse one config source.

    Args:
        source: Source to read

    Returns:
        Parsed document, or None if the file could not be read or parsed
    """
    path = _source_path(source)
    try:
        with open(path, "r", encoding="utf-8") as f:
            content = json.load(f)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Failed to read {path}: {e}")
        return None
    except (ValueError, RecursionError) as e:
        # JSONDecodeError, oversized integers and excessive nesting
        logger.warning(f"Invalid JSON in {path}: {e}")
        return None

    return ParsedDocument(source=path, content=content)


def extract_entries(document: ParsedDocument) -> Dict[str, Entry]:
    """Extract named server entries from a parsed document."""
    content = document.content
    if not isinstance(content, dict):
        logger.debug(f"{document.source} is not a JSON object, no servers")
        return {}

    servers = content.get(SERVERS_KEY)
    if not isinstance(servers, dict):
        logger.debug(f"{document.source} has no '{SERVERS_KEY}' object")
        return {}

    entries: Dict[str, Entry] = {}
    for name, raw in servers.items():
        if not isinstance(raw, dict):
            logger.warning(f"Skipping server '{name}' in {document.source}: not an object")
            continue
        try:
            entries[name] = Entry.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Skipping server '{name}' in {document.source}: {e}")
    return entries


def merge_documents(documents: Iterable[ParsedDocument]) -> EntryTable:
    """
    Merge documents in order; a later definition of a name wins.

    Args:
        documents: Parsed documents in processing order

    Returns:
        Merged EntryTable
    """
    table = EntryTable()
    for document in documents:
        for name, entry in extract_entries(document).items():
            table.merge(name, entry, document.source)

    for record in table.overridden:
        logger.debug(
            f"Server '{record.name}' from {record.previous_source} "
            f"overridden by {record.source}"
        )
    return table


def load_entry_table(sources: Sequence[SourceLike], max_workers: int = 1) -> EntryTable:
    """
    Load sources and merge them into one EntryTable.

    With ``max_workers`` above one the files are read concurrently; the
    merge still follows the order of ``sources``.

    Args:
        sources: Sources in processing order
        max_workers: Maximum concurrent reads

    Returns:
        Merged EntryTable (empty if nothing could be loaded)
    """
    if max_workers > 1 and len(sources) > 1:
        documents = asyncio.run(_load_documents_async(sources, max_workers))
    else:
        documents = [load_document(source) for source in sources]

    loaded = [document for document in documents if document is not None]
    logger.debug(f"Loaded {len(loaded)} of {len(sources)} config sources")
    return merge_documents(loaded)


async def _load_documents_async(
    sources: Sequence[SourceLike], max_workers: int
) -> List[Optional[ParsedDocument]]:
    """Read sources concurrently, returning results in source order."""
    semaphore = asyncio.Semaphore(max_workers)

    async def load(source: SourceLike) -> Optional[ParsedDocument]:
        async with semaphore:
            return await asyncio.to_thread(load_document, source)

    results: List[Any] = await asyncio.gather(
        *(load(source) for source in sources), return_exceptions=True
    )

    documents: List[Optional[ParsedDocument]] = []
    for source, result in zip(sources, results):
        if isinstance(result, Exception):
            logger.warning(f"Loading {_source_path(source)} failed: {result}")
            documents.append(None)
        else:
            documents.append(result)
    return documents
