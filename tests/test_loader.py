"""
Test loading and merging of server config sources.
"""

import json

import pytest

from mcp_router.core.loader import (
    extract_entries, load_document, load_entry_table, merge_documents,
)
from mcp_router.core.models import Entry, EntryTable, ParsedDocument


class TestLoadDocument:
    """Test reading a single source."""

    def test_valid_json(self, write_source):
        """Test parsing a valid file."""
        path = write_source("a.mcpServers.json", {"a": {"command": "x"}})

        document = load_document(path)

        assert document is not None
        assert document.source == path
        assert document.content == {"mcpServers": {"a": {"command": "x"}}}

    def test_invalid_json(self, write_source):
        """Test that invalid JSON yields None."""
        path = write_source("bad.mcpServers.json", raw="{not json")

        assert load_document(path) is None

    def test_missing_file(self, tmp_path):
        """Test that a missing file yields None."""
        assert load_document(tmp_path / "missing.json") is None

    def test_invalid_encoding(self, project_dir):
        """Test that undecodable bytes yield None."""
        path = project_dir / ".claude" / "bin.mcpServers.json"
        path.write_bytes(b"\xff\xfe\x00garbage")

        assert load_document(path) is None


class TestExtractEntries:
    """Test pulling servers out of a parsed document."""

    def test_missing_container_key(self, tmp_path):
        """Test that a document without mcpServers contributes nothing."""
        document = ParsedDocument(source=tmp_path, content={"servers": {"a": {"command": "x"}}})

        assert extract_entries(document) == {}

    @pytest.mark.parametrize("content", [
        [],
        "text",
        42,
        None,
        {"mcpServers": ["a", "b"]},
        {"mcpServers": "a"},
    ])
    def test_wrong_shapes_contribute_nothing(self, tmp_path, content):
        """Test non-object documents and containers."""
        document = ParsedDocument(source=tmp_path, content=content)

        assert extract_entries(document) == {}

    def test_invalid_entries_are_skipped(self, tmp_path):
        """Test that malformed entries are dropped individually."""
        document = ParsedDocument(source=tmp_path, content={"mcpServers": {
            "good": {"command": "x"},
            "not-object": "x",
            "bad-args": {"command": "x", "args": "not-a-list"},
        }})

        assert list(extract_entries(document)) == ["good"]

    def test_opaque_fields_are_preserved(self, tmp_path):
        """Test that unknown fields survive untouched."""
        raw = {
            "command": "npx",
            "args": ["-y", "server"],
            "env": {"TOKEN": "abc"},
            "disabled": False,
        }
        document = ParsedDocument(source=tmp_path, content={"mcpServers": {"a": raw}})

        entry = extract_entries(document)["a"]

        assert entry.command == "npx"
        assert entry.args == ["-y", "server"]
        assert entry.extra_fields == {"env": {"TOKEN": "abc"}, "disabled": False}
        assert entry.to_config() == raw


class TestMerge:
    """Test merging multiple sources."""

    def test_disjoint_sources_union(self, write_source):
        """Test that disjoint names are all kept."""
        paths = [
            write_source("a.mcpServers.json", {"a1": {"command": "a"}, "a2": {"command": "a"}}),
            write_source("b.mcpServers.json", {"b1": {"command": "b"}}),
            write_source("c.mcpServers.json", {"c1": {"command": "c"}, "c2": {"command": "c"}, "c3": {"command": "c"}}),
        ]

        table = load_entry_table(paths)

        assert len(table) == 6
        assert list(table) == ["a1", "a2", "b1", "c1", "c2", "c3"]
        assert table.overridden == []

    def test_last_writer_wins(self, write_source):
        """Test that the later source wins and flips when reordered."""
        first = write_source("first.mcpServers.json", {"shared": {"command": "first"}})
        second = write_source("second.mcpServers.json", {"shared": {"command": "second"}})

        assert load_entry_table([first, second])["shared"].command == "second"
        assert load_entry_table([second, first])["shared"].command == "first"

    def test_override_keeps_position_and_records(self, write_source):
        """Test that overriding keeps the first position and is recorded."""
        first = write_source("first.mcpServers.json", {"shared": {"command": "old"}, "a": {"command": "a"}})
        second = write_source("second.mcpServers.json", {"b": {"command": "b"}, "shared": {"command": "new"}})

        table = load_entry_table([first, second])

        assert list(table) == ["shared", "a", "b"]
        assert table.source_of("shared") == second
        assert [(r.name, r.previous_source, r.source) for r in table.overridden] == [
            ("shared", first, second)
        ]

    def test_override_replaces_whole_entry(self, write_source):
        """Test that fields from the earlier definition are not merged in."""
        first = write_source("first.mcpServers.json", {"s": {"command": "x", "args": ["1"], "env": {"A": "1"}}})
        second = write_source("second.mcpServers.json", {"s": {"command": "y"}})

        table = load_entry_table([first, second])

        assert table["s"].to_config() == {"command": "y"}

    def test_invalid_source_does_not_block_others(self, write_source):
        """Test partial failure isolation."""
        good = write_source("a.mcpServers.json", {"a": {"command": "a"}})
        bad = write_source("b.mcpServers.json", raw="{\"mcpServers\": ")
        other = write_source("c.mcpServers.json", {"c": {"command": "c"}})

        table = load_entry_table([good, bad, other])

        assert list(table) == ["a", "c"]

    @pytest.mark.parametrize("raw", [
        "{\"n\": 1" + "0" * 5000 + "}",
        "[" * 200000,
    ], ids=["oversized-int", "deep-nesting"])
    def test_unparsable_numbers_and_nesting_are_skipped(self, write_source, raw):
        """Test that decoder limits skip the file instead of aborting the load."""
        good = write_source("a.mcpServers.json", {"a": {"command": "a"}})
        bad = write_source("b.mcpServers.json", raw=raw)

        assert list(load_entry_table([good, bad])) == ["a"]
        assert list(load_entry_table([good, bad], max_workers=2)) == ["a"]

    def test_empty_input(self):
        """Test that no sources produce an empty table."""
        table = load_entry_table([])

        assert len(table) == 0
        assert not table

    def test_concurrent_reads_keep_source_order(self, write_source):
        """Test that concurrent loading merges in source order."""
        paths = [
            write_source(f"{i:02d}.mcpServers.json", {"shared": {"command": str(i)}, f"s{i}": {"command": "x"}})
            for i in range(10)
        ]

        sequential = load_entry_table(paths)
        concurrent = load_entry_table(paths, max_workers=4)
        reversed_concurrent = load_entry_table(list(reversed(paths)), max_workers=4)

        assert concurrent.to_config() == sequential.to_config()
        assert list(concurrent) == list(sequential)
        assert concurrent["shared"].command == "9"
        assert reversed_concurrent["shared"].command == "0"

    def test_merge_documents_is_pure(self, tmp_path):
        """Test merging in-memory documents."""
        docs = [
            ParsedDocument(source=tmp_path / "1", content={"mcpServers": {"a": {"command": "1"}}}),
            ParsedDocument(source=tmp_path / "2", content={"other": True}),
            ParsedDocument(source=tmp_path / "3", content={"mcpServers": {"a": {"command": "3"}}}),
        ]

        table = merge_documents(docs)

        assert table["a"].command == "3"
        assert table.source_of("a") == tmp_path / "3"


class TestEntryTable:
    """Test the EntryTable mapping."""

    def test_mapping_protocol(self):
        """Test dict-like access."""
        table = EntryTable({"a": Entry(command="x"), "b": Entry(command="y")})

        assert "a" in table
        assert table["b"].command == "y"
        assert dict(table.items())["a"].command == "x"
        with pytest.raises(KeyError):
            table["missing"]

    def test_subset_follows_table_order(self):
        """Test that subsets keep table order regardless of requested order."""
        table = EntryTable({name: Entry(command=name) for name in ["a", "b", "c"]})

        subset = table.subset(["c", "a"])

        assert list(subset) == ["a", "c"]
        assert list(table) == ["a", "b", "c"]

    def test_to_config_omits_absent_fields(self):
        """Test that serialization does not invent fields."""
        entry = Entry.model_validate({"command": "x"})

        assert entry.to_config() == {"command": "x"}
        assert json.loads(json.dumps(EntryTable({"a": entry}).to_config())) == {"a": {"command": "x"}}
