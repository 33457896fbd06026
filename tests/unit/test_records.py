"""
Unit tests for entity records, providers and reference helpers.
"""

import json

import pytest

from rostermatch.roster.providers import (
    JSONFileRosterProvider,
    StaticRosterProvider,
    read_roster_file,
    record_from_row,
)
from rostermatch.roster.records import EntityRecord, dedupe_records, index_records, resolve_reference


class TestEntityRecord:
    """Tests for derived record properties."""

    def test_normalized_name(self):
        assert EntityRecord(display_name="  John   SMITH ").normalized_name == "john smith"

    def test_placeholder(self):
        assert EntityRecord(display_name="   ").is_placeholder
        assert not EntityRecord(display_name="John").is_placeholder

    def test_empty_slot_requires_no_id_and_no_name(self):
        assert EntityRecord(display_name="", source_id="0").is_empty_slot
        assert EntityRecord(display_name="").is_empty_slot
        assert not EntityRecord(display_name="", source_id="15").is_empty_slot
        assert not EntityRecord(display_name="John", source_id="0").is_empty_slot


def test_index_records_sets_positions():
    records = index_records([EntityRecord(display_name="a"), EntityRecord(display_name="b", index=9)])
    assert [r.index for r in records] == [0, 1]


def test_dedupe_records_first_wins():
    records = [
        EntityRecord(display_name="John Smith", reference="/1"),
        EntityRecord(display_name=" John Smith", reference="/2"),
        EntityRecord(display_name="john smith", reference="/3"),
    ]
    unique = dedupe_records(records)
    # Only exact (trimmed) repeats are dropped
    assert [r.reference for r in unique] == ["/1", "/3"]


class TestResolveReference:
    """Tests for making profile links absolute."""

    def test_relative(self):
        assert (
            resolve_reference("/carlos-ruiz/profil/spieler/2", "https://www.transfermarkt.us")
            == "https://www.transfermarkt.us/carlos-ruiz/profil/spieler/2"
        )

    def test_base_with_trailing_slash(self):
        assert resolve_reference("/p/2", "https://example.com/") == "https://example.com/p/2"

    def test_absolute_unchanged(self):
        assert resolve_reference("http://example.com/p/1", "https://www.transfermarkt.us") == "http://example.com/p/1"

    def test_empty_unchanged(self):
        assert resolve_reference("", "https://www.transfermarkt.us") == ""


class TestProviders:
    """Tests for live roster providers."""

    def test_static_provider_indexes(self):
        provider = StaticRosterProvider([EntityRecord(display_name="a"), EntityRecord(display_name="")])
        assert [r.index for r in provider.get_live_entities()] == [0, 1]

    def test_record_from_row_key_variants(self):
        record = record_from_row({"original": "John Smith", "link": "/p/1", "id": 101})
        assert record == EntityRecord(display_name="John Smith", reference="/p/1", source_id="101")

    def test_record_from_row_empty(self):
        assert record_from_row({}) == EntityRecord(display_name="")

    def test_json_file_provider(self, tmp_path):
        path = tmp_path / "live.json"
        path.write_text(
            json.dumps([
                {"name": "John Smith", "id": "101"},
                {"name": "", "id": "0"},
            ]),
            encoding="utf-8",
        )
        records = JSONFileRosterProvider(path).get_live_entities()
        assert [r.display_name for r in records] == ["John Smith", ""]
        assert records[1].is_empty_slot
        assert records[1].index == 1

    def test_json_file_provider_rejects_non_list(self, tmp_path):
        path = tmp_path / "live.json"
        path.write_text("{}", encoding="utf-8")
        with pytest.raises(ValueError):
            JSONFileRosterProvider(path).get_live_entities()

    def test_json_file_provider_rejects_non_object_row(self, tmp_path):
        path = tmp_path / "live.json"
        path.write_text(json.dumps([{"name": "Carlos Ruiz"}, "John Smith"]), encoding="utf-8")
        with pytest.raises(ValueError, match="row 1"):
            JSONFileRosterProvider(path).get_live_entities()

    def test_read_roster_file_for_target_side(self, tmp_path):
        path = tmp_path / "target.json"
        path.write_text(
            json.dumps([{"fullName": "John Smith", "profileUrl": "/p/1"}]),
            encoding="utf-8",
        )
        records = read_roster_file(path)
        assert records == [EntityRecord(display_name="John Smith", reference="/p/1", index=0)]
