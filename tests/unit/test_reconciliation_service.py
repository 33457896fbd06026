"""
Unit tests for RosterReconciliationService and its report.
"""

from datetime import datetime

import pytest

from rostermatch.roster.allocation import Slot
from rostermatch.roster.errors import CorruptBaselineData, NoBaselineData, RosterTooLarge
from rostermatch.roster.providers import StaticRosterProvider
from rostermatch.roster.reconciler import Classification
from rostermatch.roster.records import EntityRecord
from rostermatch.roster.snapshot import DBSnapshotStore, InMemorySnapshotStore
from rostermatch.services import RosterReconciliationService, save_baseline


class _ExplodingProvider:
    """Provider that must never be asked for entities."""

    def get_live_entities(self):
        raise AssertionError("live roster should not be read")


@pytest.fixture
def store(stored_roster):
    store = InMemorySnapshotStore(key="club")
    store.save(stored_roster, datetime(2026, 10, 19, 9, 30))
    return store


class TestRun:
    """Tests for a full reconciliation run."""

    def test_report_counts(self, live_roster, store):
        """Test the scenario with one match, one misspelling and one empty row."""
        service = RosterReconciliationService(StaticRosterProvider(live_roster), store)
        report = service.run()

        assert report.matched_count == 1
        assert report.similar_count == 1
        assert report.unmatched_count == 0
        assert report.missing_count == 1
        assert report.assigned_count == 1
        assert report.unassigned_count == 0
        assert report.baseline_size == 2
        assert report.baseline_saved_at == datetime(2026, 10, 19, 9, 30)

        assert report.classifications[1].classification is Classification.SIMILAR_UNMATCHED
        assert 2 not in report.classifications

    def test_missing_entity_fills_empty_row(self, live_roster, store):
        """Test Carlos Ruiz lands in the empty row with an absolute link."""
        service = RosterReconciliationService(
            StaticRosterProvider(live_roster),
            store,
            reference_base_url="https://www.transfermarkt.us",
        )
        report = service.run()

        filled = report.assignments[Slot(index=2)]
        assert filled.display_name == "Carlos Ruiz"
        assert filled.reference == "https://www.transfermarkt.us/carlos-ruiz/profil/spieler/2"
        assert filled.index == 2

    def test_empty_snapshot(self, live_roster):
        """Test a saved but empty roster leaves every named entity unmatched."""
        store = InMemorySnapshotStore(key="club")
        store.save([])
        report = RosterReconciliationService(StaticRosterProvider(live_roster), store).run()

        assert report.unmatched_count == 2
        assert report.matched_count == 0
        assert report.missing_count == 0
        assert report.assignments == {}

    def test_no_baseline(self):
        """Test an absent snapshot fails before the live roster is read."""
        service = RosterReconciliationService(_ExplodingProvider(), InMemorySnapshotStore(key="club"))
        with pytest.raises(NoBaselineData) as exc_info:
            service.run()
        assert exc_info.value.key == "club"

    def test_corrupt_baseline(self):
        """Test a corrupt snapshot is not treated as an empty roster."""
        store = InMemorySnapshotStore(key="club", blobs={"club": ("[{]", datetime(2026, 1, 1))})
        service = RosterReconciliationService(_ExplodingProvider(), store)
        with pytest.raises(CorruptBaselineData):
            service.run()

    def test_blank_stored_name_is_corrupt(self):
        """Test a whitespace-only stored name never reaches an empty row."""
        payload = '[{"display_name": "John Smith"}, {"display_name": "   "}]'
        store = InMemorySnapshotStore(key="club", blobs={"club": (payload, datetime(2026, 1, 1))})
        live = [
            EntityRecord(display_name="John Smith", source_id="1"),
            EntityRecord(display_name="", source_id="0"),
        ]
        service = RosterReconciliationService(StaticRosterProvider(live), store)
        with pytest.raises(CorruptBaselineData):
            service.run()

    def test_size_cap(self, live_roster, store):
        service = RosterReconciliationService(
            StaticRosterProvider(live_roster), store, max_roster_size=2
        )
        with pytest.raises(RosterTooLarge):
            service.run()

    def test_overflow_reported(self):
        """Test missing entities without an empty row end up unassigned."""
        store = InMemorySnapshotStore(key="club")
        store.save([EntityRecord(display_name=n) for n in ("Anna Berg", "Carlos Ruiz", "Dmitri Orlov")])
        live = [
            EntityRecord(display_name="John Smith", source_id="1"),
            EntityRecord(display_name="", source_id="0"),
        ]
        report = RosterReconciliationService(StaticRosterProvider(live), store).run()

        assert report.missing_count == 3
        assert report.assigned_count == 1
        assert report.unassigned_count == 2
        assert [r.display_name for r in report.unassigned] == ["Carlos Ruiz", "Dmitri Orlov"]
        assert "No empty row left for: 2" in report.summary()

    def test_explicit_falsy_overrides_kept(self, live_roster, store):
        """Test a zero size cap and an empty base URL are not replaced by settings."""
        service = RosterReconciliationService(
            StaticRosterProvider(live_roster), store, max_roster_size=0, reference_base_url=""
        )
        assert service.max_roster_size == 0
        assert service.reference_base_url == ""
        with pytest.raises(RosterTooLarge):
            service.run()

    def test_explicit_thresholds(self, store):
        """Test per-instance thresholds override settings."""
        live = [EntityRecord(display_name="Jon Smyth", source_id="1")]
        service = RosterReconciliationService(
            StaticRosterProvider(live), store, similar_threshold=0.9, dedupe_threshold=0.9
        )
        report = service.run()
        assert report.unmatched_count == 1


class TestReport:
    """Tests for report rendering."""

    def test_summary(self, live_roster, store):
        report = RosterReconciliationService(StaticRosterProvider(live_roster), store).run()
        summary = report.summary()

        assert summary.startswith("Roster comparison complete:")
        assert "Similar to target entity: 1" in summary
        assert "Total target entities:    2" in summary

    def test_to_dict(self, live_roster, store):
        report = RosterReconciliationService(
            StaticRosterProvider(live_roster), store, reference_base_url="https://example.com"
        ).run()
        payload = report.to_dict()

        assert payload["baseline_saved_at"] == "2026-10-19T09:30:00"
        assert payload["missing"] == ["Carlos Ruiz"]
        assert [c["classification"] for c in payload["classifications"]] == [
            "matched",
            "similar_unmatched",
        ]
        assert payload["classifications"][1]["hint"] == 'Similar to "John Smith" (80% match)'
        assert payload["assignments"] == [
            {
                "slot": 2,
                "name": "Carlos Ruiz",
                "reference": "https://example.com/carlos-ruiz/profil/spieler/2",
                "hint": "Added from target roster",
            }
        ]


class TestSaveBaseline:
    """Tests for capturing the target roster."""

    def test_drops_duplicates_and_blank_rows(self):
        store = InMemorySnapshotStore(key="club")
        saved = save_baseline(
            store,
            [
                EntityRecord(display_name="John Smith", reference="/p/1"),
                EntityRecord(display_name=""),
                EntityRecord(display_name="John Smith", reference="/p/9"),
                EntityRecord(display_name="Carlos Ruiz", reference="/p/2"),
            ],
        )

        assert saved == 2
        assert [(r.display_name, r.reference) for r in store.load()] == [
            ("John Smith", "/p/1"),
            ("Carlos Ruiz", "/p/2"),
        ]

    def test_service_method_round_trip_through_db(self, db_session, live_roster):
        store = DBSnapshotStore(db_session, key="club")
        service = RosterReconciliationService(StaticRosterProvider(live_roster), store)
        service.save_baseline([EntityRecord(display_name="John Smith")])

        report = service.run()
        assert report.matched_count == 1
        assert report.similar_count == 1
        assert report.missing_count == 0
