"""Tests for alert aggregation: deduplication and severity ordering"""

import random
from datetime import datetime, timezone

import pytest

from healthwatch.alerts.aggregator import (
    AlertAggregator,
    MergeResult,
    merge_alerts,
    sort_by_severity,
    stamp_candidates,
)
from healthwatch.alerts.models import DEMO_ALERTS, Alert, AlertStatus, Severity, severity_rank
from healthwatch.exceptions import AlertNotFound


def make_alert(alert_id, severity, village="Jalsuraksha", status="Open"):
    return Alert(id=alert_id, village=village, severity=severity, status=status)


class TestAlertModel:
    """Test the Alert type"""

    def test_strings_coerced_to_enums(self):
        alert = make_alert("ALERT-001", "High", status="Investigating")

        assert alert.severity is Severity.HIGH
        assert alert.status is AlertStatus.INVESTIGATING

    def test_unknown_severity_rejected(self):
        with pytest.raises(ValueError):
            make_alert("ALERT-001", "Critical")

    def test_severity_rank(self):
        assert severity_rank(Severity.HIGH) < severity_rank(Severity.MEDIUM) < severity_rank(Severity.LOW)
        assert severity_rank("Medium") == 1

    def test_from_dict_round_trip(self):
        alert = Alert.from_dict(DEMO_ALERTS[1])

        assert alert.id == "ALERT-002"
        assert alert.severity is Severity.MEDIUM
        assert alert.status is AlertStatus.INVESTIGATING
        assert alert.to_dict()["village"] == "Pawanpur"


class TestMergeAlerts:
    """Test the pure merge function"""

    def test_existing_wins_scenario(self):
        """Test existing alerts win and the set is re-sorted by severity"""
        existing = [make_alert("A1", "High"), make_alert("A2", "Low")]
        candidates = [make_alert("A2", "Medium"), make_alert("A3", "Medium")]

        merged, added, dropped = merge_alerts(existing, candidates)

        assert [(a.id, a.severity.value) for a in merged] == [
            ("A1", "High"),
            ("A3", "Medium"),
            ("A2", "Low"),
        ]
        assert [a.id for a in added] == ["A3"]
        assert [(a.id, a.severity.value) for a in dropped] == [("A2", "Medium")]

    def test_empty_batch(self):
        """Test an empty batch adds nothing and leaves the set untouched"""
        existing = [make_alert("A2", "Low"), make_alert("A1", "High")]

        merged, added, dropped = merge_alerts(existing, [])

        assert merged == existing
        assert added == []
        assert dropped == []

    def test_duplicate_within_batch_dropped(self):
        """Test the first of two candidates with one id wins"""
        candidates = [make_alert("A1", "Low"), make_alert("A1", "High")]

        merged, added, dropped = merge_alerts([], candidates)

        assert [(a.id, a.severity.value) for a in merged] == [("A1", "Low")]
        assert len(dropped) == 1

    def test_stable_for_equal_severity(self):
        """Test equal-severity alerts keep insertion order"""
        existing = [make_alert("A1", "Medium"), make_alert("A2", "Medium")]
        candidates = [make_alert("A3", "Medium"), make_alert("A4", "High")]

        merged, _, _ = merge_alerts(existing, candidates)

        assert [a.id for a in merged] == ["A4", "A1", "A2", "A3"]

    def test_size_and_uniqueness_property(self):
        """Test |merged| = |existing| + new unique ids, with no duplicates"""
        rng = random.Random(7)
        severities = ["High", "Medium", "Low"]

        for _ in range(100):
            existing_ids = rng.sample(range(30), rng.randint(0, 10))
            existing = sort_by_severity(
                make_alert(f"ALERT-{i}", rng.choice(severities)) for i in existing_ids
            )
            candidates = [
                make_alert(f"ALERT-{rng.randint(0, 29)}", rng.choice(severities))
                for _ in range(rng.randint(0, 10))
            ]

            merged, added, _ = merge_alerts(existing, candidates)

            ids = [a.id for a in merged]
            new_ids = {c.id for c in candidates} - {a.id for a in existing}
            assert len(ids) == len(set(ids))
            assert len(merged) == len(existing) + len(new_ids)
            assert len(added) == len(new_ids)
            ranks = [severity_rank(a.severity) for a in merged]
            assert ranks == sorted(ranks)

    def test_sort_is_idempotent(self):
        alerts = [make_alert(f"A{i}", s) for i, s in enumerate(["Low", "High", "Medium", "High"])]

        once = sort_by_severity(alerts)

        assert sort_by_severity(once) == once


class TestStampCandidates:
    """Test receipt timestamps"""

    def test_all_candidates_share_the_stamp(self):
        received_at = datetime(2026, 7, 1, 12, 0, tzinfo=timezone.utc)

        stamped = stamp_candidates([make_alert("A1", "High"), make_alert("A2", "Low")], received_at)

        assert {a.created_at for a in stamped} == {received_at}


class TestMergeResult:
    """Test caller-facing merge outcome"""

    def test_no_new_alerts_message(self):
        result = MergeResult()

        assert result.added_count == 0
        assert result.title == "No New Alerts"
        assert "did not find any new" in result.message

    def test_single_alert_message(self):
        result = MergeResult(added=[make_alert("A1", "High")])

        assert result.title == "Alerts Updated"
        assert result.message.startswith("1 new alert has been created")

    def test_plural_message(self):
        result = MergeResult(added=[make_alert("A1", "High"), make_alert("A2", "Low")])

        assert result.message.startswith("2 new alerts have been created")

    def test_to_dict(self):
        alerts = [make_alert("A1", "High"), make_alert("A2", "Low")]
        result = MergeResult(added=[alerts[1]], dropped=[], alerts=alerts)

        data = result.to_dict()

        assert data["added"] == 1
        assert data["total"] == 2
        assert data["new_alert_ids"] == ["A2"]


class TestAlertAggregator:
    """Test the stateful aggregator"""

    def test_merge_reports_added_count(self):
        aggregator = AlertAggregator([make_alert("A1", "High"), make_alert("A2", "Low")])

        result = aggregator.merge([make_alert("A2", "Medium"), make_alert("A3", "Medium")])

        assert result.added_count == 1
        assert [a.id for a in aggregator.list_alerts()] == ["A1", "A3", "A2"]
        assert aggregator.get_alert("A2").severity is Severity.LOW

    def test_empty_batch_is_not_an_error(self):
        aggregator = AlertAggregator([make_alert("A1", "High")])

        result = aggregator.merge([])

        assert result.added_count == 0
        assert result.total == 1
        assert result.title == "No New Alerts"

    def test_overlapping_batches(self):
        """Test the same batch merged twice adds its alerts once"""
        aggregator = AlertAggregator()
        batch = [make_alert("A1", "High"), make_alert("A2", "Medium")]

        first = aggregator.merge(batch)
        second = aggregator.merge(batch)

        assert first.added_count == 2
        assert second.added_count == 0
        assert len(second.dropped) == 2
        assert len(aggregator) == 2

    def test_merge_stamps_created_at(self):
        aggregator = AlertAggregator()
        received_at = datetime(2026, 7, 1, 9, 30, tzinfo=timezone.utc)

        aggregator.merge([make_alert("A1", "High")], received_at=received_at)

        assert aggregator.get_alert("A1").created_at == received_at

    def test_list_alerts_is_a_snapshot(self):
        aggregator = AlertAggregator([make_alert("A1", "High")])

        aggregator.list_alerts().clear()

        assert len(aggregator) == 1

    def test_update_status_any_transition(self):
        """Test statuses are stored verbatim without a transition table"""
        aggregator = AlertAggregator([make_alert("A1", "High", status="Closed")])

        updated = aggregator.update_status("A1", "Open")

        assert updated.status is AlertStatus.OPEN
        assert aggregator.get_alert("A1").status is AlertStatus.OPEN

    def test_update_status_keeps_position(self):
        aggregator = AlertAggregator([
            make_alert("A1", "High"),
            make_alert("A2", "High"),
            make_alert("A3", "Low"),
        ])

        aggregator.update_status("A1", AlertStatus.CLOSED)

        assert [a.id for a in aggregator.list_alerts()] == ["A1", "A2", "A3"]

    def test_update_status_unknown_alert(self):
        aggregator = AlertAggregator()

        with pytest.raises(AlertNotFound) as exc_info:
            aggregator.update_status("ALERT-404", "Closed")

        assert exc_info.value.details["alert_id"] == "ALERT-404"

    def test_get_alert_unknown(self):
        with pytest.raises(AlertNotFound):
            AlertAggregator().get_alert("ALERT-404")

    def test_seed_alerts(self):
        """Test the demo set loads sorted by severity"""
        aggregator = AlertAggregator()

        result = aggregator.seed_alerts()

        assert result.added_count == len(DEMO_ALERTS)
        assert [a.severity.value for a in aggregator.list_alerts()] == [
            "High", "High", "Medium", "Medium", "Low"
        ]
        assert [a.id for a in aggregator.list_alerts()][:2] == ["ALERT-001", "ALERT-003"]
