"""Tests for the append-only report store"""

import re
from datetime import datetime

import pytest

from healthwatch.reports.store import Report, ReportInput, ReportStore


@pytest.fixture
def store():
    return ReportStore()


class TestReportInput:
    """Test ReportInput conversion"""

    def test_defaults(self):
        """Test optional fields default to not measured"""
        report_input = ReportInput(village="Pawanpur")

        assert report_input.symptoms == []
        assert report_input.ph is None
        assert report_input.turbidity is None
        assert report_input.cases == 1

    def test_from_dict(self):
        """Test building input from a request body"""
        report_input = ReportInput.from_dict({
            "village": "Agnigiri",
            "symptoms": ["fever"],
            "ph": 7.1,
            "cases": 3,
            "reporter": "Volunteer"
        })

        assert report_input.village == "Agnigiri"
        assert report_input.symptoms == ["fever"]
        assert report_input.ph == 7.1
        assert report_input.turbidity is None
        assert report_input.cases == 3


class TestReportStore:
    """Test ReportStore"""

    def test_add_report_assigns_id_and_date(self, store, sample_report_input):
        """Test the store assigns identity and creation time"""
        report = store.add_report(sample_report_input)

        assert isinstance(report, Report)
        assert re.fullmatch(r"RPT-[0-9a-f]{32}", report.id)
        assert isinstance(report.date, datetime)
        assert report.date.tzinfo is not None
        assert report.village == "Jalsuraksha"
        assert report.symptoms == ("diarrhea", "fever")

    def test_ids_are_unique(self, store):
        """Test every report gets its own id"""
        reports = [store.add_report(ReportInput(village=f"V{i}")) for i in range(50)]

        assert len({r.id for r in reports}) == 50

    def test_list_reports_preserves_insertion_order(self, store):
        """Test reports come back in submission order"""
        for village in ["Pawanpur", "Agnigiri", "Barpeta"]:
            store.add_report(ReportInput(village=village))

        assert [r.village for r in store.list_reports()] == ["Pawanpur", "Agnigiri", "Barpeta"]

    def test_list_reports_is_a_snapshot(self, store, sample_report_input):
        """Test mutating a listing does not touch the store"""
        store.add_report(sample_report_input)

        snapshot = store.list_reports()
        snapshot.clear()

        assert len(store.list_reports()) == 1
        assert len(store) == 1

    def test_reports_are_immutable(self, store, sample_report_input):
        """Test stored reports cannot be changed"""
        report = store.add_report(sample_report_input)

        with pytest.raises(AttributeError):
            report.cases = 100

    def test_to_dict(self, store, sample_report_input):
        """Test dictionary form of a stored report"""
        data = store.add_report(sample_report_input).to_dict()

        assert data["village"] == "Jalsuraksha"
        assert data["symptoms"] == ["diarrhea", "fever"]
        assert data["ph"] == 6.1
        assert data["cases"] == 4
        assert isinstance(data["date"], str)
