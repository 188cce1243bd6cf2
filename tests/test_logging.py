"""Tests for ActivityLog model and ActivityStore."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from cv_builder.logging.activity_store import ActivityStore
from cv_builder.logging.models import ActivityLog


class TestActivityLog:
    def test_create_minimal(self):
        log = ActivityLog(action="save")
        assert log.session_id == "anonymous"
        assert log.success is True
        assert log.bytes_written == 0
        assert log.id  # uuid auto-generated

    def test_create_failed_export(self):
        log = ActivityLog(
            action="export",
            document_id="doc-1",
            template_id="harvard",
            export_format="pdf",
            success=False,
            error_message="engine missing",
        )
        assert log.export_format == "pdf"
        assert not log.success

    def test_unique_ids(self):
        assert ActivityLog(action="save").id != ActivityLog(action="save").id


@pytest.fixture
def activity_store(tmp_path) -> ActivityStore:
    return ActivityStore(tmp_path / "activity.db")


class TestActivityStore:
    def test_save_and_get(self, activity_store):
        log = ActivityLog(
            action="export",
            document_id="doc-1",
            template_id="dublin",
            export_format="docx",
            elapsed_seconds=0.42,
            bytes_written=2048,
        )
        activity_store.save_log(log)

        logs = activity_store.get_logs()
        assert len(logs) == 1
        assert logs[0].id == log.id
        assert logs[0].export_format == "docx"
        assert logs[0].bytes_written == 2048
        assert logs[0].success is True

    def test_newest_first_and_limit(self, activity_store):
        now = datetime.now()
        for minutes in range(5):
            activity_store.save_log(
                ActivityLog(action="save", timestamp=now - timedelta(minutes=minutes))
            )
        logs = activity_store.get_logs(limit=3)
        assert len(logs) == 3
        assert logs[0].timestamp > logs[1].timestamp > logs[2].timestamp

    def test_filter_by_document(self, activity_store):
        activity_store.save_log(ActivityLog(action="save", document_id="a"))
        activity_store.save_log(ActivityLog(action="save", document_id="b"))
        logs = activity_store.get_logs(document_id="a")
        assert [log.document_id for log in logs] == ["a"]

    def test_stats(self, activity_store):
        activity_store.save_log(ActivityLog(action="save"))
        activity_store.save_log(ActivityLog(action="save"))
        activity_store.save_log(ActivityLog(action="export", success=False, error_message="x"))
        activity_store.save_log(ActivityLog(action="reset"))

        stats = activity_store.get_stats()
        assert stats["total"] == 4
        assert stats["by_action"] == {"save": 2, "export": 1, "reset": 1}
        assert stats["failures"] == 1
        assert stats["success_rate"] == pytest.approx(75.0)

    def test_empty_stats(self, activity_store):
        stats = activity_store.get_stats()
        assert stats["total"] == 0
        assert stats["success_rate"] == 0.0
