from __future__ import annotations

from datetime import datetime, timezone

import pytest

from src.feketerigo_admin.feketerigo_admin.backups.model import BackupHistory, BackupSchedule
from src.feketerigo_admin.feketerigo_admin.backups.service import BackupService
from src.feketerigo_admin.feketerigo_admin.core.enums import BackupStatus, NoticeLevel
from src.feketerigo_admin.feketerigo_admin.core.exceptions import UnexpectedContentTypeError


class StaticBackups:
    def __init__(self, schedule=None, history=()):
        self.schedule = schedule
        self.history = list(history)
        self.limits = []

    def get_schedule(self):
        return self.schedule

    def recent_history(self, limit):
        self.limits.append(limit)
        return self.history[:limit]


class RecordingFunctions:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def invoke(self, name, payload=None):
        self.calls.append((name, payload))
        if self.error:
            raise self.error
        return {"success": True, "data": {"backupFileName": "szamlak.zip"}}


def test_manual_backup_sends_last_two_weeks_as_utc_iso():
    functions = RecordingFunctions()
    svc = BackupService(StaticBackups(), functions)

    outcome = svc.run_manual_backup(now=datetime(2025, 3, 15, 12, 0, tzinfo=timezone.utc))

    name, payload = functions.calls[0]
    assert name == "manual-backup"
    assert payload == {"dateRange": {"start": "2025-03-01T12:00:00.000Z", "end": "2025-03-15T12:00:00.000Z"}}
    assert outcome.value == {"backupFileName": "szamlak.zip"}
    assert outcome.notices[0].level == NoticeLevel.SUCCESS


def test_non_json_answer_names_the_action():
    functions = RecordingFunctions(error=UnexpectedContentTypeError("manual-backup", "text/html"))
    svc = BackupService(StaticBackups(), functions)

    with pytest.raises(UnexpectedContentTypeError) as exc:
        svc.run_manual_backup()

    assert "biztonsági mentés" in str(exc.value)
    assert "text/html" in str(exc.value)


def test_schedule_setup_calls_cron_function():
    functions = RecordingFunctions()
    BackupService(StaticBackups(), functions).setup_schedule()
    assert functions.calls[0][0] == "setup-backup-cron"


def test_overview_reads_last_ten_runs():
    run = BackupHistory(
        backup_id=1,
        backup_date=datetime(2025, 3, 9, 2, 0),
        backup_filename="szamlak_2025-03-09.zip",
        period_start=datetime(2025, 2, 23),
        period_end=datetime(2025, 3, 9),
        size_mb=0.5,
        invoice_count=12,
        files_downloaded=12,
        status=BackupStatus.COMPLETED,
    )
    schedule = BackupSchedule(datetime(2025, 3, 16, 2, 0), "weekly", 0, 2, True)
    backups = StaticBackups(schedule, [run] * 12)

    data = BackupService(backups, RecordingFunctions()).overview()

    assert backups.limits == [10]
    assert len(data["history"]) == 10
    assert data["history"][0]["size"] == "512 KB"
    assert data["schedule"]["frequency"] == "weekly"
