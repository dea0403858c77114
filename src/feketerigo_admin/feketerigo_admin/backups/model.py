from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.formatters import format_file_size
from ..core.enums import BackupStatus


@dataclass(frozen=True)
class BackupSchedule:
    """The single schedule row (id = 1) maintained by the cron setup function."""

    next_backup: datetime
    frequency: str
    day_of_week: int
    hour: int
    enabled: bool

    def to_dict(self) -> dict:
        return {
            "next_backup": self.next_backup.isoformat(),
            "frequency": self.frequency,
            "day_of_week": self.day_of_week,
            "hour": self.hour,
            "enabled": self.enabled,
        }


@dataclass(frozen=True)
class BackupHistory:
    backup_id: int
    backup_date: datetime
    backup_filename: str
    period_start: datetime
    period_end: datetime
    size_mb: float
    invoice_count: int
    files_downloaded: int
    status: BackupStatus
    error_message: Optional[str] = None
    execution_time_seconds: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "backup_id": self.backup_id,
            "backup_date": self.backup_date.isoformat(),
            "backup_filename": self.backup_filename,
            "period_start": self.period_start.isoformat(),
            "period_end": self.period_end.isoformat(),
            "size_mb": self.size_mb,
            "size": format_file_size(self.size_mb),
            "invoice_count": self.invoice_count,
            "files_downloaded": self.files_downloaded,
            "status": self.status.value,
            "error_message": self.error_message,
            "execution_time_seconds": self.execution_time_seconds,
        }
