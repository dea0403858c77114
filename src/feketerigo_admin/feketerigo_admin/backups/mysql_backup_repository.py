from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import BackupStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_float
from .model import BackupHistory, BackupSchedule
from .repository import BackupRepository


class MySQLBackupRepository(BackupRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_schedule(self) -> Optional[BackupSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT next_backup, frequency, day_of_week, hour, enabled FROM backup_schedule WHERE id=1"
            )
            row = fetchone(cur)
            if not row:
                return None
            return BackupSchedule(
                next_backup=row["next_backup"],
                frequency=row["frequency"],
                day_of_week=int(row["day_of_week"]),
                hour=int(row["hour"]),
                enabled=bool(row["enabled"]),
            )

    def recent_history(self, limit: int) -> Sequence[BackupHistory]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT backup_id, backup_date, backup_filename, backup_period_start, backup_period_end,
                       backup_size_mb, invoice_count, files_downloaded, status, error_message,
                       execution_time_seconds
                FROM backup_history
                ORDER BY backup_date DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [
                BackupHistory(
                    backup_id=int(r["backup_id"]),
                    backup_date=r["backup_date"],
                    backup_filename=r["backup_filename"],
                    period_start=r["backup_period_start"],
                    period_end=r["backup_period_end"],
                    size_mb=to_float(r["backup_size_mb"]),
                    invoice_count=int(r.get("invoice_count") or 0),
                    files_downloaded=int(r.get("files_downloaded") or 0),
                    status=BackupStatus(r["status"]),
                    error_message=r.get("error_message"),
                    execution_time_seconds=r.get("execution_time_seconds"),
                )
                for r in fetchall(cur)
            ]
