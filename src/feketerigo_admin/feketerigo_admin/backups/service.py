from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from ..common.notices import Outcome
from ..core.constants import BACKUP_HISTORY_LIMIT, BACKUP_WINDOW_DAYS
from ..core.exceptions import UnexpectedContentTypeError
from ..platform.functions import FunctionsClient
from .repository import BackupRepository

logger = logging.getLogger("feketerigo_admin.backups")


def _iso_utc(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class BackupService:
    """Shows the backup schedule and history; starts backups through hosted functions."""

    def __init__(self, backups: BackupRepository, functions: FunctionsClient):
        self._backups = backups
        self._functions = functions

    def overview(self) -> dict:
        schedule = self._backups.get_schedule()
        history = self._backups.recent_history(BACKUP_HISTORY_LIMIT)
        return {
            "schedule": schedule.to_dict() if schedule else None,
            "history": [h.to_dict() for h in history],
        }

    def run_manual_backup(self, *, now: Optional[datetime] = None) -> Outcome:
        now = now or datetime.now(timezone.utc)
        start = now - timedelta(days=BACKUP_WINDOW_DAYS)
        payload = {"dateRange": {"start": _iso_utc(start), "end": _iso_utc(now)}}
        logger.info("Manual backup requested for %s .. %s", payload["dateRange"]["start"], payload["dateRange"]["end"])
        try:
            body = self._functions.invoke("manual-backup", payload)
        except UnexpectedContentTypeError as e:
            raise UnexpectedContentTypeError("biztonsági mentés", e.content_type) from e

        outcome = Outcome(value=body.get("data") or body)
        outcome.success("Biztonsági mentés sikeresen elkészült!")
        return outcome

    def setup_schedule(self) -> Outcome:
        try:
            body = self._functions.invoke("setup-backup-cron")
        except UnexpectedContentTypeError as e:
            raise UnexpectedContentTypeError("automatikus mentés beállítás", e.content_type) from e

        logger.info("Automated backup schedule configured")
        outcome = Outcome(value=body.get("data") or body)
        outcome.success("Automatikus biztonsági mentés beállítva!")
        return outcome
