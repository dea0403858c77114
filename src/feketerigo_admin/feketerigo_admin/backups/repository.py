from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import BackupHistory, BackupSchedule


class BackupRepository(Protocol):
    def get_schedule(self) -> Optional[BackupSchedule]:
        raise NotImplementedError

    def recent_history(self, limit: int) -> Sequence[BackupHistory]:
        """Newest first."""
        raise NotImplementedError
