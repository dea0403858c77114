from __future__ import annotations

from dataclasses import dataclass, field

from ..core.constants import NOTICE_DISMISS_MS
from ..core.enums import NoticeLevel


@dataclass(frozen=True)
class Notice:
    """One transient notification for the client (auto-dismissed)."""

    level: NoticeLevel
    message: str

    def to_dict(self) -> dict:
        return {"level": self.level.value, "message": self.message, "dismiss_ms": NOTICE_DISMISS_MS}


@dataclass
class Outcome:
    """Result of a use case plus the notices raised along the way."""

    value: object = None
    notices: list[Notice] = field(default_factory=list)

    def info(self, message: str) -> None:
        self.notices.append(Notice(NoticeLevel.INFO, message))

    def success(self, message: str) -> None:
        self.notices.append(Notice(NoticeLevel.SUCCESS, message))
