from __future__ import annotations

from enum import Enum


class Organization(str, Enum):
    """The two organizations tracked in parallel (foundation / kindergarten)."""

    ALAPITVANY = "alapitvany"
    OVODA = "ovoda"


class ProfileType(str, Enum):
    """Profile types used for route and visibility checks."""

    ADMINISZTRACIO = "adminisztracio"
    PEDAGOGUS = "pedagogus"
    HAZ_VEZETO = "haz_vezeto"
    VEZETOI = "vezetoi"


class InvoiceStatus(str, Enum):
    UPLOADED = "uploaded"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


class PaymentType(str, Enum):
    BANK_TRANSFER = "bank_transfer"
    CARD_CASH_AFTERPAY = "card_cash_afterpay"


class NoticeLevel(str, Enum):
    """Levels of the transient notifications shown to the user."""

    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


class BackupStatus(str, Enum):
    COMPLETED = "completed"
    FAILED = "failed"
    RUNNING = "running"


class TeamMemberRole(str, Enum):
    MEMBER = "member"
    LEAD = "lead"


class ComponentType(str, Enum):
    """Newsletter content block types."""

    HEADING = "heading"
    TEXT_BLOCK = "text-block"
    IMAGE = "image"
    BUTTON = "button"
    DIVIDER = "divider"
    FORM_SECTION = "form-section"
    CALENDAR_BUTTON = "calendar-button"


ADMIN_PROFILES = frozenset({ProfileType.ADMINISZTRACIO, ProfileType.VEZETOI})
