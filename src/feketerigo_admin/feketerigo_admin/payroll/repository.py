from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Organization
from .model import ExtractedPayrollLine, PayrollRecord, PayrollSummary


class PayrollRecordRepository(Protocol):
    def insert_many(
        self,
        *,
        organization: Organization,
        lines: Sequence[ExtractedPayrollLine],
        sources: dict,
        uploaded_by: Optional[int],
    ) -> int:
        """Insert lines; `sources` maps is_cash -> (file_name, stored path) of the source document."""
        raise NotImplementedError

    def get_by_id(self, record_id: int) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def list_for_month(self, *, organization: Organization, year: int, month: int) -> Sequence[PayrollRecord]:
        raise NotImplementedError

    def list_all(self) -> Sequence[PayrollRecord]:
        raise NotImplementedError

    def update(self, record_id: int, fields: dict) -> bool:
        raise NotImplementedError

    def delete(self, record_id: int) -> bool:
        raise NotImplementedError

    def delete_month(self, *, organization: Organization, year: int, month: int) -> int:
        raise NotImplementedError


class PayrollSummaryRepository(Protocol):
    def get(self, *, organization: Organization, year: int, month: int) -> Optional[PayrollSummary]:
        raise NotImplementedError

    def upsert(self, summary: PayrollSummary) -> None:
        """Keyed on (year, month, organization); last writer wins."""
        raise NotImplementedError

    def list(self, *, organization: Optional[Organization] = None, year: Optional[int] = None) -> Sequence[PayrollSummary]:
        raise NotImplementedError

    def delete(self, *, organization: Organization, year: int, month: int) -> bool:
        raise NotImplementedError
