from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import Organization


@dataclass(frozen=True)
class ExtractedPayrollLine:
    """One employee line read from a payroll (or cash payroll) document, not yet saved."""

    employee_name: str
    amount: float
    record_date: date
    project_code: Optional[str] = None
    is_rental: bool = False
    is_cash: bool = False

    def to_dict(self) -> dict:
        return {
            "employee_name": self.employee_name,
            "amount": self.amount,
            "record_date": self.record_date.isoformat(),
            "project_code": self.project_code,
            "is_rental": self.is_rental,
            "is_cash": self.is_cash,
        }


@dataclass(frozen=True)
class PayrollRecord:
    record_id: int
    employee_name: str
    amount: float
    record_date: date
    organization: Organization
    project_code: Optional[str] = None
    is_rental: bool = False
    is_cash: bool = False
    file_name: Optional[str] = None
    file_url: Optional[str] = None
    uploaded_by: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "record_id": self.record_id,
            "employee_name": self.employee_name,
            "amount": self.amount,
            "record_date": self.record_date.isoformat(),
            "organization": self.organization.value,
            "project_code": self.project_code,
            "is_rental": self.is_rental,
            "is_cash": self.is_cash,
            "file_name": self.file_name,
        }


@dataclass(frozen=True)
class SummaryTotals:
    bank_transfer_costs: float
    cash_costs: float
    rental_costs: float
    non_rental_costs: float
    tax_amount: float
    total_payroll: float
    record_count: int


@dataclass(frozen=True)
class PayrollSummary:
    """Monthly summary; unique per (year, month, organization)."""

    year: int
    month: int
    organization: Organization
    totals: SummaryTotals
    payroll_file_url: Optional[str] = None
    cash_file_url: Optional[str] = None
    tax_file_url: Optional[str] = None
    created_by: Optional[int] = None
    summary_id: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "summary_id": self.summary_id,
            "year": self.year,
            "month": self.month,
            "organization": self.organization.value,
            "bank_transfer_costs": self.totals.bank_transfer_costs,
            "cash_costs": self.totals.cash_costs,
            "rental_costs": self.totals.rental_costs,
            "non_rental_costs": self.totals.non_rental_costs,
            "tax_amount": self.totals.tax_amount,
            "total_payroll": self.totals.total_payroll,
            "record_count": self.totals.record_count,
            "payroll_file_url": self.payroll_file_url,
            "cash_file_url": self.cash_file_url,
            "tax_file_url": self.tax_file_url,
        }


@dataclass(frozen=True)
class UploadedDocument:
    file_name: str
    data: bytes
    mime_type: str = "application/pdf"
