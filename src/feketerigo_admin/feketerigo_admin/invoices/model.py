from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import InvoiceStatus, Organization, PaymentType


@dataclass(frozen=True)
class Invoice:
    invoice_id: int
    file_name: str
    organization: Organization
    status: InvoiceStatus
    amount: Optional[float] = None
    invoice_date: Optional[date] = None
    partner: Optional[str] = None
    bank_account: Optional[str] = None
    subject: Optional[str] = None
    invoice_number: Optional[str] = None
    payment_deadline: Optional[date] = None
    payment_method: Optional[str] = None
    invoice_type: Optional[PaymentType] = None
    category: Optional[str] = None
    munkaszam: Optional[str] = None
    file_url: Optional[str] = None
    extracted_text: Optional[str] = None
    uploaded_at: Optional[datetime] = None
    processed_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "invoice_id": self.invoice_id,
            "file_name": self.file_name,
            "organization": self.organization.value,
            "status": self.status.value,
            "amount": self.amount,
            "invoice_date": self.invoice_date.isoformat() if self.invoice_date else None,
            "partner": self.partner,
            "bank_account": self.bank_account,
            "subject": self.subject,
            "invoice_number": self.invoice_number,
            "payment_deadline": self.payment_deadline.isoformat() if self.payment_deadline else None,
            "payment_method": self.payment_method,
            "invoice_type": self.invoice_type.value if self.invoice_type else None,
            "category": self.category,
            "munkaszam": self.munkaszam,
            "file_url": self.file_url,
            "uploaded_at": self.uploaded_at.isoformat() if self.uploaded_at else None,
        }


@dataclass(frozen=True)
class NewInvoice:
    """Row to insert after a successful extraction."""

    file_name: str
    organization: Organization
    status: InvoiceStatus
    file_url: Optional[str]
    extracted_text: str
    partner: Optional[str]
    bank_account: Optional[str]
    subject: Optional[str]
    invoice_number: Optional[str]
    amount: Optional[float]
    invoice_date: Optional[date]
    payment_deadline: Optional[date]
    payment_method: str
    invoice_type: PaymentType
    category: Optional[str]
    munkaszam: Optional[str]
    processed_at: datetime
