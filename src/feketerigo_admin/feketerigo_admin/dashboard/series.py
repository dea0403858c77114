"""Chart series derived from the full invoice and payroll row sets.

Every function is pure: same rows and filters in, same points out.
"""

from __future__ import annotations

from collections import OrderedDict
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Sequence

from ..core.constants import OTHER_CATEGORY
from ..core.enums import InvoiceStatus, Organization, PaymentType
from ..invoices.model import Invoice
from ..payroll.model import PayrollRecord
from .model import ChartPoint, DashboardFilters

ORGANIZATION_LABELS = {
    Organization.ALAPITVANY: ("Feketerigó Alapítvány", "#1e40af"),
    Organization.OVODA: ("Feketerigó Alapítványi Óvoda", "#ea580c"),
}

PAYMENT_LABELS = {
    PaymentType.BANK_TRANSFER: ("Banki átutalás", "#059669"),
    PaymentType.CARD_CASH_AFTERPAY: ("Kártya/Készpénz/Utánvét", "#7c3aed"),
}

MONTH_LABELS = ["Jan", "Feb", "Már", "Ápr", "Máj", "Jún", "Júl", "Aug", "Szep", "Okt", "Nov", "Dec"]
DAY_LABELS = ["Hétfő", "Kedd", "Szerda", "Csütörtök", "Péntek", "Szombat", "Vasárnap"]

PALETTE = ["#3B82F6", "#10B981", "#F59E0B", "#EF4444", "#8B5CF6", "#06B6D4", "#84CC16", "#F97316", "#EC4899", "#6B7280"]

NO_MUNKASZAM = "Nincs munkaszám"


def _invoice_day(inv: Invoice) -> Optional[date]:
    if inv.invoice_date:
        return inv.invoice_date
    if inv.uploaded_at:
        return inv.uploaded_at.date()
    return None


def _month_of(d: Optional[date]) -> Optional[str]:
    return d.strftime("%Y-%m") if d else None


def filter_invoices(invoices: Iterable[Invoice], filters: DashboardFilters) -> list[Invoice]:
    out = []
    for inv in invoices:
        if filters.month and _month_of(_invoice_day(inv)) != filters.month:
            continue
        if filters.munkaszam and (inv.munkaszam or "") != filters.munkaszam:
            continue
        out.append(inv)
    return out


def filter_payroll(records: Iterable[PayrollRecord], filters: DashboardFilters) -> list[PayrollRecord]:
    out = []
    for r in records:
        if filters.month and _month_of(r.record_date) != filters.month:
            continue
        if filters.munkaszam and (r.project_code or "") != filters.munkaszam:
            continue
        if filters.rental == "rental" and not r.is_rental:
            continue
        if filters.rental == "non_rental" and r.is_rental:
            continue
        out.append(r)
    return out


def _amount(rows) -> float:
    return float(sum((r.amount or 0) for r in rows))


def organization_series(invoices: Sequence[Invoice]) -> list[ChartPoint]:
    points = []
    for org, (label, color) in ORGANIZATION_LABELS.items():
        rows = [i for i in invoices if i.organization == org]
        points.append(ChartPoint(label=label, value=len(rows), amount=_amount(rows), color=color))
    return points


def payment_type_series(invoices: Sequence[Invoice]) -> list[ChartPoint]:
    points = []
    for payment_type, (label, color) in PAYMENT_LABELS.items():
        rows = [i for i in invoices if i.invoice_type == payment_type]
        points.append(ChartPoint(label=label, value=len(rows), amount=_amount(rows), color=color))
    return points


def _grouped(rows, key) -> list[ChartPoint]:
    groups: "OrderedDict[str, list]" = OrderedDict()
    for r in rows:
        groups.setdefault(key(r), []).append(r)
    ordered = sorted(groups.items(), key=lambda kv: (-_amount(kv[1]), kv[0]))
    return [
        ChartPoint(label=label, value=len(items), amount=_amount(items), color=PALETTE[i % len(PALETTE)])
        for i, (label, items) in enumerate(ordered)
    ]


def category_series(invoices: Sequence[Invoice]) -> list[ChartPoint]:
    return _grouped(invoices, lambda i: i.category or OTHER_CATEGORY)


def munkaszam_series(invoices: Sequence[Invoice]) -> list[ChartPoint]:
    return _grouped(invoices, lambda i: i.munkaszam or NO_MUNKASZAM)


def monthly_trend(invoices: Sequence[Invoice], year: int) -> list[dict]:
    """Invoice counts per upload month of `year`, split by organization."""

    out = []
    for index, label in enumerate(MONTH_LABELS, start=1):
        rows = [i for i in invoices if i.uploaded_at and i.uploaded_at.year == year and i.uploaded_at.month == index]
        out.append(
            {
                "month": label,
                Organization.ALAPITVANY.value: sum(1 for i in rows if i.organization == Organization.ALAPITVANY),
                Organization.OVODA.value: sum(1 for i in rows if i.organization == Organization.OVODA),
                "total": len(rows),
                "amount": _amount(rows),
            }
        )
    return out


def weekly_trend(invoices: Sequence[Invoice], today: date) -> list[dict]:
    """Uploads per day of the current week (Monday first)."""

    week_start = today - timedelta(days=today.weekday())
    out = []
    for index, label in enumerate(DAY_LABELS):
        day = week_start + timedelta(days=index)
        rows = [i for i in invoices if i.uploaded_at and i.uploaded_at.date() == day]
        out.append({"day": label, "date": day.strftime("%m.%d."), "invoices": len(rows), "amount": _amount(rows)})
    return out


def payroll_rental_series(records: Sequence[PayrollRecord]) -> list[ChartPoint]:
    rental = [r for r in records if r.is_rental]
    other = [r for r in records if not r.is_rental]
    return [
        ChartPoint(label="Bérleti", value=len(rental), amount=_amount(rental), color="#F59E0B"),
        ChartPoint(label="Nem bérleti", value=len(other), amount=_amount(other), color="#3B82F6"),
    ]


def payroll_project_series(records: Sequence[PayrollRecord]) -> list[ChartPoint]:
    return _grouped(records, lambda r: r.project_code or NO_MUNKASZAM)


def overview_stats(invoices: Sequence[Invoice], now: datetime) -> dict:
    this_month = [
        i for i in invoices if i.uploaded_at and (i.uploaded_at.year, i.uploaded_at.month) == (now.year, now.month)
    ]
    return {
        "total_invoices": len(invoices),
        "total_amount": _amount(invoices),
        "this_month_count": len(this_month),
        "this_month_amount": _amount(this_month),
        "pending_count": sum(1 for i in invoices if i.status != InvoiceStatus.COMPLETED),
        "alapitvany_count": sum(1 for i in invoices if i.organization == Organization.ALAPITVANY),
        "ovoda_count": sum(1 for i in invoices if i.organization == Organization.OVODA),
        "bank_transfer_count": sum(1 for i in invoices if i.invoice_type == PaymentType.BANK_TRANSFER),
        "card_cash_count": sum(1 for i in invoices if i.invoice_type == PaymentType.CARD_CASH_AFTERPAY),
    }
