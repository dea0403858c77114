from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_local, parse_month
from ..core.exceptions import ValidationError
from ..invoices.repository import InvoiceRepository
from ..payroll.repository import PayrollRecordRepository
from . import series
from .model import DashboardFilters

logger = logging.getLogger("feketerigo_admin.dashboard")

RECENT_INVOICES = 5


class DashboardService:
    """Fetches every invoice and payroll row once and derives all charts from them."""

    def __init__(self, invoices: InvoiceRepository, payroll_records: PayrollRecordRepository):
        self._invoices = invoices
        self._payroll_records = payroll_records

    def build(self, filters: DashboardFilters, *, now: Optional[datetime] = None) -> dict:
        if filters.month:
            try:
                parse_month(filters.month)
            except ValueError:
                raise ValidationError("Érvénytelen hónap (ÉÉÉÉ-HH)")
        if filters.rental not in (None, "", "rental", "non_rental"):
            raise ValidationError("Érvénytelen bérleti szűrő")

        now = now or now_local()
        all_invoices = list(self._invoices.list_all())
        all_payroll = list(self._payroll_records.list_all())
        invoices = series.filter_invoices(all_invoices, filters)
        payroll = series.filter_payroll(all_payroll, filters)
        logger.debug(
            "Dashboard built from %d/%d invoices, %d/%d payroll rows",
            len(invoices),
            len(all_invoices),
            len(payroll),
            len(all_payroll),
        )

        def points(items):
            return [p.to_dict() for p in items]

        return {
            "stats": series.overview_stats(invoices, now),
            "organizations": points(series.organization_series(invoices)),
            "payment_types": points(series.payment_type_series(invoices)),
            "categories": points(series.category_series(invoices)),
            "munkaszam": points(series.munkaszam_series(invoices)),
            "monthly_trend": series.monthly_trend(invoices, now.year),
            "weekly_trend": series.weekly_trend(invoices, now.date()),
            "payroll_rental": points(series.payroll_rental_series(payroll)),
            "payroll_projects": points(series.payroll_project_series(payroll)),
            "recent_invoices": [i.to_dict() for i in all_invoices[:RECENT_INVOICES]],
            "munkaszam_options": sorted(
                {i.munkaszam for i in all_invoices if i.munkaszam} | {r.project_code for r in all_payroll if r.project_code}
            ),
        }
