from __future__ import annotations

from typing import Iterable

from ..model import SummaryTotals
from .base import PayrollCalculator, PayrollLine


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: partition by is_cash / is_rental, total = bank + cash + tax."""

    def summarize(self, records: Iterable[PayrollLine], tax_amount: float) -> SummaryTotals:
        bank = cash = rental = non_rental = 0.0
        count = 0
        for r in records:
            amount = float(r.amount or 0)
            if r.is_cash:
                cash += amount
            else:
                bank += amount
            if r.is_rental:
                rental += amount
            else:
                non_rental += amount
            count += 1

        tax = float(tax_amount or 0)
        return SummaryTotals(
            bank_transfer_costs=bank,
            cash_costs=cash,
            rental_costs=rental,
            non_rental_costs=non_rental,
            tax_amount=tax,
            total_payroll=bank + cash + tax,
            record_count=count,
        )

    def tax_share(self, amount: float, monthly_tax: float, total_payroll: float) -> float:
        # display-only pro-rata split
        if not total_payroll:
            return 0.0
        return float(amount) * float(monthly_tax or 0) / float(total_payroll)


_default = StandardPayrollCalculator()


def compute_summary(records: Iterable[PayrollLine], tax_amount: float) -> SummaryTotals:
    return _default.summarize(records, tax_amount)


def employee_tax_share(amount: float, monthly_tax: float, total_payroll_for_month: float) -> float:
    return _default.tax_share(amount, monthly_tax, total_payroll_for_month)
