from datetime import date

import pytest

from src.feketerigo_admin.feketerigo_admin.payroll.calculator.standard_calculator import (
    StandardPayrollCalculator,
    compute_summary,
    employee_tax_share,
)
from src.feketerigo_admin.feketerigo_admin.payroll.model import ExtractedPayrollLine


def _line(amount, *, rental=False, cash=False):
    return ExtractedPayrollLine(
        employee_name="X",
        amount=amount,
        record_date=date(2025, 3, 1),
        is_rental=rental,
        is_cash=cash,
    )


def test_summary_partitions_by_cash_and_rental():
    totals = compute_summary(
        [_line(100000, rental=True), _line(50000), _line(30000, cash=True), _line(20000, cash=True, rental=True)],
        tax_amount=10000,
    )

    assert totals.bank_transfer_costs == 150000
    assert totals.cash_costs == 50000
    assert totals.rental_costs == 120000
    assert totals.non_rental_costs == 80000
    assert totals.rental_costs + totals.non_rental_costs == totals.bank_transfer_costs + totals.cash_costs
    assert totals.total_payroll == 210000
    assert totals.record_count == 4


def test_summary_of_no_records_keeps_only_tax():
    totals = StandardPayrollCalculator().summarize([], 20000)

    assert totals.bank_transfer_costs == 0
    assert totals.cash_costs == 0
    assert totals.total_payroll == 20000
    assert totals.record_count == 0


def test_tax_share_is_pro_rata():
    assert employee_tax_share(50000, 20000, 200000) == 5000


def test_tax_share_with_zero_total_is_zero():
    assert employee_tax_share(50000, 20000, 0) == 0


@pytest.mark.parametrize(
    "lines, tax",
    [
        ([_line(42000)], 0),
        ([_line(10000, cash=True), _line(25000, cash=True)], 5000),
        ([_line(80000, rental=True), _line(15000, rental=True, cash=True)], 12000),
        ([_line(70000), _line(30000)], 0),
        ([_line(1000, rental=True), _line(2000, cash=True), _line(3000), _line(4000, rental=True, cash=True)], 999),
    ],
)
def test_totals_add_up_for_any_record_mix(lines, tax):
    totals = compute_summary(lines, tax_amount=tax)
    amounts = sum(line.amount for line in lines)

    assert totals.bank_transfer_costs + totals.cash_costs == amounts
    assert totals.rental_costs + totals.non_rental_costs == amounts
    assert totals.total_payroll == amounts + tax
    assert totals.tax_amount == tax
    assert totals.record_count == len(lines)
