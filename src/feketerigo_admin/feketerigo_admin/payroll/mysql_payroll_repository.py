from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import Organization
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_float
from .model import ExtractedPayrollLine, PayrollRecord, PayrollSummary, SummaryTotals
from .repository import PayrollRecordRepository, PayrollSummaryRepository

_RECORD_COLUMNS = """
    record_id, employee_name, project_code, amount, record_date, is_rental, is_cash,
    organization, file_name, file_url, uploaded_by
"""

_SUMMARY_COLUMNS = """
    summary_id, year, month, organization, bank_transfer_costs, cash_costs, rental_costs,
    non_rental_costs, tax_amount, total_payroll, record_count, payroll_file_url,
    cash_file_url, tax_file_url, created_by
"""

RECORD_UPDATABLE_FIELDS = ("employee_name", "project_code", "amount", "record_date", "is_rental", "is_cash")


def _month_range(year: int, month: int) -> tuple[date, date]:
    start = date(year, month, 1)
    end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return start, end


def _row_to_record(row: dict) -> PayrollRecord:
    return PayrollRecord(
        record_id=int(row["record_id"]),
        employee_name=row["employee_name"],
        amount=to_float(row["amount"]),
        record_date=row["record_date"],
        organization=Organization(row["organization"]),
        project_code=row.get("project_code"),
        is_rental=bool(row.get("is_rental")),
        is_cash=bool(row.get("is_cash")),
        file_name=row.get("file_name"),
        file_url=row.get("file_url"),
        uploaded_by=row.get("uploaded_by"),
    )


def _row_to_summary(row: dict) -> PayrollSummary:
    return PayrollSummary(
        summary_id=int(row["summary_id"]),
        year=int(row["year"]),
        month=int(row["month"]),
        organization=Organization(row["organization"]),
        totals=SummaryTotals(
            bank_transfer_costs=to_float(row["bank_transfer_costs"]),
            cash_costs=to_float(row["cash_costs"]),
            rental_costs=to_float(row["rental_costs"]),
            non_rental_costs=to_float(row["non_rental_costs"]),
            tax_amount=to_float(row["tax_amount"]),
            total_payroll=to_float(row["total_payroll"]),
            record_count=int(row.get("record_count") or 0),
        ),
        payroll_file_url=row.get("payroll_file_url"),
        cash_file_url=row.get("cash_file_url"),
        tax_file_url=row.get("tax_file_url"),
        created_by=row.get("created_by"),
    )


class MySQLPayrollRecordRepository(PayrollRecordRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def insert_many(
        self,
        *,
        organization: Organization,
        lines: Sequence[ExtractedPayrollLine],
        sources: dict,
        uploaded_by: Optional[int],
    ) -> int:
        rows = [
            (
                line.employee_name,
                line.project_code,
                line.amount,
                line.record_date,
                1 if line.is_rental else 0,
                1 if line.is_cash else 0,
                organization.value,
                *sources.get(line.is_cash, (None, None)),
                uploaded_by,
            )
            for line in lines
        ]
        if not rows:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO payroll_records(
                    employee_name, project_code, amount, record_date, is_rental, is_cash,
                    organization, file_name, file_url, uploaded_by
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                rows,
            )
            return len(rows)

    def get_by_id(self, record_id: int) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_RECORD_COLUMNS} FROM payroll_records WHERE record_id=%s", (record_id,))
            row = fetchone(cur)
            return _row_to_record(row) if row else None

    def list_for_month(self, *, organization: Organization, year: int, month: int) -> Sequence[PayrollRecord]:
        start, end = _month_range(year, month)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM payroll_records
                WHERE organization=%s AND record_date >= %s AND record_date < %s
                ORDER BY employee_name, record_id
                """,
                (organization.value, start, end),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_RECORD_COLUMNS} FROM payroll_records ORDER BY record_date DESC, record_id DESC")
            return [_row_to_record(r) for r in fetchall(cur)]

    def update(self, record_id: int, fields: dict) -> bool:
        cols = [c for c in RECORD_UPDATABLE_FIELDS if c in fields]
        if not cols:
            return False
        assignments = ", ".join(f"{c}=%s" for c in cols)
        params = [fields[c] for c in cols] + [record_id]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE payroll_records SET {assignments} WHERE record_id=%s", tuple(params))
            return cur.rowcount > 0

    def delete(self, record_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM payroll_records WHERE record_id=%s", (record_id,))
            return cur.rowcount > 0

    def delete_month(self, *, organization: Organization, year: int, month: int) -> int:
        start, end = _month_range(year, month)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM payroll_records WHERE organization=%s AND record_date >= %s AND record_date < %s",
                (organization.value, start, end),
            )
            return int(cur.rowcount)


class MySQLPayrollSummaryRepository(PayrollSummaryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, *, organization: Organization, year: int, month: int) -> Optional[PayrollSummary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_SUMMARY_COLUMNS} FROM payroll_summaries WHERE organization=%s AND year=%s AND month=%s",
                (organization.value, year, month),
            )
            row = fetchone(cur)
            return _row_to_summary(row) if row else None

    def upsert(self, summary: PayrollSummary) -> None:
        t = summary.totals
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payroll_summaries(
                    year, month, organization, bank_transfer_costs, cash_costs, rental_costs,
                    non_rental_costs, tax_amount, total_payroll, record_count, payroll_file_url,
                    cash_file_url, tax_file_url, created_by
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    bank_transfer_costs=VALUES(bank_transfer_costs),
                    cash_costs=VALUES(cash_costs),
                    rental_costs=VALUES(rental_costs),
                    non_rental_costs=VALUES(non_rental_costs),
                    tax_amount=VALUES(tax_amount),
                    total_payroll=VALUES(total_payroll),
                    record_count=VALUES(record_count),
                    payroll_file_url=VALUES(payroll_file_url),
                    cash_file_url=VALUES(cash_file_url),
                    tax_file_url=VALUES(tax_file_url),
                    created_by=VALUES(created_by)
                """,
                (
                    summary.year,
                    summary.month,
                    summary.organization.value,
                    t.bank_transfer_costs,
                    t.cash_costs,
                    t.rental_costs,
                    t.non_rental_costs,
                    t.tax_amount,
                    t.total_payroll,
                    t.record_count,
                    summary.payroll_file_url,
                    summary.cash_file_url,
                    summary.tax_file_url,
                    summary.created_by,
                ),
            )

    def list(self, *, organization: Optional[Organization] = None, year: Optional[int] = None) -> Sequence[PayrollSummary]:
        where = []
        params: list = []
        if organization:
            where.append("organization=%s")
            params.append(organization.value)
        if year:
            where.append("year=%s")
            params.append(int(year))
        sql = f"SELECT {_SUMMARY_COLUMNS} FROM payroll_summaries"
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY year DESC, month DESC, organization"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_row_to_summary(r) for r in fetchall(cur)]

    def delete(self, *, organization: Organization, year: int, month: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM payroll_summaries WHERE organization=%s AND year=%s AND month=%s",
                (organization.value, year, month),
            )
            return cur.rowcount > 0
