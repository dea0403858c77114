from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import InvoiceStatus, Organization, PaymentType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Invoice, NewInvoice
from .repository import InvoiceRepository

_COLUMNS = """
    invoice_id, file_name, file_url, organization, status, partner, bank_account, subject,
    invoice_number, amount, invoice_date, payment_deadline, payment_method, invoice_type,
    category, munkaszam, extracted_text, uploaded_at, processed_at
"""

UPDATABLE_FIELDS = (
    "partner",
    "bank_account",
    "subject",
    "invoice_number",
    "amount",
    "invoice_date",
    "payment_deadline",
    "payment_method",
    "invoice_type",
    "category",
    "munkaszam",
)


def _row_to_invoice(row: dict) -> Invoice:
    amount = row.get("amount")
    invoice_type = row.get("invoice_type")
    return Invoice(
        invoice_id=int(row["invoice_id"]),
        file_name=row["file_name"],
        organization=Organization(row["organization"]),
        status=InvoiceStatus(row["status"]),
        amount=float(amount) if amount is not None else None,
        invoice_date=row.get("invoice_date"),
        partner=row.get("partner"),
        bank_account=row.get("bank_account"),
        subject=row.get("subject"),
        invoice_number=row.get("invoice_number"),
        payment_deadline=row.get("payment_deadline"),
        payment_method=row.get("payment_method"),
        invoice_type=PaymentType(invoice_type) if invoice_type else None,
        category=row.get("category"),
        munkaszam=row.get("munkaszam"),
        file_url=row.get("file_url"),
        extracted_text=row.get("extracted_text"),
        uploaded_at=row.get("uploaded_at"),
        processed_at=row.get("processed_at"),
    )


class MySQLInvoiceRepository(InvoiceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def insert(self, invoice: NewInvoice) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO invoices(
                    file_name, file_url, organization, status, extracted_text, partner, bank_account,
                    subject, invoice_number, amount, invoice_date, payment_deadline, payment_method,
                    invoice_type, category, munkaszam, processed_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    invoice.file_name,
                    invoice.file_url,
                    invoice.organization.value,
                    invoice.status.value,
                    invoice.extracted_text,
                    invoice.partner,
                    invoice.bank_account,
                    invoice.subject,
                    invoice.invoice_number,
                    invoice.amount,
                    invoice.invoice_date,
                    invoice.payment_deadline,
                    invoice.payment_method,
                    invoice.invoice_type.value,
                    invoice.category,
                    invoice.munkaszam,
                    invoice.processed_at,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, invoice_id: int) -> Optional[Invoice]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM invoices WHERE invoice_id=%s", (invoice_id,))
            row = fetchone(cur)
            return _row_to_invoice(row) if row else None

    def list_all(self) -> Sequence[Invoice]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM invoices ORDER BY uploaded_at DESC, invoice_id DESC")
            return [_row_to_invoice(r) for r in fetchall(cur)]

    def update(self, invoice_id: int, fields: dict) -> bool:
        cols = [c for c in UPDATABLE_FIELDS if c in fields]
        if not cols:
            return False
        assignments = ", ".join(f"{c}=%s" for c in cols)
        params = [fields[c] for c in cols] + [invoice_id]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE invoices SET {assignments} WHERE invoice_id=%s", tuple(params))
            return cur.rowcount > 0

    def delete(self, invoice_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM invoices WHERE invoice_id=%s", (invoice_id,))
            return cur.rowcount > 0
