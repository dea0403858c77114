from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime

import pytest

from src.feketerigo_admin.feketerigo_admin.core.enums import InvoiceStatus, NoticeLevel, Organization, PaymentType
from src.feketerigo_admin.feketerigo_admin.core.exceptions import RemoteFunctionError, StorageError, ValidationError
from src.feketerigo_admin.feketerigo_admin.invoices.model import Invoice
from src.feketerigo_admin.feketerigo_admin.invoices.service import InvoiceService, clean_category, payment_type_for

NOW = datetime(2025, 3, 14, 10, 0)


class InMemoryInvoices:
    def __init__(self):
        self.rows: dict[int, Invoice] = {}

    def insert(self, invoice):
        invoice_id = len(self.rows) + 1
        self.rows[invoice_id] = Invoice(
            invoice_id=invoice_id,
            file_name=invoice.file_name,
            organization=invoice.organization,
            status=invoice.status,
            amount=invoice.amount,
            invoice_date=invoice.invoice_date,
            partner=invoice.partner,
            bank_account=invoice.bank_account,
            payment_deadline=invoice.payment_deadline,
            payment_method=invoice.payment_method,
            invoice_type=invoice.invoice_type,
            category=invoice.category,
            munkaszam=invoice.munkaszam,
            file_url=invoice.file_url,
            uploaded_at=invoice.processed_at,
        )
        return invoice_id

    def get_by_id(self, invoice_id):
        return self.rows.get(invoice_id)

    def list_all(self):
        return list(self.rows.values())

    def update(self, invoice_id, fields):
        values = dict(fields)
        if "invoice_type" in values:
            values["invoice_type"] = PaymentType(values["invoice_type"])
        self.rows[invoice_id] = replace(self.rows[invoice_id], **values)
        return True

    def delete(self, invoice_id):
        return self.rows.pop(invoice_id, None) is not None


class ScriptedFunctions:
    def __init__(self, fields, *, fail_ai=False):
        self.fields = fields
        self.fail_ai = fail_ai

    def invoke(self, name, payload=None):
        if name == "process-document":
            return {"success": True, "document": {"text": "SZÁMLA"}}
        if self.fail_ai:
            raise RemoteFunctionError(name, "AI hiba")
        return {"success": True, "data": self.fields}


class FakeStorage:
    def __init__(self, *, fail_upload=False, fail_remove=False):
        self.fail_upload = fail_upload
        self.fail_remove = fail_remove
        self.removed = []

    def upload(self, bucket, filename, data, *, now=None):
        if self.fail_upload:
            raise StorageError("tele")
        return f"{bucket}/2025-03/1.pdf"

    def remove(self, path):
        if self.fail_remove:
            raise StorageError("nem található")
        self.removed.append(path)


FIELDS = {
    "Partner": "ELMŰ Nyrt.",
    "Bankszámlaszám": "12345678-12345678",
    "Tárgy": "Áramdíj",
    "Számla sorszáma": "E-2025/001",
    "Összeg": "45 000 Ft",
    "Számla kelte": "2025.03.01.",
    "Fizetési határidő": "2025-03-15",
    "Kategória": "Közüzemi díjak (AI)",
    "Munkaszám": "MSZ-7",
}


def test_upload_extracts_and_stores_completed_invoice():
    repo = InMemoryInvoices()
    svc = InvoiceService(repo, ScriptedFunctions(FIELDS), FakeStorage())

    outcome = svc.process_upload(
        file_name="aram.pdf", data=b"%PDF", mime_type="application/pdf", organization="ovoda", now=NOW
    )

    invoice = repo.get_by_id(outcome.value)
    assert invoice.status == InvoiceStatus.COMPLETED
    assert invoice.organization == Organization.OVODA
    assert invoice.amount == 45000
    assert invoice.invoice_date == date(2025, 3, 1)
    assert invoice.category == "Közüzemi díjak"
    assert invoice.invoice_type == PaymentType.BANK_TRANSFER
    assert invoice.payment_method == "Banki átutalás"
    assert invoice.file_url == "invoices/2025-03/1.pdf"


def test_failed_extraction_leaves_no_invoice_row():
    repo = InMemoryInvoices()
    svc = InvoiceService(repo, ScriptedFunctions(FIELDS, fail_ai=True), FakeStorage())

    with pytest.raises(RemoteFunctionError):
        svc.process_upload(file_name="a.pdf", data=b"%PDF", mime_type="application/pdf", organization="ovoda")

    assert repo.rows == {}


def test_unknown_organization_is_rejected_before_any_call():
    svc = InvoiceService(InMemoryInvoices(), ScriptedFunctions(FIELDS), FakeStorage())
    with pytest.raises(ValidationError):
        svc.process_upload(file_name="a.pdf", data=b"%PDF", mime_type="application/pdf", organization="egyesulet")


def test_storage_failure_continues_with_info_notice():
    repo = InMemoryInvoices()
    svc = InvoiceService(repo, ScriptedFunctions(FIELDS), FakeStorage(fail_upload=True))

    outcome = svc.process_upload(file_name="a.pdf", data=b"%PDF", mime_type="application/pdf", organization="alapitvany")

    assert outcome.notices[0].level == NoticeLevel.INFO
    assert repo.get_by_id(outcome.value).file_url is None


def test_changing_bank_account_rederives_payment_type():
    repo = InMemoryInvoices()
    svc = InvoiceService(repo, ScriptedFunctions(FIELDS), FakeStorage())
    invoice_id = svc.process_upload(
        file_name="a.pdf", data=b"%PDF", mime_type="application/pdf", organization="ovoda"
    ).value

    updated = svc.update_invoice(invoice_id, {"bank_account": "", "category": "Egyéb (AI)"})

    assert updated.invoice_type == PaymentType.CARD_CASH_AFTERPAY
    assert updated.payment_method == "Kártya/Készpénz/Utánvét"
    assert updated.category == "Egyéb"


def test_delete_keeps_going_when_file_removal_fails():
    repo = InMemoryInvoices()
    svc = InvoiceService(repo, ScriptedFunctions(FIELDS), FakeStorage(fail_remove=True))
    invoice_id = svc.process_upload(
        file_name="a.pdf", data=b"%PDF", mime_type="application/pdf", organization="ovoda"
    ).value

    outcome = svc.delete_invoice(invoice_id)

    assert [n.level for n in outcome.notices] == [NoticeLevel.INFO, NoticeLevel.SUCCESS]
    assert repo.rows == {}


def test_helpers():
    assert clean_category("Anyagköltség (AI)") == "Anyagköltség"
    assert clean_category(None) is None
    assert clean_category("Valami új") == "Egyéb"
    assert payment_type_for("  ") == PaymentType.CARD_CASH_AFTERPAY
