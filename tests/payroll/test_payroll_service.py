from __future__ import annotations

from datetime import date
from typing import Optional

import pytest

from src.feketerigo_admin.feketerigo_admin.core.enums import NoticeLevel, Organization
from src.feketerigo_admin.feketerigo_admin.core.exceptions import (
    NotFoundError,
    RemoteFunctionError,
    StorageError,
    ValidationError,
)
from src.feketerigo_admin.feketerigo_admin.payroll.model import (
    ExtractedPayrollLine,
    PayrollRecord,
    PayrollSummary,
    UploadedDocument,
)
from src.feketerigo_admin.feketerigo_admin.payroll.service import PayrollService, lines_from_payload
from src.feketerigo_admin.feketerigo_admin.platform.storage import LocalFileStorage


class FakeFunctions:
    def __init__(self, responses: dict):
        self.responses = responses
        self.calls: list[tuple[str, dict]] = []

    def invoke(self, name: str, payload: Optional[dict] = None) -> dict:
        self.calls.append((name, payload or {}))
        result = self.responses[name]
        if isinstance(result, Exception):
            raise result
        return result


class FakeStorage:
    def __init__(self, *, fail: bool = False):
        self.fail = fail
        self.uploaded: list[tuple[str, str]] = []

    def upload(self, bucket, filename, data, *, now=None):
        if self.fail:
            raise StorageError("disk full")
        self.uploaded.append((bucket, filename))
        return f"{bucket}/2025-03/{len(self.uploaded)}.pdf"


class InMemoryRecords:
    def __init__(self):
        self.rows: dict[int, PayrollRecord] = {}
        self._id = 0

    def insert_many(self, *, organization, lines, sources, uploaded_by=None):
        for line in lines:
            self._id += 1
            file_name, file_url = sources.get(bool(line.is_cash), (None, None))
            self.rows[self._id] = PayrollRecord(
                record_id=self._id,
                employee_name=line.employee_name,
                amount=float(line.amount),
                record_date=line.record_date,
                organization=organization,
                project_code=line.project_code,
                is_rental=line.is_rental,
                is_cash=line.is_cash,
                file_name=file_name,
                file_url=file_url,
                uploaded_by=uploaded_by,
            )
        return len(lines)

    def get_by_id(self, record_id):
        return self.rows.get(record_id)

    def list_for_month(self, *, organization, year, month):
        return [
            r
            for r in self.rows.values()
            if r.organization == organization and (r.record_date.year, r.record_date.month) == (year, month)
        ]

    def list_all(self):
        return list(self.rows.values())

    def update(self, record_id, fields):
        record = self.rows[record_id]
        values = dict(record.__dict__)
        for key, value in fields.items():
            values[key] = bool(value) if key in ("is_rental", "is_cash") else value
        self.rows[record_id] = PayrollRecord(**values)
        return True

    def delete(self, record_id):
        return self.rows.pop(record_id, None) is not None

    def delete_month(self, *, organization, year, month):
        doomed = [r.record_id for r in self.list_for_month(organization=organization, year=year, month=month)]
        for record_id in doomed:
            del self.rows[record_id]
        return len(doomed)


class InMemorySummaries:
    def __init__(self):
        self.by_key: dict[tuple, PayrollSummary] = {}

    def get(self, *, organization, year, month):
        return self.by_key.get((organization, year, month))

    def upsert(self, summary):
        self.by_key[(summary.organization, summary.year, summary.month)] = summary

    def list(self, *, organization=None, year=None):
        return [
            s
            for s in self.by_key.values()
            if (organization is None or s.organization == organization) and (year is None or s.year == year)
        ]

    def delete(self, *, organization, year, month):
        return self.by_key.pop((organization, year, month), None) is not None


def _service(functions=None, storage=None):
    records = InMemoryRecords()
    summaries = InMemorySummaries()
    svc = PayrollService(records, summaries, functions or FakeFunctions({}), storage or FakeStorage())
    return svc, records, summaries


def _extraction_responses(items):
    return {
        "process-document": {"success": True, "document": {"text": "bérjegyzék szöveg"}},
        "payroll-gemini": {"success": True, "data": items},
    }


def test_upload_payroll_without_cash_with_tax_saves_expected_summary():
    functions = FakeFunctions(
        _extraction_responses(
            [
                {"employeeName": "Kovács Anna", "amount": 100000, "date": "2025-03-31", "isRental": True},
                {"employeeName": "Nagy Péter", "amount": "50 000 Ft", "date": "2025.03.31."},
            ]
        )
    )
    svc, records, summaries = _service(functions)

    lines = svc.extract_payroll(UploadedDocument("marcius.pdf", b"%PDF"), "ovoda")
    outcome = svc.save_payroll(
        organization="ovoda",
        lines=lines,
        tax_amount=20000,
        documents={"payroll": UploadedDocument("marcius.pdf", b"%PDF")},
    )

    summary = summaries.get(organization=Organization.OVODA, year=2025, month=3)
    assert outcome.value == [summary]
    assert summary.totals.bank_transfer_costs == 150000
    assert summary.totals.cash_costs == 0
    assert summary.totals.rental_costs == 100000
    assert summary.totals.tax_amount == 20000
    assert summary.totals.total_payroll == 170000
    assert summary.totals.record_count == 2
    assert summary.payroll_file_url is not None
    assert len(records.rows) == 2
    assert [name for name, _ in functions.calls] == ["process-document", "payroll-gemini"]


def test_deleting_record_keeps_tax_and_lowers_total_by_its_amount():
    svc, records, summaries = _service()
    svc.save_payroll(
        organization=Organization.OVODA,
        lines=[
            ExtractedPayrollLine("Kovács Anna", 100000, date(2025, 3, 31), is_rental=True),
            ExtractedPayrollLine("Nagy Péter", 50000, date(2025, 3, 31)),
        ],
        tax_amount=20000,
    )
    before = summaries.get(organization=Organization.OVODA, year=2025, month=3)
    deleted = next(r for r in records.rows.values() if r.employee_name == "Nagy Péter")

    after = svc.delete_record(deleted.record_id)

    assert after.totals.tax_amount == 20000
    assert before.totals.total_payroll - after.totals.total_payroll == deleted.amount
    assert after.totals.record_count == 1


def test_reconcile_is_idempotent():
    svc, _, _ = _service()
    svc.save_payroll(
        organization="alapitvany",
        lines=[ExtractedPayrollLine("A", 1000, date(2025, 4, 1), is_cash=True)],
        tax_amount=100,
    )

    first = svc.reconcile(organization=Organization.ALAPITVANY, year=2025, month=4)
    second = svc.reconcile(organization=Organization.ALAPITVANY, year=2025, month=4)

    assert first == second
    assert first.totals.cash_costs == 1000


def test_deleting_last_record_leaves_zero_cost_summary():
    svc, records, _ = _service()
    svc.save_payroll(
        organization="ovoda",
        lines=[ExtractedPayrollLine("A", 1000, date(2025, 4, 1))],
        tax_amount=300,
    )

    summary = svc.delete_record(next(iter(records.rows)))

    assert summary.totals.record_count == 0
    assert summary.totals.bank_transfer_costs == 0
    assert summary.totals.cash_costs == 0
    assert summary.totals.total_payroll == 300


def test_tax_goes_to_month_of_first_line():
    svc, _, summaries = _service()
    outcome = svc.save_payroll(
        organization="ovoda",
        lines=[
            ExtractedPayrollLine("A", 1000, date(2025, 3, 31)),
            ExtractedPayrollLine("B", 2000, date(2025, 4, 1)),
        ],
        tax_amount=500,
    )

    assert len(outcome.value) == 2
    assert summaries.get(organization=Organization.OVODA, year=2025, month=3).totals.tax_amount == 500
    assert summaries.get(organization=Organization.OVODA, year=2025, month=4).totals.tax_amount == 0


def test_moving_record_to_another_month_reconciles_both():
    svc, records, summaries = _service()
    svc.save_payroll(
        organization="ovoda",
        lines=[ExtractedPayrollLine("A", 1000, date(2025, 3, 10)), ExtractedPayrollLine("B", 2000, date(2025, 3, 11))],
    )
    moved = next(r for r in records.rows.values() if r.employee_name == "B")

    svc.update_record(moved.record_id, {"record_date": "2025-04-02"})

    assert summaries.get(organization=Organization.OVODA, year=2025, month=3).totals.total_payroll == 1000
    assert summaries.get(organization=Organization.OVODA, year=2025, month=4).totals.total_payroll == 2000


def test_failed_extraction_persists_nothing():
    functions = FakeFunctions(
        {
            "process-document": {"success": True, "document": {"text": "szöveg"}},
            "payroll-gemini": RemoteFunctionError("payroll-gemini", "AI hiba"),
        }
    )
    svc, records, summaries = _service(functions)

    with pytest.raises(RemoteFunctionError):
        svc.extract_payroll(UploadedDocument("a.pdf", b"%PDF"), "ovoda")

    assert records.rows == {}
    assert summaries.by_key == {}


def test_storage_failure_only_adds_info_notice():
    svc, records, summaries = _service(storage=FakeStorage(fail=True))

    outcome = svc.save_payroll(
        organization="ovoda",
        lines=[ExtractedPayrollLine("A", 1000, date(2025, 3, 10))],
        documents={"payroll": UploadedDocument("a.pdf", b"%PDF")},
    )

    levels = [n.level for n in outcome.notices]
    assert NoticeLevel.INFO in levels
    assert levels[-1] == NoticeLevel.SUCCESS
    assert len(records.rows) == 1
    assert summaries.get(organization=Organization.OVODA, year=2025, month=3).payroll_file_url is None


def test_save_rejects_empty_batch():
    svc, _, _ = _service()
    with pytest.raises(ValidationError):
        svc.save_payroll(organization="ovoda", lines=[])


def test_cash_extraction_marks_lines_as_cash():
    functions = FakeFunctions(
        {
            "process-document": {"success": True, "document": {"text": "szöveg"}},
            "payroll-cash-gemini": {"success": True, "records": [{"name": "A", "amount": 10, "date": "2025-03-01"}]},
        }
    )
    svc, _, _ = _service(functions)

    lines = svc.extract_cash(UploadedDocument("k.pdf", b"%PDF"), "alapitvany")

    assert [line.is_cash for line in lines] == [True]


def test_tax_extraction_reads_total_tax_amount():
    functions = FakeFunctions(
        {
            "process-document": {"success": True, "document": {"text": "szöveg"}},
            "tax-gemini": {"success": True, "data": {"totalTaxAmount": "20 000"}},
        }
    )
    svc, _, _ = _service(functions)

    assert svc.extract_tax(UploadedDocument("t.pdf", b"%PDF"), "ovoda") == 20000


def test_payload_line_without_date_is_rejected():
    with pytest.raises(ValidationError):
        lines_from_payload([{"employeeName": "A", "amount": 1}])


def test_record_details_include_tax_share():
    svc, _, _ = _service()
    svc.save_payroll(
        organization="ovoda",
        lines=[ExtractedPayrollLine("A", 90000, date(2025, 3, 10))],
        tax_amount=10000,
    )

    details = svc.record_details(organization="ovoda", year=2025, month=3)

    assert details["summary"]["total_payroll"] == 100000
    assert details["records"][0]["tax_share"] == 9000


def test_delete_month_removes_records_and_summary():
    svc, records, summaries = _service()
    svc.save_payroll(organization="ovoda", lines=[ExtractedPayrollLine("A", 1, date(2025, 3, 10))])

    assert svc.delete_month(organization="ovoda", year=2025, month=3) == 1
    assert records.rows == {}
    assert summaries.by_key == {}


def test_missing_record_raises_not_found():
    svc, _, _ = _service()
    with pytest.raises(NotFoundError):
        svc.delete_record(42)


def test_second_batch_for_month_sums_all_stored_records():
    svc, records, summaries = _service()
    svc.save_payroll(
        organization="ovoda",
        lines=[
            ExtractedPayrollLine("Kovács Anna", 100000, date(2025, 3, 31), is_rental=True),
            ExtractedPayrollLine("Nagy Péter", 50000, date(2025, 3, 31)),
        ],
        tax_amount=20000,
        documents={"payroll": UploadedDocument("marcius.pdf", b"%PDF")},
    )

    svc.save_payroll(
        organization="ovoda",
        lines=[ExtractedPayrollLine("Szabó Éva", 30000, date(2025, 3, 15), is_cash=True)],
        tax_amount=0,
    )

    summary = summaries.get(organization=Organization.OVODA, year=2025, month=3)
    assert len(records.rows) == 3
    assert summary.totals.record_count == 3
    assert summary.totals.bank_transfer_costs == 150000
    assert summary.totals.cash_costs == 30000
    assert summary.totals.tax_amount == 20000
    assert summary.totals.total_payroll == 200000
    assert summary.payroll_file_url is not None
    assert svc.reconcile(organization=Organization.OVODA, year=2025, month=3) == summary


def test_new_tax_replaces_stored_tax_of_first_month():
    svc, _, summaries = _service()
    svc.save_payroll(organization="ovoda", lines=[ExtractedPayrollLine("A", 1000, date(2025, 3, 1))], tax_amount=100)

    svc.save_payroll(organization="ovoda", lines=[ExtractedPayrollLine("B", 2000, date(2025, 3, 2))], tax_amount=400)

    summary = summaries.get(organization=Organization.OVODA, year=2025, month=3)
    assert summary.totals.tax_amount == 400
    assert summary.totals.total_payroll == 3400


def test_payroll_and_cash_documents_are_stored_separately(tmp_path):
    storage = LocalFileStorage(tmp_path, "secret")
    svc, _, summaries = _service(storage=storage)

    svc.save_payroll(
        organization="ovoda",
        lines=[
            ExtractedPayrollLine("A", 1000, date(2025, 3, 10)),
            ExtractedPayrollLine("B", 500, date(2025, 3, 10), is_cash=True),
        ],
        documents={
            "payroll": UploadedDocument("berjegyzek.pdf", b"PAYROLL-DOC"),
            "cash": UploadedDocument("keszpenz.pdf", b"CASH-DOC"),
        },
    )

    summary = summaries.get(organization=Organization.OVODA, year=2025, month=3)
    assert summary.payroll_file_url != summary.cash_file_url
    assert storage.download(summary.payroll_file_url) == b"PAYROLL-DOC"
    assert storage.download(summary.cash_file_url) == b"CASH-DOC"
