from __future__ import annotations

import io
import logging
from collections import OrderedDict
from typing import Any, Iterable, Optional, Sequence

import pandas as pd

from ..common.datetime_utils import now_local, parse_loose_date
from ..common.notices import Outcome
from ..common.validators import parse_amount, require_organization
from ..core.constants import PAYROLL_BUCKET, TAX_BUCKET
from ..core.enums import Organization
from ..core.exceptions import NotFoundError, RemoteFunctionError, StorageError, ValidationError
from ..platform.documents import extract_text
from ..platform.functions import FunctionsClient
from ..platform.storage import FileStorage
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import ExtractedPayrollLine, PayrollRecord, PayrollSummary, UploadedDocument
from .repository import PayrollRecordRepository, PayrollSummaryRepository

logger = logging.getLogger("feketerigo_admin.payroll")

# document slot -> (bucket, label used in notices)
_DOCUMENT_SLOTS = OrderedDict(
    [
        ("payroll", (PAYROLL_BUCKET, "bérjegyzék")),
        ("cash", (PAYROLL_BUCKET, "készpénzes bérjegyzék")),
        ("tax", (TAX_BUCKET, "adó dokumentum")),
    ]
)


def _line_from_payload(raw: Any, *, is_cash: bool) -> ExtractedPayrollLine:
    if not isinstance(raw, dict):
        raise ValidationError("Érvénytelen bérsor")

    name = str(raw.get("employeeName") or raw.get("employee_name") or raw.get("name") or "").strip()
    if not name:
        raise ValidationError("Hiányzó munkavállaló név")

    amount = parse_amount(raw.get("amount"))

    record_date = parse_loose_date(raw.get("date") or raw.get("record_date"))
    if not record_date:
        raise ValidationError(f"Hiányzó vagy érvénytelen dátum: {name}")

    project_code = raw.get("projectCode") or raw.get("project_code")
    is_rental = raw.get("isRental", raw.get("is_rental", False))
    return ExtractedPayrollLine(
        employee_name=name,
        amount=amount,
        record_date=record_date,
        project_code=str(project_code).strip() if project_code else None,
        is_rental=bool(is_rental),
        is_cash=bool(raw.get("isCash", raw.get("is_cash", is_cash))),
    )


def lines_from_payload(items: Iterable[Any], *, is_cash: bool = False) -> list[ExtractedPayrollLine]:
    return [_line_from_payload(raw, is_cash=is_cash) for raw in items]


class PayrollService:
    """Payroll upload wizard, monthly summaries and their reconciliation."""

    def __init__(
        self,
        records: PayrollRecordRepository,
        summaries: PayrollSummaryRepository,
        functions: FunctionsClient,
        storage: FileStorage,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._records = records
        self._summaries = summaries
        self._functions = functions
        self._storage = storage
        self._calculator = calculator or StandardPayrollCalculator()

    # Wizard step 1-3: extraction. Nothing is persisted here.

    def extract_payroll(self, document: UploadedDocument, organization: Any) -> list[ExtractedPayrollLine]:
        org = require_organization(organization)
        text = extract_text(self._functions, document.data, document.mime_type)
        body = self._functions.invoke("payroll-gemini", {"extractedText": text, "organization": org.value})
        items = body.get("data")
        if not isinstance(items, list):
            raise RemoteFunctionError("payroll-gemini", "A bérjegyzék feldolgozása nem adott vissza sorokat")
        lines = lines_from_payload(items, is_cash=False)
        logger.info("Extracted %d payroll lines from %s (%s)", len(lines), document.file_name, org.value)
        return lines

    def extract_cash(self, document: UploadedDocument, organization: Any) -> list[ExtractedPayrollLine]:
        org = require_organization(organization)
        text = extract_text(self._functions, document.data, document.mime_type)
        body = self._functions.invoke("payroll-cash-gemini", {"extractedText": text, "organization": org.value})
        items = body.get("records")
        if items is None:
            items = body.get("data")
        if not isinstance(items, list):
            raise RemoteFunctionError("payroll-cash-gemini", "A készpénzes bérjegyzék feldolgozása nem adott vissza sorokat")
        lines = [
            ExtractedPayrollLine(
                employee_name=line.employee_name,
                amount=line.amount,
                record_date=line.record_date,
                project_code=line.project_code,
                is_rental=line.is_rental,
                is_cash=True,
            )
            for line in lines_from_payload(items, is_cash=True)
        ]
        logger.info("Extracted %d cash payroll lines from %s (%s)", len(lines), document.file_name, org.value)
        return lines

    def extract_tax(self, document: UploadedDocument, organization: Any) -> float:
        org = require_organization(organization)
        text = extract_text(self._functions, document.data, document.mime_type)
        body = self._functions.invoke("tax-gemini", {"extractedText": text, "organization": org.value})
        data = body.get("data") or {}
        raw = data.get("totalTaxAmount") if isinstance(data, dict) else None
        if raw is None or raw == "":
            raise RemoteFunctionError("tax-gemini", "Az adó dokumentumból nem sikerült összeget kinyerni")
        try:
            return parse_amount(raw)
        except ValidationError:
            raise RemoteFunctionError("tax-gemini", f"Érvénytelen adóösszeg: {raw}")

    # Wizard final step: save.

    def save_payroll(
        self,
        *,
        organization: Any,
        lines: Sequence[ExtractedPayrollLine],
        tax_amount: Any = 0,
        documents: Optional[dict] = None,
        uploaded_by: Optional[int] = None,
    ) -> Outcome:
        """Persist reviewed lines and upsert the monthly summary.

        `documents` maps "payroll" / "cash" / "tax" to an UploadedDocument. A document
        that cannot be stored only produces an info notice; the save goes on without its link.
        """

        org = require_organization(organization)
        if not lines:
            raise ValidationError("Nincs menthető bérsor")
        for line in lines:
            if not (line.employee_name or "").strip():
                raise ValidationError("Hiányzó munkavállaló név")
            if line.record_date is None:
                raise ValidationError(f"Hiányzó dátum: {line.employee_name}")
            if isinstance(line.amount, bool) or not isinstance(line.amount, (int, float)):
                raise ValidationError(f"Érvénytelen összeg: {line.employee_name}")
        tax = parse_amount(tax_amount) if tax_amount not in (None, "") else 0.0

        outcome = Outcome()
        now = now_local()
        documents = documents or {}

        links: dict[str, Optional[str]] = {}
        names: dict[str, Optional[str]] = {}
        for slot, (bucket, label) in _DOCUMENT_SLOTS.items():
            doc: Optional[UploadedDocument] = documents.get(slot)
            names[slot] = doc.file_name if doc else None
            links[slot] = None
            if not doc:
                continue
            try:
                links[slot] = self._storage.upload(bucket, doc.file_name, doc.data, now=now)
            except StorageError as e:
                logger.warning("Could not store %s %s: %s", slot, doc.file_name, e)
                outcome.info(f"A(z) {label} feltöltése nem sikerült, az adatok mentése folytatódik")

        self._records.insert_many(
            organization=org,
            lines=lines,
            sources={
                False: (names["payroll"], links["payroll"]),
                True: (names["cash"], links["cash"]),
            },
            uploaded_by=uploaded_by,
        )

        # a non-zero tax belongs to the month of the first line; otherwise the stored tax stays
        first = lines[0].record_date
        months = list(OrderedDict.fromkeys((line.record_date.year, line.record_date.month) for line in lines))

        saved = []
        for year, month in months:
            existing = self._summaries.get(organization=org, year=year, month=month)
            records = self._records.list_for_month(organization=org, year=year, month=month)
            if (year, month) == (first.year, first.month) and tax:
                month_tax = tax
            else:
                month_tax = existing.totals.tax_amount if existing else 0.0
            summary = PayrollSummary(
                year=year,
                month=month,
                organization=org,
                totals=self._calculator.summarize(records, month_tax),
                payroll_file_url=links["payroll"] or (existing.payroll_file_url if existing else None),
                cash_file_url=links["cash"] or (existing.cash_file_url if existing else None),
                tax_file_url=links["tax"] or (existing.tax_file_url if existing else None),
                created_by=existing.created_by if existing and existing.created_by else uploaded_by,
            )
            self._summaries.upsert(summary)
            saved.append(summary)
            logger.info(
                "Payroll summary %04d-%02d %s saved (%d records, total %.0f)",
                year,
                month,
                org.value,
                summary.totals.record_count,
                summary.totals.total_payroll,
            )

        outcome.value = saved
        outcome.success(f"{len(lines)} bérsor mentve")
        return outcome

    # Editing and reconciliation.

    def reconcile(self, *, organization: Organization, year: int, month: int) -> PayrollSummary:
        """Recompute the month's costs from the stored records.

        The stored tax amount and document links are kept; with no records left the
        summary still exists with zero costs.
        """

        existing = self._summaries.get(organization=organization, year=year, month=month)
        remaining = self._records.list_for_month(organization=organization, year=year, month=month)
        tax = existing.totals.tax_amount if existing else 0.0

        summary = PayrollSummary(
            year=year,
            month=month,
            organization=organization,
            totals=self._calculator.summarize(remaining, tax),
            payroll_file_url=existing.payroll_file_url if existing else None,
            cash_file_url=existing.cash_file_url if existing else None,
            tax_file_url=existing.tax_file_url if existing else None,
            created_by=existing.created_by if existing else None,
        )
        self._summaries.upsert(summary)
        return summary

    def update_record(self, record_id: int, changes: dict) -> PayrollSummary:
        record = self._require_record(record_id)

        fields: dict = {}
        if "employee_name" in changes:
            name = str(changes["employee_name"] or "").strip()
            if not name:
                raise ValidationError("Hiányzó munkavállaló név")
            fields["employee_name"] = name
        if "amount" in changes:
            fields["amount"] = parse_amount(changes["amount"])
        if "project_code" in changes:
            fields["project_code"] = (str(changes["project_code"]).strip() or None) if changes["project_code"] else None
        if "is_rental" in changes:
            fields["is_rental"] = 1 if changes["is_rental"] else 0
        if "is_cash" in changes:
            fields["is_cash"] = 1 if changes["is_cash"] else 0
        if "record_date" in changes:
            new_date = parse_loose_date(changes["record_date"])
            if not new_date:
                raise ValidationError("Érvénytelen dátum")
            fields["record_date"] = new_date

        if fields:
            self._records.update(record_id, fields)

        moved_to = fields.get("record_date")
        if moved_to and (moved_to.year, moved_to.month) != (record.record_date.year, record.record_date.month):
            self.reconcile(organization=record.organization, year=moved_to.year, month=moved_to.month)
        return self.reconcile(
            organization=record.organization,
            year=record.record_date.year,
            month=record.record_date.month,
        )

    def delete_record(self, record_id: int) -> PayrollSummary:
        record = self._require_record(record_id)
        self._records.delete(record_id)
        logger.info("Payroll record #%s deleted (%s)", record_id, record.employee_name)
        return self.reconcile(
            organization=record.organization,
            year=record.record_date.year,
            month=record.record_date.month,
        )

    def delete_month(self, *, organization: Any, year: int, month: int) -> int:
        # records first, then the summary; not atomic
        org = require_organization(organization)
        removed = self._records.delete_month(organization=org, year=year, month=month)
        self._summaries.delete(organization=org, year=year, month=month)
        logger.info("Payroll month %04d-%02d %s deleted (%d records)", year, month, org.value, removed)
        return removed

    # Reads.

    def list_summaries(self, *, organization: Any = None, year: Optional[int] = None) -> list[PayrollSummary]:
        org = require_organization(organization) if organization else None
        return list(self._summaries.list(organization=org, year=year))

    def record_details(self, *, organization: Any, year: int, month: int) -> dict:
        org = require_organization(organization)
        summary = self._summaries.get(organization=org, year=year, month=month)
        records = self._records.list_for_month(organization=org, year=year, month=month)
        tax = summary.totals.tax_amount if summary else 0.0
        total = summary.totals.total_payroll if summary else 0.0

        rows = []
        for r in records:
            row = r.to_dict()
            row["tax_share"] = self._calculator.tax_share(r.amount, tax, total)
            rows.append(row)
        return {"summary": summary.to_dict() if summary else None, "records": rows}

    def export_month(self, *, organization: Any, year: int, month: int) -> bytes:
        details = self.record_details(organization=organization, year=year, month=month)
        df = pd.DataFrame(
            [
                {
                    "Munkavállaló": r["employee_name"],
                    "Munkaszám": r["project_code"] or "",
                    "Dátum": r["record_date"],
                    "Összeg": r["amount"],
                    "Készpénz": "Igen" if r["is_cash"] else "Nem",
                    "Bérleti": "Igen" if r["is_rental"] else "Nem",
                    "Adó arányos része": round(r["tax_share"]),
                }
                for r in details["records"]
            ],
            columns=["Munkavállaló", "Munkaszám", "Dátum", "Összeg", "Készpénz", "Bérleti", "Adó arányos része"],
        )

        summary = details["summary"] or {}
        summary_df = pd.DataFrame(
            [
                ("Átutalásos bérköltség", summary.get("bank_transfer_costs", 0)),
                ("Készpénzes bérköltség", summary.get("cash_costs", 0)),
                ("Bérleti költség", summary.get("rental_costs", 0)),
                ("Nem bérleti költség", summary.get("non_rental_costs", 0)),
                ("Adó", summary.get("tax_amount", 0)),
                ("Összes bérköltség", summary.get("total_payroll", 0)),
            ],
            columns=["Tétel", "Összeg"],
        )

        output = io.BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name="Bérsorok")
            summary_df.to_excel(writer, index=False, sheet_name="Összesítő")
        return output.getvalue()

    def _require_record(self, record_id: int) -> PayrollRecord:
        record = self._records.get_by_id(record_id)
        if not record:
            raise NotFoundError("A bérsor nem található")
        return record
