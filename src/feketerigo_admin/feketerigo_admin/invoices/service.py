from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from ..common.datetime_utils import now_local, parse_loose_date
from ..common.notices import Outcome
from ..common.validators import parse_amount, require_organization
from ..core.constants import AI_CATEGORY_SUFFIX, INVOICE_CATEGORIES, INVOICES_BUCKET, OTHER_CATEGORY
from ..core.enums import InvoiceStatus, Organization, PaymentType
from ..core.exceptions import NotFoundError, StorageError, ValidationError
from ..platform.documents import extract_text
from ..platform.functions import FunctionsClient
from ..platform.storage import FileStorage
from .model import Invoice, NewInvoice
from .repository import InvoiceRepository

logger = logging.getLogger("feketerigo_admin.invoices")

PAYMENT_METHOD_LABELS = {
    PaymentType.BANK_TRANSFER: "Banki átutalás",
    PaymentType.CARD_CASH_AFTERPAY: "Kártya/Készpénz/Utánvét",
}


def clean_category(category: Optional[str]) -> Optional[str]:
    """Drop the " (AI)" marker; anything outside the known categories becomes "Egyéb"."""
    if not category:
        return category
    category = category.strip()
    if category.endswith(AI_CATEGORY_SUFFIX):
        category = category[: -len(AI_CATEGORY_SUFFIX)]
    return category if category in INVOICE_CATEGORIES else OTHER_CATEGORY


def payment_type_for(bank_account: Optional[str]) -> PaymentType:
    return PaymentType.BANK_TRANSFER if (bank_account or "").strip() else PaymentType.CARD_CASH_AFTERPAY


def _optional_amount(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return parse_amount(value)
    except ValidationError:
        logger.warning("Could not read extracted amount %r", value)
        return None


def _text(data: dict, key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


class InvoiceService:
    """Upload -> OCR -> AI field extraction -> store, plus the invoice list."""

    def __init__(self, invoices: InvoiceRepository, functions: FunctionsClient, storage: FileStorage):
        self._invoices = invoices
        self._functions = functions
        self._storage = storage

    def process_upload(
        self,
        *,
        file_name: str,
        data: bytes,
        mime_type: str,
        organization: Any,
        now: Optional[datetime] = None,
    ) -> Outcome:
        org: Organization = require_organization(organization)
        if not data:
            raise ValidationError("Üres fájl")

        outcome = Outcome()
        now = now or now_local()

        file_url = None
        try:
            file_url = self._storage.upload(INVOICES_BUCKET, file_name, data, now=now)
        except StorageError as e:
            logger.warning("Invoice file %s could not be stored: %s", file_name, e)
            outcome.info(f"A fájl tárolása nem sikerült, a feldolgozás folytatódik: {file_name}")

        extracted_text = extract_text(self._functions, data, mime_type)

        body = self._functions.invoke(
            "process-with-gemini",
            {"extractedText": extracted_text, "organization": org.value},
        )
        fields = body.get("data") or {}

        bank_account = _text(fields, "Bankszámlaszám")
        payment_type = payment_type_for(bank_account)

        invoice = NewInvoice(
            file_name=file_name,
            organization=org,
            status=InvoiceStatus.COMPLETED,
            file_url=file_url,
            extracted_text=extracted_text,
            partner=_text(fields, "Partner"),
            bank_account=bank_account,
            subject=_text(fields, "Tárgy"),
            invoice_number=_text(fields, "Számla sorszáma"),
            amount=_optional_amount(fields.get("Összeg")),
            invoice_date=parse_loose_date(fields.get("Számla kelte")),
            payment_deadline=parse_loose_date(fields.get("Fizetési határidő")),
            payment_method=PAYMENT_METHOD_LABELS[payment_type],
            invoice_type=payment_type,
            category=clean_category(_text(fields, "Kategória")),
            munkaszam=_text(fields, "Munkaszám"),
            processed_at=now,
        )
        invoice_id = self._invoices.insert(invoice)
        logger.info("Invoice %s stored as #%s (%s)", file_name, invoice_id, org.value)

        outcome.value = invoice_id
        outcome.success(f"Számla feldolgozva: {file_name}")
        return outcome

    def list_invoices(self) -> list[Invoice]:
        return list(self._invoices.list_all())

    def update_invoice(self, invoice_id: int, changes: dict) -> Invoice:
        if not self._invoices.get_by_id(invoice_id):
            raise NotFoundError("A számla nem található")

        fields = dict(changes)
        if "category" in fields:
            fields["category"] = clean_category(fields["category"]) or OTHER_CATEGORY
        if "amount" in fields:
            fields["amount"] = _optional_amount(fields["amount"])
        for key in ("invoice_date", "payment_deadline"):
            if key in fields:
                fields[key] = parse_loose_date(fields[key])
        if "bank_account" in fields and "invoice_type" not in fields:
            payment_type = payment_type_for(fields["bank_account"])
            fields["invoice_type"] = payment_type.value
            fields["payment_method"] = PAYMENT_METHOD_LABELS[payment_type]
        elif isinstance(fields.get("invoice_type"), PaymentType):
            fields["invoice_type"] = fields["invoice_type"].value

        self._invoices.update(invoice_id, fields)
        return self._invoices.get_by_id(invoice_id)

    def delete_invoice(self, invoice_id: int) -> Outcome:
        invoice = self._invoices.get_by_id(invoice_id)
        if not invoice:
            raise NotFoundError("A számla nem található")

        outcome = Outcome()
        if invoice.file_url:
            try:
                self._storage.remove(invoice.file_url)
            except StorageError as e:
                logger.warning("Stored file of invoice #%s could not be removed: %s", invoice_id, e)
                outcome.info("A tárolt fájl törlése nem sikerült, a számla rekord törölve lesz")

        self._invoices.delete(invoice_id)
        outcome.success("Számla törölve")
        return outcome
