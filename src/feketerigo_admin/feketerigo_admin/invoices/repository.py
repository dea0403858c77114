from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Invoice, NewInvoice


class InvoiceRepository(Protocol):
    def insert(self, invoice: NewInvoice) -> int:
        raise NotImplementedError

    def get_by_id(self, invoice_id: int) -> Optional[Invoice]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Invoice]:
        """Newest upload first."""
        raise NotImplementedError

    def update(self, invoice_id: int, fields: dict) -> bool:
        raise NotImplementedError

    def delete(self, invoice_id: int) -> bool:
        raise NotImplementedError
