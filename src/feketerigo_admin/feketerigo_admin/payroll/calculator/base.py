from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, Protocol

from ..model import SummaryTotals


class PayrollLine(Protocol):
    amount: float
    is_cash: bool
    is_rental: bool


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def summarize(self, records: Iterable[PayrollLine], tax_amount: float) -> SummaryTotals:
        raise NotImplementedError

    @abstractmethod
    def tax_share(self, amount: float, monthly_tax: float, total_payroll: float) -> float:
        raise NotImplementedError
