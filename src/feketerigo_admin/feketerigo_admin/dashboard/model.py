from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class DashboardFilters:
    """Selections of the dashboard; None means "all".

    `month` is "YYYY-MM"; `rental` is "rental" or "non_rental" and only narrows payroll rows.
    """

    month: Optional[str] = None
    munkaszam: Optional[str] = None
    rental: Optional[str] = None


@dataclass(frozen=True)
class ChartPoint:
    label: str
    value: int
    amount: float
    color: str

    def to_dict(self) -> dict:
        return {"label": self.label, "value": self.value, "amount": self.amount, "color": self.color}
