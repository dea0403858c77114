from __future__ import annotations

from typing import Any

from ..core.enums import Organization
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} megadása kötelező")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} legalább {min_len} karakter")
    return value


def require_organization(value: Any) -> Organization:
    if isinstance(value, Organization):
        return value
    if not value:
        raise ValidationError("Kérjük válasszon szervezetet")
    try:
        return Organization(str(value).strip().lower())
    except ValueError:
        raise ValidationError(f"Ismeretlen szervezet: {value}")


def parse_amount(value: Any) -> float:
    """Normalize '12 345 Ft', '12,345' or 12345 into a float."""
    if isinstance(value, bool):
        raise ValidationError("Érvénytelen összeg")
    if isinstance(value, (int, float)):
        return float(value)
    s = str(value or "").strip()
    for token in ("Ft", "HUF", "\u00a0", " "):
        s = s.replace(token, "")
    s = s.replace(",", "")
    if not s:
        raise ValidationError("Hiányzó összeg")
    try:
        return float(s)
    except ValueError:
        raise ValidationError(f"Érvénytelen összeg: {value}")
