from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import ProfileType


@dataclass(frozen=True)
class Profile:
    """An account of the admin interface.

    The profile type decides which views and actions are available.
    """

    user_id: int
    name: str
    email: str
    profile_type: ProfileType
    house: Optional[str] = None
    password_hash: str = ""
    is_active: bool = True

    def to_public_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "name": self.name,
            "email": self.email,
            "profile_type": self.profile_type.value,
            "house": self.house,
            "is_active": self.is_active,
        }


@dataclass(frozen=True)
class SessionProfile:
    """What we store into Flask session after login."""

    user_id: int
    name: str
    profile_type: ProfileType
    house: Optional[str]
