from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import ProfileType
from .model import Profile


class ProfileRepository(Protocol):
    def get_by_id(self, user_id: int) -> Optional[Profile]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Profile]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Profile]:
        raise NotImplementedError

    def create_profile(
        self,
        *,
        name: str,
        email: str,
        password_hash: str,
        profile_type: ProfileType,
        house: Optional[str],
    ) -> int:
        raise NotImplementedError
