from __future__ import annotations

import logging
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.enums import ProfileType
from ..core.exceptions import AuthenticationError, ValidationError
from .model import Profile, SessionProfile
from .repository import ProfileRepository

logger = logging.getLogger("feketerigo_admin.profiles")


class AuthService:
    """Use case: authenticate a profile (login)."""

    def __init__(self, profiles: ProfileRepository):
        self._profiles = profiles

    def authenticate(self, email: str, password: str) -> SessionProfile:
        profile = self._profiles.get_by_email((email or "").strip().lower())
        if not profile or not profile.is_active:
            logger.info("Login rejected for %s", email)
            raise AuthenticationError("Hibás e-mail cím vagy jelszó")

        try:
            matches = check_password_hash(profile.password_hash, password or "")
        except ValueError:
            # placeholder or corrupted hashes
            matches = False

        if not matches:
            logger.info("Login rejected for %s", email)
            raise AuthenticationError("Hibás e-mail cím vagy jelszó")

        return SessionProfile(
            user_id=profile.user_id,
            name=profile.name,
            profile_type=profile.profile_type,
            house=profile.house,
        )


class ProfileService:
    """Accounts directory and account creation."""

    def __init__(self, profiles: ProfileRepository):
        self._profiles = profiles

    def list_directory(
        self,
        *,
        search: Optional[str] = None,
        profile_type: Optional[ProfileType] = None,
    ) -> list[Profile]:
        needle = (search or "").strip().lower()
        out = []
        for p in self._profiles.list_all():
            if profile_type and p.profile_type != profile_type:
                continue
            if needle and needle not in p.name.lower() and needle not in p.email.lower():
                continue
            out.append(p)
        out.sort(key=lambda p: p.name.lower())
        return out

    def get(self, user_id: int) -> Optional[Profile]:
        return self._profiles.get_by_id(user_id)

    def create_account(
        self,
        *,
        name: str,
        email: str,
        password: str,
        profile_type: ProfileType,
        house: Optional[str] = None,
    ) -> int:
        name = require_non_empty(name, "Név")
        email = require_non_empty(email, "E-mail cím").lower()
        require_min_length(password, "Jelszó", 6)

        if self._profiles.get_by_email(email):
            raise ValidationError("Ez az e-mail cím már foglalt")
        if profile_type == ProfileType.HAZ_VEZETO and not (house or "").strip():
            raise ValidationError("Házvezetőnél a ház megadása kötelező")

        return self._profiles.create_profile(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            profile_type=profile_type,
            house=(house or "").strip() or None,
        )
