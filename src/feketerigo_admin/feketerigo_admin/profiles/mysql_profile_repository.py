from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import ProfileType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Profile
from .repository import ProfileRepository

_COLUMNS = "user_id, name, email, password_hash, profile_type, house, is_active"


def _row_to_profile(row: dict) -> Profile:
    return Profile(
        user_id=int(row["user_id"]),
        name=row["name"],
        email=row["email"],
        profile_type=ProfileType(row["profile_type"]),
        house=row.get("house"),
        password_hash=row.get("password_hash") or "",
        is_active=bool(row.get("is_active", True)),
    )


class MySQLProfileRepository(ProfileRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles WHERE user_id=%s", (user_id,))
            row = fetchone(cur)
            return _row_to_profile(row) if row else None

    def get_by_email(self, email: str) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles WHERE email=%s", (email,))
            row = fetchone(cur)
            return _row_to_profile(row) if row else None

    def list_all(self) -> Sequence[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles ORDER BY name")
            return [_row_to_profile(r) for r in fetchall(cur)]

    def create_profile(
        self,
        *,
        name: str,
        email: str,
        password_hash: str,
        profile_type: ProfileType,
        house: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO profiles(name, email, password_hash, profile_type, house, is_active)
                VALUES(%s,%s,%s,%s,%s,1)
                """,
                (name, email, password_hash, profile_type.value, house),
            )
            return int(cur.lastrowid)
