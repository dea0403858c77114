from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import FormSummary, StoredNewsletter
from .repository import FormRepository, NewsletterRepository

_COLUMNS = "newsletter_id, title, description, campus, components_json, generated_html, created_by, updated_at"


def _row_to_newsletter(row: dict) -> StoredNewsletter:
    return StoredNewsletter(
        newsletter_id=int(row["newsletter_id"]),
        title=row["title"],
        description=row.get("description"),
        campus=row["campus"],
        components_json=row.get("components_json"),
        generated_html=row.get("generated_html"),
        created_by=row.get("created_by"),
        updated_at=row.get("updated_at"),
    )


class MySQLNewsletterRepository(NewsletterRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        title: str,
        description: Optional[str],
        campus: str,
        components_json: str,
        generated_html: str,
        created_by: Optional[int],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO newsletters(title, description, campus, components_json, generated_html, created_by)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (title, description, campus, components_json, generated_html, created_by),
            )
            return int(cur.lastrowid)

    def update(
        self,
        newsletter_id: int,
        *,
        title: str,
        description: Optional[str],
        campus: str,
        components_json: str,
        generated_html: str,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE newsletters
                SET title=%s, description=%s, campus=%s, components_json=%s, generated_html=%s
                WHERE newsletter_id=%s
                """,
                (title, description, campus, components_json, generated_html, newsletter_id),
            )
            return cur.rowcount > 0

    def get(self, newsletter_id: int) -> Optional[StoredNewsletter]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM newsletters WHERE newsletter_id=%s", (newsletter_id,))
            row = fetchone(cur)
            return _row_to_newsletter(row) if row else None

    def list_all(self) -> Sequence[StoredNewsletter]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM newsletters ORDER BY updated_at DESC, newsletter_id DESC")
            return [_row_to_newsletter(r) for r in fetchall(cur)]

    def delete(self, newsletter_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM newsletters WHERE newsletter_id=%s", (newsletter_id,))
            return cur.rowcount > 0

    def form_ids(self, newsletter_id: int) -> list[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT form_id FROM newsletter_forms WHERE newsletter_id=%s", (newsletter_id,))
            return [int(r["form_id"]) for r in fetchall(cur)]

    def replace_forms(self, newsletter_id: int, form_ids: Sequence[int]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM newsletter_forms WHERE newsletter_id=%s", (newsletter_id,))
            if form_ids:
                cur.executemany(
                    "INSERT INTO newsletter_forms(newsletter_id, form_id) VALUES(%s,%s)",
                    [(newsletter_id, int(fid)) for fid in form_ids],
                )


class MySQLFormRepository(FormRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active(self) -> Sequence[FormSummary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT form_id, title, description, campus
                FROM forms
                WHERE status='active'
                ORDER BY created_at DESC
                """
            )
            return [
                FormSummary(
                    form_id=int(r["form_id"]),
                    title=r["title"],
                    description=r.get("description"),
                    campus=r["campus"],
                )
                for r in fetchall(cur)
            ]
