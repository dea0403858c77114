from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import FormSummary, StoredNewsletter


class NewsletterRepository(Protocol):
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
        raise NotImplementedError

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
        raise NotImplementedError

    def get(self, newsletter_id: int) -> Optional[StoredNewsletter]:
        raise NotImplementedError

    def list_all(self) -> Sequence[StoredNewsletter]:
        raise NotImplementedError

    def delete(self, newsletter_id: int) -> bool:
        raise NotImplementedError

    def form_ids(self, newsletter_id: int) -> list[int]:
        raise NotImplementedError

    def replace_forms(self, newsletter_id: int, form_ids: Sequence[int]) -> None:
        """Delete every link of the newsletter, then insert the given ones."""
        raise NotImplementedError


class FormRepository(Protocol):
    def list_active(self) -> Sequence[FormSummary]:
        raise NotImplementedError
