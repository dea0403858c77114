from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import TeamMemberRole
from .model import Team, TeamMember


class TeamRepository(Protocol):
    def create_team(self, *, name: str, description: Optional[str], created_by: Optional[int]) -> int:
        raise NotImplementedError

    def add_members(self, team_id: int, members: Sequence[tuple[int, TeamMemberRole]]) -> None:
        raise NotImplementedError

    def list_teams(self) -> Sequence[Team]:
        raise NotImplementedError

    def list_members(self, team_ids: Sequence[int]) -> Sequence[TeamMember]:
        raise NotImplementedError

    def delete_team(self, team_id: int) -> bool:
        raise NotImplementedError
