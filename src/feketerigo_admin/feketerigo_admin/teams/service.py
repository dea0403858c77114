from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..core.enums import TeamMemberRole
from ..core.exceptions import NotFoundError, ValidationError
from .model import Team
from .repository import TeamRepository

logger = logging.getLogger("feketerigo_admin.teams")


class TeamService:
    def __init__(self, teams: TeamRepository):
        self._teams = teams

    def create_team(
        self,
        *,
        name: str,
        member_ids: Sequence[int],
        lead_id: Optional[int],
        description: Optional[str] = None,
        created_by: Optional[int] = None,
    ) -> int:
        name = (name or "").strip()
        if len(name) < 2:
            raise ValidationError("A csapat neve kötelező (legalább 2 karakter)")

        members = list(dict.fromkeys(int(m) for m in member_ids))
        if not members:
            raise ValidationError("Legalább egy tag kiválasztása kötelező")
        if lead_id is None or int(lead_id) not in members:
            raise ValidationError("A csapatvezetőnek a tagok között kell lennie")
        lead_id = int(lead_id)

        team_id = self._teams.create_team(
            name=name,
            description=(description or "").strip() or None,
            created_by=created_by,
        )
        self._teams.add_members(
            team_id,
            [(uid, TeamMemberRole.LEAD if uid == lead_id else TeamMemberRole.MEMBER) for uid in members],
        )
        logger.info("Team %s created with %d members", name, len(members))
        return team_id

    def list_teams(self) -> list[Team]:
        teams = list(self._teams.list_teams())
        members = self._teams.list_members([t.team_id for t in teams])
        by_team: dict[int, list] = {}
        for m in members:
            by_team.setdefault(m.team_id, []).append(m)
        return [
            Team(
                team_id=t.team_id,
                name=t.name,
                description=t.description,
                created_by=t.created_by,
                members=by_team.get(t.team_id, []),
            )
            for t in teams
        ]

    def delete_team(self, team_id: int) -> None:
        if not self._teams.delete_team(team_id):
            raise NotFoundError("A csapat nem található")
        logger.info("Team #%s deleted", team_id)
