from __future__ import annotations

import pytest

from src.feketerigo_admin.feketerigo_admin.core.enums import TeamMemberRole
from src.feketerigo_admin.feketerigo_admin.core.exceptions import NotFoundError, ValidationError
from src.feketerigo_admin.feketerigo_admin.teams.model import Team, TeamMember
from src.feketerigo_admin.feketerigo_admin.teams.service import TeamService


class InMemoryTeams:
    def __init__(self):
        self.teams: dict[int, Team] = {}
        self.members: list[TeamMember] = []

    def create_team(self, *, name, description, created_by):
        team_id = len(self.teams) + 1
        self.teams[team_id] = Team(team_id, name, description, created_by)
        return team_id

    def add_members(self, team_id, members):
        self.members.extend(TeamMember(team_id, user_id, role) for user_id, role in members)

    def list_teams(self):
        return list(self.teams.values())

    def list_members(self, team_ids):
        return [m for m in self.members if m.team_id in team_ids]

    def delete_team(self, team_id):
        self.members = [m for m in self.members if m.team_id != team_id]
        return self.teams.pop(team_id, None) is not None


def test_create_team_marks_lead_and_dedupes_members():
    repo = InMemoryTeams()
    svc = TeamService(repo)

    svc.create_team(name="Kert", member_ids=[3, 4, 3], lead_id=4)

    team = svc.list_teams()[0]
    assert [(m.user_id, m.role) for m in team.members] == [(3, TeamMemberRole.MEMBER), (4, TeamMemberRole.LEAD)]


@pytest.mark.parametrize(
    "name, members, lead",
    [
        ("K", [1], 1),
        ("Kert", [], None),
        ("Kert", [1, 2], 3),
    ],
)
def test_invalid_team_is_rejected(name, members, lead):
    with pytest.raises(ValidationError):
        TeamService(InMemoryTeams()).create_team(name=name, member_ids=members, lead_id=lead)


def test_delete_missing_team_raises():
    with pytest.raises(NotFoundError):
        TeamService(InMemoryTeams()).delete_team(9)
