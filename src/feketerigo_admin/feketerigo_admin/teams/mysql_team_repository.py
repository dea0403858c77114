from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import TeamMemberRole
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause
from .model import Team, TeamMember
from .repository import TeamRepository


class MySQLTeamRepository(TeamRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_team(self, *, name: str, description: Optional[str], created_by: Optional[int]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO teams(name, description, created_by) VALUES(%s,%s,%s)",
                (name, description, created_by),
            )
            return int(cur.lastrowid)

    def add_members(self, team_id: int, members: Sequence[tuple[int, TeamMemberRole]]) -> None:
        if not members:
            return
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                "INSERT INTO team_members(team_id, user_id, role) VALUES(%s,%s,%s)",
                [(team_id, int(user_id), role.value) for user_id, role in members],
            )

    def list_teams(self) -> Sequence[Team]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT team_id, name, description, created_by FROM teams ORDER BY created_at DESC, team_id DESC")
            return [
                Team(
                    team_id=int(r["team_id"]),
                    name=r["name"],
                    description=r.get("description"),
                    created_by=r.get("created_by"),
                )
                for r in fetchall(cur)
            ]

    def list_members(self, team_ids: Sequence[int]) -> Sequence[TeamMember]:
        if not team_ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT tm.team_id, tm.user_id, tm.role, p.name
                FROM team_members tm
                LEFT JOIN profiles p ON p.user_id = tm.user_id
                WHERE tm.team_id IN ({in_clause(team_ids)})
                ORDER BY tm.role = 'lead' DESC, p.name
                """,
                tuple(team_ids),
            )
            return [
                TeamMember(
                    team_id=int(r["team_id"]),
                    user_id=int(r["user_id"]),
                    role=TeamMemberRole(r["role"]),
                    name=r.get("name"),
                )
                for r in fetchall(cur)
            ]

    def delete_team(self, team_id: int) -> bool:
        # team_members rows go via ON DELETE CASCADE
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM teams WHERE team_id=%s", (team_id,))
            return cur.rowcount > 0
