from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.enums import TeamMemberRole


@dataclass(frozen=True)
class TeamMember:
    team_id: int
    user_id: int
    role: TeamMemberRole
    name: Optional[str] = None

    def to_dict(self) -> dict:
        return {"user_id": self.user_id, "name": self.name, "role": self.role.value}


@dataclass(frozen=True)
class Team:
    team_id: int
    name: str
    description: Optional[str] = None
    created_by: Optional[int] = None
    members: list[TeamMember] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "team_id": self.team_id,
            "name": self.name,
            "description": self.description,
            "created_by": self.created_by,
            "members": [m.to_dict() for m in self.members],
        }
