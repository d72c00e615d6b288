"""League, Team, roster and keeper models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class DraftType(str, Enum):
    LINEAR = "LINEAR"
    SNAKE = "SNAKE"


class AcquisitionType(str, Enum):
    DRAFTED = "DRAFTED"
    TRADED = "TRADED"
    KEEPER = "KEEPER"
    FREE_AGENT = "FREE_AGENT"


class DraftSettings(BaseModel):
    draft_type: DraftType = DraftType.LINEAR
    total_rounds: int = Field(14, ge=1)
    max_keepers: int = Field(7, ge=0)
    keeper_deadline: Optional[datetime] = None


class League(BaseModel):
    id: str
    name: str
    season: int = Field(default_factory=lambda: datetime.now().year)
    # Explicit size; falls back to the number of teams in the store
    teams_count: Optional[int] = Field(None, ge=1)
    settings: DraftSettings = DraftSettings()

    @property
    def draft_type(self) -> DraftType:
        return self.settings.draft_type


class Team(BaseModel):
    id: str
    league_id: str
    name: str
    draft_position: Optional[int] = None


class RosterEntry(BaseModel):
    team_id: str
    player_id: str
    league_id: str
    is_keeper: bool = False
    keeper_round: Optional[int] = None
    acquired_via: AcquisitionType = AcquisitionType.DRAFTED
    years_kept: int = 0  # consecutive seasons already kept
    acquired_at: datetime = Field(default_factory=datetime.now)


class KeeperSelection(BaseModel):
    player_id: str
    keeper_round: Optional[int] = None


class KeeperRules(BaseModel):
    """League keeper policy, passed into keeper operations rather than hardcoded."""
    max_keepers: int = Field(7, ge=0)
    keeper_deadline: Optional[datetime] = None
    # Round-cost cap: keepers may not cost a round earlier than this
    earliest_keeper_round: Optional[int] = Field(None, ge=1)
    max_years_kept: Optional[int] = Field(None, ge=0)
    # None means every acquisition type is eligible
    eligible_acquisitions: Optional[set[AcquisitionType]] = None

    @classmethod
    def from_settings(cls, settings: DraftSettings) -> "KeeperRules":
        return cls(
            max_keepers=settings.max_keepers,
            keeper_deadline=settings.keeper_deadline,
        )

    def is_eligible(self, entry: RosterEntry) -> bool:
        if self.max_years_kept is not None and entry.years_kept >= self.max_years_kept:
            return False
        if self.eligible_acquisitions is not None and entry.acquired_via not in self.eligible_acquisitions:
            return False
        return True
