"""Player catalog model."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class PlayerStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    INJURED_RESERVE = "INJURED_RESERVE"
    PRACTICE_SQUAD = "PRACTICE_SQUAD"
    FREE_AGENT = "FREE_AGENT"


class Player(BaseModel):
    id: str
    full_name: str
    status: PlayerStatus = PlayerStatus.ACTIVE

    position: Optional[str] = None  # QB / RB / WR / TE / K / DEF
    nfl_team: Optional[str] = None
    sleeper_id: Optional[str] = None
    rank: Optional[int] = None
    adp: Optional[float] = None

    @property
    def is_active(self) -> bool:
        return self.status == PlayerStatus.ACTIVE


def rank_sort_key(player: Player):
    """Sort by rank; unranked players sort after every ranked one."""
    return (player.rank is None, player.rank or 0, player.full_name)
