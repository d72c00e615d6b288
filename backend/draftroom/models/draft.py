"""Draft pick models."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class DraftPick(BaseModel):
    id: str = ""
    league_id: str
    overall: int = Field(..., ge=1)
    round: int = Field(..., ge=1)
    pick_in_round: int = Field(..., ge=1)
    original_owner_id: str
    current_owner_id: str
    is_complete: bool = False
    selected_player_id: Optional[str] = None  # set once, on completion
    selected_at: Optional[datetime] = None


class PickLabel(BaseModel):
    overall: int
    round: int
    pick_in_round: int
    label: str  # "Round R, Pick P"
    team_id: Optional[str] = None
