"""Keeper endpoints. Potential/save answer with the action envelope."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pydantic import BaseModel

from ..dependencies import get_keeper_actions, get_keeper_service
from ..errors import ValidationFailed
from ..models.league import KeeperSelection
from ..services.actions import ActionResult, KeeperActions
from ..services.keeper_service import KeeperService

router = APIRouter()


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class KeeperIn(BaseModel):
    player_id: str
    keeper_round: Optional[int] = None


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("/{league_id}/teams/{team_id}/keepers", response_model=ActionResult)
async def get_potential_keepers(
    league_id: str,
    team_id: str,
    actions: KeeperActions = Depends(get_keeper_actions),
):
    """Roster players this team may keep."""
    return actions.get_potential_keepers(team_id, league_id)


@router.post("/{league_id}/teams/{team_id}/keepers", response_model=ActionResult)
async def save_keepers(
    league_id: str,
    team_id: str,
    keepers: List[KeeperIn],
    actions: KeeperActions = Depends(get_keeper_actions),
):
    """Replace the team's keepers. All selections are saved or none are."""
    selections = [KeeperSelection(**k.model_dump()) for k in keepers]
    return actions.save_keepers(team_id, league_id, selections)


@router.post("/{league_id}/keepers/import")
async def bulk_import_keepers(
    league_id: str,
    file: UploadFile = File(...),
    service: KeeperService = Depends(get_keeper_service),
):
    """Bulk import keepers from a CSV file.

    Expected columns: team_name, player_name, keeper_round
    """
    content = await file.read()
    try:
        return service.import_keepers_csv(league_id, content)
    except ValidationFailed as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{league_id}/teams/{team_id}/keepers/{player_id}")
async def remove_keeper(
    league_id: str,
    team_id: str,
    player_id: str,
    service: KeeperService = Depends(get_keeper_service),
):
    """Release one keeper back into the draftable pool (pre-draft only)."""
    try:
        entry = service.remove_keeper(team_id, league_id, player_id)
    except ValidationFailed as e:
        raise HTTPException(status_code=400, detail=str(e))
    return entry.model_dump(mode="json")
