"""Draft endpoints: pick translation, draft order, board, and recording picks."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from ..dependencies import get_draft_board
from ..errors import InvalidArgument, StorageError, ValidationFailed
from ..models.league import DraftType
from ..services.draft_board import DraftBoard
from ..utils.pick_math import coordinate_to_overall, format_pick_number, overall_to_coordinate

router = APIRouter()


class DraftOrderRequest(BaseModel):
    team_order: List[str]


class PickRequest(BaseModel):
    team_id: str
    player_id: str


class ForcePickRequest(BaseModel):
    player_id: str


class DraftSettingsUpdate(BaseModel):
    draft_type: Optional[DraftType] = None
    total_rounds: Optional[int] = None
    max_keepers: Optional[int] = None
    keeper_deadline: Optional[datetime] = None


# ---------------------------------------------------------------------------
# Translator
# ---------------------------------------------------------------------------

@router.get("/draft/pick-label")
async def pick_label(
    overall: int = Query(..., description="1-based overall pick"),
    teams_count: int = Query(..., description="Teams in the league"),
):
    """Label an overall pick as round / pick-in-round."""
    try:
        round_number, pick_in_round = overall_to_coordinate(overall, teams_count)
    except InvalidArgument as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {
        "overall": overall,
        "round": round_number,
        "pick_in_round": pick_in_round,
        "label": format_pick_number(overall, teams_count),
    }


@router.get("/draft/overall")
async def overall_pick(
    round: int = Query(..., description="1-based round"),
    pick_in_round: int = Query(..., description="Team's draft slot, 1-based"),
    teams_count: int = Query(...),
    draft_type: DraftType = Query(DraftType.SNAKE),
):
    """Overall pick number for a team's slot in a round."""
    try:
        overall = coordinate_to_overall(round, pick_in_round, teams_count, draft_type)
    except InvalidArgument as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"overall": overall, "draft_type": draft_type.value}


# ---------------------------------------------------------------------------
# League draft board
# ---------------------------------------------------------------------------

def _require_league(board: DraftBoard, league_id: str) -> None:
    if board.store.get_league(league_id) is None:
        raise HTTPException(status_code=404, detail=f"League '{league_id}' not found")


@router.put("/leagues/{league_id}/draft/order")
async def set_draft_order(
    league_id: str,
    req: DraftOrderRequest,
    board: DraftBoard = Depends(get_draft_board),
):
    """Set the round-1 order and regenerate every pick."""
    _require_league(board, league_id)
    try:
        picks = board.set_draft_order(league_id, req.team_order)
    except (ValidationFailed, InvalidArgument) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {"league_id": league_id, "team_order": req.team_order, "pick_count": len(picks)}


@router.get("/leagues/{league_id}/draft/board")
async def get_board(league_id: str, board: DraftBoard = Depends(get_draft_board)):
    """All picks with their labels."""
    _require_league(board, league_id)
    picks = board.board(league_id)
    return {"picks": picks, "count": len(picks)}


@router.get("/leagues/{league_id}/draft/current")
async def get_current_pick(league_id: str, board: DraftBoard = Depends(get_draft_board)):
    """Pick on the clock; ``null`` once the draft is complete."""
    _require_league(board, league_id)
    pick = board.current_pick(league_id)
    if pick is None:
        return {"pick": None, "label": None}
    return {
        "pick": pick.model_dump(mode="json"),
        "label": board.label_pick(league_id, pick.overall).label,
    }


@router.post("/leagues/{league_id}/draft/pick")
async def record_pick(
    league_id: str,
    req: PickRequest,
    board: DraftBoard = Depends(get_draft_board),
):
    """Record the current pick."""
    _require_league(board, league_id)
    try:
        pick = board.record_pick(league_id, req.team_id, req.player_id)
    except ValidationFailed as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return pick.model_dump(mode="json")


# ---------------------------------------------------------------------------
# Commissioner controls
# ---------------------------------------------------------------------------

@router.post("/leagues/{league_id}/draft/order/randomize")
async def randomize_draft_order(league_id: str, board: DraftBoard = Depends(get_draft_board)):
    """Shuffle the teams into a new order and regenerate every pick."""
    _require_league(board, league_id)
    try:
        picks = board.randomize_draft_order(league_id)
    except (ValidationFailed, InvalidArgument) as e:
        raise HTTPException(status_code=400, detail=str(e))
    team_order = [t.id for t in board.store.find_teams(league_id)]
    return {"league_id": league_id, "team_order": team_order, "pick_count": len(picks)}


@router.patch("/leagues/{league_id}/draft/settings")
async def update_draft_settings(
    league_id: str,
    req: DraftSettingsUpdate,
    board: DraftBoard = Depends(get_draft_board),
):
    """Change draft type, rounds, or keeper limits before the first pick."""
    _require_league(board, league_id)
    try:
        league = board.update_draft_settings(league_id, **req.model_dump(exclude_unset=True))
    except ValidationFailed as e:
        raise HTTPException(status_code=400, detail=str(e))
    return league.settings.model_dump(mode="json")


@router.post("/leagues/{league_id}/draft/force-pick")
async def force_pick(
    league_id: str,
    req: ForcePickRequest,
    board: DraftBoard = Depends(get_draft_board),
):
    """Record the current pick for whichever team is on the clock."""
    _require_league(board, league_id)
    try:
        pick = board.force_pick(league_id, req.player_id)
    except ValidationFailed as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return pick.model_dump(mode="json")
