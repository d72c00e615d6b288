"""League setup, availability, and integrity endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from ..dependencies import get_config, get_resolver, get_store
from ..config import AppConfig
from ..errors import InconsistentState, StorageError
from ..models.league import AcquisitionType, DraftSettings, League, RosterEntry, Team
from ..services.availability import AvailabilityResolver
from ..services.store import LeagueStore

router = APIRouter()


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class LeagueIn(BaseModel):
    id: str
    name: str
    teams_count: Optional[int] = None
    settings: Optional[DraftSettings] = None


class TeamIn(BaseModel):
    id: str
    name: str
    draft_position: Optional[int] = None


class RosterEntryIn(BaseModel):
    player_id: str
    acquired_via: AcquisitionType = AcquisitionType.DRAFTED
    years_kept: int = 0


def _require_league(store: LeagueStore, league_id: str) -> League:
    league = store.get_league(league_id)
    if league is None:
        raise HTTPException(status_code=404, detail=f"League '{league_id}' not found")
    return league


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------

@router.post("")
async def create_league(
    body: LeagueIn,
    store: LeagueStore = Depends(get_store),
    config: AppConfig = Depends(get_config),
):
    """Create or replace a league; missing settings use the configured defaults."""
    settings = body.settings or config.draft.model_copy()
    league = League(id=body.id, name=body.name, teams_count=body.teams_count, settings=settings)
    store.upsert_league(league)
    return league.model_dump(mode="json")


@router.post("/{league_id}/teams")
async def add_team(league_id: str, body: TeamIn, store: LeagueStore = Depends(get_store)):
    _require_league(store, league_id)
    team = Team(id=body.id, league_id=league_id, name=body.name, draft_position=body.draft_position)
    store.upsert_team(team)
    return team.model_dump()


@router.post("/{league_id}/teams/{team_id}/roster")
async def add_roster_player(
    league_id: str,
    team_id: str,
    body: RosterEntryIn,
    store: LeagueStore = Depends(get_store),
):
    """Put a catalog player on a team's roster."""
    _require_league(store, league_id)
    team = store.get_team(team_id)
    if team is None or team.league_id != league_id:
        raise HTTPException(status_code=404, detail=f"Team '{team_id}' not found")
    if store.get_player(body.player_id) is None:
        raise HTTPException(status_code=404, detail=f"Player '{body.player_id}' not found")

    entry = RosterEntry(team_id=team_id, league_id=league_id, **body.model_dump())
    try:
        store.add_roster_entry(entry)
    except StorageError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return entry.model_dump(mode="json")


# ---------------------------------------------------------------------------
# Availability
# ---------------------------------------------------------------------------

@router.get("/{league_id}/available")
async def available_players(
    league_id: str,
    order_by: Optional[str] = Query("rank", description="'rank', 'name', or empty for unordered"),
    limit: Optional[int] = Query(None, ge=1),
    resolver: AvailabilityResolver = Depends(get_resolver),
    config: AppConfig = Depends(get_config),
):
    """Players still eligible to be drafted in this league."""
    _require_league(resolver.store, league_id)
    try:
        players = resolver.get_available_players(
            league_id,
            order_by=order_by or None,
            limit=limit or config.available_limit,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {
        "players": [p.model_dump(mode="json") for p in players],
        "count": len(players),
    }


@router.get("/{league_id}/integrity")
async def integrity_report(
    league_id: str,
    resolver: AvailabilityResolver = Depends(get_resolver),
):
    """Report players that are both kept and drafted."""
    _require_league(resolver.store, league_id)
    try:
        resolver.verify_consistency(league_id)
    except InconsistentState as e:
        return {"consistent": False, "conflicts": e.player_ids, "detail": str(e)}
    return {"consistent": True, "conflicts": []}
