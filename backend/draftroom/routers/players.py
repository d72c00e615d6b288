"""Player catalog upload and listing endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile

from ..dependencies import get_store
from ..models.player import PlayerStatus, rank_sort_key
from ..services.player_loader import load_players_csv
from ..services.store import LeagueStore

router = APIRouter()


@router.post("/upload")
async def upload_players(
    file: UploadFile = File(...),
    store: LeagueStore = Depends(get_store),
):
    """Upload a player catalog CSV (Name, Pos, Team, Status, Rank, ADP)."""
    content = await file.read()
    try:
        players = load_players_csv(content, store)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {
        "message": f"Loaded {len(players)} players from {file.filename}",
        "player_count": len(players),
        "total_in_catalog": len(store.find_players()),
    }


@router.get("")
async def list_players(
    status: Optional[PlayerStatus] = Query(None),
    store: LeagueStore = Depends(get_store),
):
    players = sorted(store.find_players(status=status), key=rank_sort_key)
    return {"players": [p.model_dump(mode="json") for p in players], "count": len(players)}
