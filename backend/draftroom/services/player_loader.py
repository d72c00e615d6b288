"""CSV import of the player catalog with column normalization."""

from __future__ import annotations

import io
import logging
import uuid
from typing import Optional

import pandas as pd

from ..models.player import Player, PlayerStatus
from .store import LeagueStore

logger = logging.getLogger(__name__)

# Column name mappings for common player export formats (Sleeper, FantasyPros)
PLAYER_COLUMN_MAP = {
    "Name": "full_name",
    "\ufeffName": "full_name",  # BOM-prefixed
    "Player": "full_name",
    "full_name": "full_name",
    "fullName": "full_name",
    "id": "id",
    "player_id": "id",
    "sleeper_id": "sleeper_id",
    "sleeperId": "sleeper_id",
    "Pos": "position",
    "POS": "position",
    "Position": "position",
    "position": "position",
    "Team": "nfl_team",
    "team": "nfl_team",
    "nflTeam": "nfl_team",
    "Status": "status",
    "status": "status",
    "Rank": "rank",
    "RK": "rank",
    "rank": "rank",
    "ADP": "adp",
    "adp": "adp",
}

_STATUSES = {s.value for s in PlayerStatus}


def _normalize_columns(df: pd.DataFrame, col_map: dict) -> pd.DataFrame:
    """Rename columns using the mapping; unmapped columns are left alone."""
    rename = {orig: target for orig, target in col_map.items() if orig in df.columns}
    return df.rename(columns=rename)


def _parse_status(raw) -> PlayerStatus:
    if raw is None or pd.isna(raw) or str(raw).strip() == "":
        return PlayerStatus.ACTIVE
    value = str(raw).strip().upper().replace(" ", "_")
    if value in _STATUSES:
        return PlayerStatus(value)
    return PlayerStatus.INACTIVE


def _optional_str(raw) -> Optional[str]:
    if raw is None or pd.isna(raw):
        return None
    value = str(raw).strip()
    return value or None


def _optional_int(raw) -> Optional[int]:
    if raw is None or pd.isna(raw):
        return None
    try:
        return int(float(raw))
    except (TypeError, ValueError):
        return None


def _optional_float(raw) -> Optional[float]:
    if raw is None or pd.isna(raw):
        return None
    try:
        return float(raw)
    except (TypeError, ValueError):
        return None


def load_players_csv(csv_content: bytes, store: LeagueStore) -> list[Player]:
    """Parse a player CSV and upsert every row into the store's catalog."""
    df = pd.read_csv(io.BytesIO(csv_content), dtype=str)
    df = _normalize_columns(df, PLAYER_COLUMN_MAP)

    if "full_name" not in df.columns:
        raise ValueError("CSV must contain a 'Name' column")

    df = df[df["full_name"].notna()].copy()

    # Prefer explicit ids, then Sleeper ids, then generated ones
    if "id" not in df.columns:
        if "sleeper_id" in df.columns:
            df["id"] = df["sleeper_id"]
        else:
            df["id"] = None
    df["id"] = [
        str(v).strip() if pd.notna(v) and str(v).strip() else str(uuid.uuid4())[:8]
        for v in df["id"]
    ]

    players = []
    for _, row in df.iterrows():
        player = Player(
            id=row["id"],
            full_name=str(row["full_name"]).strip(),
            status=_parse_status(row.get("status")),
            position=_optional_str(row.get("position")),
            nfl_team=_optional_str(row.get("nfl_team")),
            sleeper_id=_optional_str(row.get("sleeper_id")),
            rank=_optional_int(row.get("rank")),
            adp=_optional_float(row.get("adp")),
        )
        store.upsert_player(player)
        players.append(player)

    logger.info(f"Loaded {len(players)} players into catalog")
    return players

