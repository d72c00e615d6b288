"""Shared fixtures: a small seeded league."""
from __future__ import annotations

import pytest

from draftroom.models.league import DraftSettings, DraftType, League, RosterEntry, Team
from draftroom.models.player import Player
from draftroom.services.store import LeagueStore

LEAGUE_ID = "demo-league"


@pytest.fixture
def store():
    return LeagueStore()


@pytest.fixture
def league_store(store):
    """Three-team snake league with a ten-player catalog and two rostered players per team."""
    store.upsert_league(
        League(
            id=LEAGUE_ID,
            name="Demo League",
            settings=DraftSettings(draft_type=DraftType.SNAKE, total_rounds=4, max_keepers=3),
        )
    )
    for position, name in enumerate(["Alpha", "Bravo", "Charlie"], start=1):
        store.upsert_team(
            Team(id=f"team_{position}", league_id=LEAGUE_ID, name=name, draft_position=position)
        )

    names = [
        "Patrick Mahomes", "Christian McCaffrey", "Justin Jefferson", "Travis Kelce",
        "Josh Allen", "Tyreek Hill", "Bijan Robinson", "CeeDee Lamb",
        "Ja'Marr Chase", "Saquon Barkley",
    ]
    for i, name in enumerate(names, start=1):
        store.upsert_player(Player(id=f"p{i}", full_name=name, rank=i))

    rosters = {"team_1": ["p1", "p2"], "team_2": ["p3", "p4"], "team_3": ["p5", "p6"]}
    for team_id, player_ids in rosters.items():
        for pid in player_ids:
            store.add_roster_entry(RosterEntry(team_id=team_id, player_id=pid, league_id=LEAGUE_ID))
    return store

