"""Draftable player pool: the ACTIVE catalog minus drafted players and keepers."""

from __future__ import annotations

import logging
from typing import Optional

from ..errors import InconsistentState
from ..models.player import Player, PlayerStatus, rank_sort_key
from .store import LeagueStore

logger = logging.getLogger(__name__)

ORDERINGS = ("rank", "name")


class AvailabilityResolver:
    def __init__(self, store: LeagueStore):
        self.store = store

    def drafted_player_ids(self, league_id: str) -> set[str]:
        picks = self.store.find_draft_picks(league_id, is_complete=True, has_selection=True)
        return {p.selected_player_id for p in picks}

    def keeper_player_ids(self, league_id: str) -> set[str]:
        entries = self.store.find_roster_entries(league_id, is_keeper=True)
        return {e.player_id for e in entries}

    def exclusion_set(self, league_id: str) -> set[str]:
        """Drafted ∪ kept, read from one store snapshot."""
        with self.store.snapshot():
            drafted = self.drafted_player_ids(league_id)
            keepers = self.keeper_player_ids(league_id)

        overlap = drafted & keepers
        if overlap:
            logger.warning(
                f"League {league_id}: {len(overlap)} player(s) both kept and drafted: "
                f"{sorted(overlap)}"
            )
        return drafted | keepers

    def get_available_players(
        self,
        league_id: str,
        order_by: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[Player]:
        """ACTIVE players not drafted and not kept in *league_id*.

        The result is a point-in-time snapshot. Order is unspecified unless
        ``order_by`` is ``"rank"`` or ``"name"``.
        """
        if order_by is not None and order_by not in ORDERINGS:
            raise ValueError(f"order_by must be one of {ORDERINGS}, got '{order_by}'")

        with self.store.snapshot():
            excluded = self.exclusion_set(league_id)
            players = self.store.find_players(status=PlayerStatus.ACTIVE, exclude_ids=excluded)

        if order_by == "rank":
            players.sort(key=rank_sort_key)
        elif order_by == "name":
            players.sort(key=lambda p: p.full_name.lower())

        if limit is not None:
            players = players[:limit]
        return players

    def is_player_available(self, league_id: str, player_id: str) -> bool:
        player = self.store.get_player(player_id)
        if player is None or not player.is_active:
            return False
        return player_id not in self.exclusion_set(league_id)

    def find_inconsistencies(self, league_id: str) -> set[str]:
        """Players that are keepers and also selected on a completed pick."""
        with self.store.snapshot():
            return self.drafted_player_ids(league_id) & self.keeper_player_ids(league_id)

    def verify_consistency(self, league_id: str) -> None:
        overlap = self.find_inconsistencies(league_id)
        if overlap:
            logger.error(
                f"League {league_id}: keeper/draft conflict for {sorted(overlap)}; "
                f"needs operator review"
            )
            raise InconsistentState(
                f"{len(overlap)} player(s) are both kept and drafted in league {league_id}",
                player_ids=overlap,
            )
