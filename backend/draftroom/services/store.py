"""In-memory league store with filtered reads, read snapshots and transactional writes.

Implements the storage collaborator the resolver and keeper services read
through. Reads hand back copies so callers never mutate stored rows in place;
every write goes through an explicit method.
"""

from __future__ import annotations

import copy
import json
import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, Optional

from pydantic import BaseModel

from ..errors import DraftRoomError, StorageError
from ..models.draft import DraftPick
from ..models.league import KeeperSelection, League, RosterEntry, Team
from ..models.player import Player, PlayerStatus

logger = logging.getLogger(__name__)


class StoreSnapshot(BaseModel):
    """Serialized form of the whole store (JSON save/load)."""
    leagues: list[League] = []
    teams: list[Team] = []
    players: list[Player] = []
    draft_picks: list[DraftPick] = []
    roster_entries: list[RosterEntry] = []


class LeagueStore:
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._leagues: dict[str, League] = {}
        self._teams: dict[str, Team] = {}
        self._players: dict[str, Player] = {}
        # (league_id, overall) -> pick
        self._picks: dict[tuple[str, int], DraftPick] = {}
        # (league_id, player_id) -> entry; a player is on one team per league
        self._roster: dict[tuple[str, str], RosterEntry] = {}

    # ------------------------------------------------------------------
    # Consistency
    # ------------------------------------------------------------------

    @contextmanager
    def snapshot(self) -> Iterator["LeagueStore"]:
        """Hold the store still so several reads see the same state."""
        with self._lock:
            yield self

    @contextmanager
    def transaction(self) -> Iterator["LeagueStore"]:
        """All writes inside commit together or not at all.

        Domain errors are re-raised unchanged after rollback; anything else
        is surfaced as :class:`StorageError`.
        """
        with self._lock:
            saved = self._capture()
            try:
                yield self
            except DraftRoomError:
                self._restore(saved)
                raise
            except Exception as exc:
                self._restore(saved)
                logger.error(f"Store transaction rolled back: {exc}")
                raise StorageError(f"Storage write failed: {exc}") from exc

    def _capture(self) -> tuple:
        return copy.deepcopy(
            (self._leagues, self._teams, self._players, self._picks, self._roster)
        )

    def _restore(self, saved: tuple) -> None:
        self._leagues, self._teams, self._players, self._picks, self._roster = saved

    # ------------------------------------------------------------------
    # Leagues & teams
    # ------------------------------------------------------------------

    def upsert_league(self, league: League) -> League:
        with self._lock:
            self._leagues[league.id] = league.model_copy(deep=True)
        return league

    def get_league(self, league_id: str) -> Optional[League]:
        league = self._leagues.get(league_id)
        return league.model_copy(deep=True) if league else None

    def upsert_team(self, team: Team) -> Team:
        with self._lock:
            self._teams[team.id] = team.model_copy()
        return team

    def get_team(self, team_id: str) -> Optional[Team]:
        team = self._teams.get(team_id)
        return team.model_copy() if team else None

    def find_teams(self, league_id: str) -> list[Team]:
        """Teams of a league, by draft position (unset positions last)."""
        with self._lock:
            teams = [t.model_copy() for t in self._teams.values() if t.league_id == league_id]
        return sorted(
            teams,
            key=lambda t: (t.draft_position is None, t.draft_position or 0, t.id),
        )

    def teams_count(self, league_id: str) -> int:
        league = self._leagues.get(league_id)
        if league is not None and league.teams_count:
            return league.teams_count
        return len(self.find_teams(league_id))

    # ------------------------------------------------------------------
    # Players
    # ------------------------------------------------------------------

    def upsert_player(self, player: Player) -> Player:
        with self._lock:
            self._players[player.id] = player.model_copy()
        return player

    def get_player(self, player_id: str) -> Optional[Player]:
        player = self._players.get(player_id)
        return player.model_copy() if player else None

    def find_players(
        self,
        status: Optional[PlayerStatus] = None,
        exclude_ids: Optional[Iterable[str]] = None,
    ) -> list[Player]:
        excluded = set(exclude_ids or ())
        with self._lock:
            return [
                p.model_copy()
                for p in self._players.values()
                if (status is None or p.status == status) and p.id not in excluded
            ]

    # ------------------------------------------------------------------
    # Draft picks
    # ------------------------------------------------------------------

    def find_draft_picks(
        self,
        league_id: str,
        is_complete: Optional[bool] = None,
        has_selection: Optional[bool] = None,
    ) -> list[DraftPick]:
        with self._lock:
            picks = [
                p.model_copy()
                for (lid, _overall), p in self._picks.items()
                if lid == league_id
                and (is_complete is None or p.is_complete == is_complete)
                and (has_selection is None or (p.selected_player_id is not None) == has_selection)
            ]
        return sorted(picks, key=lambda p: p.overall)

    def get_draft_pick(self, league_id: str, overall: int) -> Optional[DraftPick]:
        pick = self._picks.get((league_id, overall))
        return pick.model_copy() if pick else None

    def replace_draft_picks(self, league_id: str, picks: list[DraftPick]) -> None:
        with self._lock:
            for key in [k for k in self._picks if k[0] == league_id]:
                del self._picks[key]
            for pick in picks:
                self._put_draft_pick(pick)

    def save_draft_pick(self, pick: DraftPick) -> DraftPick:
        with self._lock:
            self._put_draft_pick(pick)
        return pick

    def _put_draft_pick(self, pick: DraftPick) -> None:
        self._picks[(pick.league_id, pick.overall)] = pick.model_copy()

    # ------------------------------------------------------------------
    # Rosters & keepers
    # ------------------------------------------------------------------

    def find_roster_entries(
        self,
        league_id: str,
        team_id: Optional[str] = None,
        is_keeper: Optional[bool] = None,
    ) -> list[RosterEntry]:
        with self._lock:
            return [
                e.model_copy()
                for (lid, _pid), e in self._roster.items()
                if lid == league_id
                and (team_id is None or e.team_id == team_id)
                and (is_keeper is None or e.is_keeper == is_keeper)
            ]

    def get_roster_entry(self, league_id: str, player_id: str) -> Optional[RosterEntry]:
        entry = self._roster.get((league_id, player_id))
        return entry.model_copy() if entry else None

    def add_roster_entry(self, entry: RosterEntry) -> RosterEntry:
        with self._lock:
            existing = self._roster.get((entry.league_id, entry.player_id))
            if existing is not None and existing.team_id != entry.team_id:
                raise StorageError(
                    f"Player '{entry.player_id}' is already on team '{existing.team_id}' "
                    f"in league '{entry.league_id}'"
                )
            self._put_roster_entry(entry)
        return entry

    def remove_roster_entry(self, league_id: str, player_id: str) -> None:
        with self._lock:
            self._roster.pop((league_id, player_id), None)

    def _put_roster_entry(self, entry: RosterEntry) -> None:
        self._roster[(entry.league_id, entry.player_id)] = entry.model_copy()

    def write_keeper_selections(
        self,
        team_id: str,
        league_id: str,
        selections: list[KeeperSelection],
    ) -> list[RosterEntry]:
        """Flag exactly ``selections`` as the team's keepers, atomically.

        Every selected player must already be on the team's roster; the
        team's other entries lose their keeper flag.
        """
        chosen = {s.player_id: s for s in selections}
        with self.transaction():
            entries = self.find_roster_entries(league_id, team_id=team_id)
            missing = set(chosen) - {e.player_id for e in entries}
            if missing:
                raise StorageError(
                    f"No roster entry for {sorted(missing)} on team '{team_id}'"
                )
            written = []
            for entry in entries:
                selection = chosen.get(entry.player_id)
                if selection is not None:
                    entry.is_keeper = True
                    entry.keeper_round = selection.keeper_round
                    written.append(entry)
                else:
                    entry.is_keeper = False
                    entry.keeper_round = None
                self._put_roster_entry(entry)
        return written

    def clear_keeper(self, team_id: str, league_id: str, player_id: str) -> RosterEntry:
        """Unflag one keeper on the team's roster, atomically."""
        with self.transaction():
            entry = self.get_roster_entry(league_id, player_id)
            if entry is None or entry.team_id != team_id:
                raise StorageError(f"No roster entry for '{player_id}' on team '{team_id}'")
            entry.is_keeper = False
            entry.keeper_round = None
            self._put_roster_entry(entry)
        return entry

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def to_snapshot(self) -> StoreSnapshot:
        with self._lock:
            return StoreSnapshot(
                leagues=list(self._leagues.values()),
                teams=list(self._teams.values()),
                players=list(self._players.values()),
                draft_picks=list(self._picks.values()),
                roster_entries=list(self._roster.values()),
            )

    def save(self, path: Path) -> str:
        """Write the whole store to a JSON file."""
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w") as f:
                json.dump(self.to_snapshot().model_dump(mode="json"), f, indent=2)
        except OSError as exc:
            raise StorageError(f"Could not save league state to {path}: {exc}") from exc
        return str(path)

    def load(self, path: Path) -> StoreSnapshot:
        """Replace the store contents with a JSON file written by :meth:`save`."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"No saved league state found at {path}")
        try:
            with open(path, "r") as f:
                snapshot = StoreSnapshot(**json.load(f))
        except (OSError, ValueError) as exc:
            raise StorageError(f"Could not load league state from {path}: {exc}") from exc

        with self._lock:
            self._leagues = {lg.id: lg for lg in snapshot.leagues}
            self._teams = {t.id: t for t in snapshot.teams}
            self._players = {p.id: p for p in snapshot.players}
            self._picks = {(p.league_id, p.overall): p for p in snapshot.draft_picks}
            self._roster = {(e.league_id, e.player_id): e for e in snapshot.roster_entries}
        logger.info(
            f"Loaded league state from {path}: {len(snapshot.leagues)} leagues, "
            f"{len(snapshot.players)} players"
        )
        return snapshot
