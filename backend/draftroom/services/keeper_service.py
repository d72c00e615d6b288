"""Keeper selection service: eligibility, all-or-nothing saves, and CSV import."""

from __future__ import annotations

import csv
import io
import logging
from datetime import datetime
from typing import Optional, Union

from thefuzz import fuzz, process

from ..errors import DraftRoomError, ValidationFailed
from ..models.league import KeeperRules, KeeperSelection, League, RosterEntry, Team
from ..models.player import Player, rank_sort_key
from .availability import AvailabilityResolver
from .store import LeagueStore

logger = logging.getLogger(__name__)

DEFAULT_FUZZY_THRESHOLD = 80


class KeeperService:
    def __init__(self, store: LeagueStore, fuzzy_threshold: int = DEFAULT_FUZZY_THRESHOLD):
        self.store = store
        self.resolver = AvailabilityResolver(store)
        self.fuzzy_threshold = fuzzy_threshold

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def _require_league(self, league_id: str) -> League:
        league = self.store.get_league(league_id)
        if league is None:
            raise ValidationFailed(f"League '{league_id}' not found")
        return league

    def _require_team(self, team_id: str, league_id: str) -> Team:
        team = self.store.get_team(team_id)
        if team is None or team.league_id != league_id:
            raise ValidationFailed(f"Team '{team_id}' is not part of league '{league_id}'")
        return team

    def rules_for(self, league_id: str) -> KeeperRules:
        return KeeperRules.from_settings(self._require_league(league_id).settings)

    # ------------------------------------------------------------------
    # Potential keepers
    # ------------------------------------------------------------------

    def get_potential_keepers(
        self,
        team_id: str,
        league_id: str,
        rules: Optional[KeeperRules] = None,
    ) -> list[Player]:
        """Players on the team's roster that the keeper rules allow it to retain."""
        self._require_team(team_id, league_id)
        rules = rules or self.rules_for(league_id)

        players = []
        for entry in self.store.find_roster_entries(league_id, team_id=team_id):
            if not rules.is_eligible(entry):
                continue
            player = self.store.get_player(entry.player_id)
            if player is None:
                logger.warning(
                    f"League {league_id} team {team_id}: roster player {entry.player_id} "
                    f"missing from catalog"
                )
                continue
            players.append(player)
        return sorted(players, key=rank_sort_key)

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------

    def save_keepers(
        self,
        team_id: str,
        league_id: str,
        selections: list[Union[KeeperSelection, dict]],
        rules: Optional[KeeperRules] = None,
        now: Optional[datetime] = None,
    ) -> list[RosterEntry]:
        """Replace the team's keeper set with *selections*.

        Validates, in order:
        - team belongs to the league
        - keeper deadline has not passed
        - selection count <= max keepers
        - each player appears once, is on this team's roster, is eligible,
          has a keeper round inside the draft, and is not already drafted

        Every problem is collected before anything is written; a single
        :class:`ValidationFailed` names all offending players.
        """
        league = self._require_league(league_id)
        self._require_team(team_id, league_id)
        rules = rules or KeeperRules.from_settings(league.settings)
        selections = [
            s if isinstance(s, KeeperSelection) else KeeperSelection(**s)
            for s in selections
        ]

        if rules.keeper_deadline is not None:
            now = now or datetime.now(rules.keeper_deadline.tzinfo)
            if now > rules.keeper_deadline:
                raise ValidationFailed("Keeper deadline has passed")

        if len(selections) > rules.max_keepers:
            raise ValidationFailed(
                f"Cannot keep more than {rules.max_keepers} players",
                player_ids=[s.player_id for s in selections],
            )

        problems: list[str] = []
        offending: set[str] = set()
        seen: set[str] = set()
        drafted = self.resolver.drafted_player_ids(league_id)
        earliest_round = rules.earliest_keeper_round or 1

        for selection in selections:
            pid = selection.player_id
            if pid in seen:
                problems.append(f"{pid} selected more than once")
                offending.add(pid)
                continue
            seen.add(pid)

            entry = self.store.get_roster_entry(league_id, pid)
            if entry is None or entry.team_id != team_id:
                problems.append(f"{self._display_name(pid)} is not on this team's roster")
                offending.add(pid)
                continue
            if not rules.is_eligible(entry):
                problems.append(f"{self._display_name(pid)} is not eligible to be kept")
                offending.add(pid)
            if selection.keeper_round is not None and not (
                earliest_round <= selection.keeper_round <= league.settings.total_rounds
            ):
                problems.append(
                    f"{self._display_name(pid)}: keeper round {selection.keeper_round} "
                    f"outside {earliest_round}-{league.settings.total_rounds}"
                )
                offending.add(pid)
            if pid in drafted:
                problems.append(f"{self._display_name(pid)} has already been drafted")
                offending.add(pid)

        if problems:
            logger.warning(
                f"League {league_id} team {team_id}: keeper submission rejected: {'; '.join(problems)}"
            )
            raise ValidationFailed("; ".join(problems), player_ids=offending)

        written = self.store.write_keeper_selections(team_id, league_id, selections)
        logger.info(f"League {league_id} team {team_id}: saved {len(written)} keeper(s)")
        return written

    def remove_keeper(self, team_id: str, league_id: str, player_id: str) -> RosterEntry:
        """Drop one keeper designation before the draft starts.

        The player stays on the roster and returns to the draftable pool.
        """
        self._require_league(league_id)
        self._require_team(team_id, league_id)
        if self.store.find_draft_picks(league_id, is_complete=True):
            raise ValidationFailed("Cannot remove keepers after the draft has started")

        entry = self.store.get_roster_entry(league_id, player_id)
        if entry is None or entry.team_id != team_id or not entry.is_keeper:
            raise ValidationFailed(
                f"{self._display_name(player_id)} is not a keeper for team '{team_id}'",
                player_ids=[player_id],
            )

        cleared = self.store.clear_keeper(team_id, league_id, player_id)
        logger.info(f"League {league_id} team {team_id}: removed keeper {player_id}")
        return cleared

    def _display_name(self, player_id: str) -> str:
        player = self.store.get_player(player_id)
        return player.full_name if player else player_id

    # ------------------------------------------------------------------
    # Fuzzy name matching & bulk CSV import
    # ------------------------------------------------------------------

    def _fuzzy_match(self, name: str, choices: dict[str, str]) -> Optional[str]:
        """Return the best matching player_id for *name*, or None.

        ``choices`` maps player_id -> player name.
        """
        if not choices:
            return None
        result = process.extractOne(
            name, choices, scorer=fuzz.token_sort_ratio, score_cutoff=self.fuzzy_threshold
        )
        if result is None:
            return None
        # result is (matched_name, score, key)
        _matched_name, _score, player_id = result
        return player_id

    def import_keepers_csv(self, league_id: str, csv_content: bytes) -> dict:
        """Import keepers from a CSV with columns: team_name, player_name, keeper_round.

        Teams are matched by name (case-insensitive), players by fuzzy name
        against that team's roster. Each team's rows are saved together
        through :meth:`save_keepers`, so one bad row rejects that team only.
        """
        self._require_league(league_id)
        reader = csv.DictReader(io.StringIO(csv_content.decode("utf-8-sig")))

        team_lookup = {t.name.lower(): t for t in self.store.find_teams(league_id)}
        per_team: dict[str, list[KeeperSelection]] = {}
        errors: list[str] = []

        for row in reader:
            team_name = (row.get("team_name") or "").strip()
            player_name = (row.get("player_name") or "").strip()
            round_raw = (row.get("keeper_round") or "").strip()

            if not team_name or not player_name:
                errors.append(f"Skipping incomplete row: {row}")
                continue

            keeper_round = None
            if round_raw:
                try:
                    keeper_round = int(round_raw)
                except ValueError:
                    errors.append(f"Invalid keeper round '{round_raw}' for {player_name}")
                    continue

            team = team_lookup.get(team_name.lower())
            if team is None:
                errors.append(f"Team '{team_name}' not found, skipping {player_name}")
                continue

            choices = {}
            for entry in self.store.find_roster_entries(league_id, team_id=team.id):
                player = self.store.get_player(entry.player_id)
                if player is not None:
                    choices[player.id] = player.full_name

            player_id = self._fuzzy_match(player_name, choices)
            if player_id is None:
                errors.append(f"No roster match for '{player_name}' on {team.name}")
                continue
            per_team.setdefault(team.id, []).append(
                KeeperSelection(player_id=player_id, keeper_round=keeper_round)
            )

        imported = 0
        teams: dict[str, int] = {}
        for team_id, selections in per_team.items():
            try:
                written = self.save_keepers(team_id, league_id, selections)
            except DraftRoomError as exc:
                errors.append(f"Team '{team_id}': {exc}")
                continue
            teams[team_id] = len(written)
            imported += len(written)

        return {"imported": imported, "teams": teams, "errors": errors}
