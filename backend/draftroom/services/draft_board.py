"""Draft board service: pick generation, draft order, labels, and recording picks."""

from __future__ import annotations

import logging
import random
import uuid
from datetime import datetime
from typing import Optional

from ..errors import ValidationFailed
from ..models.draft import DraftPick, PickLabel
from ..models.league import AcquisitionType, DraftSettings, League, RosterEntry
from ..utils.pick_math import build_draft_order, format_pick_label, ordinal, overall_to_coordinate
from .availability import AvailabilityResolver
from .store import LeagueStore

logger = logging.getLogger(__name__)


class DraftBoard:
    def __init__(self, store: LeagueStore):
        self.store = store
        self.resolver = AvailabilityResolver(store)

    def _require_league(self, league_id: str) -> League:
        league = self.store.get_league(league_id)
        if league is None:
            raise ValidationFailed(f"League '{league_id}' not found")
        return league

    def _draft_started(self, league_id: str) -> bool:
        return bool(self.store.find_draft_picks(league_id, is_complete=True))

    @staticmethod
    def _check_league_size(league: League, team_count: int) -> None:
        # Stored picks and their labels must agree on picks per round
        if league.teams_count is not None and league.teams_count != team_count:
            raise ValidationFailed(
                f"League '{league.id}' is configured for {league.teams_count} teams "
                f"but has {team_count}"
            )

    # ------------------------------------------------------------------
    # Draft order & pick generation
    # ------------------------------------------------------------------

    def set_draft_order(self, league_id: str, team_order: list[str]) -> list[DraftPick]:
        """Assign draft positions from *team_order* and regenerate every pick.

        - Draft must not have started (no completed picks)
        - No duplicate teams
        - Every team must belong to the league, and every league team must appear
        - An explicit league size must match the number of teams
        """
        league = self._require_league(league_id)
        if self._draft_started(league_id):
            raise ValidationFailed("Cannot change draft order after picks have been made")
        if len(set(team_order)) != len(team_order):
            raise ValidationFailed("Duplicate teams in order list")

        league_team_ids = {t.id for t in self.store.find_teams(league_id)}
        for team_id in team_order:
            if team_id not in league_team_ids:
                raise ValidationFailed(f"Team {team_id} is not part of this league")
        if len(team_order) != len(league_team_ids):
            raise ValidationFailed(f"Order list must include all {len(league_team_ids)} teams")
        self._check_league_size(league, len(team_order))

        with self.store.transaction():
            for position, team_id in enumerate(team_order, start=1):
                team = self.store.get_team(team_id)
                team.draft_position = position
                self.store.upsert_team(team)
            picks = self.generate_draft_picks(league_id)

        logger.info(f"League {league_id}: draft order set, {len(picks)} picks generated")
        return picks

    def generate_draft_picks(self, league_id: str) -> list[DraftPick]:
        """Pre-create every pick of the draft from the teams' draft positions."""
        league = self._require_league(league_id)
        if self._draft_started(league_id):
            raise ValidationFailed("Cannot regenerate picks after picks have been made")

        teams = self.store.find_teams(league_id)
        if not teams:
            raise ValidationFailed("No teams in league")
        if any(t.draft_position is None for t in teams):
            raise ValidationFailed("Draft order not set for every team")
        self._check_league_size(league, len(teams))

        rows = build_draft_order(
            [t.id for t in teams],
            league.settings.total_rounds,
            league.settings.draft_type,
        )
        picks = [
            DraftPick(
                id=str(uuid.uuid4())[:8],
                league_id=league_id,
                overall=overall,
                round=round_number,
                pick_in_round=pick_in_round,
                original_owner_id=team_id,
                current_owner_id=team_id,
            )
            for overall, round_number, pick_in_round, team_id in rows
        ]
        self.store.replace_draft_picks(league_id, picks)
        return picks

    def randomize_draft_order(
        self, league_id: str, rng: Optional[random.Random] = None
    ) -> list[DraftPick]:
        """Shuffle the league's teams into a new round-1 order."""
        team_ids = [t.id for t in self.store.find_teams(league_id)]
        (rng or random).shuffle(team_ids)
        logger.info(f"League {league_id}: randomized draft order {team_ids}")
        return self.set_draft_order(league_id, team_ids)

    def update_draft_settings(self, league_id: str, **changes) -> League:
        """Change draft settings before the first pick.

        Picks are regenerated when every team already has a draft position.
        """
        league = self._require_league(league_id)
        if self._draft_started(league_id):
            raise ValidationFailed("Cannot change draft settings after picks have been made")
        unknown = set(changes) - set(DraftSettings.model_fields)
        if unknown:
            raise ValidationFailed(f"Unknown draft settings: {sorted(unknown)}")
        try:
            settings = DraftSettings.model_validate(
                {**league.settings.model_dump(), **changes}
            )
        except ValueError as e:
            raise ValidationFailed(f"Invalid draft settings: {e}") from e

        with self.store.transaction():
            league.settings = settings
            self.store.upsert_league(league)
            teams = self.store.find_teams(league_id)
            if teams and all(t.draft_position is not None for t in teams):
                self.generate_draft_picks(league_id)

        logger.info(f"League {league_id}: draft settings updated {changes}")
        return league

    # ------------------------------------------------------------------
    # Board queries
    # ------------------------------------------------------------------

    def current_pick(self, league_id: str) -> Optional[DraftPick]:
        """The lowest-numbered incomplete pick, or None when the draft is over."""
        pending = self.store.find_draft_picks(league_id, is_complete=False)
        return pending[0] if pending else None

    def label_pick(self, league_id: str, overall: int) -> PickLabel:
        """Label a pick from its stored coordinate.

        Picks not generated yet are derived from the league size.
        """
        self._require_league(league_id)
        pick = self.store.get_draft_pick(league_id, overall)
        if pick is not None:
            round_number, pick_in_round = pick.round, pick.pick_in_round
        else:
            teams_count = self.store.teams_count(league_id)
            round_number, pick_in_round = overall_to_coordinate(overall, teams_count)
        return PickLabel(
            overall=overall,
            round=round_number,
            pick_in_round=pick_in_round,
            label=format_pick_label(round_number, pick_in_round),
            team_id=pick.current_owner_id if pick else None,
        )

    def board(self, league_id: str) -> list[dict]:
        """Every pick with its display label."""
        self._require_league(league_id)
        return [
            {
                **pick.model_dump(mode="json"),
                "label": format_pick_label(pick.round, pick.pick_in_round),
            }
            for pick in self.store.find_draft_picks(league_id)
        ]

    # ------------------------------------------------------------------
    # Picks
    # ------------------------------------------------------------------

    def record_pick(self, league_id: str, team_id: str, player_id: str) -> DraftPick:
        """Complete the pick on the clock with *player_id*.

        - Team must own the current pick
        - Player must exist and be available (ACTIVE, not drafted, not kept)
        - Sets the selection once and adds a DRAFTED roster entry, atomically
        """
        self._require_league(league_id)
        with self.store.transaction():
            pick = self.current_pick(league_id)
            if pick is None:
                raise ValidationFailed("No current pick found; the draft is complete")
            if pick.current_owner_id != team_id:
                raise ValidationFailed(
                    f"Team '{team_id}' is not on the clock (pick {pick.overall} belongs to "
                    f"'{pick.current_owner_id}')"
                )
            player = self.store.get_player(player_id)
            if player is None:
                raise ValidationFailed(f"Player '{player_id}' not found", player_ids=[player_id])
            if not self.resolver.is_player_available(league_id, player_id):
                raise ValidationFailed(
                    f"Player '{player.full_name}' is not available", player_ids=[player_id]
                )

            pick.is_complete = True
            pick.selected_player_id = player_id
            pick.selected_at = datetime.now()
            self.store.save_draft_pick(pick)
            # Non-keepers from last season are released into the pool
            self.store.remove_roster_entry(league_id, player_id)
            self.store.add_roster_entry(
                RosterEntry(
                    team_id=team_id,
                    player_id=player_id,
                    league_id=league_id,
                    acquired_via=AcquisitionType.DRAFTED,
                )
            )

        logger.info(
            f"League {league_id}: {ordinal(pick.overall)} overall "
            f"({format_pick_label(pick.round, pick.pick_in_round)}), "
            f"team {team_id} selected {player.full_name}"
        )
        return pick

    def force_pick(self, league_id: str, player_id: str) -> DraftPick:
        """Commissioner override: record *player_id* for the team on the clock."""
        with self.store.transaction():
            pick = self.current_pick(league_id)
            if pick is None:
                self._require_league(league_id)
                raise ValidationFailed("No current pick found; the draft is complete")
            logger.warning(
                f"League {league_id}: commissioner forcing pick {pick.overall} "
                f"for team {pick.current_owner_id}"
            )
            return self.record_pick(league_id, pick.current_owner_id, player_id)
