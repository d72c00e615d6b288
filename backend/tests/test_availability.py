"""Tests for the draftable player pool."""

import logging

import pytest

from draftroom.errors import InconsistentState
from draftroom.models.draft import DraftPick
from draftroom.models.league import RosterEntry
from draftroom.models.player import Player, PlayerStatus, rank_sort_key
from draftroom.services.availability import AvailabilityResolver

LEAGUE = "L1"


def _completed_pick(overall, player_id, league_id=LEAGUE):
    return DraftPick(
        league_id=league_id,
        overall=overall,
        round=1,
        pick_in_round=overall,
        original_owner_id="team_1",
        current_owner_id="team_1",
        is_complete=True,
        selected_player_id=player_id,
    )


def _keeper(player_id, team_id="team_1", league_id=LEAGUE):
    return RosterEntry(team_id=team_id, player_id=player_id, league_id=league_id, is_keeper=True)


@pytest.fixture
def catalog_store(store):
    for pid in "ABCDE":
        store.upsert_player(Player(id=pid, full_name=f"Player {pid}", rank=ord(pid)))
    return store


@pytest.fixture
def resolver(catalog_store):
    return AvailabilityResolver(catalog_store)


class TestGetAvailablePlayers:
    def test_overlapping_drafted_and_keeper_sets(self, catalog_store, resolver):
        catalog_store.save_draft_pick(_completed_pick(1, "A"))
        catalog_store.add_roster_entry(_keeper("B"))
        catalog_store.add_roster_entry(_keeper("A", team_id="team_2"))

        available = resolver.get_available_players(LEAGUE)
        assert {p.id for p in available} == {"C", "D", "E"}
        assert len(available) == 3

    def test_excludes_non_active_players(self, catalog_store, resolver):
        catalog_store.upsert_player(
            Player(id="F", full_name="Hurt Guy", status=PlayerStatus.INJURED_RESERVE)
        )
        catalog_store.upsert_player(
            Player(id="G", full_name="Retired Guy", status=PlayerStatus.INACTIVE)
        )
        assert {p.id for p in resolver.get_available_players(LEAGUE)} == set("ABCDE")

    def test_ignores_incomplete_and_empty_picks(self, catalog_store, resolver):
        pending = _completed_pick(1, None)
        pending.is_complete = False
        catalog_store.save_draft_pick(pending)
        unselected = _completed_pick(2, None)
        catalog_store.save_draft_pick(unselected)

        assert {p.id for p in resolver.get_available_players(LEAGUE)} == set("ABCDE")

    def test_non_keeper_roster_entries_stay_available(self, catalog_store, resolver):
        catalog_store.add_roster_entry(
            RosterEntry(team_id="team_1", player_id="C", league_id=LEAGUE, is_keeper=False)
        )
        assert "C" in {p.id for p in resolver.get_available_players(LEAGUE)}

    def test_other_leagues_do_not_leak(self, catalog_store, resolver):
        catalog_store.save_draft_pick(_completed_pick(1, "A", league_id="other"))
        catalog_store.add_roster_entry(_keeper("B", league_id="other"))
        assert {p.id for p in resolver.get_available_players(LEAGUE)} == set("ABCDE")

    def test_order_and_limit(self, catalog_store, resolver):
        catalog_store.upsert_player(Player(id="Z", full_name="Aaron Unranked"))
        ranked = resolver.get_available_players(LEAGUE, order_by="rank")
        assert [p.id for p in ranked] == ["A", "B", "C", "D", "E", "Z"]

        by_name = resolver.get_available_players(LEAGUE, order_by="name")
        assert by_name[0].id == "Z"

        assert len(resolver.get_available_players(LEAGUE, order_by="rank", limit=2)) == 2

    def test_rank_sort_key_puts_unranked_last(self):
        players = [
            Player(id="u", full_name="Unranked"),
            Player(id="b", full_name="Bravo", rank=2),
            Player(id="a2", full_name="Zed", rank=1),
            Player(id="a1", full_name="Alpha", rank=1),
        ]
        assert [p.id for p in sorted(players, key=rank_sort_key)] == ["a1", "a2", "b", "u"]

    def test_rejects_unknown_ordering(self, resolver):
        with pytest.raises(ValueError):
            resolver.get_available_players(LEAGUE, order_by="adp")


class TestExclusionSet:
    def test_union_without_duplicates(self, catalog_store, resolver):
        catalog_store.save_draft_pick(_completed_pick(1, "A"))
        catalog_store.save_draft_pick(_completed_pick(2, "C"))
        catalog_store.add_roster_entry(_keeper("B"))

        assert resolver.drafted_player_ids(LEAGUE) == {"A", "C"}
        assert resolver.keeper_player_ids(LEAGUE) == {"B"}
        assert resolver.exclusion_set(LEAGUE) == {"A", "B", "C"}

    def test_is_player_available(self, catalog_store, resolver):
        catalog_store.save_draft_pick(_completed_pick(1, "A"))
        catalog_store.upsert_player(Player(id="X", full_name="Inactive", status=PlayerStatus.INACTIVE))

        assert resolver.is_player_available(LEAGUE, "B")
        assert not resolver.is_player_available(LEAGUE, "A")
        assert not resolver.is_player_available(LEAGUE, "X")
        assert not resolver.is_player_available(LEAGUE, "missing")


class TestConsistency:
    def test_overlap_is_logged_not_reconciled(self, catalog_store, resolver, caplog):
        catalog_store.save_draft_pick(_completed_pick(1, "A"))
        catalog_store.add_roster_entry(_keeper("A"))

        with caplog.at_level(logging.WARNING):
            resolver.get_available_players(LEAGUE)
        assert "both kept and drafted" in caplog.text

        # Stored data is left as-is
        assert resolver.keeper_player_ids(LEAGUE) == {"A"}
        assert resolver.drafted_player_ids(LEAGUE) == {"A"}

    def test_verify_consistency_raises(self, catalog_store, resolver):
        catalog_store.save_draft_pick(_completed_pick(1, "A"))
        catalog_store.add_roster_entry(_keeper("A"))

        assert resolver.find_inconsistencies(LEAGUE) == {"A"}
        with pytest.raises(InconsistentState) as exc_info:
            resolver.verify_consistency(LEAGUE)
        assert exc_info.value.player_ids == ["A"]

    def test_clean_league_passes(self, catalog_store, resolver):
        catalog_store.save_draft_pick(_completed_pick(1, "A"))
        catalog_store.add_roster_entry(_keeper("B"))
        resolver.verify_consistency(LEAGUE)
