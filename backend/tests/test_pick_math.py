"""Unit tests for overall pick <-> round/slot translation."""

import pytest

from draftroom.errors import InvalidArgument
from draftroom.models.league import DraftType
from draftroom.utils.pick_math import (
    build_draft_order,
    coordinate_to_overall,
    format_pick_label,
    format_pick_number,
    ordinal,
    overall_to_coordinate,
    overall_to_draft_slot,
)


class TestOverallToCoordinate:
    def test_first_and_last_of_round(self):
        assert overall_to_coordinate(1, 10) == (1, 1)
        assert overall_to_coordinate(10, 10) == (1, 10)
        assert overall_to_coordinate(11, 10) == (2, 1)
        assert overall_to_coordinate(20, 10) == (2, 10)

    def test_single_team_league(self):
        for overall in range(1, 6):
            assert overall_to_coordinate(overall, 1) == (overall, 1)

    def test_linear_round_trip(self):
        for teams_count in (1, 3, 10, 12):
            for overall in range(1, teams_count * 6 + 1):
                round_number, pick_in_round = overall_to_coordinate(overall, teams_count)
                assert coordinate_to_overall(
                    round_number, pick_in_round, teams_count, DraftType.LINEAR
                ) == overall

    @pytest.mark.parametrize("overall,teams_count", [(0, 10), (-3, 10), (5, 0), (5, -1)])
    def test_rejects_non_positive(self, overall, teams_count):
        with pytest.raises(InvalidArgument):
            overall_to_coordinate(overall, teams_count)

    def test_rejects_non_integers(self):
        with pytest.raises(InvalidArgument):
            overall_to_coordinate(1.5, 10)
        with pytest.raises(InvalidArgument):
            overall_to_coordinate(True, 10)


class TestCoordinateToOverall:
    def test_snake_ten_teams(self):
        assert coordinate_to_overall(1, 1, 10, DraftType.SNAKE) == 1
        assert coordinate_to_overall(2, 1, 10, DraftType.SNAKE) == 20
        assert coordinate_to_overall(2, 10, 10, DraftType.SNAKE) == 11
        assert coordinate_to_overall(3, 1, 10, DraftType.SNAKE) == 21

    def test_linear_ten_teams(self):
        assert coordinate_to_overall(2, 1, 10, DraftType.LINEAR) == 11
        assert coordinate_to_overall(2, 10, 10, DraftType.LINEAR) == 20

    def test_accepts_string_draft_type(self):
        assert coordinate_to_overall(2, 1, 10, "SNAKE") == 20

    def test_single_team_snake(self):
        for round_number in range(1, 6):
            assert coordinate_to_overall(round_number, 1, 1, DraftType.SNAKE) == round_number

    @pytest.mark.parametrize("draft_type", [DraftType.LINEAR, DraftType.SNAKE])
    def test_round_trip_is_identity(self, draft_type):
        for teams_count in (1, 2, 7, 10):
            for round_number in range(1, 8):
                for pick_in_round in range(1, teams_count + 1):
                    overall = coordinate_to_overall(round_number, pick_in_round, teams_count, draft_type)
                    assert overall_to_draft_slot(overall, teams_count, draft_type) == (
                        round_number,
                        pick_in_round,
                    )

    @pytest.mark.parametrize("draft_type", [DraftType.LINEAR, DraftType.SNAKE])
    def test_bijective_over_whole_draft(self, draft_type):
        teams_count, rounds = 8, 5
        seen = {
            coordinate_to_overall(r, p, teams_count, draft_type)
            for r in range(1, rounds + 1)
            for p in range(1, teams_count + 1)
        }
        assert seen == set(range(1, teams_count * rounds + 1))

    @pytest.mark.parametrize(
        "round_number,pick_in_round,teams_count",
        [(0, 1, 10), (1, 0, 10), (1, 11, 10), (1, 1, 0)],
    )
    def test_rejects_out_of_range(self, round_number, pick_in_round, teams_count):
        with pytest.raises(InvalidArgument):
            coordinate_to_overall(round_number, pick_in_round, teams_count, DraftType.SNAKE)

    def test_rejects_unknown_draft_type(self):
        with pytest.raises(InvalidArgument):
            coordinate_to_overall(1, 1, 10, "AUCTION")


class TestDraftOrder:
    def test_snake_reverses_even_rounds(self):
        rows = build_draft_order(["a", "b", "c"], 3, DraftType.SNAKE)
        assert [r[3] for r in rows] == ["a", "b", "c", "c", "b", "a", "a", "b", "c"]
        assert [r[0] for r in rows] == list(range(1, 10))
        assert rows[3] == (4, 2, 1, "c")

    def test_linear_repeats_order(self):
        rows = build_draft_order(["a", "b"], 2, DraftType.LINEAR)
        assert [r[3] for r in rows] == ["a", "b", "a", "b"]

    def test_matches_coordinate_to_overall(self):
        team_ids = [f"t{i}" for i in range(1, 11)]
        rows = build_draft_order(team_ids, 4, DraftType.SNAKE)
        for slot, team_id in enumerate(team_ids, start=1):
            for round_number in range(1, 5):
                overall = coordinate_to_overall(round_number, slot, 10, DraftType.SNAKE)
                assert rows[overall - 1][3] == team_id

    def test_empty_order_rejected(self):
        with pytest.raises(InvalidArgument):
            build_draft_order([], 3, DraftType.SNAKE)


class TestFormatting:
    def test_format_pick_number(self):
        assert format_pick_number(1, 12) == "Round 1, Pick 1"
        assert format_pick_number(29, 12) == "Round 3, Pick 5"

    def test_format_pick_label(self):
        assert format_pick_label(2, 1) == "Round 2, Pick 1"

    @pytest.mark.parametrize(
        "n,expected",
        [(1, "1st"), (2, "2nd"), (3, "3rd"), (4, "4th"), (11, "11th"),
         (12, "12th"), (13, "13th"), (21, "21st"), (22, "22nd"), (101, "101st"), (111, "111th")],
    )
    def test_ordinal(self, n, expected):
        assert ordinal(n) == expected
