"""Overall pick <-> (round, pick-in-round) translation for linear and snake drafts.

Snake drafts reverse direction each even round::

    Round 1: 1, 2, 3, ..., N
    Round 2: N, ..., 3, 2, 1
    Round 3: 1, 2, 3, ..., N
"""

from __future__ import annotations

from typing import Union

from ..errors import InvalidArgument
from ..models.league import DraftType


def _require_int(name: str, value, minimum: int = 1) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgument(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise InvalidArgument(f"{name} must be >= {minimum}, got {value}")
    return value


def _require_draft_type(draft_type: Union[DraftType, str]) -> DraftType:
    try:
        return DraftType(draft_type)
    except ValueError:
        raise InvalidArgument(f"Unknown draft type '{draft_type}'") from None


def _is_reversed(round_number: int, draft_type: DraftType) -> bool:
    return draft_type == DraftType.SNAKE and round_number % 2 == 0


def overall_to_coordinate(overall: int, teams_count: int) -> tuple[int, int]:
    """Raw (round, pick_in_round) position of an overall pick.

    Ordering-agnostic: describes position within the round for display
    ("Round R, Pick P"), not which team owns the pick.
    """
    _require_int("overall", overall)
    _require_int("teams_count", teams_count)
    round_number = (overall - 1) // teams_count + 1
    pick_in_round = (overall - 1) % teams_count + 1
    return round_number, pick_in_round


def coordinate_to_overall(
    round_number: int,
    pick_in_round: int,
    teams_count: int,
    draft_type: Union[DraftType, str] = DraftType.SNAKE,
) -> int:
    """Overall pick for a team's slot in a round.

    ``pick_in_round`` is the team's draft position (1 = first in round 1).
    In snake drafts the slot is mirrored on even rounds.
    """
    _require_int("round", round_number)
    _require_int("teams_count", teams_count)
    _require_int("pick_in_round", pick_in_round)
    if pick_in_round > teams_count:
        raise InvalidArgument(
            f"pick_in_round must be between 1 and {teams_count}, got {pick_in_round}"
        )
    draft_type = _require_draft_type(draft_type)

    if _is_reversed(round_number, draft_type):
        effective_pick = teams_count - pick_in_round + 1
    else:
        effective_pick = pick_in_round
    return (round_number - 1) * teams_count + effective_pick


def overall_to_draft_slot(
    overall: int,
    teams_count: int,
    draft_type: Union[DraftType, str] = DraftType.SNAKE,
) -> tuple[int, int]:
    """Inverse of :func:`coordinate_to_overall`.

    Takes the raw coordinate and re-derives the team order for reversed
    rounds. Identical to :func:`overall_to_coordinate` for linear drafts.
    """
    draft_type = _require_draft_type(draft_type)
    round_number, pick_in_round = overall_to_coordinate(overall, teams_count)
    if _is_reversed(round_number, draft_type):
        pick_in_round = teams_count - pick_in_round + 1
    return round_number, pick_in_round


def format_pick_label(round_number: int, pick_in_round: int) -> str:
    return f"Round {round_number}, Pick {pick_in_round}"


def format_pick_number(overall: int, teams_count: int) -> str:
    """Format an overall pick as e.g. ``"Round 3, Pick 5"``."""
    return format_pick_label(*overall_to_coordinate(overall, teams_count))


def ordinal(n: int) -> str:
    """1 -> '1st', 2 -> '2nd', 11 -> '11th', 23 -> '23rd'."""
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def build_draft_order(
    team_ids: list[str],
    total_rounds: int,
    draft_type: Union[DraftType, str],
) -> list[tuple[int, int, int, str]]:
    """Every pick of the draft as ``(overall, round, pick_in_round, team_id)``.

    ``team_ids`` is the round-1 order.
    """
    _require_int("total_rounds", total_rounds)
    if not team_ids:
        raise InvalidArgument("Draft order needs at least one team")
    draft_type = _require_draft_type(draft_type)
    teams_count = len(team_ids)

    rows = []
    for round_number in range(1, total_rounds + 1):
        order = list(reversed(team_ids)) if _is_reversed(round_number, draft_type) else team_ids
        for pick_in_round, team_id in enumerate(order, start=1):
            overall = (round_number - 1) * teams_count + pick_in_round
            rows.append((overall, round_number, pick_in_round, team_id))
    return rows
