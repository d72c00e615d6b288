"""Request-boundary keeper actions.

Each action returns an :class:`ActionResult` envelope. Failures become
``success=False`` with a display message; no exception escapes.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

from pydantic import BaseModel

from ..errors import DraftRoomError
from ..models.league import KeeperSelection
from .keeper_service import KeeperService

logger = logging.getLogger(__name__)


class ActionResult(BaseModel):
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: Any = None) -> "ActionResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> "ActionResult":
        return cls(success=False, error=error)


class KeeperActions:
    def __init__(self, keeper_service: KeeperService):
        self.keeper_service = keeper_service

    def get_potential_keepers(self, team_id: str, league_id: str) -> ActionResult:
        try:
            players = self.keeper_service.get_potential_keepers(team_id, league_id)
        except DraftRoomError as exc:
            logger.warning(
                f"Failed to get potential keepers (league={league_id}, team={team_id}): {exc}"
            )
            return ActionResult.fail(str(exc))
        except Exception as exc:
            logger.exception(
                f"Unexpected error getting potential keepers (league={league_id}, team={team_id})"
            )
            return ActionResult.fail(str(exc) or exc.__class__.__name__)
        return ActionResult.ok([p.model_dump(mode="json") for p in players])

    def save_keepers(
        self,
        team_id: str,
        league_id: str,
        selections: list[Union[KeeperSelection, dict]],
    ) -> ActionResult:
        try:
            self.keeper_service.save_keepers(team_id, league_id, selections)
        except DraftRoomError as exc:
            logger.warning(f"Failed to save keepers (league={league_id}, team={team_id}): {exc}")
            return ActionResult.fail(str(exc))
        except Exception as exc:
            logger.exception(
                f"Unexpected error saving keepers (league={league_id}, team={team_id})"
            )
            return ActionResult.fail(str(exc) or exc.__class__.__name__)
        return ActionResult.ok()
