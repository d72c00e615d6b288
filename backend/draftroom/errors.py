"""Error taxonomy shared by the translator, resolver, and keeper services."""

from __future__ import annotations

from typing import Iterable, Optional


class DraftRoomError(Exception):
    """Base class for every error raised by draft room services."""


class InvalidArgument(DraftRoomError, ValueError):
    """Malformed pick coordinates or league sizes."""


class ValidationFailed(DraftRoomError):
    """A submission breaks ownership, limit, or availability rules."""

    def __init__(self, message: str, player_ids: Optional[Iterable[str]] = None):
        super().__init__(message)
        self.player_ids = sorted(set(player_ids or []))


class StorageError(DraftRoomError):
    """The backing store failed to read or write."""


class InconsistentState(DraftRoomError):
    """Players are both kept and drafted in the same league."""

    def __init__(self, message: str, player_ids: Optional[Iterable[str]] = None):
        super().__init__(message)
        self.player_ids = sorted(set(player_ids or []))
