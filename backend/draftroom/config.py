"""Application and league-default configuration for the draft room."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

from .models.league import DraftSettings

_DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


class AppConfig(BaseModel):
    app_name: str = "Keeper Draft Room"
    data_dir: Path = _DEFAULT_DATA_DIR

    # Applied when a league is created without explicit draft settings
    draft: DraftSettings = DraftSettings()

    # Draft room player pool is capped for display
    available_limit: int = 500

    # thefuzz token_sort_ratio cutoff for keeper CSV name matching
    fuzzy_match_threshold: int = 80

    cors_origins: list = ["http://localhost:5173", "http://localhost:3000"]

    @property
    def state_file(self) -> Path:
        return self.data_dir / "league_state.json"


def load_config(data_dir: Optional[str] = None) -> AppConfig:
    """Build config, honouring ``DRAFTROOM_DATA_DIR`` when set."""
    data_dir = data_dir or os.environ.get("DRAFTROOM_DATA_DIR")
    if data_dir:
        return AppConfig(data_dir=Path(data_dir))
    return AppConfig()


# Default app config
settings = load_config()
