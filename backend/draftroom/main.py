"""FastAPI entry point for the Keeper Draft Room."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from .config import AppConfig, settings
from .dependencies import get_config, get_store
from .errors import StorageError
from .routers import draft, keepers, leagues, players
from .services.store import LeagueStore

logger = logging.getLogger(__name__)


def create_app(store: Optional[LeagueStore] = None, config: Optional[AppConfig] = None) -> FastAPI:
    """Build the app around *store*; a fresh store restores the saved state on startup."""
    config = config or settings
    restore_on_start = store is None
    store = store if store is not None else LeagueStore()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if restore_on_start and config.state_file.exists():
            try:
                store.load(config.state_file)
            except StorageError as e:
                logger.warning(f"Could not restore league state: {e}")
        yield

    app = FastAPI(
        title=config.app_name,
        description="Fantasy league keeper selection and draft pick engine",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.store = store
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(players.router, prefix="/api/players", tags=["players"])
    app.include_router(leagues.router, prefix="/api/leagues", tags=["leagues"])
    app.include_router(keepers.router, prefix="/api/leagues", tags=["keepers"])
    app.include_router(draft.router, prefix="/api", tags=["draft"])

    @app.get("/api/health")
    def health():
        return {"status": "ok"}

    @app.post("/api/state/save")
    def save_state(
        store: LeagueStore = Depends(get_store),
        config: AppConfig = Depends(get_config),
    ):
        """Save every league, roster and pick to JSON."""
        try:
            filepath = store.save(config.state_file)
        except StorageError as e:
            raise HTTPException(status_code=500, detail=str(e))
        return {"status": "saved", "filepath": filepath}

    @app.post("/api/state/load")
    def load_state(
        store: LeagueStore = Depends(get_store),
        config: AppConfig = Depends(get_config),
    ):
        """Replace in-memory state with the saved JSON."""
        try:
            snapshot = store.load(config.state_file)
        except FileNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
        except StorageError as e:
            raise HTTPException(status_code=500, detail=str(e))
        return {
            "status": "loaded",
            "leagues": len(snapshot.leagues),
            "players": len(snapshot.players),
        }

    return app


app = create_app()
