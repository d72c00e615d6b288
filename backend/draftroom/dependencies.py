"""FastAPI dependencies: services are built around the store held on ``app.state``."""

from __future__ import annotations

from fastapi import Depends, Request

from .config import AppConfig
from .services.actions import KeeperActions
from .services.availability import AvailabilityResolver
from .services.draft_board import DraftBoard
from .services.keeper_service import KeeperService
from .services.store import LeagueStore


def get_config(request: Request) -> AppConfig:
    return request.app.state.config


def get_store(request: Request) -> LeagueStore:
    return request.app.state.store


def get_resolver(store: LeagueStore = Depends(get_store)) -> AvailabilityResolver:
    return AvailabilityResolver(store)


def get_keeper_service(
    store: LeagueStore = Depends(get_store),
    config: AppConfig = Depends(get_config),
) -> KeeperService:
    return KeeperService(store, fuzzy_threshold=config.fuzzy_match_threshold)


def get_keeper_actions(service: KeeperService = Depends(get_keeper_service)) -> KeeperActions:
    return KeeperActions(service)


def get_draft_board(store: LeagueStore = Depends(get_store)) -> DraftBoard:
    return DraftBoard(store)
