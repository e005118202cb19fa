"""
FastAPI application exposing catalog search and game profiles.

    GET /search?q=<term>   -> {"results": [...]}            (always 200)
    GET /game/{appid}      -> profile | {"error": ...}      (200 / 404 / 500)
    GET /health            -> {"status": "ok"}
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Iterator

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse

from .. import __version__
from ..clients.steam_client import SteamClient, SteamSources
from ..config import load_config_overrides
from ..errors import NotFound, UpstreamError
from ..pipelines.profile_pipeline import resolve_profile
from ..pipelines.search_pipeline import search

logger = logging.getLogger(__name__)


def get_settings(request: Request) -> dict[str, Any]:
    return request.app.state.settings


def get_sources(settings: dict[str, Any] = Depends(get_settings)) -> Iterator[SteamSources]:
    """One client (and HTTP session) per request; nothing is shared between requests."""
    client = SteamClient(steam=settings["steam"], request=settings["request"])
    try:
        yield client.sources()
    finally:
        logger.debug(f"[STEAM] {client.format_stats()}")
        client.close()


def create_app(config_path: str | None = None) -> FastAPI:
    settings = load_config_overrides(config_path)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("steam-game-lookup API starting")
        yield
        logger.info("steam-game-lookup API shutting down")

    app = FastAPI(
        title="Steam Game Lookup",
        description="Search Steam's catalog and view one game's profile",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/search")
    def search_games(
        q: str = Query(default=""),
        sources: SteamSources = Depends(get_sources),
        settings: dict[str, Any] = Depends(get_settings),
    ) -> dict[str, Any]:
        try:
            results = search(q, sources.search, cfg=settings["search"], profile=settings["profile"])
        except Exception:
            logger.exception(f"Search API error for q={q!r}")
            results = []
        return {"results": [r.to_dict() for r in results]}

    @app.get("/game/{appid}")
    def get_game(
        appid: str,
        sources: SteamSources = Depends(get_sources),
        settings: dict[str, Any] = Depends(get_settings),
    ):
        try:
            profile = resolve_profile(
                appid,
                sources,
                heuristics=settings["heuristics"],
                profile=settings["profile"],
            )
        except NotFound:
            return JSONResponse(status_code=404, content={"error": "Game not found"})
        except UpstreamError as e:
            logger.error(f"Game API error for appid={appid}: {e}")
            return JSONResponse(status_code=500, content={"error": "Failed to fetch game data"})
        return profile.to_dict()

    return app
