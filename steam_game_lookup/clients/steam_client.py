from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

import requests

from ..config import REQUEST, STEAM, RequestConfig, SteamConfig
from .http_client import ConfiguredHTTPClient, HTTPClient, HTTPRequestDefaults
from .parse import get_list_of_dicts


@dataclass(frozen=True)
class SteamSources:
    """
    Upstream capabilities consumed by the search and profile pipelines.

    Each member is a plain callable so tests can substitute deterministic stand-ins:

    - search(term) -> list of storesearch items, or None when the request failed
    - app_details(appid) -> appdetails entry ({"success": ..., "data": {...}}) or None;
      raises UpstreamError on transport failure
    - achievement_schema(appid) -> list of schema achievement dicts, or None
    - store_page(appid) -> store page markup, or None
    - achievements_page(appid) -> community achievements page markup, or None
    """

    search: Callable[[str], list[dict[str, Any]] | None]
    app_details: Callable[[str], dict[str, Any] | None]
    achievement_schema: Callable[[str], list[dict[str, Any]] | None]
    store_page: Callable[[str], str | None]
    achievements_page: Callable[[str], str | None]


class SteamClient:
    def __init__(
        self,
        *,
        steam: SteamConfig = STEAM,
        request: RequestConfig = REQUEST,
        session: requests.Session | None = None,
    ):
        self._session = session or requests.Session()
        self.steam = steam
        self.stats: dict[str, int] = {
            # HTTP request counters (one attempt per call; there is no retry).
            "http_storesearch": 0,
            "http_appdetails": 0,
            "http_schema": 0,
            "http_store_page": 0,
            "http_achievements_page": 0,
        }
        base_http = HTTPClient(self._session, stats=self.stats)
        headers = {"User-Agent": request.user_agent}

        def _endpoint(counter_key: str, context_prefix: str, *, quiet: bool) -> ConfiguredHTTPClient:
            return ConfiguredHTTPClient(
                base_http,
                HTTPRequestDefaults(
                    timeout_s=request.timeout_s,
                    headers=headers,
                    counter_key=counter_key,
                    context_prefix=context_prefix,
                    quiet=quiet,
                ),
            )

        self._storesearch_http = _endpoint("http_storesearch", "Steam storesearch", quiet=False)
        self._appdetails_http = _endpoint("http_appdetails", "Steam appdetails", quiet=False)
        # Secondary probes: failures are expected and only logged at DEBUG.
        self._schema_http = _endpoint("http_schema", "Steam achievement schema", quiet=True)
        self._store_page_http = _endpoint("http_store_page", "Steam store page", quiet=True)
        self._achievements_page_http = _endpoint(
            "http_achievements_page", "Steam community achievements", quiet=True
        )

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> SteamClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    # -------------------------------------------------
    # Search
    # -------------------------------------------------
    def search_store(self, term: str) -> list[dict[str, Any]] | None:
        data = self._storesearch_http.get_json(
            self.steam.storesearch_url,
            params={"term": term, "l": self.steam.language, "cc": self.steam.country},
            context=f"term={term!r}",
            on_fail_return=None,
        )
        if not isinstance(data, dict):
            return None
        return get_list_of_dicts(data.get("items"))

    # -------------------------------------------------
    # Game details
    # -------------------------------------------------
    def get_app_details(self, appid: str) -> dict[str, Any] | None:
        """
        Return the appdetails entry for one app id ({"success": bool, "data": {...}}).

        Raises UpstreamError when the request itself fails (transport error, non-2xx status,
        undecodable body). Returns None when the response has no entry for the id.
        """
        data = self._appdetails_http.get_json(
            self.steam.appdetails_url,
            params={"appids": appid, "l": self.steam.language},
            context=f"appid={appid}",
            on_fail_return=None,
            raise_on_failure=True,
        )
        if not isinstance(data, dict):
            return None
        entry = data.get(str(appid))
        if not isinstance(entry, dict):
            return None
        return entry

    def get_achievement_schema(self, appid: str) -> list[dict[str, Any]] | None:
        data = self._schema_http.get_json(
            self.steam.schema_url,
            params={"appid": appid},
            context=f"appid={appid}",
            on_fail_return=None,
        )
        if not isinstance(data, dict):
            return None
        game = data.get("game")
        if not isinstance(game, dict):
            return None
        stats = game.get("availableGameStats")
        if not isinstance(stats, dict):
            return None
        achievements = stats.get("achievements")
        if not isinstance(achievements, list):
            return None
        return get_list_of_dicts(achievements)

    def get_store_page(self, appid: str) -> str | None:
        return self._store_page_http.get_text(
            self.steam.store_page_url.format(appid=appid),
            context=f"appid={appid}",
            on_fail_return=None,
        )

    def get_achievements_page(self, appid: str) -> str | None:
        return self._achievements_page_http.get_text(
            self.steam.achievements_page_url.format(appid=appid),
            context=f"appid={appid}",
            on_fail_return=None,
        )

    def sources(self) -> SteamSources:
        return SteamSources(
            search=self.search_store,
            app_details=self.get_app_details,
            achievement_schema=self.get_achievement_schema,
            store_page=self.get_store_page,
            achievements_page=self.get_achievements_page,
        )

    def format_stats(self) -> str:
        s = self.stats
        base = " ".join(
            HTTPClient.format_timing(s, key=k)
            for k in (
                "http_storesearch",
                "http_appdetails",
                "http_schema",
                "http_store_page",
                "http_achievements_page",
            )
        )
        failures = int(s.get("request_failures", 0) or 0)
        if failures:
            base += (
                f", failures={failures} network={int(s.get('network_failures', 0) or 0)}"
                f" http={int(s.get('http_failures', 0) or 0)}"
            )
        return base
