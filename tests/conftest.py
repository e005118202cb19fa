from __future__ import annotations

from typing import Any

import pytest


class FakeSteam:
    """
    Deterministic stand-ins for the Steam upstreams, recording every call.

    Set an attribute to an Exception instance to make that upstream raise.
    """

    def __init__(
        self,
        *,
        details: dict[str, Any] | None = None,
        search_items: list[dict[str, Any]] | None | Exception = None,
        schema: list[dict[str, Any]] | None | Exception = None,
        store_page: str | None | Exception = None,
        achievements_page: str | None | Exception = None,
        app_details_entry: Any = None,
    ):
        self.details = details
        self.search_items = search_items
        self.schema = schema
        self.store_page = store_page
        self.achievements_page = achievements_page
        self.app_details_entry = app_details_entry
        self.calls: list[tuple[str, str]] = []

    def _answer(self, name: str, arg: str, value: Any) -> Any:
        self.calls.append((name, arg))
        if isinstance(value, Exception):
            raise value
        return value

    def calls_to(self, name: str) -> int:
        return sum(1 for n, _ in self.calls if n == name)

    def sources(self):
        from steam_game_lookup.clients.steam_client import SteamSources

        def app_details(appid: str) -> Any:
            if self.app_details_entry is not None:
                return self._answer("app_details", appid, self.app_details_entry)
            if self.details is None:
                return self._answer("app_details", appid, {"success": False})
            return self._answer("app_details", appid, {"success": True, "data": self.details})

        return SteamSources(
            search=lambda term: self._answer("search", term, self.search_items),
            app_details=app_details,
            achievement_schema=lambda appid: self._answer("achievement_schema", appid, self.schema),
            store_page=lambda appid: self._answer("store_page", appid, self.store_page),
            achievements_page=lambda appid: self._answer(
                "achievements_page", appid, self.achievements_page
            ),
        )


@pytest.fixture
def fake_steam():
    return FakeSteam
