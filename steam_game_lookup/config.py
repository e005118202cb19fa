from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml


@dataclass(frozen=True)
class RequestConfig:
    timeout_s: int = 10
    # Steam's store endpoints serve reduced markup to unknown clients.
    user_agent: str = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"


@dataclass(frozen=True)
class SteamConfig:
    appdetails_url: str = "https://store.steampowered.com/api/appdetails"
    storesearch_url: str = "https://store.steampowered.com/api/storesearch/"
    schema_url: str = "https://api.steampowered.com/ISteamUserStats/GetSchemaForGame/v2/"
    store_page_url: str = "https://store.steampowered.com/app/{appid}/"
    achievements_page_url: str = "https://steamcommunity.com/stats/{appid}/achievements/"
    language: str = "english"
    country: str = "US"


@dataclass(frozen=True)
class SearchConfig:
    min_query_length: int = 2
    max_results: int = 10


@dataclass(frozen=True)
class ProfileConfig:
    max_screenshots: int = 4
    cdn_base_url: str = "https://cdn.akamai.steamstatic.com/steam/apps"
    search_capsule_file: str = "capsule_231x87.jpg"
    capsule_file: str = "capsule_616x353.jpg"
    hero_file: str = "page_bg_generated_v6b.jpg"


@dataclass(frozen=True)
class HeuristicsConfig:
    """
    Thresholds for the Steam Cloud detector.

    The release-year/language rule is a low-confidence guess; it can be switched off without
    touching the category/feature checks.
    """

    cloud_category_id: int = 23
    cloud_release_rule_enabled: bool = True
    cloud_release_min_year: int = 2018
    # Strictly more than this many languages.
    cloud_min_languages: int = 5


@dataclass(frozen=True)
class MatchingConfig:
    min_score: int = 65


@dataclass(frozen=True)
class ServerConfig:
    host: str = "127.0.0.1"
    port: int = 8000


REQUEST = RequestConfig()
STEAM = SteamConfig()
SEARCH = SearchConfig()
PROFILE = ProfileConfig()
HEURISTICS = HeuristicsConfig()
MATCHING = MatchingConfig()
SERVER = ServerConfig()

_SECTIONS: dict[str, Any] = {
    "request": REQUEST,
    "steam": STEAM,
    "search": SEARCH,
    "profile": PROFILE,
    "heuristics": HEURISTICS,
    "matching": MATCHING,
    "server": SERVER,
}


def load_config_overrides(path: str | Path | None) -> dict[str, Any]:
    """
    Load a YAML overrides file and return replaced config instances keyed by section.

    Example:

        heuristics:
          cloud_release_rule_enabled: false
        server:
          port: 9000

    Sections not present in the file keep their defaults; `None` returns all defaults.
    """
    if path is None:
        return dict(_SECTIONS)
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config file not found: {p}")
    with open(p, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config file must contain a mapping at the top level: {p}")

    out: dict[str, Any] = dict(_SECTIONS)
    for section, values in raw.items():
        base = _SECTIONS.get(str(section))
        if base is None:
            raise ValueError(f"Unknown config section {section!r} in {p}")
        if not isinstance(values, dict):
            raise ValueError(f"Config section {section!r} must be a mapping")
        allowed = {f.name for f in fields(base)}
        unknown = sorted(set(values) - allowed)
        if unknown:
            raise ValueError(f"Unknown keys for {section!r}: {', '.join(unknown)}")
        out[str(section)] = replace(base, **values)
    return out
