from __future__ import annotations

import logging
from typing import Any

from ..clients.parse import as_str, descriptions, get_list_of_dicts, normalize_str_list
from ..clients.steam_client import SteamSources
from ..config import HEURISTICS, PROFILE, HeuristicsConfig, ProfileConfig
from ..errors import NotFound
from ..schema import GameProfile, PlatformSupport, ProfileDiagnostics
from ..signals.achievements import detect_achievements
from ..signals.cloud import CloudRule, detect_cloud_support
from ..signals.deck import detect_deck_compatibility


def fetch_details(appid: str, sources: SteamSources) -> dict[str, Any]:
    """
    Fetch the primary appdetails record.

    UpstreamError from the source propagates; a missing or unsuccessful record raises NotFound.
    """
    if not appid.isdigit():
        raise NotFound(appid)
    entry = sources.app_details(appid)
    if not isinstance(entry, dict) or not entry.get("success"):
        raise NotFound(appid)
    details = entry.get("data")
    if not isinstance(details, dict) or not details:
        raise NotFound(appid)
    return details


def _first(values: Any) -> str | None:
    items = normalize_str_list(values)
    return items[0] if items else None


def _platforms(details: dict[str, Any]) -> PlatformSupport:
    raw = details.get("platforms")
    if not isinstance(raw, dict):
        return PlatformSupport()
    return PlatformSupport(
        windows=bool(raw.get("windows")),
        mac=bool(raw.get("mac")),
        linux=bool(raw.get("linux")),
    )


def _screenshots(details: dict[str, Any], limit: int) -> tuple[str, ...]:
    out: list[str] = []
    for shot in get_list_of_dicts(details.get("screenshots"))[:limit]:
        thumb = as_str(shot.get("path_thumbnail"))
        if thumb:
            out.append(thumb)
    return tuple(out)


def resolve_profile(
    appid: str,
    sources: SteamSources,
    *,
    cloud_rules: tuple[tuple[str, CloudRule], ...] | None = None,
    heuristics: HeuristicsConfig = HEURISTICS,
    profile: ProfileConfig = PROFILE,
) -> GameProfile:
    """
    Build the merged profile for one app id.

    Raises UpstreamError when the primary appdetails request fails and NotFound when it has
    no record for the id. Every secondary probe degrades to "no signal" instead of raising.
    """
    appid = str(appid or "").strip()
    details = fetch_details(appid, sources)
    name = as_str(details.get("name"))
    logging.info(f"Resolving profile for '{name}' (appid={appid})")

    achievements, achievement_source = detect_achievements(
        appid,
        details,
        fetch_schema=sources.achievement_schema,
        fetch_page=sources.achievements_page,
    )
    deck, deck_source = detect_deck_compatibility(appid, details, fetch_page=sources.store_page)
    cloud, cloud_source = detect_cloud_support(appid, details, rules=cloud_rules, cfg=heuristics)

    raw_deck = details.get("steam_deck_compatibility")
    release = details.get("release_date")
    cdn = f"{profile.cdn_base_url}/{appid}"
    return GameProfile(
        appid=appid,
        name=name,
        header_image=as_str(details.get("header_image")),
        capsule_image=f"{cdn}/{profile.capsule_file}",
        hero_image=f"{cdn}/{profile.hero_file}",
        screenshots=_screenshots(details, profile.max_screenshots),
        short_description=as_str(details.get("short_description")),
        release_date=as_str(release.get("date")) if isinstance(release, dict) else "",
        developer=_first(details.get("developers")),
        publisher=_first(details.get("publishers")),
        achievements=achievements,
        deck_compatibility=deck,
        cloud_supported=cloud,
        categories=tuple(descriptions(details.get("categories"))),
        genres=tuple(descriptions(details.get("genres"))),
        platforms=_platforms(details),
        diagnostics=ProfileDiagnostics(
            achievement_source=achievement_source,
            deck_source=deck_source,
            store_api_deck_value=raw_deck,
            cloud_source=cloud_source,
        ),
    )
