"""
Steam Deck compatibility detection.

Three tiers, first non-Unknown wins:

1. the structured `steam_deck_compatibility.category` field of appdetails,
2. marker substrings in the public store page markup,
3. Linux platform support, which only implies "playable" as a floor. A native Linux build
   does not guarantee that a game is verified (or even playable) on the Deck; this tier is a
   heuristic, not a rating.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from ..clients.parse import as_int, as_str
from ..schema import CompatibilityTier
from .probes import Probe, first_signal

# Steam's numeric report categories (same scale as the deck compatibility report endpoint).
NUMERIC_CATEGORIES = {
    3: CompatibilityTier.VERIFIED,
    2: CompatibilityTier.PLAYABLE,
    1: CompatibilityTier.UNSUPPORTED,
    0: CompatibilityTier.UNKNOWN,
}

# Checked in this order; the first family with any marker present wins.
PAGE_MARKERS: tuple[tuple[CompatibilityTier, tuple[str, ...]], ...] = (
    (
        CompatibilityTier.VERIFIED,
        ("deck_compatibility_category_verified", "Steam Deck Verified", "deck_verified"),
    ),
    (
        CompatibilityTier.PLAYABLE,
        ("deck_compatibility_category_playable", "Steam Deck Playable", "deck_playable"),
    ),
    (
        CompatibilityTier.UNSUPPORTED,
        (
            "deck_compatibility_category_unsupported",
            "Steam Deck Unsupported",
            "deck_unsupported",
        ),
    ),
)

DECK_SECTION_HEADER = "STEAM DECK COMPATIBILITY"


def tier_from_value(value: object) -> CompatibilityTier:
    """Map a raw category (string or Steam's numeric code) onto CompatibilityTier."""
    n = as_int(value)
    if n is not None:
        return NUMERIC_CATEGORIES.get(n, CompatibilityTier.UNKNOWN)
    s = as_str(value).casefold()
    for tier in CompatibilityTier:
        if s == tier.value:
            return tier
    return CompatibilityTier.UNKNOWN


def _known(tier: CompatibilityTier | None) -> CompatibilityTier | None:
    if tier is None or tier is CompatibilityTier.UNKNOWN:
        return None
    return tier


def from_store_details(details: dict[str, Any]) -> CompatibilityTier | None:
    compat = details.get("steam_deck_compatibility")
    if not isinstance(compat, dict):
        return None
    return _known(tier_from_value(compat.get("category")))


def from_store_page(markup: object, *, appid: str = "") -> CompatibilityTier | None:
    if not isinstance(markup, str) or not markup:
        return None
    for tier, markers in PAGE_MARKERS:
        if any(m in markup for m in markers):
            return tier
    if DECK_SECTION_HEADER in markup:
        logging.info(
            f"[DECK] appid={appid}: compatibility section present but no status marker found"
        )
    return None


def from_platforms(details: dict[str, Any]) -> CompatibilityTier | None:
    platforms = details.get("platforms")
    if isinstance(platforms, dict) and platforms.get("linux"):
        return CompatibilityTier.PLAYABLE
    return None


def deck_probes(
    appid: str,
    details: dict[str, Any],
    *,
    fetch_page: Callable[[str], Any],
) -> list[Probe]:
    return [
        ("store_api", lambda: from_store_details(details)),
        ("store_page", lambda: from_store_page(fetch_page(appid), appid=appid)),
        ("linux_fallback", lambda: from_platforms(details)),
    ]


def detect_deck_compatibility(
    appid: str,
    details: dict[str, Any],
    *,
    fetch_page: Callable[[str], Any],
) -> tuple[CompatibilityTier, str | None]:
    """Return (tier, source); source is None when every tier was silent."""
    source, tier = first_signal(
        deck_probes(appid, details, fetch_page=fetch_page),
        context=f"deck appid={appid}",
    )
    if tier is None:
        logging.info(f"[DECK] appid={appid}: unknown")
        return CompatibilityTier.UNKNOWN, None
    logging.info(f"[DECK] appid={appid}: {tier.value} via {source}")
    return tier, source
