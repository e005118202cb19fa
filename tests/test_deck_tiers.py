from __future__ import annotations

import pytest


def _detect(steam, details):
    from steam_game_lookup.signals.deck import detect_deck_compatibility

    return detect_deck_compatibility("620", details, fetch_page=steam.sources().store_page)


def test_structured_category_is_adopted_without_scraping(fake_steam):
    from steam_game_lookup.schema import CompatibilityTier

    steam = fake_steam(store_page="deck_compatibility_category_unsupported")
    tier, source = _detect(steam, {"steam_deck_compatibility": {"category": "Verified"}})
    assert tier is CompatibilityTier.VERIFIED
    assert source == "store_api"
    assert steam.calls_to("store_page") == 0


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (3, "verified"),
        (2, "playable"),
        (1, "unsupported"),
        (0, "unknown"),
        ("playable", "playable"),
        ("UNSUPPORTED", "unsupported"),
        ("great", "unknown"),
        (None, "unknown"),
    ],
)
def test_tier_from_value(raw, expected):
    from steam_game_lookup.signals.deck import tier_from_value

    assert tier_from_value(raw).value == expected


def test_unrecognized_structured_value_falls_through_to_page(fake_steam):
    from steam_game_lookup.schema import CompatibilityTier

    steam = fake_steam(store_page="<span>Steam Deck Playable</span>")
    tier, source = _detect(steam, {"steam_deck_compatibility": {"category": "mystery"}})
    assert tier is CompatibilityTier.PLAYABLE
    assert source == "store_page"


def test_verified_marker_beats_playable_marker_on_same_page(fake_steam):
    from steam_game_lookup.schema import CompatibilityTier

    page = (
        '<div class="deck_compatibility_category_playable"></div>'
        '<div class="deck_compatibility_category_verified"></div>'
    )
    tier, _ = _detect(fake_steam(store_page=page), {})
    assert tier is CompatibilityTier.VERIFIED


def test_playable_marker_beats_unsupported_marker(fake_steam):
    from steam_game_lookup.schema import CompatibilityTier

    tier, _ = _detect(fake_steam(store_page="deck_unsupported deck_playable"), {})
    assert tier is CompatibilityTier.PLAYABLE


def test_linux_support_falls_back_to_playable(fake_steam):
    from steam_game_lookup.schema import CompatibilityTier

    details = {"platforms": {"windows": True, "mac": False, "linux": True}}
    steam = fake_steam(store_page="<html>nothing about the deck</html>")
    tier, source = _detect(steam, details)
    assert tier is CompatibilityTier.PLAYABLE
    assert source == "linux_fallback"
    assert steam.calls_to("store_page") == 1


def test_section_header_alone_stays_unknown(fake_steam):
    from steam_game_lookup.schema import CompatibilityTier

    steam = fake_steam(store_page="<h2>STEAM DECK COMPATIBILITY</h2>")
    tier, source = _detect(steam, {"platforms": {"linux": False}})
    assert tier is CompatibilityTier.UNKNOWN
    assert source is None


def test_store_page_failure_is_not_fatal(fake_steam):
    from steam_game_lookup.schema import CompatibilityTier

    steam = fake_steam(store_page=ConnectionError("reset"))
    assert _detect(steam, {}) == (CompatibilityTier.UNKNOWN, None)
    tier, source = _detect(steam, {"platforms": {"linux": True}})
    assert (tier, source) == (CompatibilityTier.PLAYABLE, "linux_fallback")


def test_unsupported_marker_wins_when_alone(fake_steam):
    from steam_game_lookup.schema import CompatibilityTier

    page = '<div class="deck_compatibility_category_unsupported">Steam Deck Unsupported</div>'
    tier, source = _detect(fake_steam(store_page=page), {"platforms": {"linux": True}})
    assert tier is CompatibilityTier.UNSUPPORTED
    assert source == "store_page"
