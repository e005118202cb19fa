from __future__ import annotations

import logging
from typing import Any, Callable

from ..clients.parse import as_int, as_str, count_listed_languages, get_list_of_dicts, year_from_text
from ..config import HEURISTICS, HeuristicsConfig
from .probes import first_signal

# A rule inspects appdetails and returns True when it detects Steam Cloud, None otherwise.
CloudRule = Callable[[dict[str, Any], HeuristicsConfig], "bool | None"]


def category_rule(details: dict[str, Any], cfg: HeuristicsConfig) -> bool | None:
    for cat in get_list_of_dicts(details.get("categories")):
        if as_int(cat.get("id")) == cfg.cloud_category_id:
            return True
    return None


def features_rule(details: dict[str, Any], cfg: HeuristicsConfig) -> bool | None:
    for feature in get_list_of_dicts(details.get("features")):
        if as_int(feature.get("id")) == cfg.cloud_category_id:
            return True
        if "cloud" in as_str(feature.get("description")).casefold():
            return True
    return None


def release_year_language_rule(details: dict[str, Any], cfg: HeuristicsConfig) -> bool | None:
    """
    Speculative: recent, widely localized releases usually ship with cloud saves.

    Low confidence. This guesses from release year and language count, it does not observe
    cloud support; leave it out of the rule list to report only store-declared support.
    """
    languages = count_listed_languages(details.get("supported_languages"))
    if not languages:
        return None
    release = details.get("release_date")
    year = year_from_text(release.get("date")) if isinstance(release, dict) else None
    if year is None or year < cfg.cloud_release_min_year:
        return None
    if languages > cfg.cloud_min_languages:
        return True
    return None


DECLARED_RULES: tuple[tuple[str, CloudRule], ...] = (
    ("categories", category_rule),
    ("features", features_rule),
)
SPECULATIVE_RULES: tuple[tuple[str, CloudRule], ...] = (
    ("release_heuristic", release_year_language_rule),
)


def default_cloud_rules(cfg: HeuristicsConfig = HEURISTICS) -> tuple[tuple[str, CloudRule], ...]:
    if cfg.cloud_release_rule_enabled:
        return DECLARED_RULES + SPECULATIVE_RULES
    return DECLARED_RULES


def detect_cloud_support(
    appid: str,
    details: dict[str, Any],
    *,
    rules: tuple[tuple[str, CloudRule], ...] | None = None,
    cfg: HeuristicsConfig = HEURISTICS,
) -> tuple[bool, str | None]:
    """Return (cloud_supported, source) from the first applicable rule."""
    if rules is None:
        rules = default_cloud_rules(cfg)
    source, found = first_signal(
        [(name, lambda rule=rule: rule(details, cfg)) for name, rule in rules],
        context=f"cloud appid={appid}",
        is_signal=bool,
    )
    if not found:
        logging.info(f"[CLOUD] appid={appid}: not detected")
        return False, None
    if source in {name for name, _ in SPECULATIVE_RULES}:
        logging.info(f"[CLOUD] appid={appid}: assumed via {source} (low confidence)")
    else:
        logging.info(f"[CLOUD] appid={appid}: detected via {source}")
    return True, source
