from __future__ import annotations

import logging
from typing import Any, Callable

from ..clients.parse import as_positive_int, as_str, get_list_of_dicts
from ..schema import AchievementDescriptor, AchievementSummary
from .probes import Probe, first_signal

# Each achievement on the community stats page is rendered as one row with this class.
ACHIEVEMENT_ROW_MARKER = "achieveRow"


def summary_from_count(
    count: object, details: tuple[AchievementDescriptor, ...] = ()
) -> AchievementSummary | None:
    """
    Build a summary only from a positive integer count.

    Zero, negative, missing and non-integer counts are all "no signal".
    """
    total = as_positive_int(count)
    if total is None:
        return None
    return AchievementSummary(total=total, details=details)


def descriptor_from_schema(entry: dict[str, Any]) -> AchievementDescriptor:
    return AchievementDescriptor(
        key=as_str(entry.get("name")),
        display_name=as_str(entry.get("displayName")),
        description=as_str(entry.get("description")),
        icon_unlocked=as_str(entry.get("icon")),
        icon_locked=as_str(entry.get("icongray")),
    )


def from_schema(schema: object) -> AchievementSummary | None:
    entries = get_list_of_dicts(schema)
    if not entries:
        return None
    details = tuple(descriptor_from_schema(e) for e in entries)
    return summary_from_count(len(details), details)


def from_store_details(details: dict[str, Any]) -> AchievementSummary | None:
    """Trust the embedded appdetails count only when it is a real number above zero."""
    embedded = details.get("achievements")
    if not isinstance(embedded, dict):
        return None
    return summary_from_count(embedded.get("total"))


def from_community_page(markup: object) -> AchievementSummary | None:
    if not isinstance(markup, str) or not markup:
        return None
    return summary_from_count(markup.count(ACHIEVEMENT_ROW_MARKER))


def achievement_probes(
    appid: str,
    details: dict[str, Any],
    *,
    fetch_schema: Callable[[str], Any],
    fetch_page: Callable[[str], Any],
) -> list[Probe]:
    return [
        ("schema", lambda: from_schema(fetch_schema(appid))),
        ("store_api", lambda: from_store_details(details)),
        ("community_page", lambda: from_community_page(fetch_page(appid))),
    ]


def detect_achievements(
    appid: str,
    details: dict[str, Any],
    *,
    fetch_schema: Callable[[str], Any],
    fetch_page: Callable[[str], Any],
) -> tuple[AchievementSummary | None, str | None]:
    """
    Return (summary, source) using the first probe that reports a positive count.

    The schema endpoint is authoritative and the only one that yields descriptors; the
    embedded appdetails count and the community page row count are fallbacks.
    """
    source, summary = first_signal(
        achievement_probes(appid, details, fetch_schema=fetch_schema, fetch_page=fetch_page),
        context=f"achievements appid={appid}",
    )
    if summary is None:
        logging.info(f"[ACHIEVEMENTS] appid={appid}: none found")
        return None, None
    logging.info(f"[ACHIEVEMENTS] appid={appid}: {summary.total} via {source}")
    return summary, source
