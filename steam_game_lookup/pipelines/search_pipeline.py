from __future__ import annotations

import logging
from typing import Any, Callable

from rapidfuzz import fuzz, process
from rapidfuzz.utils import default_process

from ..clients.parse import as_str
from ..config import MATCHING, PROFILE, SEARCH, MatchingConfig, ProfileConfig, SearchConfig
from ..schema import SearchCandidate

def candidate_from_item(item: dict[str, Any], *, profile: ProfileConfig = PROFILE) -> SearchCandidate | None:
    appid = as_str(item.get("id"))
    if not appid.isdigit():
        return None
    thumb = as_str(item.get("tiny_image")) or None
    return SearchCandidate(
        appid=appid,
        name=as_str(item.get("name")),
        thumbnail_url=thumb,
        capsule_image=f"{profile.cdn_base_url}/{appid}/{profile.search_capsule_file}",
    )


def search(
    term: str,
    fetch: Callable[[str], list[dict[str, Any]] | None],
    *,
    cfg: SearchConfig = SEARCH,
    profile: ProfileConfig = PROFILE,
) -> list[SearchCandidate]:
    """
    Search the store by free-text term.

    Terms shorter than `cfg.min_query_length` (after trimming) return [] without calling
    `fetch`. A failed request also returns []; search never raises for upstream problems.
    """
    query = str(term or "").strip()
    if len(query) < cfg.min_query_length:
        return []
    try:
        items = fetch(query)
    except Exception as e:
        logging.warning(f"Steam search failed for {query!r}: {type(e).__name__}: {e}")
        return []
    if items is None:
        logging.warning(f"Steam search failed for {query!r} (no response)")
        return []

    out: list[SearchCandidate] = []
    for it in items:
        if not isinstance(it, dict):
            continue
        cand = candidate_from_item(it, profile=profile)
        if cand is None:
            continue
        out.append(cand)
        if len(out) >= cfg.max_results:
            break
    return out


def lookup_appid(
    title: str,
    fetch: Callable[[str], list[dict[str, Any]] | None],
    *,
    matching: MatchingConfig = MATCHING,
    cfg: SearchConfig = SEARCH,
    profile: ProfileConfig = PROFILE,
) -> str | None:
    """
    Resolve a title to an app id by fuzzy-matching the store search results.

    Names are compared case- and punctuation-insensitively with token_sort_ratio; ties keep
    the store's relevance order. Returns None when nothing scores at least
    `matching.min_score`.
    """
    candidates = search(title, fetch, cfg=cfg, profile=profile)
    if not candidates:
        logging.warning(f"Not found on Steam: '{title}'. No results from API.")
        return None
    scored = process.extract(
        title,
        [c.name for c in candidates],
        scorer=fuzz.token_sort_ratio,
        processor=default_process,
        limit=None,
    )
    scored.sort(key=lambda m: (-m[1], m[2]))
    _, best_score, best_idx = scored[0]
    score = int(round(best_score))
    if score < matching.min_score:
        closest = [f"'{name}' ({int(round(s))}%)" for name, s, _ in scored[:5]]
        logging.warning(f"Not found on Steam: '{title}'. Closest matches: {', '.join(closest)}")
        return None
    best = candidates[best_idx]
    if score < 100:
        logging.warning(f"Close match for '{title}': Selected '{best.name}' (score: {score}%)")
    return best.appid
