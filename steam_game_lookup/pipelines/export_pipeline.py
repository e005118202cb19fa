from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pandas as pd

from ..clients.steam_client import SteamSources
from ..config import load_config_overrides
from ..errors import LookupFailure, NotFound
from ..schema import EXPORT_INPUT_COLS, EXPORT_PROFILE_COLS, GameProfile
from ..utils.utilities import ensure_columns, read_csv, write_csv
from .profile_pipeline import resolve_profile
from .search_pipeline import lookup_appid


def profile_to_row(profile: GameProfile) -> dict[str, str]:
    """Flatten a profile into `Steam_*` CSV cells (lists are JSON-encoded)."""
    platforms = [
        label
        for label, on in (
            ("Windows", profile.platforms.windows),
            ("macOS", profile.platforms.mac),
            ("Linux", profile.platforms.linux),
        )
        if on
    ]
    return {
        "Steam_AppID": profile.appid,
        "Steam_Name": profile.name,
        "Steam_ReleaseDate": profile.release_date,
        "Steam_Developer": profile.developer or "",
        "Steam_Publisher": profile.publisher or "",
        "Steam_Achievements": str(profile.achievements.total) if profile.achievements else "",
        "Steam_DeckCompatibility": profile.deck_compatibility.value,
        "Steam_Cloud": "true" if profile.cloud_supported else "false",
        "Steam_Genres": json.dumps(list(profile.genres), ensure_ascii=False),
        "Steam_Categories": json.dumps(list(profile.categories), ensure_ascii=False),
        "Steam_Platforms": ", ".join(platforms),
        "Steam_LookupError": "",
    }


def _failed_row(appid: str, kind: str) -> dict[str, str]:
    cells = {c: "" for c in EXPORT_PROFILE_COLS}
    cells.update({"Steam_AppID": appid, "Steam_LookupError": kind})
    return cells


def _resolve_row(
    row: dict[str, Any], sources: SteamSources, settings: dict[str, Any]
) -> dict[str, str]:
    appid = str(row.get("Steam_AppID", "") or "").strip()
    name = str(row.get("Name", "") or "").strip()
    if not appid and name:
        appid = (
            lookup_appid(
                name,
                sources.search,
                matching=settings["matching"],
                cfg=settings["search"],
                profile=settings["profile"],
            )
            or ""
        )
    if not appid:
        return _failed_row("", "not_found")
    try:
        profile = resolve_profile(
            appid, sources, heuristics=settings["heuristics"], profile=settings["profile"]
        )
    except LookupFailure as e:
        logging.warning(f"Steam profile lookup failed for appid={appid} ({name!r}): {e}")
        return _failed_row(appid, "not_found" if isinstance(e, NotFound) else "upstream_error")
    return profile_to_row(profile)


def export_profiles(
    df: pd.DataFrame, sources: SteamSources, *, settings: dict[str, Any] | None = None
) -> pd.DataFrame:
    """
    Resolve one profile per input row (`Steam_AppID` when pinned, otherwise by `Name`).

    Input columns are preserved; profile columns are appended. Rows whose lookup fails keep
    empty profile cells (stale values from a previous export are cleared) and a
    `Steam_LookupError` value instead of aborting the export. `settings` is the section map
    returned by `load_config_overrides`; None means the built-in defaults.
    """
    settings = settings or load_config_overrides(None)
    out = ensure_columns(df.copy(), dict(EXPORT_INPUT_COLS))
    out = ensure_columns(out, {c: "" for c in EXPORT_PROFILE_COLS})
    total = len(out)
    for n, idx in enumerate(out.index, start=1):
        cells = _resolve_row(out.loc[idx].to_dict(), sources, settings)
        for col, value in cells.items():
            out.at[idx, col] = value
        logging.info(f"[EXPORT] {n}/{total} {out.at[idx, 'Name']!r} -> {cells.get('Steam_AppID') or '-'}")
    return out


def run_export(
    input_csv: Path,
    output_csv: Path,
    sources: SteamSources,
    *,
    settings: dict[str, Any] | None = None,
) -> int:
    df = read_csv(input_csv)
    out = export_profiles(df, sources, settings=settings)
    write_csv(out, output_csv)
    failed = int((out["Steam_LookupError"] != "").sum())
    logging.info(f"[EXPORT] Wrote {len(out)} rows to {output_csv} ({failed} failed)")
    return failed
