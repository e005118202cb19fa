from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable

import pandas as pd
import requests

from ..errors import UpstreamError

# ----------------------------
# CSV Helpers
# ----------------------------


def read_csv(path: str | Path) -> pd.DataFrame:
    """Read CSV preserving strings and avoiding problematic type inference."""
    return pd.read_csv(path, dtype=str, keep_default_na=False)


def write_csv(df: pd.DataFrame, path: str | Path) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)


def ensure_columns(df: pd.DataFrame, cols_with_defaults: dict[str, Any]) -> pd.DataFrame:
    """Create columns if they don't exist, with a default value."""
    for col, default in cols_with_defaults.items():
        if col not in df.columns:
            df[col] = default
    return df


# ----------------------------
# Single-attempt requests
# ----------------------------

_NETWORK_ERRORS = (
    requests.exceptions.ConnectionError,
    requests.exceptions.Timeout,
    requests.exceptions.SSLError,
)


def _bump(stats: dict[str, Any] | None, key: str) -> None:
    if stats is None:
        return
    stats[key] = int(stats.get(key, 0) or 0) + 1


def call_once(
    fn: Callable[[], Any],
    *,
    on_fail_return: Any = None,
    context: str | None = None,
    stats: dict[str, Any] | None = None,
    quiet: bool = False,
) -> Any:
    """
    Execute fn exactly once; on failure log it, count it in `stats` and return on_fail_return.

    Failures are tagged [NETWORK] (connection/timeout/SSL), [HTTP] (non-2xx status) or
    [REQUEST] (anything else, e.g. an undecodable body). `quiet` demotes the log line to DEBUG
    for best-effort callers.
    """
    try:
        return fn()
    except Exception as e:
        if isinstance(e, requests.exceptions.HTTPError):
            tag = "HTTP"
            _bump(stats, "http_failures")
        elif isinstance(e, _NETWORK_ERRORS):
            tag = "NETWORK"
            _bump(stats, "network_failures")
        else:
            tag = "REQUEST"
        _bump(stats, "request_failures")
        if context:
            log = logging.debug if quiet else logging.error
            log(f"[{tag}] {context}: {type(e).__name__}: {e}")
        return on_fail_return


def request_failures_count(stats: dict[str, Any] | None) -> int:
    if not stats:
        return 0
    try:
        return int(stats.get("request_failures", 0) or 0)
    except (TypeError, ValueError):
        return 0


def raise_on_new_failure(stats: dict[str, Any] | None, *, before: int, context: str) -> None:
    """
    Raise UpstreamError when a request failure happened since `before` was sampled.

    Use this for requests whose failure must not be mistaken for "not found".
    """
    after = request_failures_count(stats)
    if after > before:
        raise UpstreamError(f"Upstream request failed while calling {context}")
