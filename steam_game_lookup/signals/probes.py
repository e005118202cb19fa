from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, TypeVar

T = TypeVar("T")

# (name, zero-argument callable returning a value or None)
Probe = tuple[str, Callable[[], Any]]


def first_signal(
    probes: Iterable[tuple[str, Callable[[], T | None]]],
    *,
    context: str,
    is_signal: Callable[[T], bool] | None = None,
) -> tuple[str | None, T | None]:
    """
    Run probes in order and return (name, value) for the first one that yields a signal.

    A probe is silent when it returns None, when `is_signal` rejects its value, or when it
    raises. Later probes only run while every earlier one has been silent.
    Returns (None, None) when all probes are silent.
    """
    for name, probe in probes:
        try:
            value = probe()
        except Exception as e:
            logging.debug(f"[PROBE] {context}: {name} failed: {type(e).__name__}: {e}")
            continue
        if value is None:
            logging.debug(f"[PROBE] {context}: {name} silent")
            continue
        if is_signal is not None and not is_signal(value):
            logging.debug(f"[PROBE] {context}: {name} rejected {value!r}")
            continue
        return name, value
    return None, None
