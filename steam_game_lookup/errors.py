from __future__ import annotations


class LookupFailure(RuntimeError):
    """Base class for failures surfaced to callers of the profile resolver."""


class NotFound(LookupFailure):
    """The store has no usable record for the requested app id."""

    def __init__(self, appid: str):
        super().__init__(f"Game not found: appid={appid}")
        self.appid = appid


class UpstreamError(LookupFailure):
    """The primary store request failed at the transport level."""
