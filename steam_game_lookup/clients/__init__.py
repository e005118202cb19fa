"""API clients for Steam's public endpoints."""

from .steam_client import SteamClient, SteamSources

__all__ = [
    "SteamClient",
    "SteamSources",
]
