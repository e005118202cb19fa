"""Steam Game Lookup - search Steam's catalog and reconcile one game's profile from several sources."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("steam-game-lookup")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.1.0"
