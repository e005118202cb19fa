from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

# -----------------------------------------------------------------------------
# Lookup results
# -----------------------------------------------------------------------------
#
# All records are built fresh per request from upstream payloads and never mutated.


@dataclass(frozen=True)
class SearchCandidate:
    appid: str
    name: str
    thumbnail_url: str | None
    capsule_image: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class AchievementDescriptor:
    key: str
    display_name: str
    description: str
    icon_unlocked: str
    icon_locked: str


@dataclass(frozen=True)
class AchievementSummary:
    """
    A positive achievement count, optionally with the full descriptor list.

    A zero count is indistinguishable from "no achievements", so it cannot be represented:
    callers use `None` instead.
    """

    total: int
    details: tuple[AchievementDescriptor, ...] = ()

    def __post_init__(self) -> None:
        if isinstance(self.total, bool) or not isinstance(self.total, int) or self.total <= 0:
            raise ValueError(f"AchievementSummary.total must be a positive int, got {self.total!r}")


class CompatibilityTier(str, Enum):
    VERIFIED = "verified"
    PLAYABLE = "playable"
    UNSUPPORTED = "unsupported"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class PlatformSupport:
    windows: bool = False
    mac: bool = False
    linux: bool = False


@dataclass(frozen=True)
class ProfileDiagnostics:
    """Where each derived field came from; for troubleshooting only."""

    achievement_source: str | None = None
    deck_source: str | None = None
    store_api_deck_value: Any = None
    cloud_source: str | None = None


@dataclass(frozen=True)
class GameProfile:
    appid: str
    name: str
    header_image: str
    capsule_image: str
    hero_image: str
    screenshots: tuple[str, ...]
    short_description: str
    release_date: str
    developer: str | None
    publisher: str | None
    achievements: AchievementSummary | None
    deck_compatibility: CompatibilityTier
    cloud_supported: bool
    categories: tuple[str, ...]
    genres: tuple[str, ...]
    platforms: PlatformSupport
    diagnostics: ProfileDiagnostics = field(default_factory=ProfileDiagnostics)

    def to_dict(self) -> dict[str, Any]:
        out = asdict(self)
        out["deck_compatibility"] = self.deck_compatibility.value
        out["screenshots"] = list(self.screenshots)
        out["categories"] = list(self.categories)
        out["genres"] = list(self.genres)
        if self.achievements is not None:
            out["achievements"]["details"] = list(out["achievements"]["details"])
        return out


# -----------------------------------------------------------------------------
# CSV export columns
# -----------------------------------------------------------------------------

EXPORT_INPUT_COLS: dict[str, Any] = {
    "Name": "",
    "Steam_AppID": "",
}

EXPORT_PROFILE_COLS = (
    "Steam_Name",
    "Steam_ReleaseDate",
    "Steam_Developer",
    "Steam_Publisher",
    "Steam_Achievements",
    "Steam_DeckCompatibility",
    "Steam_Cloud",
    "Steam_Genres",
    "Steam_Categories",
    "Steam_Platforms",
    "Steam_LookupError",
)
