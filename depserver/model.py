"""Plain data records shared by the dependency sources."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class DepVersion:
    """A fully resolved version of a dependency."""

    version: str
    uri: str = ""
    sha256: str = ""
    release_date: datetime | None = None
    deprecation_date: datetime | None = None
    cpe: str = ""
    purl: str = ""
    licenses: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class GithubRelease:
    """A tagged release on a hosted repository."""

    tag_name: str
    created_date: datetime


@dataclass(frozen=True)
class Asset:
    """Metadata of a downloadable release asset."""

    browser_download_url: str = ""

    @classmethod
    def from_json(cls, data: str | bytes) -> Asset:
        """Build an asset from its JSON description; unknown keys are ignored."""
        try:
            decoded = json.loads(data)
        except ValueError as err:
            raise ValueError(f"could not unmarshal asset url content: {err}") from err
        if not isinstance(decoded, dict):
            raise ValueError("could not unmarshal asset url content: expected a JSON object")
        url = decoded.get("browser_download_url") or ""
        if not isinstance(url, str):
            raise ValueError("could not unmarshal asset url content: browser_download_url is not a string")
        return cls(browser_download_url=url)