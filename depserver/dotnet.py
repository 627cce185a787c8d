"""Release-metadata records and per-product rules for the .NET distributions."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Sequence

import semver


@dataclass(frozen=True)
class DotnetReleaseFile:
    """One downloadable file of a product release."""

    name: str = ""
    rid: str = ""
    url: str = ""
    hash: str = ""


@dataclass(frozen=True)
class DotnetProduct:
    """A product (runtime, ASP.NET Core runtime or SDK) within a release."""

    version: str = ""
    files: tuple[DotnetReleaseFile, ...] = ()


@dataclass(frozen=True)
class DotnetChannelRelease:
    """A single release entry of a channel."""

    release_date: str = ""
    runtime: DotnetProduct = field(default_factory=DotnetProduct)
    aspnetcore_runtime: DotnetProduct = field(default_factory=DotnetProduct)
    sdk: DotnetProduct = field(default_factory=DotnetProduct)
    sdks: tuple[DotnetProduct, ...] = ()


@dataclass(frozen=True)
class DotnetChannel:
    """The release list of one channel, such as 2.0 or 5.0."""

    eol_date: str = ""
    releases: tuple[DotnetChannelRelease, ...] = ()


def _parse_file(raw: dict[str, Any]) -> DotnetReleaseFile:
    return DotnetReleaseFile(
        name=raw.get("name") or "",
        rid=raw.get("rid") or "",
        url=raw.get("url") or "",
        hash=raw.get("hash") or "",
    )


def _parse_product(raw: dict[str, Any] | None) -> DotnetProduct:
    raw = raw or {}
    return DotnetProduct(
        version=raw.get("version") or "",
        files=tuple(_parse_file(item or {}) for item in raw.get("files") or ()),
    )


def _parse_release(raw: dict[str, Any]) -> DotnetChannelRelease:
    return DotnetChannelRelease(
        release_date=raw.get("release-date") or "",
        runtime=_parse_product(raw.get("runtime")),
        aspnetcore_runtime=_parse_product(raw.get("aspnetcore-runtime")),
        sdk=_parse_product(raw.get("sdk")),
        sdks=tuple(_parse_product(item) for item in raw.get("sdks") or ()),
    )


def parse_channel(data: str | bytes) -> DotnetChannel:
    """Parse a channel's releases.json document."""
    try:
        decoded = json.loads(data)
    except ValueError as err:
        raise ValueError(f"could not unmarshal channel: {err}") from err
    if not isinstance(decoded, dict):
        raise ValueError("could not unmarshal channel: expected a JSON object")
    return DotnetChannel(
        eol_date=decoded.get("eol-date") or "",
        releases=tuple(_parse_release(item or {}) for item in decoded.get("releases") or ()),
    )


def _parse_release_date(value: str) -> datetime:
    try:
        return datetime.strptime(value, "%Y-%m-%d").replace(tzinfo=timezone.utc)
    except ValueError as err:
        raise ValueError(f"could not parse release date: {err}") from err


def _major_minor(version: str) -> str:
    parts = version.split(".")
    if len(parts) < 2:
        raise ValueError(f"version {version!r} has no minor component")
    return ".".join(parts[:2])


_NEW_PRODUCT_NAME_FROM = semver.Version.parse("5.0.0-0")


def _parse_semver(version: str) -> semver.Version:
    text = version[1:] if version[:1] in ("v", "V") else version
    try:
        return semver.Version.parse(text, optional_minor_and_patch=True)
    except (ValueError, TypeError) as err:
        raise ValueError(f"failed to parse semver: {err}") from err


def _dotnet_cpe(version: str) -> str:
    # 5.0.0-0 sorts below every 5.0.0 preview, so previews already use the new name.
    product = ".net_core" if _parse_semver(version) < _NEW_PRODUCT_NAME_FROM else ".net"
    return f"cpe:2.3:a:microsoft:{product}:{version}:*:*:*:*:*:*:*"


_ProductsOf = Callable[[DotnetChannelRelease], Sequence[DotnetProduct]]


def _find(
    products_of: _ProductsOf, channel: DotnetChannel, version: str
) -> tuple[DotnetChannelRelease, DotnetProduct] | None:
    for release in channel.releases:
        for product in products_of(release):
            if product.version == version:
                return release, product
    return None


def _release_date(products_of: _ProductsOf, channel: DotnetChannel, version: str) -> datetime | None:
    found = _find(products_of, channel, version)
    if found is None:
        return None
    return _parse_release_date(found[0].release_date)


def _release_files(
    products_of: _ProductsOf, channel: DotnetChannel, version: str
) -> tuple[DotnetReleaseFile, ...]:
    found = _find(products_of, channel, version)
    return found[1].files if found is not None else ()


def _aspnetcore_products(release: DotnetChannelRelease) -> Sequence[DotnetProduct]:
    return (release.aspnetcore_runtime,)


def _runtime_products(release: DotnetChannelRelease) -> Sequence[DotnetProduct]:
    return (release.runtime,)


def _sdk_products(release: DotnetChannelRelease) -> Sequence[DotnetProduct]:
    return (release.sdk, *release.sdks)


# Versions whose published metadata is known to be unusable, per product.
_ASPNETCORE_IGNORED_VERSIONS: frozenset[str] = frozenset()
_RUNTIME_IGNORED_VERSIONS: frozenset[str] = frozenset()


class DotnetASPNETCoreType:
    """The ASP.NET Core runtime."""

    def channel_version(self, version: str) -> str:
        """The channel (major.minor) that lists a version."""
        return _major_minor(version)

    def release_date(self, channel: DotnetChannel, version: str) -> datetime | None:
        """The release date of a version, or None when the channel lacks it."""
        return _release_date(_aspnetcore_products, channel, version)

    def release_files(self, channel: DotnetChannel, version: str) -> tuple[DotnetReleaseFile, ...]:
        """The files of a version, empty when the channel lacks it."""
        return _release_files(_aspnetcore_products, channel, version)

    def release_versions(self, release: DotnetChannelRelease) -> list[str]:
        """Every ASP.NET Core runtime version named by a release."""
        return [product.version for product in _aspnetcore_products(release)]

    def cpe(self, version: str) -> str:
        """The CPE identifier for a version."""
        return f"cpe:2.3:a:microsoft:asp.net_core:{_major_minor(version)}:*:*:*:*:*:*:*"

    def version_should_be_ignored(self, version: str) -> bool:
        """Whether a version is known to be unusable."""
        return version in _ASPNETCORE_IGNORED_VERSIONS


class DotnetRuntimeType:
    """The .NET runtime."""

    def channel_version(self, version: str) -> str:
        """The channel (major.minor) that lists a version."""
        return _major_minor(version)

    def release_date(self, channel: DotnetChannel, version: str) -> datetime | None:
        """The release date of a version, or None when the channel lacks it."""
        return _release_date(_runtime_products, channel, version)

    def release_files(self, channel: DotnetChannel, version: str) -> tuple[DotnetReleaseFile, ...]:
        """The files of a version, empty when the channel lacks it."""
        return _release_files(_runtime_products, channel, version)

    def release_versions(self, release: DotnetChannelRelease) -> list[str]:
        """Every runtime version named by a release."""
        return [product.version for product in _runtime_products(release)]

    def cpe(self, version: str) -> str:
        """The CPE identifier for a version."""
        return _dotnet_cpe(version)

    def version_should_be_ignored(self, version: str) -> bool:
        """Whether a version is known to be unusable."""
        return version in _RUNTIME_IGNORED_VERSIONS


_SDK_VERSIONS_IN_WRONG_CHANNEL = {
    "2.1.201": "2.0",
    "2.1.200": "2.0",
    "2.1.105": "2.0",
    "2.1.104": "2.0",
    "2.1.103": "2.0",
    "2.1.102": "2.0",
    "2.1.101": "2.0",
    "2.1.100": "2.0",
    "2.1.4": "2.0",
    "2.1.3": "2.0",
    "2.1.2": "2.0",
    "1.0.0-preview2.1-003177": "1.1",
}

_SDK_VERSIONS_WITH_WRONG_HASH = frozenset({"2.1.202", "1.1.5"})


class DotnetSDKType:
    """The .NET SDK."""

    def channel_version(self, version: str) -> str:
        """The channel that lists a version, honouring known misfiled versions."""
        if version in _SDK_VERSIONS_IN_WRONG_CHANNEL:
            return _SDK_VERSIONS_IN_WRONG_CHANNEL[version]
        return _major_minor(version)

    def release_date(self, channel: DotnetChannel, version: str) -> datetime | None:
        """The release date of a version, or None when the channel lacks it."""
        return _release_date(_sdk_products, channel, version)

    def release_files(self, channel: DotnetChannel, version: str) -> tuple[DotnetReleaseFile, ...]:
        """The files of a version, empty when the channel lacks it."""
        return _release_files(_sdk_products, channel, version)

    def release_versions(self, release: DotnetChannelRelease) -> list[str]:
        """Every SDK version named by a release."""
        return [product.version for product in _sdk_products(release)]

    def cpe(self, version: str) -> str:
        """The CPE identifier for a version."""
        return _dotnet_cpe(version)

    def version_should_be_ignored(self, version: str) -> bool:
        """Whether a version is known to have a wrong published hash."""
        return version in _SDK_VERSIONS_WITH_WRONG_HASH