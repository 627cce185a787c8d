"""Source releases of the Apache HTTP Server."""

from __future__ import annotations

import posixpath
import re
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import cmp_to_key
from pathlib import Path
from typing import Protocol, Sequence

import semver

from .model import DepVersion

ARCHIVE_URL = "http://archive.apache.org/dist/httpd/"

_INDEX_ENTRY = re.compile(r">httpd-([\d\.]+)\.tar\.bz2<.*(\d\d\d\d-\d\d-\d\d \d\d:\d\d)", re.ASCII)
_VERSIONS_MISSING_CHECKSUM = frozenset({"2.2.3"})


class _WebClient(Protocol):
    def get(self, url: str) -> bytes | str: ...

    def download(self, url: str, path: str) -> None: ...


class _Checksummer(Protocol):
    def get_sha256(self, path: str) -> str: ...

    def verify_sha1(self, path: str, checksum: str) -> None: ...

    def verify_md5(self, path: str, checksum: str) -> None: ...


class _LicenseRetriever(Protocol):
    def lookup_licenses(self, name: str, url: str) -> Sequence[str]: ...


class _PURLGenerator(Protocol):
    def generate(self, name: str, version: str, sha256: str, url: str) -> str: ...


@dataclass(frozen=True)
class HttpdRelease:
    """One release as listed in the archive index."""

    version: str
    release_date: datetime
    dependency_url: str
    sha256_url: str = ""
    sha1_url: str = ""
    md5_url: str = ""


def _text(body: bytes | str) -> str:
    return body.decode("utf-8", errors="replace") if isinstance(body, bytes) else body


def _dependency_url(version: str) -> str:
    return f"{ARCHIVE_URL}httpd-{version}.tar.bz2"


def _checksum_url(index: str, version: str, checksum: str) -> str:
    filename = f"httpd-{version}.tar.bz2.{checksum}"
    return f"{ARCHIVE_URL}{filename}" if filename in index else ""


def _parse_semver(version: str) -> semver.Version:
    try:
        return semver.Version.parse(version, optional_minor_and_patch=True)
    except (ValueError, TypeError) as err:
        raise ValueError(f"could not sort releases: {err}") from err


def _newest_first(a: HttpdRelease, b: HttpdRelease) -> int:
    if a.release_date != b.release_date:
        return -1 if a.release_date > b.release_date else 1
    va, vb = _parse_semver(a.version), _parse_semver(b.version)
    if va > vb:
        return -1
    if va < vb:
        return 1
    return 0


def _checksum_from(contents: str, label: str) -> str:
    """Read the checksum from `<sum> <file>` or `LABEL(<file>)= <sum>` text."""
    fields = contents.split()
    if not fields:
        raise ValueError(f"empty {label.lower()} checksum file")
    return fields[-1] if fields[0].startswith(label) else fields[0]


def _is_missing_checksum(version: str) -> bool:
    return version in _VERSIONS_MISSING_CHECKSUM


@dataclass
class Httpd:
    """Looks up Apache HTTP Server source releases and their metadata."""

    checksummer: _Checksummer
    web_client: _WebClient
    license_retriever: _LicenseRetriever
    purl_generator: _PURLGenerator

    def get_all_version_refs(self) -> list[str]:
        """Every archived version, newest first (ties broken by version)."""
        releases = sorted(self._get_releases(""), key=cmp_to_key(_newest_first))
        return [release.version for release in releases]

    def get_dependency_version(self, version: str) -> DepVersion:
        """The resolved metadata of one httpd version."""
        release = self._get_release(version)
        sha = self._dependency_sha256(release)
        url = release.dependency_url
        licenses = self.license_retriever.lookup_licenses("httpd", url)
        return DepVersion(
            version=version,
            uri=url,
            sha256=sha,
            release_date=release.release_date,
            deprecation_date=None,
            cpe=f"cpe:2.3:a:apache:http_server:{version}:*:*:*:*:*:*:*",
            purl=self.purl_generator.generate("httpd", version, sha, url),
            licenses=list(licenses),
        )

    def get_release_date(self, version: str) -> datetime:
        """The date a version was published to the archive."""
        return self._get_release(version).release_date

    def _get_release(self, version: str) -> HttpdRelease:
        releases = self._get_releases(version)
        if len(releases) != 1:
            raise LookupError(f"expected to find 1 release but found {len(releases)} ({releases})")
        return releases[0]

    def _get_releases(self, version_filter: str) -> list[HttpdRelease]:
        pattern = f"httpd-{version_filter}.tar.bz2*" if version_filter else "httpd-*.tar.bz2*"
        index = _text(self.web_client.get(f"{ARCHIVE_URL}?F=2&C=M&O=D&P={pattern}"))

        releases = []
        for line in index.split("\n"):
            match = _INDEX_ENTRY.search(line)
            if match is None:
                continue
            version, stamp = match.group(1), match.group(2)
            try:
                released = datetime.strptime(stamp, "%Y-%m-%d %H:%M").replace(tzinfo=timezone.utc)
            except ValueError as err:
                raise ValueError(f"could not parse '{stamp}' as date for version '{version}'") from err
            releases.append(
                HttpdRelease(
                    version=version,
                    release_date=released,
                    dependency_url=_dependency_url(version),
                    sha256_url=_checksum_url(index, version, "sha256"),
                    sha1_url=_checksum_url(index, version, "sha1"),
                    md5_url=_checksum_url(index, version, "md5"),
                )
            )
        return releases

    def _dependency_sha256(self, release: HttpdRelease) -> str:
        if not (release.sha256_url or release.sha1_url or release.md5_url) and not _is_missing_checksum(
            release.version
        ):
            raise LookupError("could not find checksum file")

        if release.sha256_url:
            fields = _text(self.web_client.get(release.sha256_url)).split()
            if not fields:
                raise ValueError("empty sha256 checksum file")
            return fields[0]

        with tempfile.TemporaryDirectory(prefix="httpd") as tmp:
            path = str(Path(tmp) / posixpath.basename(release.dependency_url))
            self.web_client.download(release.dependency_url, path)
            self._verify_checksum(release, path)
            return self.checksummer.get_sha256(path)

    def _verify_checksum(self, release: HttpdRelease, path: str) -> None:
        if _is_missing_checksum(release.version):
            return
        if release.sha1_url:
            checksum = _checksum_from(_text(self.web_client.get(release.sha1_url)), "SHA1")
            self.checksummer.verify_sha1(path, checksum)
        elif release.md5_url:
            checksum = _checksum_from(_text(self.web_client.get(release.md5_url)), "MD5")
            self.checksummer.verify_md5(path, checksum)