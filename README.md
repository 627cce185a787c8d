# depserver

`depserver` looks up published releases of build dependencies and describes
each one as a `depserver.model.DepVersion`: download URI, SHA-256, release
date, deprecation date, CPE, package URL and licences.

## What is in the package

- `depserver.httpd.Httpd` lists Apache HTTP Server source releases from the
  archive index and resolves one version into a `DepVersion`.
- `depserver.dotnet` parses .NET channel `releases.json` documents
  (`parse_channel`) and holds the per-product rules for the ASP.NET Core
  runtime, the .NET runtime and the .NET SDK (`DotnetASPNETCoreType`,
  `DotnetRuntimeType`, `DotnetSDKType`).
- `depserver.model` holds the shared records `DepVersion`, `GithubRelease`
  and `Asset` (with `Asset.from_json`).

## Installation

```
pip install depserver
```

## Apache httpd

`Httpd` is built from four collaborators that you supply, which keeps network
access and verification under your control:

- `web_client` with `get(url)` returning the body (bytes or str) and
  `download(url, path)`;
- `checksummer` with `get_sha256(path)`, `verify_sha1(path, checksum)` and
  `verify_md5(path, checksum)`;
- `license_retriever` with `lookup_licenses(name, url)`;
- `purl_generator` with `generate(name, version, sha256, url)`.

```python
from depserver.httpd import Httpd

httpd = Httpd(
    checksummer=my_checksummer,
    web_client=my_web_client,
    license_retriever=my_license_retriever,
    purl_generator=my_purl_generator,
)

httpd.get_all_version_refs()           # newest first, ties broken by version
httpd.get_release_date("2.4.43")       # timezone-aware UTC datetime
dep = httpd.get_dependency_version("2.4.43")
dep.cpe                                # "cpe:2.3:a:apache:http_server:2.4.43:*:*:*:*:*:*:*"
```

The SHA-256 is read from the published `.sha256` file when there is one.
Otherwise the archive is downloaded into a temporary directory, checked
against the `.sha1` or `.md5` file, and hashed with `get_sha256`. Version
2.2.3 is known to lack checksum files and is accepted without verification.
A `LookupError` is raised when the index does not list exactly one matching
release or when no checksum file exists; malformed dates raise `ValueError`.

## .NET release metadata

```python
from depserver.dotnet import DotnetRuntimeType, DotnetSDKType, parse_channel

channel = parse_channel(releases_json)     # str or bytes
runtime = DotnetRuntimeType()
runtime.release_date(channel, "2.0.1")     # UTC datetime, or None if absent
runtime.release_files(channel, "2.0.1")    # tuple of DotnetReleaseFile
runtime.cpe("2.0.1")                       # "cpe:2.3:a:microsoft:.net_core:2.0.1:*:*:*:*:*:*:*"
runtime.cpe("5.0.1")                       # "cpe:2.3:a:microsoft:.net:5.0.1:*:*:*:*:*:*:*"

sdk = DotnetSDKType()
sdk.channel_version("2.1.201")             # "2.0" (listed in the 2.0 channel)
sdk.version_should_be_ignored("2.1.202")   # True (published hash is wrong)
```

`DotnetASPNETCoreType.cpe` uses only the major and minor version, for example
`cpe:2.3:a:microsoft:asp.net_core:2.0:*:*:*:*:*:*:*`.

## What the package does not do

- It has no command-line program and no server.
- For .NET it parses channel documents and applies the product rules, but it
  does not fetch the release index or channels, download files or build a
  `DepVersion`; that is left to the caller.
- Go and ICU releases are not covered.

## Running the tests

```
pip install -e ".[test]"
pytest
```