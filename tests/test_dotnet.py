from datetime import datetime, timezone

import pytest

from depserver.dotnet import (
    DotnetASPNETCoreType,
    DotnetChannelRelease,
    DotnetProduct,
    DotnetReleaseFile,
    DotnetRuntimeType,
    DotnetSDKType,
    parse_channel,
)

RUNTIME_CHANNEL = """
{
  "eol-date": "2050-02-20",
  "releases": [
    {
      "release-date": "2020-02-22",
      "runtime": {
        "version": "2.0.2",
        "files": [
          {"name": "dotnet-runtime-linux-x64.tar.gz", "rid": "linux-x64",
           "url": "url-for-linux-x64-2.0.2", "hash": "sha512-for-linux-x64-2.0.2"}
        ]
      }
    },
    {
      "release-date": "2020-02-20",
      "runtime": {
        "version": "2.0.1",
        "files": [
          {"name": "dotnet-runtime-linux-arm.tar.gz", "rid": "linux-arm",
           "url": "url-for-linux-arm-2.0.1", "hash": "sha512-for-linux-arm-2.0.1"},
          {"name": "dotnet-runtime-linux-x64.tar.gz", "rid": "linux-x64",
           "url": "url-for-linux-x64-2.0.1", "hash": "SHA512-FOR-LINUX-X64-2.0.1"},
          {"name": "dotnet-runtime-osx-64.tar.gz", "rid": "osx-64",
           "url": "url-for-osx-64-2.0.1", "hash": "sha512-for-osx-64-2.0.1"}
        ]
      }
    },
    {"release-date": "2020-02-19", "runtime": null}
  ]
}
"""

ASPNETCORE_CHANNEL = """
{
  "eol-date": "2050-02-20",
  "releases": [
    {
      "release-date": "2020-02-22",
      "aspnetcore-runtime": {"version": "2.0.2", "files": []}
    },
    {
      "release-date": "2020-02-20",
      "aspnetcore-runtime": {
        "version": "2.0.1",
        "files": [
          {"name": "aspnetcore-runtime-linux-x64.tar.gz", "rid": "linux-x64",
           "url": "url-for-linux-x64-2.0.1", "hash": "SHA512-FOR-LINUX-X64-2.0.1"}
        ]
      }
    }
  ]
}
"""

SDK_CHANNEL = """
{
  "eol-date": "2050-02-20",
  "releases": [
    {
      "release-date": "2020-02-22",
      "sdk": {"version": "2.0.202"},
      "sdks": [{"version": "2.0.202"}]
    },
    {
      "release-date": "2020-02-20",
      "sdk": {"version": "2.0.301"},
      "sdks": [
        {"version": "2.0.301"},
        {
          "version": "2.0.201",
          "files": [
            {"name": "dotnet-sdk-linux-x64.tar.gz", "rid": "linux-x64",
             "url": "url-for-linux-x64-2.0.201", "hash": "SHA512-FOR-LINUX-X64-2.0.201"}
          ]
        }
      ]
    },
    {
      "release-date": "2020-02-10",
      "sdk": {"version": "2.0.200"}
    }
  ]
}
"""

UTC = timezone.utc


def test_parse_channel_reads_eol_and_releases():
    channel = parse_channel(RUNTIME_CHANNEL)
    assert channel.eol_date == "2050-02-20"
    assert [release.release_date for release in channel.releases] == ["2020-02-22", "2020-02-20", "2020-02-19"]
    assert channel.releases[2].runtime == DotnetProduct()


def test_parse_channel_empty_eol_date():
    channel = parse_channel('{"eol-date": "", "releases": []}')
    assert channel.eol_date == ""
    assert channel.releases == ()


def test_parse_channel_rejects_invalid_json():
    with pytest.raises(ValueError, match="could not unmarshal channel"):
        parse_channel("{not json")


def test_runtime_release_date():
    channel = parse_channel(RUNTIME_CHANNEL)
    assert DotnetRuntimeType().release_date(channel, "2.0.1") == datetime(2020, 2, 20, tzinfo=UTC)


def test_runtime_release_date_missing_version():
    channel = parse_channel(RUNTIME_CHANNEL)
    assert DotnetRuntimeType().release_date(channel, "9.9.9") is None


def test_runtime_release_date_unparsable():
    channel = parse_channel('{"releases": [{"release-date": "2020/02/20", "runtime": {"version": "2.0.1"}}]}')
    with pytest.raises(ValueError, match="could not parse release date"):
        DotnetRuntimeType().release_date(channel, "2.0.1")


def test_runtime_release_files():
    channel = parse_channel(RUNTIME_CHANNEL)
    files = DotnetRuntimeType().release_files(channel, "2.0.1")
    assert [f.rid for f in files] == ["linux-arm", "linux-x64", "osx-64"]
    assert files[1] == DotnetReleaseFile(
        name="dotnet-runtime-linux-x64.tar.gz",
        rid="linux-x64",
        url="url-for-linux-x64-2.0.1",
        hash="SHA512-FOR-LINUX-X64-2.0.1",
    )
    assert DotnetRuntimeType().release_files(channel, "9.9.9") == ()


def test_runtime_release_versions():
    channel = parse_channel(RUNTIME_CHANNEL)
    assert DotnetRuntimeType().release_versions(channel.releases[0]) == ["2.0.2"]


@pytest.mark.parametrize(
    "version, expected",
    [
        ("2.0.1", "cpe:2.3:a:microsoft:.net_core:2.0.1:*:*:*:*:*:*:*"),
        ("2.0.2", "cpe:2.3:a:microsoft:.net_core:2.0.2:*:*:*:*:*:*:*"),
        ("5.0.1", "cpe:2.3:a:microsoft:.net:5.0.1:*:*:*:*:*:*:*"),
    ],
)
def test_runtime_cpe(version, expected):
    assert DotnetRuntimeType().cpe(version) == expected


def test_runtime_cpe_preview_of_five_uses_new_name():
    assert DotnetRuntimeType().cpe("5.0.0-preview.1") == "cpe:2.3:a:microsoft:.net:5.0.0-preview.1:*:*:*:*:*:*:*"


def test_runtime_cpe_rejects_non_semver():
    with pytest.raises(ValueError, match="failed to parse semver"):
        DotnetRuntimeType().cpe("not-a-version")


def test_runtime_channel_version_and_ignore():
    runtime = DotnetRuntimeType()
    assert runtime.channel_version("2.0.1") == "2.0"
    assert runtime.channel_version("5.0.1") == "5.0"
    assert runtime.version_should_be_ignored("2.1.202") is False


def test_aspnetcore_lookup():
    channel = parse_channel(ASPNETCORE_CHANNEL)
    aspnet = DotnetASPNETCoreType()
    assert aspnet.release_date(channel, "2.0.1") == datetime(2020, 2, 20, tzinfo=UTC)
    assert [f.url for f in aspnet.release_files(channel, "2.0.1")] == ["url-for-linux-x64-2.0.1"]
    assert aspnet.release_versions(channel.releases[1]) == ["2.0.1"]
    assert DotnetRuntimeType().release_date(channel, "2.0.1") is None


def test_aspnetcore_cpe_uses_major_minor():
    assert DotnetASPNETCoreType().cpe("2.0.1") == "cpe:2.3:a:microsoft:asp.net_core:2.0:*:*:*:*:*:*:*"
    assert DotnetASPNETCoreType().cpe("2.0.2") == "cpe:2.3:a:microsoft:asp.net_core:2.0:*:*:*:*:*:*:*"


def test_aspnetcore_channel_and_ignore():
    aspnet = DotnetASPNETCoreType()
    assert aspnet.channel_version("2.0.1") == "2.0"
    assert aspnet.version_should_be_ignored("2.0.1") is False


def test_sdk_release_date_found_in_sdks_list():
    channel = parse_channel(SDK_CHANNEL)
    assert DotnetSDKType().release_date(channel, "2.0.201") == datetime(2020, 2, 20, tzinfo=UTC)


def test_sdk_release_files_found_in_sdks_list():
    channel = parse_channel(SDK_CHANNEL)
    files = DotnetSDKType().release_files(channel, "2.0.201")
    assert [(f.url, f.hash) for f in files] == [("url-for-linux-x64-2.0.201", "SHA512-FOR-LINUX-X64-2.0.201")]


def test_sdk_release_versions_include_sdks():
    release = DotnetChannelRelease(
        release_date="2020-02-20",
        sdk=DotnetProduct("2.0.201"),
        sdks=(DotnetProduct("2.0.201"), DotnetProduct("2.0.101")),
    )
    assert DotnetSDKType().release_versions(release) == ["2.0.201", "2.0.201", "2.0.101"]


@pytest.mark.parametrize(
    "version, expected",
    [
        ("2.1.201", "2.0"),
        ("2.1.4", "2.0"),
        ("1.0.0-preview2.1-003177", "1.1"),
        ("2.0.201", "2.0"),
        ("5.0.201", "5.0"),
    ],
)
def test_sdk_channel_version(version, expected):
    assert DotnetSDKType().channel_version(version) == expected


def test_sdk_ignored_versions():
    sdk = DotnetSDKType()
    assert sdk.version_should_be_ignored("2.1.202") is True
    assert sdk.version_should_be_ignored("1.1.5") is True
    assert sdk.version_should_be_ignored("2.1.100") is False


@pytest.mark.parametrize(
    "version, expected",
    [
        ("2.0.201", "cpe:2.3:a:microsoft:.net_core:2.0.201:*:*:*:*:*:*:*"),
        ("2.1.201", "cpe:2.3:a:microsoft:.net_core:2.1.201:*:*:*:*:*:*:*"),
        ("5.0.201", "cpe:2.3:a:microsoft:.net:5.0.201:*:*:*:*:*:*:*"),
    ],
)
def test_sdk_cpe(version, expected):
    assert DotnetSDKType().cpe(version) == expected