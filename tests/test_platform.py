"""平台模型测试"""

import pytest

from modindex.exceptions import InvalidPlatformError
from modindex.models import ALL_PLATFORMS, Platform, expand_platform, parse_platforms


def test_umbrella_expansion():
    assert expand_platform("android") == {Platform.ANDROID32, Platform.ANDROID64}
    assert expand_platform("Mac") == {Platform.MAC_INTEL, Platform.MAC_ARM}
    assert expand_platform("macos") == {Platform.MAC_INTEL, Platform.MAC_ARM}


@pytest.mark.parametrize(
    "name,platform",
    [
        ("win", Platform.WINDOWS),
        ("Windows", Platform.WINDOWS),
        ("mac_arm", Platform.MAC_ARM),
        ("mac-intel", Platform.MAC_INTEL),
        ("android32", Platform.ANDROID32),
        ("iOS", Platform.IOS),
    ],
)
def test_aliases(name, platform):
    assert expand_platform(name) == {platform}


def test_parse_comma_string():
    assert parse_platforms("win, android") == {
        Platform.WINDOWS,
        Platform.ANDROID32,
        Platform.ANDROID64,
    }


def test_parse_list_and_enum():
    assert parse_platforms(["ios", Platform.WINDOWS]) == {Platform.IOS, Platform.WINDOWS}


@pytest.mark.parametrize("value", [None, "", " , ", []])
def test_empty_means_any(value):
    assert parse_platforms(value) is None


def test_unknown_platform():
    with pytest.raises(InvalidPlatformError) as exc:
        parse_platforms("win,linux")
    assert exc.value.context["value"] == "linux"


def test_all_platforms_are_concrete():
    assert len(ALL_PLATFORMS) == 6
