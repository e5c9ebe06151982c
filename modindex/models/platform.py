"""
平台模型

定义具体目标平台与聚合平台（mac、android），聚合平台在解析时展开为具体成员。
"""

from enum import Enum
from typing import FrozenSet, Iterable, Optional, Union

from modindex.exceptions import InvalidPlatformError


class Platform(Enum):
    """具体目标平台"""

    WINDOWS = "win"
    MAC_INTEL = "mac-intel"
    MAC_ARM = "mac-arm"
    ANDROID32 = "android32"
    ANDROID64 = "android64"
    IOS = "ios"


PlatformSet = FrozenSet[Platform]

ALL_PLATFORMS: PlatformSet = frozenset(Platform)

# 聚合平台
UMBRELLAS = {
    "mac": frozenset({Platform.MAC_INTEL, Platform.MAC_ARM}),
    "android": frozenset({Platform.ANDROID32, Platform.ANDROID64}),
}

_ALIASES = {
    "win": Platform.WINDOWS,
    "windows": Platform.WINDOWS,
    "mac-intel": Platform.MAC_INTEL,
    "mac_intel": Platform.MAC_INTEL,
    "macintel": Platform.MAC_INTEL,
    "mac-arm": Platform.MAC_ARM,
    "mac_arm": Platform.MAC_ARM,
    "macarm": Platform.MAC_ARM,
    "android32": Platform.ANDROID32,
    "android64": Platform.ANDROID64,
    "ios": Platform.IOS,
}


def expand_platform(name: Union[str, Platform]) -> PlatformSet:
    """
    将平台名称展开为具体平台集合

    Args:
        name: 平台名称（大小写不敏感）或 Platform

    Returns:
        具体平台集合

    Raises:
        InvalidPlatformError: 未知平台
    """
    if isinstance(name, Platform):
        return frozenset({name})

    key = name.strip().lower()
    if key in ("macos",):
        key = "mac"
    if key in UMBRELLAS:
        return UMBRELLAS[key]
    if key in _ALIASES:
        return frozenset({_ALIASES[key]})
    raise InvalidPlatformError(name)


def parse_platforms(
    value: Union[None, str, Platform, Iterable[Union[str, Platform]]],
) -> Optional[PlatformSet]:
    """
    解析平台列表

    支持逗号分隔的字符串或列表；空值表示不限平台，返回 None。
    """
    if value is None:
        return None

    if isinstance(value, (str, Platform)):
        items = value.split(",") if isinstance(value, str) else [value]
    else:
        items = list(value)

    result = set()
    for item in items:
        if isinstance(item, str) and not item.strip():
            continue
        result.update(expand_platform(item))

    return frozenset(result) if result else None
