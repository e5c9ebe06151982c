"""
mod.json 声明解析

把 mod.json 中的平台支持、依赖与不兼容声明转换为模型对象。
依赖与不兼容同时支持旧版列表格式和新版字典格式。
"""

from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from loguru import logger

from modindex.exceptions import (
    DuplicatePlatformError,
    InvalidConstraintError,
    ModIndexError,
    ModJsonError,
)
from modindex.models.package import (
    DependencyEdge,
    DependencyImportance,
    IncompatibilityEdge,
    IncompatibilityImportance,
)
from modindex.models.platform import (
    ALL_PLATFORMS,
    Platform,
    PlatformSet,
    expand_platform,
    parse_platforms,
)
from modindex.models.version import (
    ANY_VERSION,
    Constraint,
    EngineRequirement,
    parse_constraint,
    parse_engine_requirement,
)


def parse_gd(
    gd: Union[str, Mapping[str, str], None],
    platforms: Optional[PlatformSet] = None,
) -> Dict[Platform, EngineRequirement]:
    """
    解析平台支持声明

    Args:
        gd: ``{"win": "4.2.0", "android": "*"}`` 形式的字典，
            或应用于所有声明平台的单个版本字符串
        platforms: gd 为字符串时使用的平台集合，缺省为全部平台

    Returns:
        具体平台到引擎版本需求的映射

    Raises:
        ModJsonError: 声明为空或格式错误
        DuplicatePlatformError: 同一具体平台被声明多次
    """
    if gd is None or (isinstance(gd, (str, dict)) and not gd):
        raise ModJsonError("mod.json 中没有声明任何平台支持")

    try:
        if isinstance(gd, str):
            requirement = parse_engine_requirement(gd)
            return {p: requirement for p in (platforms or ALL_PLATFORMS)}

        if not isinstance(gd, Mapping):
            raise ModJsonError(f"无效的平台支持声明: {gd!r}")

        result: Dict[Platform, EngineRequirement] = {}
        for name, value in gd.items():
            requirement = parse_engine_requirement(value)
            for platform in expand_platform(name):
                if platform in result:
                    raise DuplicatePlatformError(
                        f"mod.json 中重复声明了平台 {platform.value}",
                        context={"platform": platform.value},
                    )
                result[platform] = requirement
        return result
    except ModJsonError:
        raise
    except ModIndexError as e:
        raise ModJsonError(
            f"无效的平台支持声明: {e.message}", context=e.context
        ) from e


def _parse_version(value: Any) -> Constraint:
    if not isinstance(value, str):
        raise InvalidConstraintError(str(value))
    if value.strip() == "*":
        return ANY_VERSION
    return parse_constraint(value)


def _iter_entries(data: Union[List, Dict, None]) -> List[Tuple[str, Dict[str, Any]]]:
    """统一旧版列表格式与新版字典格式"""
    if not data:
        return []

    entries = []
    if isinstance(data, list):
        for item in data:
            if not isinstance(item, dict) or "id" not in item:
                raise ModJsonError(f"无效的声明条目: {item!r}")
            entries.append((item["id"], item))
    elif isinstance(data, dict):
        for mod_id, item in data.items():
            if isinstance(item, str):
                entries.append((mod_id, {"version": item}))
            elif isinstance(item, dict):
                entries.append((mod_id, item))
            else:
                raise ModJsonError(f"无效的声明条目: {mod_id}={item!r}")
    else:
        raise ModJsonError(f"无效的声明格式: {data!r}")
    return entries


def parse_dependencies(
    data: Union[List, Dict, None], dependent_id: int
) -> Tuple[DependencyEdge, ...]:
    """
    解析依赖声明

    Raises:
        InvalidConstraintError: 版本约束无效
        ModJsonError: 声明格式错误
    """
    edges = []
    for mod_id, item in _iter_entries(data):
        importance = item.get("importance", DependencyImportance.REQUIRED.value)
        try:
            importance = DependencyImportance(importance)
        except ValueError:
            raise ModJsonError(
                f"依赖 {mod_id} 的 importance 无效: {importance}"
            ) from None

        platforms = parse_platforms(item.get("platforms")) or ALL_PLATFORMS
        edges.append(
            DependencyEdge(
                dependent_id=dependent_id,
                mod_id=mod_id,
                constraint=_parse_version(item.get("version", "*")),
                importance=importance,
                platforms=platforms,
            )
        )
    logger.debug(f"版本 {dependent_id} 声明了 {len(edges)} 个依赖")
    return tuple(edges)


def parse_incompatibilities(
    data: Union[List, Dict, None], dependent_id: int
) -> Tuple[IncompatibilityEdge, ...]:
    """解析不兼容声明"""
    edges = []
    for mod_id, item in _iter_entries(data):
        importance = item.get("importance", IncompatibilityImportance.BREAKING.value)
        try:
            importance = IncompatibilityImportance(importance)
        except ValueError:
            raise ModJsonError(
                f"不兼容声明 {mod_id} 的 importance 无效: {importance}"
            ) from None

        edges.append(
            IncompatibilityEdge(
                dependent_id=dependent_id,
                mod_id=mod_id,
                constraint=_parse_version(item.get("version", "*")),
                importance=importance,
            )
        )
    return tuple(edges)
