"""
ModIndex 数据模型包

包含版本、平台、模组包和配置模型定义。
"""

from modindex.models.version import (
    SemVer,
    CompareOp,
    Constraint,
    EngineRequirement,
    ANY_VERSION,
    ANY_ENGINE,
    parse_semver,
    parse_constraint,
    parse_engine_requirement,
    compare,
    satisfies,
)
from modindex.models.platform import (
    Platform,
    PlatformSet,
    ALL_PLATFORMS,
    expand_platform,
    parse_platforms,
)
from modindex.models.package import (
    VersionStatus,
    DependencyImportance,
    IncompatibilityImportance,
    DependencyEdge,
    IncompatibilityEdge,
    PackageVersion,
    ResolvedDependency,
    ResolvedIncompatibility,
    Page,
)
from modindex.models.config import (
    SnapshotFormat,
    MatcherQuery,
    ANY_QUERY,
    RegistryConfig,
    ModIndexConfig,
    is_remote_source,
)

__all__ = [
    # 版本模型
    "SemVer",
    "CompareOp",
    "Constraint",
    "EngineRequirement",
    "ANY_VERSION",
    "ANY_ENGINE",
    "parse_semver",
    "parse_constraint",
    "parse_engine_requirement",
    "compare",
    "satisfies",
    # 平台模型
    "Platform",
    "PlatformSet",
    "ALL_PLATFORMS",
    "expand_platform",
    "parse_platforms",
    # 模组包模型
    "VersionStatus",
    "DependencyImportance",
    "IncompatibilityImportance",
    "DependencyEdge",
    "IncompatibilityEdge",
    "PackageVersion",
    "ResolvedDependency",
    "ResolvedIncompatibility",
    "Page",
    # 配置模型
    "SnapshotFormat",
    "MatcherQuery",
    "ANY_QUERY",
    "RegistryConfig",
    "ModIndexConfig",
    "is_remote_source",
]
