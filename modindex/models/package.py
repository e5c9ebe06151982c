"""
模组包数据模型

定义模组版本节点、依赖/不兼容边以及解析结果。
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from modindex.models.platform import ALL_PLATFORMS, Platform, PlatformSet
from modindex.models.version import Constraint, EngineRequirement, SemVer


class VersionStatus(Enum):
    """版本审核状态"""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    UNLISTED = "unlisted"


class DependencyImportance(Enum):
    """依赖重要程度"""

    SUGGESTED = "suggested"
    RECOMMENDED = "recommended"
    REQUIRED = "required"


class IncompatibilityImportance(Enum):
    """不兼容重要程度"""

    BREAKING = "breaking"
    CONFLICTING = "conflicting"
    SUPERSEDED = "superseded"


@dataclass(frozen=True)
class DependencyEdge:
    """依赖边：从某个版本指向另一个模组（而非具体版本）"""

    dependent_id: int
    mod_id: str
    constraint: Constraint
    importance: DependencyImportance = DependencyImportance.REQUIRED
    platforms: PlatformSet = ALL_PLATFORMS

    def applies_to(self, platforms: Optional[PlatformSet]) -> bool:
        """该依赖是否适用于查询的平台"""
        if platforms is None:
            return True
        return not self.platforms.isdisjoint(platforms)


@dataclass(frozen=True)
class IncompatibilityEdge:
    """不兼容边"""

    dependent_id: int
    mod_id: str
    constraint: Constraint
    importance: IncompatibilityImportance = IncompatibilityImportance.BREAKING


@dataclass(frozen=True)
class PackageVersion:
    """
    模组版本

    id 为创建顺序编号，越大越新。相等性与哈希只看 id。
    """

    id: int
    mod_id: str = field(compare=False)
    version: SemVer = field(compare=False)
    status: VersionStatus = field(default=VersionStatus.ACCEPTED, compare=False)
    platforms: Mapping[Platform, EngineRequirement] = field(
        default_factory=dict, compare=False
    )
    dependencies: Tuple[DependencyEdge, ...] = field(default=(), compare=False)
    incompatibilities: Tuple[IncompatibilityEdge, ...] = field(
        default=(), compare=False
    )
    name: str = field(default="", compare=False)
    description: Optional[str] = field(default=None, compare=False)

    @property
    def is_accepted(self) -> bool:
        return self.status == VersionStatus.ACCEPTED

    @property
    def is_prerelease(self) -> bool:
        """版本本身是否为预发布版本"""
        return self.version.is_prerelease

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mod_id": self.mod_id,
            "version": str(self.version),
            "name": self.name,
            "description": self.description,
            "status": self.status.value,
            "gd": {
                platform.value: str(requirement)
                for platform, requirement in sorted(
                    self.platforms.items(), key=lambda item: item[0].value
                )
            },
        }


@dataclass(frozen=True)
class ResolvedDependency:
    """解析后的依赖：声明的约束与实际选中的版本"""

    mod_id: str
    version: str
    importance: DependencyImportance
    resolved: PackageVersion
    dependent_id: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mod_id": self.mod_id,
            "version": self.version,
            "importance": self.importance.value,
            "resolved_version": str(self.resolved.version),
        }


@dataclass(frozen=True)
class ResolvedIncompatibility:
    """解析后的不兼容声明"""

    mod_id: str
    version: str
    importance: IncompatibilityImportance
    matched: Optional[PackageVersion] = None

    @property
    def breaking(self) -> bool:
        return self.importance == IncompatibilityImportance.BREAKING

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mod_id": self.mod_id,
            "version": self.version,
            "importance": self.importance.value,
            "breaking": self.breaking,
            "matched_version": str(self.matched.version) if self.matched else None,
        }


@dataclass
class Page:
    """分页结果"""

    data: List[PackageVersion]
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"data": [v.to_dict() for v in self.data], "count": self.count}
