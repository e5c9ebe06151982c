"""
版本匹配服务

实现引擎版本需求匹配、平台匹配以及版本约束过滤。
"""

from typing import Iterable, List, Mapping, Optional

from modindex.models import (
    Constraint,
    EngineRequirement,
    MatcherQuery,
    PackageVersion,
    Platform,
    SemVer,
    satisfies,
)


class VersionMatcher:
    """版本匹配器"""

    @staticmethod
    def engine_matches(requirement: SemVer, engine: SemVer) -> bool:
        """
        检查引擎版本需求是否被查询的引擎版本满足

        alpha 引擎只接受完全相同的需求；其余情况要求 major 相同、
        需求的 minor 不高于查询版本，同一 minor 内再比较预发布标签。

        Args:
            requirement: 版本声明的最低引擎版本
            engine: 查询的引擎版本

        Returns:
            是否匹配
        """
        if engine.is_alpha:
            return requirement == engine

        if requirement.major != engine.major:
            return False

        # alpha 需求只能被同一个 alpha 满足
        if requirement.is_alpha:
            return False

        if requirement.minor > engine.minor:
            return False
        if requirement.minor < engine.minor:
            return True

        if requirement.prerelease is None:
            return True
        if requirement.patch < engine.patch:
            return True
        # 正式版本高于同号的所有预发布版本
        if engine.prerelease is None:
            return True
        return requirement.prerelease <= engine.prerelease

    def platform_matches(
        self, requirement: EngineRequirement, engine: Optional[SemVer]
    ) -> bool:
        """检查单个平台条目是否满足引擎版本"""
        if engine is None or requirement.is_any:
            return True
        return self.engine_matches(requirement.version, engine)

    def matches_support(
        self,
        support: Mapping[Platform, EngineRequirement],
        query: MatcherQuery,
    ) -> bool:
        """检查平台支持表是否满足查询（不含预发布过滤）"""
        if query.platforms is None:
            entries = support.values()
        else:
            entries = [support[p] for p in query.platforms if p in support]

        return any(self.platform_matches(entry, query.engine) for entry in entries)

    def matches(self, version: PackageVersion, query: MatcherQuery) -> bool:
        """
        检查版本是否满足查询

        Args:
            version: 模组版本
            query: 兼容性查询

        Returns:
            是否满足全部查询条件
        """
        if not query.accept_prerelease and version.is_prerelease:
            return False
        return self.matches_support(version.platforms, query)

    def filter(
        self,
        versions: Iterable[PackageVersion],
        query: MatcherQuery,
        constraint: Optional[Constraint] = None,
        major: Optional[int] = None,
    ) -> List[PackageVersion]:
        """
        过滤出满足查询、约束和 major 的版本

        Args:
            versions: 候选版本
            query: 兼容性查询
            constraint: 版本约束
            major: 限定版本自身的 major

        Returns:
            满足条件的版本列表，保持输入顺序
        """
        result = []
        for version in versions:
            if major is not None and version.version.major != major:
                continue
            if constraint is not None and not satisfies(version.version, constraint):
                continue
            if not self.matches(version, query):
                continue
            result.append(version)
        return result
