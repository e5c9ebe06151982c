"""
模组解析服务

为模组选择最新的兼容版本，并提供版本索引查询。
"""

from typing import Dict, Iterable, List, Optional, Sequence, Union

from loguru import logger

from modindex.models import (
    Constraint,
    MatcherQuery,
    PackageVersion,
    Page,
    VersionStatus,
    compare,
    parse_constraint,
    parse_semver,
)
from modindex.services.version_matcher import VersionMatcher
from modindex.store.base import VersionStore


def pick_latest(versions: Iterable[PackageVersion]) -> Optional[PackageVersion]:
    """按创建顺序选出最新版本（id 最大），而不是语义化版本最高的"""
    return max(versions, key=lambda v: v.id, default=None)


class ModResolver:
    """模组解析器"""

    def __init__(self, store: VersionStore, matcher: Optional[VersionMatcher] = None):
        self.store = store
        self.matcher = matcher or VersionMatcher()

    def select_latest(
        self,
        mod_id: str,
        query: MatcherQuery,
        major: Optional[int] = None,
    ) -> Optional[PackageVersion]:
        """
        选择模组最新的兼容版本

        Args:
            mod_id: 模组 ID
            query: 兼容性查询
            major: 限定模组版本自身的 major

        Returns:
            选中的版本，没有兼容版本时返回 None
        """
        candidates = self.store.fetch_accepted_versions(mod_id)
        matched = self.matcher.filter(candidates, query, major=major)
        selected = pick_latest(matched)

        logger.debug(
            f"{mod_id}: {len(candidates)} 个候选版本, {len(matched)} 个兼容, "
            f"选中 {selected.version if selected else None}"
        )
        return selected

    def select_latest_batch(
        self,
        mod_ids: Sequence[str],
        query: MatcherQuery,
    ) -> Dict[str, PackageVersion]:
        """
        批量选择最新兼容版本

        Returns:
            模组 ID 到版本的映射，没有兼容版本的模组不出现在结果中
        """
        if not mod_ids:
            return {}

        grouped: Dict[str, List[PackageVersion]] = {}
        for version in self.store.fetch_accepted_versions_for(mod_ids):
            grouped.setdefault(version.mod_id, []).append(version)

        result: Dict[str, PackageVersion] = {}
        for mod_id in mod_ids:
            selected = pick_latest(self.matcher.filter(grouped.get(mod_id, []), query))
            if selected is not None:
                result[mod_id] = selected

        logger.debug(f"批量选择: {len(result)}/{len(set(mod_ids))} 个模组有兼容版本")
        return result

    def list_versions(
        self,
        mod_id: str,
        query: MatcherQuery,
        constraint: Union[Constraint, str, None] = None,
        status: VersionStatus = VersionStatus.ACCEPTED,
        page: int = 1,
        per_page: int = 10,
    ) -> Page:
        """
        分页列出模组版本

        Args:
            mod_id: 模组 ID
            query: 兼容性查询
            constraint: 版本约束
            status: 版本状态
            page: 页码，从 1 开始
            per_page: 每页数量

        Returns:
            按创建顺序倒序的分页结果
        """
        if isinstance(constraint, str):
            constraint = parse_constraint(constraint)
        page = max(page, 1)
        per_page = max(per_page, 1)

        versions = self.matcher.filter(
            self.store.fetch_versions(mod_id, status), query, constraint=constraint
        )
        versions.sort(key=lambda v: v.id, reverse=True)

        offset = (page - 1) * per_page
        return Page(data=versions[offset : offset + per_page], count=len(versions))

    def get_pending_for_mods(
        self, mod_ids: Sequence[str]
    ) -> Dict[str, List[PackageVersion]]:
        """获取多个模组的待审核版本"""
        result: Dict[str, List[PackageVersion]] = {}
        for mod_id in dict.fromkeys(mod_ids):
            pending = self.store.fetch_versions(mod_id, VersionStatus.PENDING)
            if pending:
                result[mod_id] = pending
        return result

    def find_version(self, mod_id: str, version: str) -> Optional[PackageVersion]:
        """
        按版本号查找模组的某个版本

        Raises:
            InvalidVersionError: 版本号格式错误
        """
        wanted = parse_semver(version)
        matched = [
            v for v in self.store.fetch_versions(mod_id) if compare(v.version, wanted) == 0
        ]
        return pick_latest(matched)
