"""
主协调器

整合存储与服务层组件：加载索引、选择版本、解析依赖与不兼容声明。
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

from loguru import logger

from modindex.models import (
    Constraint,
    MatcherQuery,
    PackageVersion,
    Page,
    ResolvedDependency,
    ResolvedIncompatibility,
    SnapshotFormat,
    VersionStatus,
    is_remote_source,
)
from modindex.services import (
    DependencyResolver,
    ModResolver,
    RegistryClient,
    VersionMatcher,
)
from modindex.store import MemoryStore, VersionStore
from modindex.utils import read_document


@dataclass
class VersionReport:
    """版本及其依赖闭包与不兼容声明"""

    version: PackageVersion
    dependencies: Optional[List[ResolvedDependency]] = None
    incompatibilities: List[ResolvedIncompatibility] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data = self.version.to_dict()
        if self.dependencies is not None:
            data["dependencies"] = [d.to_dict() for d in self.dependencies]
        data["incompatibilities"] = [i.to_dict() for i in self.incompatibilities]
        return data


class ModIndexOrchestrator:
    """ModIndex 主协调器"""

    def __init__(self, store: VersionStore):
        self.store = store
        self.matcher = VersionMatcher()
        self.resolver = ModResolver(store, self.matcher)
        self.dep_resolver = DependencyResolver(store, self.matcher)

    @classmethod
    async def from_source(
        cls,
        source: Union[str, Sequence[str]],
        fmt: Optional[SnapshotFormat] = None,
        client: Optional[RegistryClient] = None,
        max_concurrent: int = 5,
    ) -> "ModIndexOrchestrator":
        """
        从本地文件或远程地址加载索引快照

        多个来源的模组列表按顺序合并，版本 id 在所有来源中必须唯一。

        Args:
            source: 文件路径或 http(s) 地址，或它们的列表
            fmt: 快照格式
            client: 远程索引客户端，缺省时临时创建
            max_concurrent: 临时客户端的最大并发请求数

        Returns:
            协调器实例
        """
        sources = [source] if isinstance(source, str) else list(source)
        remote = [s for s in sources if is_remote_source(s)]

        mods: List[Dict[str, Any]] = []
        for path in sources:
            if not is_remote_source(path):
                snapshot = await read_document(path, fmt)
                mods.extend(snapshot.get("mods", []) or [])

        if remote:
            owned = client is None
            client = client or RegistryClient(max_concurrent=max_concurrent)
            try:
                snapshot = await client.get_snapshots(remote, fmt)
            finally:
                if owned:
                    await client.close()
            mods.extend(snapshot["mods"])

        store = MemoryStore.from_dict({"mods": mods})
        logger.success(f"索引加载完成: {len(store.mod_ids)} 个模组, {len(store)} 个版本")
        return cls(store)

    def get_latest(
        self,
        mod_id: str,
        query: MatcherQuery,
        major: Optional[int] = None,
        with_dependencies: bool = False,
    ) -> Optional[VersionReport]:
        """
        获取模组最新的兼容版本

        Returns:
            版本报告，没有兼容版本时返回 None
        """
        version = self.resolver.select_latest(mod_id, query, major)
        if version is None:
            logger.info(f"模组 {mod_id} 没有兼容版本")
            return None
        return self._report(version, query, with_dependencies)

    def get_latest_batch(
        self, mod_ids: Sequence[str], query: MatcherQuery
    ) -> Dict[str, PackageVersion]:
        """批量获取最新兼容版本"""
        return self.resolver.select_latest_batch(mod_ids, query)

    def get_version(
        self,
        mod_id: str,
        version: str,
        query: MatcherQuery,
        with_dependencies: bool = True,
    ) -> Optional[VersionReport]:
        """获取指定版本的报告"""
        found = self.resolver.find_version(mod_id, version)
        if found is None:
            logger.info(f"模组 {mod_id} 不存在版本 {version}")
            return None
        return self._report(found, query, with_dependencies)

    def resolve_dependencies(
        self, start_versions: Sequence[PackageVersion], query: MatcherQuery
    ) -> Dict[int, List[ResolvedDependency]]:
        return self.dep_resolver.resolve_dependencies(start_versions, query)

    def resolve_incompatibilities(
        self, version: PackageVersion, query: Optional[MatcherQuery] = None
    ) -> List[ResolvedIncompatibility]:
        return self.dep_resolver.resolve_incompatibilities(version, query)

    def list_versions(
        self,
        mod_id: str,
        query: MatcherQuery,
        constraint: Union[Constraint, str, None] = None,
        status: VersionStatus = VersionStatus.ACCEPTED,
        page: int = 1,
        per_page: int = 10,
    ) -> Page:
        return self.resolver.list_versions(
            mod_id, query, constraint, status, page, per_page
        )

    def _report(
        self, version: PackageVersion, query: MatcherQuery, with_dependencies: bool
    ) -> VersionReport:
        dependencies = None
        if with_dependencies:
            dependencies = self.resolve_dependencies([version], query)[version.id]
        incompatibilities = self.resolve_incompatibilities(version, query)

        breaking = [i for i in incompatibilities if i.breaking and i.matched]
        if breaking:
            logger.warning(
                f"{version.mod_id} {version.version} 与 "
                f"{', '.join(i.mod_id for i in breaking)} 存在破坏性不兼容"
            )
        return VersionReport(version, dependencies, incompatibilities)
