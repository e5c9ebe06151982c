from abc import ABC, abstractmethod
from typing import Dict, List, Mapping, Optional, Sequence

from modindex.models import (
    DependencyEdge,
    EngineRequirement,
    IncompatibilityEdge,
    PackageVersion,
    Platform,
    VersionStatus,
)


class VersionStore(ABC):
    """
    模组索引的只读存储接口。

    所有返回的版本列表按 id 升序（创建顺序）排列。
    """

    @abstractmethod
    def get_version(self, version_id: int) -> PackageVersion:
        """
        通过 id 获取单个版本。

        Raises:
            StoreNotFoundError: 版本不存在
        """
        pass

    @abstractmethod
    def fetch_versions(
        self, mod_id: str, status: Optional[VersionStatus] = None
    ) -> List[PackageVersion]:
        """
        获取模组的所有版本，可按状态过滤。
        """
        pass

    def fetch_accepted_versions(self, mod_id: str) -> List[PackageVersion]:
        return self.fetch_versions(mod_id, VersionStatus.ACCEPTED)

    def fetch_accepted_versions_for(
        self, mod_ids: Sequence[str]
    ) -> List[PackageVersion]:
        versions: List[PackageVersion] = []
        for mod_id in dict.fromkeys(mod_ids):
            versions.extend(self.fetch_accepted_versions(mod_id))
        return sorted(versions, key=lambda v: v.id)

    def fetch_dependency_edges(self, version_id: int) -> List[DependencyEdge]:
        return list(self.get_version(version_id).dependencies)

    def fetch_dependency_edges_for(
        self, version_ids: Sequence[int]
    ) -> Dict[int, List[DependencyEdge]]:
        return {i: self.fetch_dependency_edges(i) for i in version_ids}

    def fetch_incompatibility_edges(
        self, version_id: int
    ) -> List[IncompatibilityEdge]:
        return list(self.get_version(version_id).incompatibilities)

    def fetch_incompatibility_edges_for(
        self, version_ids: Sequence[int]
    ) -> Dict[int, List[IncompatibilityEdge]]:
        return {i: self.fetch_incompatibility_edges(i) for i in version_ids}

    def fetch_platform_support(
        self, version_id: int
    ) -> Mapping[Platform, EngineRequirement]:
        return self.get_version(version_id).platforms

    def fetch_platform_support_for(
        self, version_ids: Sequence[int]
    ) -> Dict[int, Mapping[Platform, EngineRequirement]]:
        return {i: self.fetch_platform_support(i) for i in version_ids}
