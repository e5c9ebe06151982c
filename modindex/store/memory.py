"""
内存存储

将索引快照加载到内存中，实现 VersionStore 的全部查询接口。
"""

from typing import Any, Dict, Iterable, List, Optional

from loguru import logger

from modindex.exceptions import ModIndexError, ModJsonError, StoreNotFoundError
from modindex.models import PackageVersion, VersionStatus, parse_platforms, parse_semver
from modindex.models.mod_json import (
    parse_dependencies,
    parse_gd,
    parse_incompatibilities,
)
from modindex.store.base import VersionStore


class MemoryStore(VersionStore):
    """内存中的模组索引"""

    def __init__(self, versions: Iterable[PackageVersion] = ()):
        self._versions: Dict[int, PackageVersion] = {}
        self._by_mod: Dict[str, List[PackageVersion]] = {}
        for version in versions:
            self.add(version)

    def add(self, version: PackageVersion) -> None:
        """添加一个版本，id 不可重复"""
        if version.id in self._versions:
            raise ModJsonError(
                f"重复的版本 id: {version.id}", context={"id": version.id}
            )
        self._versions[version.id] = version
        bucket = self._by_mod.setdefault(version.mod_id, [])
        bucket.append(version)
        bucket.sort(key=lambda v: v.id)

    def __len__(self) -> int:
        return len(self._versions)

    @property
    def mod_ids(self) -> List[str]:
        return sorted(self._by_mod)

    def get_version(self, version_id: int) -> PackageVersion:
        try:
            return self._versions[version_id]
        except KeyError:
            raise StoreNotFoundError(
                f"版本 {version_id} 不存在", context={"id": version_id}
            ) from None

    def fetch_versions(
        self, mod_id: str, status: Optional[VersionStatus] = None
    ) -> List[PackageVersion]:
        versions = self._by_mod.get(mod_id, [])
        if status is None:
            return list(versions)
        return [v for v in versions if v.status == status]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MemoryStore":
        """
        从索引快照构造存储

        快照格式::

            {"mods": [{"id": "dev.mod", "versions": [
                {"id": 1, "version": "1.0.0", "status": "accepted",
                 "gd": {"win": "4.2.0"}, "dependencies": {...},
                 "incompatibilities": {...}}
            ]}]}

        版本缺少 id 时按文档顺序编号。

        Raises:
            ModJsonError: 快照格式错误
        """
        if not isinstance(data, dict):
            raise ModJsonError("索引快照必须是一个字典")

        store = cls()
        next_id = 1
        for mod in data.get("mods", []) or []:
            if not isinstance(mod, dict):
                raise ModJsonError(f"无效的模组条目: {mod!r}")
            mod_id = mod.get("id")
            if not mod_id:
                raise ModJsonError(f"模组缺少 id: {mod!r}")
            # 没有版本的模组也要登记
            store._by_mod.setdefault(mod_id, [])

            for entry in mod.get("versions", []) or []:
                if not isinstance(entry, dict):
                    raise ModJsonError(
                        f"无效的版本条目: {entry!r}", context={"mod_id": mod_id}
                    )
                version_id = entry.get("id")
                if version_id is None:
                    version_id = next_id
                if not isinstance(version_id, int):
                    raise ModJsonError(
                        f"版本 id 必须为整数: {version_id!r}",
                        context={"mod_id": mod_id},
                    )
                next_id = max(next_id, version_id) + 1

                store.add(cls._parse_version(mod_id, version_id, entry))

        logger.debug(f"索引快照加载完成: {len(store._by_mod)} 个模组, {len(store)} 个版本")
        return store

    @staticmethod
    def _parse_version(
        mod_id: str, version_id: int, entry: Dict[str, Any]
    ) -> PackageVersion:
        try:
            status = VersionStatus(entry.get("status", VersionStatus.ACCEPTED.value))
        except ValueError:
            raise ModJsonError(
                f"{mod_id} 的版本状态无效: {entry.get('status')}",
                context={"mod_id": mod_id, "id": version_id},
            ) from None

        try:
            return PackageVersion(
                id=version_id,
                mod_id=mod_id,
                version=parse_semver(entry.get("version", "")),
                status=status,
                # 没有 gd 时，geode 字段作用于 platforms 列出的全部平台
                platforms=parse_gd(
                    entry.get("gd", entry.get("geode", "*")),
                    parse_platforms(entry.get("platforms")),
                ),
                dependencies=parse_dependencies(entry.get("dependencies"), version_id),
                incompatibilities=parse_incompatibilities(
                    entry.get("incompatibilities"), version_id
                ),
                name=entry.get("name", mod_id),
                description=entry.get("description"),
            )
        except ModIndexError as e:
            e.context.setdefault("mod_id", mod_id)
            e.context.setdefault("id", version_id)
            raise
