"""
配置模型

定义兼容性查询条件与 ModIndex 运行配置。
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from modindex.exceptions import ConfigValidationError, ModIndexError
from modindex.models.platform import PlatformSet, parse_platforms
from modindex.models.version import SemVer, parse_semver


class SnapshotFormat(Enum):
    """索引快照格式"""

    JSON = "json"
    TOML = "toml"
    YAML = "yaml"


@dataclass(frozen=True)
class MatcherQuery:
    """
    兼容性查询

    platforms 为 None 表示不限平台；engine 为 None 表示不检查引擎版本。
    """

    platforms: Optional[PlatformSet] = None
    engine: Optional[SemVer] = None
    accept_prerelease: bool = False

    @classmethod
    def build(
        cls,
        platforms: Union[None, str, List[str]] = None,
        engine: Optional[str] = None,
        accept_prerelease: bool = False,
    ) -> "MatcherQuery":
        """从原始字符串构造查询，非法输入在此处抛出解析异常"""
        return cls(
            platforms=parse_platforms(platforms),
            engine=parse_semver(engine) if engine else None,
            accept_prerelease=accept_prerelease,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "platforms": sorted(p.value for p in self.platforms)
            if self.platforms
            else None,
            "engine": str(self.engine) if self.engine else None,
            "prerelease": self.accept_prerelease,
        }


ANY_QUERY = MatcherQuery(accept_prerelease=True)


def is_remote_source(source: str) -> bool:
    return source.startswith(("http://", "https://"))


@dataclass
class RegistryConfig:
    """
    索引来源配置

    sources 可以混合本地文件与 http(s) 地址，加载后合并为一个索引。
    """

    sources: List[str] = field(default_factory=list)
    format: Optional[SnapshotFormat] = None

    @property
    def remote_sources(self) -> List[str]:
        return [s for s in self.sources if is_remote_source(s)]

    @property
    def local_sources(self) -> List[str]:
        return [s for s in self.sources if not is_remote_source(s)]


@dataclass
class ModIndexConfig:
    """ModIndex 主配置"""

    registry: RegistryConfig
    query: MatcherQuery
    max_concurrent: int = 5
    debug: bool = False
    log_file: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModIndexConfig":
        """
        从字典构造配置

        Raises:
            ConfigValidationError: 配置值不合法
        """
        if not isinstance(data, dict):
            raise ConfigValidationError("配置必须是一个字典")

        registry_data = data.get("registry", {}) or {}
        query_data = data.get("query", {}) or {}

        fmt = registry_data.get("format")
        try:
            snapshot_format = SnapshotFormat(fmt.lower()) if fmt else None
        except ValueError:
            raise ConfigValidationError(
                f"不支持的快照格式: {fmt}", context={"format": fmt}
            ) from None

        sources = registry_data.get("source") or []
        if isinstance(sources, str):
            sources = [sources]
        if not isinstance(sources, list) or not all(
            isinstance(s, str) and s for s in sources
        ):
            raise ConfigValidationError(
                "registry.source 必须是路径或 URL 字符串，或它们的列表",
                context={"source": sources},
            )

        try:
            query = MatcherQuery.build(
                platforms=query_data.get("platforms"),
                engine=query_data.get("engine"),
                accept_prerelease=bool(query_data.get("prerelease", False)),
            )
        except ModIndexError as e:
            raise ConfigValidationError(
                f"查询配置无效: {e.message}", context=e.context
            ) from e

        max_concurrent = data.get("max_concurrent", 5)
        if not isinstance(max_concurrent, int) or max_concurrent <= 0:
            raise ConfigValidationError(
                "max_concurrent 必须为正整数",
                context={"max_concurrent": max_concurrent},
            )

        return cls(
            registry=RegistryConfig(
                sources=sources,
                format=snapshot_format,
            ),
            query=query,
            max_concurrent=max_concurrent,
            debug=bool(data.get("debug", False)),
            log_file=data.get("log_file"),
        )
