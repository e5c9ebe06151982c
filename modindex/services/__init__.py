"""
ModIndex 服务层

包含业务逻辑服务：索引客户端、版本匹配、最新版本选择、依赖解析。
"""

from modindex.services.api_client import RegistryClient
from modindex.services.version_matcher import VersionMatcher
from modindex.services.mod_resolver import ModResolver, pick_latest
from modindex.services.dependency_resolver import DependencyResolver

__all__ = [
    "RegistryClient",
    "VersionMatcher",
    "ModResolver",
    "pick_latest",
    "DependencyResolver",
]
