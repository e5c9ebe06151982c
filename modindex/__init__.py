"""
ModIndex

模组索引兼容性解析：版本约束、平台与引擎版本匹配、最新兼容版本选择、依赖闭包解析。
"""

from modindex.models import (
    MatcherQuery,
    PackageVersion,
    parse_constraint,
    parse_semver,
    satisfies,
)
from modindex.store import MemoryStore, VersionStore
from modindex.services import DependencyResolver, ModResolver, VersionMatcher
from modindex.orchestrator import ModIndexOrchestrator, VersionReport

__version__ = "0.1.0"

__all__ = [
    "MatcherQuery",
    "PackageVersion",
    "parse_constraint",
    "parse_semver",
    "satisfies",
    "MemoryStore",
    "VersionStore",
    "DependencyResolver",
    "ModResolver",
    "VersionMatcher",
    "ModIndexOrchestrator",
    "VersionReport",
]
