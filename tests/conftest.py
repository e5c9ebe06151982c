"""测试公共夹具"""

from typing import Any, Dict, Optional, Union

import pytest

from modindex.models import PackageVersion, VersionStatus, parse_semver
from modindex.models.mod_json import (
    parse_dependencies,
    parse_gd,
    parse_incompatibilities,
)
from modindex.store import MemoryStore


def build_version(
    version_id: int,
    mod_id: str,
    version: str,
    gd: Union[str, Dict[str, str]] = "*",
    dependencies: Optional[Any] = None,
    incompatibilities: Optional[Any] = None,
    status: VersionStatus = VersionStatus.ACCEPTED,
) -> PackageVersion:
    return PackageVersion(
        id=version_id,
        mod_id=mod_id,
        version=parse_semver(version),
        status=status,
        platforms=parse_gd(gd),
        dependencies=parse_dependencies(dependencies, version_id),
        incompatibilities=parse_incompatibilities(incompatibilities, version_id),
    )


@pytest.fixture
def make_version():
    """构造 PackageVersion 的工厂"""
    return build_version


@pytest.fixture
def make_store():
    """用若干版本构造 MemoryStore"""

    def _make(*versions: PackageVersion) -> MemoryStore:
        return MemoryStore(versions)

    return _make
