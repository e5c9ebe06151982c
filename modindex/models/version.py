"""
版本与约束模型

定义语义化版本、比较约束以及引擎版本需求，提供解析与比较函数。
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering
from typing import Optional, Union

from modindex.exceptions import InvalidConstraintError, InvalidVersionError


_SEMVER_RE = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)

WILDCARD = "*"


@total_ordering
@dataclass(frozen=True)
class SemVer:
    """
    语义化版本号。

    排序依次比较 major、minor、patch，最后比较预发布标签；
    没有预发布标签的版本高于带标签的同号版本。构建元数据不参与比较。
    """

    major: int
    minor: int
    patch: int
    prerelease: Optional[str] = None
    build: Optional[str] = field(default=None, compare=False)

    @property
    def is_prerelease(self) -> bool:
        return self.prerelease is not None

    @property
    def is_alpha(self) -> bool:
        """预发布标签是否为 alpha"""
        return is_alpha_tag(self.prerelease)

    def __lt__(self, other: "SemVer") -> bool:
        if not isinstance(other, SemVer):
            return NotImplemented
        return compare(self, other) < 0

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += f"-{self.prerelease}"
        if self.build:
            text += f"+{self.build}"
        return text


class CompareOp(Enum):
    """约束比较运算符"""

    EXACT = "="
    LESS = "<"
    LESS_EQ = "<="
    MORE = ">"
    MORE_EQ = ">="


# 前缀检查顺序：先检查两字符运算符，避免 "<=" 被识别为 "<"
_OPERATOR_PREFIXES = (
    CompareOp.LESS_EQ,
    CompareOp.MORE_EQ,
    CompareOp.EXACT,
    CompareOp.LESS,
    CompareOp.MORE,
)


@dataclass(frozen=True)
class Constraint:
    """
    版本约束

    op 和 version 同时为 None 时表示通配符 ``*``。
    """

    op: Optional[CompareOp] = None
    version: Optional[SemVer] = None

    @property
    def is_wildcard(self) -> bool:
        return self.version is None

    @property
    def major(self) -> Optional[int]:
        return None if self.version is None else self.version.major

    def __str__(self) -> str:
        if self.version is None or self.op is None:
            return WILDCARD
        return f"{self.op.value}{self.version}"


ANY_VERSION = Constraint()


def is_alpha_tag(prerelease: Optional[str]) -> bool:
    return bool(prerelease) and prerelease.startswith("alpha")


def parse_semver(value: str) -> SemVer:
    """
    解析语义化版本号

    Args:
        value: 版本字符串，可带前缀 "v"

    Returns:
        SemVer 对象

    Raises:
        InvalidVersionError: 格式不合法
    """
    if not isinstance(value, str):
        raise InvalidVersionError(str(value))

    text = value.strip()
    if text.startswith("v"):
        text = text[1:]

    match = _SEMVER_RE.match(text)
    if not match:
        raise InvalidVersionError(value)

    major, minor, patch, prerelease, build = match.groups()
    return SemVer(
        major=int(major),
        minor=int(minor),
        patch=int(patch),
        prerelease=prerelease,
        build=build,
    )


def parse_constraint(value: str) -> Constraint:
    """
    解析版本约束

    识别 ``<=, >=, =, <, >`` 前缀，没有前缀时视为 ``=``；单独的 ``*`` 为通配符。

    Raises:
        InvalidConstraintError: 格式不合法
    """
    if not isinstance(value, str):
        raise InvalidConstraintError(str(value))

    text = value.strip()
    if text == WILDCARD:
        return ANY_VERSION

    op = CompareOp.EXACT
    for candidate in _OPERATOR_PREFIXES:
        if text.startswith(candidate.value):
            op = candidate
            text = text[len(candidate.value) :]
            break

    try:
        version = parse_semver(text.strip())
    except InvalidVersionError:
        raise InvalidConstraintError(value) from None

    return Constraint(op=op, version=version)


def compare(a: SemVer, b: SemVer) -> int:
    """
    比较两个版本

    Returns:
        -1 / 0 / 1 分别表示 a 小于、等于、大于 b
    """
    left = (a.major, a.minor, a.patch)
    right = (b.major, b.minor, b.patch)
    if left != right:
        return -1 if left < right else 1

    if a.prerelease == b.prerelease:
        return 0
    # 无预发布标签的版本更高
    if not a.prerelease:
        return 1
    if not b.prerelease:
        return -1
    return -1 if a.prerelease < b.prerelease else 1


def satisfies(candidate: Union[SemVer, str], constraint: Union[Constraint, str]) -> bool:
    """
    检查版本是否满足约束

    通配符总是满足；否则候选版本的 major 必须与约束一致，且比较运算成立。
    """
    if isinstance(candidate, str):
        candidate = parse_semver(candidate)
    if isinstance(constraint, str):
        constraint = parse_constraint(constraint)

    if constraint.is_wildcard:
        return True

    # 不同 major 的版本线互不兼容
    if candidate.major != constraint.version.major:
        return False

    result = compare(candidate, constraint.version)
    if constraint.op == CompareOp.EXACT:
        return result == 0
    if constraint.op == CompareOp.LESS:
        return result < 0
    if constraint.op == CompareOp.LESS_EQ:
        return result <= 0
    if constraint.op == CompareOp.MORE:
        return result > 0
    return result >= 0


@dataclass(frozen=True)
class EngineRequirement:
    """
    引擎版本需求

    version 为 None 表示 ``*``，即支持任意引擎版本。
    """

    version: Optional[SemVer] = None

    @property
    def is_any(self) -> bool:
        return self.version is None

    def __str__(self) -> str:
        return WILDCARD if self.version is None else str(self.version)


ANY_ENGINE = EngineRequirement()


def parse_engine_requirement(value: Union[str, SemVer, EngineRequirement]) -> EngineRequirement:
    """解析引擎版本需求，``*`` 表示任意版本"""
    if isinstance(value, EngineRequirement):
        return value
    if isinstance(value, SemVer):
        return EngineRequirement(value)
    if isinstance(value, str) and value.strip() == WILDCARD:
        return ANY_ENGINE
    return EngineRequirement(parse_semver(value))
