"""版本与约束模型测试"""

import itertools

import pytest

from modindex.exceptions import InvalidConstraintError, InvalidVersionError
from modindex.models import (
    ANY_VERSION,
    CompareOp,
    SemVer,
    compare,
    parse_constraint,
    parse_semver,
    satisfies,
)


class TestParseSemver:
    def test_basic(self):
        v = parse_semver("1.2.3")
        assert (v.major, v.minor, v.patch, v.prerelease) == (1, 2, 3, None)

    def test_leading_v_and_prerelease(self):
        v = parse_semver("v4.2.0-alpha.1")
        assert v == SemVer(4, 2, 0, "alpha.1")
        assert v.is_alpha
        assert str(v) == "4.2.0-alpha.1"

    def test_build_metadata_ignored_in_equality(self):
        assert parse_semver("1.0.0+abc") == parse_semver("1.0.0")
        assert str(parse_semver("1.0.0+abc")) == "1.0.0+abc"

    @pytest.mark.parametrize(
        "value", ["", "1", "1.2", "1.2.3.4", "a.b.c", "-1.0.0", "1.0.0-", "01.0.0", "vv1.0.0"]
    )
    def test_invalid(self, value):
        with pytest.raises(InvalidVersionError) as exc:
            parse_semver(value)
        assert exc.value.code == "E101"


class TestParseConstraint:
    @pytest.mark.parametrize(
        "value,op,version",
        [
            ("<=1.2.0", CompareOp.LESS_EQ, "1.2.0"),
            (">=1.2.0", CompareOp.MORE_EQ, "1.2.0"),
            ("=1.2.0", CompareOp.EXACT, "1.2.0"),
            ("<1.2.0", CompareOp.LESS, "1.2.0"),
            (">1.2.0", CompareOp.MORE, "1.2.0"),
            ("1.2.0", CompareOp.EXACT, "1.2.0"),
            (">=v2.0.0", CompareOp.MORE_EQ, "2.0.0"),
        ],
    )
    def test_operators(self, value, op, version):
        constraint = parse_constraint(value)
        assert constraint.op == op
        assert constraint.version == parse_semver(version)

    def test_wildcard(self):
        constraint = parse_constraint("*")
        assert constraint.is_wildcard
        assert constraint == ANY_VERSION
        assert str(constraint) == "*"

    def test_str_keeps_operator(self):
        assert str(parse_constraint(">=1.0.0")) == ">=1.0.0"
        assert str(parse_constraint("1.0.0")) == "=1.0.0"

    @pytest.mark.parametrize("value", ["", ">=", "~1.0.0", "^1.0.0", ">=abc", "=>1.0.0"])
    def test_invalid(self, value):
        with pytest.raises(InvalidConstraintError):
            parse_constraint(value)


class TestCompare:
    def test_numeric_not_lexical(self):
        assert compare(parse_semver("1.10.0"), parse_semver("1.9.0")) == 1

    def test_release_above_prerelease(self):
        assert compare(parse_semver("1.0.0"), parse_semver("1.0.0-alpha.1")) == 1
        assert parse_semver("1.0.0-alpha.1") < parse_semver("1.0.0")

    def test_prerelease_lexical(self):
        assert compare(parse_semver("1.0.0-alpha.1"), parse_semver("1.0.0-beta.1")) == -1

    def test_total_order(self):
        values = [
            parse_semver(v)
            for v in [
                "0.9.9",
                "1.0.0-alpha.1",
                "1.0.0-alpha.2",
                "1.0.0-beta",
                "1.0.0",
                "1.0.1",
                "2.0.0",
            ]
        ]
        for a, b in itertools.product(values, repeat=2):
            results = [compare(a, b) < 0, compare(a, b) == 0, compare(a, b) > 0]
            assert results.count(True) == 1
            assert compare(a, b) == -compare(b, a)
        for a, b, c in itertools.product(values, repeat=3):
            if compare(a, b) < 0 and compare(b, c) < 0:
                assert compare(a, c) < 0
        assert sorted(reversed(values)) == values


class TestSatisfies:
    def test_major_pinning(self):
        assert not satisfies("3.0.0", parse_constraint(">=2.0.0"))
        assert satisfies("2.5.0", parse_constraint(">=2.0.0"))

    def test_exact_only_same_major(self):
        assert satisfies("2.1.0", "2.1.0")
        assert not satisfies("2.1.1", "2.1.0")

    @pytest.mark.parametrize("candidate", ["0.0.1", "1.0.0-alpha", "99.0.0"])
    def test_wildcard(self, candidate):
        assert satisfies(candidate, "*")

    @pytest.mark.parametrize(
        "candidate,constraint,expected",
        [
            ("1.4.0", "<1.5.0", True),
            ("1.5.0", "<1.5.0", False),
            ("1.5.0", "<=1.5.0", True),
            ("1.5.1", ">1.5.0", True),
            ("1.5.0", ">1.5.0", False),
            ("0.9.0", "<1.5.0", False),
            ("1.5.0-beta.1", ">=1.5.0", False),
        ],
    )
    def test_operators(self, candidate, constraint, expected):
        assert satisfies(candidate, constraint) is expected
