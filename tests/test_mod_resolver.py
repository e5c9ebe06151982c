"""最新兼容版本选择与版本索引查询测试"""

import pytest

from modindex.exceptions import InvalidVersionError
from modindex.models import MatcherQuery, VersionStatus
from modindex.services import ModResolver, pick_latest


@pytest.fixture
def store(make_store, make_version):
    return make_store(
        make_version(1, "geode.node-ids", "1.0.0", gd={"win": "4.1.0"}),
        make_version(2, "geode.node-ids", "2.0.0", gd={"win": "4.2.0", "android": "4.2.0"}),
        # 在 2.0.0 之后发布的旧版本线补丁
        make_version(3, "geode.node-ids", "1.9.0", gd={"win": "4.2.0"}),
        make_version(4, "geode.node-ids", "2.1.0-beta.1", gd={"win": "4.2.0"}),
        make_version(
            5,
            "geode.node-ids",
            "2.2.0",
            gd={"win": "4.2.0"},
            status=VersionStatus.PENDING,
        ),
        make_version(6, "alk.editor-plus", "0.5.0", gd={"mac": "4.0.0"}),
        make_version(
            7, "alk.editor-plus", "0.6.0", gd={"mac": "4.0.0"}, status=VersionStatus.PENDING
        ),
    )


@pytest.fixture
def resolver(store):
    return ModResolver(store)


class TestSelectLatest:
    def test_latest_wins_by_creation_order(self, resolver):
        selected = resolver.select_latest(
            "geode.node-ids", MatcherQuery.build(platforms="win", engine="4.2.0")
        )
        assert str(selected.version) == "1.9.0"

    def test_major_filter(self, resolver):
        query = MatcherQuery.build(platforms="win", engine="4.2.0")
        assert str(resolver.select_latest("geode.node-ids", query, major=2).version) == "2.0.0"
        assert resolver.select_latest("geode.node-ids", query, major=3) is None

    def test_prerelease_accepted_when_asked(self, resolver):
        query = MatcherQuery.build(platforms="win", engine="4.2.0", accept_prerelease=True)
        assert str(resolver.select_latest("geode.node-ids", query).version) == "2.1.0-beta.1"

    def test_pending_versions_never_selected(self, resolver):
        selected = resolver.select_latest("geode.node-ids", MatcherQuery())
        assert selected.id != 5

    def test_platform_restricts_candidates(self, resolver):
        selected = resolver.select_latest(
            "geode.node-ids", MatcherQuery.build(platforms="android64")
        )
        assert str(selected.version) == "2.0.0"

    def test_no_compatible_version(self, resolver):
        assert resolver.select_latest("geode.node-ids", MatcherQuery.build(engine="3.0.0")) is None
        assert resolver.select_latest("missing.mod", MatcherQuery()) is None


class TestSelectLatestBatch:
    def test_absent_mods_omitted(self, resolver):
        result = resolver.select_latest_batch(
            ["geode.node-ids", "alk.editor-plus", "missing.mod"],
            MatcherQuery.build(platforms="win"),
        )
        assert list(result) == ["geode.node-ids"]
        assert result["geode.node-ids"].id == 3

    def test_empty_input(self, resolver):
        assert resolver.select_latest_batch([], MatcherQuery()) == {}

    def test_matches_single_selection(self, resolver):
        query = MatcherQuery.build(platforms="mac")
        batch = resolver.select_latest_batch(["alk.editor-plus", "geode.node-ids"], query)
        for mod_id in ["alk.editor-plus", "geode.node-ids"]:
            assert batch.get(mod_id) == resolver.select_latest(mod_id, query)


class TestListVersions:
    def test_newest_first_with_paging(self, resolver):
        query = MatcherQuery(accept_prerelease=True)
        first = resolver.list_versions("geode.node-ids", query, per_page=2)
        assert first.count == 4
        assert [v.id for v in first.data] == [4, 3]

        second = resolver.list_versions("geode.node-ids", query, page=2, per_page=2)
        assert [v.id for v in second.data] == [2, 1]

        assert resolver.list_versions("geode.node-ids", query, page=3, per_page=2).data == []

    def test_constraint(self, resolver):
        page = resolver.list_versions("geode.node-ids", MatcherQuery(), constraint=">=1.5.0")
        assert [str(v.version) for v in page.data] == ["1.9.0"]

    def test_status(self, resolver):
        page = resolver.list_versions(
            "geode.node-ids", MatcherQuery(), status=VersionStatus.PENDING
        )
        assert [v.id for v in page.data] == [5]

    def test_to_dict(self, resolver):
        data = resolver.list_versions("alk.editor-plus", MatcherQuery()).to_dict()
        assert data["count"] == 1
        assert data["data"][0]["gd"] == {"mac-arm": "4.0.0", "mac-intel": "4.0.0"}


def test_pending_for_mods(resolver):
    result = resolver.get_pending_for_mods(["geode.node-ids", "alk.editor-plus", "missing.mod"])
    assert {k: [v.id for v in vs] for k, vs in result.items()} == {
        "geode.node-ids": [5],
        "alk.editor-plus": [7],
    }


class TestFindVersion:
    def test_found(self, resolver):
        assert resolver.find_version("geode.node-ids", "v1.9.0").id == 3

    def test_any_status(self, resolver):
        assert resolver.find_version("geode.node-ids", "2.2.0").id == 5

    def test_missing(self, resolver):
        assert resolver.find_version("geode.node-ids", "9.9.9") is None

    def test_invalid(self, resolver):
        with pytest.raises(InvalidVersionError):
            resolver.find_version("geode.node-ids", "latest")


def test_pick_latest(make_version):
    assert pick_latest([]) is None
    older = make_version(10, "a.mod", "3.0.0")
    newer = make_version(11, "a.mod", "1.0.0")
    assert pick_latest([newer, older]) is newer
