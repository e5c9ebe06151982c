"""配置与文档读取测试"""

import asyncio

import pytest

from modindex.exceptions import ConfigParseError, ConfigValidationError
from modindex.models import ModIndexConfig, Platform, SnapshotFormat, parse_semver
from modindex.utils import detect_format, load_config, parse_document, read_document


class TestModIndexConfig:
    def test_defaults(self):
        config = ModIndexConfig.from_dict({})
        assert config.registry.sources == []
        assert config.query.platforms is None
        assert config.query.engine is None
        assert config.query.accept_prerelease is False
        assert config.max_concurrent == 5

    def test_full(self):
        config = ModIndexConfig.from_dict(
            {
                "registry": {"source": "https://index.test/snapshot", "format": "YAML"},
                "query": {"platforms": ["win", "android"], "engine": "4.2.0", "prerelease": True},
                "max_concurrent": 2,
                "debug": True,
            }
        )
        assert config.registry.remote_sources == ["https://index.test/snapshot"]
        assert config.registry.format == SnapshotFormat.YAML
        assert config.query.platforms == {
            Platform.WINDOWS,
            Platform.ANDROID32,
            Platform.ANDROID64,
        }
        assert config.query.engine == parse_semver("4.2.0")
        assert config.query.accept_prerelease
        assert config.max_concurrent == 2
        assert config.debug

    def test_mixed_sources(self):
        config = ModIndexConfig.from_dict(
            {"registry": {"source": ["registry.json", "http://index.test/extra.json"]}}
        )
        assert config.registry.local_sources == ["registry.json"]
        assert config.registry.remote_sources == ["http://index.test/extra.json"]

    @pytest.mark.parametrize(
        "data",
        [
            {"registry": {"format": "xml"}},
            {"query": {"platforms": "linux"}},
            {"query": {"engine": "four"}},
            {"max_concurrent": 0},
            {"max_concurrent": "3"},
            {"registry": {"source": ["a.json", 3]}},
            {"registry": {"source": {"path": "a.json"}}},
        ],
    )
    def test_invalid(self, data):
        with pytest.raises(ConfigValidationError):
            ModIndexConfig.from_dict(data)

    def test_query_to_dict(self):
        query = ModIndexConfig.from_dict(
            {"query": {"platforms": "mac", "engine": "4.2.0"}}
        ).query
        assert query.to_dict() == {
            "platforms": ["mac-arm", "mac-intel"],
            "engine": "4.2.0",
            "prerelease": False,
        }

    def test_log_file(self):
        assert ModIndexConfig.from_dict({"log_file": "modindex.log"}).log_file == "modindex.log"


class TestDocuments:
    @pytest.mark.parametrize(
        "source,fmt",
        [
            ("a.json", SnapshotFormat.JSON),
            ("a.TOML", SnapshotFormat.TOML),
            ("dir/a.yml", SnapshotFormat.YAML),
            ("https://index.test/a.yaml?rev=2", SnapshotFormat.YAML),
        ],
    )
    def test_detect_format(self, source, fmt):
        assert detect_format(source) == fmt

    def test_detect_format_explicit(self):
        assert detect_format("a.txt", SnapshotFormat.TOML) == SnapshotFormat.TOML

    def test_detect_format_unknown(self):
        with pytest.raises(ConfigParseError):
            detect_format("a.txt")

    def test_parse_document(self):
        assert parse_document('{"a": 1}', SnapshotFormat.JSON) == {"a": 1}
        assert parse_document("a = 1", SnapshotFormat.TOML) == {"a": 1}
        assert parse_document("a: 1", SnapshotFormat.YAML) == {"a": 1}
        assert parse_document("", SnapshotFormat.YAML) == {}

    @pytest.mark.parametrize(
        "text,fmt",
        [
            ("[1, 2]", SnapshotFormat.JSON),
            ("a = ", SnapshotFormat.TOML),
            ("a: [", SnapshotFormat.YAML),
            ("- a", SnapshotFormat.YAML),
        ],
    )
    def test_parse_document_invalid(self, text, fmt):
        with pytest.raises(ConfigParseError):
            parse_document(text, fmt)

    def test_load_config(self, tmp_path):
        path = tmp_path / "modindex.toml"
        path.write_text('[registry]\nsource = "registry.json"\n', encoding="utf-8")
        assert load_config(str(path)) == {"registry": {"source": "registry.json"}}

    def test_load_config_missing(self, tmp_path):
        with pytest.raises(ConfigParseError):
            load_config(str(tmp_path / "missing.toml"))

    def test_read_document(self, tmp_path):
        path = tmp_path / "registry.yaml"
        path.write_text("mods: []\n", encoding="utf-8")
        assert asyncio.run(read_document(str(path))) == {"mods": []}

    def test_read_document_missing(self, tmp_path):
        with pytest.raises(ConfigParseError):
            asyncio.run(read_document(str(tmp_path / "missing.json")))
