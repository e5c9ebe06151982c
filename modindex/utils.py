import json
from pathlib import Path
from typing import Any, Dict, Optional

import aiofiles
import toml
import yaml

from modindex.exceptions import ConfigParseError
from modindex.models import SnapshotFormat


def detect_format(source: str, fmt: Optional[SnapshotFormat] = None) -> SnapshotFormat:
    """根据后缀判断文档格式"""
    if fmt is not None:
        return fmt

    suffix = Path(source.split("?", 1)[0]).suffix.lower()
    if suffix == ".toml":
        return SnapshotFormat.TOML
    elif suffix == ".json":
        return SnapshotFormat.JSON
    elif suffix in (".yaml", ".yml"):
        return SnapshotFormat.YAML
    raise ConfigParseError(f"不支持的文件格式: {suffix or source}", context={"source": source})


def parse_document(text: str, fmt: SnapshotFormat) -> Dict[str, Any]:
    """解析 JSON / TOML / YAML 文本"""
    try:
        if fmt == SnapshotFormat.JSON:
            data = json.loads(text)
        elif fmt == SnapshotFormat.TOML:
            data = toml.loads(text)
        else:
            data = yaml.safe_load(text)
    except (ValueError, toml.TomlDecodeError, yaml.YAMLError) as e:
        raise ConfigParseError(f"{fmt.value} 解析失败: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigParseError(f"文档顶层必须是一个字典，实际为 {type(data).__name__}")
    return data


def load_config(config_path: str) -> Dict[str, Any]:
    """同步读取配置文件"""
    path = Path(config_path)
    if not path.exists():
        raise ConfigParseError(f"配置文件不存在: {config_path}")
    return parse_document(path.read_text(encoding="utf-8"), detect_format(config_path))


async def read_document(path: str, fmt: Optional[SnapshotFormat] = None) -> Dict[str, Any]:
    """异步读取本地 JSON / TOML / YAML 文件"""
    if not Path(path).exists():
        raise ConfigParseError(f"文件不存在: {path}", context={"source": path})

    async with aiofiles.open(path, encoding="utf-8") as f:
        text = await f.read()
    return parse_document(text, detect_format(path, fmt))
