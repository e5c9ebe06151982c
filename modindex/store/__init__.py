"""
ModIndex 存储层

定义只读存储接口与内存实现。
"""

from modindex.store.base import VersionStore
from modindex.store.memory import MemoryStore

__all__ = [
    "VersionStore",
    "MemoryStore",
]
