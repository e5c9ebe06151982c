"""
API 客户端

从远程模组索引拉取索引快照。
"""

import asyncio
from typing import Any, Dict, List, Optional, Sequence

import aiohttp
from loguru import logger

from modindex.exceptions import APIError, ConfigParseError
from modindex.models import SnapshotFormat
from modindex.utils import detect_format, parse_document


class RegistryClient:
    """模组索引 API 客户端"""

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        max_concurrent: int = 5,
    ):
        self._session = session
        self._owned_session = session is None
        self.max_concurrent = max_concurrent

    @property
    def session(self) -> aiohttp.ClientSession:
        """获取或创建 aiohttp session"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def _request(self, url: str, params: Optional[dict] = None) -> str:
        """发送 API 请求并返回响应文本"""
        try:
            async with self.session.get(url, params=params) as response:
                if response.status == 200:
                    return await response.text()
                elif response.status == 404:
                    raise APIError(
                        f"索引不存在: {url}", code="E404", response=response
                    )
                else:
                    raise APIError(
                        f"API 请求失败 (状态码: {response.status})",
                        response=response,
                    )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise APIError(f"无法连接索引: {url} ({e})", context={"url": url}) from e

    async def get_snapshot(
        self, url: str, fmt: Optional[SnapshotFormat] = None
    ) -> Dict[str, Any]:
        """
        获取索引快照

        Args:
            url: 快照地址
            fmt: 快照格式，缺省时根据后缀判断，无法判断时按 JSON 处理

        Returns:
            快照字典
        """
        try:
            fmt = detect_format(url, fmt)
        except ConfigParseError:
            fmt = SnapshotFormat.JSON

        logger.info(f"正在获取索引快照: {url}")
        text = await self._request(url)
        return parse_document(text, fmt)

    async def get_snapshots(
        self, urls: Sequence[str], fmt: Optional[SnapshotFormat] = None
    ) -> Dict[str, Any]:
        """
        并发获取多个快照并合并其中的模组列表
        """
        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def fetch(url: str) -> Dict[str, Any]:
            async with semaphore:
                return await self.get_snapshot(url, fmt)

        results = await asyncio.gather(*(fetch(url) for url in urls))
        mods: List[Dict[str, Any]] = []
        for snapshot in results:
            mods.extend(snapshot.get("mods", []) or [])
        return {"mods": mods}

    async def close(self):
        """关闭客户端"""
        if self._owned_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        """异步上下文管理器入口"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """异步上下文管理器出口"""
        await self.close()
