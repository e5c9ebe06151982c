"""
ModIndex 统一异常体系

提供分层的异常结构，支持错误代码、上下文信息和 JSON 序列化。
"""

from typing import Any, Dict, Optional
import aiohttp


class ModIndexError(Exception):
    """ModIndex 基础异常类"""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self._get_default_code()
        self.context = context or {}

    def _get_default_code(self) -> str:
        """获取默认错误代码"""
        return "E000"

    def to_dict(self) -> Dict[str, Any]:
        """将异常转换为字典格式"""
        return {
            "error": True,
            "code": self.code,
            "message": self.message,
            "context": self.context,
            "type": self.__class__.__name__,
        }

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message


class VersionError(ModIndexError):
    """版本相关错误"""

    def _get_default_code(self) -> str:
        return "E100"


class InvalidVersionError(VersionError):
    """版本号格式错误"""

    def __init__(self, value: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(f"无效的版本号: {value!r}", context=context)
        self.context.setdefault("value", value)

    def _get_default_code(self) -> str:
        return "E101"


class InvalidConstraintError(VersionError):
    """版本约束格式错误"""

    def __init__(self, value: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(f"无效的版本约束: {value!r}", context=context)
        self.context.setdefault("value", value)

    def _get_default_code(self) -> str:
        return "E102"


class InvalidPlatformError(VersionError):
    """平台名称错误"""

    def __init__(self, value: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(f"未知的平台: {value!r}", context=context)
        self.context.setdefault("value", value)

    def _get_default_code(self) -> str:
        return "E103"


class ModJsonError(ModIndexError):
    """mod.json 声明错误"""

    def _get_default_code(self) -> str:
        return "E200"


class DuplicatePlatformError(ModJsonError):
    """mod.json 中重复声明了平台"""

    def _get_default_code(self) -> str:
        return "E201"


class ConfigError(ModIndexError):
    """配置相关错误"""

    def _get_default_code(self) -> str:
        return "E300"


class ConfigParseError(ConfigError):
    """配置解析错误"""

    def _get_default_code(self) -> str:
        return "E301"


class ConfigValidationError(ConfigError):
    """配置验证错误"""

    def _get_default_code(self) -> str:
        return "E302"


class StoreError(ModIndexError):
    """存储访问错误"""

    def _get_default_code(self) -> str:
        return "E400"


class StoreNotFoundError(StoreError):
    """存储中不存在该记录"""

    def _get_default_code(self) -> str:
        return "E404"


class APIError(StoreError):
    """远程索引 API 错误"""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        response: Optional[aiohttp.ClientResponse] = None,
    ):
        super().__init__(message, code, context)
        self.response = response
        if response is not None:
            self.context["status_code"] = response.status
            self.context["url"] = str(response.url)

    def _get_default_code(self) -> str:
        return "E410"


__all__ = [
    # 基础异常
    "ModIndexError",
    # 版本异常
    "VersionError",
    "InvalidVersionError",
    "InvalidConstraintError",
    "InvalidPlatformError",
    # 声明异常
    "ModJsonError",
    "DuplicatePlatformError",
    # 配置异常
    "ConfigError",
    "ConfigParseError",
    "ConfigValidationError",
    # 存储异常
    "StoreError",
    "StoreNotFoundError",
    "APIError",
]
