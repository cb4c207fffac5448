"""
DataKey 解析

DataKey 决定调用者能看到哪个租户的数据。解析失败时返回 None，
由数据上下文替换为哨兵值，所以这里从不抛出异常。
"""

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional, Protocol

import jwt

from .conf import invoice_settings


logger = logging.getLogger(__name__)


# 当前激活的 DataKey，None 表示无权访问任何租户数据
_active_data_key: ContextVar[Optional[str]] = ContextVar(
    'tenant_invoices_active_data_key', default=None
)


class DataKeyResolver(Protocol):
    """提供调用者 DataKey 的对象"""

    data_key: Optional[str]


def normalize_data_key(data_key) -> Optional[str]:
    """空值和哨兵值都视为没有 DataKey"""
    if data_key is None:
        return None
    data_key = str(data_key)
    if not data_key or invoice_settings.is_no_access_key(data_key):
        return None
    return data_key


class StaticDataKey:
    """固定 DataKey - 用于后台任务、租户管理和测试"""

    def __init__(self, data_key: Optional[str]):
        self.data_key = data_key

    def __repr__(self):
        return f"StaticDataKey({self.data_key!r})"


class GetDataKeyFromUser:
    """
    从请求中获取 DataKey

    查找顺序:
        1. request.session[DATA_KEY_SESSION_KEY]
        2. request.user 上的 DATA_KEY_USER_ATTRIBUTE 属性（仅已认证用户）
    """

    def __init__(self, request):
        self.data_key = self._find_data_key(request)

    @staticmethod
    def _find_data_key(request) -> Optional[str]:
        if request is None:
            return None

        session = getattr(request, 'session', None)
        if session is not None:
            data_key = session.get(invoice_settings.DATA_KEY_SESSION_KEY)
            if data_key:
                return data_key

        user = getattr(request, 'user', None)
        if user is not None and getattr(user, 'is_authenticated', False):
            return getattr(user, invoice_settings.DATA_KEY_USER_ATTRIBUTE, None)

        return None


class GetDataKeyFromJwt:
    """
    从 Bearer token 的 claim 中获取 DataKey

    token 无效或过期时 data_key 为 None
    """

    def __init__(self, request=None, token: Optional[str] = None):
        if token is None and request is not None:
            token = self._get_bearer_token(request)
        self.data_key = self._decode_data_key(token)

    @staticmethod
    def _get_bearer_token(request) -> Optional[str]:
        header = request.META.get('HTTP_AUTHORIZATION', '')
        scheme, _, token = header.partition(' ')
        if scheme.lower() != 'bearer' or not token:
            return None
        return token.strip()

    @staticmethod
    def _decode_data_key(token: Optional[str]) -> Optional[str]:
        if not token:
            return None

        try:
            payload = jwt.decode(
                token,
                invoice_settings.JWT_SECRET_KEY,
                algorithms=[invoice_settings.JWT_ALGORITHM]
            )
        except jwt.ExpiredSignatureError:
            logger.warning("Rejected expired token while resolving data key")
            return None
        except jwt.InvalidTokenError as e:
            logger.warning(f"Rejected invalid token while resolving data key: {str(e)}")
            return None

        return payload.get(invoice_settings.DATA_KEY_CLAIM)


def get_active_data_key() -> Optional[str]:
    """获取当前激活的 DataKey"""
    return _active_data_key.get()


def get_stamp_data_key() -> str:
    """写入时使用的 DataKey，没有激活的 DataKey 时为哨兵值"""
    return _active_data_key.get() or invoice_settings.NO_ACCESS_DATA_KEY


@contextmanager
def activate_data_key(data_key: Optional[str]) -> Iterator[Optional[str]]:
    """在代码块内激活 DataKey，退出时恢复之前的值"""
    data_key = normalize_data_key(data_key)
    token = _active_data_key.set(data_key)
    try:
        yield data_key
    finally:
        _active_data_key.reset(token)
