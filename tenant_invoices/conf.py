"""
Tenant Invoices - 极简配置
所有配置都有默认值，通过 settings.TENANT_INVOICES 覆盖
"""

import os

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from .constants import (
    DEFAULT_ADMIN_DB_SCHEMA,
    DEFAULT_DATA_KEY_CLAIM,
    DEFAULT_DATA_KEY_SESSION_KEY,
    DEFAULT_DATA_KEY_USER_ATTRIBUTE,
    DEFAULT_DB_SCHEMA,
    DEFAULT_DECIMAL_MAX_DIGITS,
    DEFAULT_DECIMAL_PLACES,
    DEFAULT_NO_ACCESS_DATA_KEY,
)


class TenantInvoicesSettings:
    """
    极简配置类 - 每次访问都从 Django settings 读取，
    所以 override_settings 在测试中可以直接生效
    """

    DEFAULTS = {
        # schema 配置 - 发票数据和租户管理数据分开存放
        'DB_SCHEMA': DEFAULT_DB_SCHEMA,
        'ADMIN_DB_SCHEMA': DEFAULT_ADMIN_DB_SCHEMA,

        # 数据隔离配置
        'NO_ACCESS_DATA_KEY': DEFAULT_NO_ACCESS_DATA_KEY,
        'DATA_KEY_SESSION_KEY': DEFAULT_DATA_KEY_SESSION_KEY,
        'DATA_KEY_USER_ATTRIBUTE': DEFAULT_DATA_KEY_USER_ATTRIBUTE,

        # 金额精度 - 所有 DecimalField 统一
        'DECIMAL_MAX_DIGITS': DEFAULT_DECIMAL_MAX_DIGITS,
        'DECIMAL_PLACES': DEFAULT_DECIMAL_PLACES,

        # JWT 配置 - DataKey 也可以来自 token 的 claim
        'DATA_KEY_CLAIM': DEFAULT_DATA_KEY_CLAIM,
        'JWT_SECRET_KEY': None,  # 默认使用 Django 的 SECRET_KEY
        'JWT_ALGORITHM': 'HS256',
    }

    INT_SETTINGS = ('DECIMAL_MAX_DIGITS', 'DECIMAL_PLACES')

    @property
    def settings(self):
        return getattr(settings, 'TENANT_INVOICES', {})

    def __getattr__(self, name):
        """智能配置获取"""
        if name.startswith('_'):
            raise AttributeError(name)

        # 1. 先检查用户是否显式配置
        user_settings = self.settings
        if name in user_settings:
            return user_settings[name]

        # 2. 检查环境变量
        env_value = os.getenv(f'TENANT_INVOICES_{name}')
        if env_value is not None:
            if name in self.INT_SETTINGS:
                try:
                    return int(env_value)
                except ValueError:
                    raise ImproperlyConfigured(
                        f"TENANT_INVOICES_{name} must be an integer, got {env_value!r}"
                    )
            return env_value

        # 3. 默认值
        if name in self.DEFAULTS:
            default_value = self.DEFAULTS[name]
            if name == 'JWT_SECRET_KEY' and default_value is None:
                return getattr(settings, 'SECRET_KEY', '')
            return default_value

        raise AttributeError(f"'{self.__class__.__name__}' object has no attribute '{name}'")

    def validate(self):
        """验证配置，在应用启动时调用"""
        if not self.NO_ACCESS_DATA_KEY:
            raise ImproperlyConfigured(
                "TENANT_INVOICES.NO_ACCESS_DATA_KEY must be a non-empty string"
            )

        max_digits = self.DECIMAL_MAX_DIGITS
        places = self.DECIMAL_PLACES
        if not isinstance(max_digits, int) or not isinstance(places, int):
            raise ImproperlyConfigured(
                "TENANT_INVOICES.DECIMAL_MAX_DIGITS and DECIMAL_PLACES must be integers"
            )
        if max_digits < 1 or places < 0 or places > max_digits:
            raise ImproperlyConfigured(
                f"Invalid decimal precision {max_digits}/{places}: "
                "DECIMAL_PLACES must be between 0 and DECIMAL_MAX_DIGITS"
            )

    def is_no_access_key(self, data_key):
        """是否为哨兵 DataKey"""
        return data_key == self.NO_ACCESS_DATA_KEY


# 全局配置实例
invoice_settings = TenantInvoicesSettings()


def get_schema_table_name(table_name: str, schema_name=None) -> str:
    """
    获取带 schema 的完整表名

    schema 为空时返回普通表名（SQLite 不支持 schema）
    """
    if schema_name is None:
        schema_name = invoice_settings.DB_SCHEMA
    if not schema_name:
        return table_name
    return f'"{schema_name}"."{table_name}"'
