"""
Tenant Invoices 常量定义
"""

# 应用标签，所有注册到该标签下的模型都必须支持 DataKey 过滤
APP_LABEL = 'tenant_invoices'
ADMIN_APP_LABEL = 'tenant_admin'

# 没有可用 DataKey 时使用的哨兵值，不会匹配任何真实租户
DEFAULT_NO_ACCESS_DATA_KEY = 'Bad key'

# data_key 列长度
DATA_KEY_MAX_LENGTH = 100

# 默认 schema
DEFAULT_DB_SCHEMA = 'invoice'
DEFAULT_ADMIN_DB_SCHEMA = 'authp'

# 金额字段统一精度
DEFAULT_DECIMAL_MAX_DIGITS = 9
DEFAULT_DECIMAL_PLACES = 2

# DataKey 来源
DEFAULT_DATA_KEY_SESSION_KEY = 'data_key'
DEFAULT_DATA_KEY_USER_ATTRIBUTE = 'data_key'
DEFAULT_DATA_KEY_CLAIM = 'DataKey'

# 租户名称长度限制
TENANT_NAME_MAX_LENGTH = 400

# 租户管理消息
TENANT_NOT_FOUND_MESSAGE = 'Could not find the tenant you were looking for.'


# 错误代码
class ErrorCode:
    # 配置错误
    MISSING_DATA_KEY_FILTER = 'missing_data_key_filter'

    # 数据隔离错误
    DATA_KEY_MISMATCH = 'data_key_mismatch'
    DATA_KEY_READ_ONLY = 'data_key_read_only'
    NOT_FILTERABLE = 'not_filterable'

    # 业务错误
    INVOICE_NOT_FOUND = 'invoice_not_found'
    VALIDATION_ERROR = 'validation_error'
