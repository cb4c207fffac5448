"""
Tenant Invoices 自定义异常
"""

from typing import Optional

from .constants import ErrorCode


class TenantInvoicesError(Exception):
    """Tenant Invoices 基础异常"""
    def __init__(self, message: str, error_code: Optional[str] = None):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class ConfigurationError(TenantInvoicesError):
    """配置错误 - 启动时致命"""
    def __init__(self, message: str, error_code: Optional[str] = ErrorCode.MISSING_DATA_KEY_FILTER):
        super().__init__(message, error_code)


class DataKeyError(TenantInvoicesError):
    """数据隔离错误基类"""
    pass


class DataKeyMismatchError(DataKeyError):
    """写入的行属于其他 DataKey"""
    def __init__(self, message: str, error_code: Optional[str] = ErrorCode.DATA_KEY_MISMATCH):
        super().__init__(message, error_code)


class InvoiceNotFoundError(TenantInvoicesError):
    """发票不存在错误"""
    def __init__(self, message: str, error_code: Optional[str] = ErrorCode.INVOICE_NOT_FOUND):
        super().__init__(message, error_code)


class ValidationError(TenantInvoicesError):
    """验证错误"""
    def __init__(self, message: str, error_code: Optional[str] = ErrorCode.VALIDATION_ERROR):
        super().__init__(message, error_code)
