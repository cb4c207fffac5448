"""
Tenant Invoices 数据模型
"""

from .base import DataKeyFilterReadWrite, DataKeyManager, DataKeyQuerySet
# registration 必须在具体模型之前导入，才能收到它们的 class_prepared 信号
from .registration import verify_data_key_models
from .company import CompanyTenant
from .invoice import Invoice, LineItem

__all__ = [
    'DataKeyFilterReadWrite',
    'DataKeyManager',
    'DataKeyQuerySet',
    'verify_data_key_models',
    'CompanyTenant',
    'Invoice',
    'LineItem'
]
