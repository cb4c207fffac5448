"""
Tenant Invoices 业务逻辑服务
"""

from .invoice_service import InvoiceService
from .tenant_change_service import InvoiceTenantChangeService

__all__ = [
    'InvoiceService',
    'InvoiceTenantChangeService'
]
