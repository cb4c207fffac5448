"""
租户变更服务 - 租户创建、改名、删除时同步发票数据

每个方法成功时返回 None，失败时返回错误信息，由租户管理服务回滚事务
"""

import logging
from typing import Optional

from ..context import InvoicesDataContext
from ..datakey import StaticDataKey
from ..models import CompanyTenant


logger = logging.getLogger(__name__)


class InvoiceTenantChangeService:
    """发票数据的租户变更服务"""

    def create_new_tenant(self, tenant) -> Optional[str]:
        """在新租户的 DataKey 下创建公司记录"""
        db = self._context_for(tenant)
        if db.companies.filter(auth_p_tenant_id=tenant.pk).exists():
            return f"There is already a company for the tenant {tenant.tenant_full_name}."

        db.add(CompanyTenant(
            company_name=tenant.tenant_full_name,
            auth_p_tenant_id=tenant.pk
        ))
        db.save_changes()

        logger.info(f"Company created for tenant {tenant.pk} under data key {db.data_key}")
        return None

    def single_tenant_update_name(self, tenant) -> Optional[str]:
        """同步公司名称"""
        db = self._context_for(tenant)
        company = db.companies.filter(auth_p_tenant_id=tenant.pk).first()
        if company is None:
            return f"Could not find the company for the tenant {tenant.tenant_full_name}."

        company.company_name = tenant.tenant_full_name
        db.add(company)
        db.save_changes()
        return None

    def single_tenant_delete(self, tenant) -> Optional[str]:
        """删除该租户 DataKey 下的所有发票数据"""
        db = self._context_for(tenant)

        deleted_items, _ = db.line_items.delete()
        deleted_invoices, _ = db.invoices.delete()
        deleted_companies, _ = db.companies.delete()

        logger.info(
            f"Deleted tenant {tenant.pk} data: {deleted_companies} companies, "
            f"{deleted_invoices} invoice rows, {deleted_items} line items"
        )
        return None

    @staticmethod
    def _context_for(tenant) -> InvoicesDataContext:
        return InvoicesDataContext(StaticDataKey(tenant.data_key))
