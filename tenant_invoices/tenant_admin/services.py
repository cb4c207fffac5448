"""
租户管理服务

所有操作都返回 StatusGeneric，错误不会以异常形式抛给调用方
"""

import logging
from typing import Optional

from django.db import DatabaseError, transaction

from ..constants import TENANT_NAME_MAX_LENGTH, TENANT_NOT_FOUND_MESSAGE
from ..exceptions import TenantInvoicesError
from ..services import InvoiceTenantChangeService
from .models import Tenant
from .status import StatusGeneric


logger = logging.getLogger(__name__)


class AuthTenantAdminService:
    """租户管理服务"""

    def __init__(self, tenant_change_service=None):
        self.tenant_change_service = tenant_change_service or InvoiceTenantChangeService()

    def query_tenants(self):
        """所有租户，按名称排序"""
        return Tenant.objects.order_by('tenant_full_name')

    def get_tenant_via_id(self, tenant_id: int) -> StatusGeneric:
        """
        按ID获取租户

        Returns:
            StatusGeneric: result 为租户对象
        """
        status = StatusGeneric()
        tenant = Tenant.objects.filter(pk=tenant_id).first()
        if tenant is None:
            return status.add_error(TENANT_NOT_FOUND_MESSAGE)
        return status.set_result(tenant)

    def add_single_tenant(self, tenant_name: str) -> StatusGeneric:
        """
        创建单层租户，并在新租户的 DataKey 下创建发票数据

        Args:
            tenant_name: 租户名称

        Returns:
            StatusGeneric: result 为新租户
        """
        status = StatusGeneric()
        tenant_name = (tenant_name or '').strip()
        self._validate_tenant_name(status, tenant_name)
        if status.has_errors:
            return status

        try:
            with transaction.atomic():
                tenant = Tenant.objects.create(tenant_full_name=tenant_name)
                error = self.tenant_change_service.create_new_tenant(tenant)
                if error:
                    status.add_error(error)
                    transaction.set_rollback(True)
        except (DatabaseError, TenantInvoicesError) as e:
            logger.error(f"Failed to add tenant {tenant_name}: {str(e)}")
            return status.add_error(f"Failed to add the tenant {tenant_name}.")

        if status.has_errors:
            return status

        logger.info(f"Tenant created: {tenant.pk} ({tenant_name}) with data key {tenant.data_key}")
        status.message = f"Successfully added the new tenant {tenant_name}."
        return status.set_result(tenant)

    def update_tenant_name(self, tenant_id: int, new_tenant_name: str) -> StatusGeneric:
        """
        修改租户名称，同步修改发票数据中的公司名称

        Args:
            tenant_id: 租户ID
            new_tenant_name: 新名称

        Returns:
            StatusGeneric: result 为修改后的租户
        """
        status = self.get_tenant_via_id(tenant_id)
        if status.has_errors:
            return status

        tenant = status.result
        new_tenant_name = (new_tenant_name or '').strip()
        self._validate_tenant_name(status, new_tenant_name, exclude_id=tenant.pk)
        if status.has_errors:
            return status

        old_name = tenant.tenant_full_name
        try:
            with transaction.atomic():
                tenant.tenant_full_name = new_tenant_name
                tenant.save(update_fields=['tenant_full_name', 'updated_at'])
                error = self.tenant_change_service.single_tenant_update_name(tenant)
                if error:
                    status.add_error(error)
                    transaction.set_rollback(True)
        except (DatabaseError, TenantInvoicesError) as e:
            logger.error(f"Failed to rename tenant {tenant_id}: {str(e)}")
            status.add_error(f"Failed to update the tenant {old_name}.")

        if status.has_errors:
            tenant.tenant_full_name = old_name
            return status

        logger.info(f"Tenant renamed: {tenant.pk} from {old_name} to {new_tenant_name}")
        status.message = f"Successfully updated the tenant name to {new_tenant_name}."
        return status

    def delete_tenant(self, tenant_id: int) -> StatusGeneric:
        """
        删除租户及其 DataKey 下的所有发票数据

        Returns:
            StatusGeneric: result 为被删除的租户（已无主键）
        """
        status = self.get_tenant_via_id(tenant_id)
        if status.has_errors:
            return status

        tenant = status.result
        tenant_name = tenant.tenant_full_name
        try:
            with transaction.atomic():
                error = self.tenant_change_service.single_tenant_delete(tenant)
                if error:
                    status.add_error(error)
                    transaction.set_rollback(True)
                else:
                    tenant.delete()
        except (DatabaseError, TenantInvoicesError) as e:
            logger.error(f"Failed to delete tenant {tenant_id}: {str(e)}")
            status.add_error(f"Failed to delete the tenant {tenant_name}.")

        if status.has_errors:
            return status

        logger.info(f"Tenant deleted: {tenant_id} ({tenant_name})")
        status.message = f"Successfully deleted the tenant called {tenant_name}."
        return status

    def _validate_tenant_name(self, status: StatusGeneric, tenant_name: str, exclude_id: Optional[int] = None):
        """验证租户名称"""
        if not tenant_name:
            status.add_error("The tenant name must be provided.")
            return

        if len(tenant_name) > TENANT_NAME_MAX_LENGTH:
            status.add_error(f"The tenant name must be {TENANT_NAME_MAX_LENGTH} characters or fewer.")
            return

        queryset = Tenant.objects.filter(tenant_full_name=tenant_name)
        if exclude_id is not None:
            queryset = queryset.exclude(pk=exclude_id)
        if queryset.exists():
            status.add_error(f"The tenant name '{tenant_name}' is already used.")
