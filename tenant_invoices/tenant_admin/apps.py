from django.apps import AppConfig

from ..constants import ADMIN_APP_LABEL


class TenantAdminConfig(AppConfig):
    """租户管理应用配置"""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'tenant_invoices.tenant_admin'
    label = ADMIN_APP_LABEL
    verbose_name = 'Tenant Admin'
