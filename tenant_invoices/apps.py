import logging

from django.apps import AppConfig


logger = logging.getLogger(__name__)


class TenantInvoicesConfig(AppConfig):
    """Tenant Invoices 应用配置"""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'tenant_invoices'
    label = 'tenant_invoices'
    verbose_name = 'Tenant Invoices'

    def ready(self):
        """启动时验证配置和所有模型的 DataKey 过滤 - 任何问题都直接启动失败"""
        from .conf import invoice_settings
        from .models import verify_data_key_models

        invoice_settings.validate()
        count = verify_data_key_models(self.get_models())

        logger.debug(f"Tenant Invoices ready: {count} models filtered by data key")
