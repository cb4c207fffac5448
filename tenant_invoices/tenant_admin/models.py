"""
租户模型
"""

from django.db import models

from ..conf import get_schema_table_name, invoice_settings
from ..constants import TENANT_NAME_MAX_LENGTH


class Tenant(models.Model):
    """租户模型"""

    tenant_full_name = models.CharField(
        max_length=TENANT_NAME_MAX_LENGTH,
        unique=True,
        help_text="租户名称"
    )
    created_at = models.DateTimeField(
        auto_now_add=True
    )
    updated_at = models.DateTimeField(
        auto_now=True
    )

    class Meta:
        db_table = get_schema_table_name('tenant', invoice_settings.ADMIN_DB_SCHEMA)
        ordering = ['tenant_full_name']

    def __str__(self):
        return self.tenant_full_name

    @property
    def data_key(self) -> str:
        """租户的 DataKey，单层租户为 "<id>." """
        if self.pk is None:
            raise ValueError("The tenant must be saved before it has a data key")
        return f"{self.pk}."
