"""
租户公司模型
"""

from django.db import models

from ..conf import get_schema_table_name
from .base import DataKeyFilterReadWrite


class CompanyTenant(DataKeyFilterReadWrite):
    """发票数据库中的租户公司"""

    company_name = models.CharField(
        max_length=400,
        help_text="公司名称"
    )
    auth_p_tenant_id = models.IntegerField(
        db_index=True,
        help_text="租户管理中的租户ID"
    )

    class Meta:
        db_table = get_schema_table_name('company_tenant')

    def __str__(self):
        return self.company_name
