"""
发票相关模型
"""

from django.db import models
from django.utils import timezone

from ..conf import get_schema_table_name
from .base import DataKeyFilterReadWrite


class Invoice(DataKeyFilterReadWrite):
    """发票模型"""

    invoice_name = models.CharField(
        max_length=200,
        help_text="发票名称"
    )
    date_created = models.DateTimeField(
        default=timezone.now,
        help_text="开票时间"
    )

    class Meta:
        db_table = get_schema_table_name('invoice')
        indexes = [
            models.Index(fields=['date_created']),
        ]

    def __str__(self):
        return self.invoice_name


class LineItem(DataKeyFilterReadWrite):
    """发票明细模型"""

    invoice = models.ForeignKey(
        Invoice,
        on_delete=models.CASCADE,
        related_name='line_items',
        help_text="所属发票"
    )
    item_name = models.CharField(
        max_length=200,
        help_text="商品名称"
    )
    number_items = models.PositiveIntegerField(
        default=1,
        help_text="数量"
    )
    # 精度由 registration.normalize_decimal_fields 统一设置
    total_price = models.DecimalField(
        help_text="明细金额"
    )

    class Meta:
        db_table = get_schema_table_name('line_item')

    def __str__(self):
        return f"{self.item_name} x {self.number_items}"
