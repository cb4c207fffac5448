"""
发票服务 - 所有读写都通过数据上下文
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, List

from django.db.models import Count, DecimalField, Q, Sum, Value
from django.db.models.functions import Coalesce

from ..context import InvoicesDataContext
from ..exceptions import InvoiceNotFoundError, ValidationError
from ..models import Invoice, LineItem


logger = logging.getLogger(__name__)


class InvoiceService:
    """发票服务"""

    def __init__(self, db: InvoicesDataContext):
        self.db = db

    def create_invoice(self, invoice_name: str, line_items: Iterable[Dict] = ()) -> Invoice:
        """
        创建发票和明细

        Args:
            invoice_name: 发票名称
            line_items: 明细列表 [{item_name, number_items, total_price}]

        Returns:
            Invoice: 创建的发票
        """
        if not invoice_name or not invoice_name.strip():
            raise ValidationError("Invoice name is required")

        invoice = Invoice(invoice_name=invoice_name.strip())
        items = [self._build_line_item(invoice, item) for item in line_items]

        self.db.add(invoice, *items)
        self.db.save_changes()

        logger.info(f"Invoice created: {invoice.pk} with {len(items)} line items")
        return invoice

    def list_invoices(self) -> List[Dict]:
        """
        获取发票摘要列表

        Returns:
            List[Dict]: 每个发票的名称、创建时间、明细数量和总额
        """
        # 关联的明细也只统计当前 DataKey 的行
        own_items = Q(line_items__data_key=self.db.data_key)
        invoices = self.db.invoices.annotate(
            number_of_items=Count('line_items', filter=own_items),
            total=Coalesce(
                Sum('line_items__total_price', filter=own_items),
                Value(Decimal('0.00')),
                output_field=DecimalField()
            )
        ).order_by('-date_created', '-pk')

        return [
            {
                'invoice_id': invoice.pk,
                'invoice_name': invoice.invoice_name,
                'date_created': invoice.date_created,
                'number_of_items': invoice.number_of_items,
                'total': invoice.total,
            }
            for invoice in invoices
        ]

    def get_invoice(self, invoice_id: int) -> Invoice:
        """获取发票，其他租户的发票视为不存在"""
        try:
            return self.db.invoices.get(pk=invoice_id)
        except Invoice.DoesNotExist:
            raise InvoiceNotFoundError(f"Invoice {invoice_id} not found")

    def get_line_items(self, invoice: Invoice) -> List[LineItem]:
        """获取发票明细"""
        return list(self.db.line_items.filter(invoice=invoice).order_by('pk'))

    def _build_line_item(self, invoice: Invoice, item: Dict) -> LineItem:
        item_name = (item.get('item_name') or '').strip()
        if not item_name:
            raise ValidationError("Line item name is required")

        number_items = item.get('number_items', 1)
        if not isinstance(number_items, int) or number_items < 1:
            raise ValidationError(f"Invalid number of items for {item_name}: {number_items}")

        try:
            total_price = Decimal(str(item.get('total_price', '0')))
        except InvalidOperation:
            raise ValidationError(f"Invalid price for {item_name}: {item.get('total_price')}")

        return LineItem(
            invoice=invoice,
            item_name=item_name,
            number_items=number_items,
            total_price=total_price
        )
