"""
发票数据上下文

一个上下文对应一次请求或一次后台操作：
- 构造时解析一次 DataKey，之后不可变
- 查询只返回该 DataKey 的行
- save_changes()/asave_changes() 在写入前统一盖章
"""

import logging
from contextlib import contextmanager
from typing import List, Optional

from asgiref.sync import sync_to_async
from django.db import transaction

from .conf import invoice_settings
from .constants import ErrorCode
from .datakey import DataKeyResolver, activate_data_key, normalize_data_key
from .exceptions import DataKeyError
from .models import CompanyTenant, DataKeyFilterReadWrite, Invoice, LineItem


logger = logging.getLogger(__name__)


class InvoicesDataContext:
    """
    发票数据上下文

    使用示例:
        db = InvoicesDataContext(GetDataKeyFromUser(request))
        invoices = db.invoices.order_by('-date_created')

        db.add(Invoice(invoice_name="March"))
        db.save_changes()

        with db:
            # 代码块内 Invoice.objects 也限制在 db.data_key 内
            Invoice.objects.count()
    """

    def __init__(self, data_key_resolver: Optional[DataKeyResolver] = None):
        # 没有登录用户、后台任务、用户还没有分配租户时 DataKey 为 None
        # 此时使用不匹配任何租户的哨兵值
        resolved = getattr(data_key_resolver, 'data_key', None) if data_key_resolver else None
        self._data_key = normalize_data_key(resolved)
        self._pending_saves: List[DataKeyFilterReadWrite] = []
        self._pending_deletes: List[DataKeyFilterReadWrite] = []
        self._activations = []

        if self._data_key is None:
            logger.debug("No data key resolved, using the no-access data key")

    def __repr__(self):
        return f"<InvoicesDataContext data_key={self.data_key!r}>"

    @property
    def data_key(self) -> str:
        """当前 DataKey，无法解析时为哨兵值"""
        return self._data_key or invoice_settings.NO_ACCESS_DATA_KEY

    @property
    def has_data_key(self) -> bool:
        """是否解析到了真实的 DataKey"""
        return self._data_key is not None

    # 查询入口

    @property
    def companies(self):
        return CompanyTenant.objects.for_data_key(self._data_key)

    @property
    def invoices(self):
        return Invoice.objects.for_data_key(self._data_key)

    @property
    def line_items(self):
        return LineItem.objects.for_data_key(self._data_key)

    # 激活

    @contextmanager
    def activate(self):
        """在代码块内激活该上下文的 DataKey"""
        with activate_data_key(self._data_key):
            yield self

    def __enter__(self):
        activation = self.activate()
        activation.__enter__()
        self._activations.append(activation)
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        activation = self._activations.pop()
        return activation.__exit__(exc_type, exc_value, traceback)

    # 写入

    def add(self, *entities: DataKeyFilterReadWrite):
        """跟踪新增或修改的实体，save_changes() 时写入"""
        for entity in entities:
            self._check_filterable(entity)
            if entity not in self._pending_saves:
                self._pending_saves.append(entity)

    def remove(self, *entities: DataKeyFilterReadWrite):
        """跟踪要删除的实体，save_changes() 时删除"""
        for entity in entities:
            self._check_filterable(entity)
            if entity in self._pending_saves:
                self._pending_saves.remove(entity)
            if entity not in self._pending_deletes:
                self._pending_deletes.append(entity)

    @property
    def has_changes(self) -> bool:
        return bool(self._pending_saves or self._pending_deletes)

    def save_changes(self) -> int:
        """
        写入所有跟踪的变更

        Returns:
            int: 写入和删除的实体数量
        """
        self._mark_with_data_key_if_needed()
        return self._flush()

    async def asave_changes(self) -> int:
        """save_changes() 的异步版本，使用同一个盖章步骤"""
        self._mark_with_data_key_if_needed()
        return await sync_to_async(self._flush)()

    def _mark_with_data_key_if_needed(self):
        """给所有待写入的实体写入当前 DataKey"""
        data_key = self.data_key
        for entity in self._pending_saves:
            entity.mark_with_data_key(data_key)

    def _flush(self) -> int:
        saves = list(self._pending_saves)
        deletes = list(self._pending_deletes)

        with self.activate(), transaction.atomic():
            for entity in saves:
                entity.save()
            for entity in deletes:
                entity.delete()

        self._pending_saves.clear()
        self._pending_deletes.clear()

        count = len(saves) + len(deletes)
        if count:
            logger.info(f"Saved {len(saves)} and deleted {len(deletes)} entities under data key {self.data_key}")
        return count

    @staticmethod
    def _check_filterable(entity):
        if not isinstance(entity, DataKeyFilterReadWrite):
            raise DataKeyError(
                f"The entity {type(entity).__name__} does not support data key filtering",
                ErrorCode.NOT_FILTERABLE
            )
