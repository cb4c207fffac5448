"""
基础模型类

DataKeyFilterReadWrite 是所有发票数据模型的基类：
- 读取: 默认管理器只返回当前 DataKey 的行
- 写入: save()/asave()/bulk_create() 之前总是写入当前 DataKey
- 外键: save()/bulk_create()/bulk_update()/update() 都不能指向其他 DataKey 的行
"""

import logging
from typing import Optional

from django.core.exceptions import FieldDoesNotExist
from django.db import models

from ..conf import invoice_settings
from ..constants import DATA_KEY_MAX_LENGTH, ErrorCode
from ..datakey import (
    activate_data_key,
    get_active_data_key,
    get_stamp_data_key,
    normalize_data_key,
)
from ..exceptions import DataKeyError, DataKeyMismatchError


logger = logging.getLogger(__name__)


def check_related_data_key(model, related_model, related_id, data_key: str):
    """外键指向的行必须属于同一个 DataKey"""
    matches = related_model._base_manager.filter(
        pk=related_id, data_key=data_key
    ).exists()
    if not matches:
        logger.warning(
            f"Blocked {model.__name__} linking to {related_model.__name__} {related_id} "
            f"outside its data key"
        )
        raise DataKeyMismatchError(
            f"{related_model.__name__} {related_id} belongs to another data key"
        )


class BaseModel(models.Model):
    """基础模型类"""

    created_at = models.DateTimeField(
        auto_now_add=True
    )
    updated_at = models.DateTimeField(
        auto_now=True
    )

    class Meta:
        abstract = True


class DataKeyQuerySet(models.QuerySet):
    """
    绑定到单个 DataKey 的查询集

    查询集记住自己的 DataKey，通过它创建的行也写入同一个 DataKey
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._scoped_data_key = None

    def _clone(self):
        clone = super()._clone()
        clone._scoped_data_key = self._scoped_data_key
        return clone

    @property
    def scoped_data_key(self) -> Optional[str]:
        return self._scoped_data_key

    def restrict_to_data_key(self, data_key: Optional[str]) -> 'DataKeyQuerySet':
        """只保留 data_key 匹配的行，没有 DataKey 时返回空查询集"""
        data_key = normalize_data_key(data_key)
        if data_key is None:
            queryset = self.none()
        else:
            queryset = self.filter(data_key=data_key)
        queryset._scoped_data_key = data_key
        return queryset

    def create(self, **kwargs):
        with activate_data_key(self._scoped_data_key):
            return super().create(**kwargs)

    def get_or_create(self, *args, **kwargs):
        with activate_data_key(self._scoped_data_key):
            return super().get_or_create(*args, **kwargs)

    def update_or_create(self, *args, **kwargs):
        with activate_data_key(self._scoped_data_key):
            return super().update_or_create(*args, **kwargs)

    def bulk_create(self, objs, *args, **kwargs):
        objs = list(objs)
        data_key = self._scoped_data_key or invoice_settings.NO_ACCESS_DATA_KEY
        for obj in objs:
            obj.mark_with_data_key(data_key)
            obj._check_related_data_keys(data_key)
        return super().bulk_create(objs, *args, **kwargs)

    def bulk_update(self, objs, fields, *args, **kwargs):
        if 'data_key' in fields:
            raise DataKeyError(
                "The data_key of existing rows cannot be changed",
                ErrorCode.DATA_KEY_READ_ONLY
            )
        objs = list(objs)
        if any(self._filterable_foreign_key(name) for name in fields):
            data_key = self._scoped_data_key or invoice_settings.NO_ACCESS_DATA_KEY
            for obj in objs:
                obj._check_related_data_keys(data_key)
        return super().bulk_update(objs, fields, *args, **kwargs)

    def update(self, **kwargs):
        if 'data_key' in kwargs:
            raise DataKeyError(
                "The data_key of existing rows cannot be changed",
                ErrorCode.DATA_KEY_READ_ONLY
            )
        self._check_related_updates(kwargs)
        return super().update(**kwargs)

    def _filterable_foreign_key(self, name):
        """name 指向 DataKey 模型的外键时返回该字段"""
        try:
            field = self.model._meta.get_field(name)
        except FieldDoesNotExist:
            return None
        if field.many_to_one and issubclass(field.related_model, DataKeyFilterReadWrite):
            return field
        return None

    def _check_related_updates(self, values):
        """update() 不能把行挂到其他 DataKey 的父对象下"""
        data_key = self._scoped_data_key or invoice_settings.NO_ACCESS_DATA_KEY
        for name, value in values.items():
            field = self._filterable_foreign_key(name)
            if field is None or value is None:
                continue
            if hasattr(value, 'resolve_expression'):
                raise DataKeyError(
                    f"The foreign key {name} must be updated with a row or a primary key",
                    ErrorCode.DATA_KEY_MISMATCH
                )
            related_id = value.pk if isinstance(value, models.Model) else value
            check_related_data_key(self.model, field.related_model, related_id, data_key)


class DataKeyManager(models.Manager.from_queryset(DataKeyQuerySet)):
    """DataKey 过滤管理器 - 所有查询都限制在当前激活的 DataKey 内"""

    def get_queryset(self):
        queryset = super().get_queryset()
        instance = getattr(self, 'instance', None)
        if isinstance(instance, DataKeyFilterReadWrite):
            # 反向关系和 prefetch 按父对象的 DataKey 读取，写入仍使用当前激活的 DataKey
            queryset = queryset.restrict_to_data_key(instance.data_key)
            queryset._scoped_data_key = normalize_data_key(get_active_data_key())
            return queryset
        return queryset.restrict_to_data_key(get_active_data_key())

    def for_data_key(self, data_key: Optional[str]) -> DataKeyQuerySet:
        """指定 DataKey 的查询集，不依赖当前激活的 DataKey"""
        return super().get_queryset().restrict_to_data_key(data_key)


class DataKeyFilterReadWrite(BaseModel):
    """支持 DataKey 读写过滤的模型基类"""

    data_key = models.CharField(
        max_length=DATA_KEY_MAX_LENGTH,
        db_index=True,
        editable=False,
        help_text="租户数据分区键"
    )

    objects = DataKeyManager()

    class Meta:
        abstract = True

    def mark_with_data_key(self, data_key: str):
        """写入 DataKey，覆盖调用方设置的值"""
        self.data_key = data_key

    def save(self, *args, **kwargs):
        data_key = get_stamp_data_key()
        self.mark_with_data_key(data_key)
        if not kwargs.get('force_insert'):
            self._check_stored_data_key(data_key)
        self._check_related_data_keys(data_key)
        super().save(*args, **kwargs)

    async def asave(self, *args, **kwargs):
        self.mark_with_data_key(get_stamp_data_key())
        await super().asave(*args, **kwargs)

    def delete(self, *args, **kwargs):
        self._check_stored_data_key(get_stamp_data_key())
        return super().delete(*args, **kwargs)

    def _check_stored_data_key(self, data_key: str):
        """已存在的行不能被其他 DataKey 改写或删除"""
        if self.pk is None:
            return

        foreign_row = type(self)._base_manager.filter(
            pk=self.pk
        ).exclude(data_key=data_key).exists()
        if foreign_row:
            logger.warning(f"Blocked write to {type(self).__name__} {self.pk} from another data key")
            raise DataKeyMismatchError(
                f"{type(self).__name__} {self.pk} belongs to another data key"
            )

    def _check_related_data_keys(self, data_key: str):
        """外键指向的 DataKey 行必须属于同一个 DataKey"""
        for field in self._meta.concrete_fields:
            if not field.many_to_one:
                continue
            related_model = field.related_model
            if not issubclass(related_model, DataKeyFilterReadWrite):
                continue

            related_id = getattr(self, field.attname)
            if related_id is None and field.is_cached(self):
                related = field.get_cached_value(self)
                related_id = related.pk if related is not None else None
            if related_id is None:
                continue

            check_related_data_key(type(self), related_model, related_id, data_key)
