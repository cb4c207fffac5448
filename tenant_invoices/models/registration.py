"""
模型注册时的全局配置

每个注册到 tenant_invoices 应用的模型在 class_prepared 时:
1. 必须继承 DataKeyFilterReadWrite，否则直接启动失败
2. 所有 DecimalField 统一为 DECIMAL_MAX_DIGITS/DECIMAL_PLACES 精度
"""

import logging
from typing import Iterable

from django.db import models
from django.db.models.signals import class_prepared

from ..conf import invoice_settings
from ..constants import APP_LABEL, ErrorCode
from ..exceptions import ConfigurationError
from .base import DataKeyFilterReadWrite, DataKeyManager


logger = logging.getLogger(__name__)


def check_data_key_filter(model):
    """模型必须支持 DataKey 过滤"""
    if not issubclass(model, DataKeyFilterReadWrite):
        raise ConfigurationError(
            f"You haven't added the {DataKeyFilterReadWrite.__name__} to the entity {model.__name__}",
            ErrorCode.MISSING_DATA_KEY_FILTER
        )


def check_data_key_managers(model):
    """所有管理器都必须是 DataKeyManager，否则可以绕过过滤"""
    for manager in model._meta.managers:
        if not isinstance(manager, DataKeyManager):
            raise ConfigurationError(
                f"The manager '{manager.name}' on the entity {model.__name__} "
                f"must be a {DataKeyManager.__name__}",
                ErrorCode.MISSING_DATA_KEY_FILTER
            )


def normalize_decimal_fields(model):
    """统一 DecimalField 精度"""
    max_digits = invoice_settings.DECIMAL_MAX_DIGITS
    decimal_places = invoice_settings.DECIMAL_PLACES

    for field in model._meta.local_fields:
        if isinstance(field, models.DecimalField):
            field.max_digits = max_digits
            field.decimal_places = decimal_places
            # validators/context 是按精度缓存的
            field.__dict__.pop('validators', None)
            field.__dict__.pop('context', None)


def verify_data_key_models(model_list: Iterable):
    """
    验证一组模型的 DataKey 配置

    Raises:
        ConfigurationError: 任意模型缺少 DataKey 过滤能力
    """
    checked = 0
    for model in model_list:
        check_data_key_filter(model)
        check_data_key_managers(model)
        checked += 1
    logger.debug(f"Verified data key filtering on {checked} models")
    return checked


def configure_data_key_model(sender, **kwargs):
    """class_prepared 信号处理 - 只处理本应用的模型"""
    if sender._meta.app_label != APP_LABEL:
        return
    # 迁移时 Django 在 __fake__ 模块中重建模型，不保留抽象基类
    if sender.__module__ == "__fake__":
        return

    check_data_key_filter(sender)
    normalize_decimal_fields(sender)


class_prepared.connect(configure_data_key_model, dispatch_uid='tenant_invoices_configure_data_key_model')
