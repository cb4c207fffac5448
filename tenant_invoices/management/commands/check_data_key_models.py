"""
检查 Tenant Invoices 模型的 DataKey 配置
"""

from django.apps import apps
from django.core.management.base import BaseCommand, CommandError
from django.db import models

from ...conf import invoice_settings
from ...constants import APP_LABEL
from ...exceptions import ConfigurationError
from ...models import DataKeyFilterReadWrite, verify_data_key_models


class Command(BaseCommand):
    help = 'Check that every Tenant Invoices model is filtered by data key'

    def handle(self, *args, **options):
        """执行模型检查"""
        self.stdout.write("Checking Tenant Invoices data key configuration...")
        self.stdout.write("=" * 60)

        self.stdout.write("\nConfiguration:")
        self.stdout.write(f"  Schema: {invoice_settings.DB_SCHEMA or '(none)'}")
        self.stdout.write(f"  Admin schema: {invoice_settings.ADMIN_DB_SCHEMA or '(none)'}")
        self.stdout.write(f"  No-access data key: {invoice_settings.NO_ACCESS_DATA_KEY!r}")
        self.stdout.write(
            f"  Decimal precision: {invoice_settings.DECIMAL_MAX_DIGITS}/{invoice_settings.DECIMAL_PLACES}"
        )

        model_list = list(apps.get_app_config(APP_LABEL).get_models())

        self.stdout.write(f"\nModels ({len(model_list)}):")
        for model in model_list:
            filterable = issubclass(model, DataKeyFilterReadWrite)
            mark = "OK " if filterable else "ERR"
            self.stdout.write(f"  [{mark}] {model.__name__} -> {model._meta.db_table}")
            self.stdout.write(f"        manager: {type(model._default_manager).__name__}")

            for field in model._meta.get_fields():
                if isinstance(field, models.DecimalField):
                    self.stdout.write(
                        f"        {field.name}: precision={field.max_digits} scale={field.decimal_places}"
                    )

        try:
            verify_data_key_models(model_list)
        except ConfigurationError as e:
            raise CommandError(f"Data key check failed: {e.message}")

        self.stdout.write(f"\n{'=' * 60}")
        self.stdout.write(self.style.SUCCESS('All models are filtered by data key'))
