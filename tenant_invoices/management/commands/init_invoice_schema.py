"""
创建 Tenant Invoices 使用的数据库 schema
"""

from django.core.management.base import BaseCommand, CommandError
from django.db import DEFAULT_DB_ALIAS, DatabaseError, connections

from ...conf import invoice_settings


class Command(BaseCommand):
    help = 'Create the PostgreSQL schemas used by Tenant Invoices'

    def add_arguments(self, parser):
        parser.add_argument(
            '--database',
            default=DEFAULT_DB_ALIAS,
            help='Database alias to create the schemas in'
        )

    def handle(self, *args, **options):
        """执行 schema 创建"""
        connection = connections[options['database']]
        if connection.vendor != 'postgresql':
            raise CommandError(
                f"Schemas are only supported on PostgreSQL, not {connection.vendor}. "
                "Set TENANT_INVOICES['DB_SCHEMA'] and ['ADMIN_DB_SCHEMA'] to '' instead."
            )

        schemas = [
            name for name in (invoice_settings.DB_SCHEMA, invoice_settings.ADMIN_DB_SCHEMA)
            if name
        ]
        if not schemas:
            self.stdout.write("No schemas configured, nothing to do")
            return

        try:
            with connection.cursor() as cursor:
                for schema_name in schemas:
                    cursor.execute(f"CREATE SCHEMA IF NOT EXISTS {connection.ops.quote_name(schema_name)}")
                    self.stdout.write(f"  Schema '{schema_name}' ready")
        except DatabaseError as e:
            raise CommandError(f"Schema creation failed: {str(e)}")

        self.stdout.write(self.style.SUCCESS('Tenant Invoices schemas created'))
        self.stdout.write("Run 'python manage.py migrate --run-syncdb' to create the tables")
