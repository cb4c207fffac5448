"""
测试管理命令
"""

from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase


class CheckDataKeyModelsCommandTest(TestCase):
    """测试 check_data_key_models 命令"""

    def test_reports_every_model(self):
        """测试输出所有模型和金额精度"""
        out = StringIO()
        call_command('check_data_key_models', stdout=out)
        output = out.getvalue()

        for name in ('CompanyTenant', 'Invoice', 'LineItem'):
            self.assertIn(f"[OK ] {name}", output)
        self.assertIn("manager: DataKeyManager", output)
        self.assertIn("total_price: precision=9 scale=2", output)
        self.assertIn("No-access data key: 'Bad key'", output)
        self.assertIn("All models are filtered by data key", output)


class InitInvoiceSchemaCommandTest(TestCase):
    """测试 init_invoice_schema 命令"""

    def test_sqlite_not_supported(self):
        """测试 SQLite 不支持 schema"""
        with self.assertRaises(CommandError) as cm:
            call_command('init_invoice_schema', stdout=StringIO())

        self.assertIn("only supported on PostgreSQL", str(cm.exception))
