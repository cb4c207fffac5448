"""
测试发票数据上下文
"""

from decimal import Decimal

from django.test import TestCase

from ..context import InvoicesDataContext
from ..datakey import StaticDataKey, get_active_data_key
from ..exceptions import DataKeyError
from ..models import CompanyTenant, Invoice, LineItem
from ..tenant_admin.models import Tenant


class DataKeyResolutionTest(TestCase):
    """测试 DataKey 解析"""

    def test_resolved_data_key(self):
        """测试解析到 DataKey"""
        db = InvoicesDataContext(StaticDataKey("k1"))

        self.assertEqual(db.data_key, "k1")
        self.assertTrue(db.has_data_key)

    def test_missing_resolver_uses_no_access_key(self):
        """测试没有解析器时使用哨兵值"""
        db = InvoicesDataContext()

        self.assertEqual(db.data_key, "Bad key")
        self.assertFalse(db.has_data_key)

    def test_empty_data_key_uses_no_access_key(self):
        """测试空 DataKey 使用哨兵值"""
        for value in (None, ""):
            db = InvoicesDataContext(StaticDataKey(value))
            self.assertEqual(db.data_key, "Bad key")
            self.assertFalse(db.has_data_key)

    def test_resolver_returning_no_access_key_is_unresolved(self):
        """测试解析器返回哨兵值时视为没有 DataKey"""
        db = InvoicesDataContext(StaticDataKey("Bad key"))

        self.assertFalse(db.has_data_key)

    def test_data_key_resolved_once(self):
        """测试 DataKey 只在构造时解析一次"""
        resolver = StaticDataKey("k1")
        db = InvoicesDataContext(resolver)
        resolver.data_key = "k2"

        self.assertEqual(db.data_key, "k1")
        with self.assertRaises(AttributeError):
            db.data_key = "k2"


class ContextActivationTest(TestCase):
    """测试上下文激活"""

    def test_with_block_activates_and_restores(self):
        """测试 with 代码块激活并恢复 DataKey"""
        db1 = InvoicesDataContext(StaticDataKey("k1"))
        db2 = InvoicesDataContext(StaticDataKey("k2"))

        self.assertIsNone(get_active_data_key())
        with db1:
            self.assertEqual(get_active_data_key(), "k1")
            with db2:
                self.assertEqual(get_active_data_key(), "k2")
            self.assertEqual(get_active_data_key(), "k1")
        self.assertIsNone(get_active_data_key())

    def test_activation_restored_after_error(self):
        """测试异常时也恢复 DataKey"""
        db = InvoicesDataContext(StaticDataKey("k1"))

        with self.assertRaises(RuntimeError):
            with db:
                raise RuntimeError("boom")

        self.assertIsNone(get_active_data_key())


class SaveChangesTest(TestCase):
    """测试 save_changes 写入"""

    def setUp(self):
        self.db = InvoicesDataContext(StaticDataKey("k1"))

    def test_save_changes_stamps_caller_values(self):
        """测试 save_changes 覆盖调用方设置的 DataKey"""
        invoice = Invoice(invoice_name="March", data_key="k2")
        item = LineItem(invoice=invoice, item_name="Widget", total_price=Decimal("9.99"), data_key="k3")

        self.db.add(invoice, item)
        count = self.db.save_changes()

        self.assertEqual(count, 2)
        self.assertEqual(invoice.data_key, "k1")
        self.assertEqual(item.data_key, "k1")
        self.assertEqual(
            set(LineItem._base_manager.values_list('data_key', flat=True)),
            {"k1"}
        )
        self.assertFalse(self.db.has_changes)

    def test_save_changes_modified_entity(self):
        """测试修改后的实体"""
        self.db.add(Invoice(invoice_name="March"))
        self.db.save_changes()

        invoice = self.db.invoices.get()
        invoice.invoice_name = "April"
        self.db.add(invoice)
        self.db.save_changes()

        self.assertEqual(self.db.invoices.get().invoice_name, "April")

    def test_remove_deletes_entity(self):
        """测试 remove 后删除实体"""
        invoice = self.db.invoices.create(invoice_name="March")

        self.db.remove(invoice)
        count = self.db.save_changes()

        self.assertEqual(count, 1)
        self.assertFalse(self.db.invoices.exists())

    def test_save_changes_without_changes(self):
        """测试没有变更时返回0"""
        self.assertEqual(self.db.save_changes(), 0)

    def test_add_non_filterable_entity_rejected(self):
        """测试不支持 DataKey 过滤的实体不能加入上下文"""
        with self.assertRaises(DataKeyError):
            self.db.add(Tenant(tenant_full_name="Acme"))

    def test_save_changes_does_not_leave_context_active(self):
        """测试 save_changes 之后上下文不再激活"""
        self.db.add(Invoice(invoice_name="March"))
        self.db.save_changes()

        self.assertIsNone(get_active_data_key())

    async def test_asave_changes_stamps_caller_values(self):
        """测试异步 asave_changes 使用相同的盖章逻辑"""
        invoice = Invoice(invoice_name="Async", data_key="k2")

        self.db.add(invoice)
        count = await self.db.asave_changes()

        self.assertEqual(count, 1)
        self.assertEqual(invoice.data_key, "k1")
        stored = await self.db.invoices.aget(pk=invoice.pk)
        self.assertEqual(stored.data_key, "k1")


class TenantIsolationScenarioTest(TestCase):
    """测试租户隔离场景"""

    def test_reads_never_cross_data_keys(self):
        """测试 K1 永远读不到 K2 写入的行"""
        k1 = InvoicesDataContext(StaticDataKey("k1"))
        k2 = InvoicesDataContext(StaticDataKey("k2"))

        k1.add(Invoice(invoice_name="K1 invoice"))
        k1.save_changes()
        k2.add(Invoice(invoice_name="K2 invoice"), Invoice(invoice_name="K2 second"))
        k2.save_changes()

        self.assertEqual(list(k1.invoices.values_list('invoice_name', flat=True)), ["K1 invoice"])
        self.assertEqual(k2.invoices.count(), 2)
        self.assertFalse(k1.invoices.filter(data_key="k2").exists())

    def test_company_and_invoice_under_different_keys(self):
        """测试 Acme 在 k1 下，发票在 k2 下，k1 查询发票为空"""
        k1 = InvoicesDataContext(StaticDataKey("k1"))
        k1.add(CompanyTenant(company_name="Acme", auth_p_tenant_id=1))
        k1.save_changes()

        k2 = InvoicesDataContext(StaticDataKey("k2"))
        k2.add(Invoice(invoice_name="Acme invoice"))
        k2.save_changes()

        self.assertEqual(k1.companies.get().company_name, "Acme")
        self.assertEqual(list(k1.invoices), [])

    def test_unresolved_key_writes_are_invisible(self):
        """测试没有 DataKey 时写入哨兵值，真实 DataKey 读不到"""
        db = InvoicesDataContext()
        invoice = Invoice(invoice_name="Lost")
        db.add(invoice)
        db.save_changes()

        self.assertEqual(invoice.data_key, "Bad key")
        self.assertEqual(Invoice._base_manager.get(pk=invoice.pk).data_key, "Bad key")
        for data_key in ("k1", "k2", "1."):
            real = InvoicesDataContext(StaticDataKey(data_key))
            self.assertEqual(real.invoices.count(), 0)
        self.assertEqual(db.invoices.count(), 0)
