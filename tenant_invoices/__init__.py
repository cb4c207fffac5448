"""
Tenant Invoices

按 DataKey 自动隔离多租户数据的 Django 发票应用。

核心设计原则：
- 一个键隔离所有数据: 每行都带 data_key
- 写入时盖章: 保存前总是写入当前上下文的 DataKey
- 读取时过滤: 默认管理器只返回当前 DataKey 的行
- 失败即关闭: 没有 DataKey 时看不到任何数据
"""

__version__ = "1.0.0"
__author__ = "Jindequan"
__description__ = "按 DataKey 隔离的多租户发票数据层"
