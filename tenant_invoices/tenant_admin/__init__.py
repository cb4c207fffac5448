"""
租户管理

租户记录和租户管理服务。租户记录不属于任何 DataKey，
所以放在独立的应用里，不受发票模型的 DataKey 规则约束。
"""
