"""
DataKey 中间件

每个请求创建一个 InvoicesDataContext，挂在 request.invoices_db 上，
并在请求处理期间激活，使 Invoice.objects 等默认管理器限制在该 DataKey 内。

需要放在 SessionMiddleware 和 AuthenticationMiddleware 之后:
    MIDDLEWARE = [
        ...
        'django.contrib.sessions.middleware.SessionMiddleware',
        'django.contrib.auth.middleware.AuthenticationMiddleware',
        'tenant_invoices.middleware.DataKeyMiddleware',
    ]
"""

import logging

from .context import InvoicesDataContext
from .datakey import GetDataKeyFromJwt, GetDataKeyFromUser


logger = logging.getLogger(__name__)


class DataKeyMiddleware:
    """按请求用户解析 DataKey 的中间件"""

    resolver_class = GetDataKeyFromUser

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        db = InvoicesDataContext(self.resolver_class(request))
        request.invoices_db = db

        with db:
            return self.get_response(request)


class JwtDataKeyMiddleware(DataKeyMiddleware):
    """从 Bearer token 的 claim 解析 DataKey 的中间件"""

    resolver_class = GetDataKeyFromJwt
