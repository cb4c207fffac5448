"""
Django测试配置 - 用于Tenant Invoices测试
"""

import os

# 基础配置
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEBUG = True
SECRET_KEY = 'test-secret-key-for-testing-only-please-change-in-production'
ALLOWED_HOSTS = ['localhost', '127.0.0.1', 'testserver']

# 应用配置
INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.auth',
    'django.contrib.sessions',
    'tenant_invoices',
    'tenant_invoices.tenant_admin',
]

# 中间件
MIDDLEWARE = [
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'tenant_invoices.middleware.DataKeyMiddleware',
]

# 数据库配置 - 使用内存数据库
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',  # 内存数据库，测试速度最快
    }
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# 国际化
LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

# 缓存配置 - 使用本地内存缓存
CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'test-cache',
    }
}

# Session配置
SESSION_ENGINE = 'django.contrib.sessions.backends.cache'
SESSION_CACHE_ALIAS = 'default'

# Tenant Invoices配置
TENANT_INVOICES = {
    # SQLite 没有 schema，测试时使用普通表名
    'DB_SCHEMA': '',
    'ADMIN_DB_SCHEMA': '',

    # 数据隔离配置
    'NO_ACCESS_DATA_KEY': 'Bad key',
    'DATA_KEY_SESSION_KEY': 'data_key',
    'DATA_KEY_USER_ATTRIBUTE': 'data_key',

    # 金额精度
    'DECIMAL_MAX_DIGITS': 9,
    'DECIMAL_PLACES': 2,

    # JWT配置
    'DATA_KEY_CLAIM': 'DataKey',
    'JWT_SECRET_KEY': SECRET_KEY,
    'JWT_ALGORITHM': 'HS256',
}

# 日志配置
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {
            'format': '{levelname} {name} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'WARNING',
            'propagate': True,
        },
        'tenant_invoices': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
}

# 测试配置
TEST_RUNNER = 'django.test.runner.DiscoverRunner'

# 密码哈希（测试环境使用快速哈希）
PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]
