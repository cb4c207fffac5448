"""
Tenant Invoices
按 DataKey 隔离租户数据的多租户发票库
"""

from setuptools import setup, find_packages
import os

# 读取 README 文件
def read_readme():
    readme_path = os.path.join(os.path.dirname(__file__), 'README.md')
    if os.path.exists(readme_path):
        with open(readme_path, 'r', encoding='utf-8') as f:
            return f.read()
    return "Tenant Invoices - 按 DataKey 隔离租户数据的多租户发票库"

setup(
    name="tenant-invoices",
    version="1.0.0",
    author="Jindequan",
    author_email="jindequan@example.com",
    description="按 DataKey 隔离租户数据的多租户发票库",
    long_description=read_readme(),
    long_description_content_type="text/markdown",
    packages=find_packages(include=["tenant_invoices", "tenant_invoices.*"]),
    include_package_data=True,
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Web Environment",
        "Framework :: Django",
        "Framework :: Django :: 4.2",
        "Framework :: Django :: 5.0",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
    keywords="django multi-tenant data-key row-isolation invoices saas",
    python_requires=">=3.10",
    install_requires=[
        "Django>=4.2",
        "asgiref>=3.6.0",
        "PyJWT>=2.8.0",
        "psycopg2-binary>=2.9.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-django>=4.5.0",
            "pytest-cov>=4.1.0",
            "black>=23.3.0",
            "flake8>=6.0.0",
            "isort>=5.12.0",
            "mypy>=1.4.0",
        ],
    },
    entry_points={
        "django.apps": [
            "tenant_invoices=tenant_invoices.apps.TenantInvoicesConfig",
        ],
    },
    zip_safe=False,
    platforms=["any"],
    license="MIT",
)
