import os

_defaults = {
    "DATABASE_URL": "sqlite:///:memory:",
    "PRODUCT_DATABASE_URL": "sqlite:///:memory:",
    "PRODUCT_SERVICE_NAME": "product-service",
    "PRODUCT_SERVICE_URLS": "",
    "REGISTRY_URL": "",
    "PRODUCT_SERVICE_TIMEOUT": "1.0",
}

for k, v in _defaults.items():
    os.environ.setdefault(k, v)
