from .base import *

DEBUG = False

SECRET_KEY = 'test-secret-key'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

ALLOWED_HOSTS = ['testserver']

TARAMONEY = {
    'TEST_MODE': True,
    'TEST_API_KEY': 'sk_test_abcdef123',
    'TEST_BUSINESS_ID': 'biz_test',
    'API_KEY': 'sk_live_abcdef123',
    'BUSINESS_ID': 'biz_live',
    'WEBHOOK_SECRET': '',
    'ENABLE_ORDER_LINKS': True,
    'ENABLE_MOBILE_MONEY': True,
    'BASE_URL': 'https://tara.example/api/tara',
    'SITE_URL': 'https://shop.example',
    'RETURN_URL': 'https://shop.example/checkout/order-received',
}
