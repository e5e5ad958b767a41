"""Settings used by the test suite."""

from .base import *  # noqa: F401,F403

DEBUG = False

SECRET_KEY = 'test-secret-key'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

STORAGES['staticfiles'] = {  # noqa: F405
    'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
}

PAYMENT_GATEWAY = {
    'SECRET_KEY': 'sk_test_dummy',
    'API_BASE_URL': 'https://api.stripe.test',
    'TIMEOUT': 5.0,
}

FRONTEND_URL = 'http://frontend.test'

RENTALS = {
    'PREVENT_DOUBLE_BOOKING': False,
    'PENDING_TTL_MINUTES': 24 * 60,
    'CHECKOUT_DESCRIPTION': 'Car Rental',
}

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

# Records propagate to the root logger, where caplog listens
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'root': {'level': 'WARNING'},
}
