"""
Development settings for the telehealth portal backend (SQLite).

Usage:
    export DJANGO_SETTINGS_MODULE=telehealth_backend.settings_dev
    python manage.py runserver

manage.py and the test suite use this module by default.
"""

from .settings import *

# ---------------------------------------------------------
# DEVELOPMENT SETTINGS (SQLITE)
# ---------------------------------------------------------

DEBUG = True

ALLOWED_HOSTS = ['localhost', '127.0.0.1', '[::1]', 'testserver', '*']

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'dev.sqlite3',
        'OPTIONS': {
            'timeout': 20,
        },
    },
}

# ---------------------------------------------------------
# CORS: allow the local frontend
# ---------------------------------------------------------

INSTALLED_APPS = INSTALLED_APPS + ['corsheaders']

MIDDLEWARE = ['corsheaders.middleware.CorsMiddleware'] + MIDDLEWARE  # must precede CommonMiddleware

CORS_ALLOW_ALL_ORIGINS = True  # DEV only
CORS_ALLOW_CREDENTIALS = True

CSRF_TRUSTED_ORIGINS = [
    'http://localhost:3000',
    'http://127.0.0.1:3000',
    'http://localhost:8000',
    'http://127.0.0.1:8000',
]

# ---------------------------------------------------------
# SIMPLE JWT
# ---------------------------------------------------------

SIMPLE_JWT = {
    **SIMPLE_JWT,
    'ACCESS_TOKEN_LIFETIME': timedelta(hours=2),  # longer for DEV
}

# ---------------------------------------------------------
# LOGGING: verbose for development
# ---------------------------------------------------------

LOGGING['handlers']['console']['formatter'] = 'simple'
LOGGING['root']['level'] = 'INFO'
LOGGING['loggers']['telehealth_backend']['level'] = 'DEBUG'

# ---------------------------------------------------------
# CELERY / REDIS: disabled locally
# ---------------------------------------------------------

CELERY_BROKER_URL = None
CELERY_RESULT_BACKEND = None
CELERY_TASK_ALWAYS_EAGER = True  # run tasks synchronously

# ---------------------------------------------------------
# SECURITY: relaxed for local development
# ---------------------------------------------------------

SECURE_SSL_REDIRECT = False
SESSION_COOKIE_SECURE = False
CSRF_COOKIE_SECURE = False
SECURE_HSTS_SECONDS = 0

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'telehealth-dev',
    }
}
