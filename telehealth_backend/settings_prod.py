"""
Production settings for the telehealth portal backend.

Usage:
    export DJANGO_SETTINGS_MODULE=telehealth_backend.settings_prod
    gunicorn telehealth_backend.wsgi:application

All secrets come from the environment.
"""

import os

import dj_database_url

from .settings import *

# ---------------------------------------------------------
# PRODUCTION CORE SETTINGS
# ---------------------------------------------------------

DEBUG = False

SECRET_KEY = os.environ['DJANGO_SECRET_KEY']

# ---------------------------------------------------------
# DATABASES: PostgreSQL via DATABASE_URL
# ---------------------------------------------------------

if os.getenv('DATABASE_URL'):
    db_cfg = dj_database_url.config(
        env='DATABASE_URL',
        conn_max_age=int(os.getenv('DB_CONN_MAX_AGE', '60')),
        ssl_require=os.getenv('DB_SSL_REQUIRE', 'False').lower() == 'true',
    )
    if db_cfg.get('ENGINE') != 'django.db.backends.postgresql':
        raise RuntimeError('Only PostgreSQL is supported in production.')
    db_cfg.setdefault('OPTIONS', {})
    db_cfg['OPTIONS'].setdefault('connect_timeout', 10)
    DATABASES = {'default': db_cfg}

# ---------------------------------------------------------
# SECURITY SETTINGS
# ---------------------------------------------------------

SECURE_SSL_REDIRECT = os.getenv('SECURE_SSL_REDIRECT', 'True').lower() == 'true'
SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')

SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SESSION_COOKIE_HTTPONLY = True

SECURE_HSTS_SECONDS = 31536000  # 1 year
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
SECURE_HSTS_PRELOAD = True

SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = 'DENY'

CSRF_TRUSTED_ORIGINS = [
    origin.strip()
    for origin in os.getenv('CSRF_TRUSTED_ORIGINS', '').split(',')
    if origin.strip()
]

# ---------------------------------------------------------
# CORS (explicit origins only)
# ---------------------------------------------------------

INSTALLED_APPS = INSTALLED_APPS + ['corsheaders']
MIDDLEWARE = ['corsheaders.middleware.CorsMiddleware'] + MIDDLEWARE

CORS_ALLOW_ALL_ORIGINS = False
CORS_ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv('CORS_ALLOWED_ORIGINS', '').split(',')
    if origin.strip()
]
CORS_ALLOW_CREDENTIALS = True

# ---------------------------------------------------------
# STATIC FILES: WhiteNoise
# ---------------------------------------------------------

_security_idx = MIDDLEWARE.index('django.middleware.security.SecurityMiddleware')
MIDDLEWARE.insert(_security_idx + 1, 'whitenoise.middleware.WhiteNoiseMiddleware')

STORAGES = {
    'default': {'BACKEND': 'django.core.files.storage.FileSystemStorage'},
    'staticfiles': {'BACKEND': 'whitenoise.storage.CompressedManifestStaticFilesStorage'},
}

# ---------------------------------------------------------
# REST FRAMEWORK: JSON only
# ---------------------------------------------------------

REST_FRAMEWORK = {
    **REST_FRAMEWORK,
    'DEFAULT_RENDERER_CLASSES': (
        'rest_framework.renderers.JSONRenderer',
    ),
    'DEFAULT_PARSER_CLASSES': (
        'rest_framework.parsers.JSONParser',
    ),
}

# ---------------------------------------------------------
# JWT: shorter access tokens
# ---------------------------------------------------------

SIMPLE_JWT = {
    **SIMPLE_JWT,
    'ACCESS_TOKEN_LIFETIME': timedelta(minutes=15),
    'REFRESH_TOKEN_LIFETIME': timedelta(days=1),
}

# ---------------------------------------------------------
# CACHES: Redis
# ---------------------------------------------------------

REDIS_HOST = os.getenv('REDIS_HOST', 'localhost')
REDIS_PORT = os.getenv('REDIS_PORT', '6379')

CELERY_BROKER_URL = f"redis://{REDIS_HOST}:{REDIS_PORT}/0"
CELERY_RESULT_BACKEND = CELERY_BROKER_URL

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.redis.RedisCache',
        'LOCATION': f"redis://{REDIS_HOST}:{REDIS_PORT}/1",
    }
}

# ---------------------------------------------------------
# LOGGING
# ---------------------------------------------------------

LOGGING['root']['level'] = os.getenv('LOG_LEVEL', 'INFO')
LOGGING['loggers']['django']['level'] = 'WARNING'
LOGGING['loggers']['django.security'] = {
    'handlers': ['console'],
    'level': 'WARNING',
    'propagate': False,
}
