"""
Django settings for the telehealth portal backend.

Note: this setup uses PostgreSQL and does not run migrations automatically.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

from datetime import timedelta

from celery.schedules import crontab


BASE_DIR = Path(__file__).resolve().parent.parent


SECRET_KEY = os.getenv(
    'DJANGO_SECRET_KEY',
    'django-insecure-7w!q3v$k0c^p2m#r9x@t5e&z8b*n1h(j4l)s6u-yd+fgaio'
)

DEBUG = os.getenv('DJANGO_DEBUG', 'False').lower() == 'true'

ALLOWED_HOSTS = [
    host.strip()
    for host in os.getenv('DJANGO_ALLOWED_HOSTS', 'localhost,127.0.0.1,[::1]').split(',')
    if host.strip()
]


INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    'rest_framework',

    'telehealth_backend.core',
    'telehealth_backend.pharmacies',
    'telehealth_backend.patients',
    'telehealth_backend.providers',
    'telehealth_backend.intake',
    'telehealth_backend.consultations',
    'telehealth_backend.prescriptions',
    'telehealth_backend.notifications',
    'telehealth_backend.assistant',
]


MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]


ROOT_URLCONF = 'telehealth_backend.urls'


TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]


WSGI_APPLICATION = 'telehealth_backend.wsgi.application'


DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': os.getenv('DB_NAME', 'telehealth'),
        'USER': os.getenv('DB_USER', 'postgres'),
        'PASSWORD': os.getenv('DB_PASSWORD') or os.getenv('PGPASSWORD', ''),
        'HOST': os.getenv('DB_HOST', 'localhost'),
        'PORT': os.getenv('DB_PORT', '5432'),
        'CONN_MAX_AGE': int(os.getenv('DB_CONN_MAX_AGE', '0')),
    },
}


AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator'},
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator'},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
    {'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator'},
]


# Custom user model (must be set before running any migrations)
AUTH_USER_MODEL = 'core.User'


# Django REST Framework
REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': (
        'rest_framework_simplejwt.authentication.JWTAuthentication',
    ),
    'DEFAULT_PERMISSION_CLASSES': (
        'rest_framework.permissions.IsAuthenticated',
    ),
}


# SimpleJWT
JWT_SIGNING_KEY = os.getenv('JWT_SIGNING_KEY', SECRET_KEY)

SIMPLE_JWT = {
    'ACCESS_TOKEN_LIFETIME': timedelta(minutes=30),
    'REFRESH_TOKEN_LIFETIME': timedelta(days=7),
    'ALGORITHM': 'HS256',
    'SIGNING_KEY': JWT_SIGNING_KEY,
}


LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True


STATIC_URL = 'static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'


# Logging
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {module} {process:d} {thread:d} {message}',
            'style': '{',
        },
        'simple': {
            'format': '{levelname} {asctime} {module}: {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'telehealth_backend': {
            'handlers': ['console'],
            'level': os.getenv('PORTAL_LOG_LEVEL', 'INFO'),
            'propagate': False,
        },
    },
}


# Celery
CELERY_BROKER_URL = f"redis://{os.environ.get('REDIS_HOST', 'localhost')}:6379/0"
CELERY_RESULT_BACKEND = CELERY_BROKER_URL

CELERY_BEAT_SCHEDULE = {
    'cleanup-expired-challenges': {
        'task': 'telehealth_backend.core.tasks.cleanup_expired_challenges',
        'schedule': crontab(minute='*/15'),
    },
    'cleanup-magic-link-codes': {
        'task': 'telehealth_backend.core.tasks.cleanup_magic_link_codes',
        'schedule': crontab(minute='*/15'),
    },
    'cleanup-expired-rate-limits': {
        'task': 'telehealth_backend.core.tasks.cleanup_expired_rate_limits',
        'schedule': crontab(minute=0),
    },
    'expire-stale-intakes': {
        'task': 'telehealth_backend.intake.tasks.expire_stale_intakes',
        'schedule': crontab(minute=0, hour=3),
    },
    'purge-old-audit-logs': {
        'task': 'telehealth_backend.core.tasks.purge_old_audit_logs',
        'schedule': crontab(minute=0, hour=4, day_of_week=0),
    },
}


# Portal tunables
PORTAL_MAGIC_LINK_EXPIRY = timedelta(minutes=int(os.getenv('PORTAL_MAGIC_LINK_EXPIRY_MINUTES', '10')))
PORTAL_MAGIC_LINK_RESEND_INTERVAL = timedelta(seconds=int(os.getenv('PORTAL_MAGIC_LINK_RESEND_SECONDS', '60')))
PORTAL_CHALLENGE_EXPIRY = timedelta(minutes=5)
PORTAL_CHALLENGE_MAX_REQUESTS = 10
PORTAL_CHALLENGE_WINDOW_SECONDS = 60
PORTAL_RATE_LIMIT_DEFAULT_MAX = int(os.getenv('PORTAL_RATE_LIMIT_DEFAULT_MAX', '60'))
PORTAL_RATE_LIMIT_DEFAULT_WINDOW_SECONDS = int(os.getenv('PORTAL_RATE_LIMIT_DEFAULT_WINDOW_SECONDS', '60'))
PORTAL_STALE_INTAKE_DAYS = 30
PORTAL_AUDIT_RETENTION_DAYS = 90
PORTAL_WAITING_ROOM_COST_CENTS = 19700


# Integrations
HTTP_TIMEOUT_SECONDS = int(os.getenv('HTTP_TIMEOUT_SECONDS', '15'))

NPI_REGISTRY_URL = os.getenv('NPI_REGISTRY_URL', 'https://npiregistry.cms.hhs.gov/api/')

EMAILIT_API_URL = os.getenv('EMAILIT_API_URL', 'https://api.emailit.com/v1/emails')
EMAILIT_API_KEY = os.getenv('EMAILIT_API_KEY', '')
EMAIL_FROM_ADDRESS = os.getenv('EMAIL_FROM_ADDRESS', 'noreply@telehealth.local')
EMAIL_FROM_NAME = os.getenv('EMAIL_FROM_NAME', 'Telehealth Portal')

DAILY_API_URL = os.getenv('DAILY_API_URL', 'https://api.daily.co/v1')
DAILY_API_KEY = os.getenv('DAILY_API_KEY', '')
DAILY_ROOM_PREFIX = os.getenv('DAILY_ROOM_PREFIX', 'consult')

PHAXIO_API_URL = os.getenv('PHAXIO_API_URL', 'https://api.phaxio.com/v2.1/faxes')
PHAXIO_API_KEY = os.getenv('PHAXIO_API_KEY', '')
PHAXIO_API_SECRET = os.getenv('PHAXIO_API_SECRET', '')

LLM_BASE_URL = os.getenv('LLM_BASE_URL', 'https://api.openai.com/v1')
LLM_API_KEY = os.getenv('LLM_API_KEY', '')
LLM_MODEL = os.getenv('LLM_MODEL', 'gpt-4o-mini')
LLM_MAX_TOKENS = int(os.getenv('LLM_MAX_TOKENS', '800'))
