import os
from pathlib import Path
from datetime import timedelta

BASE_DIR = Path(__file__).resolve().parent.parent
ENV = os.environ.get

# -----------------------
#  Security
# -----------------------
SECRET_KEY = ENV('DJANGO_SECRET_KEY', 'change-me-in-prod')
DEBUG = ENV('DJANGO_DEBUG', 'False').lower() == 'true'
ALLOWED_HOSTS = [h for h in ENV('DJANGO_ALLOWED_HOSTS', 'localhost,127.0.0.1').split(',') if h]

# -----------------------
#  Applications
# -----------------------
INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    'corsheaders',
    'django_filters',
    'rest_framework',
    'rest_framework_simplejwt',

    'users',
    'medicine',
    'notifications',
    'inventory',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'corsheaders.middleware.CorsMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'pharmtrack.urls'

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

WSGI_APPLICATION = 'pharmtrack.wsgi.application'
ASGI_APPLICATION = 'pharmtrack.asgi.application'

# -----------------------
#  Database
# -----------------------
# PostgreSQL when DATABASE_NAME is configured, SQLite otherwise
if ENV('DATABASE_NAME'):
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.postgresql',
            'NAME': ENV('DATABASE_NAME'),
            'USER': ENV('DATABASE_USER', 'postgres'),
            'PASSWORD': ENV('DATABASE_PASSWORD', ''),
            'HOST': ENV('DATABASE_HOST', 'localhost'),
            'PORT': ENV('DATABASE_PORT', '5432'),
            'CONN_MAX_AGE': int(ENV('DATABASE_CONN_MAX_AGE', '60')),
        }
    }
else:
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': BASE_DIR / 'db.sqlite3',
        }
    }

AUTH_USER_MODEL = 'users.User'

AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator'},
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator'},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
    {'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator'},
]

# -----------------------
#  Internationalisation
# -----------------------
LANGUAGE_CODE = ENV('LANGUAGE_CODE', 'en-us')
TIME_ZONE = ENV('TIME_ZONE', 'UTC')
USE_I18N = True
USE_TZ = True

STATIC_URL = '/static/'
STATIC_ROOT = ENV('DJANGO_STATIC_ROOT', str(BASE_DIR / 'staticfiles'))

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# -----------------------
#  REST framework / JWT
# -----------------------
REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': (
        'rest_framework_simplejwt.authentication.JWTAuthentication',
        'rest_framework.authentication.SessionAuthentication',
    ),
    'DEFAULT_PERMISSION_CLASSES': (
        'rest_framework.permissions.IsAuthenticated',
    ),
    'DEFAULT_FILTER_BACKENDS': (
        'django_filters.rest_framework.DjangoFilterBackend',
    ),
    'EXCEPTION_HANDLER': 'pharmtrack.exceptions.api_exception_handler',
}

SIMPLE_JWT = {
    'ACCESS_TOKEN_LIFETIME': timedelta(minutes=int(ENV('JWT_ACCESS_MIN', '60'))),
    'REFRESH_TOKEN_LIFETIME': timedelta(days=int(ENV('JWT_REFRESH_DAYS', '7'))),
    'AUTH_HEADER_TYPES': ('Bearer',),
}

# -----------------------
#  CORS
# -----------------------
CORS_ALLOW_ALL_ORIGINS = ENV('CORS_ALLOW_ALL', 'False').lower() == 'true'
if not CORS_ALLOW_ALL_ORIGINS:
    CORS_ALLOWED_ORIGINS = [o for o in ENV('CORS_ALLOWED_ORIGINS', 'http://localhost:5173').split(',') if o]

# -----------------------
#  Notifications
# -----------------------
EMAIL_BACKEND = ENV('EMAIL_BACKEND', 'django.core.mail.backends.console.EmailBackend')
EMAIL_HOST = ENV('EMAIL_HOST', 'localhost')
EMAIL_PORT = int(ENV('EMAIL_PORT', '25'))
EMAIL_HOST_USER = ENV('EMAIL_HOST_USER', '')
EMAIL_HOST_PASSWORD = ENV('EMAIL_HOST_PASSWORD', '')
EMAIL_USE_TLS = ENV('EMAIL_USE_TLS', 'False').lower() == 'true'
DEFAULT_FROM_EMAIL = ENV('DEFAULT_FROM_EMAIL', 'no-reply@pharmtrack.local')

WHATSAPP_BACKEND = ENV('WHATSAPP_BACKEND', 'notifications.backends.console.WhatsAppBackend')

# -----------------------
#  Logging
# -----------------------
LOG_LEVEL = ENV('PHARMTRACK_LOG_LEVEL', 'INFO').upper()

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{asctime} {levelname} {name}: {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': ENV('DJANGO_LOG_LEVEL', 'WARNING'),
        },
        'pharmtrack': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
        'medicine': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
        'notifications': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
        'inventory': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
    },
}
