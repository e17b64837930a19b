"""Production settings for the TravelEase project.

This module extends the base settings with production specific
configuration. Ensure that sensitive values are provided via
environment variables and that security settings are appropriate for
production use.
"""

import os

from .base import *  # noqa: F401,F403

# Never run with debug enabled in production
DEBUG = False

# Allowed hosts should be defined explicitly via environment variable
ALLOWED_HOSTS = os.environ.get('DJANGO_ALLOWED_HOSTS', '').split(',')

# Configure secure proxies and cookies
CSRF_COOKIE_SECURE = True
SESSION_COOKIE_SECURE = True
SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')

# Wait for package row locks instead of failing the admission at once
DATABASES['default'].setdefault('OPTIONS', {})  # noqa: F405
if DATABASES['default']['ENGINE'] == 'django.db.backends.postgresql':  # noqa: F405
    DATABASES['default']['OPTIONS'].setdefault(  # noqa: F405
        'options', f"-c lock_timeout={os.environ.get('DB_LOCK_TIMEOUT_MS', 5000)}"
    )
