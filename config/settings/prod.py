"""Production settings for the Tropicana Hotels platform.

This module extends the base settings with production specific
configuration. Ensure that sensitive values are provided via
environment variables and that security settings are appropriate for
production use.
"""

from .base import *  # noqa: F401,F403

# Never run with debug enabled in production
DEBUG = False

SECRET_KEY = get_env('DJANGO_SECRET_KEY', required=True)  # noqa: F405

# Allowed hosts should be defined explicitly via environment variable
ALLOWED_HOSTS = [
    host.strip()
    for host in get_env('DJANGO_ALLOWED_HOSTS', '').split(',')  # noqa: F405
    if host.strip()
]

# Payment gateway credentials are mandatory
PAYMONGO_SECRET_KEY = get_env('PAYMONGO_SECRET_KEY', required=True)  # noqa: F405
PAYMONGO_WEBHOOK_SECRET = get_env('PAYMONGO_WEBHOOK_SECRET', required=True)  # noqa: F405

if PAYMONGO_EMULATE:  # noqa: F405
    raise ImproperlyConfigured(  # noqa: F405
        'PAYMONGO_EMULATE must be disabled in production. '
        'Set PAYMONGO_EMULATE=false in the environment.'
    )

# Configure secure proxies and cookies
SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')
CSRF_COOKIE_SECURE = True
SESSION_COOKIE_SECURE = True
SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = 'DENY'
SECURE_HSTS_SECONDS = 31536000
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
SECURE_SSL_REDIRECT = get_bool_env('SECURE_SSL_REDIRECT', 'true')  # noqa: F405

# Email backend (e.g. SMTP) should be configured via environment variables
EMAIL_BACKEND = 'django.core.mail.backends.smtp.EmailBackend'
EMAIL_HOST = get_env('EMAIL_HOST', 'localhost')  # noqa: F405
EMAIL_PORT = int(get_env('EMAIL_PORT', 25))  # noqa: F405
EMAIL_USE_TLS = get_bool_env('EMAIL_USE_TLS', 'false')  # noqa: F405
EMAIL_HOST_USER = get_env('EMAIL_HOST_USER', '')  # noqa: F405
EMAIL_HOST_PASSWORD = get_env('EMAIL_HOST_PASSWORD', '')  # noqa: F405
