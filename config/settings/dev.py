"""Development settings for the Tropicana Hotels platform.

This module extends the base settings with development specific
configuration, such as enabling debug, allowing all hosts, using the
console email backend and emulating PayMongo when no key is configured.
Do not use these settings in production!
"""

from .base import *  # noqa: F401,F403

# Enable debug mode for development
DEBUG = True

# Allow all hosts in development
ALLOWED_HOSTS = ['*']

# Use console email backend during development
EMAIL_BACKEND = 'django.core.mail.backends.console.EmailBackend'

# Without a secret key checkout sessions are emulated locally
PAYMONGO_EMULATE = get_bool_env('PAYMONGO_EMULATE', 'true')  # noqa: F405
