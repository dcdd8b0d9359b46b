"""WSGI config for the Tropicana Hotels platform.

Exposes the WSGI callable used by `runserver` and by gunicorn in
production. Deployments set DJANGO_SETTINGS_MODULE explicitly.
"""

import os
from django.core.wsgi import get_wsgi_application  # type: ignore

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.dev')

application = get_wsgi_application()
