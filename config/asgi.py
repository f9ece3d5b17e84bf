"""ASGI config for the campaign booking project.

This module exposes the ASGI application. The availability push channel is
served as a streaming HTTP response, so it works under both ASGI and WSGI
servers.
"""

import os
from django.core.asgi import get_asgi_application  # type: ignore

# Use the development settings by default. Production servers should set
# DJANGO_SETTINGS_MODULE accordingly.
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.dev')

application = get_asgi_application()
