"""
ASGI config for the pharmtrack project.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'pharmtrack.settings')

application = get_asgi_application()
