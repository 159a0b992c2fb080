"""
WSGI config for the lendingmonitor project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'lendingmonitor.settings')

application = get_wsgi_application()
