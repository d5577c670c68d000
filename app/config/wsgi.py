"""
WSGI config for the Django application.

Exposes the WSGI callable as `application` for servers such as gunicorn.
The webhook and health views are synchronous, so WSGI deployment needs
nothing extra; the async PayPro adapters are driven from caller code.

For more information on this file, see:
https://docs.djangoproject.com/en/5.2/howto/deployment/wsgi/
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_wsgi_application()
