"""
WSGI config for Fulcrum Activity Admin.

It exposes the WSGI callable as a module-level variable named ``application``.
"""

import os

from django.core.wsgi import get_wsgi_application
from django.core.exceptions import ImproperlyConfigured

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'fulcrum.settings.production')


def validate_production_keys():
    """
    Refuse to serve with the development SECRET_KEY when DEBUG is off.
    """
    from django.conf import settings

    if settings.DEBUG:
        return

    if 'insecure' in settings.SECRET_KEY.lower():
        raise ImproperlyConfigured(
            "\n" + "=" * 70 + "\n"
            "FATAL SECURITY ERROR: Using development SECRET_KEY in production!\n"
            "=" * 70 + "\n\n"
            "Generate a new key with:\n"
            "  python -c \"import secrets; print(secrets.token_urlsafe(50))\"\n\n"
            "Then export it before starting the server:\n"
            "  SECRET_KEY=your-new-secure-key\n"
            + "=" * 70
        )


application = get_wsgi_application()

validate_production_keys()
