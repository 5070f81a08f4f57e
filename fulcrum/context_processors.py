"""
Context processors for Fulcrum Activity Admin
"""

from django.conf import settings


def app_context(request):
    """Add common context variables to all templates."""
    return {
        'app_name': 'Fulcrum Activity Admin',
        'app_version': '1.0.0',
        'debug_mode': settings.DEBUG,
    }
