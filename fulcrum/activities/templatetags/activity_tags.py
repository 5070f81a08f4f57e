"""
Template filters and tags for the activity dashboard.

Loaded as a builtin, so templates can use them without ``{% load %}``:
    {{ activity.created_at|fulcrum_date }}      -> "16-Feb-2026"
    {{ activity.created_at|fulcrum_datetime }}  -> "16-Feb-2026 14:30"
    {{ activity.updated_at|fulcrum_relative }}  -> "Just now" / "2 days ago"
    {{ activity.status|status_class }}          -> "bg-success"
    {% query_without request 'energy' 'low' %}  -> query string minus one filter value
"""

from datetime import timedelta

from django import template
from django.utils import timezone
from django.utils.dateformat import format as django_format

from ..storage import last_edited_label

register = template.Library()

FULCRUM_DATE_FORMATS = {
    'datetime_short': 'd-M-Y H:i',        # 16-Feb-2026 14:30
    'date_only': 'd-M-Y',                 # 16-Feb-2026
}


def _format_date(value, format_key):
    if value is None:
        return ''
    try:
        return django_format(value, FULCRUM_DATE_FORMATS[format_key])
    except (ValueError, TypeError, AttributeError):
        return str(value)


@register.filter(name='fulcrum_date')
def fulcrum_date(value):
    return _format_date(value, 'date_only')


@register.filter(name='fulcrum_datetime')
def fulcrum_datetime(value):
    return _format_date(value, 'datetime_short')


@register.filter(name='fulcrum_relative')
def fulcrum_relative(value, fallback_days=30):
    """
    "Just now" / "3 hours ago" for recent edits, falls back to the
    date for anything older than ``fallback_days``.
    """
    if value is None:
        return ''
    try:
        now = timezone.now()
        if timezone.is_naive(value):
            value = timezone.make_aware(value)
        if now - value < timedelta(days=int(fallback_days)):
            return last_edited_label(value, now)
        return _format_date(value, 'date_only')
    except (ValueError, TypeError, AttributeError):
        return str(value)


@register.filter
def status_class(status):
    """Return Bootstrap badge class for an activity status."""
    status_map = {
        'draft': 'bg-secondary',
        'published': 'bg-success',
        'archived': 'bg-warning text-dark',
    }
    return status_map.get(str(status).lower(), 'bg-secondary')


@register.filter
def energy_class(level):
    """Return Bootstrap badge class for an energy level."""
    level_map = {
        'low': 'bg-info text-dark',
        'medium': 'bg-primary',
        'high': 'bg-danger',
    }
    return level_map.get(str(level).lower(), 'bg-light text-dark')


@register.filter
def energy_label(level):
    return str(level).capitalize() if level else ''


@register.simple_tag
def query_without(request, param, value=None):
    """
    Current query string with one parameter (or one of its values) removed.
    The page number is always dropped so the list restarts at page one.
    """
    params = request.GET.copy()
    params.pop('page', None)
    if value is None:
        params.pop(param, None)
    else:
        remaining = [v for v in params.getlist(param) if v != str(value)]
        params.setlist(param, remaining)
    encoded = params.urlencode()
    return f'?{encoded}' if encoded else '?'

