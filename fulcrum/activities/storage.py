"""
Activity JSON Storage

Reads and writes the activity list as a JSON array in the same shape the
browser dashboard kept under its ``fulcrum_activities`` local-storage key,
so catalogs can be exported, backed up and moved between installations.
"""

import json
import logging
import re
from datetime import datetime, timezone as dt_timezone
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from django.db import DatabaseError, transaction
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime
from django.utils.timesince import timesince

from .models import (
    Activity, Category, GRADE_LABELS, MAX_GRADE, MAX_GROUP_SIZE, MIN_GRADE,
    generate_section_id,
)

logger = logging.getLogger('fulcrum.activities.storage')

# Entries written by dump_activities carry this marker; only marked entries
# are matched against existing rows by id on import.
EXPORT_ORIGIN = 'fulcrum-server'

_GROUP_RANGE = re.compile(r'^\s*(\d+)\s*-\s*(\d+)\s*$')


class StorageError(Exception):
    """Raised when a JSON document or entry cannot be turned into activities."""
    pass


@dataclass
class ImportResult:
    """Outcome of loading a JSON array into the catalog."""

    created: int = 0
    updated: int = 0
    skipped: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def summary(self):
        return (
            f'Import complete: {self.created} created, {self.updated} updated, '
            f'{self.skipped} skipped.'
        )


# ============== Field codecs ==============

def last_edited_label(value, now=None):
    """Relative "last edited" text, e.g. "Just now" or "2 days ago"."""
    if value is None:
        return ''
    now = now or timezone.now()
    if (now - value).total_seconds() < 60:
        return 'Just now'
    return timesince(value, now).split(',')[0] + ' ago'


def parse_grade_level(text) -> Tuple[int, int]:
    """
    Parse "K-2", "6-8" or "4" into a (min, max) grade pair.
    Anything unreadable falls back to the full K-12 range.
    """
    labels = [label.lower() for label in GRADE_LABELS]
    parts = [part.strip().lower() for part in str(text or '').split('-')]
    try:
        grades = [labels.index(part) for part in parts]
    except ValueError:
        return MIN_GRADE, MAX_GRADE
    if len(grades) == 1:
        return grades[0], grades[0]
    if len(grades) == 2 and grades[0] <= grades[1]:
        return grades[0], grades[1]
    return MIN_GRADE, MAX_GRADE


def parse_group_size(text) -> Tuple[bool, Optional[int], Optional[int]]:
    """
    Parse "Any" or "10-30" into (any, min, max).
    Open-ended labels such as "15+" or "<15", and ranges too large to
    store, are treated as any size.
    """
    match = _GROUP_RANGE.match(str(text or ''))
    if match:
        low, high = int(match.group(1)), int(match.group(2))
        if 0 < low <= high <= MAX_GROUP_SIZE:
            return False, low, high
    return True, None, None


def normalize_sections(items) -> List[Dict[str, str]]:
    """Clean a list of custom sections, dropping unnamed ones."""
    if not isinstance(items, (list, tuple)):
        return []
    cleaned = []
    for item in items:
        if not isinstance(item, dict):
            continue
        name = str(item.get('name', '')).strip()
        if not name:
            continue
        cleaned.append({
            'id': str(item.get('id') or generate_section_id()),
            'name': name,
            'content': str(item.get('content') or ''),
        })
    return cleaned


def _choice(value, choices, default=''):
    value = str(value or '').strip().lower()
    return value if value in {choice for choice, _ in choices} else default


def _parse_created_at(value):
    if not value:
        return None
    try:
        created = parse_datetime(str(value))
        if created is None:
            day = parse_date(str(value)[:10])
            if day is None:
                return None
            created = datetime(day.year, day.month, day.day)
    except ValueError:
        # Well-formed but impossible dates keep the import time
        return None
    if timezone.is_naive(created):
        created = timezone.make_aware(created, dt_timezone.utc)
    return created


# ============== Encoding ==============

def activity_to_dict(activity: Activity, now=None) -> Dict[str, Any]:
    """Encode one activity in the local-storage JSON shape."""
    data = {
        'id': str(activity.pk),
        'title': activity.title,
        'category': list(activity.category),
        'energyLevel': activity.energy_level,
        'duration': activity.duration,
        'gradeLevel': activity.grade_level,
        'groupSize': activity.group_size,
        'setup': activity.setup,
        'status': activity.status,
        'overview': activity.overview,
        'lastEdited': last_edited_label(activity.updated_at, now),
        'createdAt': activity.created_at.isoformat() if activity.created_at else None,
        'content': {
            'prep': activity.prep,
            'setup': activity.setup,
            'setupInstructions': activity.setup_instructions,
            'materials': activity.materials,
            'play': activity.play,
            'reflection': activity.reflection,
            'additional': {
                'variations': activity.variations,
                'safety': activity.safety,
            },
            'customTabs': list(activity.custom_sections),
        },
        'customTabs': list(activity.custom_sections),
        'exportedBy': EXPORT_ORIGIN,
    }
    if activity.thumbnail_url:
        data['thumbnailUrl'] = activity.thumbnail_url
    return data


def dump_activities(activities: Iterable[Activity], indent=2) -> str:
    """Serialize activities to a JSON array string."""
    now = timezone.now()
    return json.dumps([activity_to_dict(a, now) for a in activities], indent=indent)


# ============== Decoding ==============

def activity_fields_from_dict(data) -> Dict[str, Any]:
    """
    Decode one JSON entry into Activity field values.

    Unknown category, energy, duration and setup values are dropped;
    an unknown status becomes draft.
    """
    if not isinstance(data, dict):
        raise StorageError('entry is not an object')

    title = str(data.get('title') or '').strip()
    if not title:
        raise StorageError('entry has no title')

    content = data.get('content') or {}
    if not isinstance(content, dict):
        content = {}
    additional = content.get('additional') or {}
    if not isinstance(additional, dict):
        additional = {}

    categories = data.get('category') or []
    if isinstance(categories, str):
        categories = [categories]
    if not isinstance(categories, list):
        raise StorageError('category must be a list')
    known_categories = {choice for choice, _ in Category.choices}
    category = []
    for value in categories:
        value = str(value).strip().lower()
        if value in known_categories and value not in category:
            category.append(value)

    grade_min, grade_max = parse_grade_level(data.get('gradeLevel'))
    group_any, group_min, group_max = parse_group_size(data.get('groupSize'))

    # The browser editor wrote content.setup as the setup type, while server
    # exports keep the instructions under content.setupInstructions.
    content_setup = str(content.get('setup') or '')
    setup_type = _choice(content_setup, Activity.Setup.choices)
    setup = _choice(data.get('setup'), Activity.Setup.choices) or setup_type
    if 'setupInstructions' in content:
        setup_instructions = str(content.get('setupInstructions') or '')
    elif setup_type:
        setup_instructions = ''
    else:
        setup_instructions = content_setup

    return {
        'title': title[:200],
        'category': category,
        'energy_level': _choice(data.get('energyLevel'), Activity.EnergyLevel.choices),
        'duration': _choice(data.get('duration'), Activity.Duration.choices),
        'grade_min': grade_min,
        'grade_max': grade_max,
        'group_size_any': group_any,
        'group_size_min': group_min,
        'group_size_max': group_max,
        'setup': setup,
        'status': _choice(data.get('status'), Activity.Status.choices, Activity.Status.DRAFT),
        'overview': str(data.get('overview') or ''),
        'thumbnail_url': str(data.get('thumbnailUrl') or '')[:500],
        'prep': str(content.get('prep') or ''),
        'setup_instructions': setup_instructions,
        'materials': str(content.get('materials') or ''),
        'play': str(content.get('play') or ''),
        'reflection': str(content.get('reflection') or ''),
        'variations': str(additional.get('variations') or ''),
        'safety': str(additional.get('safety') or ''),
        'custom_sections': _merge_sections(data.get('customTabs'), content.get('customTabs')),
    }


def _merge_sections(*sources) -> List[Dict[str, str]]:
    """
    Combine custom tabs found at the top level and under ``content``.

    Edited browser records keep an empty top-level list next to the real
    tabs in ``content.customTabs``; tabs sharing an id are kept once.
    """
    merged, seen = [], set()
    for items in sources:
        if items is None:
            continue
        if not isinstance(items, list):
            raise StorageError('customTabs must be a list')
        for section in normalize_sections(items):
            if section['id'] in seen:
                continue
            seen.add(section['id'])
            merged.append(section)
    return merged


def parse_document(raw) -> List[Any]:
    """Parse a JSON document that must hold an array of entries."""
    try:
        if isinstance(raw, bytes):
            raw = raw.decode('utf-8-sig')
        document = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise StorageError(f'invalid JSON: {e}')
    if not isinstance(document, list):
        raise StorageError('expected a JSON array of activities')
    return document


def _existing_activity(entry):
    """
    The stored activity an entry refers to, if any.

    Only entries exported by this server are matched by id; ids in browser
    dumps belong to the browser and would hit unrelated rows.
    """
    if entry.get('exportedBy') != EXPORT_ORIGIN:
        return None
    entry_id = entry.get('id')
    if entry_id is None or not str(entry_id).isdigit():
        return None
    return Activity.objects.filter(pk=int(entry_id)).first()


def _save_entry(entry, fields, skip_existing, user):
    """Create or update one activity; returns 'created', 'updated' or 'skipped'."""
    existing = _existing_activity(entry)
    if existing:
        if skip_existing:
            return 'skipped'
        for name, value in fields.items():
            setattr(existing, name, value)
        existing.updated_by = user
        existing.save()
        return 'updated'

    activity = Activity.objects.create(created_by=user, updated_by=user, **fields)
    created_at = _parse_created_at(entry.get('createdAt'))
    if created_at:
        Activity.objects.filter(pk=activity.pk).update(created_at=created_at)
    return 'created'


def load_activities(raw, skip_existing=False, user=None) -> ImportResult:
    """
    Import a JSON array of activities.

    Entries previously exported by this server whose numeric ``id`` matches
    a stored activity update it (or are skipped with ``skip_existing``);
    every other entry is created with a fresh identifier. Bad entries are
    reported in ``errors`` and do not stop the rest of the import.
    """
    entries = parse_document(raw)
    result = ImportResult()

    with transaction.atomic():
        for index, entry in enumerate(entries, start=1):
            try:
                fields = activity_fields_from_dict(entry)
            except StorageError as e:
                result.errors.append(f'Entry {index}: {e}')
                continue

            try:
                # Savepoint per entry so one failed write leaves the rest intact
                with transaction.atomic():
                    outcome = _save_entry(entry, fields, skip_existing, user)
            except (DatabaseError, OverflowError, ValueError) as e:
                logger.warning("Activity import entry %d failed: %s", index, e)
                result.errors.append(f'Entry {index}: could not be saved ({e})')
                continue

            if outcome == 'created':
                result.created += 1
            elif outcome == 'updated':
                result.updated += 1
            else:
                result.skipped += 1

    logger.info(
        "Imported activities: %d created, %d updated, %d skipped, %d errors",
        result.created, result.updated, result.skipped, len(result.errors)
    )
    return result
