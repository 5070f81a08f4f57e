"""
Activities models - the facilitation plan catalog
"""

import secrets

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


GRADE_LABELS = ['K', '1', '2', '3', '4', '5', '6', '7', '8', '9', '10', '11', '12']
MIN_GRADE = 0
MAX_GRADE = len(GRADE_LABELS) - 1

# Largest value a PositiveIntegerField holds on every supported backend
MAX_GROUP_SIZE = 2147483647


class Category(models.TextChoices):
    ICE_BREAKER = 'ice breaker', 'Ice Breaker'
    TEAM_BUILDING = 'team building', 'Team Building'
    PROBLEM_SOLVING = 'problem solving', 'Problem Solving'
    REFLECTION = 'reflection', 'Reflection'
    WELLNESS = 'wellness', 'Wellness'
    ENERGIZER = 'energizer', 'Energizer'


def generate_section_id():
    """Short random identifier for a custom content section."""
    return secrets.token_hex(4)


def grade_label(grade):
    """Return the display label for a grade number (0 is kindergarten)."""
    return GRADE_LABELS[grade]


def format_grade_range(grade_min, grade_max):
    """Format a grade range as "K-2", "6-8" or a single label."""
    if grade_min == grade_max:
        return grade_label(grade_min)
    return f"{grade_label(grade_min)}-{grade_label(grade_max)}"


class Activity(models.Model):
    """
    One facilitation plan: tagged metadata plus free-text content sections.
    """

    class Status(models.TextChoices):
        DRAFT = 'draft', 'Draft'
        PUBLISHED = 'published', 'Published'
        ARCHIVED = 'archived', 'Archived'

    class EnergyLevel(models.TextChoices):
        LOW = 'low', 'Low'
        MEDIUM = 'medium', 'Medium'
        HIGH = 'high', 'High'

    class Duration(models.TextChoices):
        UNDER_15 = '< 15 min', '< 15 min'
        FROM_15_TO_20 = '15-20 min', '15-20 min'
        OVER_30 = '30+ min', '30+ min'

    class Setup(models.TextChoices):
        PROP = 'prop', 'Prop'
        NO_PROP = 'no prop', 'No Prop'

    # Basic info
    title = models.CharField(max_length=200)
    category = models.JSONField(
        default=list,
        blank=True,
        help_text='List of category tags'
    )
    energy_level = models.CharField(
        max_length=10,
        choices=EnergyLevel.choices,
        blank=True,
        default=''
    )
    duration = models.CharField(
        max_length=20,
        choices=Duration.choices,
        blank=True,
        default=''
    )
    grade_min = models.PositiveSmallIntegerField(default=MIN_GRADE)
    grade_max = models.PositiveSmallIntegerField(default=MAX_GRADE)
    group_size_any = models.BooleanField(
        default=False,
        help_text='Works with any group size'
    )
    group_size_min = models.PositiveIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(MAX_GROUP_SIZE)]
    )
    group_size_max = models.PositiveIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(MAX_GROUP_SIZE)]
    )
    setup = models.CharField(
        max_length=20,
        choices=Setup.choices,
        blank=True,
        default=''
    )
    overview = models.TextField(blank=True)

    # Media
    thumbnail_url = models.CharField(
        max_length=500,
        blank=True,
        help_text='Link to a thumbnail image'
    )

    # Content sections
    prep = models.TextField(blank=True)
    setup_instructions = models.TextField(blank=True)
    materials = models.TextField(
        blank=True,
        help_text='One item per line'
    )
    play = models.TextField(blank=True)
    reflection = models.TextField(blank=True)
    variations = models.TextField(blank=True)
    safety = models.TextField(blank=True)
    custom_sections = models.JSONField(
        default=list,
        blank=True,
        help_text='User-defined sections: [{"id", "name", "content"}]'
    )

    # Lifecycle
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.DRAFT,
        db_index=True
    )

    # Metadata
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_activities'
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='updated_activities'
    )
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Activity'
        verbose_name_plural = 'Activities'
        ordering = ['-created_at']

    def __str__(self):
        return self.title

    @property
    def grade_level(self):
        """Grade range label, e.g. "K-2"."""
        return format_grade_range(self.grade_min, self.grade_max)

    @property
    def group_size(self):
        """Group size label, "Any" or "min-max"."""
        if self.group_size_any:
            return 'Any'
        if self.group_size_min is None or self.group_size_max is None:
            return ''
        return f"{self.group_size_min}-{self.group_size_max}"

    @property
    def is_archived(self):
        return self.status == self.Status.ARCHIVED

    @property
    def materials_list(self):
        """Return the materials as a list of non-blank items."""
        return [item.strip() for item in self.materials.splitlines() if item.strip()]

    def get_category_labels(self):
        labels = dict(Category.choices)
        return [labels.get(value, value) for value in self.category]
