"""
List filters for the activity library.

Query parameters:
    q          title search (case-insensitive substring)
    status     all | draft | published | archived
    energy     repeated, any of low / medium / high
    duration   repeated, any of the duration buckets
    category   repeated, matches when any category of the activity is selected
    sort       newest | oldest | title-asc | title-desc
"""

import django_filters
from django import forms
from django.db.models.functions import Lower

from .models import Activity, Category


STATUS_CHOICES = [('all', 'All Status')] + list(Activity.Status.choices)

SORT_CHOICES = [
    ('newest', 'Newest First'),
    ('oldest', 'Oldest First'),
    ('title-asc', 'Title (A-Z)'),
    ('title-desc', 'Title (Z-A)'),
]

SORT_ORDERINGS = {
    'newest': ['-created_at', '-pk'],
    'oldest': ['created_at', 'pk'],
    'title-asc': [Lower('title').asc(), 'pk'],
    'title-desc': [Lower('title').desc(), '-pk'],
}

DEFAULT_SORT = 'newest'


class ActivityFilter(django_filters.FilterSet):
    """Search, status, multi-select facets and sort order for the list view."""

    q = django_filters.CharFilter(
        field_name='title',
        lookup_expr='icontains',
        label='Search',
        widget=forms.TextInput(attrs={'placeholder': 'Search activities...'}),
    )
    status = django_filters.ChoiceFilter(
        choices=STATUS_CHOICES,
        method='filter_status',
        empty_label=None,
        label='Status',
    )
    energy = django_filters.MultipleChoiceFilter(
        field_name='energy_level',
        choices=Activity.EnergyLevel.choices,
        widget=forms.CheckboxSelectMultiple,
        label='Energy Level',
    )
    duration = django_filters.MultipleChoiceFilter(
        field_name='duration',
        choices=Activity.Duration.choices,
        widget=forms.CheckboxSelectMultiple,
        label='Duration',
    )
    category = django_filters.MultipleChoiceFilter(
        choices=Category.choices,
        method='filter_category',
        widget=forms.CheckboxSelectMultiple,
        label='Category',
    )
    sort = django_filters.ChoiceFilter(
        choices=SORT_CHOICES,
        method='filter_sort',
        empty_label=None,
        label='Sort by',
    )

    class Meta:
        model = Activity
        fields = []

    def __init__(self, data=None, *args, **kwargs):
        super().__init__(data, *args, **kwargs)
        for name in ('status', 'sort'):
            self.filters[name].field.widget.attrs['class'] = 'form-select form-select-sm'
        self.filters['q'].field.widget.attrs['class'] = 'form-control'

    @property
    def qs(self):
        queryset = super().qs
        # Default ordering applies even when no sort parameter was sent
        if not getattr(self.form, 'cleaned_data', {}).get('sort'):
            queryset = queryset.order_by(*SORT_ORDERINGS[DEFAULT_SORT])
        return queryset

    def filter_status(self, queryset, name, value):
        if not value or value == 'all':
            return queryset
        return queryset.filter(status=value)

    def filter_category(self, queryset, name, value):
        """
        Keep activities sharing at least one category with the selection.

        Categories live in a JSON list, so the overlap test runs in Python
        over the candidate rows.
        """
        if not value:
            return queryset
        selected = set(value)
        matching_ids = [
            pk for pk, categories in queryset.values_list('pk', 'category')
            if selected.intersection(categories or [])
        ]
        return queryset.filter(pk__in=matching_ids)

    def filter_sort(self, queryset, name, value):
        return queryset.order_by(*SORT_ORDERINGS.get(value, SORT_ORDERINGS[DEFAULT_SORT]))

    @property
    def active_filter_count(self):
        """Number of selected facet values (energy + duration + category)."""
        if not self.is_bound or not self.form.is_valid():
            return 0
        return sum(
            len(self.form.cleaned_data.get(name) or [])
            for name in ('energy', 'duration', 'category')
        )

    def active_filters(self):
        """(parameter, value, label) triples for the removable filter chips."""
        if not self.is_bound or not self.form.is_valid():
            return []
        chips = []
        for name in ('energy', 'duration', 'category'):
            labels = dict(self.filters[name].extra['choices'])
            for value in self.form.cleaned_data.get(name) or []:
                chips.append((name, value, labels.get(value, value)))
        return chips
