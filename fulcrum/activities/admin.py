from django.contrib import admin

from .models import Activity


@admin.register(Activity)
class ActivityAdmin(admin.ModelAdmin):
    """Read-mostly admin view; day-to-day editing happens in the dashboard."""

    list_display = ['title', 'status', 'energy_level', 'duration', 'grade_level', 'created_by', 'created_at']
    list_filter = ['status', 'energy_level', 'duration', 'setup']
    search_fields = ['title', 'overview']
    readonly_fields = ['created_by', 'updated_by', 'created_at', 'updated_at']
    ordering = ['-created_at']

    fieldsets = (
        (None, {'fields': ('title', 'status', 'category', 'overview', 'thumbnail_url')}),
        ('Audience', {'fields': ('grade_min', 'grade_max', 'group_size_any', 'group_size_min', 'group_size_max')}),
        ('Format', {'fields': ('energy_level', 'duration', 'setup')}),
        ('Content', {'fields': ('prep', 'setup_instructions', 'materials', 'play', 'reflection', 'variations', 'safety', 'custom_sections')}),
        ('Metadata', {'fields': ('created_by', 'updated_by', 'created_at', 'updated_at')}),
    )
