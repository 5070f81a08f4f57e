# Generated manually for version control
# Fulcrum Activity Admin - Activities Initial Migration

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Activity',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=200)),
                ('category', models.JSONField(blank=True, default=list, help_text='List of category tags')),
                ('energy_level', models.CharField(blank=True, choices=[('low', 'Low'), ('medium', 'Medium'), ('high', 'High')], default='', max_length=10)),
                ('duration', models.CharField(blank=True, choices=[('< 15 min', '< 15 min'), ('15-20 min', '15-20 min'), ('30+ min', '30+ min')], default='', max_length=20)),
                ('grade_min', models.PositiveSmallIntegerField(default=0)),
                ('grade_max', models.PositiveSmallIntegerField(default=12)),
                ('group_size_any', models.BooleanField(default=False, help_text='Works with any group size')),
                ('group_size_min', models.PositiveIntegerField(blank=True, null=True)),
                ('group_size_max', models.PositiveIntegerField(blank=True, null=True)),
                ('setup', models.CharField(blank=True, choices=[('prop', 'Prop'), ('no prop', 'No Prop')], default='', max_length=20)),
                ('overview', models.TextField(blank=True)),
                ('thumbnail_url', models.CharField(blank=True, help_text='Link to a thumbnail image', max_length=500)),
                ('prep', models.TextField(blank=True)),
                ('setup_instructions', models.TextField(blank=True)),
                ('materials', models.TextField(blank=True, help_text='One item per line')),
                ('play', models.TextField(blank=True)),
                ('reflection', models.TextField(blank=True)),
                ('variations', models.TextField(blank=True)),
                ('safety', models.TextField(blank=True)),
                ('custom_sections', models.JSONField(blank=True, default=list, help_text='User-defined sections: [{"id", "name", "content"}]')),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('published', 'Published'), ('archived', 'Archived')], db_index=True, default='draft', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_activities', to=settings.AUTH_USER_MODEL)),
                ('updated_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='updated_activities', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Activity',
                'verbose_name_plural': 'Activities',
                'ordering': ['-created_at'],
            },
        ),
    ]
