"""
Management command to export every activity as a JSON array.
"""

from django.core.management.base import BaseCommand, CommandError


class Command(BaseCommand):
    help = 'Export all activities as a JSON array (stdout or --output FILE)'

    def add_arguments(self, parser):
        parser.add_argument(
            '--output', '-o',
            type=str,
            default=None,
            help='File to write (default: stdout)',
        )

    def handle(self, *args, **options):
        from fulcrum.activities.models import Activity
        from fulcrum.activities.storage import dump_activities

        activities = Activity.objects.order_by('-created_at', '-pk')
        payload = dump_activities(activities)
        output = options['output']

        if not output:
            self.stdout.write(payload)
            return

        try:
            with open(output, 'w', encoding='utf-8') as f:
                f.write(payload)
        except OSError as e:
            raise CommandError(f'Could not write {output}: {e}')

        self.stdout.write(
            self.style.SUCCESS(f'Exported {activities.count()} activities to {output}')
        )
