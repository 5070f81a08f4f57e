"""
Management command to load activities from a JSON array, e.g. a dump of
the browser dashboard's ``fulcrum_activities`` local-storage key.
"""

from django.core.management.base import BaseCommand, CommandError


class Command(BaseCommand):
    help = 'Import activities from a JSON file'

    def add_arguments(self, parser):
        parser.add_argument('file', type=str, help='Path to the JSON file')
        parser.add_argument(
            '--skip-existing',
            action='store_true',
            help='Leave activities this server exported, and still has, untouched',
        )

    def handle(self, *args, **options):
        from fulcrum.activities.storage import StorageError, load_activities

        path = options['file']
        try:
            with open(path, 'rb') as f:
                raw = f.read()
        except OSError as e:
            raise CommandError(f'Could not read {path}: {e}')

        try:
            result = load_activities(raw, skip_existing=options['skip_existing'])
        except StorageError as e:
            raise CommandError(f'Import failed: {e}')

        for error in result.errors:
            self.stdout.write(self.style.WARNING(error))
        self.stdout.write(self.style.SUCCESS(result.summary))
