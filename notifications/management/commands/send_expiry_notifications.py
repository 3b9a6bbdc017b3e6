from datetime import date

from django.core.management.base import BaseCommand, CommandError

from notifications.dispatch import dispatch


class Command(BaseCommand):
    help = 'Notify all recipients about expired and expiring-soon medicines (run daily from cron)'

    def add_arguments(self, parser):
        parser.add_argument(
            '--date',
            help='Classify expiry against this date (YYYY-MM-DD) instead of today'
        )

    def handle(self, *args, **options):
        today = None
        if options['date']:
            try:
                today = date.fromisoformat(options['date'])
            except ValueError:
                raise CommandError(f'Invalid date "{options["date"]}", expected YYYY-MM-DD')

        self.stdout.write('Dispatching expiry notifications...')
        result = dispatch(today=today)

        self.stdout.write(self.style.SUCCESS(
            f'Dispatched {len(result.notifications)} notifications: {result.sent} sent, {result.failed} failed'
        ))
        if result.failed:
            self.stdout.write(self.style.WARNING(f'{result.failed} notifications failed, see the log for details'))
