from django.core.management.base import BaseCommand, CommandError
from django.contrib.auth import get_user_model

from medicine.utils import CSVParseError, import_medicines, parse_medicine_csv

User = get_user_model()


class Command(BaseCommand):
    help = 'Import medicines from a CSV file (name,batch,quantity,manufacturer,manufactureDate,expiryDate)'

    def add_arguments(self, parser):
        parser.add_argument('path', help='Path to the CSV file')
        parser.add_argument('--user', help='Username recorded as the creator of the imported medicines')

    def handle(self, *args, **options):
        user = None
        if options['user']:
            try:
                user = User.objects.get(username=options['user'])
            except User.DoesNotExist:
                raise CommandError(f'User "{options["user"]}" does not exist')

        try:
            with open(options['path'], 'rb') as csv_file:
                rows = parse_medicine_csv(csv_file)
        except OSError as e:
            raise CommandError(f'Cannot read {options["path"]}: {e}')
        except CSVParseError as e:
            raise CommandError(f'Row {e.row}, field "{e.field}": {e.message}')

        results = import_medicines(rows, user)

        for error in results['errors']:
            self.stdout.write(self.style.WARNING(f'Skipped row {error["row"]}: {error["errors"]}'))

        self.stdout.write(self.style.SUCCESS(
            f'Imported {results["created_count"]} medicines ({results["skipped_count"]} skipped)'
        ))
