import io
import logging
import re

import pandas as pd
from django.db import DatabaseError, transaction

from .models import MAX_QUANTITY, Manufacturer, Medicine
from .serializers import MedicineImportRowSerializer

logger = logging.getLogger(__name__)

CSV_COLUMNS = ['name', 'batch', 'quantity', 'manufacturer', 'manufactureDate', 'expiryDate']
REQUIRED_COLUMNS = ['name', 'batch', 'expiryDate']


class CSVParseError(ValueError):
    """A CSV problem that can be pinned to a data row and a column"""

    def __init__(self, message, row, field):
        super().__init__(message)
        self.message = message
        self.row = row
        self.field = field

    def as_dict(self):
        return {'message': self.message, 'row': self.row, 'field': self.field}


def clean_quantity(value, row):
    """Parse a quantity cell, handling spaces and thousands separators"""
    value_str = re.sub(r'[,\s]', '', str(value))
    if value_str == '':
        return 0

    try:
        quantity = float(value_str)
    except ValueError:
        raise CSVParseError('Quantity must be a number', row, 'quantity')

    if not quantity.is_integer():
        raise CSVParseError('Quantity must be a whole number', row, 'quantity')
    if quantity < 0:
        raise CSVParseError('Quantity cannot be negative', row, 'quantity')
    if quantity > MAX_QUANTITY:
        raise CSVParseError(f'Quantity cannot exceed {MAX_QUANTITY}', row, 'quantity')
    return int(quantity)


def clean_date(value, row, field, label):
    parsed = pd.to_datetime(value.strip(), errors='coerce')
    if pd.isna(parsed):
        raise CSVParseError(f'Invalid {label} format', row, field)
    return parsed.date()


def parse_medicine_csv(file):
    """
    Parse a medicine CSV into rows ready for import_medicines().

    Expected columns: name,batch,quantity,manufacturer,manufactureDate,expiryDate.
    The first offending row stops the parse with a CSVParseError naming the
    1-based data row and the column at fault.
    """
    try:
        df = pd.read_csv(file, dtype=str, keep_default_na=False, encoding='utf-8', skip_blank_lines=True)
    except pd.errors.EmptyDataError:
        raise CSVParseError('CSV file is empty', 0, '')
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        raise CSVParseError(f'CSV parsing error: {e}', 0, '')

    # Clean column names (remove BOM and extra spaces)
    df.columns = df.columns.str.strip().str.replace('\ufeff', '')

    for column in REQUIRED_COLUMNS:
        if column not in df.columns:
            raise CSVParseError(
                f'Required column "{column}" not found. Available columns: {list(df.columns)}',
                0,
                column
            )

    rows = []
    for index, record in enumerate(df.to_dict('records'), start=1):
        cells = {column: str(record.get(column, '') or '').strip() for column in CSV_COLUMNS}

        # Skip rows with nothing in them
        if not any(cells.values()):
            continue

        if not cells['name']:
            raise CSVParseError('Medicine name is required', index, 'name')
        if not cells['batch']:
            raise CSVParseError('Batch number is required', index, 'batch')
        if not cells['expiryDate']:
            raise CSVParseError('Expiry date is required', index, 'expiryDate')

        expiry_date = clean_date(cells['expiryDate'], index, 'expiryDate', 'expiry date')
        manufacture_date = None
        if cells['manufactureDate']:
            manufacture_date = clean_date(cells['manufactureDate'], index, 'manufactureDate', 'manufacture date')

        rows.append({
            'name': cells['name'],
            'batch': cells['batch'],
            'quantity': clean_quantity(cells['quantity'], index),
            'manufacturer': cells['manufacturer'],
            'manufacture_date': manufacture_date,
            'expiry_date': expiry_date,
        })

    return rows


def import_medicines(rows, user):
    """
    Create one medicine per row.

    Rows are handled one after the other; a row that fails validation or
    cannot be saved is skipped and reported, the rest still go in.
    """
    results = {
        'created_count': 0,
        'skipped_count': 0,
        'errors': [],
        'medicines': [],
    }

    for index, row in enumerate(rows, start=1):
        serializer = MedicineImportRowSerializer(data=row)
        if not serializer.is_valid():
            results['skipped_count'] += 1
            results['errors'].append({'row': index, 'errors': serializer.errors})
            continue

        data = serializer.validated_data
        manufacturer = None
        try:
            with transaction.atomic():
                if data.get('manufacturer'):
                    manufacturer, _ = Manufacturer.objects.get_or_create(name=data['manufacturer'])

                medicine = Medicine.objects.create(
                    name=data['name'],
                    batch=data['batch'],
                    quantity=data.get('quantity', 0),
                    manufacturer=manufacturer,
                    manufacture_date=data.get('manufacture_date'),
                    expiry_date=data['expiry_date'],
                    created_by=user,
                )
        except DatabaseError as e:
            logger.warning('Skipping import row %d: %s', index, e)
            results['skipped_count'] += 1
            results['errors'].append({'row': index, 'errors': {'non_field_errors': [str(e)]}})
            continue

        results['created_count'] += 1
        results['medicines'].append(medicine)

    logger.info(
        'Medicine import finished: %d created, %d skipped',
        results['created_count'], results['skipped_count']
    )
    return results


def generate_sample_template():
    """Generate a sample CSV template for download"""
    sample_data = [
        ['Amoxicillin 500mg', 'AMX-2026-001', 120, 'Pfizer', '2026-01-15', '2027-01-15'],
        ['Paracetamol 1g', 'PCM-2026-014', 300, 'GSK', '2026-03-01', '2028-03-01'],
        ['Insulin Glargine', 'INS-2026-007', 25, 'Sanofi', '', '2026-12-31'],
    ]

    df = pd.DataFrame(sample_data, columns=CSV_COLUMNS)

    # Convert to CSV string
    output = io.StringIO()
    df.to_csv(output, index=False)
    csv_string = output.getvalue()
    output.close()

    return csv_string
