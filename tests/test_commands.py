import io
from datetime import timedelta

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from medicine.models import Medicine
from notifications.models import Notification

pytestmark = pytest.mark.django_db


def test_send_expiry_notifications(make_medicine, email_recipient):
    make_medicine(days=-1)
    make_medicine(days=90)

    out = io.StringIO()
    call_command('send_expiry_notifications', stdout=out)

    assert Notification.objects.count() == 1
    assert '1 sent, 0 failed' in out.getvalue()


def test_send_expiry_notifications_with_date(make_medicine, email_recipient, today):
    make_medicine(days=90)

    call_command('send_expiry_notifications', '--date', (today + timedelta(days=70)).isoformat())

    assert Notification.objects.count() == 1


def test_send_expiry_notifications_bad_date():
    with pytest.raises(CommandError):
        call_command('send_expiry_notifications', '--date', '18/10/2026')


def test_import_medicines_command(tmp_path, admin_user):
    path = tmp_path / 'medicines.csv'
    path.write_text(
        'name,batch,quantity,manufacturer,manufactureDate,expiryDate\n'
        'Aspirin,ASP-1,10,Bayer,,2030-01-01\n'
    )

    out = io.StringIO()
    call_command('import_medicines', str(path), '--user', 'admin', stdout=out)

    medicine = Medicine.objects.get()
    assert medicine.created_by == admin_user
    assert medicine.manufacturer_name == 'Bayer'
    assert 'Imported 1 medicines' in out.getvalue()


def test_import_medicines_command_reports_bad_row(tmp_path):
    path = tmp_path / 'medicines.csv'
    path.write_text('name,batch,quantity,manufacturer,manufactureDate,expiryDate\nAspirin,ASP-1,10,,,\n')

    with pytest.raises(CommandError, match='Row 1'):
        call_command('import_medicines', str(path))


def test_import_medicines_command_missing_file(tmp_path):
    with pytest.raises(CommandError):
        call_command('import_medicines', str(tmp_path / 'missing.csv'))
