import smtplib
import uuid
from datetime import timedelta

import pytest
from django.core import mail

from notifications import channels
from notifications.dispatch import dispatch, process_pending
from notifications.models import Notification, Recipient

pytestmark = pytest.mark.django_db


def test_dispatch_sends_one_notification_per_channel(make_medicine, email_recipient, both_channels_recipient,
                                                     whatsapp_outbox, today):
    expired = make_medicine(days=-2, name='Amoxicillin', batch='AMX-1')
    expiring = make_medicine(days=12, name='Insulin', batch='INS-1')
    make_medicine(days=200, name='Paracetamol')

    result = dispatch(today=today)

    # 2 medicines x (1 email channel + 2 channels)
    assert len(result.notifications) == 6
    assert result.sent == 6
    assert result.failed == 0
    assert Notification.objects.filter(status=Notification.STATUS_SENT).count() == 6
    assert not Notification.objects.filter(medicine__name='Paracetamol').exists()

    assert len(mail.outbox) == 4
    assert len(whatsapp_outbox) == 2
    assert {m['phone'] for m in whatsapp_outbox} == {'+15550001111'}

    email = Notification.objects.get(medicine=expired, recipient=email_recipient)
    assert email.message.startswith('ALERT: Amoxicillin (Batch: AMX-1) has EXPIRED')
    assert email.sent_at is not None

    whatsapp = Notification.objects.get(medicine=expiring, channel=Notification.CHANNEL_WHATSAPP)
    assert whatsapp.message.startswith('🟠 EXPIRING SOON: Insulin (INS-1)')


def test_dispatch_twice_records_duplicates(make_medicine, email_recipient, today):
    make_medicine(days=5)

    dispatch(today=today)
    dispatch(today=today)

    assert Notification.objects.count() == 2
    assert len(mail.outbox) == 2


def test_dispatch_with_no_recipients_records_nothing(make_medicine, today):
    make_medicine(days=-1)

    result = dispatch(today=today)

    assert result.notifications == []
    assert Notification.objects.count() == 0


def test_dispatch_ignores_safe_medicines_passed_explicitly(make_medicine, email_recipient, today):
    safe = make_medicine(days=90)

    result = dispatch(medicines=[safe], today=today)

    assert result.notifications == []


def test_failed_delivery_does_not_block_others(make_medicine, email_recipient, today):
    # Created without going through the API, so no phone validation
    Recipient.objects.create(name='No Phone', email='nophone@example.com', receive_whatsapp=True)
    make_medicine(days=3)

    result = dispatch(today=today)

    assert result.sent == 2
    assert result.failed == 1
    failed = Notification.objects.get(status=Notification.STATUS_FAILED)
    assert failed.channel == Notification.CHANNEL_WHATSAPP
    assert 'phone' in failed.error
    assert failed.sent_at is None


def test_mail_server_error_is_recorded(monkeypatch, make_medicine, email_recipient, both_channels_recipient,
                                       whatsapp_outbox, today):
    def broken_send_mail(*args, **kwargs):
        raise smtplib.SMTPException('Connection refused')

    monkeypatch.setattr(channels, 'send_mail', broken_send_mail)
    make_medicine(days=-1)

    result = dispatch(today=today)

    assert result.failed == 2
    assert result.sent == 1
    assert len(whatsapp_outbox) == 1
    assert set(
        Notification.objects.filter(channel=Notification.CHANNEL_EMAIL).values_list('error', flat=True)
    ) == {'Connection refused'}


def test_dispatch_respects_reference_date(make_medicine, email_recipient, today):
    make_medicine(days=60)

    assert dispatch(today=today).notifications == []
    assert len(dispatch(today=today + timedelta(days=45)).notifications) == 1


def test_process_pending(make_medicine, email_recipient):
    medicine = make_medicine(days=-1)
    queued = Notification.objects.create(
        medicine=medicine, recipient=email_recipient, channel=Notification.CHANNEL_EMAIL, message='Expired'
    )
    orphan = Notification.objects.create(medicine=medicine, channel=Notification.CHANNEL_EMAIL, message='Expired')

    processed = process_pending()

    assert set(processed) == {queued.id, orphan.id}
    queued.refresh_from_db()
    orphan.refresh_from_db()
    assert queued.status == Notification.STATUS_SENT
    assert orphan.status == Notification.STATUS_FAILED
    assert process_pending() == []


def test_api_create_and_list(staff_client, make_medicine, email_recipient):
    medicine = make_medicine(days=-1, name='Amoxicillin')

    response = staff_client.post('/api/notifications/', {
        'medicine': str(medicine.id),
        'recipient': str(email_recipient.id),
        'channel': 'email',
    }, format='json')

    assert response.status_code == 201
    data = response.json()
    assert data['status'] == 'pending'
    assert data['medicine_name'] == 'Amoxicillin'
    assert data['message'].startswith('ALERT:')

    response = staff_client.get('/api/notifications/', {'status': 'pending'})
    assert [row['id'] for row in response.json()] == [data['id']]


def test_api_create_unknown_medicine(staff_client):
    response = staff_client.post('/api/notifications/', {
        'medicine': str(uuid.uuid4()),
        'channel': 'email',
    }, format='json')

    assert response.status_code == 404


def test_api_create_rejects_unknown_channel(staff_client, make_medicine):
    response = staff_client.post('/api/notifications/', {
        'medicine': str(make_medicine().id),
        'channel': 'sms',
    }, format='json')

    assert response.status_code == 400
    assert 'channel' in response.json()['errors']


def test_api_for_medicine(staff_client, make_medicine, email_recipient, today):
    first = make_medicine(days=-1)
    make_medicine(days=-1)
    dispatch(today=today)

    response = staff_client.get(f'/api/notifications/medicine/{first.id}/')

    assert response.status_code == 200
    assert [row['medicine'] for row in response.json()] == [str(first.id)]


def test_api_for_medicine_with_bad_id(staff_client):
    response = staff_client.get('/api/notifications/medicine/not-a-uuid/')
    assert response.status_code == 404


def test_api_mark_sent_and_failed(staff_client, make_medicine, email_recipient):
    medicine = make_medicine(days=-1)
    first = Notification.objects.create(medicine=medicine, recipient=email_recipient, channel='email', message='m')
    second = Notification.objects.create(medicine=medicine, recipient=email_recipient, channel='email', message='m')

    response = staff_client.put(f'/api/notifications/{first.id}/sent/')
    assert response.status_code == 200
    assert response.json()['status'] == 'sent'
    assert response.json()['sent_at'] is not None

    response = staff_client.put(f'/api/notifications/{second.id}/failed/', {'error': 'Mailbox full'}, format='json')
    assert response.status_code == 200
    assert response.json()['status'] == 'failed'
    assert response.json()['error'] == 'Mailbox full'

    # Terminal states are final
    assert staff_client.put(f'/api/notifications/{first.id}/failed/').status_code == 400
    assert staff_client.put(f'/api/notifications/{second.id}/sent/').status_code == 400


def test_api_process_and_dispatch(staff_client, make_medicine, email_recipient):
    medicine = make_medicine(days=4)
    Notification.objects.create(medicine=medicine, recipient=email_recipient, channel='email', message='m')

    response = staff_client.post('/api/notifications/process/')
    assert response.status_code == 200
    assert len(response.json()['processed']) == 1

    response = staff_client.post('/api/notifications/dispatch/')
    assert response.status_code == 200
    data = response.json()
    assert data['sent'] == 1
    assert data['failed'] == 0
    assert len(data['notifications']) == 1


def test_recipient_crud(admin_client, staff_client):
    response = admin_client.post('/api/notifications/recipients/', {
        'name': 'Cara',
        'email': 'cara@example.com',
        'phone': '+15550002222',
        'receive_whatsapp': True,
    }, format='json')
    assert response.status_code == 201
    recipient_id = response.json()['id']
    assert response.json()['channels'] == ['email', 'whatsapp']
    assert response.json()['role'] == 'staff'

    response = staff_client.get('/api/notifications/recipients/')
    assert [row['name'] for row in response.json()] == ['Cara']

    response = admin_client.patch(f'/api/notifications/recipients/{recipient_id}/', {'receive_email': False}, format='json')
    assert response.json()['channels'] == ['whatsapp']

    response = admin_client.delete(f'/api/notifications/recipients/{recipient_id}/')
    assert response.status_code == 200
    assert not Recipient.objects.exists()


def test_recipient_whatsapp_needs_phone(admin_client):
    response = admin_client.post('/api/notifications/recipients/', {
        'name': 'Dan',
        'email': 'dan@example.com',
        'receive_whatsapp': True,
    }, format='json')

    assert response.status_code == 400
    assert 'phone' in response.json()['errors']


def test_recipient_writes_are_admin_only(staff_client):
    response = staff_client.post('/api/notifications/recipients/', {
        'name': 'Eve',
        'email': 'eve@example.com',
    }, format='json')

    assert response.status_code == 403


def test_deleting_medicine_removes_its_notifications(make_medicine, email_recipient, today):
    medicine = make_medicine(days=-1)
    dispatch(today=today)

    medicine.delete()

    assert Notification.objects.count() == 0


def test_render_failure_does_not_block_other_notifications(monkeypatch, make_medicine, email_recipient, today):
    original = channels.RENDERERS[Notification.CHANNEL_EMAIL]

    def fragile_render(medicine, tier):
        if medicine.name == 'Broken':
            raise KeyError('template missing')
        return original(medicine, tier)

    monkeypatch.setitem(channels.RENDERERS, Notification.CHANNEL_EMAIL, fragile_render)
    make_medicine(days=-1, name='Broken')
    make_medicine(days=5, name='Fine')

    result = dispatch(today=today)

    assert result.sent == 1
    assert result.failed == 1
    assert result.errors == 0
    broken = Notification.objects.get(medicine__name='Broken')
    assert broken.status == Notification.STATUS_FAILED
    assert 'template missing' in broken.error
    assert len(mail.outbox) == 1
