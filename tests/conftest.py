"""
Shared fixtures for the API tests
"""
from datetime import timedelta

import pytest
from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework.test import APIClient

from medicine.models import Medicine
from notifications.backends import locmem
from notifications.models import Recipient

User = get_user_model()


@pytest.fixture(autouse=True)
def whatsapp_outbox(settings):
    """Capture WhatsApp messages in memory"""
    settings.WHATSAPP_BACKEND = 'notifications.backends.locmem.WhatsAppBackend'
    locmem.outbox.clear()
    yield locmem.outbox
    locmem.outbox.clear()


@pytest.fixture
def today():
    return timezone.localdate()


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(username='admin', password='admin-pass-123', role='admin')


@pytest.fixture
def staff_user(db):
    return User.objects.create_user(username='staff', password='staff-pass-123', role='staff')


@pytest.fixture
def client():
    """Unauthenticated API client"""
    return APIClient()


@pytest.fixture
def admin_client(admin_user):
    api_client = APIClient()
    api_client.force_authenticate(user=admin_user)
    return api_client


@pytest.fixture
def staff_client(staff_user):
    api_client = APIClient()
    api_client.force_authenticate(user=staff_user)
    return api_client


@pytest.fixture
def make_medicine(db, today):
    """Create a medicine expiring ``days`` from today"""
    counter = {'n': 0}

    def _make(days=90, quantity=10, name=None, **kwargs):
        counter['n'] += 1
        return Medicine.objects.create(
            name=name or f'Medicine {counter["n"]}',
            batch=kwargs.pop('batch', f'B-{counter["n"]:03d}'),
            quantity=quantity,
            expiry_date=today + timedelta(days=days),
            **kwargs
        )

    return _make


@pytest.fixture
def email_recipient(db):
    return Recipient.objects.create(name='Ada Pharmacist', email='ada@example.com', role='pharmacist')


@pytest.fixture
def both_channels_recipient(db):
    return Recipient.objects.create(
        name='Ben Manager',
        email='ben@example.com',
        phone='+15550001111',
        role='manager',
        receive_whatsapp=True,
    )
