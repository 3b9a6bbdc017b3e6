from django.conf import settings
from django.core.mail import send_mail

from medicine import status as expiry
from .backends import get_whatsapp_backend
from .models import Notification


class DeliveryError(Exception):
    """A notification could not be handed to its channel"""


def render_email(medicine, tier):
    expiry_date = medicine.expiry_date.isoformat()

    if tier == expiry.EXPIRED:
        return (f"ALERT: {medicine.name} (Batch: {medicine.batch}) has EXPIRED on {expiry_date}. "
                f"Please remove from inventory immediately.")
    if tier == expiry.EXPIRING_SOON:
        return (f"WARNING: {medicine.name} (Batch: {medicine.batch}) will expire on {expiry_date}. "
                f"Please take action soon.")
    return f"INFO: {medicine.name} (Batch: {medicine.batch}) will expire on {expiry_date}."


def render_whatsapp(medicine, tier):
    expiry_date = medicine.expiry_date.isoformat()

    if tier == expiry.EXPIRED:
        return f"🔴 EXPIRED: {medicine.name} ({medicine.batch}) on {expiry_date}"
    if tier == expiry.EXPIRING_SOON:
        return f"🟠 EXPIRING SOON: {medicine.name} ({medicine.batch}) on {expiry_date}"
    return f"ℹ️ {medicine.name} ({medicine.batch}) expires on {expiry_date}"


def email_subject(medicine):
    return f"Medicine expiry alert: {medicine.name} (Batch: {medicine.batch})"


def send_email(notification):
    recipient = notification.recipient
    if not recipient.email:
        raise DeliveryError(f'{recipient.name} has no email address')

    send_mail(
        email_subject(notification.medicine),
        notification.message,
        settings.DEFAULT_FROM_EMAIL,
        [recipient.email],
        fail_silently=False,
    )


def send_whatsapp(notification):
    recipient = notification.recipient
    if not recipient.phone:
        raise DeliveryError(f'{recipient.name} has no phone number')

    get_whatsapp_backend().send_message(recipient.phone, notification.message)


RENDERERS = {
    Notification.CHANNEL_EMAIL: render_email,
    Notification.CHANNEL_WHATSAPP: render_whatsapp,
}

SENDERS = {
    Notification.CHANNEL_EMAIL: send_email,
    Notification.CHANNEL_WHATSAPP: send_whatsapp,
}
