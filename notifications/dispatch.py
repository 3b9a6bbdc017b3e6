"""
Expiry notification dispatch.

For every expired or expiring-soon medicine, each recipient gets one
notification per channel they opted into. Every (medicine, recipient,
channel) attempt is recorded and isolated from the others: a message that
cannot be rendered or sent is stored as ``failed`` and the loop moves on. Nothing is retried and nothing
is de-duplicated, so dispatching twice records every tuple twice.
"""
import logging
from dataclasses import dataclass, field

from django.db import DatabaseError, transaction

from medicine import status as expiry
from medicine.models import Medicine
from .channels import RENDERERS, SENDERS
from .models import Notification, Recipient

logger = logging.getLogger(__name__)


@dataclass
class DispatchResult:
    notifications: list = field(default_factory=list)
    # Tuples that could not even be recorded
    errors: int = 0

    @property
    def sent(self):
        return sum(1 for n in self.notifications if n.status == Notification.STATUS_SENT)

    @property
    def failed(self):
        return sum(1 for n in self.notifications if n.status == Notification.STATUS_FAILED)


def render_message(medicine, channel, today=None):
    tier = expiry.classify(medicine.expiry_date, today)
    return RENDERERS[channel](medicine, tier)


def deliver(notification):
    """Send one pending notification and record whether it went out"""
    try:
        SENDERS[notification.channel](notification)
    except Exception as e:
        logger.warning(
            'Failed to send %s notification %s to %s: %s',
            notification.channel, notification.id, notification.recipient, e
        )
        notification.mark_failed(str(e) or e.__class__.__name__)
    else:
        notification.mark_sent()
    return notification


def notify(medicine, recipient, channel, today=None):
    """Record and deliver one (medicine, recipient, channel) notification"""
    try:
        message = render_message(medicine, channel, today)
    except Exception as e:
        logger.warning(
            'Failed to render %s notification for %s to %s: %s',
            channel, medicine, recipient, e
        )
        return Notification.objects.create(
            medicine=medicine,
            recipient=recipient,
            channel=channel,
            message='',
            status=Notification.STATUS_FAILED,
            error=str(e) or e.__class__.__name__,
        )

    notification = Notification.objects.create(
        medicine=medicine,
        recipient=recipient,
        channel=channel,
        message=message,
    )
    return deliver(notification)


def dispatch(recipients=None, medicines=None, today=None):
    """
    Notify recipients about every medicine that is not safe.

    ``medicines`` defaults to all expired or expiring-soon medicines and
    ``recipients`` to everybody in the registry. Safe medicines passed in
    explicitly are ignored.
    """
    today = expiry.today_or(today)

    if medicines is None:
        medicines = Medicine.objects.notifiable(today).select_related('manufacturer')
    if recipients is None:
        recipients = Recipient.objects.all()
    recipients = list(recipients)

    result = DispatchResult()
    for medicine in medicines:
        if expiry.classify(medicine.expiry_date, today) == expiry.SAFE:
            continue

        for recipient in recipients:
            for channel in recipient.channels:
                try:
                    with transaction.atomic():
                        notification = notify(medicine, recipient, channel, today)
                except DatabaseError:
                    logger.exception(
                        'Could not record %s notification for %s to %s',
                        channel, medicine, recipient
                    )
                    result.errors += 1
                    continue
                result.notifications.append(notification)

    logger.info(
        'Expiry dispatch finished: %d notifications, %d sent, %d failed, %d not recorded',
        len(result.notifications), result.sent, result.failed, result.errors
    )
    return result


def process_pending():
    """Deliver every queued notification; returns the ids that were processed"""
    processed = []
    pending = Notification.objects.filter(
        status=Notification.STATUS_PENDING
    ).select_related('medicine', 'recipient')

    for notification in pending:
        if notification.recipient is None:
            notification.mark_failed('No recipient to deliver to')
        else:
            deliver(notification)
        processed.append(notification.id)

    logger.info('Processed %d pending notifications', len(processed))
    return processed
