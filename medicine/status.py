"""
Expiry status classification.

Every place that needs to know whether a medicine is safe, expiring soon or
expired goes through this module: list filtering, the dashboard summary, the
stock report and the notification dispatcher.
"""
from datetime import date, datetime, timedelta

from django.db.models import Q
from django.utils import timezone

EXPIRY_WARNING_DAYS = 30

EXPIRED = 'expired'
EXPIRING_SOON = 'expiring-soon'
SAFE = 'safe'

STATUSES = (SAFE, EXPIRING_SOON, EXPIRED)


def _as_date(value):
    if isinstance(value, datetime):
        if timezone.is_aware(value):
            return timezone.localtime(value).date()
        return value.date()
    return value


def expiring_window(today=None):
    """Return the (today, today + 30 days) cut-offs used by every check"""
    today = _as_date(today) if today is not None else timezone.localdate()
    return today, today + timedelta(days=EXPIRY_WARNING_DAYS)


def classify(expiry_date, today=None):
    """
    Map an expiry date to its status tier.

    A medicine expiring today is already expired; one expiring exactly
    thirty days from now is still expiring soon.
    """
    today, warning_limit = expiring_window(today)
    expiry_date = _as_date(expiry_date)

    if expiry_date <= today:
        return EXPIRED
    if expiry_date <= warning_limit:
        return EXPIRING_SOON
    return SAFE


def status_filter(status, today=None, field='expiry_date'):
    """Build the queryset filter selecting exactly the medicines classify() puts in status"""
    today, warning_limit = expiring_window(today)

    if status == EXPIRED:
        return Q(**{f'{field}__lte': today})
    if status == EXPIRING_SOON:
        return Q(**{f'{field}__gt': today, f'{field}__lte': warning_limit})
    if status == SAFE:
        return Q(**{f'{field}__gt': warning_limit})
    raise ValueError(f'Unknown status "{status}". Expected one of: {", ".join(STATUSES)}')


def summarize(expiry_dates, today=None):
    """Count expiry dates per tier; total always equals the sum of the tiers"""
    summary = {'total': 0, 'safe': 0, 'expiring_soon': 0, 'expired': 0}
    for expiry_date in expiry_dates:
        summary['total'] += 1
        summary[classify(expiry_date, today).replace('-', '_')] += 1
    return summary


def is_valid_status(status):
    return status in STATUSES


def today_or(value=None):
    """Normalise an optional date argument to a date, defaulting to today"""
    if value is None:
        return timezone.localdate()
    if isinstance(value, str):
        return date.fromisoformat(value)
    return _as_date(value)
