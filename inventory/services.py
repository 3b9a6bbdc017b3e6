import logging

from django.db import transaction

from medicine import status as expiry
from medicine.models import MAX_QUANTITY, Medicine
from .models import StockLog

logger = logging.getLogger(__name__)


def _locked_medicine(medicine):
    medicine_id = getattr(medicine, 'pk', medicine)
    return Medicine.objects.select_for_update().get(pk=medicine_id)


def adjust_stock(medicine, delta, user=None, reason=''):
    """
    Apply a signed quantity change and record it.

    The stored quantity stays within 0..MAX_QUANTITY; the log keeps the delta
    as requested so the audit trail shows what was asked for.
    """
    if abs(delta) > MAX_QUANTITY:
        raise ValueError(f'Adjustment must be between -{MAX_QUANTITY} and {MAX_QUANTITY}')

    with transaction.atomic():
        medicine = _locked_medicine(medicine)
        previous_quantity = medicine.quantity

        medicine.quantity = min(MAX_QUANTITY, max(0, previous_quantity + delta))
        medicine.save(update_fields=['quantity', 'updated_at'])

        log = StockLog.objects.create(
            medicine=medicine,
            adjustment_amount=delta,
            previous_quantity=previous_quantity,
            new_quantity=medicine.quantity,
            user=user,
            reason=reason or ''
        )

    logger.info(
        'Stock of %s (%s) adjusted by %+d: %d -> %d',
        medicine.name, medicine.batch, delta, previous_quantity, medicine.quantity
    )
    return medicine, log


def set_stock(medicine, quantity, user=None, reason='Manual stock adjustment'):
    """Set an absolute quantity, logging the difference as the adjustment"""
    if not 0 <= quantity <= MAX_QUANTITY:
        raise ValueError(f'Quantity must be between 0 and {MAX_QUANTITY}')

    with transaction.atomic():
        medicine = _locked_medicine(medicine)
        previous_quantity = medicine.quantity

        medicine.quantity = quantity
        medicine.save(update_fields=['quantity', 'updated_at'])

        log = StockLog.objects.create(
            medicine=medicine,
            adjustment_amount=quantity - previous_quantity,
            previous_quantity=previous_quantity,
            new_quantity=quantity,
            user=user,
            reason=reason or ''
        )

    logger.info('Stock of %s (%s) set: %d -> %d', medicine.name, medicine.batch, previous_quantity, quantity)
    return medicine, log


def stock_report(today=None):
    """One row per medicine with its expiry status, soonest expiry first"""
    today = expiry.today_or(today)
    medicines = Medicine.objects.select_related('manufacturer').order_by('expiry_date', 'name')

    return [
        {
            'id': medicine.id,
            'name': medicine.name,
            'batch': medicine.batch,
            'quantity': medicine.quantity,
            'expiry_date': medicine.expiry_date,
            'manufacturer_name': medicine.manufacturer_name,
            'status': expiry.classify(medicine.expiry_date, today),
        }
        for medicine in medicines
    ]
