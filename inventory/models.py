import uuid

from django.db import models
from django.conf import settings

from medicine.models import Medicine


class StockLog(models.Model):
    """Append-only audit trail of stock adjustments"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    medicine = models.ForeignKey(
        Medicine,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='stock_logs'
    )

    # Quantity changes
    adjustment_amount = models.IntegerField(help_text="Requested change (positive for in, negative for out), before clamping")
    previous_quantity = models.PositiveIntegerField()
    new_quantity = models.PositiveIntegerField()

    # User and tracking
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='stock_logs'
    )
    reason = models.CharField(max_length=500, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        name = self.medicine.name if self.medicine else 'deleted medicine'
        return f"{name}: {self.adjustment_amount:+d}"

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['medicine', '-created_at'], name='stocklog_medicine_idx'),
        ]
