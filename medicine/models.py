import uuid

from django.core.validators import MaxValueValidator
from django.db import models
from django.conf import settings

from . import status as expiry

# Largest value the integer quantity columns hold on every supported database
MAX_QUANTITY = 2147483647


class Manufacturer(models.Model):
    """Medicine manufacturers"""
    name = models.CharField(max_length=200, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name

    class Meta:
        ordering = ['name']


class MedicineQuerySet(models.QuerySet):

    def with_status(self, status, today=None):
        return self.filter(expiry.status_filter(status, today))

    def notifiable(self, today=None):
        """Medicines that are expired or expiring soon"""
        return self.exclude(expiry.status_filter(expiry.SAFE, today))


class Medicine(models.Model):
    """A batch of a medicine held in stock"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    batch = models.CharField(max_length=100, help_text="Batch or lot code")
    quantity = models.PositiveIntegerField(default=0, validators=[MaxValueValidator(MAX_QUANTITY)])
    manufacturer = models.ForeignKey(
        Manufacturer,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='medicines'
    )

    manufacture_date = models.DateField(blank=True, null=True)
    expiry_date = models.DateField()

    # Tracking
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_medicines'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = MedicineQuerySet.as_manager()

    def __str__(self):
        return f"{self.name} ({self.batch}) - {self.quantity}"

    @property
    def status(self):
        """Expiry tier as of today"""
        return expiry.classify(self.expiry_date)

    def status_on(self, today):
        return expiry.classify(self.expiry_date, today)

    @property
    def manufacturer_name(self):
        return self.manufacturer.name if self.manufacturer else ''

    class Meta:
        ordering = ['expiry_date', 'name']
        indexes = [
            models.Index(fields=['expiry_date'], name='medicine_expiry_idx'),
            models.Index(fields=['name', 'batch'], name='medicine_name_batch_idx'),
        ]
