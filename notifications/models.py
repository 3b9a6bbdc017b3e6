import uuid

from django.db import models
from django.utils import timezone

from medicine.models import Medicine


class Recipient(models.Model):
    """Staff member who receives expiry notifications"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    email = models.EmailField()
    phone = models.CharField(max_length=30, blank=True, help_text="WhatsApp number in international format")
    role = models.CharField(max_length=50, default='staff', help_text="Free-form role tag, e.g. pharmacist, manager")

    # Channel preferences
    receive_email = models.BooleanField(default=True)
    receive_whatsapp = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name} <{self.email}>"

    @property
    def channels(self):
        """Channels this recipient opted into, in delivery order"""
        channels = []
        if self.receive_email:
            channels.append(Notification.CHANNEL_EMAIL)
        if self.receive_whatsapp:
            channels.append(Notification.CHANNEL_WHATSAPP)
        return channels

    class Meta:
        ordering = ['name']


class Notification(models.Model):
    """One delivery attempt of an expiry message over one channel"""
    CHANNEL_EMAIL = 'email'
    CHANNEL_WHATSAPP = 'whatsapp'
    CHANNEL_CHOICES = [
        (CHANNEL_EMAIL, 'Email'),
        (CHANNEL_WHATSAPP, 'WhatsApp'),
    ]

    STATUS_PENDING = 'pending'
    STATUS_SENT = 'sent'
    STATUS_FAILED = 'failed'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_SENT, 'Sent'),
        (STATUS_FAILED, 'Failed'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    medicine = models.ForeignKey(Medicine, on_delete=models.CASCADE, related_name='notifications')
    recipient = models.ForeignKey(
        Recipient,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='notifications'
    )
    channel = models.CharField(max_length=20, choices=CHANNEL_CHOICES)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    message = models.TextField()
    error = models.TextField(blank=True, help_text="Delivery failure reason")

    created_at = models.DateTimeField(auto_now_add=True)
    sent_at = models.DateTimeField(null=True, blank=True)

    def __str__(self):
        return f"{self.get_channel_display()} notification for {self.medicine.name} - {self.status}"

    @property
    def is_terminal(self):
        return self.status != self.STATUS_PENDING

    def mark_sent(self):
        self.status = self.STATUS_SENT
        self.sent_at = timezone.now()
        self.error = ''
        self.save(update_fields=['status', 'sent_at', 'error'])

    def mark_failed(self, error=''):
        self.status = self.STATUS_FAILED
        self.error = error
        self.save(update_fields=['status', 'error'])

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', '-created_at'], name='notif_status_created_idx'),
            models.Index(fields=['medicine', '-created_at'], name='notif_medicine_created_idx'),
        ]
