from django.contrib import admin
from .models import Notification, Recipient


@admin.register(Recipient)
class RecipientAdmin(admin.ModelAdmin):
    list_display = ('name', 'email', 'phone', 'role', 'receive_email', 'receive_whatsapp')
    list_filter = ('role', 'receive_email', 'receive_whatsapp')
    search_fields = ('name', 'email', 'phone')
    ordering = ('name',)


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ('medicine', 'recipient', 'channel', 'status', 'created_at', 'sent_at')
    list_filter = ('channel', 'status', 'created_at')
    search_fields = ('medicine__name', 'recipient__name', 'message')
    ordering = ('-created_at',)
    date_hierarchy = 'created_at'
    readonly_fields = ('created_at', 'sent_at')
