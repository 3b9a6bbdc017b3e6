from rest_framework import serializers

from .models import Notification, Recipient


class RecipientSerializer(serializers.ModelSerializer):
    channels = serializers.ListField(child=serializers.CharField(), read_only=True)

    class Meta:
        model = Recipient
        fields = [
            'id', 'name', 'email', 'phone', 'role',
            'receive_email', 'receive_whatsapp', 'channels',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate(self, data):
        receive_whatsapp = data.get('receive_whatsapp', getattr(self.instance, 'receive_whatsapp', False))
        phone = data.get('phone', getattr(self.instance, 'phone', ''))
        if receive_whatsapp and not phone:
            raise serializers.ValidationError({'phone': 'A phone number is required to receive WhatsApp notifications.'})
        return data


class NotificationSerializer(serializers.ModelSerializer):
    medicine_name = serializers.CharField(source='medicine.name', read_only=True)
    recipient_name = serializers.CharField(source='recipient.name', read_only=True, default=None)

    class Meta:
        model = Notification
        fields = [
            'id', 'medicine', 'medicine_name', 'recipient', 'recipient_name',
            'channel', 'status', 'message', 'error', 'created_at', 'sent_at'
        ]
        read_only_fields = fields


class NotificationCreateSerializer(serializers.Serializer):
    """Queue one pending notification for a medicine"""
    medicine = serializers.UUIDField()
    recipient = serializers.UUIDField(required=False, allow_null=True)
    channel = serializers.ChoiceField(choices=Notification.CHANNEL_CHOICES)


class NotificationFailureSerializer(serializers.Serializer):
    error = serializers.CharField(required=False, allow_blank=True, default='')
