import logging
import uuid

from django.shortcuts import get_object_or_404
from rest_framework import filters, mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.response import Response

from medicine.models import Medicine
from users.permissions import IsPharmacyAdminOrReadOnly
from .dispatch import dispatch, process_pending, render_message
from .models import Notification, Recipient
from .serializers import (
    NotificationCreateSerializer,
    NotificationFailureSerializer,
    NotificationSerializer,
    RecipientSerializer
)

logger = logging.getLogger(__name__)


class RecipientViewSet(viewsets.ModelViewSet):
    """
    API endpoint for notification recipients
    """
    queryset = Recipient.objects.all()
    serializer_class = RecipientSerializer
    permission_classes = [IsPharmacyAdminOrReadOnly]
    filter_backends = [filters.SearchFilter, filters.OrderingFilter]
    search_fields = ['name', 'email', 'role']
    ordering_fields = ['name', 'created_at']
    ordering = ['name']

    def destroy(self, request, *args, **kwargs):
        recipient = self.get_object()
        recipient.delete()
        return Response({'message': 'Recipient deleted successfully'})


class NotificationViewSet(mixins.ListModelMixin,
                          mixins.RetrieveModelMixin,
                          viewsets.GenericViewSet):
    """
    API endpoint for expiry notifications
    """
    queryset = Notification.objects.select_related('medicine', 'recipient').all()
    serializer_class = NotificationSerializer
    filterset_fields = ['medicine', 'recipient', 'status', 'channel']

    def create(self, request, *args, **kwargs):
        """Queue a pending notification for a medicine"""
        serializer = NotificationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        medicine = get_object_or_404(Medicine, pk=data['medicine'])
        recipient = None
        if data.get('recipient'):
            recipient = get_object_or_404(Recipient, pk=data['recipient'])

        notification = Notification.objects.create(
            medicine=medicine,
            recipient=recipient,
            channel=data['channel'],
            message=render_message(medicine, data['channel']),
        )
        return Response(self.get_serializer(notification).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['get'], url_path=r'medicine/(?P<medicine_id>[^/.]+)')
    def for_medicine(self, request, medicine_id=None):
        """Get notifications for one medicine"""
        try:
            medicine_id = uuid.UUID(medicine_id)
        except ValueError:
            raise NotFound('Medicine not found')

        notifications = self.get_queryset().filter(medicine_id=medicine_id)
        serializer = self.get_serializer(notifications, many=True)
        return Response(serializer.data)

    @action(detail=True, methods=['put'])
    def sent(self, request, pk=None):
        """Mark notification as sent"""
        notification = self._get_pending()
        notification.mark_sent()
        return Response(self.get_serializer(notification).data)

    @action(detail=True, methods=['put'])
    def failed(self, request, pk=None):
        """Mark notification as failed"""
        notification = self._get_pending()
        serializer = NotificationFailureSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        notification.mark_failed(serializer.validated_data['error'])
        return Response(self.get_serializer(notification).data)

    @action(detail=False, methods=['post'])
    def process(self, request):
        """Deliver all pending notifications"""
        processed = process_pending()
        return Response({
            'message': f'Successfully processed {len(processed)} notifications',
            'processed': processed,
        })

    @action(detail=False, methods=['post'], url_path='dispatch')
    def dispatch_expiry(self, request):
        """Notify every recipient about expired and expiring-soon medicines"""
        result = dispatch()
        return Response({
            'message': f'Dispatched {len(result.notifications)} notifications',
            'sent': result.sent,
            'failed': result.failed,
            'notifications': self.get_serializer(result.notifications, many=True).data,
        })

    def _get_pending(self):
        notification = self.get_object()
        if notification.is_terminal:
            raise ValidationError({'status': f'Notification is already {notification.status}'})
        return notification
