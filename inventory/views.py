from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, mixins, status, viewsets
from rest_framework.response import Response
from rest_framework.views import APIView

from medicine.models import Medicine
from medicine.serializers import MedicineSerializer
from .models import StockLog
from .serializers import (
    StockAdjustmentSerializer,
    StockLogSerializer,
    StockReportRowSerializer,
    StockUpdateSerializer
)
from .services import adjust_stock, set_stock, stock_report


class StockLogViewSet(mixins.ListModelMixin,
                      mixins.RetrieveModelMixin,
                      viewsets.GenericViewSet):
    """
    API endpoint for the stock adjustment log
    """
    queryset = StockLog.objects.select_related('medicine', 'user').all()
    serializer_class = StockLogSerializer
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_fields = ['medicine', 'user']
    ordering_fields = ['created_at', 'adjustment_amount']
    ordering = ['-created_at']


class StockAdjustView(APIView):
    """Stock in (positive) or stock out (negative) for one medicine"""

    def post(self, request):
        serializer = StockAdjustmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        medicine = get_object_or_404(Medicine, pk=data['medicine'])
        _, log = adjust_stock(
            medicine,
            data['adjustment_amount'],
            user=request.user,
            reason=data['reason']
        )
        return Response(StockLogSerializer(log).data, status=status.HTTP_201_CREATED)


class MedicineStockView(APIView):
    """Set the absolute quantity of a medicine"""

    def put(self, request, pk):
        medicine = get_object_or_404(Medicine, pk=pk)
        serializer = StockUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        medicine, _ = set_stock(
            medicine,
            serializer.validated_data['quantity'],
            user=request.user,
            reason=serializer.validated_data['reason']
        )
        return Response(MedicineSerializer(medicine, context={'request': request}).data)


class StockReportView(APIView):
    """Quantity and expiry status of every medicine"""

    def get(self, request):
        rows = stock_report()
        return Response(StockReportRowSerializer(rows, many=True).data)
