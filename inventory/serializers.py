from rest_framework import serializers

from medicine.models import MAX_QUANTITY
from .models import StockLog


class StockLogSerializer(serializers.ModelSerializer):
    medicine_name = serializers.CharField(source='medicine.name', read_only=True, default=None)
    batch = serializers.CharField(source='medicine.batch', read_only=True, default=None)
    username = serializers.CharField(source='user.username', read_only=True, default=None)

    class Meta:
        model = StockLog
        fields = [
            'id', 'medicine', 'medicine_name', 'batch',
            'adjustment_amount', 'previous_quantity', 'new_quantity',
            'user', 'username', 'reason', 'created_at'
        ]
        read_only_fields = fields


class StockAdjustmentSerializer(serializers.Serializer):
    """Signed stock change for one medicine"""
    medicine = serializers.UUIDField()
    adjustment_amount = serializers.IntegerField(min_value=-MAX_QUANTITY, max_value=MAX_QUANTITY)
    reason = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')


class StockUpdateSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=0, max_value=MAX_QUANTITY)
    reason = serializers.CharField(max_length=500, required=False, allow_blank=True, default='Manual stock adjustment')


class StockReportRowSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField()
    batch = serializers.CharField()
    quantity = serializers.IntegerField()
    expiry_date = serializers.DateField()
    manufacturer_name = serializers.CharField(allow_null=True)
    status = serializers.CharField()
