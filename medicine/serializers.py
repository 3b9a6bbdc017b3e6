from rest_framework import serializers

from .models import MAX_QUANTITY, Manufacturer, Medicine
from . import status as expiry


def check_date_order(manufacture_date, expiry_date):
    if manufacture_date and expiry_date and manufacture_date > expiry_date:
        raise serializers.ValidationError(
            {'manufacture_date': 'Manufacture date cannot be after the expiry date.'}
        )


class ManufacturerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Manufacturer
        fields = ['id', 'name', 'created_at']
        read_only_fields = ['created_at']


class MedicineSerializer(serializers.ModelSerializer):
    """
    Medicine with its derived expiry status.

    The manufacturer can be given either as a primary key (``manufacturer``)
    or by name (``manufacturer_name``); an unknown name creates the
    manufacturer on the fly.
    """
    manufacturer_name = serializers.CharField(required=False, allow_blank=True, max_length=200)
    status = serializers.SerializerMethodField()
    created_by_username = serializers.CharField(source='created_by.username', read_only=True, default=None)

    class Meta:
        model = Medicine
        fields = [
            'id', 'name', 'batch', 'quantity',
            'manufacturer', 'manufacturer_name',
            'manufacture_date', 'expiry_date', 'status',
            'created_by', 'created_by_username', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_by', 'created_at', 'updated_at']

    def get_status(self, obj):
        return expiry.classify(obj.expiry_date, self.context.get('today'))

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data['manufacturer_name'] = instance.manufacturer_name
        return data

    def validate(self, data):
        check_date_order(
            data.get('manufacture_date', getattr(self.instance, 'manufacture_date', None)),
            data.get('expiry_date', getattr(self.instance, 'expiry_date', None))
        )
        return data

    def _resolve_manufacturer(self, validated_data):
        manufacturer_name = validated_data.pop('manufacturer_name', '')
        if manufacturer_name and not validated_data.get('manufacturer'):
            validated_data['manufacturer'], _ = Manufacturer.objects.get_or_create(name=manufacturer_name)
        return validated_data

    def create(self, validated_data):
        return super().create(self._resolve_manufacturer(validated_data))

    def update(self, instance, validated_data):
        return super().update(instance, self._resolve_manufacturer(validated_data))


class MedicineImportRowSerializer(serializers.Serializer):
    """One row of a bulk import, already keyed with model field names"""
    name = serializers.CharField(max_length=200)
    batch = serializers.CharField(max_length=100)
    quantity = serializers.IntegerField(min_value=0, max_value=MAX_QUANTITY, required=False, default=0)
    manufacturer = serializers.CharField(max_length=200, required=False, allow_blank=True, allow_null=True)
    manufacture_date = serializers.DateField(required=False, allow_null=True)
    expiry_date = serializers.DateField()

    def validate(self, data):
        check_date_order(data.get('manufacture_date'), data['expiry_date'])
        return data


class MedicineSummarySerializer(serializers.Serializer):
    total = serializers.IntegerField()
    safe = serializers.IntegerField()
    expiring_soon = serializers.IntegerField()
    expired = serializers.IntegerField()
