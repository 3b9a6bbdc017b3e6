from django.contrib import admin
from .models import Manufacturer, Medicine


@admin.register(Manufacturer)
class ManufacturerAdmin(admin.ModelAdmin):
    list_display = ['name', 'created_at']
    search_fields = ['name']


@admin.register(Medicine)
class MedicineAdmin(admin.ModelAdmin):
    list_display = ['name', 'batch', 'quantity', 'manufacturer', 'expiry_date', 'status', 'created_by']
    list_filter = ['manufacturer', 'expiry_date', 'created_at']
    search_fields = ['name', 'batch', 'manufacturer__name']
    readonly_fields = ['created_at', 'updated_at']
    date_hierarchy = 'expiry_date'
