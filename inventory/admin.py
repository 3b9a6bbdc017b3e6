from django.contrib import admin
from .models import StockLog


@admin.register(StockLog)
class StockLogAdmin(admin.ModelAdmin):
    list_display = ('medicine', 'adjustment_amount', 'previous_quantity', 'new_quantity', 'user', 'created_at')
    list_filter = ('created_at',)
    search_fields = ('medicine__name', 'medicine__batch', 'reason')
    ordering = ('-created_at',)
    date_hierarchy = 'created_at'
    readonly_fields = ('adjustment_amount', 'previous_quantity', 'new_quantity', 'created_at')
