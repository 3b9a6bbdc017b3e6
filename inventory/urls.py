from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import MedicineStockView, StockAdjustView, StockLogViewSet, StockReportView

router = DefaultRouter()
router.register(r'logs', StockLogViewSet, basename='stock-log')

urlpatterns = [
    path('log/', StockAdjustView.as_view(), name='stock-adjust'),
    path('medicines/<uuid:pk>/stock/', MedicineStockView.as_view(), name='medicine-stock'),
    path('report/', StockReportView.as_view(), name='stock-report'),
    path('', include(router.urls)),
]
