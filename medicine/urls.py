from django.urls import path, include
from rest_framework.routers import DefaultRouter

from . import views

router = DefaultRouter()
router.register(r'medicines', views.MedicineViewSet, basename='medicine')

urlpatterns = [
    # Manufacturers
    path('medicines/manufacturers/', views.ManufacturerListCreateView.as_view(), name='manufacturer-list'),

    path('', include(router.urls)),
]
