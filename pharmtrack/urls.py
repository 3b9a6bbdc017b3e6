"""
URL configuration for pharmtrack project.
"""
from django.contrib import admin
from django.urls import path, include

from .views import health

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/health/', health, name='health'),
    path('api/inventory/', include('inventory.urls')),
    path('api/', include('users.urls')),
    path('api/', include('medicine.urls')),
    path('api/', include('notifications.urls')),
]
