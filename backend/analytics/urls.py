"""
URL configuration for the analytics module.
"""
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import AccessLogViewSet, PlatformStatViewSet

router = DefaultRouter()
router.register(r'access-logs', AccessLogViewSet, basename='access-log')
router.register(r'platform-stats', PlatformStatViewSet, basename='platform-stat')

app_name = 'analytics'

urlpatterns = [
    path('', include(router.urls)),
]
