from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import AppUserViewSet

router = DefaultRouter()
router.register(r'users', AppUserViewSet, basename='user')

app_name = 'user'

urlpatterns = [
    path('', include(router.urls)),
]
