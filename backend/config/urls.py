from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('core.urls')),
    path('api/', include('organizations.urls')),
    path('api/', include('user.urls')),
    path('api/locations/', include('locations.urls')),
    path('api/', include('reviews.urls')),
    path('api/analytics/', include('analytics.urls')),
    path('api/', include('notifications.urls')),
]
