from django.contrib import admin
from .models import PoiAccessLog, PoiPlatformStat


@admin.register(PoiAccessLog)
class PoiAccessLogAdmin(admin.ModelAdmin):
    list_display = ['poi', 'organization', 'access_type', 'platform_type', 'accessed_at']
    list_filter = ['access_type', 'platform_type', 'accessed_at']
    search_fields = ['poi__name']
    readonly_fields = ['id']


@admin.register(PoiPlatformStat)
class PoiPlatformStatAdmin(admin.ModelAdmin):
    list_display = ['organization', 'poi', 'platform_type', 'stat_date', 'views', 'reviews', 'likes', 'dislikes']
    list_filter = ['platform_type', 'stat_date']
    readonly_fields = ['id']
