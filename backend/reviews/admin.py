from django.contrib import admin
from .models import PoiReview


@admin.register(PoiReview)
class PoiReviewAdmin(admin.ModelAdmin):
    list_display = ['poi', 'user', 'rating', 'platform_type', 'likes', 'dislikes', 'created_at']
    list_filter = ['rating', 'platform_type', 'created_at']
    search_fields = ['review_text', 'poi__name', 'user__username']
    readonly_fields = ['id', 'created_at']
