from django.contrib import admin
from .models import PointOfInterest


@admin.register(PointOfInterest)
class PointOfInterestAdmin(admin.ModelAdmin):
    """
    Admin interface for POIs.
    Coordinates are edited as plain decimal degrees.
    """
    list_display = ['name', 'poi_type', 'category', 'city', 'popularity_score', 'is_active', 'created_at']
    list_filter = ['poi_type', 'category', 'is_active', 'created_at']
    search_fields = ['name', 'city', 'description']
    readonly_fields = ['id', 'created_at', 'updated_at']

    fieldsets = (
        ('Basic Information', {
            'fields': ('id', 'organization', 'name', 'long_name', 'short_name', 'friendly_name', 'description')
        }),
        ('Location', {
            'fields': ('latitude', 'longitude')
        }),
        ('Address', {
            'fields': (
                'street_number', 'street_name', 'city', 'state_province',
                'postal_code', 'country', 'informal_address',
            )
        }),
        ('Classification', {
            'fields': ('poi_type', 'category', 'type_tags', 'keywords')
        }),
        ('Contact', {
            'fields': ('phone_number', 'website_url', 'contacts')
        }),
        ('Details', {
            'fields': ('image_urls', 'amenities', 'operation_time_plan')
        }),
        ('Ranking & Status', {
            'fields': ('popularity_score', 'is_active', 'deactivation_reason', 'deactivated_by')
        }),
        ('Timestamps', {
            'fields': ('created_by', 'updated_by', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )
