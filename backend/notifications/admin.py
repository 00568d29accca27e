from django.contrib import admin
from .models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    """Admin interface for Notification model"""
    list_display = (
        'id',
        'recipient',
        'notification_type',
        'channel',
        'title',
        'sent',
        'read_at',
        'created_at',
    )
    list_filter = ('notification_type', 'channel', 'sent', 'created_at')
    search_fields = ('title', 'content', 'recipient__username')
    readonly_fields = ('id', 'created_at', 'sent_at')
    fieldsets = (
        ('Basic Info', {
            'fields': ('id', 'recipient', 'notification_type', 'channel')
        }),
        ('Content', {
            'fields': ('title', 'content', 'metadata')
        }),
        ('Status', {
            'fields': ('sent', 'sent_at', 'read_at')
        }),
        ('Timestamps', {
            'fields': ('created_at',),
            'classes': ('collapse',)
        }),
    )

    def get_readonly_fields(self, request, obj=None):
        if obj:  # Editing an existing object
            return self.readonly_fields + ('recipient', 'notification_type', 'channel', 'title', 'content')
        return self.readonly_fields
