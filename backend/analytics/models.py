import uuid
from django.db import models
from django.utils import timezone


class AccessType(models.TextChoices):
    """Enumeration for the ways a POI is reached"""
    VIEW = 'VIEW', 'View'
    CLICK = 'CLICK', 'Click'
    SEARCH = 'SEARCH', 'Search'
    REVIEW = 'REVIEW', 'Review'
    SHARE = 'SHARE', 'Share'
    NAVIGATE = 'NAVIGATE', 'Navigate'


class PoiAccessLog(models.Model):
    """
    One access to a POI from a client platform. The visitor may be anonymous,
    so user_id is a plain optional UUID rather than a foreign key.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    poi = models.ForeignKey('locations.PointOfInterest', on_delete=models.CASCADE, related_name='access_logs')
    organization = models.ForeignKey('organizations.Organization', on_delete=models.CASCADE, related_name='access_logs')
    user_id = models.UUIDField(null=True, blank=True)
    platform_type = models.CharField(max_length=50, help_text="Client platform, e.g. WEB, ANDROID, IOS")
    access_type = models.CharField(
        max_length=20,
        choices=AccessType.choices,
        help_text="Type of access: VIEW, CLICK, SEARCH, REVIEW, SHARE, NAVIGATE"
    )
    accessed_at = models.DateTimeField(default=timezone.now)
    metadata = models.JSONField(default=dict, blank=True)

    class Meta:
        db_table = 'poi_access_log'
        indexes = [
            models.Index(fields=['poi', 'accessed_at'], name='access_poi_time_idx'),
            models.Index(fields=['organization', 'platform_type'], name='access_org_platform_idx'),
            models.Index(fields=['accessed_at'], name='access_time_idx'),
        ]

    def __str__(self):
        return f"{self.access_type} on {self.poi_id} via {self.platform_type}"


class PoiPlatformStat(models.Model):
    """
    Daily counters per organization and platform. A null poi means the row
    aggregates the whole organization.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organization = models.ForeignKey('organizations.Organization', on_delete=models.CASCADE, related_name='platform_stats')
    poi = models.ForeignKey(
        'locations.PointOfInterest',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='platform_stats'
    )
    platform_type = models.CharField(max_length=50)
    stat_date = models.DateField(default=timezone.localdate)
    views = models.PositiveIntegerField(default=0)
    reviews = models.PositiveIntegerField(default=0)
    likes = models.PositiveIntegerField(default=0)
    dislikes = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'poi_platform_stat'
        indexes = [
            models.Index(fields=['organization', 'stat_date'], name='stat_org_date_idx'),
            models.Index(fields=['poi', 'stat_date'], name='stat_poi_date_idx'),
        ]

    def __str__(self):
        return f"{self.platform_type} stats for {self.organization_id} on {self.stat_date}"
