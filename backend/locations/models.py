import math
import uuid

from django.db import models

from core.exceptions import ValidationError


def validate_coordinates(latitude, longitude):
    """
    Enforces joint presence of latitude/longitude and their valid ranges.
    Both None is allowed: such a POI simply never shows up in spatial queries.
    """
    if latitude is None and longitude is None:
        return
    if latitude is None or longitude is None:
        raise ValidationError("Latitude and longitude must be provided together")
    try:
        latitude, longitude = float(latitude), float(longitude)
    except (TypeError, ValueError):
        raise ValidationError("Coordinates must be numbers")
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        raise ValidationError("Coordinates must be finite numbers")
    if not (-90 <= latitude <= 90 and -180 <= longitude <= 180):
        raise ValidationError("Invalid coordinates: latitude must be -90 to 90, longitude must be -180 to 180")


class PointOfInterest(models.Model):
    """
    Point of Interest (POI) - a named, categorized place owned by an organization.
    Coordinates are stored as plain decimal degrees; distance queries compute the
    Haversine distance in SQL (see locations.services.PoiQueryService).
    """

    # Primary Key
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Ownership
    organization = models.ForeignKey(
        'organizations.Organization',
        on_delete=models.PROTECT,
        related_name='pois'
    )
    created_by = models.ForeignKey(
        'user.AppUser',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_pois'
    )
    updated_by = models.ForeignKey(
        'user.AppUser',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='updated_pois'
    )
    deactivated_by = models.ForeignKey(
        'user.AppUser',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='deactivated_pois'
    )

    # Basic Information
    name = models.CharField(max_length=255, help_text="The official name of the place")
    poi_type = models.CharField(max_length=100, help_text="e.g. RESTAURANT, HOTEL, MUSEUM")
    category = models.CharField(max_length=100, help_text="e.g. Food & Drink, Transport")
    description = models.TextField(blank=True, default="")
    long_name = models.CharField(max_length=255, blank=True, default="")
    short_name = models.CharField(max_length=100, blank=True, default="")
    friendly_name = models.CharField(max_length=255, blank=True, default="")

    # Geospatial Data
    latitude = models.FloatField(null=True, blank=True, help_text="Decimal degrees, -90 to 90")
    longitude = models.FloatField(null=True, blank=True, help_text="Decimal degrees, -180 to 180")

    # Address
    street_number = models.CharField(max_length=20, blank=True, default="")
    street_name = models.CharField(max_length=255, blank=True, default="")
    city = models.CharField(max_length=100, blank=True, default="")
    state_province = models.CharField(max_length=100, blank=True, default="")
    postal_code = models.CharField(max_length=20, blank=True, default="")
    country = models.CharField(max_length=100, blank=True, default="")
    informal_address = models.CharField(
        max_length=512,
        blank=True,
        default="",
        help_text="Landmark based directions, e.g. 'behind the central market'"
    )

    # Contact
    phone_number = models.CharField(max_length=30, blank=True, default="")
    website_url = models.URLField(max_length=500, blank=True, default="")

    # Flexible Storage
    image_urls = models.JSONField(default=list, blank=True)
    amenities = models.JSONField(default=list, blank=True, help_text="e.g. ['Wi-Fi', 'Parking']")
    keywords = models.JSONField(default=list, blank=True)
    type_tags = models.JSONField(default=list, blank=True)
    operation_time_plan = models.JSONField(default=dict, blank=True, help_text="Opening hours per weekday")
    contacts = models.JSONField(default=list, blank=True, help_text="List of {name, role, phone, email}")

    # Ranking
    popularity_score = models.FloatField(
        default=0.0,
        help_text="Ranking signal, expected 0 - 100"
    )

    # Status
    is_active = models.BooleanField(default=True)
    deactivation_reason = models.TextField(blank=True, default="")

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'point_of_interest'
        indexes = [
            models.Index(fields=['is_active', 'latitude'], name='poi_active_lat_idx'),
            models.Index(fields=['is_active', '-popularity_score'], name='poi_active_popularity_idx'),
            models.Index(fields=['poi_type'], name='poi_type_idx'),
            models.Index(fields=['category'], name='poi_category_idx'),
        ]

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        """
        Overridden save method to keep the coordinate pair consistent.
        """
        validate_coordinates(self.latitude, self.longitude)
        super().save(*args, **kwargs)

    @property
    def has_location(self):
        return self.latitude is not None and self.longitude is not None

    def get_lat_lon(self):
        """
        Returns:
            Tuple of (latitude: float, longitude: float), or None without coordinates
        """
        if self.has_location:
            return (self.latitude, self.longitude)
        return None
