"""
DRF Serializers for POI model and related data.
"""
from rest_framework import serializers

from core.fields import StringListField
from .models import PointOfInterest


class ContactSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    role = serializers.CharField(max_length=100, required=False, allow_blank=True)
    phone = serializers.CharField(max_length=30, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)


class PointOfInterestSerializer(serializers.ModelSerializer):
    """
    POI representation. References are exposed as plain ids, the category-like
    `poi_type` column is exposed as `type`, and `distance_km` is only present
    on results of a radius search.
    """

    organization_id = serializers.UUIDField()
    created_by_id = serializers.UUIDField(required=False, allow_null=True)
    updated_by_id = serializers.UUIDField(read_only=True)
    type = serializers.CharField(source='poi_type', max_length=100)

    image_urls = StringListField(required=False)
    amenities = StringListField(required=False)
    keywords = StringListField(required=False)
    type_tags = StringListField(required=False)
    contacts = ContactSerializer(many=True, required=False)

    popularity_score = serializers.FloatField(min_value=0.0, max_value=100.0, required=False)
    distance_km = serializers.SerializerMethodField()

    class Meta:
        model = PointOfInterest
        fields = [
            'id',
            'organization_id',
            'created_by_id',
            'updated_by_id',
            'name',
            'type',
            'category',
            'description',
            'long_name',
            'short_name',
            'friendly_name',
            'latitude',
            'longitude',
            'street_number',
            'street_name',
            'city',
            'state_province',
            'postal_code',
            'country',
            'informal_address',
            'phone_number',
            'website_url',
            'image_urls',
            'amenities',
            'keywords',
            'type_tags',
            'operation_time_plan',
            'contacts',
            'popularity_score',
            'is_active',
            'deactivation_reason',
            'created_at',
            'updated_at',
            'distance_km',
        ]
        read_only_fields = ['id', 'is_active', 'deactivation_reason', 'created_at', 'updated_at']

    def get_distance_km(self, obj):
        distance = getattr(obj, 'distance_km', None)
        if distance is None:
            return None
        return round(distance, 3)

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if data.get('distance_km') is None:
            data.pop('distance_km', None)
        return data

    def validate_latitude(self, value):
        if value is not None and not -90 <= value <= 90:
            raise serializers.ValidationError("Latitude must be between -90 and 90")
        return value

    def validate_longitude(self, value):
        if value is not None and not -180 <= value <= 180:
            raise serializers.ValidationError("Longitude must be between -180 and 180")
        return value

    def validate(self, attrs):
        # On partial updates the pair is checked against the stored values by the service
        if not self.partial and ('latitude' in attrs) != ('longitude' in attrs):
            raise serializers.ValidationError("Latitude and longitude must be provided together")
        return attrs


class PointOfInterestListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list views"""

    organization_id = serializers.UUIDField(read_only=True)
    type = serializers.CharField(source='poi_type', read_only=True)

    class Meta:
        model = PointOfInterest
        fields = [
            'id',
            'organization_id',
            'name',
            'type',
            'category',
            'city',
            'latitude',
            'longitude',
            'popularity_score',
            'is_active',
        ]
