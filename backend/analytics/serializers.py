from rest_framework import serializers
from .models import AccessType, PoiAccessLog, PoiPlatformStat


class PoiAccessLogSerializer(serializers.ModelSerializer):
    poi_id = serializers.UUIDField()
    organization_id = serializers.UUIDField()
    access_type = serializers.ChoiceField(choices=AccessType.choices)
    accessed_at = serializers.DateTimeField(required=False)

    class Meta:
        model = PoiAccessLog
        fields = [
            'id',
            'poi_id',
            'organization_id',
            'user_id',
            'platform_type',
            'access_type',
            'accessed_at',
            'metadata',
        ]
        read_only_fields = ['id']


class PoiPlatformStatSerializer(serializers.ModelSerializer):
    organization_id = serializers.UUIDField()
    poi_id = serializers.UUIDField(required=False, allow_null=True)
    stat_date = serializers.DateField(required=False)

    class Meta:
        model = PoiPlatformStat
        fields = [
            'id',
            'organization_id',
            'poi_id',
            'platform_type',
            'stat_date',
            'views',
            'reviews',
            'likes',
            'dislikes',
        ]
        read_only_fields = ['id']


class PlatformBreakdownSerializer(serializers.Serializer):
    platform_type = serializers.CharField()
    count = serializers.IntegerField()
