from rest_framework import serializers
from .models import PoiReview


class PoiReviewSerializer(serializers.ModelSerializer):
    poi_id = serializers.UUIDField()
    user_id = serializers.UUIDField()
    organization_id = serializers.UUIDField()

    class Meta:
        model = PoiReview
        fields = [
            'id',
            'poi_id',
            'user_id',
            'organization_id',
            'platform_type',
            'rating',
            'review_text',
            'likes',
            'dislikes',
            'created_at',
        ]
        read_only_fields = ['id', 'created_at']

    def validate_rating(self, value):
        if not (1 <= value <= 5):
            raise serializers.ValidationError("Rating must be between 1 and 5")
        return value


class PoiReviewUpdateSerializer(serializers.ModelSerializer):
    """Only the review content and counters can change after creation."""

    class Meta:
        model = PoiReview
        fields = ['rating', 'review_text', 'likes', 'dislikes']


class ReviewStatsSerializer(serializers.Serializer):
    poi_id = serializers.UUIDField()
    average_rating = serializers.FloatField()
    review_count = serializers.IntegerField()
