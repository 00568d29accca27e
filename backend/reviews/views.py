"""
Views for the reviews module.
"""
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from notifications.services import get_notification_service
from .models import PoiReview
from .serializers import PoiReviewSerializer, PoiReviewUpdateSerializer, ReviewStatsSerializer
from .services import ReviewService


def get_review_service() -> ReviewService:
    return ReviewService(notification_service=get_notification_service())


class ReviewViewSet(viewsets.ModelViewSet):
    """
    ViewSet for managing POI reviews.

    Custom actions:
    - GET  /reviews/poi/{poi_id}/stats/ - Average rating and review count
    - POST /reviews/{id}/like/          - Increment likes
    - POST /reviews/{id}/dislike/       - Increment dislikes
    """
    queryset = PoiReview.objects.all()
    serializer_class = PoiReviewSerializer

    def get_queryset(self):
        """Filter reviews by POI, user or organization if provided"""
        queryset = PoiReview.objects.all()
        for param in ('poi_id', 'user_id', 'organization_id'):
            value = self.request.query_params.get(param)
            if value:
                queryset = queryset.filter(**{param: value})
        return queryset.order_by('-created_at')

    def perform_create(self, serializer):
        serializer.instance = get_review_service().create_review(dict(serializer.validated_data))

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        review = self.get_object()
        serializer = PoiReviewUpdateSerializer(review, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        review = get_review_service().update_review(review.id, dict(serializer.validated_data))
        return Response(PoiReviewSerializer(review).data)

    def perform_destroy(self, instance):
        get_review_service().delete_review(instance.id)

    @action(detail=False, methods=['get'], url_path=r'poi/(?P<poi_id>[^/.]+)/stats')
    def stats(self, request, poi_id=None):
        stats = get_review_service().stats(poi_id)
        return Response(ReviewStatsSerializer(stats).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=['post'])
    def like(self, request, pk=None):
        review = get_review_service().like(pk)
        return Response(PoiReviewSerializer(review).data)

    @action(detail=True, methods=['post'])
    def dislike(self, request, pk=None):
        review = get_review_service().dislike(pk)
        return Response(PoiReviewSerializer(review).data)
