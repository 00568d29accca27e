"""
Review management: creation with explicit reference lookups, per-POI
aggregates and race-free like/dislike counters.
"""
import logging
from typing import Dict, List

from django.db import transaction
from django.db.models import Avg, Count, F

from core.exceptions import NotFoundError, ValidationError
from locations.services import PoiService
from organizations.services import OrganizationService
from user.services import UserService
from .models import PoiReview

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


def validate_rating(rating) -> int:
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise ValidationError("Rating must be an integer")
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")
    return rating


class ReviewService:
    """
    Wraps PoiReview persistence. When a notification service is given, the
    user who created the reviewed POI is told about each new review.
    """

    def __init__(self, notification_service=None):
        self.notification_service = notification_service

    @staticmethod
    def get_review(review_id) -> PoiReview:
        review = PoiReview.objects.filter(id=review_id).first()
        if review is None:
            raise NotFoundError.for_id("Review", review_id)
        return review

    def create_review(self, data: Dict) -> PoiReview:
        """
        Args:
            data: poi_id, user_id, organization_id, platform_type, rating and
                  optional review_text

        Returns:
            The saved review
        """
        data = dict(data)
        validate_rating(data.get('rating'))

        poi = PoiService.get_poi(data.pop('poi_id'))
        user = UserService.get_user(data.pop('user_id'))
        organization = OrganizationService.get_organization(data.pop('organization_id'))

        review = PoiReview.objects.create(poi=poi, user=user, organization=organization, **data)
        logger.info(f"Review {review.id} ({review.rating}/5) added to POI {poi.id} by user {user.id}")

        if self.notification_service is not None and poi.created_by_id is not None:
            self.notification_service.create_and_send(
                recipient_id=poi.created_by_id,
                notification_type='REVIEW_ADDED',
                title="New review",
                content=f"{user.username} rated '{poi.name}' {review.rating}/5",
                channel='WEBSOCKET',
                metadata={'poi_id': str(poi.id), 'review_id': str(review.id)},
            )
        return review

    @staticmethod
    def reviews_for_poi(poi_id) -> List[PoiReview]:
        return list(PoiReview.objects.filter(poi_id=poi_id).order_by('-created_at'))

    @staticmethod
    def reviews_by_user(user_id) -> List[PoiReview]:
        return list(PoiReview.objects.filter(user_id=user_id).order_by('-created_at'))

    @staticmethod
    def reviews_for_organization(organization_id) -> List[PoiReview]:
        return list(PoiReview.objects.filter(organization_id=organization_id).order_by('-created_at'))

    def update_review(self, review_id, data: Dict) -> PoiReview:
        """Partial update of rating, review_text, likes and dislikes. None values are ignored."""
        changes = {
            field: value for field, value in data.items()
            if field in ('rating', 'review_text', 'likes', 'dislikes') and value is not None
        }
        if 'rating' in changes:
            validate_rating(changes['rating'])
        for counter in ('likes', 'dislikes'):
            if counter in changes and changes[counter] < 0:
                raise ValidationError(f"{counter.capitalize()} must not be negative")

        with transaction.atomic():
            review = self.get_review(review_id)
            for field, value in changes.items():
                setattr(review, field, value)
            review.save()

        logger.info(f"Review {review.id} updated")
        return review

    def delete_review(self, review_id) -> None:
        review = self.get_review(review_id)
        review.delete()
        logger.info(f"Review {review_id} deleted")

    @staticmethod
    def average_rating(poi_id) -> float:
        average = PoiReview.objects.filter(poi_id=poi_id).aggregate(average=Avg('rating'))['average']
        return float(average) if average is not None else 0.0

    @staticmethod
    def review_count(poi_id) -> int:
        return PoiReview.objects.filter(poi_id=poi_id).count()

    def like(self, review_id) -> PoiReview:
        return self._increment(review_id, 'likes')

    def dislike(self, review_id) -> PoiReview:
        return self._increment(review_id, 'dislikes')

    def stats(self, poi_id) -> Dict:
        PoiService.get_poi(poi_id)
        aggregates = PoiReview.objects.filter(poi_id=poi_id).aggregate(
            average=Avg('rating'),
            count=Count('id'),
        )
        return {
            'poi_id': str(poi_id),
            'average_rating': float(aggregates['average']) if aggregates['average'] is not None else 0.0,
            'review_count': aggregates['count'],
        }

    def _increment(self, review_id, counter: str) -> PoiReview:
        # Single UPDATE ... SET counter = counter + 1, so concurrent clicks all count
        updated = PoiReview.objects.filter(id=review_id).update(**{counter: F(counter) + 1})
        if not updated:
            raise NotFoundError.for_id("Review", review_id)
        logger.debug(f"Review {review_id}: {counter} incremented")
        return self.get_review(review_id)
