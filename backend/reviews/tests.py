"""
Tests for the reviews module.
"""
from datetime import timedelta

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from core.exceptions import NotFoundError, ValidationError
from locations.models import PointOfInterest
from notifications.models import Notification
from organizations.models import Organization
from user.models import AppUser
from reviews.models import PoiReview
from reviews.services import ReviewService


class ReviewFixtureMixin:

    def create_fixtures(self):
        self.org = Organization.objects.create(name="Org One", code="ORG1")
        self.owner = AppUser.objects.create(organization=self.org, username="owner")
        self.visitor = AppUser.objects.create(organization=self.org, username="visitor")
        self.poi = PointOfInterest.objects.create(
            organization=self.org,
            created_by=self.owner,
            name="Hotel Hilton",
            poi_type="HOTEL",
            category="Lodging",
            latitude=3.848,
            longitude=11.502,
        )

    def review_data(self, **overrides):
        data = {
            'poi_id': self.poi.id,
            'user_id': self.visitor.id,
            'organization_id': self.org.id,
            'platform_type': 'WEB',
            'rating': 4,
            'review_text': "Great pool",
        }
        data.update(overrides)
        return data


class ReviewServiceTestCase(ReviewFixtureMixin, TestCase):
    """Test cases for ReviewService"""

    def setUp(self):
        self.create_fixtures()
        self.service = ReviewService()

    def test_create_review(self):
        review = self.service.create_review(self.review_data())
        self.assertEqual(review.poi, self.poi)
        self.assertEqual(review.likes, 0)
        self.assertEqual(review.dislikes, 0)

    def test_rating_out_of_range(self):
        for rating in (0, 6, -1, None, 4.5):
            with self.assertRaises(ValidationError):
                self.service.create_review(self.review_data(rating=rating))
        self.assertEqual(PoiReview.objects.count(), 0)

    def test_create_review_unknown_references(self):
        with self.assertRaises(NotFoundError):
            self.service.create_review(self.review_data(user_id='7f1c2b56-0000-4000-8000-000000000000'))
        with self.assertRaises(NotFoundError):
            self.service.create_review(self.review_data(poi_id='7f1c2b56-0000-4000-8000-000000000000'))

    def test_reviews_for_poi_newest_first(self):
        first = self.service.create_review(self.review_data(rating=3))
        second = self.service.create_review(self.review_data(rating=5))
        PoiReview.objects.filter(id=first.id).update(created_at=timezone.now() - timedelta(hours=1))

        self.assertEqual([r.id for r in self.service.reviews_for_poi(self.poi.id)], [second.id, first.id])
        self.assertEqual(len(self.service.reviews_by_user(self.visitor.id)), 2)
        self.assertEqual(len(self.service.reviews_for_organization(self.org.id)), 2)

    def test_average_rating_and_count(self):
        self.assertEqual(self.service.average_rating(self.poi.id), 0.0)
        self.assertEqual(self.service.review_count(self.poi.id), 0)

        self.service.create_review(self.review_data(rating=3))
        self.service.create_review(self.review_data(rating=4))

        self.assertEqual(self.service.average_rating(self.poi.id), 3.5)
        self.assertEqual(self.service.review_count(self.poi.id), 2)
        self.assertEqual(
            self.service.stats(self.poi.id),
            {'poi_id': str(self.poi.id), 'average_rating': 3.5, 'review_count': 2}
        )

    def test_like_and_dislike_increment_by_one(self):
        review = self.service.create_review(self.review_data())
        self.service.like(review.id)
        review = self.service.like(review.id)
        self.assertEqual(review.likes, 2)

        review = self.service.dislike(review.id)
        self.assertEqual(review.dislikes, 1)
        self.assertEqual(review.likes, 2)

    def test_like_unknown_review(self):
        with self.assertRaises(NotFoundError):
            self.service.like('7f1c2b56-0000-4000-8000-000000000000')

    def test_partial_update(self):
        review = self.service.create_review(self.review_data())
        review = self.service.update_review(review.id, {'rating': 2, 'review_text': None})
        self.assertEqual(review.rating, 2)
        self.assertEqual(review.review_text, "Great pool")

        with self.assertRaises(ValidationError):
            self.service.update_review(review.id, {'rating': 9})
        with self.assertRaises(ValidationError):
            self.service.update_review(review.id, {'likes': -1})

    def test_delete_review(self):
        review = self.service.create_review(self.review_data())
        self.service.delete_review(review.id)
        self.assertFalse(PoiReview.objects.exists())
        with self.assertRaises(NotFoundError):
            self.service.delete_review(review.id)


class ReviewAPITestCase(ReviewFixtureMixin, APITestCase):

    def setUp(self):
        self.create_fixtures()
        self.list_url = reverse('reviews:review-list')

    def payload(self, **overrides):
        return {key: str(value) if key.endswith('_id') else value
                for key, value in self.review_data(**overrides).items()}

    def test_create_review_notifies_poi_creator(self):
        response = self.client.post(self.list_url, self.payload(), format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['poi_id'], str(self.poi.id))
        notification = Notification.objects.get(recipient=self.owner)
        self.assertEqual(notification.notification_type, 'REVIEW_ADDED')
        self.assertTrue(notification.sent)

    def test_create_review_invalid_rating(self):
        response = self.client.post(self.list_url, self.payload(rating=7), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_create_review_unknown_user(self):
        response = self.client.post(
            self.list_url,
            self.payload(user_id='7f1c2b56-0000-4000-8000-000000000000'),
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_filter_by_poi(self):
        ReviewService().create_review(self.review_data())
        response = self.client.get(self.list_url, {'poi_id': str(self.poi.id)})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)

    def test_stats_endpoint(self):
        ReviewService().create_review(self.review_data(rating=5))
        ReviewService().create_review(self.review_data(rating=2))

        response = self.client.get(reverse('reviews:review-stats', kwargs={'poi_id': str(self.poi.id)}))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['average_rating'], 3.5)
        self.assertEqual(response.data['review_count'], 2)

    def test_stats_unknown_poi(self):
        response = self.client.get(
            reverse('reviews:review-stats', kwargs={'poi_id': '7f1c2b56-0000-4000-8000-000000000000'})
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_like_and_dislike_endpoints(self):
        review = ReviewService().create_review(self.review_data())

        response = self.client.post(reverse('reviews:review-like', args=[review.id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['likes'], 1)

        response = self.client.post(reverse('reviews:review-dislike', args=[review.id]))
        self.assertEqual(response.data['dislikes'], 1)

    def test_patch_review(self):
        review = ReviewService().create_review(self.review_data())
        response = self.client.patch(
            reverse('reviews:review-detail', args=[review.id]),
            {'review_text': "Pool was closed"},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['review_text'], "Pool was closed")
        self.assertEqual(response.data['rating'], 4)
