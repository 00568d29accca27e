from datetime import timedelta
from unittest.mock import MagicMock, patch

from django.db import DatabaseError
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from core.exceptions import NotFoundError, StorageError, ValidationError
from notifications.models import Notification
from organizations.models import Organization
from user.models import AppUser
from .models import PointOfInterest
from .services import PoiQueryService, PoiService, haversine_km


def make_poi(organization, name, latitude=None, longitude=None, **kwargs):
    kwargs.setdefault('poi_type', 'HOTEL')
    kwargs.setdefault('category', 'Lodging')
    return PointOfInterest.objects.create(
        organization=organization,
        name=name,
        latitude=latitude,
        longitude=longitude,
        **kwargs
    )


class POIModelTests(TestCase):
    def setUp(self):
        self.org = Organization.objects.create(name="Yaounde Tourism", code="YDE")

    def test_create_poi(self):
        """Test that a POI can be created successfully."""
        poi = make_poi(self.org, "Test Location", 3.848, 11.502)
        self.assertEqual(PointOfInterest.objects.count(), 1)
        self.assertEqual(poi.get_lat_lon(), (3.848, 11.502))
        self.assertTrue(poi.is_active)
        self.assertEqual(poi.popularity_score, 0.0)
        self.assertGreaterEqual(poi.updated_at, poi.created_at)

    def test_poi_without_coordinates(self):
        poi = make_poi(self.org, "Somewhere")
        self.assertFalse(poi.has_location)
        self.assertIsNone(poi.get_lat_lon())

    def test_invalid_coordinates(self):
        """Test that invalid coordinates raise a ValueError during save."""
        poi = PointOfInterest(organization=self.org, name="Bad Location", poi_type="X", category="Y",
                              latitude=100.0, longitude=200.0)
        with self.assertRaises(ValueError):
            poi.save()

    def test_single_coordinate_is_rejected(self):
        poi = PointOfInterest(organization=self.org, name="Half", poi_type="X", category="Y", latitude=3.8)
        with self.assertRaises(ValidationError):
            poi.save()
        self.assertEqual(PointOfInterest.objects.count(), 0)


class PoiQueryServiceTests(TestCase):
    def setUp(self):
        self.org1 = Organization.objects.create(name="Org One", code="ORG1")
        self.org2 = Organization.objects.create(name="Org Two", code="ORG2")
        self.hilton = make_poi(self.org1, "Hotel Hilton", 3.848, 11.502,
                               popularity_score=80, city="Yaoundé",
                               description="Five star hotel in the city center")
        self.musee = make_poi(self.org1, "Musée National", 3.866, 11.516,
                              popularity_score=40, poi_type="MUSEUM", category="Culture",
                              city="Yaoundé")

    def test_find_nearby_worked_example(self):
        results = PoiQueryService.find_nearby(3.848, 11.502, 5.0)

        self.assertEqual([poi.id for poi in results], [self.hilton.id, self.musee.id])
        self.assertAlmostEqual(results[0].distance_km, 0.0, places=3)
        self.assertGreater(results[1].distance_km, 2.0)
        self.assertLess(results[1].distance_km, 3.0)

    def test_distance_matches_reference_formula(self):
        results = PoiQueryService.find_nearby(3.848, 11.502, 5.0)
        expected = haversine_km(3.848, 11.502, 3.866, 11.516)
        self.assertAlmostEqual(results[1].distance_km, expected, places=6)

    def test_find_nearby_point_at_query_center(self):
        """Zero distance must not fall outside the acos domain."""
        poi = make_poi(self.org2, "Center", 3.8667, 11.5167)
        results = PoiQueryService.find_nearby(3.8667, 11.5167, 0.1)
        self.assertEqual([p.id for p in results], [poi.id])

    def test_find_nearby_excludes_far_and_inactive(self):
        make_poi(self.org1, "Douala Port", 4.05, 9.70)
        closed = make_poi(self.org1, "Closed Cafe", 3.849, 11.503, is_active=False)
        make_poi(self.org1, "No Coordinates")

        results = PoiQueryService.find_nearby(3.848, 11.502, 5.0)
        names = [poi.name for poi in results]

        self.assertNotIn("Douala Port", names)
        self.assertNotIn(closed.name, names)
        self.assertNotIn("No Coordinates", names)
        for poi in results:
            self.assertLessEqual(poi.distance_km, 5.0)

    def test_find_nearby_ties_broken_by_name(self):
        make_poi(self.org2, "Beta", 10.0, 10.0)
        make_poi(self.org2, "Alpha", 10.0, 10.0)
        results = PoiQueryService.find_nearby(10.0, 10.0, 1.0)
        self.assertEqual([poi.name for poi in results], ["Alpha", "Beta"])

    def test_find_nearby_with_filters(self):
        results = PoiQueryService.find_nearby(3.848, 11.502, 5.0, filters={'poi_type': 'museum'})
        self.assertEqual([poi.id for poi in results], [self.musee.id])

    def test_find_nearby_validation(self):
        with self.assertRaises(ValidationError):
            PoiQueryService.find_nearby(91.0, 0.0, 5.0)
        with self.assertRaises(ValidationError):
            PoiQueryService.find_nearby(0.0, -181.0, 5.0)
        with self.assertRaises(ValidationError):
            PoiQueryService.find_nearby(0.0, 0.0, 0)
        with self.assertRaises(ValidationError):
            PoiQueryService.find_nearby(0.0, 0.0, -1)
        with self.assertRaises(ValidationError):
            PoiQueryService.find_nearby(None, 0.0, 5.0)

    def test_find_nearby_no_matches_returns_empty_list(self):
        self.assertEqual(PoiQueryService.find_nearby(-45.0, -120.0, 10.0), [])

    def test_search_by_organization_orders_by_popularity(self):
        make_poi(self.org2, "Other Org Hotel", 3.85, 11.50, popularity_score=99)
        results = PoiQueryService.search_with_filters(organization_id=self.org1.id)
        self.assertEqual([poi.id for poi in results], [self.hilton.id, self.musee.id])

    def test_search_without_filters_returns_all_active(self):
        make_poi(self.org2, "Inactive", is_active=False, popularity_score=100)
        low = make_poi(self.org2, "Low", popularity_score=1)

        results = PoiQueryService.search_with_filters()

        self.assertEqual([poi.id for poi in results], [self.hilton.id, self.musee.id, low.id])

    def test_search_popularity_ties_broken_by_name(self):
        make_poi(self.org2, "Zoo", popularity_score=50)
        make_poi(self.org2, "Aquarium", popularity_score=50)
        results = PoiQueryService.search_with_filters(organization_id=self.org2.id)
        self.assertEqual([poi.name for poi in results], ["Aquarium", "Zoo"])

    def test_search_case_insensitive_filters(self):
        self.assertEqual(
            [poi.id for poi in PoiQueryService.search_with_filters(poi_type="hotel")],
            [self.hilton.id]
        )
        self.assertEqual(
            [poi.id for poi in PoiQueryService.search_with_filters(category="CULTURE")],
            [self.musee.id]
        )
        self.assertEqual(len(PoiQueryService.search_with_filters(city="yaoundé")), 2)
        self.assertEqual(PoiQueryService.search_with_filters(city="Yaound"), [])

    def test_search_case_insensitive_for_non_ascii_letters(self):
        gallery = make_poi(self.org2, "Galerie Éclat", poi_type="MUSÉE", category="Ébène")

        self.assertEqual(len(PoiQueryService.search_with_filters(city="YAOUNDÉ")), 2)
        self.assertEqual(
            [poi.id for poi in PoiQueryService.search_with_filters(search_term="MUSÉE")],
            [self.musee.id]
        )
        self.assertEqual(
            [poi.id for poi in PoiQueryService.search_with_filters(poi_type="musée")],
            [gallery.id]
        )
        self.assertEqual(
            [poi.id for poi in PoiQueryService.search_with_filters(category="ÉBÈNE")],
            [gallery.id]
        )
        self.assertEqual(
            [poi.id for poi in PoiQueryService.search_with_filters(search_term="éclat")],
            [gallery.id]
        )

    def test_search_by_country_and_city(self):
        PointOfInterest.objects.filter(id__in=[self.hilton.id, self.musee.id]).update(country="Cameroun")
        douala = make_poi(self.org2, "Douala Port", city="Douala", country="Cameroun")
        make_poi(self.org2, "Tour Eiffel", city="Paris", country="France")

        results = PoiQueryService.search_with_filters(country="CAMEROUN")
        self.assertEqual({poi.id for poi in results}, {self.hilton.id, self.musee.id, douala.id})

        results = PoiQueryService.search_with_filters(country="cameroun", city="douala")
        self.assertEqual([poi.id for poi in results], [douala.id])

        self.assertEqual(PoiQueryService.search_with_filters(country="Camer"), [])

    def test_search_term_matches_name_or_description(self):
        self.assertEqual(
            [poi.id for poi in PoiQueryService.search_with_filters(search_term="musée")],
            [self.musee.id]
        )
        self.assertEqual(
            [poi.id for poi in PoiQueryService.search_with_filters(search_term="FIVE STAR")],
            [self.hilton.id]
        )

    def test_search_filters_are_combined(self):
        results = PoiQueryService.search_with_filters(
            organization_id=self.org1.id, poi_type="MUSEUM", search_term="hilton"
        )
        self.assertEqual(results, [])

    def test_search_invalid_organization_id(self):
        with self.assertRaises(ValidationError):
            PoiQueryService.search_with_filters(organization_id="not-a-uuid")

    def test_find_top_popular(self):
        self.assertEqual([poi.id for poi in PoiQueryService.find_top_popular(1)], [self.hilton.id])
        self.assertEqual(len(PoiQueryService.find_top_popular(10)), 2)

    def test_find_top_popular_returns_highest_scores_descending(self):
        PointOfInterest.objects.all().delete()
        pois = {
            score: make_poi(self.org2, f"POI {score}", popularity_score=score)
            for score in (15, 95, 40, 70, 5)
        }

        results = PoiQueryService.find_top_popular(3)

        self.assertEqual([poi.id for poi in results], [pois[95].id, pois[70].id, pois[40].id])
        self.assertEqual([poi.popularity_score for poi in results], [95, 70, 40])

    def test_find_top_popular_non_positive_limit(self):
        self.assertEqual(PoiQueryService.find_top_popular(0), [])
        self.assertEqual(PoiQueryService.find_top_popular(-3), [])

    def test_find_top_popular_ties_oldest_first(self):
        newer = make_poi(self.org2, "Newer", popularity_score=90)
        older = make_poi(self.org2, "Older", popularity_score=90)
        PointOfInterest.objects.filter(id=older.id).update(created_at=timezone.now() - timedelta(days=2))

        results = PoiQueryService.find_top_popular(2)

        self.assertEqual([poi.id for poi in results], [older.id, newer.id])

    def test_storage_failure_is_not_an_empty_result(self):
        broken = MagicMock()
        broken.order_by.return_value.__iter__.side_effect = DatabaseError("connection lost")

        with patch.object(PoiQueryService, 'active_pois', return_value=broken):
            with self.assertRaises(StorageError):
                PoiQueryService.search_with_filters()


class PoiServiceTests(TestCase):
    def setUp(self):
        self.org = Organization.objects.create(name="Org One", code="ORG1")
        self.user = AppUser.objects.create(organization=self.org, username="editor")
        self.service = PoiService()
        self.poi = make_poi(self.org, "Hotel Hilton", 3.848, 11.502, popularity_score=80)

    def test_update_popularity_score(self):
        before = self.poi.updated_at
        poi = self.service.update_popularity_score(self.poi.id, 55.5)

        self.poi.refresh_from_db()
        self.assertEqual(poi.popularity_score, 55.5)
        self.assertEqual(self.poi.popularity_score, 55.5)
        self.assertGreaterEqual(self.poi.updated_at, before)

    def test_update_popularity_score_bounds_are_inclusive(self):
        self.service.update_popularity_score(self.poi.id, 0)
        self.service.update_popularity_score(self.poi.id, 100)
        self.poi.refresh_from_db()
        self.assertEqual(self.poi.popularity_score, 100.0)

    def test_update_popularity_score_out_of_range(self):
        for score in (150, -0.5, float('nan'), float('inf'), 'abc', None):
            with self.assertRaises(ValidationError):
                self.service.update_popularity_score(self.poi.id, score)
        self.poi.refresh_from_db()
        self.assertEqual(self.poi.popularity_score, 80.0)

    def test_update_popularity_score_unknown_poi(self):
        with self.assertRaises(NotFoundError):
            self.service.update_popularity_score('7f1c2b56-0000-4000-8000-000000000000', 50)

    def test_create_poi_resolves_references(self):
        poi = self.service.create_poi({
            'organization_id': self.org.id,
            'created_by_id': self.user.id,
            'name': "Musée National",
            'poi_type': "MUSEUM",
            'category': "Culture",
            'latitude': 3.866,
            'longitude': 11.516,
        })
        self.assertEqual(poi.organization, self.org)
        self.assertEqual(poi.created_by, self.user)

    def test_create_poi_unknown_organization(self):
        with self.assertRaises(NotFoundError):
            self.service.create_poi({
                'organization_id': '7f1c2b56-0000-4000-8000-000000000000',
                'name': "Ghost",
                'poi_type': "X",
                'category': "Y",
            })

    def test_partial_update_ignores_none(self):
        poi = self.service.update_poi(self.poi.id, {'name': "Hilton Yaoundé", 'description': None},
                                      user_id=self.user.id)
        self.assertEqual(poi.name, "Hilton Yaoundé")
        self.assertEqual(poi.poi_type, "HOTEL")
        self.assertEqual(poi.updated_by, self.user)

    def test_partial_update_checks_merged_coordinates(self):
        poi = make_poi(self.org, "No Location")
        with self.assertRaises(ValidationError):
            self.service.update_poi(poi.id, {'latitude': 3.9})

        poi = self.service.update_poi(self.poi.id, {'latitude': 3.9})
        self.assertEqual(poi.get_lat_lon(), (3.9, 11.502))

    def test_deactivate_and_activate(self):
        poi = self.service.deactivate_poi(self.poi.id, user_id=self.user.id, reason="Closed for works")
        self.assertFalse(poi.is_active)
        self.assertEqual(poi.deactivated_by, self.user)
        self.assertEqual(PoiQueryService.search_with_filters(), [])

        poi = self.service.activate_poi(self.poi.id)
        self.assertTrue(poi.is_active)
        self.assertEqual(poi.deactivation_reason, "")
        self.assertIsNone(poi.deactivated_by)


class POIAPITests(APITestCase):
    def setUp(self):
        self.org = Organization.objects.create(name="Org One", code="ORG1")
        self.user = AppUser.objects.create(organization=self.org, username="creator")
        self.hilton = make_poi(self.org, "Hotel Hilton", 3.848, 11.502, popularity_score=80,
                               amenities=["Wi-Fi", "Pool"])
        self.musee = make_poi(self.org, "Musée National", 3.866, 11.516, popularity_score=40,
                              poi_type="MUSEUM", category="Culture")
        # Define URL names based on router in urls.py
        self.list_url = reverse('locations:poi-list')
        self.search_url = reverse('locations:poi-search')
        self.nearby_url = reverse('locations:poi-nearby')
        self.popular_url = reverse('locations:poi-popular')

    def test_list_pois(self):
        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['results']), 2)

    def test_retrieve_poi_representation(self):
        response = self.client.get(reverse('locations:poi-detail', args=[self.hilton.id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['organization_id'], str(self.org.id))
        self.assertEqual(response.data['type'], "HOTEL")
        self.assertEqual(response.data['amenities'], ["Wi-Fi", "Pool"])
        self.assertNotIn('distance_km', response.data)

    def test_create_poi_with_comma_separated_lists(self):
        payload = {
            'organization_id': str(self.org.id),
            'created_by_id': str(self.user.id),
            'name': "Marché Central",
            'type': "MARKET",
            'category': "Shopping",
            'latitude': 3.866,
            'longitude': 11.517,
            'amenities': "Parking, , Toilets",
            'keywords': ["food", " crafts "],
        }
        response = self.client.post(self.list_url, payload, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        poi = PointOfInterest.objects.get(id=response.data['id'])
        self.assertEqual(poi.amenities, ["Parking", "Toilets"])
        self.assertEqual(poi.keywords, ["food", "crafts"])
        self.assertEqual(poi.poi_type, "MARKET")
        self.assertTrue(
            Notification.objects.filter(recipient=self.user, notification_type='POI_CREATED').exists()
        )

    def test_create_poi_with_one_coordinate(self):
        payload = {
            'organization_id': str(self.org.id),
            'name': "Half",
            'type': "X",
            'category': "Y",
            'latitude': 3.866,
        }
        response = self.client.post(self.list_url, payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_partial_update(self):
        url = reverse('locations:poi-detail', args=[self.musee.id])
        response = self.client.patch(url, {'description': "National museum"}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.musee.refresh_from_db()
        self.assertEqual(self.musee.description, "National museum")
        self.assertEqual(self.musee.name, "Musée National")

    def test_search_endpoint(self):
        response = self.client.get(self.search_url, {'organization_id': str(self.org.id)})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item['id'] for item in response.data], [str(self.hilton.id), str(self.musee.id)])

        response = self.client.get(self.search_url, {'type': 'museum', 'q': 'national'})
        self.assertEqual([item['name'] for item in response.data], ["Musée National"])

    def test_search_endpoint_country_filter(self):
        PointOfInterest.objects.filter(id=self.musee.id).update(country="Cameroun")

        response = self.client.get(self.search_url, {'country': 'CAMEROUN'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item['id'] for item in response.data], [str(self.musee.id)])

    def test_search_invalid_organization(self):
        response = self.client.get(self.search_url, {'organization_id': 'nope'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)

    def test_search_storage_failure(self):
        with patch.object(PoiQueryService, 'search_with_filters', side_effect=StorageError("down")):
            response = self.client.get(self.search_url)
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)

    def test_nearby_endpoint(self):
        params = {'latitude': 3.848, 'longitude': 11.502, 'radius_km': 5}
        response = self.client.get(self.nearby_url, params)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item['id'] for item in response.data], [str(self.hilton.id), str(self.musee.id)])
        self.assertEqual(response.data[0]['distance_km'], 0.0)

    def test_nearby_default_radius(self):
        make_poi(self.org, "Douala Port", 4.05, 9.70)
        response = self.client.get(self.nearby_url, {'latitude': 3.848, 'longitude': 11.502})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)

    def test_nearby_invalid_parameters(self):
        for params in (
            {'latitude': 91, 'longitude': 0},
            {'latitude': 0, 'longitude': 0, 'radius_km': -1},
            {'latitude': 'north', 'longitude': 0},
            {'longitude': 0},
        ):
            response = self.client.get(self.nearby_url, params)
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, params)

    def test_popular_endpoint(self):
        response = self.client.get(self.popular_url, {'limit': 1})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item['id'] for item in response.data], [str(self.hilton.id)])

        response = self.client.get(self.popular_url)
        self.assertEqual(len(response.data), 2)

        response = self.client.get(self.popular_url, {'limit': 0})
        self.assertEqual(response.data, [])

    def test_popular_negative_limit(self):
        response = self.client.get(self.popular_url, {'limit': -1})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_popularity_endpoint(self):
        url = reverse('locations:poi-popularity', args=[self.musee.id])

        response = self.client.patch(url, {'score': 95}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['popularity_score'], 95.0)

        response = self.client.patch(url, {'score': 150}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.musee.refresh_from_db()
        self.assertEqual(self.musee.popularity_score, 95.0)

    def test_update_popularity_unknown_poi(self):
        url = reverse('locations:poi-popularity', args=['7f1c2b56-0000-4000-8000-000000000000'])
        response = self.client.patch(url, {'score': 50}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_deactivate_and_activate_endpoints(self):
        response = self.client.post(
            reverse('locations:poi-deactivate', args=[self.hilton.id]),
            {'user_id': str(self.user.id), 'reason': "Renovation"},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['is_active'])
        self.assertEqual(response.data['deactivation_reason'], "Renovation")

        response = self.client.get(self.popular_url)
        self.assertEqual([item['id'] for item in response.data], [str(self.musee.id)])

        response = self.client.post(reverse('locations:poi-activate', args=[self.hilton.id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['is_active'])
