"""
Tests for the analytics module.
"""
from datetime import date, timedelta

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from core.exceptions import NotFoundError, ValidationError
from locations.models import PointOfInterest
from organizations.models import Organization
from analytics.models import PoiAccessLog, PoiPlatformStat
from analytics.services import AccessLogService, PlatformStatService


class AnalyticsFixtureMixin:

    def create_fixtures(self):
        self.org = Organization.objects.create(name="Org One", code="ORG1")
        self.other_org = Organization.objects.create(name="Org Two", code="ORG2")
        self.poi = PointOfInterest.objects.create(
            organization=self.org, name="Hotel Hilton", poi_type="HOTEL", category="Lodging"
        )
        self.other_poi = PointOfInterest.objects.create(
            organization=self.other_org, name="Musée National", poi_type="MUSEUM", category="Culture"
        )

    def log(self, poi=None, organization=None, platform_type='WEB', access_type='VIEW', age=None, **kwargs):
        accessed_at = timezone.now() - age if age is not None else timezone.now()
        return PoiAccessLog.objects.create(
            poi=poi or self.poi,
            organization=organization or self.org,
            platform_type=platform_type,
            access_type=access_type,
            accessed_at=accessed_at,
            **kwargs
        )


class AccessLogServiceTestCase(AnalyticsFixtureMixin, TestCase):

    def setUp(self):
        self.create_fixtures()

    def test_create_log_defaults(self):
        log = AccessLogService.create_log({
            'poi_id': self.poi.id,
            'organization_id': self.org.id,
            'platform_type': 'ANDROID',
            'access_type': 'CLICK',
        })
        self.assertIsNotNone(log.accessed_at)
        self.assertIsNone(log.user_id)
        self.assertEqual(log.metadata, {})

    def test_create_log_unknown_poi(self):
        with self.assertRaises(NotFoundError):
            AccessLogService.create_log({
                'poi_id': '7f1c2b56-0000-4000-8000-000000000000',
                'organization_id': self.org.id,
                'platform_type': 'WEB',
                'access_type': 'VIEW',
            })

    def test_filters_newest_first(self):
        old = self.log(age=timedelta(days=2))
        new = self.log(access_type='CLICK', user_id='3b241101-e2bb-4255-8caf-4136c566a962')
        self.log(poi=self.other_poi, organization=self.other_org, platform_type='IOS')

        self.assertEqual([l.id for l in AccessLogService.logs_for_poi(self.poi.id)], [new.id, old.id])
        self.assertEqual(len(AccessLogService.logs_for_organization(self.org.id)), 2)
        self.assertEqual(
            [l.id for l in AccessLogService.logs_for_user('3b241101-e2bb-4255-8caf-4136c566a962')],
            [new.id]
        )
        self.assertEqual([l.id for l in AccessLogService.logs_by_access_type('CLICK')], [new.id])
        self.assertEqual(len(AccessLogService.logs_by_platform('IOS')), 1)
        self.assertEqual(len(AccessLogService.logs_for_poi_and_organization(self.poi.id, self.other_org.id)), 0)

    def test_logs_between_is_inclusive(self):
        log = self.log(age=timedelta(hours=5))
        self.log(age=timedelta(days=5))

        results = AccessLogService.logs_between(log.accessed_at, timezone.now())

        self.assertEqual([l.id for l in results], [log.id])

    def test_logs_between_rejects_inverted_range(self):
        now = timezone.now()
        with self.assertRaises(ValidationError):
            AccessLogService.logs_between(now, now - timedelta(days=1))

    def test_recent_logs_for_poi(self):
        recent = self.log(age=timedelta(minutes=5))
        self.log(age=timedelta(days=3))
        results = AccessLogService.recent_logs_for_poi(self.poi.id, timezone.now() - timedelta(hours=1))
        self.assertEqual([l.id for l in results], [recent.id])

    def test_paginated_logs(self):
        logs = [self.log(age=timedelta(minutes=minutes)) for minutes in range(5)]

        first = AccessLogService.paginated_logs_for_poi(self.poi.id, page=0, size=2)
        last = AccessLogService.paginated_logs_for_poi(self.poi.id, page=2, size=2)

        self.assertEqual(first['count'], 5)
        self.assertEqual([l.id for l in first['results']], [logs[0].id, logs[1].id])
        self.assertEqual([l.id for l in last['results']], [logs[4].id])

    def test_pagination_validation(self):
        with self.assertRaises(ValidationError):
            AccessLogService.paginated_logs_for_poi(self.poi.id, page=-1, size=10)
        with self.assertRaises(ValidationError):
            AccessLogService.paginated_logs_for_poi(self.poi.id, page=0, size=0)

    def test_counts(self):
        self.log()
        self.log(access_type='CLICK')
        self.log(access_type='CLICK')
        self.assertEqual(AccessLogService.count_for_poi(self.poi.id), 3)
        self.assertEqual(AccessLogService.count_for_poi_and_access_type(self.poi.id, 'CLICK'), 2)

    def test_platform_breakdown(self):
        self.log(platform_type='WEB')
        self.log(platform_type='ANDROID')
        self.log(platform_type='WEB')
        self.log(poi=self.other_poi, organization=self.other_org, platform_type='IOS')

        self.assertEqual(
            AccessLogService.platform_breakdown(self.org.id),
            [{'platform_type': 'ANDROID', 'count': 1}, {'platform_type': 'WEB', 'count': 2}]
        )

    def test_purge_only_removes_older_logs(self):
        self.log(age=timedelta(days=40))
        self.log(age=timedelta(days=31))
        kept = self.log(age=timedelta(days=1))

        deleted = AccessLogService.purge_older_than(timezone.now() - timedelta(days=30))

        self.assertEqual(deleted, 2)
        self.assertEqual(list(PoiAccessLog.objects.values_list('id', flat=True)), [kept.id])


class PlatformStatServiceTestCase(AnalyticsFixtureMixin, TestCase):

    def setUp(self):
        self.create_fixtures()

    def stat(self, stat_date, organization=None, poi=None, platform_type='WEB', **counters):
        return PoiPlatformStat.objects.create(
            organization=organization or self.org,
            poi=poi,
            platform_type=platform_type,
            stat_date=stat_date,
            **counters
        )

    def test_create_stat_defaults_to_today(self):
        stat = PlatformStatService.create_stat({
            'organization_id': self.org.id,
            'platform_type': 'WEB',
            'views': 12,
        })
        self.assertEqual(stat.stat_date, timezone.localdate())
        self.assertIsNone(stat.poi)
        self.assertEqual(stat.likes, 0)

    def test_filters(self):
        org_wide = self.stat(date(2024, 5, 1))
        poi_stat = self.stat(date(2024, 5, 2), poi=self.poi, platform_type='ANDROID')
        self.stat(date(2024, 6, 1), organization=self.other_org)

        self.assertEqual([s.id for s in PlatformStatService.stats_for_organization(self.org.id)],
                         [poi_stat.id, org_wide.id])
        self.assertEqual([s.id for s in PlatformStatService.stats_for_poi(self.poi.id)], [poi_stat.id])
        self.assertEqual([s.id for s in PlatformStatService.stats_for_platform('ANDROID')], [poi_stat.id])
        self.assertEqual([s.id for s in PlatformStatService.stats_for_date(date(2024, 5, 1))], [org_wide.id])
        self.assertEqual(len(PlatformStatService.stats_between(date(2024, 5, 1), date(2024, 6, 1))), 3)
        self.assertEqual(
            len(PlatformStatService.stats_between(date(2024, 5, 1), date(2024, 6, 1), organization_id=self.org.id)),
            2
        )
        with self.assertRaises(ValidationError):
            PlatformStatService.stats_between(date(2024, 6, 1), date(2024, 5, 1))

    def test_update_and_delete(self):
        stat = self.stat(date(2024, 5, 1), views=1)
        stat = PlatformStatService.update_stat(stat.id, {'views': 10, 'likes': None})
        self.assertEqual(stat.views, 10)

        self.assertTrue(PlatformStatService.exists(stat.id))
        PlatformStatService.delete_stat(stat.id)
        self.assertFalse(PlatformStatService.exists(stat.id))
        with self.assertRaises(NotFoundError):
            PlatformStatService.delete_stat(stat.id)

    def test_bulk_deletes_and_count(self):
        self.stat(date(2024, 5, 1))
        self.stat(date(2024, 5, 1), poi=self.poi)
        self.stat(date(2024, 5, 1), organization=self.other_org, poi=self.other_poi)
        self.assertEqual(PlatformStatService.count(), 3)

        self.assertEqual(PlatformStatService.delete_for_poi(self.other_poi.id), 1)
        self.assertEqual(PlatformStatService.delete_for_organization(self.org.id), 2)
        self.assertEqual(PlatformStatService.count(), 0)


class AnalyticsAPITestCase(AnalyticsFixtureMixin, APITestCase):

    def setUp(self):
        self.create_fixtures()

    def test_create_access_log(self):
        response = self.client.post(reverse('analytics:access-log-list'), {
            'poi_id': str(self.poi.id),
            'organization_id': str(self.org.id),
            'platform_type': 'WEB',
            'access_type': 'VIEW',
            'metadata': {'referrer': 'search'},
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(PoiAccessLog.objects.get().metadata, {'referrer': 'search'})

    def test_access_logs_are_immutable(self):
        log = self.log()
        response = self.client.patch(
            reverse('analytics:access-log-detail', args=[log.id]), {'platform_type': 'IOS'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)

    def test_paginated_endpoint(self):
        for minutes in range(3):
            self.log(age=timedelta(minutes=minutes))

        url = reverse('analytics:access-log-for-poi', kwargs={'poi_id': str(self.poi.id)})
        response = self.client.get(url, {'page': 1, 'size': 2})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 3)
        self.assertEqual(len(response.data['results']), 1)

        response = self.client.get(url, {'page': -1})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_platform_breakdown_endpoint(self):
        self.log(platform_type='WEB')
        self.log(platform_type='IOS')
        response = self.client.get(
            reverse('analytics:access-log-platform-breakdown'), {'organization_id': str(self.org.id)}
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['platform_type'] for row in response.data], ['IOS', 'WEB'])

    def test_purge_endpoint(self):
        self.log(age=timedelta(days=60))
        self.log()
        response = self.client.post(
            reverse('analytics:access-log-purge'),
            {'before': (timezone.now() - timedelta(days=30)).isoformat()},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['deleted'], 1)
        self.assertEqual(PoiAccessLog.objects.count(), 1)

    def test_inverted_date_range(self):
        now = timezone.now()
        response = self.client.get(reverse('analytics:access-log-list'), {
            'start': now.isoformat(),
            'end': (now - timedelta(days=1)).isoformat(),
        })
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_create_platform_stat(self):
        response = self.client.post(reverse('analytics:platform-stat-list'), {
            'organization_id': str(self.org.id),
            'poi_id': str(self.poi.id),
            'platform_type': 'WEB',
            'views': 5,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['stat_date'], timezone.localdate().isoformat())
        self.assertEqual(response.data['poi_id'], str(self.poi.id))

    def test_platform_stat_count_and_purge(self):
        PoiPlatformStat.objects.create(organization=self.org, platform_type='WEB')
        self.assertEqual(self.client.get(reverse('analytics:platform-stat-count')).data['count'], 1)

        response = self.client.delete(f"{reverse('analytics:platform-stat-purge')}?organization_id={self.org.id}")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['deleted'], 1)
