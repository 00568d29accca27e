"""
Analytics services: POI access logging and per-platform daily statistics.
"""
import logging
from datetime import date, datetime
from typing import Dict, List

from django.db import transaction
from django.db.models import Count, QuerySet
from django.utils import timezone

from core.exceptions import NotFoundError, ValidationError
from locations.services import PoiService
from organizations.services import OrganizationService
from .models import PoiAccessLog, PoiPlatformStat

logger = logging.getLogger(__name__)


def validate_range(start, end):
    if start is None or end is None:
        raise ValidationError("Both start and end are required")
    if start > end:
        raise ValidationError("Start must not be after end")


class AccessLogService:
    """
    Records and queries POI accesses. Every list is ordered newest first.
    """

    @staticmethod
    def _logs() -> QuerySet:
        return PoiAccessLog.objects.order_by('-accessed_at')

    @staticmethod
    def create_log(data: Dict) -> PoiAccessLog:
        data = dict(data)
        poi = PoiService.get_poi(data.pop('poi_id'))
        organization = OrganizationService.get_organization(data.pop('organization_id'))
        if data.get('accessed_at') is None:
            data['accessed_at'] = timezone.now()
        if data.get('metadata') is None:
            data['metadata'] = {}

        log = PoiAccessLog.objects.create(poi=poi, organization=organization, **data)
        logger.debug(f"Access {log.access_type} logged for POI {poi.id} via {log.platform_type}")
        return log

    @staticmethod
    def get_log(log_id) -> PoiAccessLog:
        log = PoiAccessLog.objects.filter(id=log_id).first()
        if log is None:
            raise NotFoundError.for_id("Access log", log_id)
        return log

    @classmethod
    def logs_for_poi(cls, poi_id) -> List[PoiAccessLog]:
        return list(cls._logs().filter(poi_id=poi_id))

    @classmethod
    def logs_for_organization(cls, organization_id) -> List[PoiAccessLog]:
        return list(cls._logs().filter(organization_id=organization_id))

    @classmethod
    def logs_for_user(cls, user_id) -> List[PoiAccessLog]:
        return list(cls._logs().filter(user_id=user_id))

    @classmethod
    def logs_by_access_type(cls, access_type: str) -> List[PoiAccessLog]:
        return list(cls._logs().filter(access_type=access_type))

    @classmethod
    def logs_by_platform(cls, platform_type: str) -> List[PoiAccessLog]:
        return list(cls._logs().filter(platform_type=platform_type))

    @classmethod
    def logs_for_poi_and_organization(cls, poi_id, organization_id) -> List[PoiAccessLog]:
        return list(cls._logs().filter(poi_id=poi_id, organization_id=organization_id))

    @classmethod
    def logs_between(cls, start: datetime, end: datetime) -> List[PoiAccessLog]:
        """Logs with start <= accessed_at <= end."""
        validate_range(start, end)
        return list(cls._logs().filter(accessed_at__gte=start, accessed_at__lte=end))

    @classmethod
    def recent_logs_for_poi(cls, poi_id, since: datetime) -> List[PoiAccessLog]:
        return list(cls._logs().filter(poi_id=poi_id, accessed_at__gte=since))

    @classmethod
    def paginated_logs_for_poi(cls, poi_id, page: int = 0, size: int = 20) -> Dict:
        """
        Args:
            poi_id: POI to list
            page: Zero-based page index
            size: Page size, at least 1

        Returns:
            Dict with the page's logs under 'results' plus page, size and total count
        """
        if page < 0:
            raise ValidationError("Page must not be negative")
        if size < 1:
            raise ValidationError("Page size must be at least 1")

        queryset = cls._logs().filter(poi_id=poi_id)
        offset = page * size
        return {
            'page': page,
            'size': size,
            'count': queryset.count(),
            'results': list(queryset[offset:offset + size]),
        }

    @staticmethod
    def count_for_poi(poi_id) -> int:
        return PoiAccessLog.objects.filter(poi_id=poi_id).count()

    @staticmethod
    def count_for_poi_and_access_type(poi_id, access_type: str) -> int:
        return PoiAccessLog.objects.filter(poi_id=poi_id, access_type=access_type).count()

    @staticmethod
    def platform_breakdown(organization_id) -> List[Dict]:
        """Number of accesses per platform for an organization, ordered by platform."""
        rows = (
            PoiAccessLog.objects.filter(organization_id=organization_id)
            .values('platform_type')
            .annotate(count=Count('id'))
            .order_by('platform_type')
        )
        return [{'platform_type': row['platform_type'], 'count': row['count']} for row in rows]

    @staticmethod
    def purge_older_than(cutoff: datetime) -> int:
        """
        Deletes logs accessed strictly before the cutoff.
        Should be run periodically.

        Returns:
            int: Number of logs removed
        """
        if cutoff is None:
            raise ValidationError("A cutoff is required")
        deleted_count, _ = PoiAccessLog.objects.filter(accessed_at__lt=cutoff).delete()
        logger.info(f"Purged {deleted_count} access logs older than {cutoff.isoformat()}")
        return deleted_count


class PlatformStatService:

    @staticmethod
    def _stats() -> QuerySet:
        return PoiPlatformStat.objects.order_by('-stat_date', 'platform_type')

    @staticmethod
    def create_stat(data: Dict) -> PoiPlatformStat:
        data = dict(data)
        organization = OrganizationService.get_organization(data.pop('organization_id'))
        poi_id = data.pop('poi_id', None)
        poi = PoiService.get_poi(poi_id) if poi_id else None
        if data.get('stat_date') is None:
            data['stat_date'] = timezone.localdate()

        stat = PoiPlatformStat.objects.create(organization=organization, poi=poi, **data)
        logger.info(f"Platform stat {stat.id} recorded for organization {organization.id} on {stat.stat_date}")
        return stat

    @staticmethod
    def get_stat(stat_id) -> PoiPlatformStat:
        stat = PoiPlatformStat.objects.filter(id=stat_id).first()
        if stat is None:
            raise NotFoundError.for_id("Platform stat", stat_id)
        return stat

    @classmethod
    def stats_for_organization(cls, organization_id) -> List[PoiPlatformStat]:
        return list(cls._stats().filter(organization_id=organization_id))

    @classmethod
    def stats_for_poi(cls, poi_id) -> List[PoiPlatformStat]:
        return list(cls._stats().filter(poi_id=poi_id))

    @classmethod
    def stats_for_platform(cls, platform_type: str) -> List[PoiPlatformStat]:
        return list(cls._stats().filter(platform_type=platform_type))

    @classmethod
    def stats_for_date(cls, stat_date: date) -> List[PoiPlatformStat]:
        return list(cls._stats().filter(stat_date=stat_date))

    @classmethod
    def stats_between(cls, start: date, end: date, organization_id=None) -> List[PoiPlatformStat]:
        """Stats with start <= stat_date <= end, optionally for one organization."""
        validate_range(start, end)
        queryset = cls._stats().filter(stat_date__gte=start, stat_date__lte=end)
        if organization_id:
            queryset = queryset.filter(organization_id=organization_id)
        return list(queryset)

    @classmethod
    def update_stat(cls, stat_id, data: Dict) -> PoiPlatformStat:
        changes = {field: value for field, value in data.items() if value is not None}
        with transaction.atomic():
            stat = cls.get_stat(stat_id)
            if 'organization_id' in changes:
                stat.organization = OrganizationService.get_organization(changes.pop('organization_id'))
            if 'poi_id' in changes:
                stat.poi = PoiService.get_poi(changes.pop('poi_id'))
            for field, value in changes.items():
                setattr(stat, field, value)
            stat.save()
        logger.info(f"Platform stat {stat.id} updated")
        return stat

    @classmethod
    def delete_stat(cls, stat_id) -> None:
        cls.get_stat(stat_id).delete()
        logger.info(f"Platform stat {stat_id} deleted")

    @staticmethod
    def delete_for_organization(organization_id) -> int:
        deleted_count, _ = PoiPlatformStat.objects.filter(organization_id=organization_id).delete()
        logger.info(f"Deleted {deleted_count} platform stats of organization {organization_id}")
        return deleted_count

    @staticmethod
    def delete_for_poi(poi_id) -> int:
        deleted_count, _ = PoiPlatformStat.objects.filter(poi_id=poi_id).delete()
        logger.info(f"Deleted {deleted_count} platform stats of POI {poi_id}")
        return deleted_count

    @staticmethod
    def exists(stat_id) -> bool:
        return PoiPlatformStat.objects.filter(id=stat_id).exists()

    @staticmethod
    def count() -> int:
        return PoiPlatformStat.objects.count()
