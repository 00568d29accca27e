"""
Views for the analytics module: access logs and platform statistics.
"""
from rest_framework import serializers, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from .models import PoiAccessLog, PoiPlatformStat
from .serializers import PlatformBreakdownSerializer, PoiAccessLogSerializer, PoiPlatformStatSerializer
from .services import AccessLogService, PlatformStatService, validate_range


def parse_datetime_param(params, name, required=True):
    value = params.get(name)
    if not value:
        if required:
            raise serializers.ValidationError({name: "This query parameter is required."})
        return None
    return serializers.DateTimeField().to_internal_value(value)


def parse_date_param(params, name, required=True):
    value = params.get(name)
    if not value:
        if required:
            raise serializers.ValidationError({name: "This query parameter is required."})
        return None
    return serializers.DateField().to_internal_value(value)


def parse_int_param(params, name, default):
    try:
        return int(params.get(name, default))
    except (TypeError, ValueError):
        raise serializers.ValidationError({name: "A valid integer is required."})


class AccessLogViewSet(viewsets.ModelViewSet):
    """
    ViewSet for POI access logs. Logs are immutable once written.

    GET  /access-logs/?poi_id&organization_id&user_id&access_type&platform_type&start&end
    GET  /access-logs/poi/{poi_id}/?page&size  - Zero-based pages, newest first
    GET  /access-logs/count/?poi_id[&access_type]
    GET  /access-logs/recent/?poi_id&since
    GET  /access-logs/platform-breakdown/?organization_id
    POST /access-logs/purge/ {before}          - Delete logs older than a cutoff
    """
    serializer_class = PoiAccessLogSerializer
    http_method_names = ['get', 'post', 'delete', 'head', 'options']

    def get_queryset(self):
        params = self.request.query_params
        queryset = PoiAccessLog.objects.all()
        for param in ('poi_id', 'organization_id', 'user_id', 'access_type', 'platform_type'):
            value = params.get(param)
            if value:
                queryset = queryset.filter(**{param: value})

        start = parse_datetime_param(params, 'start', required=False)
        end = parse_datetime_param(params, 'end', required=False)
        if start and end:
            validate_range(start, end)
        if start:
            queryset = queryset.filter(accessed_at__gte=start)
        if end:
            queryset = queryset.filter(accessed_at__lte=end)
        return queryset.order_by('-accessed_at')

    def perform_create(self, serializer):
        serializer.instance = AccessLogService.create_log(dict(serializer.validated_data))

    @action(detail=False, methods=['get'], url_path=r'poi/(?P<poi_id>[^/.]+)')
    def for_poi(self, request, poi_id=None):
        page = AccessLogService.paginated_logs_for_poi(
            poi_id,
            page=parse_int_param(request.query_params, 'page', 0),
            size=parse_int_param(request.query_params, 'size', 20),
        )
        page['results'] = PoiAccessLogSerializer(page['results'], many=True).data
        return Response(page)

    @action(detail=False, methods=['get'])
    def count(self, request):
        poi_id = request.query_params.get('poi_id')
        if not poi_id:
            return Response(
                {'error': 'poi_id is required'},
                status=status.HTTP_400_BAD_REQUEST
            )
        access_type = request.query_params.get('access_type')
        if access_type:
            count = AccessLogService.count_for_poi_and_access_type(poi_id, access_type)
        else:
            count = AccessLogService.count_for_poi(poi_id)
        return Response({'poi_id': poi_id, 'count': count})

    @action(detail=False, methods=['get'])
    def recent(self, request):
        poi_id = request.query_params.get('poi_id')
        if not poi_id:
            return Response(
                {'error': 'poi_id is required'},
                status=status.HTTP_400_BAD_REQUEST
            )
        since = parse_datetime_param(request.query_params, 'since')
        logs = AccessLogService.recent_logs_for_poi(poi_id, since)
        return Response(PoiAccessLogSerializer(logs, many=True).data)

    @action(detail=False, methods=['get'], url_path='platform-breakdown')
    def platform_breakdown(self, request):
        organization_id = request.query_params.get('organization_id')
        if not organization_id:
            return Response(
                {'error': 'organization_id is required'},
                status=status.HTTP_400_BAD_REQUEST
            )
        rows = AccessLogService.platform_breakdown(organization_id)
        return Response(PlatformBreakdownSerializer(rows, many=True).data)

    @action(detail=False, methods=['post'])
    def purge(self, request):
        cutoff = parse_datetime_param(request.data, 'before')
        deleted_count = AccessLogService.purge_older_than(cutoff)
        return Response({'deleted': deleted_count}, status=status.HTTP_200_OK)


class PlatformStatViewSet(viewsets.ModelViewSet):
    """
    ViewSet for daily per-platform statistics.

    GET    /platform-stats/?organization_id&poi_id&platform_type&date&start&end
    GET    /platform-stats/count/
    GET    /platform-stats/{id}/exists/
    DELETE /platform-stats/purge/?organization_id | ?poi_id
    """
    serializer_class = PoiPlatformStatSerializer

    def get_queryset(self):
        params = self.request.query_params
        queryset = PoiPlatformStat.objects.all()
        for param in ('organization_id', 'poi_id', 'platform_type'):
            value = params.get(param)
            if value:
                queryset = queryset.filter(**{param: value})

        stat_date = parse_date_param(params, 'date', required=False)
        if stat_date:
            queryset = queryset.filter(stat_date=stat_date)

        start = parse_date_param(params, 'start', required=False)
        end = parse_date_param(params, 'end', required=False)
        if start and end:
            validate_range(start, end)
        if start:
            queryset = queryset.filter(stat_date__gte=start)
        if end:
            queryset = queryset.filter(stat_date__lte=end)
        return queryset.order_by('-stat_date', 'platform_type')

    def perform_create(self, serializer):
        serializer.instance = PlatformStatService.create_stat(dict(serializer.validated_data))

    def perform_update(self, serializer):
        serializer.instance = PlatformStatService.update_stat(serializer.instance.id, dict(serializer.validated_data))

    def perform_destroy(self, instance):
        PlatformStatService.delete_stat(instance.id)

    @action(detail=False, methods=['get'])
    def count(self, request):
        return Response({'count': PlatformStatService.count()})

    @action(detail=True, methods=['get'])
    def exists(self, request, pk=None):
        return Response({'exists': PlatformStatService.exists(pk)})

    @action(detail=False, methods=['delete'])
    def purge(self, request):
        organization_id = request.query_params.get('organization_id')
        poi_id = request.query_params.get('poi_id')
        if organization_id:
            deleted_count = PlatformStatService.delete_for_organization(organization_id)
        elif poi_id:
            deleted_count = PlatformStatService.delete_for_poi(poi_id)
        else:
            return Response(
                {'error': 'organization_id or poi_id is required'},
                status=status.HTTP_400_BAD_REQUEST
            )
        return Response({'deleted': deleted_count})
