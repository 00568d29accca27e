"""
API views for locations app endpoints.
"""
from django.conf import settings
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from notifications.services import get_notification_service
from .models import PointOfInterest
from .serializers import PointOfInterestListSerializer, PointOfInterestSerializer
from .services import PoiQueryService, PoiService


def get_poi_service() -> PoiService:
    return PoiService(notification_service=get_notification_service())


class POIViewSet(viewsets.ModelViewSet):
    """
    ViewSet for POI CRUD operations, ranked search and radius queries.

    GET    /pois/search/       - Filtered search, most popular first
    GET    /pois/nearby/       - Radius search, nearest first
    GET    /pois/popular/      - Top POIs by popularity
    PATCH  /pois/{id}/popularity/ - Set the popularity score
    POST   /pois/{id}/activate/, /pois/{id}/deactivate/
    """
    queryset = PointOfInterest.objects.all().order_by('-created_at')
    serializer_class = PointOfInterestSerializer

    def get_serializer_class(self):
        """Use lightweight serializer for list views"""
        if self.action == 'list':
            return PointOfInterestListSerializer
        return PointOfInterestSerializer

    def get_queryset(self):
        queryset = super().get_queryset()
        organization_id = self.request.query_params.get('organization_id')
        if organization_id and self.action == 'list':
            queryset = queryset.filter(organization_id=organization_id)
        return queryset

    def perform_create(self, serializer):
        serializer.instance = get_poi_service().create_poi(dict(serializer.validated_data))

    def perform_update(self, serializer):
        data = dict(serializer.validated_data)
        user_id = self.request.query_params.get('user_id') or self.request.data.get('user_id')
        serializer.instance = get_poi_service().update_poi(serializer.instance.id, data, user_id=user_id)

    @staticmethod
    def _search_filters(params):
        return {
            'organization_id': params.get('organization_id') or None,
            'poi_type': params.get('type') or None,
            'category': params.get('category') or None,
            'city': params.get('city') or None,
            'country': params.get('country') or None,
            'search_term': params.get('q') or None,
        }

    @action(detail=False, methods=['get'])
    def search(self, request):
        """
        Search active POIs.

        Query parameters (all optional, combined with AND):
        - organization_id: UUID
        - type, category, city, country: case-insensitive exact match
        - q: case-insensitive substring of name or description
        """
        pois = PoiQueryService.search_with_filters(**self._search_filters(request.query_params))
        serializer = PointOfInterestSerializer(pois, many=True)
        return Response(serializer.data)

    @action(detail=False, methods=['get'])
    def nearby(self, request):
        """
        Find active POIs near a location.

        Query parameters:
        - latitude: float (required)
        - longitude: float (required)
        - radius_km: float (default: POI_DEFAULT_RADIUS_KM)
        - organization_id, type, category, city, country, q: optional filters
        """
        try:
            lat = float(request.query_params.get('latitude'))
            lon = float(request.query_params.get('longitude'))
            radius_km = float(request.query_params.get('radius_km', settings.POI_DEFAULT_RADIUS_KM))
        except (TypeError, ValueError):
            return Response(
                {'error': 'Invalid parameters. Required: latitude, longitude (float), radius_km (float)'},
                status=status.HTTP_400_BAD_REQUEST
            )

        filters = {key: value for key, value in self._search_filters(request.query_params).items() if value}
        pois = PoiQueryService.find_nearby(lat, lon, radius_km, filters=filters)
        serializer = PointOfInterestSerializer(pois, many=True)
        return Response(serializer.data)

    @action(detail=False, methods=['get'])
    def popular(self, request):
        """
        Top active POIs by popularity score.

        Query parameters:
        - limit: int >= 0 (default: POI_DEFAULT_POPULAR_LIMIT)
        """
        try:
            limit = int(request.query_params.get('limit', settings.POI_DEFAULT_POPULAR_LIMIT))
        except (TypeError, ValueError):
            return Response(
                {'error': 'Invalid parameters. limit must be an integer'},
                status=status.HTTP_400_BAD_REQUEST
            )
        if limit < 0:
            return Response(
                {'error': 'limit must not be negative'},
                status=status.HTTP_400_BAD_REQUEST
            )

        pois = PoiQueryService.find_top_popular(limit)
        serializer = PointOfInterestSerializer(pois, many=True)
        return Response(serializer.data)

    @action(detail=True, methods=['patch'])
    def popularity(self, request, pk=None):
        """
        Set the popularity score of a POI.

        Body parameters:
        - score: float in [0, 100] (required)
        """
        poi = get_poi_service().update_popularity_score(pk, request.data.get('score'))
        return Response(PointOfInterestSerializer(poi).data)

    @action(detail=True, methods=['post'])
    def activate(self, request, pk=None):
        poi = get_poi_service().activate_poi(pk, user_id=request.data.get('user_id'))
        return Response(PointOfInterestSerializer(poi).data)

    @action(detail=True, methods=['post'])
    def deactivate(self, request, pk=None):
        """
        Body parameters:
        - user_id: UUID of the acting user (optional)
        - reason: str (optional)
        """
        poi = get_poi_service().deactivate_poi(
            pk,
            user_id=request.data.get('user_id'),
            reason=request.data.get('reason'),
        )
        return Response(PointOfInterestSerializer(poi).data)
