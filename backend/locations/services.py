"""
Domain services for the locations app: the geospatial/ranked query layer
and the POI lifecycle (create, partial update, status and popularity changes).
"""
import logging
import math
import uuid
from typing import Dict, List, Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, transaction
from django.db.models import F, FloatField, Q, QuerySet, Value
from django.db.models.functions import ACos, Cos, Greatest, Least, Radians, Sin

from core.db import UnicodeLower
from core.exceptions import NotFoundError, StorageError, ValidationError
from organizations.services import OrganizationService
from user.services import UserService
from .models import PointOfInterest, validate_coordinates

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0

MIN_POPULARITY_SCORE = 0.0
MAX_POPULARITY_SCORE = 100.0


def validate_point(lat, lon):
    """Query center validation: both coordinates required and within range."""
    if lat is None or lon is None:
        raise ValidationError("Both latitude and longitude are required")
    validate_coordinates(lat, lon)


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Great-circle distance in kilometers, spherical law of cosines form.
    Mirrors the SQL expression built by PoiQueryService.distance_expression().
    """
    cos_angle = (
        math.cos(math.radians(lat1)) * math.cos(math.radians(lat2))
        * math.cos(math.radians(lon2) - math.radians(lon1))
        + math.sin(math.radians(lat1)) * math.sin(math.radians(lat2))
    )
    return EARTH_RADIUS_KM * math.acos(max(-1.0, min(1.0, cos_angle)))


class PoiQueryService:
    """
    Read-only query layer over active POIs: radius search, filtered search
    and popularity ranking. Every method returns a list (possibly empty) or
    raises a typed error; database failures surface as StorageError.
    """

    @staticmethod
    def active_pois() -> QuerySet:
        return PointOfInterest.objects.filter(is_active=True)

    @staticmethod
    def distance_expression(lat: float, lon: float):
        """
        SQL expression for the Haversine distance (km) between (lat, lon) and each row:
        6371 * acos(cos(rad(lat1))*cos(rad(lat2))*cos(rad(lon2)-rad(lon1)) + sin(rad(lat1))*sin(rad(lat2)))
        The acos argument is clamped to [-1, 1]; floating point error at
        distance ~0 can otherwise push it just above 1.
        """
        float_field = FloatField()
        cos_lat1 = Value(math.cos(math.radians(lat)), output_field=float_field)
        sin_lat1 = Value(math.sin(math.radians(lat)), output_field=float_field)
        rad_lon1 = Value(math.radians(lon), output_field=float_field)

        cos_angle = (
            cos_lat1 * Cos(Radians(F('latitude'))) * Cos(Radians(F('longitude')) - rad_lon1)
            + sin_lat1 * Sin(Radians(F('latitude')))
        )
        clamped = Least(
            Greatest(cos_angle, Value(-1.0, output_field=float_field), output_field=float_field),
            Value(1.0, output_field=float_field),
            output_field=float_field,
        )
        return Value(EARTH_RADIUS_KM, output_field=float_field) * ACos(clamped, output_field=float_field)

    @classmethod
    def find_nearby(cls, lat: float, lon: float, radius_km: float = 10.0,
                    filters: Optional[Dict] = None) -> List[PointOfInterest]:
        """
        Active POIs within radius_km of (lat, lon), nearest first.

        Args:
            lat: Latitude of the query point, -90 to 90
            lon: Longitude of the query point, -180 to 180
            radius_km: Search radius in kilometers, must be positive
            filters: Optional search_with_filters() criteria to combine with the radius

        Returns:
            List of POIs ordered by distance then name; each carries a
            `distance_km` attribute
        """
        validate_point(lat, lon)
        lat, lon = float(lat), float(lon)
        radius_km = cls._validate_radius(radius_km)

        # Latitude band prefilter: no point outside it can be within the radius
        lat_delta = math.degrees(radius_km / EARTH_RADIUS_KM)

        queryset = cls.active_pois().filter(
            latitude__isnull=False,
            longitude__isnull=False,
            latitude__gte=lat - lat_delta,
            latitude__lte=lat + lat_delta,
        )
        if filters:
            queryset = cls._apply_filters(queryset, **filters)

        queryset = queryset.annotate(
            distance_km=cls.distance_expression(lat, lon)
        ).filter(distance_km__lte=radius_km)

        pois = cls._evaluate(queryset, f"nearby search around ({lat}, {lon})")
        # Python string order is codepoint order, independent of the DB collation
        pois.sort(key=lambda poi: (poi.distance_km, poi.name))

        logger.debug(f"Found {len(pois)} POIs within {radius_km}km of ({lat}, {lon})")
        return pois

    @classmethod
    def search_with_filters(cls, organization_id=None, poi_type: Optional[str] = None,
                            category: Optional[str] = None, city: Optional[str] = None,
                            country: Optional[str] = None,
                            search_term: Optional[str] = None) -> List[PointOfInterest]:
        """
        Active POIs matching every provided filter, most popular first.
        organization_id is an exact match; type, category, city and country are
        case-insensitive exact matches; search_term is a case-insensitive
        substring of name or description.
        """
        queryset = cls._apply_filters(
            cls.active_pois(),
            organization_id=organization_id,
            poi_type=poi_type,
            category=category,
            city=city,
            country=country,
            search_term=search_term,
        ).order_by('-popularity_score', 'name')

        return cls._evaluate(queryset, "filtered search")

    @classmethod
    def find_top_popular(cls, limit: int) -> List[PointOfInterest]:
        """
        At most `limit` active POIs by popularity, oldest first on ties.
        A non-positive limit yields an empty list.
        """
        if limit is None or limit <= 0:
            return []

        queryset = cls.active_pois().order_by('-popularity_score', 'created_at')[:limit]
        return cls._evaluate(queryset, "top popular")

    @staticmethod
    def _validate_radius(radius_km) -> float:
        try:
            radius_km = float(radius_km)
        except (TypeError, ValueError):
            raise ValidationError("Radius must be a number")
        if not math.isfinite(radius_km) or radius_km <= 0:
            raise ValidationError("Radius must be a positive number of kilometers")
        return radius_km

    @staticmethod
    def _apply_filters(queryset: QuerySet, organization_id=None, poi_type=None, category=None,
                       city=None, country=None, search_term=None) -> QuerySet:
        if organization_id:
            try:
                organization_id = uuid.UUID(str(organization_id))
            except ValueError:
                raise ValidationError(f"Invalid organization ID: {organization_id}")
            queryset = queryset.filter(organization_id=organization_id)

        # Case-insensitive exact matches, compared on Unicode-lowered values
        exact_matches = {'poi_type': poi_type, 'category': category, 'city': city, 'country': country}
        for field, value in exact_matches.items():
            if value:
                queryset = queryset.alias(
                    **{f'{field}_lower': UnicodeLower(field)}
                ).filter(**{f'{field}_lower': value.lower()})

        if search_term:
            term = search_term.lower()
            queryset = queryset.alias(
                name_lower=UnicodeLower('name'),
                description_lower=UnicodeLower('description'),
            ).filter(Q(name_lower__contains=term) | Q(description_lower__contains=term))

        return queryset

    @staticmethod
    def _evaluate(queryset: QuerySet, description: str) -> List[PointOfInterest]:
        try:
            return list(queryset)
        except DatabaseError as e:
            logger.error(f"Database error during {description}: {str(e)}")
            raise StorageError(f"Could not complete {description}") from e


class PoiService:
    """
    POI lifecycle: creation, partial update, activation and popularity changes.
    Organization and user references are resolved with explicit lookups.
    """

    def __init__(self, notification_service=None):
        self.notification_service = notification_service

    @staticmethod
    def get_poi(poi_id) -> PointOfInterest:
        try:
            poi = PointOfInterest.objects.filter(id=poi_id).first()
        except (ValueError, DjangoValidationError) as e:
            raise ValidationError(f"Invalid POI ID: {poi_id}") from e
        if poi is None:
            raise NotFoundError.for_id("POI", poi_id)
        return poi

    def create_poi(self, data: Dict) -> PointOfInterest:
        data = dict(data)
        organization = OrganizationService.get_organization(data.pop('organization_id'))

        created_by_id = data.pop('created_by_id', None)
        created_by = UserService.get_user(created_by_id) if created_by_id else None

        poi = PointOfInterest(organization=organization, created_by=created_by, **data)
        poi.save()
        logger.info(f"POI {poi.id} '{poi.name}' created for organization {organization.id}")

        self._notify(created_by, 'POI_CREATED', "POI created", f"'{poi.name}' has been created", poi)
        return poi

    def update_poi(self, poi_id, data: Dict, user_id=None) -> PointOfInterest:
        """
        Partial update: only keys with a non-None value overwrite the stored fields.
        The coordinate pair is validated on the merged result.
        """
        with transaction.atomic():
            poi = self.get_poi(poi_id)

            changes = {field: value for field, value in data.items() if value is not None}
            if 'organization_id' in changes:
                poi.organization = OrganizationService.get_organization(changes.pop('organization_id'))
            changes.pop('created_by_id', None)

            for field, value in changes.items():
                setattr(poi, field, value)

            updated_by = UserService.get_user(user_id) if user_id else None
            if updated_by is not None:
                poi.updated_by = updated_by

            poi.save()

        logger.info(f"POI {poi.id} updated ({', '.join(sorted(changes)) or 'no field changes'})")
        self._notify(poi.created_by, 'POI_UPDATED', "POI updated", f"'{poi.name}' has been updated", poi)
        return poi

    def deactivate_poi(self, poi_id, user_id=None, reason: Optional[str] = None) -> PointOfInterest:
        with transaction.atomic():
            poi = self.get_poi(poi_id)
            user = UserService.get_user(user_id) if user_id else None

            poi.is_active = False
            poi.deactivation_reason = reason or ""
            poi.deactivated_by = user
            if user is not None:
                poi.updated_by = user
            poi.save()

        logger.info(f"POI {poi.id} deactivated")
        self._notify(poi.created_by, 'POI_DEACTIVATED', "POI deactivated",
                     f"'{poi.name}' has been deactivated", poi)
        return poi

    def activate_poi(self, poi_id, user_id=None) -> PointOfInterest:
        with transaction.atomic():
            poi = self.get_poi(poi_id)
            user = UserService.get_user(user_id) if user_id else None

            poi.is_active = True
            poi.deactivation_reason = ""
            poi.deactivated_by = None
            if user is not None:
                poi.updated_by = user
            poi.save()

        logger.info(f"POI {poi.id} activated")
        return poi

    def update_popularity_score(self, poi_id, new_score) -> PointOfInterest:
        """
        Assigns a new popularity score, which must lie in [0, 100].
        Out-of-range input is rejected before anything is written.
        """
        try:
            score = float(new_score)
        except (TypeError, ValueError):
            raise ValidationError("Popularity score must be a number")
        if not math.isfinite(score) or not (MIN_POPULARITY_SCORE <= score <= MAX_POPULARITY_SCORE):
            raise ValidationError(
                f"Popularity score must be between {MIN_POPULARITY_SCORE:g} and {MAX_POPULARITY_SCORE:g}"
            )

        with transaction.atomic():
            poi = self.get_poi(poi_id)
            poi.popularity_score = score
            poi.save(update_fields=['popularity_score', 'updated_at'])

        logger.info(f"Popularity score of POI {poi.id} set to {score}")
        return poi

    def _notify(self, recipient, notification_type, title, content, poi):
        if self.notification_service is None or recipient is None:
            return
        self.notification_service.create_and_send(
            recipient_id=recipient.id,
            notification_type=notification_type,
            title=title,
            content=content,
            channel='WEBSOCKET',
            metadata={'poi_id': str(poi.id)},
        )
