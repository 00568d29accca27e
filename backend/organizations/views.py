from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from .models import Organization
from .serializers import OrganizationSerializer
from .services import OrganizationService


class OrganizationViewSet(viewsets.ModelViewSet):
    """
    CRUD for organizations plus lookup by code.
    """
    queryset = Organization.objects.all()
    serializer_class = OrganizationSerializer

    @action(detail=False, methods=['get'], url_path=r'by-code/(?P<code>[^/.]+)')
    def by_code(self, request, code=None):
        organization = OrganizationService.get_by_code(code)
        return Response(self.get_serializer(organization).data)
