from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from .models import AppUser
from .serializers import AppUserSerializer
from .services import UserService


class AppUserViewSet(viewsets.ModelViewSet):
    """
    CRUD for platform users plus lookups by username and email.
    """
    queryset = AppUser.objects.all().order_by('username')
    serializer_class = AppUserSerializer

    def get_queryset(self):
        queryset = super().get_queryset()
        organization_id = self.request.query_params.get('organization_id')
        if organization_id:
            queryset = queryset.filter(organization_id=organization_id)
        return queryset

    def perform_create(self, serializer):
        serializer.instance = UserService.create_user(dict(serializer.validated_data))

    def perform_update(self, serializer):
        serializer.instance = UserService.update_user(serializer.instance, dict(serializer.validated_data))

    @action(detail=False, methods=['get'], url_path=r'by-username/(?P<username>[^/]+)')
    def by_username(self, request, username=None):
        user = UserService.get_by_username(username)
        return Response(self.get_serializer(user).data)

    @action(detail=False, methods=['get'], url_path=r'by-email/(?P<email>[^/]+)')
    def by_email(self, request, email=None):
        if '@' not in email:
            return Response(
                {'error': 'Invalid email address'},
                status=status.HTTP_400_BAD_REQUEST
            )
        user = UserService.get_by_email(email)
        return Response(self.get_serializer(user).data)
