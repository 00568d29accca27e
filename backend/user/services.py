import logging

from core.exceptions import NotFoundError
from organizations.services import OrganizationService
from .models import AppUser

logger = logging.getLogger(__name__)


class UserService:

    @staticmethod
    def get_user(user_id) -> AppUser:
        user = AppUser.objects.filter(id=user_id).first()
        if user is None:
            raise NotFoundError.for_id("User", user_id)
        return user

    @staticmethod
    def get_by_username(username: str) -> AppUser:
        user = AppUser.objects.filter(username=username).first()
        if user is None:
            raise NotFoundError(f"User not found with username: {username}")
        return user

    @staticmethod
    def get_by_email(email: str) -> AppUser:
        user = AppUser.objects.filter(email__iexact=email).first()
        if user is None:
            raise NotFoundError(f"User not found with email: {email}")
        return user

    @staticmethod
    def create_user(data: dict) -> AppUser:
        data = dict(data)
        organization = OrganizationService.get_organization(data.pop('organization_id'))
        user = AppUser.objects.create(organization=organization, **data)
        logger.info(f"User {user.username} created in organization {organization.id}")
        return user

    @staticmethod
    def update_user(user: AppUser, data: dict) -> AppUser:
        data = dict(data)
        if 'organization_id' in data:
            user.organization = OrganizationService.get_organization(data.pop('organization_id'))
        for field, value in data.items():
            setattr(user, field, value)
        user.save()
        logger.info(f"User {user.id} updated")
        return user
