import logging

from core.exceptions import NotFoundError
from .models import Organization

logger = logging.getLogger(__name__)


class OrganizationService:
    """Explicit lookups used by the other apps to resolve organization references."""

    @staticmethod
    def get_organization(organization_id) -> Organization:
        organization = Organization.objects.filter(id=organization_id).first()
        if organization is None:
            raise NotFoundError.for_id("Organization", organization_id)
        return organization

    @staticmethod
    def get_by_code(code: str) -> Organization:
        logger.debug(f"Fetching organization with code: {code}")
        organization = Organization.objects.filter(code=code).first()
        if organization is None:
            raise NotFoundError(f"Organization not found with code: {code}")
        return organization
