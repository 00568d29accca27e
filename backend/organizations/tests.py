from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from core.exceptions import NotFoundError
from .models import Organization
from .services import OrganizationService


class OrganizationServiceTests(TestCase):
    def setUp(self):
        self.org = Organization.objects.create(name="Yaounde Tourism", code="YDE")

    def test_get_organization(self):
        self.assertEqual(OrganizationService.get_organization(self.org.id), self.org)
        with self.assertRaises(NotFoundError):
            OrganizationService.get_organization('7f1c2b56-0000-4000-8000-000000000000')

    def test_get_by_code(self):
        self.assertEqual(OrganizationService.get_by_code("YDE"), self.org)
        with self.assertRaises(NotFoundError):
            OrganizationService.get_by_code("DLA")


class OrganizationAPITests(APITestCase):
    def setUp(self):
        self.org = Organization.objects.create(name="Yaounde Tourism", code="YDE")
        self.list_url = reverse('organizations:organization-list')

    def test_create_organizations_without_code(self):
        for name in ("First", "Second"):
            response = self.client.post(self.list_url, {'name': name, 'code': ''}, format='json')
            self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Organization.objects.filter(code__isnull=True).count(), 2)

    def test_duplicate_code(self):
        response = self.client.post(self.list_url, {'name': "Copy", 'code': 'YDE'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_by_code(self):
        response = self.client.get(reverse('organizations:organization-by-code', kwargs={'code': 'YDE'}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['id'], str(self.org.id))

        response = self.client.get(reverse('organizations:organization-by-code', kwargs={'code': 'NOPE'}))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data, {'error': 'Organization not found with code: NOPE'})
