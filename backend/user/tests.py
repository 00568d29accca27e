from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from core.exceptions import NotFoundError
from organizations.models import Organization
from .models import AppUser
from .services import UserService


class UserServiceTests(TestCase):
    def setUp(self):
        self.org = Organization.objects.create(name="Org One", code="ORG1")
        self.user = AppUser.objects.create(organization=self.org, username='user1', email='user1@example.com')

    def test_create_user_resolves_organization(self):
        user = UserService.create_user({'organization_id': self.org.id, 'username': 'user2'})
        self.assertEqual(user.organization, self.org)
        self.assertEqual(user.role, AppUser.Role.USER)

    def test_create_user_unknown_organization(self):
        with self.assertRaises(NotFoundError):
            UserService.create_user({'organization_id': '7f1c2b56-0000-4000-8000-000000000000', 'username': 'x'})

    def test_lookups(self):
        self.assertEqual(UserService.get_user(self.user.id), self.user)
        self.assertEqual(UserService.get_by_username('user1'), self.user)
        self.assertEqual(UserService.get_by_email('USER1@example.com'), self.user)

        with self.assertRaises(NotFoundError):
            UserService.get_by_username('nobody')
        with self.assertRaises(NotFoundError):
            UserService.get_by_email('nobody@example.com')

    def test_update_user(self):
        other_org = Organization.objects.create(name="Org Two")
        user = UserService.update_user(self.user, {'organization_id': other_org.id, 'role': 'ADMIN'})
        user.refresh_from_db()
        self.assertEqual(user.organization, other_org)
        self.assertEqual(user.role, 'ADMIN')

    def test_caller_data_is_not_modified(self):
        create_data = {'organization_id': self.org.id, 'username': 'user3'}
        user = UserService.create_user(create_data)
        self.assertEqual(create_data, {'organization_id': self.org.id, 'username': 'user3'})

        update_data = {'organization_id': self.org.id, 'role': 'ADMIN'}
        UserService.update_user(user, update_data)
        self.assertEqual(update_data, {'organization_id': self.org.id, 'role': 'ADMIN'})


class UserAPITests(APITestCase):
    def setUp(self):
        self.org = Organization.objects.create(name="Org One", code="ORG1")
        self.user = AppUser.objects.create(organization=self.org, username='user1', email='user1@example.com')
        self.list_url = reverse('user:user-list')

    def test_create_user(self):
        response = self.client.post(self.list_url, {
            'organization_id': str(self.org.id),
            'username': 'user2',
            'email': '',
            'role': 'ADMIN',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['organization_id'], str(self.org.id))
        self.assertIsNone(AppUser.objects.get(username='user2').email)

    def test_duplicate_username(self):
        response = self.client.post(self.list_url, {
            'organization_id': str(self.org.id),
            'username': 'user1',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_filter_by_organization(self):
        other_org = Organization.objects.create(name="Org Two")
        AppUser.objects.create(organization=other_org, username='outsider')

        response = self.client.get(self.list_url, {'organization_id': str(self.org.id)})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([u['username'] for u in response.data['results']], ['user1'])

    def test_lookup_by_username(self):
        response = self.client.get(reverse('user:user-by-username', kwargs={'username': 'user1'}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['id'], str(self.user.id))

        response = self.client.get(reverse('user:user-by-username', kwargs={'username': 'ghost'}))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_lookup_by_email(self):
        response = self.client.get(reverse('user:user-by-email', kwargs={'email': 'user1@example.com'}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        response = self.client.get(reverse('user:user-by-email', kwargs={'email': 'not-an-email'}))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
