from unittest.mock import patch

from django.db import DatabaseError
from django.test import SimpleTestCase
from django.urls import reverse
from rest_framework import serializers, status
from rest_framework.test import APITestCase

from .exceptions import NotFoundError, StorageError, ValidationError
from .fields import StringListField
from .handlers import api_exception_handler


class StringListFieldTests(SimpleTestCase):
    def test_comma_separated_string(self):
        field = StringListField()
        self.assertEqual(field.to_internal_value("Wi-Fi, Parking ,, "), ["Wi-Fi", "Parking"])

    def test_list_is_trimmed(self):
        field = StringListField()
        self.assertEqual(field.to_internal_value([" a", "b ", ""]), ["a", "b"])

    def test_rejects_other_types(self):
        field = StringListField()
        with self.assertRaises(serializers.ValidationError):
            field.to_internal_value(42)


class ExceptionHandlerTests(SimpleTestCase):
    def test_status_mapping(self):
        cases = [
            (ValidationError("bad radius"), status.HTTP_400_BAD_REQUEST),
            (NotFoundError.for_id("POI", "42"), status.HTTP_404_NOT_FOUND),
            (StorageError("db down"), status.HTTP_500_INTERNAL_SERVER_ERROR),
            (DatabaseError("db down"), status.HTTP_500_INTERNAL_SERVER_ERROR),
        ]
        for exc, expected in cases:
            response = api_exception_handler(exc, {})
            self.assertEqual(response.status_code, expected)
            self.assertIn('error', response.data)

    def test_not_found_message(self):
        response = api_exception_handler(NotFoundError.for_id("POI", "42"), {})
        self.assertEqual(response.data, {'error': 'POI not found with ID: 42'})

    def test_unknown_exceptions_are_left_to_drf(self):
        self.assertIsNone(api_exception_handler(KeyError("x"), {}))


class HealthViewTests(APITestCase):
    def test_health_up(self):
        response = self.client.get(reverse('health'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'UP')

    def test_health_down(self):
        with patch('core.views.connection') as mock_connection:
            mock_connection.cursor.side_effect = DatabaseError("unreachable")
            response = self.client.get(reverse('health'))
        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
