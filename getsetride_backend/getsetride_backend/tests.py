from django.core.exceptions import PermissionDenied
from django.http import Http404
from django.test import SimpleTestCase, TestCase
from rest_framework import serializers

from .exceptions import Conflict, InvalidState, api_exception_handler


class HealthCheckTests(TestCase):
    def test_health(self):
        response = self.client.get('/health')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {'status': 'OK', 'message': 'Server is running'})


class ExceptionHandlerTests(SimpleTestCase):
    def handle(self, exc):
        return api_exception_handler(exc, {'view': None})

    def test_api_errors_use_envelope(self):
        response = self.handle(Conflict('Car is already booked for selected dates'))
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data, {'success': False, 'message': 'Car is already booked for selected dates'})

        response = self.handle(InvalidState())
        self.assertEqual(response.data['message'], InvalidState.default_detail)

    def test_validation_errors_are_flattened(self):
        response = self.handle(serializers.ValidationError({'seats': ['Seats must be between 2 and 8.']}))
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['message'], 'seats: Seats must be between 2 and 8.')
        self.assertEqual(response.data['errors']['seats'], ['Seats must be between 2 and 8.'])

    def test_django_errors_are_mapped(self):
        self.assertEqual(self.handle(Http404('Car not found')).status_code, 404)
        self.assertEqual(self.handle(PermissionDenied()).status_code, 403)

    def test_unexpected_errors_become_500(self):
        with self.assertLogs('getsetride_backend.exceptions', level='ERROR'):
            response = self.handle(RuntimeError('boom'))
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data, {'success': False, 'message': 'Server Error'})
