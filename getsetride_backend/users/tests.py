from types import SimpleNamespace

from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from getsetride_backend.exceptions import Forbidden
from .permissions import (
    ensure_booking_participant,
    ensure_host_or_admin,
    is_admin,
    is_booking_participant,
    is_host_or_admin,
)

User = get_user_model()


class AuthApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def signup(self, **overrides):
        payload = {
            'fullName': 'Asha Rao', 'email': 'Asha@Example.com',
            'password': 'secret123', 'confirmPassword': 'secret123', 'phone': '9999999999',
        }
        payload.update(overrides)
        return self.client.post(reverse('signup'), payload, format='json')

    def test_signup_returns_token_and_user(self):
        response = self.signup()
        self.assertEqual(response.status_code, 201)
        self.assertTrue(response.data['success'])
        self.assertTrue(response.data['token'])
        self.assertEqual(response.data['user']['email'], 'asha@example.com')
        self.assertEqual(response.data['user']['role'], 'user')
        self.assertTrue(User.objects.get(email='asha@example.com').check_password('secret123'))

    def test_signup_validation(self):
        response = self.signup(confirmPassword='different')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['message'], 'Passwords do not match')

        response = self.signup(password='123', confirmPassword='123')
        self.assertEqual(response.status_code, 400)
        self.assertIn('password', response.data['errors'])

        self.signup()
        response = self.signup(email='asha@example.com')
        self.assertEqual(response.status_code, 400)
        self.assertIn('User already exists with this email', response.data['message'])

    def test_login_and_me(self):
        self.signup()
        response = self.client.post(
            reverse('login'), {'email': 'ASHA@example.com', 'password': 'secret123'}, format='json'
        )
        self.assertEqual(response.status_code, 200)
        token = response.data['token']

        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
        response = self.client.get(reverse('me'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['user']['fullName'], 'Asha Rao')

    def test_login_with_wrong_password(self):
        self.signup()
        response = self.client.post(reverse('login'), {'email': 'asha@example.com', 'password': 'nope'}, format='json')
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.data, {'success': False, 'message': 'Invalid credentials'})

    def test_refresh_token(self):
        refresh = self.signup().data['refresh']
        response = self.client.post(reverse('token_refresh'), {'refresh': refresh}, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertIn('access', response.data)

    def test_me_requires_token(self):
        response = self.client.get(reverse('me'))
        self.assertEqual(response.status_code, 401)
        self.assertFalse(response.data['success'])

    def test_update_profile(self):
        user = User.objects.create_user(email='p@example.com', password='secret123', full_name='Old Name')
        self.client.force_authenticate(user=user)
        response = self.client.put(reverse('profile'), {'fullName': 'New Name', 'phone': '12345'}, format='json')
        self.assertEqual(response.status_code, 200)
        user.refresh_from_db()
        self.assertEqual(user.full_name, 'New Name')
        self.assertEqual(user.phone, '12345')

    def test_logout(self):
        user = User.objects.create_user(email='p@example.com', password='secret123', full_name='P')
        self.client.force_authenticate(user=user)
        response = self.client.post(reverse('logout'))
        self.assertEqual(response.status_code, 200)


class UserManagerTests(TestCase):
    def test_superuser_is_admin(self):
        admin = User.objects.create_superuser(email='root@example.com', password='secret123', full_name='Root')
        self.assertEqual(admin.role, User.ADMIN)
        self.assertTrue(admin.is_staff)
        self.assertTrue(is_admin(admin))

    def test_email_is_required(self):
        with self.assertRaises(ValueError):
            User.objects.create_user(email='', password='secret123')


class AuthorizationGuardTests(TestCase):
    def setUp(self):
        self.host = User.objects.create_user(email='host@example.com', password='secret123', full_name='Host')
        self.renter = User.objects.create_user(email='renter@example.com', password='secret123', full_name='Renter')
        self.stranger = User.objects.create_user(email='x@example.com', password='secret123', full_name='X')
        self.admin = User.objects.create_user(
            email='admin@example.com', password='secret123', full_name='Admin', role=User.ADMIN
        )
        self.booking = SimpleNamespace(user_id=self.renter.pk, host_id=self.host.pk)

    def test_host_or_admin(self):
        self.assertTrue(is_host_or_admin(self.host, self.host.pk))
        self.assertTrue(is_host_or_admin(self.admin, self.host.pk))
        self.assertFalse(is_host_or_admin(self.renter, self.host.pk))
        self.assertFalse(is_host_or_admin(AnonymousUser(), self.host.pk))

    def test_booking_participant(self):
        self.assertTrue(is_booking_participant(self.renter, self.booking))
        self.assertTrue(is_booking_participant(self.host, self.booking))
        self.assertTrue(is_booking_participant(self.admin, self.booking))
        self.assertFalse(is_booking_participant(self.stranger, self.booking))

    def test_ensure_helpers_raise_forbidden(self):
        with self.assertRaisesMessage(Forbidden, 'Not authorized to delete this car'):
            ensure_host_or_admin(self.renter, self.host.pk, 'Not authorized to delete this car')
        with self.assertRaises(Forbidden):
            ensure_booking_participant(self.stranger, self.booking)
        ensure_booking_participant(self.host, self.booking)
