from datetime import datetime, timezone as dt_timezone
from decimal import Decimal
from io import StringIO
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.core.management import CommandError, call_command
from django.test import SimpleTestCase, TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from bookings.models import Booking
from .filters import resolve_ordering
from .models import Car
from .serializers import CarSerializer

User = get_user_model()

_plate_counter = iter(range(1000, 10000))


def make_car(host, **overrides):
    data = {
        'brand': 'Toyota', 'model': 'Camry', 'year': 2023, 'category': 'Sedan',
        'transmission': 'Automatic', 'fuel_type': 'Petrol', 'seats': 5,
        'price_per_day': Decimal('2500.00'), 'city': 'Mumbai',
        'license_plate': f"MH01AB{next(_plate_counter)}",
    }
    data.update(overrides)
    return Car.objects.create(host=host, **data)


def make_booking(car, user, status=Booking.CONFIRMED, **overrides):
    data = {
        'start_date': datetime(2030, 1, 1, tzinfo=dt_timezone.utc),
        'end_date': datetime(2030, 1, 3, tzinfo=dt_timezone.utc),
        'pickup_time': '10:00', 'dropoff_time': '18:00', 'total_days': 2,
        'price_per_day': car.price_per_day, 'total_amount': car.price_per_day * 2,
        'status': status, 'payment_status': Booking.PAID,
    }
    data.update(overrides)
    return Booking.objects.create(car=car, user=user, host=car.host, **data)


class OrderingTests(SimpleTestCase):
    def test_default_is_newest_first(self):
        self.assertEqual(resolve_ordering(None), ['-created_at', '-id'])

    def test_known_keys(self):
        self.assertEqual(resolve_ordering('pricePerDay'), ['price_per_day', '-id'])
        self.assertEqual(resolve_ordering('-rating'), ['-rating_average', '-id'])

    def test_unknown_key_falls_back(self):
        self.assertEqual(resolve_ordering('-host__password'), ['-created_at', '-id'])


class CarListingTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.host = User.objects.create_user(email='host@example.com', password='secret123', full_name='Host')
        self.camry = make_car(self.host, price_per_day=Decimal('2500'), description='Smooth and quiet')
        self.thar = make_car(
            self.host, brand='Mahindra', model='Thar', category='SUV', transmission='Manual',
            fuel_type='Diesel', seats=4, price_per_day=Decimal('3500'), city='Pune',
        )
        self.tesla = make_car(
            self.host, brand='Tesla', model='Model 3', category='Electric', fuel_type='Electric',
            seats=5, price_per_day=Decimal('5000'), city='Navi Mumbai', rating_average=4.8, rating_count=3,
        )
        self.hidden = make_car(self.host, brand='Hidden', is_active=False)
        self.url = reverse('car-list')

    def ids(self, response):
        return [car['id'] for car in response.data['cars']]

    def test_lists_active_cars_newest_first(self):
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.data['success'])
        self.assertEqual(self.ids(response), [self.tesla.id, self.thar.id, self.camry.id])
        self.assertEqual(response.data['total'], 3)
        self.assertEqual(response.data['totalPages'], 1)
        self.assertEqual(response.data['currentPage'], 1)

    def test_wire_shape(self):
        car = self.client.get(self.url, {'search': 'tesla'}).data['cars'][0]
        self.assertEqual(car['fuelType'], 'Electric')
        self.assertEqual(car['location']['city'], 'Navi Mumbai')
        self.assertEqual(car['rating'], {'average': 4.8, 'count': 3})
        self.assertEqual(car['host']['fullName'], 'Host')
        self.assertTrue(car['isActive'])

    def test_filters(self):
        self.assertEqual(self.ids(self.client.get(self.url, {'category': 'suv'})), [self.thar.id])
        self.assertEqual(self.ids(self.client.get(self.url, {'transmission': 'manual'})), [self.thar.id])
        self.assertEqual(self.ids(self.client.get(self.url, {'fuelType': 'electric'})), [self.tesla.id])
        self.assertEqual(set(self.ids(self.client.get(self.url, {'city': 'mumbai'}))), {self.camry.id, self.tesla.id})
        self.assertEqual(self.ids(self.client.get(self.url, {'seats': 5, 'minPrice': 3000})), [self.tesla.id])
        self.assertEqual(self.ids(self.client.get(self.url, {'maxPrice': 3500, 'sort': 'pricePerDay'})),
                         [self.camry.id, self.thar.id])

    def test_inverted_price_range_is_empty(self):
        response = self.client.get(self.url, {'minPrice': 4000, 'maxPrice': 3000})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['cars'], [])

    def test_search_matches_brand_model_or_description(self):
        self.assertEqual(self.ids(self.client.get(self.url, {'search': 'THAR'})), [self.thar.id])
        self.assertEqual(self.ids(self.client.get(self.url, {'search': 'quiet'})), [self.camry.id])
        self.assertEqual(self.client.get(self.url, {'search': 'hidden'}).data['cars'], [])

    def test_sorting(self):
        response = self.client.get(self.url, {'sort': '-pricePerDay'})
        self.assertEqual(self.ids(response), [self.tesla.id, self.thar.id, self.camry.id])
        response = self.client.get(self.url, {'sort': '-rating'})
        self.assertEqual(self.ids(response)[0], self.tesla.id)

    def test_pagination(self):
        response = self.client.get(self.url, {'limit': 2, 'page': 2, 'sort': 'pricePerDay'})
        self.assertEqual(self.ids(response), [self.tesla.id])
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['total'], 3)
        self.assertEqual(response.data['totalPages'], 2)
        self.assertEqual(response.data['currentPage'], 2)

        response = self.client.get(self.url, {'limit': 2, 'page': 9})
        self.assertEqual(response.data['cars'], [])

    def test_invalid_number_filter(self):
        response = self.client.get(self.url, {'minPrice': 'cheap'})
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.data['success'])


class CarManagementTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.host = User.objects.create_user(email='host@example.com', password='secret123', full_name='Host')
        self.renter = User.objects.create_user(email='renter@example.com', password='secret123', full_name='Renter')
        self.admin = User.objects.create_superuser(email='admin@example.com', password='secret123', full_name='Admin')
        self.car = make_car(self.host)

    def payload(self, **overrides):
        data = {
            'brand': 'Honda', 'model': 'City', 'year': 2022, 'category': 'Sedan',
            'transmission': 'Manual', 'fuelType': 'Diesel', 'seats': 5, 'pricePerDay': 2000,
            'location': {'city': 'Mumbai', 'address': 'Andheri East', 'state': 'Maharashtra'},
            'features': ['AC'], 'licensePlate': 'mh02cd5678',
        }
        data.update(overrides)
        return data

    def test_create_requires_login(self):
        response = self.client.post(reverse('car-list'), self.payload(), format='json')
        self.assertEqual(response.status_code, 401)

    def test_create_car(self):
        self.client.force_authenticate(user=self.renter)
        response = self.client.post(reverse('car-list'), self.payload(), format='json')
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data['message'], 'Car listed successfully')
        car = Car.objects.get(pk=response.data['car']['id'])
        self.assertEqual(car.host, self.renter)
        self.assertEqual(car.license_plate, 'MH02CD5678')
        self.assertEqual(car.address, 'Andheri East')

    def test_duplicate_plate(self):
        self.client.force_authenticate(user=self.renter)
        response = self.client.post(
            reverse('car-list'), self.payload(licensePlate=self.car.license_plate.lower()), format='json'
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['message'], 'A car with this license plate already exists')

    def test_invalid_year_and_seats(self):
        self.client.force_authenticate(user=self.renter)
        response = self.client.post(reverse('car-list'), self.payload(year=1980), format='json')
        self.assertEqual(response.status_code, 400)
        self.assertIn('year', response.data['errors'])
        response = self.client.post(reverse('car-list'), self.payload(seats=12), format='json')
        self.assertIn('seats', response.data['errors'])

    def test_detail_includes_booked_dates(self):
        make_booking(self.car, self.renter)
        make_booking(self.car, self.renter, status=Booking.CANCELLED)
        response = self.client.get(reverse('car-detail', args=[self.car.pk]))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data['bookedDates']), 1)
        self.assertEqual(response.data['car']['host']['email'], 'host@example.com')

    def test_detail_missing(self):
        response = self.client.get(reverse('car-detail', args=[999999]))
        self.assertEqual(response.status_code, 404)
        self.assertFalse(response.data['success'])

    def test_update_guarded_by_host_or_admin(self):
        url = reverse('car-detail', args=[self.car.pk])

        self.client.force_authenticate(user=self.renter)
        response = self.client.put(url, {'pricePerDay': 1}, format='json')
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.data['message'], 'Not authorized to update this car')

        self.client.force_authenticate(user=self.host)
        response = self.client.put(url, {'pricePerDay': 2800}, format='json')
        self.assertEqual(response.status_code, 200)
        self.car.refresh_from_db()
        self.assertEqual(self.car.price_per_day, Decimal('2800.00'))
        self.assertEqual(self.car.brand, 'Toyota')

        self.client.force_authenticate(user=self.admin)
        response = self.client.put(url, {'location': {'city': 'Pune'}}, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['car']['location']['city'], 'Pune')

    def test_toggle_status(self):
        url = reverse('car-toggle-status', args=[self.car.pk])
        self.client.force_authenticate(user=self.host)
        response = self.client.patch(url)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['message'], 'Car deactivated successfully')
        self.assertFalse(response.data['car']['isActive'])

        self.client.force_authenticate(user=self.renter)
        self.assertEqual(self.client.patch(url).status_code, 403)

    def test_delete(self):
        url = reverse('car-detail', args=[self.car.pk])
        self.client.force_authenticate(user=self.renter)
        response = self.client.delete(url)
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.data['message'], 'Not authorized to delete this car')

        booking = make_booking(self.car, self.renter, status=Booking.ACTIVE)
        self.client.force_authenticate(user=self.host)
        response = self.client.delete(url)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['message'], 'Cannot delete car with active bookings')

        booking.status = Booking.COMPLETED
        booking.save()
        response = self.client.delete(url)
        self.assertEqual(response.status_code, 200)
        self.assertFalse(Car.objects.filter(pk=self.car.pk).exists())

    def test_delete_keeps_booking_history(self):
        booking = make_booking(
            self.car, self.renter, status=Booking.COMPLETED,
            review_rating=5, review_comment='Great car',
        )
        self.client.force_authenticate(user=self.host)
        response = self.client.delete(reverse('car-detail', args=[self.car.pk]))
        self.assertEqual(response.status_code, 200)

        booking.refresh_from_db()
        self.assertIsNone(booking.car_id)
        self.assertEqual(booking.review_rating, 5)

        self.client.force_authenticate(user=self.renter)
        response = self.client.get(reverse('booking-my-bookings'))
        self.assertEqual(response.data['count'], 1)
        self.assertIsNone(response.data['bookings'][0]['car'])
        self.assertEqual(response.data['bookings'][0]['review']['rating'], 5)

        stats = self.client.get(reverse('booking-stats')).data['stats']
        self.assertEqual(stats['completedTrips'], 1)
        self.assertEqual(stats['totalSpent'], Decimal('5000.00'))

        self.client.force_authenticate(user=self.host)
        stats = self.client.get(reverse('car-host-stats')).data['stats']
        self.assertEqual(stats['totalRevenue'], Decimal('5000.00'))

    def test_plate_race_becomes_conflict(self):
        # simulate a second request that passed validation before the first committed
        self.client.force_authenticate(user=self.renter)
        with patch.object(CarSerializer, 'validate_licensePlate', lambda serializer, value: value.strip().upper()):
            response = self.client.post(
                reverse('car-list'), self.payload(licensePlate=self.car.license_plate), format='json'
            )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['message'], 'A car with this license plate already exists')
        self.assertEqual(Car.objects.filter(license_plate=self.car.license_plate).count(), 1)

    def test_my_cars_and_stats(self):
        other = make_car(self.host, brand='Honda', is_active=False, rating_average=3.0, rating_count=1)
        self.car.rating_average = 4.6
        self.car.rating_count = 5
        self.car.save()
        make_booking(self.car, self.renter, status=Booking.COMPLETED)
        make_booking(self.car, self.renter, status=Booking.CONFIRMED)
        make_booking(self.car, self.renter, status=Booking.CANCELLED)

        self.client.force_authenticate(user=self.host)
        response = self.client.get(reverse('car-my-cars'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['count'], 2)
        counts = {car['id']: car['bookingCount'] for car in response.data['cars']}
        self.assertEqual(counts, {self.car.pk: 2, other.pk: 0})

        stats = self.client.get(reverse('car-host-stats')).data['stats']
        self.assertEqual(stats['totalCars'], 2)
        self.assertEqual(stats['activeCars'], 1)
        self.assertEqual(stats['totalBookings'], 2)
        self.assertEqual(stats['totalRevenue'], Decimal('5000.00'))
        self.assertEqual(stats['avgRating'], 3.8)


class SeedCarsCommandTests(TestCase):
    def test_requires_a_user(self):
        with self.assertRaises(CommandError):
            call_command('seed_cars', stdout=StringIO())

    def test_seeds_once_and_promotes_host(self):
        user = User.objects.create_user(email='first@example.com', password='secret123', full_name='First')
        call_command('seed_cars', stdout=StringIO())
        self.assertEqual(Car.objects.filter(host=user).count(), 6)
        user.refresh_from_db()
        self.assertEqual(user.role, User.HOST)

        call_command('seed_cars', '--host-email', 'FIRST@example.com', stdout=StringIO())
        self.assertEqual(Car.objects.count(), 6)
