from datetime import datetime, timezone as dt_timezone
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import SimpleTestCase, TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from cars.models import Car
from .models import Booking
from .services import BookingService, calculate_total_days, intervals_overlap, recompute_rating

User = get_user_model()


def utc(*args):
    return datetime(*args, tzinfo=dt_timezone.utc)


def make_car(host, **overrides):
    data = {
        'brand': 'Toyota', 'model': 'Camry', 'year': 2023, 'category': 'Sedan',
        'transmission': 'Automatic', 'fuel_type': 'Petrol', 'seats': 5,
        'price_per_day': Decimal('2500.00'), 'city': 'Mumbai', 'license_plate': 'MH01AB1234',
    }
    data.update(overrides)
    return Car.objects.create(host=host, **data)


class BookingHelperTests(SimpleTestCase):
    def test_total_days_for_whole_dates(self):
        self.assertEqual(calculate_total_days(utc(2024, 1, 1), utc(2024, 1, 3)), 2)

    def test_partial_day_rounds_up(self):
        self.assertEqual(calculate_total_days(utc(2024, 1, 1, 10), utc(2024, 1, 2, 12)), 2)

    def test_same_instant_is_zero_days(self):
        self.assertEqual(calculate_total_days(utc(2024, 1, 1), utc(2024, 1, 1)), 0)

    def test_overlap_is_inclusive(self):
        self.assertTrue(intervals_overlap(utc(2024, 1, 1), utc(2024, 1, 5), utc(2024, 1, 5), utc(2024, 1, 7)))
        self.assertTrue(intervals_overlap(utc(2024, 1, 3), utc(2024, 1, 4), utc(2024, 1, 1), utc(2024, 1, 10)))
        self.assertFalse(intervals_overlap(utc(2024, 1, 1), utc(2024, 1, 4), utc(2024, 1, 5), utc(2024, 1, 7)))

    def test_recompute_rating(self):
        average, count = recompute_rating(4.0, 2, 5)
        self.assertEqual(count, 3)
        self.assertAlmostEqual(average, 13 / 3)

    def test_recompute_first_rating(self):
        self.assertEqual(recompute_rating(0, 0, 4), (4.0, 1))


class BookingServiceTests(TestCase):
    def setUp(self):
        self.host = User.objects.create_user(email='host@example.com', password='secret123', full_name='Host', role='host')
        self.renter = User.objects.create_user(email='renter@example.com', password='secret123', full_name='Renter')
        self.car = make_car(self.host)

    def book(self, start, end, user=None):
        return BookingService.create_booking(user or self.renter, self.car.pk, start, end, '10:00', '18:00')

    def test_create_booking_prices_and_confirms(self):
        booking = self.book(utc(2024, 1, 1), utc(2024, 1, 3))
        self.assertEqual(booking.total_days, 2)
        self.assertEqual(booking.price_per_day, Decimal('2500.00'))
        self.assertEqual(booking.total_amount, Decimal('5000.00'))
        self.assertEqual(booking.status, Booking.CONFIRMED)
        self.assertEqual(booking.payment_status, Booking.PAID)
        self.assertEqual(booking.host, self.host)

    def test_price_snapshot_survives_car_price_change(self):
        booking = self.book(utc(2024, 1, 1), utc(2024, 1, 3))
        self.car.price_per_day = Decimal('9999.00')
        self.car.save()
        booking.refresh_from_db()
        self.assertEqual(booking.price_per_day, Decimal('2500.00'))

    def test_overlapping_booking_is_rejected(self):
        self.book(utc(2024, 1, 1), utc(2024, 1, 5))
        with self.assertRaisesMessage(Exception, 'Car is already booked for selected dates'):
            self.book(utc(2024, 1, 5), utc(2024, 1, 7))

    def test_adjacent_booking_is_accepted(self):
        self.book(utc(2024, 1, 1), utc(2024, 1, 4))
        booking = self.book(utc(2024, 1, 5), utc(2024, 1, 7))
        self.assertEqual(booking.total_days, 2)

    def test_cancelled_booking_frees_dates(self):
        first = self.book(utc(2024, 1, 1), utc(2024, 1, 5))
        BookingService.cancel_booking(self.renter, first, 'plans changed')
        booking = self.book(utc(2024, 1, 2), utc(2024, 1, 4))
        self.assertEqual(booking.status, Booking.CONFIRMED)

    def test_completion_updates_car_totals_once(self):
        booking = self.book(utc(2024, 1, 1), utc(2024, 1, 3))
        BookingService.set_status(self.host, booking, Booking.COMPLETED)
        BookingService.set_status(self.host, booking, Booking.COMPLETED)
        self.car.refresh_from_db()
        self.assertEqual(self.car.total_bookings, 1)
        self.assertEqual(self.car.total_earnings, Decimal('5000.00'))

    def test_review_updates_running_average(self):
        self.car.rating_average = 4.0
        self.car.rating_count = 2
        self.car.save()
        booking = self.book(utc(2024, 1, 1), utc(2024, 1, 3))
        BookingService.set_status(self.host, booking, Booking.COMPLETED)

        BookingService.add_review(self.renter, booking, 5, 'Great car')

        self.car.refresh_from_db()
        self.assertEqual(self.car.rating_count, 3)
        self.assertAlmostEqual(self.car.rating_average, 4.3333, places=3)

    def test_booking_survives_car_deletion(self):
        booking = self.book(utc(2024, 1, 1), utc(2024, 1, 3))
        BookingService.set_status(self.host, booking, Booking.COMPLETED)
        self.car.delete()

        booking.refresh_from_db()
        self.assertIsNone(booking.car_id)
        BookingService.add_review(self.renter, booking, 4)
        booking.refresh_from_db()
        self.assertEqual(booking.review_rating, 4)
        self.assertEqual(BookingService.get_user_stats(self.renter)['completedTrips'], 1)

    def test_user_stats(self):
        upcoming = self.book(utc(2099, 1, 1), utc(2099, 1, 3))
        done = self.book(utc(2024, 1, 1), utc(2024, 1, 2))
        BookingService.set_status(self.host, done, Booking.COMPLETED)
        cancelled = self.book(utc(2098, 1, 1), utc(2098, 1, 2))
        BookingService.cancel_booking(self.renter, cancelled)

        stats = BookingService.get_user_stats(self.renter)

        self.assertEqual(stats['upcomingTrips'], 1)
        self.assertEqual(stats['completedTrips'], 1)
        self.assertEqual(stats['totalSpent'], upcoming.total_amount + done.total_amount)


class BookingApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.host = User.objects.create_user(email='host@example.com', password='secret123', full_name='Host', role='host')
        self.renter = User.objects.create_user(email='renter@example.com', password='secret123', full_name='Renter')
        self.stranger = User.objects.create_user(email='other@example.com', password='secret123', full_name='Other')
        self.admin = User.objects.create_superuser(email='admin@example.com', password='secret123', full_name='Admin')
        self.car = make_car(self.host)
        self.client.force_authenticate(user=self.renter)

    def create(self, start='2024-01-01', end='2024-01-03', **extra):
        payload = {
            'carId': self.car.pk, 'startDate': start, 'endDate': end,
            'pickupTime': '10:00', 'dropoffTime': '18:00',
        }
        payload.update(extra)
        return self.client.post(reverse('booking-list'), payload, format='json')

    def completed_booking(self):
        response = self.create()
        booking = Booking.objects.get(pk=response.data['booking']['id'])
        booking.status = Booking.COMPLETED
        booking.save()
        return booking

    def test_requires_authentication(self):
        self.client.force_authenticate(user=None)
        response = self.create()
        self.assertEqual(response.status_code, 401)
        self.assertFalse(response.data['success'])

    def test_create_booking(self):
        response = self.create()
        self.assertEqual(response.status_code, 201)
        self.assertTrue(response.data['success'])
        booking = response.data['booking']
        self.assertEqual(booking['totalDays'], 2)
        self.assertEqual(booking['totalAmount'], Decimal('5000.00'))
        self.assertEqual(booking['status'], 'confirmed')
        self.assertEqual(booking['paymentStatus'], 'paid')
        self.assertEqual(booking['car']['licensePlate'], 'MH01AB1234')
        self.assertEqual(booking['host']['email'], 'host@example.com')
        self.assertIsNone(booking['review'])

    def test_missing_fields(self):
        response = self.client.post(reverse('booking-list'), {'carId': self.car.pk}, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertIn('Please provide all required fields', response.data['message'])

    def test_unknown_car(self):
        response = self.create(carId=999999)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data['message'], 'Car not found')

    def test_inactive_car(self):
        self.car.is_active = False
        self.car.save()
        response = self.create()
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['message'], 'Car is not available for booking')

    def test_cannot_book_own_car(self):
        self.client.force_authenticate(user=self.host)
        response = self.create()
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.data['message'], 'You cannot book your own car')

    def test_own_car_rejected_before_date_checks(self):
        self.create('2024-01-01', '2024-01-05')
        self.client.force_authenticate(user=self.host)
        for start, end in (('2024-02-01', '2024-02-01'), ('2024-01-03', '2024-01-04')):
            response = self.create(start, end)
            self.assertEqual(response.status_code, 403)
            self.assertEqual(response.data['message'], 'You cannot book your own car')
        self.assertEqual(Booking.objects.filter(user=self.host).count(), 0)

    def test_overlap_rejected_and_nothing_created(self):
        self.create('2024-01-01', '2024-01-05')
        response = self.create('2024-01-05', '2024-01-07')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['message'], 'Car is already booked for selected dates')
        self.assertEqual(Booking.objects.count(), 1)

    def test_zero_day_booking_rejected(self):
        response = self.create('2024-01-01', '2024-01-01')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['message'], 'Booking must be at least 1 day')
        self.assertFalse(Booking.objects.exists())

    def test_my_bookings_and_host_bookings(self):
        self.create('2024-01-01', '2024-01-03')
        self.create('2024-02-01', '2024-02-03')

        response = self.client.get(reverse('booking-my-bookings'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['count'], 2)
        self.assertEqual(response.data['bookings'][0]['startDate'][:10], '2024-02-01')

        self.client.force_authenticate(user=self.host)
        response = self.client.get(reverse('booking-host-bookings'), {'status': 'confirmed'})
        self.assertEqual(response.data['count'], 2)
        self.assertEqual(response.data['bookings'][0]['user']['email'], 'renter@example.com')

        response = self.client.get(reverse('booking-host-bookings'), {'status': 'completed'})
        self.assertEqual(response.data['count'], 0)

    def test_retrieve_is_limited_to_participants(self):
        booking_id = self.create().data['booking']['id']
        url = reverse('booking-detail', args=[booking_id])

        self.assertEqual(self.client.get(url).status_code, 200)
        self.client.force_authenticate(user=self.host)
        self.assertEqual(self.client.get(url).status_code, 200)
        self.client.force_authenticate(user=self.admin)
        self.assertEqual(self.client.get(url).status_code, 200)
        self.client.force_authenticate(user=self.stranger)
        response = self.client.get(url)
        self.assertEqual(response.status_code, 403)
        self.assertFalse(response.data['success'])

    def test_retrieve_missing_booking(self):
        response = self.client.get(reverse('booking-detail', args=[424242]))
        self.assertEqual(response.status_code, 404)

    def test_update_status(self):
        booking_id = self.create().data['booking']['id']
        url = reverse('booking-update-status', args=[booking_id])

        response = self.client.put(url, {'status': 'flying'}, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['message'], 'Invalid status')

        self.client.force_authenticate(user=self.stranger)
        response = self.client.put(url, {'status': 'active'}, format='json')
        self.assertEqual(response.status_code, 403)

        self.client.force_authenticate(user=self.host)
        response = self.client.put(url, {'status': 'active'}, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['booking']['status'], 'active')

    def test_cancel_by_user_and_host(self):
        first = self.create('2024-01-01', '2024-01-03').data['booking']['id']
        second = self.create('2024-02-01', '2024-02-03').data['booking']['id']

        response = self.client.put(reverse('booking-cancel', args=[first]), {'reason': 'Sick'}, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['booking']['cancelledBy'], 'user')
        self.assertEqual(response.data['booking']['cancellationReason'], 'Sick')
        self.assertIsNotNone(response.data['booking']['cancelledAt'])

        self.client.force_authenticate(user=self.host)
        response = self.client.put(reverse('booking-cancel', args=[second]), {}, format='json')
        self.assertEqual(response.data['booking']['cancelledBy'], 'host')

    def test_cannot_cancel_twice_or_after_completion(self):
        booking_id = self.create().data['booking']['id']
        url = reverse('booking-cancel', args=[booking_id])
        self.client.put(url, {}, format='json')
        response = self.client.put(url, {}, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['message'], 'Booking is already cancelled')

        booking = self.completed_booking()
        response = self.client.put(reverse('booking-cancel', args=[booking.pk]), {}, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['message'], 'Cannot cancel completed booking')

    def test_stranger_cannot_cancel(self):
        booking_id = self.create().data['booking']['id']
        self.client.force_authenticate(user=self.stranger)
        response = self.client.put(reverse('booking-cancel', args=[booking_id]), {}, format='json')
        self.assertEqual(response.status_code, 403)
        self.assertEqual(Booking.objects.get(pk=booking_id).status, Booking.CONFIRMED)

    def test_review_flow(self):
        booking = self.completed_booking()
        url = reverse('booking-review', args=[booking.pk])

        response = self.client.post(url, {'rating': 4, 'comment': 'Smooth ride'}, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['booking']['review']['rating'], 4)
        self.car.refresh_from_db()
        self.assertEqual(self.car.rating_count, 1)
        self.assertEqual(self.car.rating_average, 4.0)

        response = self.client.post(url, {'rating': 5}, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['message'], 'You have already reviewed this booking')
        self.car.refresh_from_db()
        self.assertEqual(self.car.rating_count, 1)

    def test_review_rules(self):
        pending_id = self.create('2024-03-01', '2024-03-03').data['booking']['id']
        response = self.client.post(reverse('booking-review', args=[pending_id]), {'rating': 5}, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['message'], 'Can only review completed bookings')

        booking = self.completed_booking()
        url = reverse('booking-review', args=[booking.pk])
        for rating in (0, 6):
            response = self.client.post(url, {'rating': rating}, format='json')
            self.assertEqual(response.status_code, 400)
            self.assertEqual(response.data['message'], 'Please provide a rating between 1 and 5')

        response = self.client.post(url, {'rating': 4.5}, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertIn('Please provide a rating between 1 and 5', response.data['message'])
        booking.refresh_from_db()
        self.assertFalse(booking.has_review)

        self.client.force_authenticate(user=self.host)
        response = self.client.post(url, {'rating': 5}, format='json')
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.data['message'], 'Only the booking user can add a review')

    def test_stats(self):
        self.create('2099-01-01', '2099-01-03')
        self.completed_booking()
        response = self.client.get(reverse('booking-stats'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['stats']['upcomingTrips'], 1)
        self.assertEqual(response.data['stats']['completedTrips'], 1)
        self.assertEqual(response.data['stats']['totalSpent'], Decimal('10000.00'))
