"""Booking lifecycle: creation, status changes, cancellation, reviews and stats."""

import logging
import math

from django.db import transaction
from django.db.models import F, Sum
from django.utils import timezone
from rest_framework.exceptions import NotFound

from cars.models import Car
from getsetride_backend.exceptions import Conflict, Forbidden, InvalidInput, InvalidState
from users.permissions import ensure_booking_participant
from .models import Booking

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


def calculate_total_days(start_date, end_date):
    """Whole days between two instants, rounding any partial day up."""
    return math.ceil((end_date - start_date).total_seconds() / SECONDS_PER_DAY)


def intervals_overlap(start_a, end_a, start_b, end_b):
    # Inclusive on both ends: a trip ending on the day another starts collides.
    return start_a <= end_b and end_a >= start_b


def recompute_rating(average, count, rating):
    """Fold one more rating into a running average, returning ``(average, count)``."""
    new_count = count + 1
    return (average * count + rating) / new_count, new_count


class BookingService:
    @staticmethod
    @transaction.atomic
    def create_booking(user, car_id, start_date, end_date, pickup_time, dropoff_time):
        """
        Confirm a booking for ``car_id``.

        The car row stays locked until commit, so two requests for the same
        car cannot both pass the overlap check.
        """
        car = Car.objects.select_for_update().filter(pk=car_id).first()
        if car is None:
            raise NotFound('Car not found')

        if not car.is_active:
            raise InvalidState('Car is not available for booking')

        if car.host_id == user.pk:
            raise Forbidden('You cannot book your own car')

        clash = Booking.objects.filter(
            car=car,
            status__in=Booking.BLOCKING_STATUSES,
            start_date__lte=end_date,
            end_date__gte=start_date,
        ).exists()
        if clash:
            raise Conflict('Car is already booked for selected dates')

        total_days = calculate_total_days(start_date, end_date)
        if total_days < 1:
            raise InvalidInput('Booking must be at least 1 day')

        booking = Booking.objects.create(
            user=user,
            car=car,
            host_id=car.host_id,
            start_date=start_date,
            end_date=end_date,
            pickup_time=pickup_time,
            dropoff_time=dropoff_time,
            total_days=total_days,
            price_per_day=car.price_per_day,
            total_amount=total_days * car.price_per_day,
            status=Booking.CONFIRMED,
            payment_status=Booking.PAID,
        )
        logger.info("Booking %s created for car %s by user %s (%s days)", booking.pk, car.pk, user.pk, total_days)
        return Booking.objects.select_related('car', 'car__host', 'host', 'user').get(pk=booking.pk)

    @staticmethod
    @transaction.atomic
    def set_status(user, booking, new_status):
        valid = {value for value, _ in Booking.STATUS_CHOICES}
        if new_status not in valid:
            raise InvalidInput('Invalid status')

        booking = Booking.objects.select_for_update().get(pk=booking.pk)
        ensure_booking_participant(user, booking, 'Not authorized to update this booking')

        previous = booking.status
        booking.status = new_status
        booking.save(update_fields=['status', 'updated_at'])

        if new_status == Booking.COMPLETED and previous != Booking.COMPLETED:
            Car.objects.filter(pk=booking.car_id).update(
                total_bookings=F('total_bookings') + 1,
                total_earnings=F('total_earnings') + booking.total_amount,
            )

        logger.info("Booking %s moved from %s to %s by user %s", booking.pk, previous, new_status, user.pk)
        return booking

    @staticmethod
    @transaction.atomic
    def cancel_booking(user, booking, reason=''):
        booking = Booking.objects.select_for_update().get(pk=booking.pk)
        ensure_booking_participant(user, booking, 'Not authorized to cancel this booking')

        if booking.status == Booking.COMPLETED:
            raise InvalidState('Cannot cancel completed booking')
        if booking.status == Booking.CANCELLED:
            raise InvalidState('Booking is already cancelled')

        booking.status = Booking.CANCELLED
        booking.cancellation_reason = reason or ''
        booking.cancelled_by = (
            Booking.CANCELLED_BY_USER if booking.user_id == user.pk else Booking.CANCELLED_BY_HOST
        )
        booking.cancelled_at = timezone.now()
        booking.save()

        logger.info("Booking %s cancelled by %s (user %s)", booking.pk, booking.cancelled_by, user.pk)
        return booking

    @staticmethod
    @transaction.atomic
    def add_review(user, booking, rating, comment=''):
        """
        Attach the renter's review and fold the rating into the car's average.

        Booking and car rows are both locked, so the review and the rating
        update commit together or not at all.
        """
        if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
            raise InvalidInput('Please provide a rating between 1 and 5')

        booking = Booking.objects.select_for_update().get(pk=booking.pk)
        if booking.user_id != user.pk:
            raise Forbidden('Only the booking user can add a review')
        if booking.status != Booking.COMPLETED:
            raise InvalidState('Can only review completed bookings')
        if booking.has_review:
            raise Conflict('You have already reviewed this booking')

        booking.review_rating = rating
        booking.review_comment = comment or ''
        booking.review_created_at = timezone.now()
        booking.save(update_fields=['review_rating', 'review_comment', 'review_created_at', 'updated_at'])

        car = Car.objects.select_for_update().filter(pk=booking.car_id).first()
        if car is None:
            logger.info("Booking %s reviewed with %s stars, listing no longer exists", booking.pk, rating)
            return booking
        car.rating_average, car.rating_count = recompute_rating(car.rating_average, car.rating_count, rating)
        car.save(update_fields=['rating_average', 'rating_count', 'updated_at'])

        logger.info("Booking %s reviewed with %s stars, car %s now %.2f", booking.pk, rating, car.pk, car.rating_average)
        return booking

    @staticmethod
    def get_user_stats(user):
        bookings = Booking.objects.filter(user=user)
        upcoming = bookings.filter(
            status__in=Booking.BLOCKING_STATUSES, start_date__gte=timezone.now()
        ).count()
        completed = bookings.filter(status=Booking.COMPLETED).count()
        spent = bookings.filter(
            status__in=Booking.COUNTED_STATUSES, payment_status=Booking.PAID
        ).aggregate(total=Sum('total_amount'))['total']
        return {
            'upcomingTrips': upcoming,
            'completedTrips': completed,
            'totalSpent': spent or 0,
        }
