from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from cars.models import Car


class Booking(models.Model):
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    ACTIVE = 'active'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'

    STATUS_CHOICES = [
        (PENDING, 'Pending'),
        (CONFIRMED, 'Confirmed'),
        (ACTIVE, 'Active'),
        (COMPLETED, 'Completed'),
        (CANCELLED, 'Cancelled'),
    ]

    # a car cannot be double booked across these
    BLOCKING_STATUSES = (CONFIRMED, ACTIVE)
    COUNTED_STATUSES = (CONFIRMED, ACTIVE, COMPLETED)

    PAID = 'paid'
    PAYMENT_STATUS_CHOICES = [
        ('pending', 'Pending'),
        (PAID, 'Paid'),
        ('refunded', 'Refunded'),
    ]

    PAYMENT_METHOD_CHOICES = [
        ('card', 'Card'),
        ('upi', 'UPI'),
        ('netbanking', 'Net Banking'),
        ('wallet', 'Wallet'),
    ]

    CANCELLED_BY_USER = 'user'
    CANCELLED_BY_HOST = 'host'
    CANCELLED_BY_CHOICES = [
        (CANCELLED_BY_USER, 'User'),
        (CANCELLED_BY_HOST, 'Host'),
        ('admin', 'Admin'),
    ]

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='bookings')
    # null once the listing has been deleted
    car = models.ForeignKey(Car, on_delete=models.SET_NULL, null=True, blank=True, related_name='bookings')
    host = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='host_bookings')
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    pickup_time = models.CharField(max_length=20)
    dropoff_time = models.CharField(max_length=20)
    total_days = models.PositiveIntegerField()
    price_per_day = models.DecimalField(max_digits=10, decimal_places=2)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=PENDING)
    payment_status = models.CharField(max_length=10, choices=PAYMENT_STATUS_CHOICES, default='pending')
    payment_method = models.CharField(max_length=10, choices=PAYMENT_METHOD_CHOICES, blank=True, default='')
    transaction_id = models.CharField(max_length=100, blank=True, default='')

    cancellation_reason = models.CharField(max_length=500, blank=True, default='')
    cancelled_by = models.CharField(max_length=5, choices=CANCELLED_BY_CHOICES, blank=True, default='')
    cancelled_at = models.DateTimeField(null=True, blank=True)

    # review, written once by the renting user after completion
    review_rating = models.PositiveSmallIntegerField(
        null=True, blank=True, validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    review_comment = models.TextField(blank=True, default='')
    review_created_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'status'], name='booking_user_status_idx'),
            models.Index(fields=['car', 'status'], name='booking_car_status_idx'),
            models.Index(fields=['host', 'status'], name='booking_host_status_idx'),
            models.Index(fields=['start_date', 'end_date'], name='booking_dates_idx'),
        ]

    def __str__(self):
        return f"Booking #{self.id} - Car {self.car_id} - User {self.user_id} - {self.status}"

    @property
    def has_review(self):
        return self.review_rating is not None
