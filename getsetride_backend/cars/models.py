from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone


def max_model_year(value):
    limit = timezone.now().year + 1
    if value > limit:
        raise ValidationError(f"Year must be {limit} or earlier.")


class Car(models.Model):
    SEDAN = 'Sedan'
    SUV = 'SUV'
    HATCHBACK = 'Hatchback'
    LUXURY = 'Luxury'
    SPORTS = 'Sports'
    ELECTRIC = 'Electric'

    AUTOMATIC = 'Automatic'
    MANUAL = 'Manual'

    PETROL = 'Petrol'
    DIESEL = 'Diesel'
    ELECTRIC_FUEL = 'Electric'
    HYBRID = 'Hybrid'

    CATEGORY_CHOICES = [
        (SEDAN, 'Sedan'),
        (SUV, 'SUV'),
        (HATCHBACK, 'Hatchback'),
        (LUXURY, 'Luxury'),
        (SPORTS, 'Sports'),
        (ELECTRIC, 'Electric'),
    ]

    TRANSMISSION_CHOICES = [
        (AUTOMATIC, 'Automatic'),
        (MANUAL, 'Manual'),
    ]

    FUEL_CHOICES = [
        (PETROL, 'Petrol'),
        (DIESEL, 'Diesel'),
        (ELECTRIC_FUEL, 'Electric'),
        (HYBRID, 'Hybrid'),
    ]

    host = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='cars')
    brand = models.CharField(max_length=100)
    model = models.CharField(max_length=100)
    year = models.PositiveIntegerField(validators=[MinValueValidator(1990), max_model_year])
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES)
    transmission = models.CharField(max_length=10, choices=TRANSMISSION_CHOICES)
    fuel_type = models.CharField(max_length=10, choices=FUEL_CHOICES)
    seats = models.PositiveSmallIntegerField(validators=[MinValueValidator(2), MaxValueValidator(8)])
    price_per_day = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])

    # location
    city = models.CharField(max_length=100)
    address = models.CharField(max_length=255, blank=True, default='')
    state = models.CharField(max_length=100, blank=True, default='')
    pincode = models.CharField(max_length=20, blank=True, default='')
    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)

    images = models.JSONField(default=list, blank=True)
    features = models.JSONField(default=list, blank=True)
    description = models.TextField(max_length=1000, blank=True, default='')
    license_plate = models.CharField(max_length=20, unique=True)
    mileage = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)

    rating_average = models.FloatField(default=0, validators=[MinValueValidator(0), MaxValueValidator(5)])
    rating_count = models.PositiveIntegerField(default=0)
    total_bookings = models.PositiveIntegerField(default=0)
    total_earnings = models.DecimalField(max_digits=12, decimal_places=2, default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['brand', 'model'], name='car_brand_model_idx'),
            models.Index(fields=['category'], name='car_category_idx'),
            models.Index(fields=['price_per_day'], name='car_price_idx'),
            models.Index(fields=['city'], name='car_city_idx'),
            models.Index(fields=['is_active'], name='car_is_active_idx'),
            models.Index(fields=['-rating_average'], name='car_rating_idx'),
        ]

    def __str__(self):
        return f"{self.brand} {self.model} ({self.license_plate})"

    def save(self, *args, **kwargs):
        if self.license_plate:
            self.license_plate = self.license_plate.strip().upper()
        super().save(*args, **kwargs)
