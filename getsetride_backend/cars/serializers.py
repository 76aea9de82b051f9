from django.utils import timezone
from rest_framework import serializers

from getsetride_backend.exceptions import Conflict
from users.serializers import UserSummarySerializer
from .models import Car


class CoordinatesSerializer(serializers.Serializer):
    lat = serializers.FloatField(source='latitude', required=False, allow_null=True)
    lng = serializers.FloatField(source='longitude', required=False, allow_null=True)


class LocationSerializer(serializers.Serializer):
    city = serializers.CharField(max_length=100)
    address = serializers.CharField(max_length=255, required=False, allow_blank=True)
    state = serializers.CharField(max_length=100, required=False, allow_blank=True)
    pincode = serializers.CharField(max_length=20, required=False, allow_blank=True)
    coordinates = CoordinatesSerializer(source='*', required=False)


class RatingSerializer(serializers.Serializer):
    average = serializers.FloatField(source='rating_average', read_only=True)
    count = serializers.IntegerField(source='rating_count', read_only=True)


class HostSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    fullName = serializers.CharField(source='full_name', read_only=True)
    profileImage = serializers.CharField(source='profile_image', read_only=True)


class CarSerializer(serializers.ModelSerializer):
    host = HostSerializer(read_only=True)
    fuelType = serializers.ChoiceField(source='fuel_type', choices=Car.FUEL_CHOICES)
    pricePerDay = serializers.DecimalField(source='price_per_day', max_digits=10, decimal_places=2, min_value=0)
    location = LocationSerializer(source='*')
    images = serializers.ListField(child=serializers.CharField(max_length=500), required=False)
    features = serializers.ListField(child=serializers.CharField(max_length=100), required=False)
    licensePlate = serializers.CharField(source='license_plate', max_length=20)
    isActive = serializers.BooleanField(source='is_active', required=False)
    rating = RatingSerializer(source='*', read_only=True)
    totalBookings = serializers.IntegerField(source='total_bookings', read_only=True)
    totalEarnings = serializers.DecimalField(source='total_earnings', max_digits=12, decimal_places=2, read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Car
        fields = [
            'id', 'host', 'brand', 'model', 'year', 'category', 'transmission', 'fuelType',
            'seats', 'pricePerDay', 'location', 'images', 'features', 'description',
            'licensePlate', 'mileage', 'isActive', 'rating', 'totalBookings', 'totalEarnings',
            'createdAt', 'updatedAt',
        ]
        extra_kwargs = {
            'brand': {'error_messages': {'required': 'Please provide car brand'}},
            'model': {'error_messages': {'required': 'Please provide car model'}},
        }

    def validate_year(self, value):
        current_year = timezone.now().year
        if value < 1990 or value > current_year + 1:
            raise serializers.ValidationError("Year must be between 1990 and next year.")
        return value

    def validate_seats(self, value):
        if value < 2 or value > 8:
            raise serializers.ValidationError("Seats must be between 2 and 8.")
        return value

    def validate_licensePlate(self, value):
        value = value.strip().upper()
        if not value:
            raise serializers.ValidationError("License plate cannot be empty.")
        duplicates = Car.objects.filter(license_plate=value)
        if self.instance is not None:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise Conflict('A car with this license plate already exists')
        return value


class CarSummarySerializer(serializers.ModelSerializer):
    """Compact car card embedded in booking lists."""

    pricePerDay = serializers.DecimalField(source='price_per_day', max_digits=10, decimal_places=2, read_only=True)
    location = LocationSerializer(source='*', read_only=True)

    class Meta:
        model = Car
        fields = ['id', 'brand', 'model', 'year', 'images', 'category', 'pricePerDay', 'location']
        read_only_fields = fields


class HostCarSerializer(CarSerializer):
    bookingCount = serializers.IntegerField(source='booking_count', read_only=True)

    class Meta(CarSerializer.Meta):
        fields = CarSerializer.Meta.fields + ['bookingCount']


class CarHostContactSerializer(UserSummarySerializer):
    class Meta(UserSummarySerializer.Meta):
        fields = UserSummarySerializer.Meta.fields + ['profileImage', 'joinDate']

    profileImage = serializers.CharField(source='profile_image', read_only=True)
    joinDate = serializers.DateTimeField(source='date_joined', read_only=True)


class CarDetailSerializer(CarSerializer):
    host = CarHostContactSerializer(read_only=True)
