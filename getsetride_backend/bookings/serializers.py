from rest_framework import serializers

from cars.serializers import CarSerializer, CarSummarySerializer
from users.serializers import UserSummarySerializer
from .models import Booking

DATE_INPUT_FORMATS = ['iso-8601', '%Y-%m-%d']
REQUIRED_FIELDS_ERRORS = {
    'required': 'Please provide all required fields',
    'blank': 'Please provide all required fields',
    'null': 'Please provide all required fields',
}
RATING_ERRORS = {
    'required': 'Please provide a rating between 1 and 5',
    'invalid': 'Please provide a rating between 1 and 5',
    'null': 'Please provide a rating between 1 and 5',
}


class BookingCreateSerializer(serializers.Serializer):
    carId = serializers.IntegerField(error_messages=REQUIRED_FIELDS_ERRORS)
    startDate = serializers.DateTimeField(input_formats=DATE_INPUT_FORMATS, error_messages=REQUIRED_FIELDS_ERRORS)
    endDate = serializers.DateTimeField(input_formats=DATE_INPUT_FORMATS, error_messages=REQUIRED_FIELDS_ERRORS)
    pickupTime = serializers.CharField(max_length=20, error_messages=REQUIRED_FIELDS_ERRORS)
    dropoffTime = serializers.CharField(max_length=20, error_messages=REQUIRED_FIELDS_ERRORS)


class BookingStatusSerializer(serializers.Serializer):
    status = serializers.CharField()


class BookingCancelSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')


class ReviewSerializer(serializers.Serializer):
    rating = serializers.IntegerField(error_messages=RATING_ERRORS)
    comment = serializers.CharField(max_length=1000, required=False, allow_blank=True, default='')


class BookingSerializer(serializers.ModelSerializer):
    """Booking as returned to renters and hosts, with people and car resolved."""

    user = UserSummarySerializer(read_only=True)
    host = UserSummarySerializer(read_only=True)
    car = CarSummarySerializer(read_only=True)
    startDate = serializers.DateTimeField(source='start_date')
    endDate = serializers.DateTimeField(source='end_date')
    pickupTime = serializers.CharField(source='pickup_time')
    dropoffTime = serializers.CharField(source='dropoff_time')
    totalDays = serializers.IntegerField(source='total_days')
    pricePerDay = serializers.DecimalField(source='price_per_day', max_digits=10, decimal_places=2)
    totalAmount = serializers.DecimalField(source='total_amount', max_digits=12, decimal_places=2)
    paymentStatus = serializers.CharField(source='payment_status')
    paymentMethod = serializers.CharField(source='payment_method')
    transactionId = serializers.CharField(source='transaction_id')
    cancellationReason = serializers.CharField(source='cancellation_reason')
    cancelledBy = serializers.CharField(source='cancelled_by')
    cancelledAt = serializers.DateTimeField(source='cancelled_at')
    review = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source='created_at')
    updatedAt = serializers.DateTimeField(source='updated_at')

    class Meta:
        model = Booking
        fields = [
            'id', 'user', 'car', 'host', 'startDate', 'endDate', 'pickupTime', 'dropoffTime',
            'totalDays', 'pricePerDay', 'totalAmount', 'status', 'paymentStatus', 'paymentMethod',
            'transactionId', 'cancellationReason', 'cancelledBy', 'cancelledAt', 'review',
            'createdAt', 'updatedAt',
        ]
        read_only_fields = fields

    def get_review(self, obj):
        if not obj.has_review:
            return None
        return {
            'rating': obj.review_rating,
            'comment': obj.review_comment,
            'createdAt': serializers.DateTimeField().to_representation(obj.review_created_at),
        }


class BookingDetailSerializer(BookingSerializer):
    car = CarSerializer(read_only=True)
