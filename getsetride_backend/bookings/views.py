from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from users.permissions import IsBookingParticipant
from .models import Booking
from .serializers import (
    BookingCancelSerializer,
    BookingCreateSerializer,
    BookingDetailSerializer,
    BookingSerializer,
    BookingStatusSerializer,
    ReviewSerializer,
)
from .services import BookingService


class BookingViewSet(viewsets.GenericViewSet):
    """
    Renter and host endpoints over bookings.

    The business rules live in ``BookingService``; these actions only parse
    input, look bookings up and shape the response.
    """

    queryset = Booking.objects.select_related('car', 'car__host', 'user', 'host')
    serializer_class = BookingSerializer
    lookup_value_regex = r'\d+'

    def get_permissions(self):
        if self.action == 'retrieve':
            return [IsAuthenticated(), IsBookingParticipant()]
        return [IsAuthenticated()]

    def _list_response(self, queryset):
        state = self.request.query_params.get('status')
        if state:
            queryset = queryset.filter(status=state)
        bookings = list(queryset.order_by('-created_at', '-id'))
        return Response({
            'success': True,
            'count': len(bookings),
            'bookings': BookingSerializer(bookings, many=True).data,
        })

    def create(self, request, *args, **kwargs):
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        booking = BookingService.create_booking(
            request.user,
            data['carId'],
            data['startDate'],
            data['endDate'],
            data['pickupTime'],
            data['dropoffTime'],
        )
        return Response({
            'success': True,
            'message': 'Booking created successfully',
            'booking': BookingDetailSerializer(booking).data,
        }, status=status.HTTP_201_CREATED)

    def retrieve(self, request, *args, **kwargs):
        booking = self.get_object()
        return Response({'success': True, 'booking': BookingDetailSerializer(booking).data})

    @action(detail=False, methods=['get'], url_path='my-bookings')
    def my_bookings(self, request):
        return self._list_response(self.get_queryset().filter(user=request.user))

    @action(detail=False, methods=['get'], url_path='host/bookings')
    def host_bookings(self, request):
        return self._list_response(self.get_queryset().filter(host=request.user))

    @action(detail=False, methods=['get'])
    def stats(self, request):
        return Response({'success': True, 'stats': BookingService.get_user_stats(request.user)})

    @action(detail=True, methods=['put'], url_path='status')
    def update_status(self, request, pk=None):
        serializer = BookingStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        booking = BookingService.set_status(request.user, self.get_object(), serializer.validated_data['status'])
        return Response({
            'success': True,
            'message': 'Booking status updated',
            'booking': BookingSerializer(booking).data,
        })

    @action(detail=True, methods=['put'])
    def cancel(self, request, pk=None):
        serializer = BookingCancelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        booking = BookingService.cancel_booking(request.user, self.get_object(), serializer.validated_data['reason'])
        return Response({
            'success': True,
            'message': 'Booking cancelled successfully',
            'booking': BookingSerializer(booking).data,
        })

    @action(detail=True, methods=['post'])
    def review(self, request, pk=None):
        serializer = ReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        booking = BookingService.add_review(
            request.user,
            self.get_object(),
            serializer.validated_data['rating'],
            serializer.validated_data['comment'],
        )
        return Response({
            'success': True,
            'message': 'Review added successfully',
            'booking': BookingSerializer(booking).data,
        })
