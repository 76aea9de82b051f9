import logging

from django.db import IntegrityError, transaction
from django.db.models import Count, Q, Sum
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from bookings.models import Booking
from getsetride_backend.exceptions import Conflict, InvalidState
from users.permissions import IsHostOrAdmin, ensure_host_or_admin
from .filters import CarFilterSet, resolve_ordering
from .models import Car
from .pagination import CarPagination
from .serializers import CarDetailSerializer, CarSerializer, HostCarSerializer

logger = logging.getLogger(__name__)


class CarViewSet(viewsets.ModelViewSet):
    """
    Public listing and detail, plus the host-side management endpoints.

    Updates are always partial: a host edits the fields they send and the
    rest of the listing is left as it was.
    """

    serializer_class = CarSerializer
    pagination_class = CarPagination
    filter_backends = [DjangoFilterBackend]
    filterset_class = CarFilterSet
    lookup_value_regex = r'\d+'
    http_method_names = ['get', 'post', 'put', 'patch', 'delete', 'head', 'options']

    def get_queryset(self):
        queryset = Car.objects.select_related('host')
        if self.action == 'list':
            queryset = queryset.filter(is_active=True).order_by(
                *resolve_ordering(self.request.query_params.get('sort'))
            )
        return queryset

    def get_permissions(self):
        if self.action in ('list', 'retrieve'):
            return [AllowAny()]
        if self.action in ('update', 'partial_update', 'toggle_status'):
            return [IsAuthenticated(), IsHostOrAdmin()]
        return [IsAuthenticated()]

    def get_serializer_class(self):
        if self.action == 'retrieve':
            return CarDetailSerializer
        return CarSerializer

    def retrieve(self, request, *args, **kwargs):
        car = self.get_object()
        booked = (
            Booking.objects.filter(car=car, status__in=Booking.BLOCKING_STATUSES)
            .order_by('start_date')
            .values('start_date', 'end_date')
        )
        return Response({
            'success': True,
            'car': self.get_serializer(car).data,
            'bookedDates': [
                {'startDate': item['start_date'], 'endDate': item['end_date']} for item in booked
            ],
        })

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        car = self._save(serializer, host=request.user)
        logger.info("User %s listed car %s (%s)", request.user.pk, car.pk, car.license_plate)
        return Response({
            'success': True,
            'message': 'Car listed successfully',
            'car': self.get_serializer(car).data,
        }, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        car = self.get_object()
        serializer = self.get_serializer(car, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        car = self._save(serializer)
        logger.info("User %s updated car %s", request.user.pk, car.pk)
        return Response({
            'success': True,
            'message': 'Car updated successfully',
            'car': self.get_serializer(car).data,
        })

    @staticmethod
    def _save(serializer, **extra):
        # the database still enforces unique plates if two saves pass validation together
        try:
            with transaction.atomic():
                return serializer.save(**extra)
        except IntegrityError:
            logger.warning("License plate collision while saving car: %s", serializer.validated_data.get('license_plate'))
            raise Conflict('A car with this license plate already exists')

    def destroy(self, request, *args, **kwargs):
        car = self.get_object()
        ensure_host_or_admin(request.user, car.host_id, 'Not authorized to delete this car')

        if car.bookings.filter(status__in=Booking.BLOCKING_STATUSES).exists():
            raise InvalidState('Cannot delete car with active bookings')

        logger.info("User %s deleted car %s", request.user.pk, car.pk)
        car.delete()
        return Response({'success': True, 'message': 'Car deleted successfully'})

    @action(detail=True, methods=['patch'], url_path='toggle-status')
    def toggle_status(self, request, pk=None):
        car = self.get_object()
        car.is_active = not car.is_active
        car.save(update_fields=['is_active', 'updated_at'])
        state = 'activated' if car.is_active else 'deactivated'
        logger.info("User %s %s car %s", request.user.pk, state, car.pk)
        return Response({
            'success': True,
            'message': f'Car {state} successfully',
            'car': self.get_serializer(car).data,
        })

    @action(detail=False, methods=['get'], url_path='host/my-cars')
    def my_cars(self, request):
        cars = (
            Car.objects.filter(host=request.user)
            .select_related('host')
            .annotate(booking_count=Count(
                'bookings', filter=Q(bookings__status__in=Booking.COUNTED_STATUSES)
            ))
            .order_by('-created_at')
        )
        return Response({
            'success': True,
            'count': len(cars),
            'cars': HostCarSerializer(cars, many=True).data,
        })

    @action(detail=False, methods=['get'], url_path='host/stats')
    def host_stats(self, request):
        cars = Car.objects.filter(host=request.user)
        host_bookings = Booking.objects.filter(host=request.user)

        revenue = host_bookings.filter(
            status=Booking.COMPLETED, payment_status=Booking.PAID
        ).aggregate(total=Sum('total_amount'))['total']
        ratings = list(cars.filter(rating_count__gt=0).values_list('rating_average', flat=True))

        return Response({
            'success': True,
            'stats': {
                'totalCars': cars.count(),
                'activeCars': cars.filter(is_active=True).count(),
                'totalBookings': host_bookings.filter(status__in=Booking.COUNTED_STATUSES).count(),
                'totalRevenue': revenue or 0,
                'avgRating': round(sum(ratings) / len(ratings), 1) if ratings else 0,
            },
        })
