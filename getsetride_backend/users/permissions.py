"""Ownership and role checks shared by the car and booking endpoints."""

from rest_framework import permissions

from getsetride_backend.exceptions import Forbidden


def is_admin(user) -> bool:
    if not user or not user.is_authenticated:
        return False
    return getattr(user, 'role', None) == 'admin' or user.is_superuser


def is_host_or_admin(user, host_id) -> bool:
    """Permit when the user owns the resource (``host_id``) or is an admin."""
    if not user or not user.is_authenticated:
        return False
    return user.pk == host_id or is_admin(user)


def is_booking_participant(user, booking) -> bool:
    """The renting user, the car's host and admins may act on a booking."""
    if not user or not user.is_authenticated:
        return False
    return user.pk in (booking.user_id, booking.host_id) or is_admin(user)


def ensure_host_or_admin(user, host_id, message='Not authorized to update this car'):
    if not is_host_or_admin(user, host_id):
        raise Forbidden(message)


def ensure_booking_participant(user, booking, message='Not authorized to access this booking'):
    if not is_booking_participant(user, booking):
        raise Forbidden(message)


class IsHostOrAdmin(permissions.BasePermission):
    """Object permission for resources carrying a ``host`` foreign key."""

    message = 'Not authorized to update this car'

    def has_object_permission(self, request, view, obj):
        return is_host_or_admin(request.user, obj.host_id)


class IsBookingParticipant(permissions.BasePermission):
    message = 'Not authorized to access this booking'

    def has_object_permission(self, request, view, obj):
        return is_booking_participant(request.user, obj)
