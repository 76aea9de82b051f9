from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ('id', 'car', 'user', 'host', 'start_date', 'end_date', 'status', 'payment_status', 'total_amount')
    list_filter = ('status', 'payment_status')
    search_fields = ('car__brand', 'car__model', 'car__license_plate', 'user__email', 'host__email')
    raw_id_fields = ('car', 'user', 'host')
    date_hierarchy = 'start_date'
