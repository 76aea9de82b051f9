from django.contrib import admin

from .models import Car


@admin.register(Car)
class CarAdmin(admin.ModelAdmin):
    list_display = ('id', 'brand', 'model', 'year', 'city', 'price_per_day', 'host', 'is_active', 'rating_average')
    list_filter = ('category', 'transmission', 'fuel_type', 'is_active')
    search_fields = ('brand', 'model', 'license_plate', 'city')
    raw_id_fields = ('host',)
