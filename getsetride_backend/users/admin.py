from django.contrib import admin

from .models import User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ['email', 'full_name', 'role', 'is_active', 'date_joined']
    list_filter = ['role', 'is_active', 'is_staff']
    search_fields = ['email', 'full_name', 'phone']
    readonly_fields = ['date_joined', 'last_login', 'updated_at']
    ordering = ['-date_joined']
    exclude = ['password', 'groups', 'user_permissions']
