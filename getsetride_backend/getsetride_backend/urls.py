from django.contrib import admin
from django.http import JsonResponse
from django.urls import path, include


def health(request):
    return JsonResponse({'status': 'OK', 'message': 'Server is running'})


urlpatterns = [
    path('admin/', admin.site.urls),
    path('health', health, name='health'),
    path('api/', include('users.urls')),
    path('api/', include('cars.urls')),
    path('api/', include('bookings.urls')),
    path('api/', include('uploads.urls')),
    path('api/', include('chatbot.urls')),
]
