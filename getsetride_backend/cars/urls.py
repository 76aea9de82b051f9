from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import CarViewSet

router = DefaultRouter(trailing_slash=False)
router.include_root_view = False
router.register(r'cars', CarViewSet, basename='car')

urlpatterns = [
    path('', include(router.urls)),
]
