"""URL configuration for the TravelEase project.

One DRF router serves the booking and catalog APIs under /api/; the OpenAPI
schema and Swagger UI come from drf-spectacular.
"""
from django.contrib import admin  # type: ignore
from django.urls import include, path  # type: ignore
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from apps.bookings.views import BookingViewSet
from apps.catalog.views import DestinationViewSet, TravelPackageViewSet

router = DefaultRouter()
router.register(r"bookings", BookingViewSet, basename="booking")
router.register(r"destinations", DestinationViewSet, basename="destination")
router.register(r"packages", TravelPackageViewSet, basename="package")

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include(router.urls)),
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
]
