"""
URL configuration for the schedlock lock API.

Include under a prefix, e.g.:
    path('api/v1/schedlock/', include(
        'schedlock.adapters.django.urls')),
"""
from django.urls import include, path
from rest_framework.routers import DefaultRouter

from schedlock.adapters.django.views import LockRecordViewSet

router = DefaultRouter()
router.register(
    r"locks",
    LockRecordViewSet,
    basename="schedlock-lock",
)

urlpatterns = [
    path("", include(router.urls)),
]
