"""Views for lock record inspection."""
from django.utils import timezone
from drf_spectacular.utils import (
    OpenApiParameter,
    extend_schema,
    extend_schema_view,
)
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from schedlock.adapters.django.conf import get_database
from schedlock.adapters.django.models import LockRecord
from schedlock.adapters.django.serializers import LockRecordSerializer


@extend_schema_view(
    list=extend_schema(
        tags=["scheduler-locks"],
        summary="List lock records",
        description="List lock records; pass active=true for held locks only.",
        parameters=[
            OpenApiParameter(
                name="active",
                type=bool,
                required=False,
                description="Only locks whose lock_until is in the future",
            ),
        ],
    ),
    retrieve=extend_schema(
        tags=["scheduler-locks"],
        summary="Retrieve lock record",
        description="Get one lock record by lock name.",
    ),
)
class LockRecordViewSet(viewsets.ReadOnlyModelViewSet):
    """Read-only API for lock records: list, retrieve, active."""

    serializer_class = LockRecordSerializer
    permission_classes = [IsAuthenticated]
    lookup_field = "name"
    lookup_value_regex = "[^/]+"

    def get_queryset(self):
        queryset = LockRecord.objects.using(get_database()).all()
        active = self.request.query_params.get("active", None)
        if active and active.lower() == "true":
            queryset = queryset.filter(lock_until__gt=timezone.now())
        return queryset

    @extend_schema(
        tags=["scheduler-locks"],
        summary="List held locks",
        description="Locks currently held by any node.",
        responses={200: LockRecordSerializer(many=True)},
    )
    @action(detail=False, methods=["get"], url_path="active")
    def active(self, request):
        queryset = LockRecord.objects.using(get_database()).filter(
            lock_until__gt=timezone.now()
        )
        serializer = self.get_serializer(queryset, many=True)
        return Response(serializer.data)
