"""Serializers for lock record API."""
from rest_framework import serializers

from schedlock.adapters.django.models import LockRecord


class LockRecordSerializer(serializers.ModelSerializer):
    """Lock row plus whether it is held right now."""

    is_locked = serializers.ReadOnlyField()

    class Meta:
        model = LockRecord
        fields = [
            "name",
            "lock_until",
            "locked_at",
            "locked_by",
            "is_locked",
        ]
        read_only_fields = fields
