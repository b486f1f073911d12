from schedlock.adapters.django.views.lock import LockRecordViewSet

__all__ = ["LockRecordViewSet"]
