"""Django app config for schedlock (scheduled task locks)."""
from django.apps import AppConfig


class SchedlockDjangoConfig(AppConfig):
    """App config for schedlock Django adapter."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "schedlock.adapters.django"
    label = "schedlock"
    verbose_name = "Scheduler Locks"

    def ready(self):
        # NOTE: Imports inside ready() avoid AppRegistryNotReady; services
        # import the models.
        from schedlock.adapters.django.conf import (
            get_unlock_on_worker_shutdown,
        )
        from schedlock.adapters.django.signals import connect_signals

        if get_unlock_on_worker_shutdown():
            connect_signals()
