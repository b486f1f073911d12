# Django adapter: lock table, ORM storage, Celery shutdown hook, lock API.
# Public API: import from here (lazy to avoid AppRegistryNotReady).

__all__ = [
    "DjangoStorageAccessor",
    "scheduler_lock",
    "is_locked",
    "get_lock_holder",
    "list_active_locks",
    "unlock_tracked_locks",
    "get_lock_provider",
    "get_lock_executor",
    "reset_lock_provider",
]

_BASE = "schedlock.adapters.django"
_SUBMODULES = (
    "admin",
    "conf",
    "models",
    "serializers",
    "services",
    "signals",
    "urls",
    "views",
)
_SYMBOLS = (
    ("DjangoStorageAccessor", f"{_BASE}.services.storage", "DjangoStorageAccessor"),
    ("scheduler_lock", f"{_BASE}.services.lock", "scheduler_lock"),
    ("is_locked", f"{_BASE}.services.lock", "is_locked"),
    ("get_lock_holder", f"{_BASE}.services.lock", "get_lock_holder"),
    ("list_active_locks", f"{_BASE}.services.lock", "list_active_locks"),
    ("unlock_tracked_locks", f"{_BASE}.services.lock", "unlock_tracked_locks"),
    ("get_lock_provider", f"{_BASE}.conf", "get_lock_provider"),
    ("get_lock_executor", f"{_BASE}.conf", "get_lock_executor"),
    ("reset_lock_provider", f"{_BASE}.conf", "reset_lock_provider"),
)
_LAZY = {name: (mod, attr) for name, mod, attr in _SYMBOLS}


def __getattr__(name):
    from importlib import import_module

    if name in _SUBMODULES:
        return import_module(f".{name}", __name__)
    if name in _LAZY:
        mod_path, attr = _LAZY[name]
        mod = import_module(mod_path)
        return getattr(mod, attr)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
