from django.apps import AppConfig


class PaymentsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "payments"
    registry = None

    def ready(self):
        from .registry import build_default_registry

        self.registry = build_default_registry()
