from django.apps import apps
from django.urls import path

from . import views, webhook

app_name = "payments"

registry = apps.get_app_config("payments").registry

urlpatterns = [
    path("checkout", views.checkout_view, {"registry": registry}, name="checkout"),
    path("providers", views.provider_list_view, {"registry": registry}, name="providers"),
]

# one webhook route per provider, bound to its id
urlpatterns += [
    path(
        f"webhooks/{provider_id}",
        webhook.provider_webhook,
        {"registry": registry, "provider_id": provider_id},
        name=f"webhook_{provider_id}",
    )
    for provider_id in registry.ids()
]
