import json

from django.http import HttpResponseBadRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from orders.models import Order

from .exceptions import PaymentError, UnknownProvider


def _json_body(request):
    try:
        return json.loads(request.body.decode("utf-8"))
    except (UnicodeDecodeError, ValueError):
        return None


@require_GET
def provider_list_view(request, registry):
    providers = [registry.create(provider_id).describe() for provider_id in registry.ids()]
    return JsonResponse({"providers": [p for p in providers if p["enabled"]]})


@csrf_exempt
@require_POST
def checkout_view(request, registry):
    """Start a payment for an existing order.

    Body: ``{"order_id": ..., "selected_channel": "<provider id>",
    "channel_data": {"phone_number": ...}}``. On failure the order is left as
    it was so the customer can simply retry.
    """
    body = _json_body(request)
    if not isinstance(body, dict):
        return HttpResponseBadRequest("Invalid JSON body")
    missing = [k for k in ("order_id", "selected_channel") if not body.get(k)]
    if missing:
        return HttpResponseBadRequest(f"Missing fields: {', '.join(missing)}")
    channel_data = body.get("channel_data") or {}
    if not isinstance(channel_data, dict):
        return HttpResponseBadRequest("channel_data must be an object")

    try:
        gateway = registry.create(body["selected_channel"])
    except UnknownProvider as e:
        return JsonResponse({"ok": False, "error": e.message}, status=404)
    try:
        order = Order.objects.get(pk=body["order_id"])
    except (Order.DoesNotExist, ValueError, TypeError):
        return JsonResponse({"ok": False, "error": "Invalid order"}, status=404)

    try:
        result = gateway.initiate(order, channel_data)
    except PaymentError as e:
        return JsonResponse({"ok": False, "error": e.message}, status=400)

    return JsonResponse({
        "ok": True,
        "result": "success",
        "channel": result.channel,
        "redirect": result.redirect_url,
        "notice": result.notice,
    })
