import json
import logging

from django.http import HttpResponse, HttpResponseBadRequest
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from .exceptions import AuthenticationError, MapError, PaymentError, UnknownProvider
from .signatures import SIGNATURE_HEADER

logger = logging.getLogger(__name__)


@csrf_exempt
@require_POST
def provider_webhook(request, provider_id, registry):
    try:
        gateway = registry.create(provider_id)
    except UnknownProvider:
        return HttpResponse(status=404)

    gateway.logger.info("Webhook received")
    raw_body = request.body
    try:
        payload = json.loads(raw_body.decode("utf-8"))
    except (UnicodeDecodeError, ValueError):
        gateway.logger.error("Invalid JSON in webhook payload")
        return HttpResponseBadRequest("Invalid JSON")
    if not isinstance(payload, dict):
        gateway.logger.error("Invalid JSON in webhook payload")
        return HttpResponseBadRequest("Invalid JSON")

    if not gateway.verify_signature(raw_body, request.headers.get(SIGNATURE_HEADER, "")):
        gateway.logger.error("Invalid webhook signature")
        return HttpResponse("Unauthorized", status=401)

    try:
        result = gateway.process_webhook(payload)
    except AuthenticationError as e:
        gateway.logger.error("Webhook rejected: " + e.message, {"businessId": payload.get("businessId")})
        return HttpResponse("Unauthorized", status=401)
    except MapError as e:
        gateway.logger.error("Webhook processing failed: " + e.message)
        return HttpResponseBadRequest(e.message)
    except PaymentError as e:
        gateway.logger.error("Webhook processing failed: " + e.message)
        return HttpResponse(status=500)
    except Exception:
        logger.exception("Webhook exception for provider=%s", provider_id)
        return HttpResponse(status=500)

    gateway.logger.info("Webhook processed successfully", {"result": result.value})
    return HttpResponse("ok")
