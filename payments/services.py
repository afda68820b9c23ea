from dataclasses import dataclass, field

from django.utils.translation import gettext as _

from orders.models import Order

from .exceptions import ConfigurationError, GatewayDisabled, OrderStateError, PaymentError, ProviderDeclined
from .outcomes import SUCCESS_STATUSES
from .store import TERMINAL
from .utils import (
    first_present,
    mask_secrets,
    order_description,
    order_product_image,
    order_product_name,
    with_query,
)

ORDER_LINK = "order_link"
MOBILE_MONEY = "mobile_money"

ORDER_LINK_ENDPOINT = "order"
MOBILE_MONEY_ENDPOINT = "cmmobile"

META_PREFIX = "_taramoney_"
# dikalo is the provider's own app; the rest are fallbacks in this order
LINK_FIELDS = (
    ("dikaloLink", "dikalo_link"),
    ("whatsappLink", "whatsapp_link"),
    ("telegramLink", "telegram_link"),
    ("smsLink", "sms_link"),
)


@dataclass
class InitiationResult:
    channel: str
    redirect_url: str
    notice: str = ""
    metadata: dict = field(default_factory=dict)


def channel_phone(channel_data) -> str:
    phone = (channel_data or {}).get("phone_number")
    return "" if phone is None else str(phone).strip()


def select_channel(config, channel_data) -> str:
    phone = channel_phone(channel_data)
    if config.enable_mobile_money and phone:
        return MOBILE_MONEY
    return ORDER_LINK


def pick_redirect(data: dict, fallback: str) -> str:
    return first_present(data, [api_key for api_key, _meta in LINK_FIELDS], default=fallback)


def _order_link_succeeded(data: dict) -> bool:
    return data.get("status") == "SUCCESS" or data.get("error") in SUCCESS_STATUSES


class PaymentInitiator:
    """Synchronous checkout path: one provider call, then provisional order state.

    The order is only written after the provider accepted the request, and the
    write never moves a terminal order back to ``pending``.
    """

    def __init__(self, config, client, store, logger, webhook_url: str):
        self.config = config
        self.client = client
        self.store = store
        self.logger = logger
        self.webhook_url = webhook_url

    def return_url(self, order) -> str:
        return with_query(self.config.return_url, order_id=order.pk)

    def initiate(self, order, channel_data=None) -> InitiationResult:
        if not self.config.enabled:
            self.logger.warning("Gateway disabled", {"order_id": order.pk})
            raise GatewayDisabled()
        if not self.config.is_configured:
            self.logger.error("Gateway not configured", {"order_id": order.pk})
            raise ConfigurationError()
        if order.payment_status in TERMINAL:
            raise OrderStateError()

        self.logger.info("Processing payment", {"order_id": order.pk})
        if select_channel(self.config, channel_data) == MOBILE_MONEY:
            return self._mobile_money(order, channel_phone(channel_data))
        return self._order_link(order)

    def _base_request(self, order, items) -> dict:
        return {
            "apiKey": self.config.api_key,
            "businessId": self.config.business_id,
            "productId": str(order.pk),
            "productName": order_product_name(order, items),
            "productPrice": int(order.total_amount),
            "webHookUrl": self.webhook_url,
        }

    def _call(self, endpoint, payload, failure_log):
        try:
            return self.client.post(endpoint, payload).body
        except PaymentError as e:
            self.logger.error(failure_log, {"error": e.message, "response": mask_secrets(getattr(e, "body", None))})
            raise

    def _order_link(self, order) -> InitiationResult:
        self.logger.info("Creating TaraMoney order link", {"order_id": order.pk})
        items = order.line_items()
        payload = {
            **self._base_request(order, items),
            "productDescription": order_description(items),
            "productPictureUrl": order_product_image(items),
            "returnUrl": self.return_url(order),
        }
        data = self._call(ORDER_LINK_ENDPOINT, payload, "Order link creation failed")

        if not _order_link_succeeded(data):
            self.logger.error("Order link creation failed", {"response": mask_secrets(data)})
            raise ProviderDeclined(data.get("message") or _("Failed to create payment link"), body=data)

        metadata = {META_PREFIX + meta_key: data.get(api_key) or "" for api_key, meta_key in LINK_FIELDS}
        metadata[META_PREFIX + "payment_type"] = ORDER_LINK
        self._record(order.pk, metadata, ORDER_LINK, _("Awaiting TaraMoney payment"))

        self.logger.info("Order link created successfully", {
            "order_id": order.pk,
            "links": [meta_key for api_key, meta_key in LINK_FIELDS if data.get(api_key)],
        })
        return InitiationResult(
            channel=ORDER_LINK,
            redirect_url=pick_redirect(data, self.return_url(order)),
            metadata=metadata,
        )

    def _mobile_money(self, order, phone_number) -> InitiationResult:
        self.logger.info("Creating TaraMoney mobile money payment", {
            "order_id": order.pk,
            "phone_number": phone_number,
        })
        payload = {**self._base_request(order, order.line_items()), "phoneNumber": phone_number}
        data = self._call(MOBILE_MONEY_ENDPOINT, payload, "Mobile money payment failed")

        if data.get("status") != "SUCCESS":
            self.logger.error("Mobile money payment failed", {"response": mask_secrets(data)})
            raise ProviderDeclined(data.get("message") or _("Failed to initiate mobile money payment"), body=data)

        ussd_code = data.get("ussdCode") or ""
        vendor = data.get("vendor") or ""
        metadata = {
            META_PREFIX + "ussd_code": ussd_code,
            META_PREFIX + "vendor": vendor,
            META_PREFIX + "phone_number": phone_number,
            META_PREFIX + "payment_type": MOBILE_MONEY,
            META_PREFIX + "payment_id": data.get("paymentId") or "",
        }
        note = _("Awaiting mobile money payment. Dial %(code)s on your %(vendor)s phone.") % {
            "code": ussd_code,
            "vendor": vendor,
        }
        self._record(order.pk, metadata, MOBILE_MONEY, note)

        self.logger.info("Mobile money payment initiated", {
            "order_id": order.pk,
            "ussd_code": ussd_code,
            "vendor": vendor,
        })
        return InitiationResult(
            channel=MOBILE_MONEY,
            redirect_url=self.return_url(order),
            notice=_("Please dial %(code)s on your mobile phone to complete payment.") % {"code": ussd_code},
            metadata=metadata,
        )

    def _record(self, order_id, metadata, channel, note):
        # re-read under the lock: a webhook may have landed while we were on the wire
        with self.store.locked(order_id) as order:
            order.payment_metadata = {**(order.payment_metadata or {}), **metadata}
            order.payment_method = channel
            if order.payment_status in TERMINAL:
                self.logger.warning("Order settled during initiation; status kept", {
                    "order_id": order_id,
                    "status": order.payment_status,
                })
                self.store.save(order)
                return
            self.store.set_status(order, Order.STATUS_PENDING, note)
