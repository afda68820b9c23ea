from abc import ABC, abstractmethod
from dataclasses import replace

from django.urls import reverse

from .conf import TaraMoneyConfig
from .exceptions import MatchError
from .integrations.client import ProviderClient
from .log import GatewayLogger
from .matching import match_order
from .outcomes import map_outcome
from .reconciliation import ReconciliationEngine
from .services import MOBILE_MONEY, ORDER_LINK, PaymentInitiator
from .signatures import verify_signature
from .store import DjangoOrderStore
from .utils import mask_secrets


class PaymentGateway(ABC):
    """What a payment provider has to offer the checkout and webhook views."""

    id = None

    @abstractmethod
    def describe(self) -> dict: ...

    @abstractmethod
    def initiate(self, order, channel_data=None): ...

    @abstractmethod
    def verify_signature(self, raw_body: bytes, signature_header: str) -> bool: ...

    @abstractmethod
    def process_webhook(self, payload: dict): ...

    @abstractmethod
    def webhook_url(self) -> str: ...


class TaraMoneyGateway(PaymentGateway):
    id = "taramoney"
    supports = ("products",)

    def __init__(self, config: TaraMoneyConfig = None, store=None, client=None, logger=None):
        self.config = config or TaraMoneyConfig.from_settings()
        self.store = store or DjangoOrderStore()
        self.logger = logger or GatewayLogger(self.id)
        self.client = client or ProviderClient(
            self.config.base_url,
            logger=self.logger,
            timeout=self.config.timeout,
        )
        self.engine = ReconciliationEngine(self.store, self.logger, label="TaraMoney")

    def webhook_url(self) -> str:
        if self.config.webhook_url:
            return self.config.webhook_url
        return self.config.site_url + reverse(f"payments:webhook_{self.id}")

    def describe(self) -> dict:
        channels = []
        if self.config.enable_order_links:
            channels.append(ORDER_LINK)
        if self.config.enable_mobile_money:
            channels.append(MOBILE_MONEY)
        return {
            "id": self.id,
            "title": self.config.title,
            "description": self.config.description,
            "enabled": self.config.enabled,
            "test_mode": self.config.test_mode,
            "configured": self.config.is_configured,
            "channels": channels,
            "supports": list(self.supports),
            "webhook_url": self.webhook_url(),
        }

    def initiator(self) -> PaymentInitiator:
        return PaymentInitiator(self.config, self.client, self.store, self.logger, self.webhook_url())

    def initiate(self, order, channel_data=None):
        return self.initiator().initiate(order, channel_data)

    def verify_signature(self, raw_body, signature_header) -> bool:
        return verify_signature(raw_body, signature_header, self.config.webhook_secret)

    def process_webhook(self, payload: dict):
        self.logger.info("Processing webhook", {"data": mask_secrets(payload)})

        outcome = map_outcome(payload.get("businessId"), self.config.business_id, payload)

        allow_reference = bool(self.config.webhook_secret) or not self.config.require_signed_reference_match
        order_id = match_order(payload, outcome.provider_payment_id, self.store, allow_reference=allow_reference)
        if order_id is None:
            self.logger.error("Order not found for webhook", {"payload": mask_secrets(payload)})
            raise MatchError(f"Order not found for payment ID: {outcome.provider_payment_id}")

        return self.engine.apply(order_id, replace(outcome, order_id=order_id))
