from dataclasses import dataclass, field

from .exceptions import MissingField, TenantMismatch

SUCCEEDED = "succeeded"
FAILED = "failed"

# TaraMoney spells its success code more than one way
SUCCESS_STATUSES = {"SUCCESS", "SUCCESSFUL", "API_ORDER_SUCCESSFUL", "API_ORDER_SUCESSFULL"}


@dataclass(frozen=True)
class CanonicalOutcome:
    outcome: str
    status: str = ""
    transaction_ref: str = ""
    provider_payment_id: str = ""
    order_id: object = None
    raw_payload: dict = field(default_factory=dict, compare=False)

    @property
    def succeeded(self) -> bool:
        return self.outcome == SUCCEEDED


def _text(value) -> str:
    return "" if value is None else str(value).strip()


def map_outcome(business_id_received, business_id_expected, payload: dict) -> CanonicalOutcome:
    if not _text(business_id_received):
        raise MissingField("businessId")
    if _text(business_id_received) != _text(business_id_expected):
        raise TenantMismatch()

    status = _text(payload.get("status"))
    if not status:
        raise MissingField("status")

    payment_id = _text(payload.get("paymentId"))
    return CanonicalOutcome(
        outcome=SUCCEEDED if status.upper() in SUCCESS_STATUSES else FAILED,
        status=status,
        transaction_ref=_text(payload.get("transactionCode")) or payment_id,
        provider_payment_id=payment_id,
        raw_payload=payload,
    )
