import logging

logger = logging.getLogger(__name__)

PAYMENT_ID_META = "_taramoney_payment_id"


def _order_reference(value):
    try:
        order_id = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    return order_id if order_id > 0 else None


def match_order(payload: dict, provider_payment_id: str, store, allow_reference=True):
    """Resolve a webhook payload to a local order id, or ``None``.

    The provider-assigned payment/collection id recorded at initiation
    (mobile money) wins over the ``productId`` we sent ourselves (order
    links). ``allow_reference=False`` disables the second path.
    """
    candidates = [provider_payment_id, payload.get("collectionId")]
    for candidate in candidates:
        if not candidate:
            continue
        order_id = store.find_order_by_meta(PAYMENT_ID_META, str(candidate))
        if order_id is not None:
            return order_id

    if "productId" in payload:
        if not allow_reference:
            logger.warning("productId fallback disabled without webhook signing; payload ignored")
            return None
        order_id = _order_reference(payload.get("productId"))
        if order_id is not None and store.exists(order_id):
            return order_id
    return None
