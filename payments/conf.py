from dataclasses import dataclass

from django.conf import settings

DEFAULT_BASE_URL = "https://www.dklo.co/api/tara"
DEFAULT_TIMEOUT = 30


def _flag(value, default=False) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class TaraMoneyConfig:
    """Resolved TaraMoney settings with the active (test or live) credential pair."""

    api_key: str = ""
    business_id: str = ""
    webhook_secret: str = ""
    test_mode: bool = False
    enabled: bool = True
    title: str = "TaraMoney"
    description: str = "Pay with WhatsApp, Telegram, SMS or Mobile Money"
    enable_order_links: bool = True
    enable_mobile_money: bool = True
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    site_url: str = ""
    return_url: str = ""
    webhook_url: str = ""
    require_signed_reference_match: bool = False

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.business_id)

    @classmethod
    def from_settings(cls) -> "TaraMoneyConfig":
        raw = getattr(settings, "TARAMONEY", None) or {}
        test_mode = _flag(raw.get("TEST_MODE"), default=True)
        if test_mode:
            api_key, business_id = raw.get("TEST_API_KEY", ""), raw.get("TEST_BUSINESS_ID", "")
        else:
            api_key, business_id = raw.get("API_KEY", ""), raw.get("BUSINESS_ID", "")
        return cls(
            api_key=(api_key or "").strip(),
            business_id=(business_id or "").strip(),
            webhook_secret=(raw.get("WEBHOOK_SECRET") or "").strip(),
            test_mode=test_mode,
            enabled=_flag(raw.get("ENABLED"), default=True),
            title=raw.get("TITLE") or cls.title,
            description=raw.get("DESCRIPTION") or cls.description,
            enable_order_links=_flag(raw.get("ENABLE_ORDER_LINKS"), default=True),
            enable_mobile_money=_flag(raw.get("ENABLE_MOBILE_MONEY"), default=True),
            base_url=raw.get("BASE_URL") or DEFAULT_BASE_URL,
            timeout=float(raw.get("TIMEOUT") or DEFAULT_TIMEOUT),
            site_url=(raw.get("SITE_URL") or "").rstrip("/"),
            return_url=raw.get("RETURN_URL") or "",
            webhook_url=raw.get("WEBHOOK_URL") or "",
            require_signed_reference_match=_flag(raw.get("REQUIRE_SIGNED_REFERENCE_MATCH")),
        )
