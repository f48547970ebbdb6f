"""Guest-facing settlement message and its delivery link."""

import re
from decimal import Decimal
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict

from staybill.core.template_config import templates
from staybill.models.enums import PaymentKeyPolicy, SettlementMode
from staybill.services.settlement import SettlementResult, round_currency, round_kwh

SUPPORTED_LOCALES = ("en", "pt_BR")
DEFAULT_COUNTRY_CODE = "55"
DEFAULT_MESSAGING_BASE_URL = "https://wa.me"

# Characters encodeURIComponent leaves alone besides the ones quote() always keeps
_URI_COMPONENT_SAFE = "!*'()"


class GuestContact(BaseModel):
    """Who the settlement message is addressed to."""

    model_config = ConfigDict(frozen=True)

    name: str
    phone: str | None = None
    payment_key: str | None = None


def _format_kwh(value: Decimal | None) -> str:
    return str(round_kwh(value if value is not None else Decimal("0")))


def _format_money(value: Decimal) -> str:
    return str(round_currency(value))


def render_guest_message(
    result: SettlementResult,
    contact: GuestContact,
    *,
    locale: str = "en",
    currency_symbol: str = "R$",
) -> str:
    """Render the settlement summary sent to a guest.

    The output depends only on the arguments, so copying the message and
    sending it through a messaging link always produce the same text.
    """
    if locale not in SUPPORTED_LOCALES:
        raise ValueError(f"Unsupported message locale '{locale}'")

    template = templates.get_template(f"messages/guest_settlement.{locale}.txt")
    return template.render(
        result=result,
        contact=contact,
        monitoring=result.mode == SettlementMode.MONITORING,
        currency_symbol=currency_symbol,
        kwh=_format_kwh,
        money=_format_money,
    )


def normalize_phone(phone: str, country_code: str = DEFAULT_COUNTRY_CODE) -> str:
    """Strip everything but digits and prepend the country code when missing."""
    digits = re.sub(r"\D", "", phone)
    if not digits:
        raise ValueError("Phone number has no digits")
    if digits.startswith(country_code):
        return digits
    return f"{country_code}{digits}"


def build_messaging_link(
    message: str,
    phone: str | None = None,
    *,
    base_url: str = DEFAULT_MESSAGING_BASE_URL,
    country_code: str = DEFAULT_COUNTRY_CODE,
) -> str:
    """Build a messaging deep link that opens a chat prefilled with the message."""
    text = quote(message, safe=_URI_COMPONENT_SAFE)
    target = normalize_phone(phone, country_code) if phone else ""
    return f"{base_url.rstrip('/')}/{target}?text={text}"


def resolve_payment_key(
    stay_key: str | None,
    profile_key: str | None,
    policy: PaymentKeyPolicy | str = PaymentKeyPolicy.STAY_FIRST,
) -> str | None:
    """Choose the payment key shown to a guest according to the configured policy."""
    policy = PaymentKeyPolicy(policy)
    stay_key = stay_key.strip() if stay_key and stay_key.strip() else None
    profile_key = profile_key.strip() if profile_key and profile_key.strip() else None

    if policy == PaymentKeyPolicy.STAY_ONLY:
        return stay_key
    if policy == PaymentKeyPolicy.PROFILE_ONLY:
        return profile_key
    return stay_key or profile_key
