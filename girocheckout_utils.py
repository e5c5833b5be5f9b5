"""Helpers for signing and normalizing GiroCheckout request fields.

GiroCheckout protects every request with a ``hash`` field:

1. Take the values of all other fields in the order they are sent.
2. Concatenate them without any separator.
3. Compute an HMAC-MD5 of that string keyed with the project passphrase.
4. Send the lowercase hex digest as ``hash``.

Notifications sent back by GiroCheckout are signed the same way and carry the
digest in ``gcHash``.
"""

from __future__ import annotations

import hashlib
import hmac
import re
from decimal import Decimal, InvalidOperation


PURPOSE_MAX_LENGTH = 27
DEFAULT_LANGUAGE = "de"

CURRENCY_DECIMALS = {
    "BHD": 3,
    "JPY": 0,
    "KWD": 3,
    "OMR": 3,
}

NOTIFICATION_FIELDS = (
    "gcReference",
    "gcMerchantTxId",
    "gcBackendTxId",
    "gcAmount",
    "gcCurrency",
    "gcResultPayment",
)


class InvalidRequestError(ValueError):
    """Raised when request parameters cannot be turned into a valid request."""


def _stringify(value) -> str:
    if value is True:
        return "1"
    if value is False:
        return ""
    return str(value)


def request_hash(fields: dict, passphrase: str | None) -> str:
    """Return the GiroCheckout ``hash`` for ``fields``.

    Parameters
    ----------
    fields:
        The fields in transmission order. An existing ``hash`` key and
        ``None`` values are ignored.
    passphrase:
        The project passphrase. ``None`` is treated as an empty key.
    """

    raw = "".join(
        _stringify(v) for k, v in fields.items() if k != "hash" and v is not None
    )
    key = (passphrase or "").encode("utf-8")
    return hmac.new(key, raw.encode("utf-8"), hashlib.md5).hexdigest()


def normalize_language(locale: str | None, default: str = DEFAULT_LANGUAGE) -> str:
    """Reduce ``en``, ``EN``, ``en-GB`` or ``en_GB`` to ``en``."""
    if not locale:
        return default
    language = re.split(r"[-_]", str(locale).strip(), maxsplit=1)[0].lower()
    if not re.fullmatch(r"[a-z]{2}", language):
        raise InvalidRequestError(f"Invalid language: {locale!r}")
    return language


def currency_decimals(currency: str) -> int:
    return CURRENCY_DECIMALS.get(currency.upper(), 2)


def amount_to_minor_units(amount, currency: str) -> int:
    """Convert a decimal amount such as ``"1.23"`` to minor units (``123``)."""
    try:
        value = Decimal(str(amount).strip())
    except InvalidOperation:
        raise InvalidRequestError(f"Amount must be a decimal value: {amount!r}")
    if not value.is_finite():
        raise InvalidRequestError(f"Amount must be a decimal value: {amount!r}")
    if value < 0:
        raise InvalidRequestError("A negative amount is not allowed.")

    decimals = currency_decimals(currency)
    minor = value.scaleb(decimals)
    if minor != minor.to_integral_value():
        raise InvalidRequestError(
            f"Amount precision is too high for currency {currency.upper()}."
        )
    return int(minor)


def truncate_purpose(text: str | None) -> str:
    return (text or "")[:PURPOSE_MAX_LENGTH]


def verify_notification(params: dict, passphrase: str | None) -> bool:
    """Check the ``gcHash`` of a notification or redirect from GiroCheckout."""
    received = params.get("gcHash")
    if not received:
        return False
    signed = {name: params.get(name) for name in NOTIFICATION_FIELDS}
    expected = request_hash(signed, passphrase)
    return hmac.compare_digest(expected.encode("utf-8"), str(received).lower().encode("utf-8"))


__all__ = [
    "InvalidRequestError",
    "PURPOSE_MAX_LENGTH",
    "amount_to_minor_units",
    "currency_decimals",
    "normalize_language",
    "request_hash",
    "truncate_purpose",
    "verify_notification",
]
