"""GiroCheckout credit card requests.

``AuthorizeRequest`` collects the payment parameters, validates them and
produces the ordered field set that is POSTed to GiroCheckout, signed with the
``hash`` field described in :mod:`girocheckout_utils`.  ``Gateway`` keeps the
merchant credentials and hands out initialized requests.

Nothing here talks to the network; callers send the fields themselves.
"""

from __future__ import annotations

import logging
import re

import config
from girocheckout_utils import (
    InvalidRequestError,
    amount_to_minor_units,
    normalize_language,
    request_hash,
    truncate_purpose,
)

logger = logging.getLogger(__name__)

TRANSACTION_START_URL = "https://payment.girosolution.de/girocheckout/api/v2/transaction/start"

PAYMENT_TYPE_CREDIT_CARD = "CreditCard"
SUPPORTED_PAYMENT_TYPES = (PAYMENT_TYPE_CREDIT_CARD,)

PKN_CREATE = "create"


def _is_positive_integer(value) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value > 0
    if isinstance(value, str) and re.fullmatch(r"[0-9]+", value.strip()):
        return int(value) > 0
    return False


class AuthorizeRequest:
    """Authorize a credit card payment; capture happens later."""

    transaction_type = "AUTH"

    default_parameters = {
        "payment_type": PAYMENT_TYPE_CREDIT_CARD,
        "payment_page": True,
        "create_card": False,
        "mobile": False,
    }

    required_parameters = (
        "merchant_id",
        "project_id",
        "transaction_id",
        "amount",
        "currency",
        "description",
    )

    def __init__(self, params: dict | None = None):
        self.parameters: dict = {}
        self.initialize(params)

    def initialize(self, params: dict | None = None) -> "AuthorizeRequest":
        """Reset all parameters, then apply ``params`` through their setters."""
        self.parameters = dict(self.default_parameters)
        for key, value in (params or {}).items():
            setter = getattr(self, f"set_{key}", None)
            if setter is None:
                logger.debug("Ignoring unknown parameter %s", key)
                continue
            setter(value)
        return self

    # ---------------------------
    # Parameters
    # ---------------------------

    def _get_integer_parameter(self, name: str, validate: bool):
        value = self.parameters.get(name)
        if validate and not _is_positive_integer(value):
            raise InvalidRequestError(f"The {name} parameter must be a positive integer")
        return value

    def get_merchant_id(self, validate: bool = False):
        return self._get_integer_parameter("merchant_id", validate)

    def set_merchant_id(self, value):
        self.parameters["merchant_id"] = value
        return self

    def get_project_id(self, validate: bool = False):
        return self._get_integer_parameter("project_id", validate)

    def set_project_id(self, value):
        self.parameters["project_id"] = value
        return self

    def get_project_passphrase(self):
        return self.parameters.get("project_passphrase")

    def set_project_passphrase(self, value):
        self.parameters["project_passphrase"] = value
        return self

    def get_transaction_id(self):
        return self.parameters.get("transaction_id")

    def set_transaction_id(self, value):
        self.parameters["transaction_id"] = value
        return self

    def get_amount(self):
        return self.parameters.get("amount")

    def set_amount(self, value):
        self.parameters["amount"] = value
        return self

    def get_currency(self):
        currency = self.parameters.get("currency")
        return str(currency).upper() if currency else currency

    def set_currency(self, value):
        self.parameters["currency"] = value
        return self

    def get_description(self):
        return self.parameters.get("description")

    def set_description(self, value):
        self.parameters["description"] = value
        return self

    def get_language(self):
        return self.parameters.get("language")

    def set_language(self, value):
        self.parameters["language"] = value
        return self

    def get_mobile(self) -> bool:
        return bool(self.parameters.get("mobile"))

    def set_mobile(self, value):
        self.parameters["mobile"] = bool(value)
        return self

    def get_payment_page(self) -> bool:
        return bool(self.parameters.get("payment_page"))

    def set_payment_page(self, value):
        self.parameters["payment_page"] = bool(value)
        return self

    def get_recurring(self):
        return self.parameters.get("recurring")

    def set_recurring(self, value):
        self.parameters["recurring"] = None if value is None else bool(value)
        return self

    def get_card_reference(self):
        return self.parameters.get("card_reference")

    def set_card_reference(self, value):
        self.parameters["card_reference"] = value
        return self

    def get_create_card(self) -> bool:
        return bool(self.parameters.get("create_card"))

    def set_create_card(self, value):
        self.parameters["create_card"] = bool(value)
        return self

    def get_return_url(self):
        return self.parameters.get("return_url")

    def set_return_url(self, value):
        self.parameters["return_url"] = value
        return self

    def get_notify_url(self):
        return self.parameters.get("notify_url")

    def set_notify_url(self, value):
        self.parameters["notify_url"] = value
        return self

    def get_payment_type(self):
        return self.parameters.get("payment_type")

    def set_payment_type(self, value):
        if value not in SUPPORTED_PAYMENT_TYPES:
            raise InvalidRequestError(f"Unsupported payment type: {value!r}")
        self.parameters["payment_type"] = value
        return self

    def get_pkn(self):
        """The card reference wins over a request to create a new one."""
        if self.get_card_reference():
            return self.get_card_reference()
        if self.get_create_card():
            return PKN_CREATE
        return None

    # ---------------------------
    # Request data
    # ---------------------------

    def validate(self, *names: str) -> None:
        for name in names:
            value = self.parameters.get(name)
            if value is None or value == "":
                raise InvalidRequestError(f"The {name} parameter is required")

    def get_data(self) -> dict[str, str]:
        self.validate(*self.required_parameters)

        merchant_id = self.get_merchant_id(True)
        project_id = self.get_project_id(True)

        currency = self.get_currency()
        if not re.fullmatch(r"[A-Z]{3}", currency):
            raise InvalidRequestError(f"Invalid currency code: {currency!r}")

        payment_page = self.get_payment_page()
        if not payment_page and not self.get_card_reference():
            raise InvalidRequestError(
                "Missing cardReference for a payment without a payment page."
            )

        data = {
            "merchantId": str(merchant_id).strip(),
            "projectId": str(project_id).strip(),
            "merchantTxId": str(self.get_transaction_id()),
            "amount": str(amount_to_minor_units(self.get_amount(), currency)),
            "currency": currency,
            "purpose": truncate_purpose(self.get_description()),
            "type": self.transaction_type,
        }

        if payment_page:
            data["locale"] = normalize_language(self.get_language())
            data["mobile"] = "1" if self.get_mobile() else "0"

        pkn = self.get_pkn()
        if pkn:
            data["pkn"] = str(pkn)

        recurring = self.get_recurring()
        if recurring is not None:
            data["recurring"] = "1" if recurring else "0"

        if payment_page:
            data["urlRedirect"] = self.get_return_url() or ""

        if self.get_notify_url():
            data["urlNotify"] = self.get_notify_url()

        data["hash"] = self.request_hash(data)

        logger.debug(
            "Built %s request for transaction %s with fields %s",
            self.transaction_type,
            data["merchantTxId"],
            ", ".join(data),
        )
        return data

    def request_hash(self, fields: dict) -> str:
        return request_hash(fields, self.get_project_passphrase())


class PurchaseRequest(AuthorizeRequest):
    """Authorize and capture in a single step."""

    transaction_type = "SALE"


class Gateway:
    """Factory for GiroCheckout credit card requests.

    Parameters given to the gateway act as defaults for every request it
    creates; parameters passed to :meth:`authorize` or :meth:`purchase` take
    precedence.
    """

    def __init__(self, **parameters):
        self.parameters = {k: v for k, v in parameters.items() if v is not None}

    @classmethod
    def from_config(cls) -> "Gateway":
        return cls(
            merchant_id=config.GIROCHECKOUT_MERCHANT_ID,
            project_id=config.GIROCHECKOUT_PROJECT_ID,
            project_passphrase=config.GIROCHECKOUT_PROJECT_PASSPHRASE,
            language=config.GIROCHECKOUT_LANGUAGE,
            return_url=config.GIROCHECKOUT_RETURN_URL,
            notify_url=config.GIROCHECKOUT_NOTIFY_URL,
        )

    def get_endpoint(self) -> str:
        return TRANSACTION_START_URL

    def create_request(self, request_class, params: dict | None = None):
        merged = {**self.parameters, **(params or {})}
        return request_class(merged)

    def authorize(self, params: dict | None = None) -> AuthorizeRequest:
        return self.create_request(AuthorizeRequest, params)

    def purchase(self, params: dict | None = None) -> PurchaseRequest:
        return self.create_request(PurchaseRequest, params)


__all__ = [
    "AuthorizeRequest",
    "Gateway",
    "InvalidRequestError",
    "PurchaseRequest",
]
