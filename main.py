import argparse
import json
import logging
import sys

import config
from payment_gateway import Gateway, InvalidRequestError

logging.basicConfig(level=config.LOG_LEVEL.upper(), format="%(asctime)s %(levelname)s %(message)s")
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Build a signed GiroCheckout credit card request and print its fields."
    )
    parser.add_argument("action", choices=["authorize", "purchase"])
    parser.add_argument("--transaction-id", required=True)
    parser.add_argument("--amount", required=True, help="Decimal amount, e.g. 1.23")
    parser.add_argument("--currency", default="EUR")
    parser.add_argument("--description", required=True)
    parser.add_argument("--language", help="Locale such as en, en-GB or de_DE")
    parser.add_argument("--card-reference", help="Stored card (pkn) to charge")
    parser.add_argument("--create-card", action="store_true")
    parser.add_argument("--mobile", action="store_true")
    parser.add_argument(
        "--no-payment-page",
        dest="payment_page",
        action="store_false",
        help="Charge a stored card without showing the payment page",
    )
    return parser


def request_params(args: argparse.Namespace) -> dict:
    params = {
        "transaction_id": args.transaction_id,
        "amount": args.amount,
        "currency": args.currency,
        "description": args.description,
        "payment_page": args.payment_page,
        "create_card": args.create_card,
        "mobile": args.mobile,
    }
    # unset values fall back to the gateway defaults
    if args.language:
        params["language"] = args.language
    if args.card_reference:
        params["card_reference"] = args.card_reference
    return params


def main(argv=None, gateway: Gateway | None = None) -> int:
    args = build_parser().parse_args(argv)
    gateway = gateway or Gateway.from_config()

    try:
        request = getattr(gateway, args.action)(request_params(args))
        data = request.get_data()
    except InvalidRequestError as e:
        logger.error("Invalid %s request: %s", args.action, e)
        return 2

    logger.info("Signed %s request for %s", args.action, gateway.get_endpoint())
    print(json.dumps(data, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
