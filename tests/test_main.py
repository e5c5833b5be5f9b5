import json
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))
import main
from payment_gateway import Gateway


def _gateway():
    return Gateway(merchant_id="12345678", project_id="654321", project_passphrase="secret")


def test_main_prints_signed_fields(capsys):
    code = main.main(
        [
            "purchase",
            "--transaction-id", "trans-id-123",
            "--amount", "1.23",
            "--description", "A lovely test purchase",
            "--language", "en_GB",
            "--create-card",
        ],
        gateway=_gateway(),
    )

    assert code == 0
    data = json.loads(capsys.readouterr().out)
    assert data["type"] == "SALE"
    assert data["amount"] == "123"
    assert data["currency"] == "EUR"
    assert data["locale"] == "en"
    assert data["pkn"] == "create"
    assert len(data["hash"]) == 32


def test_main_invalid_request(capsys):
    code = main.main(
        [
            "authorize",
            "--transaction-id", "trans-id-123",
            "--amount", "1.23",
            "--description", "No page, no card",
            "--no-payment-page",
        ],
        gateway=_gateway(),
    )

    assert code == 2
    assert capsys.readouterr().out == ""


def test_main_card_reference_without_payment_page(capsys):
    code = main.main(
        [
            "authorize",
            "--transaction-id", "trans-id-123",
            "--amount", "1.23",
            "--description", "Stored card",
            "--no-payment-page",
            "--card-reference", "1234567812345678",
        ],
        gateway=_gateway(),
    )

    assert code == 0
    data = json.loads(capsys.readouterr().out)
    assert data["pkn"] == "1234567812345678"
    assert "locale" not in data


def test_lowercase_log_level(monkeypatch):
    import importlib

    import config

    calls = []
    monkeypatch.setattr(config, "LOG_LEVEL", "info")
    monkeypatch.setattr(main.logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
    importlib.reload(main)

    assert calls[0]["level"] == "INFO"
