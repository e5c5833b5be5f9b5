import os

from dotenv import load_dotenv

load_dotenv()

GIROCHECKOUT_MERCHANT_ID = os.getenv("GIROCHECKOUT_MERCHANT_ID")
GIROCHECKOUT_PROJECT_ID = os.getenv("GIROCHECKOUT_PROJECT_ID")
GIROCHECKOUT_PROJECT_PASSPHRASE = os.getenv("GIROCHECKOUT_PROJECT_PASSPHRASE")
GIROCHECKOUT_RETURN_URL = os.getenv("GIROCHECKOUT_RETURN_URL")
GIROCHECKOUT_NOTIFY_URL = os.getenv("GIROCHECKOUT_NOTIFY_URL")
GIROCHECKOUT_LANGUAGE = os.getenv("GIROCHECKOUT_LANGUAGE", "de")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
