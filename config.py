import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./invoices.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    API_RELOAD = bool(data.get("API_RELOAD", False))
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))

    # Invoice numbering: PREFIX-00001
    INVOICE_NUMBER_PREFIX = data.get("INVOICE_NUMBER_PREFIX", "INV")
    INVOICE_NUMBER_WIDTH = int(data.get("INVOICE_NUMBER_WIDTH", 5))

    # Rendering
    CURRENCY_SYMBOL = data.get("CURRENCY_SYMBOL", "$")
    COMPANY_NAME = data.get("COMPANY_NAME", "Invoice Service")
    COMPANY_ADDRESS = data.get("COMPANY_ADDRESS", "")

    # Delivery (SMTP disabled when SMTP_HOST is empty; mails are logged instead)
    SMTP_HOST = data.get("SMTP_HOST", "")
    SMTP_PORT = data.get("SMTP_PORT", 587)
    SMTP_USERNAME = data.get("SMTP_USERNAME", "")
    SMTP_PASSWORD = data.get("SMTP_PASSWORD", "")
    SMTP_USE_SSL = bool(data.get("SMTP_USE_SSL", False))
    SMTP_USE_TLS = bool(data.get("SMTP_USE_TLS", True))
    SMTP_TIMEOUT_SECONDS = data.get("SMTP_TIMEOUT_SECONDS", 30)
    # Extra wait on top of the socket timeout before a send is abandoned
    SMTP_TIMEOUT_GRACE_SECONDS = data.get("SMTP_TIMEOUT_GRACE_SECONDS", 1)
    MAIL_FROM = data.get("MAIL_FROM", "invoices@localhost")
    MAIL_FROM_NAME = data.get("MAIL_FROM_NAME", "Invoice Service")
