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
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_SENTRY = data.get("ENABLE_SENTRY", 0)
    DSN_SENTRY = data.get("DSN_SENTRY", "")
    SENTRY_ENVIRONMENT = data.get("SENTRY_ENVIRONMENT", "dev")

    # Remote spreadsheet store
    SPREADSHEET_ID = data.get("SPREADSHEET_ID", "")
    SHEETS_ACCESS_TOKEN = data.get("SHEETS_ACCESS_TOKEN", "")
    SHEETS_API_BASE_URL = data.get("SHEETS_API_BASE_URL", "https://sheets.googleapis.com/v4/spreadsheets")
    SHEETS_REQUEST_TIMEOUT = float(data.get("SHEETS_REQUEST_TIMEOUT", 30.0))  # seconds
    SHEETS_MIN_REQUEST_INTERVAL = float(data.get("SHEETS_MIN_REQUEST_INTERVAL", 0.1))  # seconds

    # Retry / backoff
    RETRY_MAX_RETRIES = int(data.get("RETRY_MAX_RETRIES", 3))
    RETRY_BASE_DELAY = float(data.get("RETRY_BASE_DELAY", 1.0))  # seconds
    RETRY_MAX_DELAY = float(data.get("RETRY_MAX_DELAY", 8.0))  # seconds
    RETRY_BACKOFF_MULTIPLIER = float(data.get("RETRY_BACKOFF_MULTIPLIER", 2.0))

    # In-process cache TTLs (seconds)
    CACHE_TTL_SETTINGS = data.get("CACHE_TTL_SETTINGS", 30 * 60)
    CACHE_TTL_TEMPLATES = data.get("CACHE_TTL_TEMPLATES", 15 * 60)
    CACHE_TTL_INVOICES = data.get("CACHE_TTL_INVOICES", 5 * 60)
    CACHE_TTL_PAYMENTS = data.get("CACHE_TTL_PAYMENTS", 5 * 60)
    CACHE_TTL_DEFAULT = data.get("CACHE_TTL_DEFAULT", 2 * 60)
    CACHE_MAX_SIZE = int(data.get("CACHE_MAX_SIZE", 100))

    # Invoicing
    INVOICE_PREFIX = data.get("INVOICE_PREFIX", "INV")
    INVOICE_DUE_DAYS = int(data.get("INVOICE_DUE_DAYS", 30))

    # Recurring invoice generation
    RECURRING_ENABLED = bool(data.get("RECURRING_ENABLED", True))
    RECURRING_CHECK_INTERVAL_SECONDS = data.get("RECURRING_CHECK_INTERVAL_SECONDS", 3600)  # Hourly
    CRON_SECRET = data.get("CRON_SECRET", "")
