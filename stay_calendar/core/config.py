import os
from dotenv import load_dotenv
from pydantic import BaseModel

# Load variables from .env
load_dotenv()


class Settings(BaseModel):
    telegram_bot_token: str = ""

    # Availability API (external collaborator)
    availability_api_base_url: str = "http://localhost:3001/api"
    availability_api_token: str = ""
    availability_api_timeout_seconds: int = 10

    # Availability store behavior
    availability_fetch_retries: int = 3
    availability_retry_delay_seconds: float = 1.0

    # Pricing
    default_service_fee_rate: float = 0.12
    currency: str = "UGX"
    currency_decimal_places: int = 0

    # Calendar days are resolved in the property's local context
    property_timezone: str = "Africa/Kampala"

    # Logging settings
    log_format: str = "console"  # Options: "console", "json"


settings = Settings(
    telegram_bot_token=os.environ.get("TELEGRAM_BOT_TOKEN", ""),
    availability_api_base_url=os.environ.get(
        "AVAILABILITY_API_BASE_URL", "http://localhost:3001/api"
    ),
    availability_api_token=os.environ.get("AVAILABILITY_API_TOKEN", ""),
    availability_api_timeout_seconds=int(
        os.environ.get("AVAILABILITY_API_TIMEOUT_SECONDS", "10")
    ),
    availability_fetch_retries=int(os.environ.get("AVAILABILITY_FETCH_RETRIES", "3")),
    availability_retry_delay_seconds=float(
        os.environ.get("AVAILABILITY_RETRY_DELAY_SECONDS", "1.0")
    ),
    default_service_fee_rate=float(os.environ.get("DEFAULT_SERVICE_FEE_RATE", "0.12")),
    currency=os.environ.get("CURRENCY", "UGX"),
    currency_decimal_places=int(os.environ.get("CURRENCY_DECIMAL_PLACES", "0")),
    property_timezone=os.environ.get("PROPERTY_TIMEZONE", "Africa/Kampala"),
    log_format=os.environ.get("LOG_FORMAT", "console"),
)
