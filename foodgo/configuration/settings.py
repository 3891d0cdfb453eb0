import logging
import os
from decimal import Decimal
from dotenv import load_dotenv

# Logging setup
logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")

# Load environment variables
load_dotenv(dotenv_path=".env", encoding="utf-8")

# Silence SQLAlchemy and APScheduler logs
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
logging.getLogger("apscheduler").setLevel(logging.WARNING)

class Configuration:
    def __init__(self):

        # Environment
        self.environment = os.getenv("ENVIRONMENT", "development").lower()

        # Database
        self.database_url = os.getenv("DATABASE_URL", "sqlite:///./foodgo.db")

        # Order lifecycle timings (seconds)
        self.cancel_window_seconds = int(os.getenv("CANCEL_WINDOW_SECONDS", 20))
        self.stage_interval_seconds = int(os.getenv("STAGE_INTERVAL_SECONDS", 10))
        self.lifecycle_sweep_seconds = int(os.getenv("LIFECYCLE_SWEEP_SECONDS", 5))

        # Pricing
        self.default_delivery_fee = Decimal(os.getenv("DEFAULT_DELIVERY_FEE", "2.000"))
        self.currency = os.getenv("CURRENCY", "BHD")
        self.currency_locale = os.getenv("CURRENCY_LOCALE", "en_US")

        # Notification webhook (n8n)
        self.order_webhook_url = os.getenv("N8N_ORDER_WEBHOOK_URL")
        self.webhook_timeout_seconds = float(os.getenv("WEBHOOK_TIMEOUT_SECONDS", 10))

        # CORS
        self.cors_origins = [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:8080").split(",")
            if origin.strip()
        ]

    def connect_to_database(self):
        logging.info(f"DATABASE >>> SELECTED ({self.environment}) -> : {self.database_url}")
        return self.database_url
