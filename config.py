import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv

load_dotenv()

@dataclass
class Settings:
    # Persistence
    data_file: str = os.getenv("LIBRARY_DATA_FILE", "library_data.json")

    # Background task intervals (seconds)
    fine_refresh_interval: float = float(os.getenv("FINE_REFRESH_INTERVAL", "60"))
    # 1440 fine refreshes, i.e. one day
    notification_interval: float = float(os.getenv("NOTIFICATION_INTERVAL", "86400"))

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
    log_file: Optional[str] = os.getenv("LOG_FILE")

    # Application
    app_name: str = os.getenv("APP_NAME", "Library Management System")
    app_version: str = os.getenv("APP_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "False").lower() in ("true", "1", "yes")

    # CLI output: plain | json | rich
    output_mode: str = os.getenv("LIB_CLI_OUTPUT", "plain").lower()


settings = Settings()
