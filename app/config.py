import os

# Retrieve enviroment variables from .env file

DATABASE_USER = os.environ.get("DATABASE_USER")
DATABASE_PASS = os.environ.get("DATABASE_PASS")
DATABASE_HOST = os.environ.get("DATABASE_HOST")
DATABASE_NAME = os.environ.get("DATABASE_NAME")

# Full URL takes precedence over the MySQL parts above (e.g. sqlite:///sslg.db)
DATABASE_URL = os.environ.get("DATABASE_URL")

USE_ASYNC_ENGINE = bool(int(os.environ.get("USE_ASYNC_ENGINE", False)))

SECRET_KEY: str = os.environ.get("SECRET_KEY", "sslg-dev-secret")

# Shared PINs for the admin and facilitator gates. These are UI gates only.
ADMIN_PIN = os.environ.get("ADMIN_PIN", "LHS2025")
FACILITATOR_PIN = os.environ.get("FACILITATOR_PIN", "LHSFAC2025")

TIMEZONE = os.environ.get("TIMEZONE", "Asia/Manila")

LOG_PATH = os.environ.get("LOG_PATH")
LOG_LEVEL = os.environ.get("LOG_LEVEL")

SECTION_GRADE_LEVELS = [7, 8, 9, 10, 11, 12]
CANDIDATE_GRADE_LEVELS = [8, 9, 10, 11, 12]

DEFAULT_PARTYLIST_COLOR = "#3B82F6"

ORIGINS: list = os.environ.get("ORIGINS", "*").split(",")
