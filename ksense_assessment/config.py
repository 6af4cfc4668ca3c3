import os

from dotenv import load_dotenv

load_dotenv()

BASE_URL = os.getenv("KSENSE_BASE_URL", "https://assessment.ksensetech.com/api").rstrip("/")
API_KEY = os.getenv("KSENSE_API_KEY", "")
TIMEOUT = float(os.getenv("KSENSE_TIMEOUT", "30"))

PAGE_SIZE = 20  # upstream refuses larger pages
DISPLAY_PAGE_SIZE = 10
DEFAULT_TARGET = 50

PAGE_RETRIES = 3
BULK_PAGE_RETRIES = 5


def headers():
    return {
        "x-api-key": API_KEY,
        "Content-Type": "application/json",
    }
