"""
Centralized configuration for Splitt with environment
"""

import os
from decimal import Decimal

# Money defaults
CURRENCY_DEFAULT = os.getenv("SPLITT_DEFAULT_CURRENCY", "USD")
DEFAULT_TAX_RATE_PERCENT = Decimal(os.getenv("SPLITT_DEFAULT_TAX_RATE", "8.25"))
DEFAULT_TIP_PERCENT = Decimal(os.getenv("SPLITT_DEFAULT_TIP_PERCENT", "20"))

# Persistence
STATE_FILE = os.getenv("SPLITT_STATE_FILE", "splitt_state.json")

# Receipt import service
RECEIPT_ENDPOINT = os.getenv("SPLITT_RECEIPT_ENDPOINT", "http://localhost:8000/api/receipts/parse")
RECEIPT_TIMEOUT = float(os.getenv("SPLITT_RECEIPT_TIMEOUT", "30"))
MAX_IMAGE_SIZE_BYTES = int(os.getenv("SPLITT_MAX_IMAGE_SIZE_BYTES", str(50 * 1024 * 1024)))
MAX_UPLOAD_DIMENSION = int(os.getenv("SPLITT_MAX_UPLOAD_DIMENSION", "2000"))

# Logging
LOG_LEVEL = os.getenv("SPLITT_LOG_LEVEL", "WARNING")
