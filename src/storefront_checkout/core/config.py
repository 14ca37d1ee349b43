"""
Runtime configuration, read from the environment (and a local .env if present).
"""

import os

from dotenv import load_dotenv

load_dotenv()

# Storefront REST API
STOREFRONT_API_URL = os.getenv("STOREFRONT_API_URL", "http://localhost:5000").rstrip("/")
API_TIMEOUT_SECONDS = float(os.getenv("STOREFRONT_API_TIMEOUT", "10"))
API_MAX_RETRIES = int(os.getenv("STOREFRONT_API_MAX_RETRIES", "0"))

# Local stand-in server
LOCAL_API_HOST = os.getenv("LOCAL_API_HOST", "127.0.0.1")
LOCAL_API_PORT = int(os.getenv("LOCAL_API_PORT", "5000"))
